# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tests for product classification and release label extraction."""
from __future__ import annotations

import pytest

from wupolicy.detect.version import (
    ProductFamily,
    VersionInfo,
    classify_product,
    extract_release_label,
)


@pytest.mark.unit
class TestClassifyProduct:
    def test_build_below_22000_is_windows_10(self):
        assert classify_product(10, 21999) is ProductFamily.WINDOWS_10

    def test_build_22000_is_windows_11(self):
        assert classify_product(10, 22000) is ProductFamily.WINDOWS_11

    def test_recent_build_is_windows_11(self):
        assert classify_product(10, 26100) is ProductFamily.WINDOWS_11

    @pytest.mark.parametrize("major", [6, 11, 0])
    def test_other_major_is_unknown(self, major):
        assert classify_product(major, 22631) is ProductFamily.UNKNOWN

    def test_missing_values_are_unknown(self):
        assert classify_product(None, None) is ProductFamily.UNKNOWN
        assert classify_product(10, None) is ProductFamily.UNKNOWN


@pytest.mark.unit
class TestExtractReleaseLabel:
    def test_exact_accepts_bare_label(self):
        assert extract_release_label("23H2", exact=True) == "23H2"

    def test_exact_strips_whitespace(self):
        assert extract_release_label("  22H2\r\n", exact=True) == "22H2"

    def test_exact_rejects_surrounding_text(self):
        assert extract_release_label("Version 23H2", exact=True) is None

    def test_exact_rejects_old_release_id(self):
        assert extract_release_label("2009", exact=True) is None

    def test_search_finds_label_in_report(self):
        report = "OS Name: Microsoft Windows 11 Pro\nOS Version: 10.0.22631 (23H2) Build 22631\n"
        assert extract_release_label(report) == "23H2"

    def test_search_returns_first_label(self):
        assert extract_release_label("upgrade 22H2 -> 23H2") == "22H2"

    def test_lowercase_h_is_not_a_label(self):
        assert extract_release_label("23h2") is None

    def test_bytes_are_decoded(self):
        assert extract_release_label(b"release 24H2 ready") == "24H2"

    @pytest.mark.parametrize("value", [None, "", 42, "no label here"])
    def test_nothing_to_extract(self, value):
        assert extract_release_label(value) is None


@pytest.mark.unit
def test_version_info_product_name_and_dict():
    info = VersionInfo(ProductFamily.WINDOWS_11, "23H2", label_source="structured", major=10, build=22631)
    assert info.product_name == "Windows 11"
    d = info.to_dict()
    assert d["product"] == "Windows 11"
    assert d["release_label"] == "23H2"
    assert d["build"] == 22631

