# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tests for the tiered version detection fallback chain."""
from __future__ import annotations

import pytest

from fakes.fake_logger import FakeLogger
from wupolicy.detect.detector import VersionDetector
from wupolicy.detect.probes import parse_version_string
from wupolicy.detect.version import ProductFamily
from wupolicy.core.exceptions import ProbeError


def _boom():
    raise OSError("probe unavailable")


def _detector(**kw):
    kw.setdefault("version_probe", lambda: (10, 22631))
    kw.setdefault("structured_probe", lambda: "23H2")
    kw.setdefault("text_probe", lambda: "")
    return VersionDetector(FakeLogger(), **kw)


@pytest.mark.unit
class TestVersionDetector:
    def test_structured_probe_wins(self):
        info = _detector(text_probe=lambda: "24H2").detect()
        assert info.product is ProductFamily.WINDOWS_11
        assert info.release_label == "23H2"
        assert info.label_source == "structured"

    def test_text_fallback_when_structured_does_not_match(self):
        report = "Host Name: PC01\nOS Version: 10.0.22631 N/A Build 22631 Release 23H2\nSystem Type: x64"
        info = _detector(structured_probe=lambda: "2009", text_probe=lambda: report).detect()
        assert info.release_label == "23H2"
        assert info.label_source == "text"

    def test_text_fallback_when_structured_raises(self):
        info = _detector(structured_probe=_boom, text_probe=lambda: "xx 22H2 yy").detect()
        assert info.release_label == "22H2"

    def test_default_floor_when_both_probes_fail(self):
        info = _detector(structured_probe=_boom, text_probe=_boom).detect()
        assert info.release_label == "24H2"
        assert info.label_source == "default"

    def test_default_floor_when_nothing_matches(self):
        info = _detector(structured_probe=lambda: None, text_probe=lambda: "no labels").detect()
        assert info.release_label == "24H2"

    def test_custom_fallback_label(self):
        info = _detector(structured_probe=_boom, text_probe=_boom, fallback_label="22H2").detect()
        assert info.release_label == "22H2"

    def test_windows_10_boundary(self):
        info = _detector(version_probe=lambda: (10, 21999)).detect()
        assert info.product is ProductFamily.WINDOWS_10

    def test_version_probe_failure_gives_unknown(self):
        info = _detector(version_probe=_boom).detect()
        assert info.product is ProductFamily.UNKNOWN
        assert info.major is None

    def test_garbage_version_gives_unknown(self):
        info = _detector(version_probe=lambda: ("ten", None)).detect()
        assert info.product is ProductFamily.UNKNOWN

    def test_total_failure_never_raises(self):
        d = _detector(version_probe=_boom, structured_probe=_boom, text_probe=_boom)
        info = d.detect()
        assert info.product is ProductFamily.UNKNOWN
        assert info.release_label == "24H2"
        assert any("failed" in m for m in d.logger.messages("warning"))


@pytest.mark.unit
class TestParseVersionString:
    def test_parses_triple(self):
        assert parse_version_string("10.0.22631") == (10, 22631)

    def test_rejects_garbage(self):
        with pytest.raises(ProbeError):
            parse_version_string("#1 SMP PREEMPT_DYNAMIC")
