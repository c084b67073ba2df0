# SPDX-License-Identifier: LGPL-3.0-or-later
from __future__ import annotations

import pytest

from wupolicy.core.exceptions import (
    ConfigError,
    Fatal,
    StoreError,
    WuPolicyError,
    format_exception_for_cli,
    wrap_fatal,
    wrap_store,
)


@pytest.mark.unit
class TestWuPolicyError:
    def test_code_is_clamped(self):
        assert WuPolicyError(code=999, msg="x").code == 255
        assert WuPolicyError(code=-3, msg="x").code == 1
        assert WuPolicyError(code="nope", msg="x").code == 1

    def test_message_is_one_line(self):
        e = WuPolicyError(msg="line one\nline two")
        assert str(e) == "line one line two"

    def test_empty_message_falls_back_to_class_name(self):
        assert str(StoreError(msg="")) == "StoreError"

    def test_context_and_cause(self):
        e = wrap_store("Cannot write X", PermissionError(5, "Access is denied"), key="X")
        assert e.code == 20
        text = e.user_message(include_context=True, include_cause=True)
        assert "key='X'" in text
        assert "PermissionError" in text

    def test_to_dict(self):
        e = WuPolicyError(code=3, msg="boom", context={"step": "copy"})
        d = e.to_dict(include_cause=True)
        assert d == {"type": "WuPolicyError", "code": 3, "message": "boom", "context": {"step": "copy"}}

    def test_hierarchy(self):
        assert issubclass(ConfigError, Fatal)
        assert not issubclass(StoreError, Fatal)


@pytest.mark.unit
def test_format_exception_for_cli_levels():
    e = wrap_fatal("bad thing", ValueError("why"), code=4, where="here")
    assert format_exception_for_cli(e) == "bad thing"
    assert "where='here'" in format_exception_for_cli(e, verbose=1)
    assert "ValueError" in format_exception_for_cli(e, verbose=2)
    assert format_exception_for_cli(RuntimeError("plain")) == "plain"
