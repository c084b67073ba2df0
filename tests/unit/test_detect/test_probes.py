# SPDX-License-Identifier: LGPL-3.0-or-later
from __future__ import annotations

import subprocess
from types import SimpleNamespace

import pytest

from fakes.fake_logger import FakeLogger
from wupolicy.core.utils import U
from wupolicy.detect import probes


class _CurrentVersion:
    def __init__(self, values):
        self.values = values

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


def _fake_winreg(values):
    def query(key, name):
        if name not in key.values:
            raise FileNotFoundError(name)
        return key.values[name], 1

    return SimpleNamespace(
        HKEY_LOCAL_MACHINE="HKLM",
        OpenKey=lambda root, sub: _CurrentVersion(values),
        QueryValueEx=query,
    )


@pytest.mark.unit
def test_display_version_preferred(monkeypatch):
    monkeypatch.setattr(probes, "_winreg", lambda: _fake_winreg({"DisplayVersion": "23H2", "ReleaseId": "2009"}))
    assert probes.structured_display_version() == "23H2"


@pytest.mark.unit
def test_release_id_on_older_builds(monkeypatch):
    monkeypatch.setattr(probes, "_winreg", lambda: _fake_winreg({"ReleaseId": "1909"}))
    assert probes.structured_display_version() == "1909"


@pytest.mark.unit
def test_neither_value(monkeypatch):
    monkeypatch.setattr(probes, "_winreg", lambda: _fake_winreg({}))
    assert probes.structured_display_version() is None


@pytest.mark.unit
def test_host_version_from_getwindowsversion(monkeypatch):
    monkeypatch.setattr(
        probes.sys, "getwindowsversion", lambda: SimpleNamespace(major=10, build=19045), raising=False
    )
    assert probes.host_version() == (10, 19045)


@pytest.mark.unit
def test_systeminfo_report(monkeypatch):
    def fake_run(logger, cmd, **kw):
        assert cmd == ["systeminfo"]
        return subprocess.CompletedProcess(cmd, 0, "OS Version: 10.0.19045 N/A Build 19045\n", "")

    monkeypatch.setattr(U, "run_cmd", staticmethod(fake_run))
    assert "19045" in probes.systeminfo_report(FakeLogger())
