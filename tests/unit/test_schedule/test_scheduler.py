# SPDX-License-Identifier: LGPL-3.0-or-later
from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from fakes.fake_logger import FakeLogger
from wupolicy.core.exceptions import SchedulerError
from wupolicy.core.utils import U
from wupolicy.schedule.scheduler import SchtasksScheduler
from wupolicy.schedule.task_template import TaskSpec


def _spec():
    return TaskSpec(name="wupolicy-reconcile", command=r"C:\wp\wupolicy.exe", arguments="--scheduled", workdir=r"C:\wp")


@pytest.mark.unit
@pytest.mark.parametrize("rc,expected", [(0, True), (1, False)])
def test_find_task(monkeypatch, rc, expected):
    calls = []

    def fake_run(logger, cmd, **kw):
        calls.append((cmd, kw))
        return subprocess.CompletedProcess(cmd, rc, "", "ERROR: The system cannot find the file specified.")

    monkeypatch.setattr(U, "run_cmd", staticmethod(fake_run))
    assert SchtasksScheduler(FakeLogger()).find_task("wupolicy-reconcile") is expected
    assert calls[0][0] == ["schtasks", "/Query", "/TN", "wupolicy-reconcile"]
    assert calls[0][1]["check"] is False


@pytest.mark.unit
def test_register_task_uses_xml_without_force(monkeypatch):
    seen = {}

    def fake_run(logger, cmd, **kw):
        seen["cmd"] = cmd
        seen["xml"] = Path(cmd[-1]).read_text(encoding="utf-16")
        return subprocess.CompletedProcess(cmd, 0, "SUCCESS", "")

    monkeypatch.setattr(U, "run_cmd", staticmethod(fake_run))
    SchtasksScheduler(FakeLogger()).register_task(_spec())

    assert seen["cmd"][:5] == ["schtasks", "/Create", "/TN", "wupolicy-reconcile", "/XML"]
    assert "/F" not in seen["cmd"]
    assert "<Command>C:\\wp\\wupolicy.exe</Command>" in seen["xml"]
    assert not Path(seen["cmd"][-1]).exists()


@pytest.mark.unit
def test_register_failure_becomes_scheduler_error(monkeypatch):
    def fake_run(logger, cmd, **kw):
        raise subprocess.CalledProcessError(1, cmd, output="", stderr="ERROR: Access is denied.")

    monkeypatch.setattr(U, "run_cmd", staticmethod(fake_run))
    with pytest.raises(SchedulerError) as ei:
        SchtasksScheduler(FakeLogger()).register_task(_spec())
    assert ei.value.code == 30
    assert ei.value.context == {"task": "wupolicy-reconcile"}
