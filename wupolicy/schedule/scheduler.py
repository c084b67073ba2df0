# SPDX-License-Identifier: LGPL-3.0-or-later
# wupolicy/schedule/scheduler.py
from __future__ import annotations

import abc
import logging
import subprocess
import tempfile
from pathlib import Path
from typing import Optional

from ..core.exceptions import wrap_scheduler
from ..core.utils import U
from .task_template import TaskSpec, render_task_xml, write_task_xml


class TaskScheduler(abc.ABC):
    @abc.abstractmethod
    def find_task(self, name: str) -> bool: ...

    @abc.abstractmethod
    def register_task(self, spec: TaskSpec) -> None: ...


class SchtasksScheduler(TaskScheduler):
    """Task Scheduler through schtasks.exe."""

    def __init__(self, logger: Optional[logging.Logger] = None, *, timeout: Optional[int] = None):
        self.logger = logger or logging.getLogger("wupolicy.schedule")
        self.timeout = timeout

    def find_task(self, name: str) -> bool:
        cp = U.run_cmd(
            self.logger,
            ["schtasks", "/Query", "/TN", name],
            capture=True,
            check=False,
            timeout=self.timeout,
        )
        if cp.returncode == 0:
            return True
        self.logger.debug("schtasks /Query %s rc=%s: %s", name, cp.returncode, (cp.stderr or "").strip())
        return False

    def register_task(self, spec: TaskSpec) -> None:
        xml = render_task_xml(spec)
        with tempfile.TemporaryDirectory(prefix="wupolicy-") as td:
            xml_path = write_task_xml(xml, Path(td) / "task.xml")
            try:
                # No /F: an existing task with this name is never replaced.
                U.run_cmd(
                    self.logger,
                    ["schtasks", "/Create", "/TN", spec.name, "/XML", str(xml_path)],
                    capture=True,
                    check=True,
                    timeout=self.timeout,
                )
            except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError) as e:
                raise wrap_scheduler(f"Cannot register task {spec.name}", e, task=spec.name)
