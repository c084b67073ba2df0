# SPDX-License-Identifier: LGPL-3.0-or-later
# wupolicy/schedule/__init__.py
from .installer import TaskInstaller
from .scheduler import SchtasksScheduler, TaskScheduler
from .task_template import TaskSpec, build_task_spec, render_task_xml

__all__ = ["TaskInstaller", "SchtasksScheduler", "TaskScheduler", "TaskSpec", "build_task_spec", "render_task_xml"]
