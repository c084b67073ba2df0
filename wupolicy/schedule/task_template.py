# SPDX-License-Identifier: LGPL-3.0-or-later
# wupolicy/schedule/task_template.py
from __future__ import annotations

import datetime as _dt
import logging
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional
from xml.sax.saxutils import escape

from ..config.defaults import (
    INSTALL_DIR,
    INTERVAL_DAYS,
    LOG_NAME,
    SCHEDULED_CONFIG_NAME,
    START_TIME,
    TASK_DESCRIPTION,
    TASK_NAME,
)
from ..core.file_ops import atomic_write
from ..core.utils import U

# Task Scheduler 1.2 schema. Rendered with .format_map() after XML-escaping every value.
# schtasks /Create /XML expects the file in UTF-16, matching the declaration.
TASK_XML_TEMPLATE = """\
<?xml version="1.0" encoding="UTF-16"?>
<Task version="1.2" xmlns="http://schemas.microsoft.com/windows/2004/02/mit/task">
  <RegistrationInfo>
    <Description>{description}</Description>
    <URI>\\{name}</URI>
  </RegistrationInfo>
  <Triggers>
    <CalendarTrigger>
      <StartBoundary>{start_boundary}</StartBoundary>
      <Enabled>true</Enabled>
      <ScheduleByDay>
        <DaysInterval>{interval_days}</DaysInterval>
      </ScheduleByDay>
    </CalendarTrigger>
  </Triggers>
  <Principals>
    <Principal id="Author">
      <UserId>{principal}</UserId>
      <RunLevel>HighestAvailable</RunLevel>
    </Principal>
  </Principals>
  <Settings>
    <MultipleInstancesPolicy>IgnoreNew</MultipleInstancesPolicy>
    <DisallowStartIfOnBatteries>false</DisallowStartIfOnBatteries>
    <StopIfGoingOnBatteries>false</StopIfGoingOnBatteries>
    <StartWhenAvailable>true</StartWhenAvailable>
    <RunOnlyIfNetworkAvailable>false</RunOnlyIfNetworkAvailable>
    <Enabled>true</Enabled>
    <Hidden>false</Hidden>
  </Settings>
  <Actions Context="Author">
    <Exec>
      <Command>{command}</Command>
      <Arguments>{arguments}</Arguments>
      <WorkingDirectory>{workdir}</WorkingDirectory>
    </Exec>
  </Actions>
</Task>
"""

# LocalSystem.
SYSTEM_SID = "S-1-5-18"

SCRIPT_SUFFIXES = (".py", ".pyw")


@dataclass(frozen=True)
class TaskSpec:
    name: str
    command: str
    arguments: str
    workdir: str
    interval_days: int = INTERVAL_DAYS
    start_time: str = START_TIME
    principal: str = SYSTEM_SID
    description: str = TASK_DESCRIPTION


def parse_start_time(s: str) -> _dt.time:
    try:
        hh, mm = str(s).strip().split(":", 1)
        return _dt.time(int(hh), int(mm))
    except (TypeError, ValueError) as e:
        raise ValueError(f"start time must be HH:MM, got {s!r}") from e


def next_start_boundary(start_time: str, now: Optional[_dt.datetime] = None) -> str:
    """Next local occurrence of HH:MM as an ISO timestamp (today if still ahead, else tomorrow)."""
    now = now or _dt.datetime.now()
    t = parse_start_time(start_time)
    first = now.replace(hour=t.hour, minute=t.minute, second=0, microsecond=0)
    if first <= now:
        first += _dt.timedelta(days=1)
    return first.strftime("%Y-%m-%dT%H:%M:%S")


def build_task_spec(
    artifact: Path,
    *,
    name: str = TASK_NAME,
    interval_days: int = INTERVAL_DAYS,
    start_time: str = START_TIME,
    config_path: Optional[Path] = None,
    log_path: Optional[Path] = None,
    python: Optional[str] = None,
    description: str = TASK_DESCRIPTION,
) -> TaskSpec:
    """
    Task that re-runs the installed artifact in scheduled mode.

    A script artifact runs through the interpreter; anything else (frozen exe,
    pip console launcher) runs directly.
    """
    artifact = Path(artifact)
    extra: List[str] = ["--scheduled"]
    if config_path is not None:
        extra += ["--config", str(config_path)]
    if log_path is not None:
        extra += ["--log-file", str(log_path)]

    if artifact.suffix.lower() in SCRIPT_SUFFIXES:
        command = python or sys.executable
        arguments = subprocess.list2cmdline([str(artifact), *extra])
    else:
        command = str(artifact)
        arguments = subprocess.list2cmdline(extra)

    return TaskSpec(
        name=name,
        command=command,
        arguments=arguments,
        workdir=str(artifact.parent),
        interval_days=int(interval_days),
        start_time=start_time,
        description=description,
    )


def validate_spec(spec: TaskSpec) -> None:
    if not spec.name or not spec.name.strip():
        raise ValueError("task name cannot be empty")
    if any(ch in spec.name for ch in '\\/<>:"|?*'):
        raise ValueError(f"task name contains characters Task Scheduler rejects: {spec.name!r}")
    if not spec.command:
        raise ValueError("task command cannot be empty")
    # DaysInterval is an unsignedShort limited to 1..365 by the schema.
    if not 1 <= int(spec.interval_days) <= 365:
        raise ValueError(f"interval_days must be within 1..365, got {spec.interval_days}")
    parse_start_time(spec.start_time)


def render_task_xml(spec: TaskSpec, *, now: Optional[_dt.datetime] = None) -> str:
    validate_spec(spec)
    return TASK_XML_TEMPLATE.format_map(
        {
            "name": escape(spec.name),
            "description": escape(spec.description),
            "start_boundary": next_start_boundary(spec.start_time, now),
            "interval_days": int(spec.interval_days),
            "principal": escape(spec.principal),
            "command": escape(spec.command),
            "arguments": escape(spec.arguments),
            "workdir": escape(spec.workdir),
        }
    )


def write_task_xml(xml: str, out_path: Path) -> Path:
    out_path = Path(out_path).expanduser()
    U.ensure_dir(out_path.parent)
    with atomic_write(out_path) as tmp:
        tmp.write_text(xml, encoding="utf-16")
    return out_path


def generate_task_xml(args: Any, logger: Optional[logging.Logger] = None) -> None:
    """
    Print or write the task definition the installer would register.
    """
    install_dir = Path(getattr(args, "install_dir", None) or INSTALL_DIR)
    artifact = install_dir / U.running_artifact().name
    spec = build_task_spec(
        artifact,
        name=getattr(args, "task_name", None) or TASK_NAME,
        interval_days=getattr(args, "interval_days", None) or INTERVAL_DAYS,
        start_time=getattr(args, "start_time", None) or START_TIME,
        config_path=install_dir / SCHEDULED_CONFIG_NAME,
        log_path=install_dir / LOG_NAME,
    )
    xml = render_task_xml(spec)

    out = getattr(args, "output", None)
    if out:
        out_path = write_task_xml(xml, Path(str(out)))
        if logger:
            logger.info("Task definition written to %s", out_path)
            logger.info("Next steps:")
            logger.info('  schtasks /Create /TN "%s" /XML "%s"', spec.name, out_path)
            logger.info('  schtasks /Query /TN "%s" /V /FO LIST', spec.name)
        return

    print(xml)
