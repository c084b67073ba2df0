# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wupolicy/schedule/installer.py
"""
Keep a runnable copy of the tool on the machine and a task that re-runs it.

Separate, idempotent steps:
  ensure_artifact_at     copy the running artifact into the install dir,
                         overwriting the previous copy every time
  ensure_package_at      script artifacts only: copy the wupolicy package
                         next to the script so the copy can import it
  ensure_config_at       write the effective settings the task re-runs with
  ensure_scheduled_entry register the task only when no task with that name
                         exists; an existing task is never modified

Failures are returned as OperationResults and never roll back an earlier
step. A failed copy still lets registration run.
"""
from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Any, Dict, Optional

from ..config.config_loader import Config
from ..config.defaults import (
    INSTALL_DIR,
    INTERVAL_DAYS,
    LOG_NAME,
    SCHEDULED_CONFIG_NAME,
    START_TIME,
    TASK_NAME,
)
from ..core.file_ops import atomic_write, same_file
from ..core.logger import Log
from ..core.result import BatchReport, OperationResult
from ..core.utils import U
from .scheduler import TaskScheduler
from .task_template import SCRIPT_SUFFIXES, TaskSpec, build_task_spec

# The package a script artifact needs beside it.
PACKAGE_DIR = Path(__file__).resolve().parents[1]
_PACKAGE_IGNORE = shutil.ignore_patterns("__pycache__", "*.pyc", "*.pyo")


class TaskInstaller:
    def __init__(
        self,
        scheduler: TaskScheduler,
        logger: Optional[logging.Logger] = None,
        *,
        install_dir: Path = Path(INSTALL_DIR),
        task_name: str = TASK_NAME,
        interval_days: int = INTERVAL_DAYS,
        start_time: str = START_TIME,
        dry_run: bool = False,
        package_dir: Path = PACKAGE_DIR,
    ):
        self.scheduler = scheduler
        self.logger = logger or logging.getLogger("wupolicy.schedule")
        self.install_dir = Path(install_dir)
        self.task_name = task_name
        self.interval_days = interval_days
        self.start_time = start_time
        self.dry_run = dry_run
        self.package_dir = Path(package_dir)

    def ensure_artifact_at(self, source: Path, dest_dir: Optional[Path] = None) -> OperationResult:
        step = "copy"
        source = Path(source)
        dest_dir = Path(dest_dir) if dest_dir is not None else self.install_dir
        dest = dest_dir / source.name

        if self.dry_run:
            Log.step(self.logger, f"[dry-run] would copy {source} -> {dest}")
            return OperationResult.success(step, dest=str(dest), dry_run=True)

        try:
            U.ensure_dir(dest_dir)
            if same_file(source, dest):
                # The scheduled copy is the one running.
                self.logger.debug("Artifact already in place: %s", dest)
                return OperationResult.success(step, dest=str(dest), copied=False)
            shutil.copy2(source, dest)
        except Exception as e:
            Log.fail(self.logger, f"Cannot copy {source} to {dest}: {e}")
            return OperationResult.failure(step, e, dest=str(dest))

        Log.ok(self.logger, f"Installed copy at {dest}")
        return OperationResult.success(step, dest=str(dest), copied=True)

    def ensure_package_at(self, dest_dir: Optional[Path] = None) -> OperationResult:
        """
        Copy the package beside a script artifact. The task runs the script
        with the install dir as sys.path[0], so this copy is what it imports.
        The previous copy is replaced whole to drop modules that no longer exist.
        """
        step = "package"
        dest_dir = Path(dest_dir) if dest_dir is not None else self.install_dir
        dest = dest_dir / self.package_dir.name

        if self.dry_run:
            Log.step(self.logger, f"[dry-run] would copy package {self.package_dir} -> {dest}")
            return OperationResult.success(step, dest=str(dest), dry_run=True)

        try:
            U.ensure_dir(dest_dir)
            if same_file(self.package_dir, dest):
                self.logger.debug("Package already in place: %s", dest)
                return OperationResult.success(step, dest=str(dest), copied=False)
            if dest.exists():
                shutil.rmtree(dest)
            shutil.copytree(self.package_dir, dest, ignore=_PACKAGE_IGNORE)
        except Exception as e:
            Log.fail(self.logger, f"Cannot copy package {self.package_dir} to {dest}: {e}")
            return OperationResult.failure(step, e, dest=str(dest))

        Log.ok(self.logger, f"Installed package at {dest}")
        return OperationResult.success(step, dest=str(dest), copied=True)

    def ensure_config_at(self, conf: Dict[str, Any], dest_dir: Optional[Path] = None) -> OperationResult:
        """Persist the effective settings next to the copy so scheduled runs use them."""
        step = "config"
        dest = (Path(dest_dir) if dest_dir is not None else self.install_dir) / SCHEDULED_CONFIG_NAME

        if self.dry_run:
            Log.step(self.logger, f"[dry-run] would write {dest}")
            return OperationResult.success(step, dest=str(dest), dry_run=True)

        try:
            U.ensure_dir(dest.parent)
            with atomic_write(dest) as tmp:
                tmp.write_text(Config.dump_yaml(conf), encoding="utf-8")
        except Exception as e:
            Log.fail(self.logger, f"Cannot write scheduled config {dest}: {e}")
            return OperationResult.failure(step, e, dest=str(dest))
        return OperationResult.success(step, dest=str(dest))

    def ensure_scheduled_entry(self, spec: TaskSpec) -> OperationResult:
        step = "task"
        try:
            if self.scheduler.find_task(spec.name):
                self.logger.info("Scheduled task %s already present; leaving it unchanged", spec.name)
                return OperationResult.success(step, task=spec.name, registered=False)

            if self.dry_run:
                Log.step(self.logger, f"[dry-run] would register task {spec.name}: {spec.command} {spec.arguments}")
                return OperationResult.success(step, task=spec.name, registered=False, dry_run=True)

            self.scheduler.register_task(spec)
        except Exception as e:
            Log.fail(self.logger, f"Cannot register scheduled task {spec.name}: {e}")
            return OperationResult.failure(step, e, task=spec.name)

        Log.ok(
            self.logger,
            f"Registered scheduled task {spec.name}",
            every_days=spec.interval_days,
            at=spec.start_time,
        )
        return OperationResult.success(step, task=spec.name, registered=True)

    def task_spec_for(self, artifact: Path, *, with_config: bool = False) -> TaskSpec:
        return build_task_spec(
            artifact,
            name=self.task_name,
            interval_days=self.interval_days,
            start_time=self.start_time,
            config_path=(self.install_dir / SCHEDULED_CONFIG_NAME) if with_config else None,
            log_path=self.install_dir / LOG_NAME,
        )

    def install(self, source: Path, settings: Optional[Dict[str, Any]] = None) -> BatchReport:
        """
        Copy, then register. With settings, they are written to the scheduled
        config and the task passes --config, so the scheduled run keeps the
        same task name, install dir and policy knobs as this one.
        """
        report = BatchReport("install")
        source = Path(source)

        report.add(self.ensure_artifact_at(source))
        if source.suffix.lower() in SCRIPT_SUFFIXES:
            report.add(self.ensure_package_at())
        if settings is not None:
            report.add(self.ensure_config_at(settings))

        spec = self.task_spec_for(self.install_dir / source.name, with_config=settings is not None)
        report.add(self.ensure_scheduled_entry(spec))
        return report
