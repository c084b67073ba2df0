# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wupolicy/orchestrator/orchestrator.py

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.table import Table

from ..config.defaults import PARTIAL_FAILURE_EXIT, SCHEDULED_KEYS
from ..core.exceptions import StoreError, wrap_fatal
from ..core.logger import Log
from ..core.logging_utils import log_step
from ..core.result import BatchReport
from ..core.utils import U
from ..detect.detector import VersionDetector
from ..detect.version import VersionInfo
from ..policy.reconciler import PolicyReconciler, ReconcileOutcome, ReconcileReport
from ..policy.refresh import PolicyRefresher
from ..policy.store import DryRunPolicyStore, PolicyStore, WinRegPolicyStore
from ..schedule.installer import TaskInstaller
from ..schedule.scheduler import SchtasksScheduler, TaskScheduler
from ..schedule.task_template import generate_task_xml


def scheduled_settings(args: argparse.Namespace) -> Dict[str, Any]:
    """The validated values a scheduled run must reproduce, CLI overrides included."""
    return {k: getattr(args, k) for k in SCHEDULED_KEYS}


def render_summary(info: VersionInfo, reports: List[BatchReport], console: Optional[Console] = None) -> None:
    console = console or Console(stderr=True)
    table = Table(title=f"wupolicy: {info.product_name} {info.release_label}")
    table.add_column("Step")
    table.add_column("Status")
    table.add_column("Detail", overflow="fold")
    for report in reports:
        for r in report.results:
            status = "[green]ok[/green]" if r.ok else "[red]failed[/red]"
            detail = r.error if not r.ok else ", ".join(f"{k}={v}" for k, v in r.detail.items())
            table.add_row(f"{report.name}/{r.step}", status, detail or "")
    console.print(table)


class Orchestrator:
    """
    detect -> reconcile -> install.

    Collaborators can be injected; anything left as None is built from args
    against the real machine (registry, gpupdate, schtasks).
    """

    def __init__(
        self,
        logger: logging.Logger,
        args: argparse.Namespace,
        *,
        detector: Optional[VersionDetector] = None,
        store: Optional[PolicyStore] = None,
        refresher: Optional[PolicyRefresher] = None,
        scheduler: Optional[TaskScheduler] = None,
        artifact: Optional[Path] = None,
        console: Optional[Console] = None,
    ):
        self.logger = logger
        self.args = args
        self.dry_run = bool(getattr(args, "dry_run", False))

        self.detector = detector or VersionDetector(logger, fallback_label=args.fallback_label)
        self._store = store
        self.refresher = refresher or PolicyRefresher(logger, args.refresh_command, dry_run=self.dry_run)
        self.scheduler = scheduler or SchtasksScheduler(logger)
        self.artifact = artifact
        self.console = console

        Log.trace(
            self.logger,
            "Orchestrator init: scheduled=%r dry_run=%r install_dir=%r",
            getattr(args, "scheduled", False),
            self.dry_run,
            getattr(args, "install_dir", None),
        )

    def _policy_store(self) -> PolicyStore:
        store = self._store
        if store is None:
            try:
                store = WinRegPolicyStore(self.logger)
            except StoreError as e:
                raise wrap_fatal("Cannot open the policy store", e, code=2) from e
        if self.dry_run and not isinstance(store, DryRunPolicyStore):
            store = DryRunPolicyStore(store, self.logger)
        return store

    def _exit_code(self, reports: List[BatchReport]) -> int:
        failures = [f for r in reports for f in r.failures]
        if not failures:
            return 0
        Log.warn(self.logger, f"{len(failures)} step(s) failed", policy=self.args.on_error)
        if self.args.on_error == "fail":
            return PARTIAL_FAILURE_EXIT
        return 0

    def reconcile(self, info: VersionInfo) -> ReconcileReport:
        reconciler = PolicyReconciler(
            self._policy_store(),
            self.refresher,
            Log.bind(self.logger, stage="reconcile"),
            namespace=self.args.policy_namespace,
            defer_days=self.args.defer_days,
        )
        return reconciler.reconcile(info, scheduled=bool(self.args.scheduled))

    def install(self) -> BatchReport:
        installer = TaskInstaller(
            self.scheduler,
            Log.bind(self.logger, stage="install"),
            install_dir=Path(self.args.install_dir),
            task_name=self.args.task_name,
            interval_days=self.args.interval_days,
            start_time=self.args.start_time,
            dry_run=self.dry_run,
        )
        return installer.install(self.artifact or U.running_artifact(), scheduled_settings(self.args))

    def run(self) -> int:
        if getattr(self.args, "print_task_xml", False):
            generate_task_xml(self.args, self.logger)
            return 0

        with log_step(self.logger, "Detecting Windows version"):
            info = self.detector.detect()

        if getattr(self.args, "detect_only", False):
            print(json.dumps(info.to_dict(), indent=2))
            return 0

        if not self.dry_run and not U.is_admin():
            Log.warn_once(self.logger, "not-admin", "Not running elevated; machine policy writes will likely fail")

        Log.banner(self.logger, "Update policy")
        policy = self.reconcile(info)
        if policy.outcome is ReconcileOutcome.ALREADY_RECONCILED:
            return 0

        reports = [policy.batch]
        if getattr(self.args, "no_install", False):
            self.logger.info("Skipping scheduled task installation (--no-install)")
        else:
            Log.banner(self.logger, "Scheduled task")
            reports.append(self.install())

        render_summary(info, reports, self.console)
        return self._exit_code(reports)
