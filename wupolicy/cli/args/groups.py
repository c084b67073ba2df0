# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wupolicy/cli/args/groups.py
from __future__ import annotations

import argparse

from ...config import defaults as D


def _add_global_config_logging(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # Global config/logging (two-phase parse relies on these)
    # ------------------------------------------------------------------
    from ... import __version__

    p.add_argument(
        "--config",
        action="append",
        default=[],
        help="YAML/JSON config file, glob or directory (repeatable; later overrides earlier).",
    )
    p.add_argument("--dump-config", action="store_true", help="Print merged config and exit.")
    p.add_argument("--dump-args", action="store_true", help="Print final parsed args and exit.")
    p.add_argument("--version", action="version", version=__version__)
    p.add_argument("-v", "--verbose", action="count", default=0, help="Verbosity: -v debug, -vv trace")
    p.add_argument("-q", "--quiet", action="count", default=0, help="Less output: -q warnings, -qq errors")
    p.add_argument("--log-file", dest="log_file", default=None, help="Also write logs to this file.")
    p.add_argument("--json-logs", dest="json_logs", action="store_true", help="Emit NDJSON log lines.")


def _add_run_mode(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # Run mode
    # ------------------------------------------------------------------
    p.add_argument(
        "--scheduled",
        "-Scheduled",
        dest="scheduled",
        action="store_true",
        help="Unattended run from the scheduled task: exit without changes when policy already matches.",
    )
    p.add_argument("--dry-run", dest="dry_run", action="store_true", help="Log writes and task registration instead of doing them.")
    p.add_argument("--no-install", dest="no_install", action="store_true", help="Skip copying the tool and registering the task.")
    p.add_argument("--detect-only", dest="detect_only", action="store_true", help="Print the detected version as JSON and exit.")
    p.add_argument("--print-task-xml", dest="print_task_xml", action="store_true", help="Print the scheduled task definition and exit.")
    p.add_argument("--output", dest="output", default=None, help="With --print-task-xml: write the definition here instead.")
    p.add_argument(
        "--on-error",
        dest="on_error",
        default=D.ON_ERROR,
        choices=list(D.ON_ERROR_CHOICES),
        help="continue: report failures and exit 0; fail: exit non-zero when any step failed.",
    )


def _add_policy_knobs(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # Policy values
    # ------------------------------------------------------------------
    p.add_argument("--policy-namespace", dest="policy_namespace", default=D.POLICY_NAMESPACE, help="Registry key holding the policy values.")
    p.add_argument("--defer-days", dest="defer_days", type=int, default=D.DEFER_DAYS, help="DeferQualityUpdatesPeriodInDays (0..30).")
    p.add_argument("--fallback-label", dest="fallback_label", default=D.FALLBACK_LABEL, help="Release label used when detection finds none.")
    p.add_argument(
        "--refresh-command",
        dest="refresh_command",
        default=D.REFRESH_COMMAND,
        help="Command run after writing policy (string on CLI, list in YAML).",
    )


def _add_schedule_knobs(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # Scheduled task
    # ------------------------------------------------------------------
    p.add_argument("--install-dir", dest="install_dir", default=D.INSTALL_DIR, help="Where the scheduled copy is kept.")
    p.add_argument("--task-name", dest="task_name", default=D.TASK_NAME, help="Scheduled task name.")
    p.add_argument("--interval-days", dest="interval_days", type=int, default=D.INTERVAL_DAYS, help="Days between scheduled runs (1..365).")
    p.add_argument("--start-time", dest="start_time", default=D.START_TIME, help="Local time of day (HH:MM) for the scheduled run.")
