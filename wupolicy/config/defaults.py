# SPDX-License-Identifier: LGPL-3.0-or-later
# wupolicy/config/defaults.py
from __future__ import annotations

# Machine policy namespace read by the Windows Update client.
POLICY_NAMESPACE = r"HKLM\SOFTWARE\Policies\Microsoft\Windows\WindowsUpdate"

# Where the scheduled copy lives and what the task is called.
INSTALL_DIR = r"C:\ProgramData\wupolicy"
TASK_NAME = "wupolicy-reconcile"
TASK_DESCRIPTION = "Re-assert Windows Update target release and quality deferral policy."

INTERVAL_DAYS = 365
START_TIME = "03:00"

DEFER_DAYS = 4
FALLBACK_LABEL = "24H2"

REFRESH_COMMAND = ["gpupdate", "/force"]

ON_ERROR_CHOICES = ("continue", "fail")
ON_ERROR = "continue"

# Exit code used by on_error=fail when any step reported a failure.
PARTIAL_FAILURE_EXIT = 3

LOG_NAME = "wupolicy.log"
SCHEDULED_CONFIG_NAME = "wupolicy.yaml"

# Settings written to the scheduled config so the task re-runs with them.
SCHEDULED_KEYS = (
    "install_dir",
    "task_name",
    "interval_days",
    "start_time",
    "defer_days",
    "fallback_label",
    "policy_namespace",
    "refresh_command",
    "on_error",
)
