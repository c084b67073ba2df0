# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wupolicy/cli/help_texts.py
from __future__ import annotations

# Pure help text for the argparse epilog. Keep it copy/paste runnable.

YAML_EXAMPLE = r"""# wupolicy configuration (YAML)
#
# Run (elevated prompt):
#   wupolicy --config wupolicy.yaml
#
# Merge multiple configs (later overrides earlier):
#   wupolicy --config base.yaml --config site.yaml
#
# CLI flags always win over config values.

defer_days: 4                 # DeferQualityUpdatesPeriodInDays
fallback_label: 24H2          # used when no release label can be detected
policy_namespace: HKLM\SOFTWARE\Policies\Microsoft\Windows\WindowsUpdate
refresh_command: [gpupdate, /force]

install_dir: C:\ProgramData\wupolicy
task_name: wupolicy-reconcile
interval_days: 365            # 1..365
start_time: "03:00"

on_error: continue            # continue | fail
"""

FEATURE_SUMMARY = r"""  - Detects Windows 10/11 and the feature release label (e.g. 23H2)
  - Pins TargetReleaseVersionInfo and defers quality updates via machine policy
  - Re-applies policy from an annual SYSTEM scheduled task (--scheduled)
  - Scheduled runs exit without changes when the policy already matches
  - --dry-run logs every write/registration without touching the machine
"""
