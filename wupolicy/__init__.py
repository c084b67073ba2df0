# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wupolicy/__init__.py
"""
wupolicy - pin Windows Update to the installed feature release.

Detects the Windows product and feature release label, writes the Windows
Update target-release and quality-deferral policy values, and installs an
annual SYSTEM scheduled task that re-asserts them.

Usage as a library:

    from wupolicy import VersionDetector, PolicyReconciler, PolicyRefresher, WinRegPolicyStore

    info = VersionDetector().detect()
    reconciler = PolicyReconciler(WinRegPolicyStore(), PolicyRefresher())
    report = reconciler.reconcile(info, scheduled=False)
"""

__version__ = "0.1.0"

from .detect import ProductFamily, VersionDetector, VersionInfo
from .orchestrator import Orchestrator
from .policy import PolicyReconciler, PolicyRefresher, PolicyStore, WinRegPolicyStore
from .schedule import SchtasksScheduler, TaskInstaller

__all__ = [
    "__version__",
    "Orchestrator",
    "ProductFamily",
    "VersionDetector",
    "VersionInfo",
    "PolicyReconciler",
    "PolicyRefresher",
    "PolicyStore",
    "WinRegPolicyStore",
    "SchtasksScheduler",
    "TaskInstaller",
]
