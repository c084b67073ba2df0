# SPDX-License-Identifier: LGPL-3.0-or-later
# wupolicy/policy/__init__.py
from .reconciler import PolicyReconciler, PolicyState, ReconcileOutcome, ReconcileReport
from .refresh import PolicyRefresher
from .settings import PolicyValue, build_policy_settings
from .store import DryRunPolicyStore, PolicyStore, StoredValue, ValueKind, WinRegPolicyStore

__all__ = [
    "PolicyReconciler",
    "PolicyState",
    "ReconcileOutcome",
    "ReconcileReport",
    "PolicyRefresher",
    "PolicyValue",
    "build_policy_settings",
    "DryRunPolicyStore",
    "PolicyStore",
    "StoredValue",
    "ValueKind",
    "WinRegPolicyStore",
]
