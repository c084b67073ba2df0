# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wupolicy/policy/reconciler.py
"""
Bring the Windows Update policy values in line with the detected version.

Two states: RECONCILED (stored ProductVersion and TargetReleaseVersionInfo
equal the detected values) and NOT_RECONCILED. Scheduled runs check the state
first and stop without side effects when already reconciled. Interactive runs
always write, so an operator re-running the tool sees the values re-applied.

Writes are per value and best effort: one failing value is reported and the
rest are still written, then the policy refresh runs regardless.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..config.defaults import DEFER_DAYS, POLICY_NAMESPACE
from ..core.logger import Log
from ..core.result import BatchReport, OperationResult
from ..detect.version import ProductFamily, VersionInfo
from .refresh import PolicyRefresher
from .settings import GATE_KEYS, PolicyValue, build_policy_settings, settings_as_dict
from .store import PolicyStore


class PolicyState(Enum):
    RECONCILED = "reconciled"
    NOT_RECONCILED = "not-reconciled"


class ReconcileOutcome(Enum):
    ALREADY_RECONCILED = "already-reconciled"
    APPLIED = "applied"
    PARTIAL = "partial"


@dataclass
class ReconcileReport:
    outcome: ReconcileOutcome
    scheduled: bool
    batch: BatchReport = field(default_factory=lambda: BatchReport("reconcile"))
    refreshed: bool = False

    @property
    def writes(self) -> List[OperationResult]:
        return [r for r in self.batch.results if r.step.startswith("set:")]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "outcome": self.outcome.value,
            "scheduled": self.scheduled,
            "refreshed": self.refreshed,
            **self.batch.to_dict(),
        }


def _same(stored: Any, wanted: Any) -> bool:
    return stored is not None and str(stored) == str(wanted)


class PolicyReconciler:
    def __init__(
        self,
        store: PolicyStore,
        refresher: PolicyRefresher,
        logger: Optional[logging.Logger] = None,
        *,
        namespace: str = POLICY_NAMESPACE,
        defer_days: int = DEFER_DAYS,
    ):
        self.store = store
        self.refresher = refresher
        self.logger = logger or logging.getLogger("wupolicy.policy")
        self.namespace = namespace
        self.defer_days = defer_days

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def _read(self, key: str) -> Any:
        stored = self.store.get_value(self.namespace, key)
        return None if stored is None else stored.value

    def current_state(self, info: VersionInfo) -> PolicyState:
        """
        Compare stored gate values with the detection. A missing namespace,
        missing value or unreadable store all count as NOT_RECONCILED.
        """
        wanted = settings_as_dict(build_policy_settings(info, defer_days=self.defer_days))
        try:
            if not self.store.exists(self.namespace):
                self.logger.debug("Policy namespace %s absent", self.namespace)
                return PolicyState.NOT_RECONCILED
            stored = {key: self._read(key) for key in GATE_KEYS}
        except Exception as e:
            Log.warn(self.logger, f"Cannot read current policy: {e}", namespace=self.namespace)
            return PolicyState.NOT_RECONCILED

        if all(_same(stored[key], wanted[key]) for key in GATE_KEYS):
            return PolicyState.RECONCILED
        self.logger.debug(
            "Stored policy differs: %s",
            ", ".join(f"{key}={stored[key]!r}" for key in GATE_KEYS),
        )
        return PolicyState.NOT_RECONCILED

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def _ensure_namespace(self) -> OperationResult:
        step = "namespace"
        try:
            if not self.store.exists(self.namespace):
                self.store.create_namespace(self.namespace)
                Log.ok(self.logger, f"Created {self.namespace}")
                return OperationResult.success(step, created=True)
            return OperationResult.success(step, created=False)
        except Exception as e:
            Log.fail(self.logger, f"Cannot ensure {self.namespace}: {e}")
            return OperationResult.failure(step, e)

    def write_value(self, pv: PolicyValue) -> OperationResult:
        """Create with the target kind when absent; overwrite keeping the stored kind when present."""
        step = f"set:{pv.name}"
        try:
            existing = self.store.get_value(self.namespace, pv.name)
            kind = existing.kind if existing is not None else pv.kind
            value = kind.coerce(pv.value)
            self.store.set_value(self.namespace, pv.name, value, kind)
        except Exception as e:
            Log.fail(self.logger, f"Failed to set {pv.name}: {e}", namespace=self.namespace)
            return OperationResult.failure(step, e, value=pv.value)

        action = "updated" if existing is not None else "created"
        Log.ok(self.logger, f"{pv.name} = {value!r}", action=action, kind=kind.value)
        return OperationResult.success(step, value=value, kind=kind.value, action=action)

    def _refresh(self) -> OperationResult:
        try:
            self.refresher.refresh()
        except Exception as e:
            Log.fail(self.logger, f"Policy refresh failed: {e}")
            return OperationResult.failure("refresh", e)
        Log.ok(self.logger, "Policy refreshed")
        return OperationResult.success("refresh")

    def apply(self, info: VersionInfo, *, scheduled: bool = False) -> ReconcileReport:
        """Unconditional write loop followed by the policy refresh."""
        report = ReconcileReport(outcome=ReconcileOutcome.APPLIED, scheduled=scheduled)
        report.batch.add(self._ensure_namespace())

        for pv in build_policy_settings(info, defer_days=self.defer_days):
            report.batch.add(self.write_value(pv))

        refresh = report.batch.add(self._refresh())
        report.refreshed = refresh.ok

        if not report.batch.ok:
            report.outcome = ReconcileOutcome.PARTIAL
        return report

    def reconcile(self, info: VersionInfo, *, scheduled: bool = False) -> ReconcileReport:
        if scheduled and self.current_state(info) is PolicyState.RECONCILED:
            self.logger.info(
                "Policy already pinned to %s %s; nothing to do",
                info.product_name,
                info.release_label,
            )
            return ReconcileReport(outcome=ReconcileOutcome.ALREADY_RECONCILED, scheduled=True)

        if info.product is ProductFamily.UNKNOWN:
            Log.warn(self.logger, "Writing policy for an unclassified product", product=info.product_name)

        Log.step(
            self.logger,
            f"Pinning Windows Update to {info.product_name} {info.release_label}",
            mode="scheduled" if scheduled else "interactive",
        )
        return self.apply(info, scheduled=scheduled)
