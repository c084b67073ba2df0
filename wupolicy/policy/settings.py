# SPDX-License-Identifier: LGPL-3.0-or-later
# wupolicy/policy/settings.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

from ..config.defaults import DEFER_DAYS
from ..detect.version import VersionInfo
from .store import ValueKind

PRODUCT_VERSION = "ProductVersion"
TARGET_RELEASE_VERSION = "TargetReleaseVersion"
TARGET_RELEASE_VERSION_INFO = "TargetReleaseVersionInfo"
DEFER_QUALITY_UPDATES = "DeferQualityUpdates"
DEFER_QUALITY_UPDATES_DAYS = "DeferQualityUpdatesPeriodInDays"

# Values the scheduled-mode gate compares against a fresh detection.
GATE_KEYS = (PRODUCT_VERSION, TARGET_RELEASE_VERSION_INFO)


@dataclass(frozen=True)
class PolicyValue:
    name: str
    kind: ValueKind
    value: Any


def build_policy_settings(info: VersionInfo, *, defer_days: int = DEFER_DAYS) -> List[PolicyValue]:
    """The five Windows Update policy values, in write order."""
    return [
        PolicyValue(PRODUCT_VERSION, ValueKind.SZ, info.product_name),
        PolicyValue(TARGET_RELEASE_VERSION, ValueKind.DWORD, 1),
        PolicyValue(TARGET_RELEASE_VERSION_INFO, ValueKind.SZ, info.release_label),
        PolicyValue(DEFER_QUALITY_UPDATES, ValueKind.DWORD, 1),
        PolicyValue(DEFER_QUALITY_UPDATES_DAYS, ValueKind.DWORD, int(defer_days)),
    ]


def settings_as_dict(settings: List[PolicyValue]) -> Dict[str, Any]:
    return {s.name: s.value for s in settings}
