# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wupolicy/detect/probes.py
"""
Host probes used by the version detector.

Each probe is a zero-argument callable. Probes may raise; the detector is the
one place that catches and masks their failures.
"""
from __future__ import annotations

import importlib
import logging
import platform
import re
import sys
from typing import Optional, Tuple

from ..core.exceptions import ProbeError
from ..core.utils import U

CURRENT_VERSION_KEY = r"SOFTWARE\Microsoft\Windows NT\CurrentVersion"

_VERSION_TRIPLE_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)")


def _winreg():
    try:
        return importlib.import_module("winreg")
    except ImportError as exc:
        raise ProbeError(msg="winreg is available only on Windows", cause=exc)


def parse_version_string(s: str) -> Tuple[int, int]:
    """'10.0.22631' -> (10, 22631)."""
    m = _VERSION_TRIPLE_RE.match((s or "").strip())
    if not m:
        raise ProbeError(msg=f"Unrecognized OS version string: {s!r}")
    return int(m.group(1)), int(m.group(3))


def host_version() -> Tuple[int, int]:
    """
    (major, build) of the running OS.
    """
    getwinver = getattr(sys, "getwindowsversion", None)
    if callable(getwinver):
        v = getwinver()
        return int(v.major), int(v.build)
    return parse_version_string(platform.version())


def structured_display_version() -> Optional[str]:
    """
    DisplayVersion from the CurrentVersion key (ReleaseId on builds before 20H2).
    """
    winreg = _winreg()
    with winreg.OpenKey(winreg.HKEY_LOCAL_MACHINE, CURRENT_VERSION_KEY) as key:
        for name in ("DisplayVersion", "ReleaseId"):
            try:
                value, _ = winreg.QueryValueEx(key, name)
            except FileNotFoundError:
                continue
            if value:
                return str(value)
    return None


def systeminfo_report(logger: Optional[logging.Logger] = None) -> str:
    """Full text of `systeminfo`."""
    lg = logger or logging.getLogger("wupolicy.detect")
    cp = U.run_cmd(lg, ["systeminfo"], capture=True, check=True)
    return cp.stdout or ""
