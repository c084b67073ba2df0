# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wupolicy/cli/args/validators.py
from __future__ import annotations

import argparse
import shlex
from typing import Any, Dict, List

from ...config.defaults import ON_ERROR_CHOICES
from ...core.exceptions import ConfigError, StoreError
from ...detect.version import extract_release_label
from ...schedule.task_template import parse_start_time
from ...policy.store import split_namespace


def _bad(msg: str) -> ConfigError:
    return ConfigError(code=2, msg=msg)


def _normalize_refresh_command(v: Any) -> List[str]:
    if isinstance(v, (list, tuple)):
        out = [str(x) for x in v if str(x).strip()]
    elif isinstance(v, str):
        # Windows paths: keep backslashes literal.
        out = shlex.split(v, posix=False)
    else:
        out = []
    if not out:
        raise _bad("refresh_command must be a non-empty command")
    return out


def _as_int(args: argparse.Namespace, name: str) -> int:
    # Config values bypass argparse type=, so YAML "4" and 4 both land here.
    v = getattr(args, name)
    try:
        iv = int(v)
    except (TypeError, ValueError):
        raise _bad(f"{name} must be an integer, got {v!r}") from None
    setattr(args, name, iv)
    return iv


def validate_args(args: argparse.Namespace, conf: Dict[str, Any]) -> None:
    """
    Check merged (config + CLI) values and normalize them in place.
    Raises ConfigError on anything the run could not use.
    """
    defer = _as_int(args, "defer_days")
    if not 0 <= defer <= 30:
        raise _bad(f"defer_days must be within 0..30, got {defer}")

    interval = _as_int(args, "interval_days")
    if not 1 <= interval <= 365:
        raise _bad(f"interval_days must be within 1..365, got {interval}")

    try:
        parse_start_time(str(args.start_time))
    except ValueError as e:
        raise _bad(str(e)) from e

    label = str(args.fallback_label or "").strip()
    if extract_release_label(label, exact=True) is None:
        raise _bad(f"fallback_label must look like 24H2, got {args.fallback_label!r}")
    args.fallback_label = label

    try:
        split_namespace(str(args.policy_namespace))
    except StoreError as e:
        raise _bad(f"policy_namespace: {e}") from e

    if str(args.on_error) not in ON_ERROR_CHOICES:
        raise _bad(f"on_error must be one of {', '.join(ON_ERROR_CHOICES)}, got {args.on_error!r}")

    args.refresh_command = _normalize_refresh_command(args.refresh_command)

    if not str(args.task_name or "").strip():
        raise _bad("task_name cannot be empty")

    if args.output and not args.print_task_xml:
        raise _bad("--output only applies to --print-task-xml")
