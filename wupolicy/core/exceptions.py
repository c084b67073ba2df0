# SPDX-License-Identifier: LGPL-3.0-or-later
# wupolicy/core/exceptions.py
"""
Error types.

Exit codes used by the CLI:
   2  configuration or argument error, policy store unavailable
   3  a step failed and on_error=fail
  20  policy store read/write (StoreError)
  30  task scheduler (SchedulerError)
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


def _exit_code(code: Any) -> int:
    # Task Scheduler's "Last Run Result" only shows 0..255 meaningfully.
    try:
        n = int(code)
    except (TypeError, ValueError):
        return 1
    if n < 0:
        return 1
    return min(n, 255)


def _flatten(text: Optional[str], limit: int = 600) -> str:
    s = " ".join((text or "").split())
    return s if len(s) <= limit else s[: limit - 3] + "..."


@dataclass(eq=False)
class WuPolicyError(Exception):
    """
    Base error: an exit code, a one-line message, the underlying cause and
    free-form context (namespace, key, task name ...).
    """
    code: int = 1
    msg: str = "error"
    cause: Optional[BaseException] = None
    context: Optional[Dict[str, Any]] = None

    def __post_init__(self) -> None:
        self.code = _exit_code(self.code)
        self.msg = _flatten(self.msg) or type(self).__name__
        super().__init__(self.msg)

    def user_message(self, *, include_context: bool = False, include_cause: bool = False) -> str:
        out = self.msg
        if include_context and self.context:
            out += " [" + ", ".join(f"{k}={self.context[k]!r}" for k in sorted(self.context)) + "]"
        if include_cause and self.cause is not None:
            out += f" (cause: {type(self.cause).__name__}: {_flatten(str(self.cause))})"
        return out

    def __str__(self) -> str:
        return self.msg

    def to_dict(self, *, include_cause: bool = False) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "type": type(self).__name__,
            "code": self.code,
            "message": self.msg,
            "context": dict(self.context or {}),
        }
        if include_cause and self.cause is not None:
            d["cause"] = {"type": type(self.cause).__name__, "message": _flatten(str(self.cause))}
        return d


class Fatal(WuPolicyError):
    """Ends the run; main() exits with .code."""


class ConfigError(Fatal):
    """Config file or argument value the run cannot use."""


class StoreError(WuPolicyError):
    """Policy store read/write failed (privilege, missing hive, unsupported value type)."""


class ProbeError(WuPolicyError):
    """A version probe failed or returned nothing usable."""


class SchedulerError(WuPolicyError):
    """Task Scheduler query or registration failed."""


def wrap_fatal(msg: str, exc: Optional[BaseException] = None, code: int = 1, **context: Any) -> Fatal:
    return Fatal(code=code, msg=msg, cause=exc, context=context or None)


def wrap_store(msg: str, exc: Optional[BaseException] = None, code: int = 20, **context: Any) -> StoreError:
    return StoreError(code=code, msg=msg, cause=exc, context=context or None)


def wrap_scheduler(msg: str, exc: Optional[BaseException] = None, code: int = 30, **context: Any) -> SchedulerError:
    return SchedulerError(code=code, msg=msg, cause=exc, context=context or None)


def format_exception_for_cli(e: BaseException, *, verbose: int = 0) -> str:
    """One line for the console: -v adds context, -vv adds the cause."""
    if isinstance(e, WuPolicyError):
        return e.user_message(include_context=verbose >= 1, include_cause=verbose >= 2)
    text = _flatten(str(e)) or type(e).__name__
    return f"{type(e).__name__}: {text}" if verbose >= 2 else text
