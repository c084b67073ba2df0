# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wupolicy/core/result.py
"""
Per-step outcomes.

Every side-effecting step (one policy value write, the policy refresh, the
artifact copy, the task registration) returns an OperationResult instead of
raising. A BatchReport collects them so the top-level caller decides whether
a failure is logged and ignored or turned into a non-zero exit.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .exceptions import WuPolicyError


@dataclass(frozen=True)
class OperationResult:
    step: str
    ok: bool
    error: Optional[str] = None
    detail: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def success(cls, step: str, **detail: Any) -> "OperationResult":
        return cls(step=step, ok=True, detail=detail)

    @classmethod
    def failure(cls, step: str, err: BaseException, **detail: Any) -> "OperationResult":
        if isinstance(err, WuPolicyError):
            msg = err.user_message(include_cause=True)
        else:
            msg = f"{type(err).__name__}: {err}"
        return cls(step=step, ok=False, error=msg, detail=detail)

    def to_dict(self) -> Dict[str, Any]:
        return {"step": self.step, "ok": self.ok, "error": self.error, "detail": dict(self.detail)}


@dataclass
class BatchReport:
    name: str
    results: List[OperationResult] = field(default_factory=list)

    def add(self, result: OperationResult) -> OperationResult:
        self.results.append(result)
        return result

    @property
    def failures(self) -> List[OperationResult]:
        return [r for r in self.results if not r.ok]

    @property
    def ok(self) -> bool:
        return not self.failures

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "ok": self.ok,
            "results": [r.to_dict() for r in self.results],
        }
