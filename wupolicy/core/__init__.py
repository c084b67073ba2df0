# SPDX-License-Identifier: LGPL-3.0-or-later
# wupolicy/core/__init__.py
from .exceptions import Fatal, WuPolicyError
from .result import BatchReport, OperationResult

__all__ = ["Fatal", "WuPolicyError", "BatchReport", "OperationResult"]
