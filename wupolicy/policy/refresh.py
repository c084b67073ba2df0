# SPDX-License-Identifier: LGPL-3.0-or-later
# wupolicy/policy/refresh.py
from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..config.defaults import REFRESH_COMMAND
from ..core.logger import Log
from ..core.utils import U


class PolicyRefresher:
    """Makes freshly written policy take effect now instead of at the next GP cycle."""

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        command: Optional[Sequence[str]] = None,
        *,
        dry_run: bool = False,
        timeout: Optional[int] = None,
    ):
        self.logger = logger or logging.getLogger("wupolicy.refresh")
        self.command = list(command or REFRESH_COMMAND)
        self.dry_run = dry_run
        self.timeout = timeout

    def refresh(self) -> None:
        if self.dry_run:
            Log.step(self.logger, f"[dry-run] would run {U._pretty_cmd(self.command)}")
            return
        U.run_cmd(self.logger, self.command, capture=True, check=True, timeout=self.timeout)
