# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wupolicy/core/logging_utils.py
from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Iterator


@contextmanager
def log_step(logger: logging.Logger, description: str) -> Iterator[None]:
    """
    Log start and elapsed time of a block. Exceptions are logged and re-raised.

        with log_step(logger, "Detecting Windows version"):
            info = detector.detect()
    """
    started = time.monotonic()
    logger.info("🔎 %s ...", description)
    try:
        yield
    except Exception as e:
        logger.error("💥 %s failed after %.2fs: %s", description, time.monotonic() - started, e)
        raise
    logger.debug("%s took %.2fs", description, time.monotonic() - started)
