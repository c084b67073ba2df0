# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wupolicy/core/file_ops.py
"""
File helpers for the install directory.

Anything a scheduled run reads back (its config, a task definition handed to
schtasks) is written through atomic_write so an interrupted install never
leaves a truncated file behind.
"""
from __future__ import annotations

import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator


@contextmanager
def atomic_write(target: Path) -> Iterator[Path]:
    """
    Yield a scratch path beside target; on clean exit it replaces target.

        with atomic_write(install_dir / "wupolicy.yaml") as tmp:
            tmp.write_text(text, encoding="utf-8")
    """
    target = Path(target)
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".part", dir=str(target.parent))
    os.close(fd)
    scratch = Path(name)
    try:
        yield scratch
        os.replace(scratch, target)
    finally:
        if scratch.exists():
            scratch.unlink()


def same_file(a: Path, b: Path) -> bool:
    """True when a and b both exist and are the same file (scheduled copy re-running itself)."""
    try:
        return os.path.samefile(a, b)
    except OSError:
        return False
