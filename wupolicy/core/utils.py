# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wupolicy/core/utils.py
from __future__ import annotations

import ctypes
import json
import logging
import os
import subprocess
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional


class U:
    @staticmethod
    def ensure_dir(p: Path) -> None:
        p.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def json_dump(obj: Any) -> str:
        return json.dumps(obj, indent=2, sort_keys=True, default=str)

    @staticmethod
    def is_windows() -> bool:
        return os.name == "nt"

    @staticmethod
    def is_admin() -> bool:
        """
        True when the process token is elevated.
        Off Windows this falls back to euid 0 so dry runs on a dev box behave.
        """
        if U.is_windows():
            try:
                return bool(ctypes.windll.shell32.IsUserAnAdmin())  # type: ignore[attr-defined]
            except (AttributeError, OSError):
                return False
        geteuid = getattr(os, "geteuid", None)
        return bool(geteuid and geteuid() == 0)

    @staticmethod
    def _pretty_cmd(cmd: List[str]) -> str:
        return subprocess.list2cmdline(cmd)

    @staticmethod
    def run_cmd(
        logger: logging.Logger,
        cmd: List[str],
        *,
        check: bool = True,
        capture: bool = False,
        timeout: Optional[int] = None,
    ) -> subprocess.CompletedProcess:
        """
        subprocess.run with text output and failure logging.

        timeout=None waits for the command however long it takes. With
        check=True a non-zero exit is logged (including any captured output)
        and the CalledProcessError propagates to the caller.
        """
        pretty = U._pretty_cmd(cmd)
        logger.debug("Running: %s", pretty)

        kwargs: Dict[str, Any] = {}
        if U.is_windows():
            # Scheduled runs have no console; don't let children allocate one.
            kwargs["creationflags"] = subprocess.CREATE_NO_WINDOW

        try:
            return subprocess.run(
                cmd,
                check=check,
                capture_output=capture,
                text=True,
                errors="replace",
                timeout=timeout,
                **kwargs,
            )
        except subprocess.CalledProcessError as e:
            output = "\n".join(s.strip() for s in (e.stdout, e.stderr) if s and s.strip())
            logger.error("Command failed (rc=%s): %s%s", e.returncode, pretty, f"\n{output}" if output else "")
            raise
        except subprocess.TimeoutExpired:
            logger.error("Command timed out after %ss: %s", timeout, pretty)
            raise
        except OSError as e:
            logger.error("Cannot run %s: %s", pretty, e)
            raise

    @staticmethod
    def running_artifact() -> Path:
        """
        The file the scheduled task should re-run.

        Frozen builds (PyInstaller and friends) are the exe itself; otherwise
        it is the launcher script that started this interpreter.
        """
        if getattr(sys, "frozen", False):
            return Path(sys.executable).resolve()
        p = Path(sys.argv[0]).resolve()
        # pip console launchers report argv[0] without the .exe suffix.
        if not p.exists() and p.with_name(p.name + ".exe").exists():
            return p.with_name(p.name + ".exe")
        return p
