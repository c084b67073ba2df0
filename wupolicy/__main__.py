# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wupolicy/__main__.py
from __future__ import annotations

import logging
import sys
import traceback
from typing import Optional

# Absolute imports: run_wupolicy.py and frozen builds execute this module
# outside of "python -m wupolicy".
from wupolicy.cli.args import parse_args_with_config
from wupolicy.core.exceptions import Fatal, format_exception_for_cli, wrap_fatal
from wupolicy.orchestrator import Orchestrator


def _print_stderr(msg: str) -> None:
    print(msg, file=sys.stderr)


def _safe_log(logger: Optional[logging.Logger], level: str, msg: str) -> None:
    if logger is None:
        _print_stderr(msg)
        return
    getattr(logger, level)(msg)


def main(argv: Optional[list] = None) -> None:
    logger: Optional[logging.Logger] = None

    # Phase 1: parse (Fatal can happen here, e.g. a broken config file;
    # OSError when the --log-file location is not writable)
    try:
        args, _conf, logger = parse_args_with_config(argv)
    except Fatal as e:
        _safe_log(logger, "error", f"💥 ERROR    {format_exception_for_cli(e, verbose=1)}")
        raise SystemExit(e.code)
    except OSError as e:
        fatal = wrap_fatal(f"Cannot start: {e}", e, code=2)
        _safe_log(logger, "error", f"💥 ERROR    {format_exception_for_cli(fatal, verbose=1)}")
        raise SystemExit(fatal.code) from e
    except KeyboardInterrupt:
        _safe_log(logger, "warning", "Interrupted by user (Ctrl+C).")
        raise SystemExit(130)

    # Phase 2: detect -> reconcile -> install
    try:
        rc = Orchestrator(logger, args).run()
    except Fatal as e:
        _safe_log(logger, "error", format_exception_for_cli(e, verbose=args.verbose))
        rc = e.code
    except KeyboardInterrupt:
        _safe_log(logger, "warning", "Interrupted by user (Ctrl+C).")
        rc = 130
    except Exception as e:
        _safe_log(logger, "error", f"💥 UNHANDLED {type(e).__name__}: {e}")
        _safe_log(logger, "debug", traceback.format_exc())
        rc = 1

    raise SystemExit(rc)


if __name__ == "__main__":
    main()
