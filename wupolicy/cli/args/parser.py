# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Dict, Optional, Sequence, Tuple

from ...config.config_loader import Config
from ...core.logger import Log, c
from ...core.utils import U
from .builder import HelpFormatter, _build_epilog
from .groups import _add_global_config_logging, _add_policy_knobs, _add_run_mode, _add_schedule_knobs
from .validators import validate_args


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="wupolicy",
        description=c("wupolicy: pin Windows Update to the installed feature release", "green", ["bold"]),
        formatter_class=HelpFormatter,
        epilog=_build_epilog(),
    )

    _add_global_config_logging(p)
    _add_run_mode(p)
    _add_policy_knobs(p)
    _add_schedule_knobs(p)

    return p


def _build_preparser() -> argparse.ArgumentParser:
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument("--config", action="append", default=[])
    pre.add_argument("-v", "--verbose", action="count", default=0)
    pre.add_argument("-q", "--quiet", action="count", default=0)
    pre.add_argument("--log-file", dest="log_file", default=None)
    pre.add_argument("--json-logs", dest="json_logs", action="store_true")
    pre.add_argument("--dump-config", action="store_true")
    pre.add_argument("--dump-args", action="store_true")
    return pre


def _load_merged_config(logger: logging.Logger, cfgs: Sequence[str]) -> Dict[str, Any]:
    if not cfgs:
        return {}
    expanded = Config.expand_configs(logger, list(cfgs))
    return Config.load_many(logger, expanded)


def parse_args_with_config(
    argv: Optional[Sequence[str]] = None,
    logger: Optional[logging.Logger] = None,
) -> Tuple[argparse.Namespace, Dict[str, Any], logging.Logger]:
    """
    Returns (args, merged config, logger).

    Logging and --config are read first so config loading can log. Config
    values then become parser defaults, which makes every command-line flag
    override the file. validate_args normalizes the result in place.
    """
    argv = list(sys.argv[1:] if argv is None else argv)

    early, _ = _build_preparser().parse_known_args(argv)
    if logger is None:
        logger = Log.setup(early.verbose, early.log_file, quiet=early.quiet, json_logs=early.json_logs)

    conf = _load_merged_config(logger, early.config)
    if early.dump_config:
        print(U.json_dump(conf))
        raise SystemExit(0)

    parser = build_parser()
    Config.apply_as_defaults(logger, parser, conf)
    args = parser.parse_args(argv)
    validate_args(args, conf)

    if early.dump_args:
        print(U.json_dump(vars(args)))
        raise SystemExit(0)
    return args, conf, logger
