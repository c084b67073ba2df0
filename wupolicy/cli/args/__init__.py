# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wupolicy/cli/args/__init__.py
from .parser import build_parser, parse_args_with_config
from .validators import validate_args

__all__ = ["build_parser", "parse_args_with_config", "validate_args"]
