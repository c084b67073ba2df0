# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wupolicy/config/config_loader.py
"""
YAML/JSON config loading for the two-phase argument parse.

Config files only supply defaults: whatever the command line sets wins.
Several files may be given; later files override earlier ones key by key
(nested mappings merge, everything else is replaced).
"""
from __future__ import annotations

import argparse
import glob
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Sequence

import yaml

from ..core.exceptions import ConfigError

CONFIG_SUFFIXES = (".yaml", ".yml", ".json")


def _deep_merge(base: Dict[str, Any], over: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(base)
    for k, v in over.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _normalize_key(k: Any) -> str:
    return str(k).strip().replace("-", "_")


class Config:
    @staticmethod
    def expand_configs(logger: logging.Logger, cfgs: Sequence[str]) -> List[str]:
        """
        Expand globs and directories into an ordered list of files.
        Directories contribute their *.yaml/*.yml/*.json files in name order.
        """
        out: List[str] = []
        for raw in cfgs:
            s = str(raw).strip()
            if not s:
                continue
            p = Path(s).expanduser()
            if p.is_dir():
                found = sorted(x for x in p.iterdir() if x.is_file() and x.suffix.lower() in CONFIG_SUFFIXES)
                logger.debug("Config dir %s -> %d file(s)", p, len(found))
                out.extend(str(x) for x in found)
                continue
            if any(ch in s for ch in "*?["):
                matches = sorted(glob.glob(str(p)))
                if not matches:
                    logger.warning("Config glob matched nothing: %s", s)
                out.extend(matches)
                continue
            out.append(str(p))
        return out

    @staticmethod
    def load_one(logger: logging.Logger, path: str) -> Dict[str, Any]:
        p = Path(path)
        try:
            raw = p.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(code=2, msg=f"Cannot read config file: {p}", cause=e)

        try:
            if p.suffix.lower() == ".json":
                parsed = json.loads(raw) if raw.strip() else {}
            else:
                parsed = yaml.safe_load(raw)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigError(code=2, msg=f"Cannot parse config file {p}: {e}", cause=e)

        if parsed is None:
            parsed = {}
        if not isinstance(parsed, dict):
            raise ConfigError(code=2, msg=f"Config file must contain a mapping at top level: {p}")

        logger.debug("Loaded config %s (%d keys)", p, len(parsed))
        return {_normalize_key(k): v for k, v in parsed.items()}

    @staticmethod
    def load_many(logger: logging.Logger, paths: Sequence[str]) -> Dict[str, Any]:
        merged: Dict[str, Any] = {}
        for path in paths:
            merged = _deep_merge(merged, Config.load_one(logger, path))
        return merged

    @staticmethod
    def apply_as_defaults(logger: logging.Logger, parser: argparse.ArgumentParser, conf: Dict[str, Any]) -> None:
        """
        Push config values onto the parser as defaults so CLI flags override them.
        Keys that match no argument are reported and ignored.
        """
        if not conf:
            return
        dests = {a.dest for a in parser._actions}  # noqa: SLF001 - argparse has no public accessor
        known = {k: v for k, v in conf.items() if k in dests}
        for k in sorted(set(conf) - set(known)):
            logger.warning("Ignoring unknown config key: %s", k)
        if known:
            parser.set_defaults(**known)

    @staticmethod
    def dump_yaml(conf: Dict[str, Any]) -> str:
        return yaml.safe_dump(conf, default_flow_style=False, sort_keys=True)
