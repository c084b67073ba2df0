# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# wupolicy/core/logger.py
"""
Console and file logging for wupolicy.

Interactive runs log to stderr with emoji and termcolor colors. Scheduled runs
have no console at all, so the task passes --log-file and everything of
interest ends up in a size-capped file next to the installed copy.
"""
from __future__ import annotations

import datetime as _dt
import json
import logging
import logging.handlers
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from termcolor import colored as _colored

TRACE = 5
if not hasattr(logging, "TRACE"):
    logging.TRACE = TRACE  # type: ignore[attr-defined]
    logging.addLevelName(TRACE, "TRACE")


def _logger_trace(self: logging.Logger, msg: str, *args, **kwargs) -> None:
    if self.isEnabledFor(TRACE):
        self._log(TRACE, msg, args, **kwargs)


if not hasattr(logging.Logger, "trace"):
    logging.Logger.trace = _logger_trace  # type: ignore[attr-defined]

# Scheduled log file: one annual run appends a few dozen lines, so this is years of history.
LOG_FILE_MAX_BYTES = 1024 * 1024
LOG_FILE_BACKUPS = 2

_LEVELS: Dict[str, Tuple[str, str]] = {
    # levelname: (emoji, termcolor color)
    "TRACE": ("🧬", "cyan"),
    "DEBUG": ("🔍", "blue"),
    "INFO": ("✅", "green"),
    "WARNING": ("⚠️", "yellow"),
    "ERROR": ("💥", "red"),
    "CRITICAL": ("🧨", "red"),
}

Ctx = Mapping[str, Any]


def _stderr_is_console() -> bool:
    try:
        return bool(sys.stderr and sys.stderr.isatty())
    except (AttributeError, ValueError):
        return False


def _console_can_encode_emoji() -> bool:
    # cmd.exe on a legacy code page (cp437, cp1252) raises on emoji.
    enc = getattr(sys.stderr, "encoding", None) or "utf-8"
    try:
        "✅".encode(enc)
    except (UnicodeEncodeError, LookupError):
        return False
    return True


def c(
    text: str,
    color: Optional[str] = None,
    attrs: Optional[List[str]] = None,
    *,
    enable: bool = True,
) -> str:
    """termcolor.colored, or the text unchanged when coloring is off."""
    if not enable or not color:
        return text
    return _colored(text, color=color, attrs=attrs or [])


def _short(v: Any, limit: int = 240) -> str:
    s = str(v).replace("\r", "\\r").replace("\n", "\\n")
    return s if len(s) <= limit else s[: limit - 1] + "…"


def _ctx_suffix(ctx: Optional[Ctx]) -> str:
    if not ctx:
        return ""
    return " " + " ".join(f"{k}={_short(ctx[k])}" for k in sorted(ctx, key=str))


class ContextLoggerAdapter(logging.LoggerAdapter):
    """
    Carries key/values (stage=reconcile, stage=install ...) onto every record
    as record.ctx. Per-call extra={"ctx": {...}} is merged on top.
    """

    def __init__(self, logger: logging.Logger, ctx: Optional[Ctx] = None):
        super().__init__(logger, {"ctx": dict(ctx or {})})

    def process(self, msg: Any, kwargs: Dict[str, Any]) -> Tuple[Any, Dict[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        extra["ctx"] = {**self.extra["ctx"], **(extra.get("ctx") or {})}
        kwargs["extra"] = extra
        return msg, kwargs


@dataclass(frozen=True)
class LogStyle:
    color: bool = True
    emoji: bool = True
    show_ms: bool = False
    show_src: bool = False
    utc: bool = False


class EmojiFormatter(logging.Formatter):
    """HH:MM:SS ✅ INFO     message key=value ..."""

    def __init__(self, style: LogStyle):
        super().__init__()
        self.style = style

    def _stamp(self, created: float) -> str:
        tz = _dt.timezone.utc if self.style.utc else None
        ts = _dt.datetime.fromtimestamp(created, tz=tz)
        return ts.strftime("%H:%M:%S.%f")[:-3] if self.style.show_ms else ts.strftime("%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        emoji, color = _LEVELS.get(record.levelname, ("•", None))
        if not self.style.emoji:
            emoji = "-"

        level = c(f"{record.levelname:<8}", color, enable=self.style.color)
        msg = record.getMessage()
        if record.levelno >= logging.WARNING:
            msg = c(msg, color, ["bold"], enable=self.style.color)

        src = f" [{record.module}:{record.lineno}]" if self.style.show_src else ""
        line = f"{self._stamp(record.created)} {emoji} {level}{src} {msg}{_ctx_suffix(getattr(record, 'ctx', None))}"

        if record.exc_info:
            tb = self.formatException(record.exc_info)
            line += "\n" + c("\n".join("  " + ln for ln in tb.splitlines()), "red", enable=self.style.color)
        return line


class JsonFormatter(logging.Formatter):
    """One JSON object per line, for log files that get collected centrally."""

    def __init__(self, *, utc: bool = True, include_src: bool = True):
        super().__init__()
        self.utc = utc
        self.include_src = include_src

    def format(self, record: logging.LogRecord) -> str:
        tz = _dt.timezone.utc if self.utc else None
        obj: Dict[str, Any] = {
            "ts": _dt.datetime.fromtimestamp(record.created, tz=tz).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "pid": os.getpid(),
        }
        if self.include_src:
            obj["module"] = record.module
            obj["lineno"] = record.lineno
        ctx = getattr(record, "ctx", None)
        if ctx:
            obj["ctx"] = {str(k): _short(v) for k, v in ctx.items()}
        if record.exc_info:
            obj["exc_type"] = record.exc_info[0].__name__ if record.exc_info[0] else "Exception"
            obj["traceback"] = self.formatException(record.exc_info)
        return json.dumps(obj, ensure_ascii=False, default=str)


_warned: set = set()


class Log:
    @staticmethod
    def _level_from_flags(verbose: int, quiet: int) -> int:
        """
        -qq ERROR, -q WARNING, default INFO, -v DEBUG, -vv TRACE.
        Quiet wins over verbose.
        """
        if quiet >= 2:
            return logging.ERROR
        if quiet == 1:
            return logging.WARNING
        if verbose >= 2:
            return TRACE
        if verbose == 1:
            return logging.DEBUG
        return logging.INFO

    @staticmethod
    def bind(logger: Union[logging.Logger, logging.LoggerAdapter], **ctx: Any) -> ContextLoggerAdapter:
        return ContextLoggerAdapter(logger, ctx)  # type: ignore[arg-type]

    @staticmethod
    def banner(logger: logging.Logger, title: str) -> None:
        logger.info("──── %s ────", title.strip())

    @staticmethod
    def step(logger: logging.Logger, msg: str, **ctx: Any) -> None:
        logger.info("➡️  %s", msg, extra={"ctx": ctx} if ctx else None)

    @staticmethod
    def ok(logger: logging.Logger, msg: str, **ctx: Any) -> None:
        logger.info("✅ %s", msg, extra={"ctx": ctx} if ctx else None)

    @staticmethod
    def warn(logger: logging.Logger, msg: str, **ctx: Any) -> None:
        logger.warning("⚠️  %s", msg, extra={"ctx": ctx} if ctx else None)

    @staticmethod
    def fail(logger: logging.Logger, msg: str, **ctx: Any) -> None:
        logger.error("💥 %s", msg, extra={"ctx": ctx} if ctx else None)

    @staticmethod
    def trace(logger: logging.Logger, msg: str, *args: Any) -> None:
        logger.trace(msg, *args)  # type: ignore[attr-defined]

    @staticmethod
    def warn_once(logger: logging.Logger, key: Union[str, Tuple[Any, ...]], msg: str) -> bool:
        """Warn once per process for key. Returns False when suppressed."""
        k = key if isinstance(key, str) else "|".join(map(str, key))
        if k in _warned:
            return False
        _warned.add(k)
        logger.warning("⚠️  %s", msg)
        return True

    @staticmethod
    def setup(
        verbose: int = 0,
        log_file: Optional[str] = None,
        *,
        quiet: int = 0,
        color: Optional[bool] = None,
        utc: bool = False,
        logger_name: str = "wupolicy",
        json_logs: bool = False,
    ) -> logging.Logger:
        """
        Configure and return the project logger.

        The console handler honors -v/-q. The file handler always records
        DEBUG and up (TRACE with -vv): a scheduled run can't be re-run with
        more verbosity after the fact.
        """
        level = Log._level_from_flags(verbose, quiet)
        file_level = min(level, logging.DEBUG)

        logger = logging.getLogger(logger_name)
        logger.propagate = False
        logger.setLevel(file_level if log_file else level)
        for h in list(logger.handlers):
            logger.removeHandler(h)
            h.close()

        console = logging.StreamHandler(stream=sys.stderr)
        console.setLevel(level)
        if json_logs:
            console.setFormatter(JsonFormatter(utc=utc))
        else:
            use_color = _stderr_is_console() if color is None else color
            console.setFormatter(
                EmojiFormatter(
                    LogStyle(
                        color=use_color,
                        emoji=_console_can_encode_emoji(),
                        show_ms=verbose >= 2,
                        show_src=verbose >= 2,
                        utc=utc,
                    )
                )
            )
        logger.addHandler(console)

        if log_file:
            path = Path(log_file).expanduser()
            path.parent.mkdir(parents=True, exist_ok=True)
            fh = logging.handlers.RotatingFileHandler(
                path, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS, encoding="utf-8"
            )
            fh.setLevel(file_level)
            if json_logs:
                fh.setFormatter(JsonFormatter(utc=utc))
            else:
                fh.setFormatter(EmojiFormatter(LogStyle(color=False, emoji=True, show_ms=True, show_src=True, utc=utc)))
            logger.addHandler(fh)

        logger.debug("Logging ready (console=%s, file=%s)", logging.getLevelName(level), log_file or "-")
        return logger
