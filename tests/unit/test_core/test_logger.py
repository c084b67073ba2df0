# SPDX-License-Identifier: LGPL-3.0-or-later
from __future__ import annotations

import json
import logging

import pytest

from wupolicy.core.logger import TRACE, JsonFormatter, Log


@pytest.mark.unit
@pytest.mark.parametrize(
    "verbose,quiet,level",
    [(0, 0, logging.INFO), (1, 0, logging.DEBUG), (2, 0, TRACE), (0, 1, logging.WARNING), (3, 2, logging.ERROR)],
)
def test_level_from_flags(verbose, quiet, level):
    assert Log._level_from_flags(verbose, quiet) == level


@pytest.mark.unit
def test_setup_writes_log_file(tmp_path):
    log_file = tmp_path / "logs" / "wupolicy.log"
    logger = Log.setup(0, str(log_file), logger_name="wupolicy.test.file")
    Log.ok(logger, "TargetReleaseVersionInfo = '23H2'", kind="REG_SZ")
    for h in logger.handlers:
        h.flush()
    text = log_file.read_text(encoding="utf-8")
    assert "TargetReleaseVersionInfo" in text
    assert "kind=REG_SZ" in text
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()


@pytest.mark.unit
def test_json_formatter_includes_bound_context():
    rec = logging.LogRecord("wupolicy", logging.WARNING, __file__, 1, "write failed: %s", ("denied",), None)
    rec.ctx = {"key": "ProductVersion"}
    obj = json.loads(JsonFormatter(utc=True).format(rec))
    assert obj["msg"] == "write failed: denied"
    assert obj["level"] == "WARNING"
    assert obj["ctx"] == {"key": "ProductVersion"}


@pytest.mark.unit
def test_bind_merges_context():
    seen = []

    class Capture(logging.Handler):
        def emit(self, record):
            seen.append(record.ctx)

    base = logging.getLogger("wupolicy.test.bind")
    base.propagate = False
    base.setLevel(logging.INFO)
    base.addHandler(Capture())

    log = Log.bind(base, stage="install")
    Log.ok(log, "copied", dest="x")
    assert seen == [{"stage": "install", "dest": "x"}]


@pytest.mark.unit
def test_warn_once():
    records = []

    class Capture(logging.Handler):
        def emit(self, record):
            records.append(record)

    lg = logging.getLogger("wupolicy.test.once")
    lg.propagate = False
    lg.addHandler(Capture())
    assert Log.warn_once(lg, ("test-once", 1), "first") is True
    assert Log.warn_once(lg, ("test-once", 1), "second") is False
    assert len(records) == 1
