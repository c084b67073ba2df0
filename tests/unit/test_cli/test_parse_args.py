# SPDX-License-Identifier: LGPL-3.0-or-later
"""Two-phase parse: config files as defaults, command line wins."""
from __future__ import annotations

import json

import pytest

from fakes.fake_logger import FakeLogger
from wupolicy.cli.args import parse_args_with_config
from wupolicy.core.exceptions import ConfigError


def _parse(argv):
    args, conf, _logger = parse_args_with_config(argv, logger=FakeLogger())
    return args, conf


@pytest.mark.unit
class TestDefaults:
    def test_interactive_defaults(self):
        args, conf = _parse([])
        assert conf == {}
        assert args.scheduled is False
        assert args.policy_namespace == r"HKLM\SOFTWARE\Policies\Microsoft\Windows\WindowsUpdate"
        assert args.defer_days == 4
        assert args.interval_days == 365
        assert args.fallback_label == "24H2"
        assert args.refresh_command == ["gpupdate", "/force"]
        assert args.on_error == "continue"

    @pytest.mark.parametrize("flag", ["--scheduled", "-Scheduled"])
    def test_scheduled_aliases(self, flag):
        args, _ = _parse([flag])
        assert args.scheduled is True


@pytest.mark.unit
class TestConfigFiles:
    def test_config_supplies_defaults(self, tmp_path):
        cfg = tmp_path / "wupolicy.yaml"
        cfg.write_text("defer-days: 10\ntask_name: pin-updates\nrefresh_command: [gpupdate, /target:computer]\n")
        args, conf = _parse(["--config", str(cfg)])
        assert conf["defer_days"] == 10
        assert args.defer_days == 10
        assert args.task_name == "pin-updates"
        assert args.refresh_command == ["gpupdate", "/target:computer"]

    def test_cli_overrides_config(self, tmp_path):
        cfg = tmp_path / "wupolicy.yaml"
        cfg.write_text("defer_days: 10\n")
        args, _ = _parse(["--config", str(cfg), "--defer-days", "2"])
        assert args.defer_days == 2

    def test_later_config_wins(self, tmp_path):
        (tmp_path / "a.yaml").write_text("defer_days: 10\nstart_time: '01:00'\n")
        (tmp_path / "b.json").write_text(json.dumps({"defer_days": 12}))
        args, _ = _parse(["--config", str(tmp_path)])
        assert args.defer_days == 12
        assert args.start_time == "01:00"

    def test_unknown_key_is_ignored_with_warning(self, tmp_path):
        cfg = tmp_path / "wupolicy.yaml"
        cfg.write_text("colour: blue\n")
        logger = FakeLogger()
        parse_args_with_config(["--config", str(cfg)], logger=logger)
        assert any("colour" in m for m in logger.messages("warning"))

    def test_string_refresh_command_is_split(self):
        args, _ = _parse(["--refresh-command", "gpupdate /target:computer /force"])
        assert args.refresh_command == ["gpupdate", "/target:computer", "/force"]

    def test_non_mapping_config_is_rejected(self, tmp_path):
        cfg = tmp_path / "wupolicy.yaml"
        cfg.write_text("- a\n- b\n")
        with pytest.raises(ConfigError):
            _parse(["--config", str(cfg)])

    def test_missing_config_file(self, tmp_path):
        with pytest.raises(ConfigError) as ei:
            _parse(["--config", str(tmp_path / "absent.yaml")])
        assert ei.value.code == 2

    def test_dump_config_exits(self, tmp_path, capsys):
        cfg = tmp_path / "wupolicy.yaml"
        cfg.write_text("defer_days: 9\n")
        with pytest.raises(SystemExit) as ei:
            _parse(["--config", str(cfg), "--dump-config"])
        assert ei.value.code == 0
        assert json.loads(capsys.readouterr().out) == {"defer_days": 9}


@pytest.mark.unit
class TestValidation:
    @pytest.mark.parametrize(
        "argv",
        [
            ["--defer-days", "31"],
            ["--interval-days", "0"],
            ["--interval-days", "400"],
            ["--start-time", "noon"],
            ["--fallback-label", "2009"],
            ["--policy-namespace", "SOFTWARE\\Policies"],
            ["--task-name", "  "],
            ["--output", "task.xml"],
        ],
    )
    def test_rejected(self, argv):
        with pytest.raises(ConfigError):
            _parse(argv)

    def test_bad_on_error_from_config(self, tmp_path):
        cfg = tmp_path / "wupolicy.yaml"
        cfg.write_text("on_error: explode\n")
        with pytest.raises(ConfigError):
            _parse(["--config", str(cfg)])

    def test_non_integer_from_config(self, tmp_path):
        cfg = tmp_path / "wupolicy.yaml"
        cfg.write_text("defer_days: [1, 2]\n")
        with pytest.raises(ConfigError):
            _parse(["--config", str(cfg)])

    def test_output_with_print_task_xml(self):
        args, _ = _parse(["--print-task-xml", "--output", "task.xml"])
        assert args.output == "task.xml"
