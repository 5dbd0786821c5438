# SPDX-License-Identifier: LGPL-3.0-or-later
"""
Unit tests for the two-phase CLI parse: config files become argparse
defaults, explicit flags win, and validation runs on the merged result.
"""
from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from vcinventory.cli.parser import build_parser, parse_args_with_config
from vcinventory.core.exceptions import REDACTED, ConfigError


def _parse(argv):
    args, conf, _ = parse_args_with_config(argv, logger=MagicMock())
    return args, conf


@pytest.mark.unit
class TestTwoPhaseParse:
    def test_command_from_cli(self):
        args, conf = _parse(["--url", "vc.example.com", "hosts"])
        assert args.cmd == "hosts"
        assert args.url == "vc.example.com"
        assert conf == {}

    def test_config_supplies_command_and_connection(self, tmp_path: Path):
        cfg = tmp_path / "inv.yaml"
        cfg.write_text("url: https://vc/sdk\nusername: admin\ninsecure: true\ncmd: vms\nwith-tags: true\n", encoding="utf-8")

        args, conf = _parse(["--config", str(cfg)])

        assert args.cmd == "vms"
        assert args.url == "https://vc/sdk"
        assert args.insecure is True
        assert args.with_tags is True
        assert conf["username"] == "admin"

    def test_cli_overrides_config(self, tmp_path: Path):
        cfg = tmp_path / "inv.yaml"
        cfg.write_text("cmd: vms\nurl: https://a/sdk\ninsecure: true\n", encoding="utf-8")

        args, _ = _parse(["--config", str(cfg), "--url", "https://b/sdk", "--secure", "hosts"])

        assert args.cmd == "hosts"
        assert args.url == "https://b/sdk"
        assert args.insecure is False

    def test_later_config_wins(self, tmp_path: Path):
        a = tmp_path / "a.yaml"
        b = tmp_path / "b.json"
        a.write_text("cmd: vms\ndatacenter: DC1\n", encoding="utf-8")
        b.write_text(json.dumps({"datacenter": "DC2"}), encoding="utf-8")

        args, _ = _parse(["--config", str(a), "--config", str(b)])
        assert args.datacenter == "DC2"

    def test_command_key_alias(self, tmp_path: Path):
        cfg = tmp_path / "inv.yaml"
        cfg.write_text("command: datastores\n", encoding="utf-8")
        args, _ = _parse(["--config", str(cfg)])
        assert args.cmd == "datastores"

    def test_insecure_unset_is_none(self):
        args, _ = _parse(["overview"])
        assert args.insecure is None

    def test_default_cluster_flag(self, tmp_path: Path):
        args, _ = _parse(["--default-cluster", "clusters"])
        assert args.default_cluster is True

        cfg = tmp_path / "inv.yaml"
        cfg.write_text("cmd: clusters\ndefault-cluster: true\n", encoding="utf-8")
        args, _ = _parse(["--config", str(cfg)])
        assert args.default_cluster is True
        assert _parse(["clusters"])[0].default_cluster is False


@pytest.mark.unit
class TestValidation:
    def test_missing_command(self):
        with pytest.raises(ConfigError, match="Missing command"):
            _parse([])

    def test_unknown_command(self):
        with pytest.raises(ConfigError, match="Unknown command"):
            _parse(["vapps"])

    def test_datacenter_flags_exclusive(self):
        with pytest.raises(ConfigError, match="mutually exclusive"):
            _parse(["--datacenter", "DC1", "--default-datacenter", "hosts"])

    def test_timeout_positive(self):
        with pytest.raises(ConfigError, match="timeout"):
            _parse(["--timeout", "0", "hosts"])

    def test_password_env_must_exist(self, monkeypatch):
        monkeypatch.delenv("VC_TEST_PW", raising=False)
        with pytest.raises(ConfigError, match="VC_TEST_PW"):
            _parse(["--password-env", "VC_TEST_PW", "hosts"])

        monkeypatch.setenv("VC_TEST_PW", "pw")
        args, _ = _parse(["--password-env", "VC_TEST_PW", "hosts"])
        assert args.password_env == "VC_TEST_PW"

    def test_bad_config_file(self, tmp_path: Path):
        cfg = tmp_path / "list.yaml"
        cfg.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="mapping"):
            _parse(["--config", str(cfg), "hosts"])


@pytest.mark.unit
class TestDumps:
    def test_dump_config_redacts_and_exits(self, tmp_path: Path, capsys):
        cfg = tmp_path / "inv.yaml"
        cfg.write_text("url: https://vc/sdk\npassword: hunter2\n", encoding="utf-8")

        with pytest.raises(SystemExit) as ei:
            _parse(["--config", str(cfg), "--dump-config"])

        assert ei.value.code == 0
        out = json.loads(capsys.readouterr().out)
        assert out == {"password": REDACTED, "url": "https://vc/sdk"}

    def test_dump_args_exits_before_validation(self, capsys):
        with pytest.raises(SystemExit) as ei:
            _parse(["--dump-args", "--password", "hunter2"])

        assert ei.value.code == 0
        out = json.loads(capsys.readouterr().out)
        assert out["password"] == REDACTED
        assert out["cmd"] is None


@pytest.mark.unit
class TestBuildParser:
    def test_help_lists_commands(self):
        text = build_parser().format_help()
        assert "host-hardware" in text
        assert "GOVMOMI_URL" in text
