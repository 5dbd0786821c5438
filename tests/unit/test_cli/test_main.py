# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tests for the console entry point exit codes."""
from __future__ import annotations

from unittest.mock import MagicMock

import pytest

import vcinventory.__main__ as main_mod


@pytest.mark.unit
class TestMain:
    def test_usage_error_exits_2(self):
        with pytest.raises(SystemExit) as ei:
            main_mod.main(["--no-color", "-qq"])
        assert ei.value.code == 2

    def test_command_exit_code_is_propagated(self, monkeypatch):
        run = MagicMock(return_value=10)
        monkeypatch.setattr(main_mod, "run_inventory_command", run)

        with pytest.raises(SystemExit) as ei:
            main_mod.main(["--no-color", "-qq", "hosts"])

        assert ei.value.code == 10
        args, conf, _logger = run.call_args[0]
        assert args.cmd == "hosts"
        assert conf == {}

    def test_unhandled_error_exits_1(self, monkeypatch):
        monkeypatch.setattr(main_mod, "run_inventory_command", MagicMock(side_effect=RuntimeError("boom")))
        with pytest.raises(SystemExit) as ei:
            main_mod.main(["--no-color", "-qq", "hosts"])
        assert ei.value.code == 1
