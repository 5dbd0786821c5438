# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tests for the U helper namespace."""
from __future__ import annotations

import datetime as dt
import json
from dataclasses import dataclass
from enum import Enum

import pytest
from vcinventory.core.utils import U


class _Color(Enum):
    GREEN = "green"


@dataclass
class _Point:
    x: int
    y: int


@pytest.mark.unit
class TestHumanBytes:
    @pytest.mark.parametrize(
        "n,expected",
        [
            (None, ""),
            (0, "0B"),
            (512, "512B"),
            (1536, "1.5KiB"),
            (1024 ** 3, "1.0GiB"),
            (int(2.5 * 1024 ** 4), "2.5TiB"),
            (-2048, "-2.0KiB"),
        ],
    )
    def test_values(self, n, expected):
        assert U.human_bytes(n) == expected

    def test_mib_to_bytes(self):
        assert U.mib_to_bytes(None) is None
        assert U.mib_to_bytes(3) == 3 * 1024 * 1024


@pytest.mark.unit
class TestJsonDump:
    def test_sorted_and_indented(self):
        out = U.json_dump({"b": 1, "a": 2})
        assert out.index('"a"') < out.index('"b"')
        assert "\n  " in out

    def test_non_json_types(self):
        when = dt.datetime(2024, 1, 2, 3, 4, 5)
        data = json.loads(U.json_dump({"p": _Point(1, 2), "c": _Color.GREEN, "t": when, "o": object}))

        assert data["p"] == {"x": 1, "y": 2}
        assert data["c"] == "green"
        assert data["t"] == "2024-01-02T03:04:05"
        assert "object" in data["o"]
