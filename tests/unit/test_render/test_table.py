# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tests for plain aligned table rendering."""
from __future__ import annotations

import pytest

from vcinventory.render.table import build_table, render


@pytest.mark.unit
class TestRender:
    def test_header_then_rows_aligned(self):
        out = render(("Name", "Type"), [("ds1", "VMFS"), ("nfs-datastore", "NFS")])
        lines = out.splitlines()

        assert len(lines) == 3
        assert lines[0].split() == ["Name", "Type"]
        assert lines[2].split() == ["nfs-datastore", "NFS"]
        # second column starts at the same offset on every line
        offsets = {line.index(word) for line, word in zip(lines, ("Type", "VMFS", "NFS"))}
        assert len(offsets) == 1
        assert out.endswith("\n")

    def test_no_ansi_or_borders(self):
        out = render(("A",), [("[bold]x[/bold]",)])
        assert "\x1b[" not in out
        assert "[bold]x[/bold]" in out
        assert "│" not in out and "─" not in out

    def test_no_trailing_whitespace(self):
        out = render(("A", "B"), [("long value", "")])
        assert all(line == line.rstrip() for line in out.splitlines())

    def test_short_rows_padded_long_rows_truncated(self):
        table = build_table(("A", "B", "C"), [("1",), ("1", "2", "3", "4")])
        assert len(table.columns) == 3
        assert table.row_count == 2

        out = render(("A", "B"), [("1", "2", "extra")])
        assert "extra" not in out

    def test_none_renders_empty(self):
        out = render(("A", "B"), [(None, "x")])
        assert "None" not in out

    def test_header_only_when_no_rows(self):
        assert render(("Name", "Count"), []).splitlines()[0].split() == ["Name", "Count"]

    def test_wide_cells_not_wrapped(self):
        long = "x" * 300
        out = render(("Path",), [(long,)])
        assert long in out.splitlines()[1]
