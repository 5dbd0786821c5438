# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vcinventory/render/table.py
"""
Column-aligned text tables.

Tables are built as rich Tables and rendered without borders or ANSI codes,
so the output reads like tabwriter output and is safe to pipe.
"""
from __future__ import annotations

import io
from typing import Any, Iterable, List, Optional, Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

# Wide enough that rich never wraps or truncates a cell.
_RENDER_WIDTH = 4096


def _cell(v: Any) -> Text:
    return Text("" if v is None else str(v))


def build_table(
    columns: Sequence[str],
    rows: Iterable[Sequence[Any]],
    title: Optional[str] = None,
) -> Table:
    """
    One rich column per requested column name. Short rows are padded with
    empty cells; values beyond the last column are dropped.
    """
    table = Table(
        title=title,
        box=None,
        show_edge=False,
        pad_edge=False,
        padding=(0, 2, 0, 0),
        header_style="",
        title_justify="left",
        title_style="",
        expand=False,
    )
    for name in columns:
        table.add_column(name, no_wrap=True, overflow="ignore")

    n = len(columns)
    for row in rows:
        cells: List[Any] = list(row)[:n]
        cells.extend([""] * (n - len(cells)))
        table.add_row(*[_cell(c) for c in cells])
    return table


def render_table(table: Table) -> str:
    buf = io.StringIO()
    console = Console(
        file=buf,
        width=_RENDER_WIDTH,
        color_system=None,
        force_terminal=False,
        highlight=False,
        markup=False,
        emoji=False,
    )
    console.print(table)
    lines = [line.rstrip() for line in buf.getvalue().splitlines()]
    return "\n".join(lines).rstrip("\n") + "\n"


def render(
    columns: Sequence[str],
    rows: Iterable[Sequence[Any]],
    title: Optional[str] = None,
) -> str:
    """Plain aligned text for columns/rows (header line first, one line per row)."""
    return render_table(build_table(columns, rows, title=title))
