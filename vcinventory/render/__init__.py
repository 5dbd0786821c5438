# SPDX-License-Identifier: LGPL-3.0-or-later
# vcinventory/render/__init__.py
from .table import build_table, render, render_table

__all__ = ["build_table", "render", "render_table"]
