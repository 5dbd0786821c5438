# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# vcinventory/core/utils.py
from __future__ import annotations

import datetime as _dt
import json
from dataclasses import asdict, is_dataclass
from enum import Enum
from typing import Any, Optional


def _json_default(obj: Any) -> Any:
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (_dt.datetime, _dt.date)):
        return obj.isoformat()
    return str(obj)


class U:
    @staticmethod
    def json_dump(obj: Any) -> str:
        return json.dumps(obj, indent=2, sort_keys=True, default=_json_default)

    @staticmethod
    def human_bytes(n: Optional[int]) -> str:
        if n is None:
            return ""
        x = float(n)
        sign = "-" if x < 0 else ""
        x = abs(x)
        for unit in ["B", "KiB", "MiB", "GiB", "TiB", "PiB"]:
            if x < 1024 or unit == "PiB":
                return f"{sign}{x:.1f}{unit}" if unit != "B" else f"{sign}{int(x)}B"
            x /= 1024
        return f"{n}B"

    @staticmethod
    def mib_to_bytes(mib: Optional[int]) -> Optional[int]:
        return None if mib is None else int(mib) * 1024 * 1024
