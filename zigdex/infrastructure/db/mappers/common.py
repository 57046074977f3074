from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from zigdex.domain.exceptions import MissingColumnError
from zigdex.domain.services.units import finite_or_none


def required(row: Mapping[str, Any], key: str) -> Any:
    if key not in row:
        raise MissingColumnError(f"Row is missing required column '{key}'.")
    return row[key]


def to_float(value: Any) -> float | None:
    return finite_or_none(float(value)) if value is not None else None


def to_int(value: Any) -> int | None:
    return int(value) if value is not None else None


def float_or_zero(value: Any) -> float:
    return to_float(value) or 0.0
