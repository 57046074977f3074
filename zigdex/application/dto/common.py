from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class NotFoundOutput:
    error: str
    success: bool = False


@dataclass(frozen=True)
class ValuePair:
    native: float | None
    usd: float | None
