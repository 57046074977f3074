from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GetHoldersInput:
    identifier: str
    limit: int = 200
    offset: int = 0


@dataclass(frozen=True)
class HolderItem:
    address: str
    balance: float
    pct_of_max: float | None
    pct_of_total: float | None


@dataclass(frozen=True)
class GetHoldersOutput:
    items: list[HolderItem]
    limit: int
    offset: int
    total_holders: int
    top10_pct_of_max: float | None
    success: bool = True
