from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from zigdex.domain.entities.trade import ShapedTrade


@dataclass(frozen=True)
class ListTradesInput:
    scope: str = "all"
    scope_ref: str | None = None
    direction: str | None = None
    unit: str = "usd"
    tf: str | None = None
    start: datetime | None = None
    end: datetime | None = None
    days: int | None = None
    include_liquidity: bool = False
    klass: str | None = None
    min_value: float | None = None
    max_value: float | None = None
    limit: int | None = None
    page: int | None = None
    token_ref: str | None = None
    pool_ref: str | None = None
    pair_contract: str | None = None
    dominant: str | None = None


@dataclass(frozen=True)
class ListTradesOutput:
    rows: list[ShapedTrade]
    unit: str
    tf: str
    limit: int
    page: int
    pages: int
    total: int
    success: bool = True
