from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from zigdex.application.dto.best_pool import BestPoolOutput
from zigdex.application.dto.common import ValuePair

TOKEN_SORT_KEYS = ("mcap", "price", "fdv", "vol", "tx", "created")
MATRIX_BUCKETS = ("30m", "1h", "4h", "24h")


@dataclass(frozen=True)
class ListTokensInput:
    search: str | None = None
    sort: str = "mcap"
    direction: str = "desc"
    bucket: str = "24h"
    include_change: bool = False
    include_best: bool = False
    min_best_tvl: float = 0.0
    amount_in: float | None = None
    limit: int = 100
    offset: int = 0


@dataclass(frozen=True)
class ListMoversInput:
    board: str
    price_source: str = "best"
    bucket: str = "24h"
    limit: int = 100
    offset: int = 0


@dataclass(frozen=True)
class TokenListItem:
    token_id: int
    denom: str
    symbol: str | None
    name: str | None
    image_uri: str | None
    created_at: datetime | None
    price: ValuePair
    mcap: ValuePair
    fdv: ValuePair
    volume: ValuePair
    holders: int
    tx: int
    change_24h_pct: float | None = None
    best_pool: BestPoolOutput | None = None


@dataclass(frozen=True)
class ListTokensOutput:
    items: list[TokenListItem]
    include_change: bool
    include_best: bool
    success: bool = True


@dataclass(frozen=True)
class ListMoversOutput:
    items: list[TokenListItem]
    board: str
    bucket: str
    price_source: str
    limit: int
    offset: int
    total: int
    success: bool = True


@dataclass(frozen=True)
class ListSwapTokensInput:
    bucket: str = "24h"
    limit: int = 200
    offset: int = 0


@dataclass(frozen=True)
class SwapTokenItem:
    token_id: int
    denom: str
    symbol: str | None
    name: str | None
    exponent: int | None
    image_uri: str | None
    price: ValuePair
    mcap: ValuePair
    fdv: ValuePair
    volume: ValuePair
    tvl: ValuePair
    tx: int


@dataclass(frozen=True)
class ListSwapTokensOutput:
    items: list[SwapTokenItem]
    bucket: str
    limit: int
    offset: int
    success: bool = True
