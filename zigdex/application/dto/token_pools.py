from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from zigdex.application.dto.common import ValuePair
from zigdex.domain.entities.pool import PoolLeg


@dataclass(frozen=True)
class ListTokenPoolsInput:
    identifier: str
    bucket: str = "24h"
    limit: int = 100
    offset: int = 0
    include_caps: bool = False
    dominant: str = "base"


@dataclass(frozen=True)
class TokenPoolItem:
    pool_id: int
    pair_contract: str
    base: PoolLeg
    quote: PoolLeg
    is_uzig_quote: bool
    created_at: datetime | None
    price: ValuePair
    tvl: ValuePair
    volume: ValuePair
    tx: int
    unique_traders: int
    mcap: ValuePair | None = None
    fdv: ValuePair | None = None


@dataclass(frozen=True)
class ListTokenPoolsOutput:
    token_id: int
    symbol: str | None
    denom: str
    image_uri: str | None
    items: list[TokenPoolItem]
    bucket: str
    include_caps: bool
    dominant: str
    success: bool = True
