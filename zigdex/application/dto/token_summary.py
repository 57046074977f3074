from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from zigdex.application.dto.best_pool import BestPoolOutput
from zigdex.application.dto.common import ValuePair
from zigdex.domain.entities.token import ExternalTokenStats, TokenSocial


@dataclass(frozen=True)
class GetTokenSummaryInput:
    identifier: str
    price_source: str = "best"
    pool_ref: str | None = None
    dominant: str = "base"
    view: str = "base"


@dataclass(frozen=True)
class TokenIdentity:
    token_id: int
    denom: str
    symbol: str | None
    name: str | None
    exponent: int
    image_uri: str | None = None
    website: str | None = None
    twitter: str | None = None
    telegram: str | None = None
    description: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class PriceBlock:
    source: str
    pool_id: int | None
    native: float | None
    usd: float | None
    change_pct: dict[str, float | None]


@dataclass(frozen=True)
class BucketActivity:
    volume_native: dict[str, float]
    volume_usd: dict[str, float | None]
    tx: dict[str, int]
    unique_traders_24h: int
    buys_24h: int
    sells_24h: int
    vol_buy_24h: ValuePair
    vol_sell_24h: ValuePair


@dataclass(frozen=True)
class TokenSummaryOutput:
    token: TokenIdentity
    price: PriceBlock
    mcap: ValuePair
    fdv: ValuePair
    circulating_supply: float | None
    max_supply: float | None
    dominant: str
    pair_view: str
    pools: int
    holders: int
    creation_time: datetime | None
    activity: BucketActivity
    liquidity: ValuePair
    external_stats: ExternalTokenStats | None = None
    social: TokenSocial | None = None
    best_pool: BestPoolOutput | None = None
    success: bool = True
