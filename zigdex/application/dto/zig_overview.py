from __future__ import annotations

from dataclasses import dataclass

from zigdex.application.dto.common import ValuePair
from zigdex.application.dto.token_summary import PriceBlock, TokenIdentity
from zigdex.domain.entities.pool import PoolLeg


@dataclass(frozen=True)
class GetZigOverviewInput:
    limit: int = 10


@dataclass(frozen=True)
class VolumeBreakdown:
    native: float
    usd: float | None
    buy_native: float
    sell_native: float


@dataclass(frozen=True)
class OverviewPool:
    pool_id: int
    pair_contract: str
    pair_type: str | None
    base: PoolLeg
    quote: PoolLeg
    price_native_mid: float | None
    tvl: ValuePair
    volume: ValuePair
    tx: int


@dataclass(frozen=True)
class ZigOverviewOutput:
    token: TokenIdentity
    price: PriceBlock
    circulating_supply: float | None
    max_supply: float | None
    mcap: ValuePair
    fdv: ValuePair
    liquidity: ValuePair
    volume_24h: VolumeBreakdown
    tx_24h: int
    traders_24h: int
    holders: int
    best_pool: OverviewPool | None
    top_pools: list[OverviewPool]
    success: bool = True
