from __future__ import annotations

from pydantic import Field

from zigdex.api.schemas.common import OutputModel, ValuePairResponse
from zigdex.api.schemas.tokens import PoolLegResponse, PriceBlockResponse, TokenIdentityResponse


class VolumeBreakdownResponse(OutputModel):
    native: float
    usd: float | None = None
    buy_native: float
    sell_native: float


class OverviewPoolResponse(OutputModel):
    pool_id: int
    pair_contract: str
    pair_type: str | None = None
    base: PoolLegResponse
    quote: PoolLegResponse
    price_native_mid: float | None = None
    tvl: ValuePairResponse
    volume: ValuePairResponse
    tx: int


class ZigOverviewResponse(OutputModel):
    success: bool = True
    token: TokenIdentityResponse
    price: PriceBlockResponse
    circulating_supply: float | None = None
    max_supply: float | None = None
    mcap: ValuePairResponse
    fdv: ValuePairResponse
    liquidity: ValuePairResponse
    volume_24h: VolumeBreakdownResponse
    tx_24h: int
    traders_24h: int
    holders: int
    best_pool: OverviewPoolResponse | None = None
    top_pools: list[OverviewPoolResponse] = Field(default_factory=list)
