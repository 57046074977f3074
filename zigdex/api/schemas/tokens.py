from __future__ import annotations

from datetime import datetime

from pydantic import Field

from zigdex.api.schemas.common import OutputModel, ValuePairResponse
from zigdex.application.dto.security import GetTokenSecurityOutput


class SwapSimulationResponse(OutputModel):
    out: float
    price: float
    impact: float


class BestPoolResponse(OutputModel):
    pool_id: int
    pair_contract: str
    pair_type: str | None = None
    fee: float
    price_native_mid: float
    tvl_native: float
    zig_reserve: float
    token_reserve: float
    sim: SwapSimulationResponse | None = None
    score: float
    amount_used: float
    token_id: int | None = None


class TokenIdentityResponse(OutputModel):
    token_id: int
    denom: str
    symbol: str | None = None
    name: str | None = None
    exponent: int
    image_uri: str | None = None
    website: str | None = None
    twitter: str | None = None
    telegram: str | None = None
    description: str | None = None
    created_at: datetime | None = None


class PriceBlockResponse(OutputModel):
    source: str
    pool_id: int | None = None
    native: float | None = None
    usd: float | None = None
    change_pct: dict[str, float | None]


class BucketActivityResponse(OutputModel):
    volume_native: dict[str, float]
    volume_usd: dict[str, float | None]
    tx: dict[str, int]
    unique_traders_24h: int
    buys_24h: int
    sells_24h: int
    vol_buy_24h: ValuePairResponse
    vol_sell_24h: ValuePairResponse


class ExternalStatsResponse(OutputModel):
    price_usd: float | None = None
    market_cap_usd: float | None = None
    circulating_supply: float | None = None
    total_supply: float | None = None
    last_updated: datetime | None = None


class TokenSocialResponse(OutputModel):
    handle: str | None = None
    user_id: str | None = None
    name: str | None = None
    is_blue_verified: bool = False
    verified_type: str | None = None
    profile_picture: str | None = None
    cover_picture: str | None = None
    followers: int | None = None
    following: int | None = None
    created_at_twitter: datetime | None = None
    last_refreshed: datetime | None = None


class TokenSummaryResponse(OutputModel):
    success: bool = True
    token: TokenIdentityResponse
    price: PriceBlockResponse
    mcap: ValuePairResponse
    fdv: ValuePairResponse
    circulating_supply: float | None = None
    max_supply: float | None = None
    dominant: str
    pair_view: str
    pools: int
    holders: int
    creation_time: datetime | None = None
    activity: BucketActivityResponse
    liquidity: ValuePairResponse
    external_stats: ExternalStatsResponse | None = None
    social: TokenSocialResponse | None = None
    best_pool: BestPoolResponse | None = None


class BestPoolEnvelopeResponse(OutputModel):
    success: bool = True
    data: BestPoolResponse | None = None


class OhlcvBarResponse(OutputModel):
    ts_sec: int
    open: float
    high: float
    low: float
    close: float
    volume: float
    trades: int


class OhlcvMetaResponse(OutputModel):
    tf: str
    mode: str
    unit: str
    fill: str
    price_source: str
    step_sec: int
    aligned_from_sec: int
    aligned_to_sec_exclusive: int
    prev_close_seed: float | None = None
    pool_id: int | None = None
    dominant: str | None = None
    pair_view: str | None = None


class OhlcvResponse(OutputModel):
    success: bool = True
    bars: list[OhlcvBarResponse] = Field(..., alias="data")
    meta: OhlcvMetaResponse


class TokenListItemResponse(OutputModel):
    token_id: int
    denom: str
    symbol: str | None = None
    name: str | None = None
    image_uri: str | None = None
    created_at: datetime | None = None
    price: ValuePairResponse
    mcap: ValuePairResponse
    fdv: ValuePairResponse
    volume: ValuePairResponse
    holders: int
    tx: int
    change_24h_pct: float | None = None
    best_pool: BestPoolResponse | None = None


class TokenListResponse(OutputModel):
    success: bool = True
    items: list[TokenListItemResponse] = Field(..., alias="data")
    include_change: bool
    include_best: bool


class MoversResponse(OutputModel):
    success: bool = True
    items: list[TokenListItemResponse] = Field(..., alias="data")
    board: str
    bucket: str
    price_source: str
    limit: int
    offset: int
    total: int


class SwapTokenItemResponse(OutputModel):
    token_id: int
    denom: str
    symbol: str | None = None
    name: str | None = None
    exponent: int | None = None
    image_uri: str | None = None
    price: ValuePairResponse
    mcap: ValuePairResponse
    fdv: ValuePairResponse
    volume: ValuePairResponse
    tvl: ValuePairResponse
    tx: int


class SwapListResponse(OutputModel):
    success: bool = True
    items: list[SwapTokenItemResponse] = Field(..., alias="data")
    bucket: str
    limit: int
    offset: int


class PoolLegResponse(OutputModel):
    token_id: int
    symbol: str | None = None
    denom: str
    exponent: int | None = None


class TokenPoolItemResponse(OutputModel):
    pool_id: int
    pair_contract: str
    base: PoolLegResponse
    quote: PoolLegResponse
    is_uzig_quote: bool
    created_at: datetime | None = None
    price: ValuePairResponse
    tvl: ValuePairResponse
    volume: ValuePairResponse
    tx: int
    unique_traders: int
    mcap: ValuePairResponse | None = None
    fdv: ValuePairResponse | None = None


class TokenPoolsResponse(OutputModel):
    success: bool = True
    token_id: int
    symbol: str | None = None
    denom: str
    image_uri: str | None = None
    items: list[TokenPoolItemResponse] = Field(..., alias="data")
    bucket: str
    include_caps: bool
    dominant: str


class HolderItemResponse(OutputModel):
    address: str
    balance: float
    pct_of_max: float | None = None
    pct_of_total: float | None = None


class HoldersResponse(OutputModel):
    success: bool = True
    items: list[HolderItemResponse] = Field(..., alias="data")
    limit: int
    offset: int
    total_holders: int
    top10_pct_of_max: float | None = None


class ScoreAdjustmentResponse(OutputModel):
    key: str
    points: int


class SecurityChecksResponse(OutputModel):
    is_mintable: bool
    can_change_minting_cap: bool
    max_supply: float | None = None
    total_supply: float | None = None
    top10_pct_of_max: float
    creator_pct_of_max: float
    holders_count: int


class SecurityDevResponse(OutputModel):
    token_total_supply: float | None = None
    creator_address: str | None = None
    creator_balance: float | None = None
    creator_pct_of_max: float
    top_holders_pct_of_max: float
    holders_count: int
    first_seen_at: datetime | None = None


class SupplyCategoryResponse(OutputModel):
    is_mintable: bool
    can_change_minting_cap: bool
    max_supply: float | None = None
    total_supply: float | None = None


class DistributionCategoryResponse(OutputModel):
    top10_pct_of_max: float
    creator_pct_of_max: float


class AdoptionCategoryResponse(OutputModel):
    holders_count: int
    first_seen_at: datetime | None = None


class SecurityCategoriesResponse(OutputModel):
    supply: SupplyCategoryResponse
    distribution: DistributionCategoryResponse
    adoption: AdoptionCategoryResponse


class TokenSecurityResponse(OutputModel):
    success: bool = True
    score: int
    penalties: list[ScoreAdjustmentResponse]
    bonuses: list[ScoreAdjustmentResponse]
    categories: SecurityCategoriesResponse
    checks: SecurityChecksResponse
    dev: SecurityDevResponse
    last_updated: datetime | None = None
    source: str

    @classmethod
    def from_output(cls, output: GetTokenSecurityOutput) -> "TokenSecurityResponse":
        checks = output.checks
        return cls(
            score=output.score,
            penalties=[ScoreAdjustmentResponse.model_validate(item) for item in output.penalties],
            bonuses=[ScoreAdjustmentResponse.model_validate(item) for item in output.bonuses],
            categories=SecurityCategoriesResponse(
                supply=SupplyCategoryResponse(
                    is_mintable=checks.is_mintable,
                    can_change_minting_cap=checks.can_change_minting_cap,
                    max_supply=checks.max_supply,
                    total_supply=checks.total_supply,
                ),
                distribution=DistributionCategoryResponse(
                    top10_pct_of_max=checks.top10_pct_of_max,
                    creator_pct_of_max=checks.creator_pct_of_max,
                ),
                adoption=AdoptionCategoryResponse(
                    holders_count=checks.holders_count,
                    first_seen_at=output.dev.first_seen_at,
                ),
            ),
            checks=SecurityChecksResponse.model_validate(checks),
            dev=SecurityDevResponse.model_validate(output.dev),
            last_updated=output.last_updated,
            source=output.source,
        )
