from __future__ import annotations

from pydantic import Field

from zigdex.api.schemas.common import OutputModel


class RoutePairResponse(OutputModel):
    pool_id: int
    pair_contract: str
    pair_type: str | None = None
    side: str
    price_native_exec: float | None = None
    price_usd_exec: float | None = None
    price_native_mid: float
    price_usd_mid: float | None = None
    amount_in: float | None = None
    amount_out: float | None = None
    price_impact: float | None = None
    fee: float


class RouteResponse(OutputModel):
    success: bool = True
    route: list[str]
    pairs: list[RoutePairResponse]
    price_native: float | None = None
    price_usd: float | None = None
    zig_per_from: float | None = None
    usd_per_from: float | None = None
    from_usd: float | None = Field(None, description="USD price of the input asset.")
    to_usd: float | None = Field(None, description="USD price of the output asset.")
    source: str
