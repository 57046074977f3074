from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RouteInput:
    from_ref: str | None
    to_ref: str | None
    amount_in: float | None = None
    min_tvl_zig: float = 0.0


@dataclass(frozen=True)
class RoutePairBlock:
    pool_id: int
    pair_contract: str
    pair_type: str | None
    side: str
    price_native_exec: float | None
    price_usd_exec: float | None
    price_native_mid: float
    price_usd_mid: float | None
    amount_in: float | None
    amount_out: float | None
    price_impact: float | None
    fee: float


@dataclass(frozen=True)
class RouteOutput:
    route: list[str]
    pairs: list[RoutePairBlock]
    price_native: float | None
    price_usd: float | None
    zig_per_from: float | None
    usd_per_from: float | None
    from_usd: float | None
    to_usd: float | None
    source: str
    success: bool = True
