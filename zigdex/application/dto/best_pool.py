from __future__ import annotations

from dataclasses import dataclass

from zigdex.domain.services.xyk import SwapSimulation


@dataclass(frozen=True)
class GetBestPoolInput:
    identifier: str
    amount_in: float | None = None
    min_tvl_zig: float = 0.0


@dataclass(frozen=True)
class BestPoolOutput:
    pool_id: int
    pair_contract: str
    pair_type: str | None
    fee: float
    price_native_mid: float
    tvl_native: float
    zig_reserve: float
    token_reserve: float
    sim: SwapSimulation | None
    score: float
    amount_used: float
    token_id: int | None = None
