from __future__ import annotations

import math
from collections.abc import Iterable

from zigdex.domain.entities.pool import PoolLiquidity, PoolReserves, PoolStateRow
from zigdex.domain.services.units import scale


def to_pool_liquidity(row: PoolReserves) -> PoolLiquidity:
    """Pools without a state row come through with zero reserves."""
    return PoolLiquidity(
        pool_id=row.pool_id,
        pair_contract=row.pair_contract,
        pair_type=row.pair_type,
        price_in_zig=float(row.price_in_zig or 0.0),
        token_reserve=scale(row.reserve_base_base or 0, row.base_exponent),
        zig_reserve=scale(row.reserve_quote_base or 0, row.quote_exponent),
        tvl_zig=float(row.tvl_zig or 0.0),
    )


def pool_tvl_native(row: PoolStateRow) -> float:
    token_reserve = scale(row.reserve_base_base or 0, row.base_exponent)
    native_reserve = scale(row.reserve_quote_base or 0, row.quote_exponent)
    return token_reserve * float(row.price_in_zig or 0.0) + native_reserve


def total_tvl_native(rows: Iterable[PoolStateRow]) -> float:
    total = 0.0
    for row in rows:
        value = pool_tvl_native(row)
        if math.isfinite(value):
            total += value
    return total


def reserves_mid_price(row: PoolStateRow) -> float | None:
    """Quote per base implied by reserves, or ``None`` when either side is empty."""
    base = scale(row.reserve_base_base or 0, row.base_exponent)
    quote = scale(row.reserve_quote_base or 0, row.quote_exponent)
    if base > 0 and quote > 0:
        return quote / base
    return None
