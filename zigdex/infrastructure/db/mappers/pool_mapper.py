from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from zigdex.domain.entities.pool import MarketPoolRow, PoolLeg, PoolReserves, PoolStateRow, TokenPoolRow
from zigdex.infrastructure.db.mappers.common import float_or_zero, required, to_float, to_int


def map_row_to_pool_reserves(row: Mapping[str, Any]) -> PoolReserves:
    return PoolReserves(
        pool_id=int(required(row, "pool_id")),
        pair_contract=str(required(row, "pair_contract")),
        pair_type=required(row, "pair_type"),
        price_in_zig=to_float(required(row, "price_in_zig")),
        reserve_base_base=to_float(required(row, "reserve_base_base")),
        reserve_quote_base=to_float(required(row, "reserve_quote_base")),
        base_exponent=to_int(required(row, "base_exp")),
        quote_exponent=to_int(required(row, "quote_exp")),
        tvl_zig=float_or_zero(required(row, "tvl_zig")),
    )


def map_row_to_pool_state(row: Mapping[str, Any]) -> PoolStateRow:
    return PoolStateRow(
        pool_id=int(required(row, "pool_id")),
        reserve_base_base=to_float(required(row, "reserve_base_base")),
        reserve_quote_base=to_float(required(row, "reserve_quote_base")),
        base_exponent=to_int(required(row, "base_exp")),
        quote_exponent=to_int(required(row, "quote_exp")),
        price_in_zig=to_float(required(row, "price_in_zig")),
    )


def _leg(row: Mapping[str, Any], prefix: str) -> PoolLeg:
    return PoolLeg(
        token_id=int(required(row, f"{prefix}_token_id")),
        symbol=required(row, f"{prefix}_symbol"),
        denom=str(required(row, f"{prefix}_denom")),
        exponent=to_int(required(row, f"{prefix}_exp")),
    )


def map_row_to_token_pool(row: Mapping[str, Any]) -> TokenPoolRow:
    return TokenPoolRow(
        pool_id=int(required(row, "pool_id")),
        pair_contract=str(required(row, "pair_contract")),
        base=_leg(row, "base"),
        quote=_leg(row, "quote"),
        is_uzig_quote=bool(required(row, "is_uzig_quote")),
        created_at=required(row, "created_at"),
        price_in_zig=to_float(required(row, "price_in_zig")),
        tvl_zig=float_or_zero(required(row, "tvl_zig")),
        vol_zig=float_or_zero(required(row, "vol_zig")),
        tx=to_int(required(row, "tx")) or 0,
        unique_traders=to_int(required(row, "unique_traders")) or 0,
    )


def map_row_to_market_pool(row: Mapping[str, Any]) -> MarketPoolRow:
    return MarketPoolRow(
        pool_id=int(required(row, "pool_id")),
        pair_contract=str(required(row, "pair_contract")),
        pair_type=required(row, "pair_type"),
        base=_leg(row, "base"),
        quote=_leg(row, "quote"),
        price_in_zig=to_float(required(row, "price_in_zig")),
        tvl_zig=float_or_zero(required(row, "tvl_zig")),
        vol_zig=float_or_zero(required(row, "vol_zig")),
        tx=to_int(required(row, "tx")) or 0,
    )
