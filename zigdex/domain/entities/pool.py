from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class PoolReserves:
    """Native-quoted pool as stored: reserves in base units."""

    pool_id: int
    pair_contract: str
    pair_type: str | None
    price_in_zig: float | None
    reserve_base_base: float | None
    reserve_quote_base: float | None
    base_exponent: int | None
    quote_exponent: int | None
    tvl_zig: float


@dataclass(frozen=True)
class PoolLiquidity:
    """Native-quoted pool with reserves in display units."""

    pool_id: int
    pair_contract: str
    pair_type: str | None
    price_in_zig: float
    token_reserve: float
    zig_reserve: float
    tvl_zig: float


@dataclass(frozen=True)
class PoolLeg:
    token_id: int
    symbol: str | None
    denom: str
    exponent: int | None


@dataclass(frozen=True)
class TokenPoolRow:
    pool_id: int
    pair_contract: str
    base: PoolLeg
    quote: PoolLeg
    is_uzig_quote: bool
    created_at: datetime | None
    price_in_zig: float | None
    tvl_zig: float
    vol_zig: float
    tx: int
    unique_traders: int


@dataclass(frozen=True)
class PoolStateRow:
    """Reserves of a pool with its latest base-token price, used for liquidity totals."""

    pool_id: int
    reserve_base_base: float | None
    reserve_quote_base: float | None
    base_exponent: int | None
    quote_exponent: int | None
    price_in_zig: float | None


@dataclass(frozen=True)
class MarketPoolRow:
    """Native-quoted pool with its bucket activity, used for market-wide rankings."""

    pool_id: int
    pair_contract: str
    pair_type: str | None
    base: PoolLeg
    quote: PoolLeg
    price_in_zig: float | None
    tvl_zig: float
    vol_zig: float
    tx: int
