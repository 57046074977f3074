from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TradeRow:
    """Trade joined with its pool, token exponents and the rate at trade time."""

    created_at: datetime
    tx_hash: str
    pair_contract: str
    signer: str | None
    direction: str | None
    is_router: bool
    offer_asset_denom: str | None
    offer_amount_base: float | None
    ask_asset_denom: str | None
    ask_amount_base: float | None
    return_amount_base: float | None
    is_uzig_quote: bool
    quote_exponent: int | None
    base_exponent: int | None
    offer_exponent: int | None
    ask_exponent: int | None
    quote_price_in_zig: float | None
    fx_zig_usd: float | None


@dataclass(frozen=True)
class ShapedTrade:
    time: datetime
    tx_hash: str
    pair_contract: str
    signer: str | None
    direction: str | None
    is_router: bool
    offer_denom: str | None
    offer_amount_base: float | None
    offer_amount: float | None
    ask_denom: str | None
    ask_amount_base: float | None
    ask_amount: float | None
    return_amount_base: float | None
    return_amount: float | None
    price_native: float | None
    price_usd: float | None
    value_native: float | None
    value_usd: float | None
    zig_leg_amount: float | None
    zig_usd_at_trade: float | None
    klass: str | None = None


@dataclass(frozen=True)
class TradePage:
    rows: list[TradeRow]
    total: int
