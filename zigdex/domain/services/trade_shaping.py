from __future__ import annotations

from dataclasses import replace

from zigdex.domain.entities.trade import ShapedTrade, TradeRow
from zigdex.domain.services.token_identity import is_native_ref
from zigdex.domain.services.units import NATIVE_EXPONENT, finite_or_none, safe_div, scale

SHRIMP_MAX = 1000.0
SHARK_MAX = 10000.0

WORTH_CLASSES = ("shrimp", "shark", "whale")


def _asset_exponent(denom: str | None, exponent: int | None) -> int | None:
    if is_native_ref(denom):
        return NATIVE_EXPONENT
    return exponent


def _quote_leg(row: TradeRow) -> float | None:
    if row.direction == "buy":
        return scale(row.offer_amount_base, row.quote_exponent)
    return scale(row.return_amount_base, row.quote_exponent)


def _base_leg(row: TradeRow) -> float | None:
    if row.direction == "buy":
        return scale(row.return_amount_base, row.base_exponent)
    if row.direction == "sell":
        return scale(row.offer_amount_base, row.base_exponent)
    return None


def value_native(row: TradeRow) -> float | None:
    quote_leg = _quote_leg(row)
    if quote_leg is None:
        return None
    if row.is_uzig_quote:
        return quote_leg
    if row.quote_price_in_zig is None:
        return None
    return finite_or_none(quote_leg * row.quote_price_in_zig)


def shape_trade(row: TradeRow, *, zig_usd: float | None) -> ShapedTrade:
    fx = row.fx_zig_usd if row.fx_zig_usd is not None else zig_usd

    offer_amount = scale(row.offer_amount_base, _asset_exponent(row.offer_asset_denom, row.offer_exponent))
    ask_amount = scale(row.ask_amount_base, _asset_exponent(row.ask_asset_denom, row.ask_exponent))

    native = value_native(row)
    price_native = safe_div(native, _base_leg(row))

    if is_native_ref(row.offer_asset_denom) and offer_amount is not None:
        zig_leg = offer_amount
    elif is_native_ref(row.ask_asset_denom) and ask_amount is not None:
        zig_leg = ask_amount
    else:
        zig_leg = None

    if row.direction == "buy":
        return_amount = scale(row.return_amount_base, row.base_exponent)
    else:
        return_amount = scale(row.return_amount_base, row.quote_exponent)

    return ShapedTrade(
        time=row.created_at,
        tx_hash=row.tx_hash,
        pair_contract=row.pair_contract,
        signer=row.signer,
        direction=row.direction,
        is_router=row.is_router,
        offer_denom=row.offer_asset_denom,
        offer_amount_base=row.offer_amount_base,
        offer_amount=offer_amount,
        ask_denom=row.ask_asset_denom,
        ask_amount_base=row.ask_amount_base,
        ask_amount=ask_amount,
        return_amount_base=row.return_amount_base,
        return_amount=return_amount,
        price_native=price_native,
        price_usd=_times(price_native, fx),
        value_native=native,
        value_usd=_times(native, fx),
        zig_leg_amount=zig_leg,
        zig_usd_at_trade=fx,
    )


def _times(value: float | None, factor: float | None) -> float | None:
    if value is None or factor is None:
        return None
    return finite_or_none(value * factor)


def worth_for_class(trade: ShapedTrade, *, unit: str, zig_usd: float | None) -> float | None:
    basis = trade.zig_leg_amount if trade.zig_leg_amount is not None else trade.value_native
    if basis is None:
        return None
    if unit != "usd":
        return basis
    fx = trade.zig_usd_at_trade if trade.zig_usd_at_trade is not None else zig_usd
    return _times(basis, fx)


def classify_worth(worth: float) -> str:
    if worth < SHRIMP_MAX:
        return "shrimp"
    if worth <= SHARK_MAX:
        return "shark"
    return "whale"


def classify_trade(trade: ShapedTrade, *, unit: str, zig_usd: float | None) -> ShapedTrade:
    worth = worth_for_class(trade, unit=unit, zig_usd=zig_usd)
    if worth is None:
        return trade
    return replace(trade, klass=classify_worth(worth))
