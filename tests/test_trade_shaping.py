from __future__ import annotations

from datetime import datetime, timezone

import pytest

from zigdex.domain.entities.trade import TradeRow
from zigdex.domain.services.trade_shaping import classify_trade, classify_worth, shape_trade


def _row(**overrides) -> TradeRow:
    values = {
        "created_at": datetime(2024, 5, 1, tzinfo=timezone.utc),
        "tx_hash": "ABC",
        "pair_contract": "zig1pair",
        "signer": "zig1signer",
        "direction": "buy",
        "is_router": False,
        "offer_asset_denom": "uzig",
        "offer_amount_base": 2_000_000_000,
        "ask_asset_denom": "coin.zig1.foo",
        "ask_amount_base": None,
        "return_amount_base": 400_000_000,
        "is_uzig_quote": True,
        "quote_exponent": 6,
        "base_exponent": 6,
        "offer_exponent": None,
        "ask_exponent": 6,
        "quote_price_in_zig": None,
        "fx_zig_usd": 0.1,
    }
    values.update(overrides)
    return TradeRow(**values)


@pytest.mark.parametrize(
    ("worth", "expected"),
    [(0.0, "shrimp"), (999.99, "shrimp"), (1000.0, "shark"), (10000.0, "shark"), (10000.01, "whale")],
)
def test_classify_worth_boundaries(worth, expected):
    assert classify_worth(worth) == expected


def test_shape_buy_against_native_quote():
    trade = shape_trade(_row(), zig_usd=0.2)

    assert trade.offer_amount == 2_000.0
    assert trade.value_native == 2_000.0
    assert trade.return_amount == 400.0
    assert trade.price_native == pytest.approx(5.0)
    assert trade.zig_usd_at_trade == 0.1
    assert trade.value_usd == pytest.approx(200.0)
    assert trade.zig_leg_amount == 2_000.0


def test_shape_sell_uses_quote_exponent_for_return():
    row = _row(
        direction="sell",
        offer_asset_denom="coin.zig1.foo",
        offer_amount_base=100_000_000,
        offer_exponent=6,
        ask_asset_denom="uzig",
        ask_amount_base=50_000_000,
        return_amount_base=50_000_000,
    )

    trade = shape_trade(row, zig_usd=None)

    assert trade.return_amount == 50.0
    assert trade.value_native == 50.0
    assert trade.price_native == pytest.approx(0.5)
    assert trade.zig_leg_amount == 50.0


def test_non_native_quote_needs_quote_price():
    row = _row(is_uzig_quote=False, offer_asset_denom="ibc/USDC", quote_price_in_zig=None)

    trade = shape_trade(row, zig_usd=0.1)

    assert trade.value_native is None
    assert trade.price_native is None


def test_non_native_quote_is_valued_through_quote_price():
    row = _row(is_uzig_quote=False, offer_asset_denom="ibc/USDC", quote_price_in_zig=10.0)

    trade = shape_trade(row, zig_usd=0.1)

    assert trade.value_native == pytest.approx(20_000.0)
    assert trade.zig_leg_amount is None


def test_classify_trade_in_usd_and_zig():
    trade = shape_trade(_row(), zig_usd=None)

    assert classify_trade(trade, unit="usd", zig_usd=None).klass == "shrimp"
    assert classify_trade(trade, unit="zig", zig_usd=None).klass == "shark"


def test_classify_trade_without_basis_leaves_class_empty():
    row = _row(is_uzig_quote=False, offer_asset_denom="ibc/USDC", ask_asset_denom="coin.x")
    trade = shape_trade(row, zig_usd=None)

    assert classify_trade(trade, unit="zig", zig_usd=None).klass is None
