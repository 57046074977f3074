from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from zigdex.domain.entities.trade import TradeRow
from zigdex.infrastructure.db.mappers.common import required, to_float, to_int


def map_row_to_trade(row: Mapping[str, Any]) -> TradeRow:
    return TradeRow(
        created_at=required(row, "created_at"),
        tx_hash=str(required(row, "tx_hash")),
        pair_contract=str(required(row, "pair_contract")),
        signer=required(row, "signer"),
        direction=required(row, "direction"),
        is_router=required(row, "is_router") is True,
        offer_asset_denom=required(row, "offer_asset_denom"),
        offer_amount_base=to_float(required(row, "offer_amount_base")),
        ask_asset_denom=required(row, "ask_asset_denom"),
        ask_amount_base=to_float(required(row, "ask_amount_base")),
        return_amount_base=to_float(required(row, "return_amount_base")),
        is_uzig_quote=bool(required(row, "is_uzig_quote")),
        quote_exponent=to_int(required(row, "qexp")),
        base_exponent=to_int(required(row, "bexp")),
        offer_exponent=to_int(required(row, "offer_exp")),
        ask_exponent=to_int(required(row, "ask_exp")),
        quote_price_in_zig=to_float(required(row, "pq_price_in_zig")),
        fx_zig_usd=to_float(required(row, "fx_zig_usd")),
    )
