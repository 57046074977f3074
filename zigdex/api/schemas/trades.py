from __future__ import annotations

from datetime import datetime

from pydantic import Field

from zigdex.api.schemas.common import OutputModel


class TradeResponse(OutputModel):
    time: datetime
    tx_hash: str
    pair_contract: str
    signer: str | None = None
    direction: str | None = None
    is_router: bool
    offer_denom: str | None = None
    offer_amount_base: float | None = None
    offer_amount: float | None = None
    ask_denom: str | None = None
    ask_amount_base: float | None = None
    ask_amount: float | None = None
    return_amount_base: float | None = None
    return_amount: float | None = None
    price_native: float | None = None
    price_usd: float | None = None
    value_native: float | None = None
    value_usd: float | None = None
    zig_leg_amount: float | None = None
    zig_usd_at_trade: float | None = None
    klass: str | None = Field(None, alias="class")


class TradesMetaResponse(OutputModel):
    unit: str
    tf: str
    limit: int
    page: int
    pages: int
    total: int


class TradesResponse(OutputModel):
    success: bool = True
    data: list[TradeResponse]
    meta: TradesMetaResponse
