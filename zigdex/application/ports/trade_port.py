from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from zigdex.domain.entities.trade import TradePage
from zigdex.domain.entities.trade_filters import TradePredicate


class TradePort(Protocol):
    def list_trades(
        self,
        *,
        predicates: Sequence[TradePredicate],
        zig_usd: float | None,
        limit: int,
        offset: int,
    ) -> TradePage:
        ...

    def latest_trade_price(self, *, pool_id: int) -> float | None:
        ...
