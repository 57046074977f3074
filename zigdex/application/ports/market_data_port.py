from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol

from zigdex.domain.entities.market import Bar, ClosePair, MatrixBucket


class MarketDataPort(Protocol):
    def latest_exchange_rate(self) -> float | None:
        ...

    def list_pool_bars(self, *, pool_id: int, start: datetime, end: datetime, usd: bool = False) -> list[Bar]:
        ...

    def list_side_bars(
        self,
        *,
        token_id: int,
        side: str,
        native_quote_only: bool,
        start: datetime,
        end: datetime,
        usd: bool = False,
    ) -> list[Bar]:
        ...

    def last_pool_bar_before(self, *, pool_id: int, ts: datetime, usd: bool = False) -> Bar | None:
        ...

    def last_side_bar_before(
        self,
        *,
        token_id: int,
        side: str,
        native_quote_only: bool,
        ts: datetime,
        usd: bool = False,
    ) -> Bar | None:
        ...

    def latest_close(self, *, pool_id: int) -> float | None:
        ...

    def close_pair(self, *, pool_id: int, lookback: datetime) -> ClosePair:
        ...

    def matrix_by_side(self, *, token_id: int, side: str, buckets: Sequence[str]) -> dict[str, MatrixBucket]:
        ...

    def exchange_rate_at_or_before(self, *, ts: datetime) -> float | None:
        ...

    def native_market_totals(self, *, bucket: str) -> MatrixBucket:
        ...
