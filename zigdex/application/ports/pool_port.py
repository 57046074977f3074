from __future__ import annotations

from datetime import datetime
from typing import Protocol

from zigdex.domain.entities.pool import MarketPoolRow, PoolReserves, PoolStateRow, TokenPoolRow
from zigdex.domain.entities.token import Token


class PoolPort(Protocol):
    def has_native_quoted_pool(self, *, token_id: int) -> bool:
        ...

    def has_quote_side_pool(self, *, token_id: int) -> bool:
        ...

    def list_native_quoted_pools(self, *, token_id: int) -> list[PoolReserves]:
        ...

    def find_pool_id(self, *, ref: str, token_id: int | None = None, side: str | None = None) -> int | None:
        ...

    def most_active_pool_id(
        self,
        *,
        token_id: int,
        side: str,
        native_quote_only: bool = False,
        usd: bool = False,
    ) -> int | None:
        ...

    def most_active_pair_pool_id(self, *, base_token_id: int, quote_token_id: int) -> int | None:
        ...

    def count_pools(self, *, token_id: int, side: str) -> int:
        ...

    def first_pool_created_at(self, *, token_id: int, side: str) -> datetime | None:
        ...

    def list_base_pool_states(self, *, token_id: int) -> list[PoolStateRow]:
        ...

    def get_pool_state(self, *, pool_id: int) -> PoolStateRow | None:
        ...

    def quote_side_tvl_native(self, *, token_id: int) -> float:
        ...

    def get_base_token(self, *, pool_id: int) -> Token | None:
        ...

    def list_token_pools(self, *, token_id: int, side: str, bucket: str) -> list[TokenPoolRow]:
        ...

    def list_native_market_pools(self, *, order: str, bucket: str, limit: int) -> list[MarketPoolRow]:
        ...
