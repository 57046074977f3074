from __future__ import annotations

from typing import Protocol

from zigdex.domain.entities.token import (
    ExternalTokenStats,
    Token,
    TokenHolder,
    TokenMarketRow,
    TokenProfile,
    TokenSecurity,
    TokenSocial,
)


class TokenPort(Protocol):
    def find_token_candidates(self, *, identifier: str) -> list[Token]:
        ...

    def get_profile(self, *, token_id: int) -> TokenProfile | None:
        ...

    def get_external_stats(self, *, token_id: int) -> ExternalTokenStats | None:
        ...

    def get_social(self, *, token_id: int) -> TokenSocial | None:
        ...

    def get_holders_count(self, *, token_id: int) -> int:
        ...

    def count_positive_holders(self, *, token_id: int) -> int:
        ...

    def list_holders(self, *, token_id: int, limit: int, offset: int) -> list[TokenHolder]:
        ...

    def get_security(self, *, token_id: int) -> TokenSecurity | None:
        ...

    def latest_price_in_zig(self, *, token_id: int, pool_id: int | None = None) -> float | None:
        ...

    def list_market_rows(
        self,
        *,
        bucket: str,
        search: str | None,
        sort: str,
        direction: str,
        limit: int,
        offset: int,
    ) -> list[TokenMarketRow]:
        ...
