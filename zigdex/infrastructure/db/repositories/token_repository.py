from __future__ import annotations

from sqlalchemy import text

from zigdex.application.ports.token_port import TokenPort
from zigdex.domain.entities.token import (
    ExternalTokenStats,
    Token,
    TokenHolder,
    TokenMarketRow,
    TokenProfile,
    TokenSecurity,
    TokenSocial,
)
from zigdex.infrastructure.db.mappers.token_mapper import (
    map_row_to_external_stats,
    map_row_to_token,
    map_row_to_token_holder,
    map_row_to_token_market_row,
    map_row_to_token_profile,
    map_row_to_token_security,
    map_row_to_token_social,
)

MAX_CANDIDATES = 25


def contains_pattern(value: str) -> str:
    """ILIKE pattern matching ``value`` anywhere, with its wildcards taken literally."""
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


_MARKET_ORDER_COLUMNS = {
    "mcap": "COALESCE(tm.mcap_zig, 0)",
    "price": "COALESCE(tm.price_in_zig, 0)",
    "fdv": "COALESCE(tm.fdv_zig, 0)",
    "vol": "COALESCE(a.vol_zig, 0)",
    "tx": "COALESCE(a.tx, 0)",
    "created": "t.created_at",
}


class SqlTokenRepository(TokenPort):
    def __init__(self, engine):
        self._engine = engine

    def find_token_candidates(self, *, identifier: str) -> list[Token]:
        sql = r"""
            SELECT t.token_id, t.denom, t.symbol, t.name, t.exponent
            FROM tokens t
            WHERE lower(t.denom) = lower(:q)
               OR lower(t.symbol) = lower(:q)
               OR t.name ILIKE :name_pattern ESCAPE '\'
               OR t.token_id::text = :q
            ORDER BY
                CASE
                    WHEN lower(t.denom) = lower(:q) THEN 0
                    WHEN lower(t.symbol) = lower(:q) THEN 1
                    WHEN t.name ILIKE :name_pattern ESCAPE '\' THEN 2
                    ELSE 3
                END,
                t.token_id DESC
            LIMIT :limit
        """
        params = {"q": identifier, "name_pattern": contains_pattern(identifier), "limit": MAX_CANDIDATES}
        with self._engine.connect() as conn:
            rows = conn.execute(text(sql), params).mappings().all()
        return [map_row_to_token(row) for row in rows]

    def get_profile(self, *, token_id: int) -> TokenProfile | None:
        sql = """
            SELECT token_id, exponent, total_supply_base, max_supply_base, image_uri,
                   website, twitter, telegram, description, created_at
            FROM tokens
            WHERE token_id = :token_id
        """
        with self._engine.connect() as conn:
            row = conn.execute(text(sql), {"token_id": token_id}).mappings().first()
        return map_row_to_token_profile(row) if row else None

    def get_external_stats(self, *, token_id: int) -> ExternalTokenStats | None:
        sql = """
            SELECT price_usd, market_cap_usd, circulating_supply, total_supply, last_updated
            FROM ibc_token_stats
            WHERE token_id = :token_id
        """
        with self._engine.connect() as conn:
            row = conn.execute(text(sql), {"token_id": token_id}).mappings().first()
        return map_row_to_external_stats(row) if row else None

    def get_social(self, *, token_id: int) -> TokenSocial | None:
        sql = """
            SELECT handle, user_id, name, is_blue_verified, verified_type, profile_picture,
                   cover_picture, followers, following, created_at_twitter, last_refreshed
            FROM token_twitter
            WHERE token_id = :token_id
        """
        with self._engine.connect() as conn:
            row = conn.execute(text(sql), {"token_id": token_id}).mappings().first()
        return map_row_to_token_social(row) if row else None

    def get_holders_count(self, *, token_id: int) -> int:
        sql = "SELECT holders_count FROM token_holders_stats WHERE token_id = :token_id"
        with self._engine.connect() as conn:
            value = conn.execute(text(sql), {"token_id": token_id}).scalar()
        return int(value or 0)

    def count_positive_holders(self, *, token_id: int) -> int:
        sql = """
            SELECT COUNT(*)
            FROM holders
            WHERE token_id = :token_id AND balance_base::numeric > 0
        """
        with self._engine.connect() as conn:
            value = conn.execute(text(sql), {"token_id": token_id}).scalar()
        return int(value or 0)

    def list_holders(self, *, token_id: int, limit: int, offset: int) -> list[TokenHolder]:
        sql = """
            SELECT address, balance_base::numeric AS balance_base
            FROM holders
            WHERE token_id = :token_id AND balance_base::numeric > 0
            ORDER BY balance_base::numeric DESC
            LIMIT :limit OFFSET :offset
        """
        params = {"token_id": token_id, "limit": limit, "offset": offset}
        with self._engine.connect() as conn:
            rows = conn.execute(text(sql), params).mappings().all()
        return [map_row_to_token_holder(row) for row in rows]

    def get_security(self, *, token_id: int) -> TokenSecurity | None:
        sql = """
            SELECT is_mintable, can_change_minting_cap, max_supply_base, total_supply_base,
                   creator_address, creator_balance_base, creator_pct_of_max, top10_pct_of_max,
                   holders_count, first_seen_at, checked_at
            FROM public.token_security
            WHERE token_id = :token_id
            LIMIT 1
        """
        with self._engine.connect() as conn:
            row = conn.execute(text(sql), {"token_id": token_id}).mappings().first()
        return map_row_to_token_security(row) if row else None

    def latest_price_in_zig(self, *, token_id: int, pool_id: int | None = None) -> float | None:
        sql = """
            SELECT price_in_zig
            FROM prices
            WHERE token_id = :token_id
              AND (CAST(:pool_id AS bigint) IS NULL OR pool_id = :pool_id)
            ORDER BY updated_at DESC
            LIMIT 1
        """
        with self._engine.connect() as conn:
            value = conn.execute(text(sql), {"token_id": token_id, "pool_id": pool_id}).scalar()
        return float(value) if value is not None else None

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
        order_column = _MARKET_ORDER_COLUMNS.get(sort, _MARKET_ORDER_COLUMNS["mcap"])
        order_direction = "ASC" if direction == "asc" else "DESC"
        sql = f"""
            WITH agg AS (
                SELECT p.base_token_id AS token_id,
                       SUM(pm.vol_buy_zig + pm.vol_sell_zig) AS vol_zig,
                       SUM(pm.tx_buy + pm.tx_sell) AS tx,
                       SUM(pm.tvl_zig) AS tvl_zig
                FROM pool_matrix pm
                JOIN pools p ON p.pool_id = pm.pool_id
                WHERE pm.bucket = :bucket
                GROUP BY p.base_token_id
            )
            SELECT t.token_id, t.denom, t.symbol, t.name, t.image_uri, t.created_at, t.exponent,
                   tm.price_in_zig, tm.mcap_zig, tm.fdv_zig, tm.holders,
                   a.vol_zig, a.tx, a.tvl_zig
            FROM tokens t
            LEFT JOIN token_matrix tm ON tm.token_id = t.token_id AND tm.bucket = :bucket
            LEFT JOIN agg a ON a.token_id = t.token_id
            WHERE (
                CAST(:search AS text) IS NULL
                OR t.symbol ILIKE :pattern ESCAPE '\\'
                OR t.name ILIKE :pattern ESCAPE '\\'
                OR t.denom ILIKE :pattern ESCAPE '\\'
            )
            ORDER BY {order_column} {order_direction} NULLS LAST, t.token_id DESC
            LIMIT :limit OFFSET :offset
        """
        params = {
            "bucket": bucket,
            "search": search,
            "pattern": contains_pattern(search) if search else None,
            "limit": limit,
            "offset": offset,
        }
        with self._engine.connect() as conn:
            rows = conn.execute(text(sql), params).mappings().all()
        return [map_row_to_token_market_row(row) for row in rows]
