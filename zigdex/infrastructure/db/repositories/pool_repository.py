from __future__ import annotations

from datetime import datetime

from sqlalchemy import text

from zigdex.application.ports.pool_port import PoolPort
from zigdex.domain.entities.pool import MarketPoolRow, PoolReserves, PoolStateRow, TokenPoolRow
from zigdex.domain.entities.token import Token
from zigdex.infrastructure.db.mappers.pool_mapper import (
    map_row_to_market_pool,
    map_row_to_pool_reserves,
    map_row_to_pool_state,
    map_row_to_token_pool,
)
from zigdex.infrastructure.db.mappers.token_mapper import map_row_to_token

_SIDE_CLAUSES = {
    "base": "p.base_token_id = :token_id",
    "quote": "p.quote_token_id = :token_id",
    "either": "(p.base_token_id = :token_id OR p.quote_token_id = :token_id)",
}

_MARKET_POOL_ORDER = {
    "tvl": "COALESCE(pm.tvl_zig, 0)",
    "volume": "COALESCE(pm.vol_buy_zig, 0) + COALESCE(pm.vol_sell_zig, 0)",
}


def side_clause(side: str) -> str:
    return _SIDE_CLAUSES.get(side, _SIDE_CLAUSES["base"])


class SqlPoolRepository(PoolPort):
    def __init__(self, engine):
        self._engine = engine

    def has_native_quoted_pool(self, *, token_id: int) -> bool:
        sql = "SELECT 1 FROM pools WHERE base_token_id = :token_id AND is_uzig_quote = TRUE LIMIT 1"
        with self._engine.connect() as conn:
            row = conn.execute(text(sql), {"token_id": token_id}).first()
        return row is not None

    def has_quote_side_pool(self, *, token_id: int) -> bool:
        sql = "SELECT 1 FROM pools WHERE quote_token_id = :token_id LIMIT 1"
        with self._engine.connect() as conn:
            row = conn.execute(text(sql), {"token_id": token_id}).first()
        return row is not None

    def list_native_quoted_pools(self, *, token_id: int) -> list[PoolReserves]:
        sql = """
            SELECT *
            FROM (
                SELECT
                    p.pool_id,
                    p.pair_contract,
                    p.pair_type,
                    (
                        SELECT pr.price_in_zig
                        FROM prices pr
                        WHERE pr.pool_id = p.pool_id AND pr.token_id = :token_id
                        ORDER BY pr.updated_at DESC
                        LIMIT 1
                    ) AS price_in_zig,
                    ps.reserve_base_base,
                    ps.reserve_quote_base,
                    tb.exponent AS base_exp,
                    tq.exponent AS quote_exp,
                    COALESCE(pm.tvl_zig, 0) AS tvl_zig
                FROM pools p
                LEFT JOIN pool_state ps ON ps.pool_id = p.pool_id
                JOIN tokens tb ON tb.token_id = p.base_token_id
                JOIN tokens tq ON tq.token_id = p.quote_token_id
                LEFT JOIN pool_matrix pm ON pm.pool_id = p.pool_id AND pm.bucket = '24h'
                WHERE p.is_uzig_quote = TRUE AND p.base_token_id = :token_id
            ) latest
            WHERE latest.price_in_zig IS NOT NULL
            ORDER BY latest.pool_id ASC
        """
        with self._engine.connect() as conn:
            rows = conn.execute(text(sql), {"token_id": token_id}).mappings().all()
        return [map_row_to_pool_reserves(row) for row in rows]

    def find_pool_id(self, *, ref: str, token_id: int | None = None, side: str | None = None) -> int | None:
        if token_id is not None and side in ("base", "quote"):
            owner = f"AND {side_clause(side)}"
        else:
            owner = ""
        sql = f"""
            SELECT p.pool_id
            FROM pools p
            WHERE (p.pool_id::text = :ref OR p.pair_contract = :ref)
            {owner}
            LIMIT 1
        """
        with self._engine.connect() as conn:
            value = conn.execute(text(sql), {"ref": ref, "token_id": token_id}).scalar()
        return int(value) if value is not None else None

    def most_active_pool_id(
        self,
        *,
        token_id: int,
        side: str,
        native_quote_only: bool = False,
        usd: bool = False,
    ) -> int | None:
        bars = "ohlcv_1m_usd" if usd else "ohlcv_1m"
        native_only = "AND p.is_uzig_quote = TRUE" if native_quote_only else ""
        sql = f"""
            WITH cps AS (
                SELECT p.pool_id
                FROM pools p
                WHERE {side_clause(side)} {native_only}
            ),
            act AS (
                SELECT cp.pool_id, MAX(o.bucket_start) AS last_bar
                FROM cps cp
                LEFT JOIN {bars} o ON o.pool_id = cp.pool_id
                GROUP BY cp.pool_id
            )
            SELECT pool_id
            FROM act
            ORDER BY last_bar DESC NULLS LAST, pool_id ASC
            LIMIT 1
        """
        with self._engine.connect() as conn:
            value = conn.execute(text(sql), {"token_id": token_id}).scalar()
        return int(value) if value is not None else None

    def most_active_pair_pool_id(self, *, base_token_id: int, quote_token_id: int) -> int | None:
        sql = """
            WITH cps AS (
                SELECT pool_id
                FROM pools
                WHERE base_token_id = :base_token_id AND quote_token_id = :quote_token_id
            ),
            act AS (
                SELECT cp.pool_id, MAX(o.bucket_start) AS last_bar
                FROM cps cp
                LEFT JOIN ohlcv_1m o ON o.pool_id = cp.pool_id
                GROUP BY cp.pool_id
            )
            SELECT pool_id
            FROM act
            ORDER BY last_bar DESC NULLS LAST, pool_id ASC
            LIMIT 1
        """
        params = {"base_token_id": base_token_id, "quote_token_id": quote_token_id}
        with self._engine.connect() as conn:
            value = conn.execute(text(sql), params).scalar()
        return int(value) if value is not None else None

    def count_pools(self, *, token_id: int, side: str) -> int:
        sql = f"SELECT COUNT(*) FROM pools p WHERE {side_clause(side)}"
        with self._engine.connect() as conn:
            value = conn.execute(text(sql), {"token_id": token_id}).scalar()
        return int(value or 0)

    def first_pool_created_at(self, *, token_id: int, side: str) -> datetime | None:
        sql = f"SELECT MIN(p.created_at) FROM pools p WHERE {side_clause(side)}"
        with self._engine.connect() as conn:
            return conn.execute(text(sql), {"token_id": token_id}).scalar()

    def list_base_pool_states(self, *, token_id: int) -> list[PoolStateRow]:
        sql = """
            SELECT
                p.pool_id,
                ps.reserve_base_base,
                ps.reserve_quote_base,
                tb.exponent AS base_exp,
                tq.exponent AS quote_exp,
                (
                    SELECT pr.price_in_zig
                    FROM prices pr
                    WHERE pr.pool_id = p.pool_id AND pr.token_id = p.base_token_id
                    ORDER BY pr.updated_at DESC
                    LIMIT 1
                ) AS price_in_zig
            FROM pools p
            LEFT JOIN pool_state ps ON ps.pool_id = p.pool_id
            JOIN tokens tb ON tb.token_id = p.base_token_id
            JOIN tokens tq ON tq.token_id = p.quote_token_id
            WHERE p.base_token_id = :token_id
        """
        with self._engine.connect() as conn:
            rows = conn.execute(text(sql), {"token_id": token_id}).mappings().all()
        return [map_row_to_pool_state(row) for row in rows]

    def get_pool_state(self, *, pool_id: int) -> PoolStateRow | None:
        sql = """
            SELECT
                ps.pool_id,
                ps.reserve_base_base,
                ps.reserve_quote_base,
                b.exponent AS base_exp,
                q.exponent AS quote_exp,
                NULL AS price_in_zig
            FROM pool_state ps
            JOIN pools p ON p.pool_id = ps.pool_id
            JOIN tokens b ON b.token_id = p.base_token_id
            JOIN tokens q ON q.token_id = p.quote_token_id
            WHERE ps.pool_id = :pool_id
        """
        with self._engine.connect() as conn:
            row = conn.execute(text(sql), {"pool_id": pool_id}).mappings().first()
        return map_row_to_pool_state(row) if row else None

    def quote_side_tvl_native(self, *, token_id: int) -> float:
        sql = """
            SELECT COALESCE(SUM(ps.tvl_zig), 0)
            FROM pool_state ps
            JOIN pools p ON p.pool_id = ps.pool_id
            WHERE p.quote_token_id = :token_id
        """
        with self._engine.connect() as conn:
            value = conn.execute(text(sql), {"token_id": token_id}).scalar()
        return float(value or 0)

    def get_base_token(self, *, pool_id: int) -> Token | None:
        sql = """
            SELECT b.token_id, b.denom, b.symbol, b.name, b.exponent
            FROM pools p
            JOIN tokens b ON b.token_id = p.base_token_id
            WHERE p.pool_id = :pool_id
        """
        with self._engine.connect() as conn:
            row = conn.execute(text(sql), {"pool_id": pool_id}).mappings().first()
        return map_row_to_token(row) if row else None

    def list_token_pools(self, *, token_id: int, side: str, bucket: str) -> list[TokenPoolRow]:
        sql = f"""
            SELECT
                p.pool_id, p.pair_contract, p.is_uzig_quote, p.created_at,
                p.base_token_id, b.symbol AS base_symbol, b.denom AS base_denom, b.exponent AS base_exp,
                p.quote_token_id, q.symbol AS quote_symbol, q.denom AS quote_denom, q.exponent AS quote_exp,
                COALESCE(pm.tvl_zig, 0) AS tvl_zig,
                COALESCE(pm.vol_buy_zig, 0) + COALESCE(pm.vol_sell_zig, 0) AS vol_zig,
                COALESCE(pm.tx_buy, 0) + COALESCE(pm.tx_sell, 0) AS tx,
                COALESCE(pm.unique_traders, 0) AS unique_traders,
                pr.price_in_zig
            FROM pools p
            JOIN tokens b ON b.token_id = p.base_token_id
            JOIN tokens q ON q.token_id = p.quote_token_id
            LEFT JOIN pool_matrix pm ON pm.pool_id = p.pool_id AND pm.bucket = :bucket
            LEFT JOIN LATERAL (
                SELECT price_in_zig
                FROM prices
                WHERE pool_id = p.pool_id AND token_id = p.base_token_id
                ORDER BY updated_at DESC
                LIMIT 1
            ) pr ON TRUE
            WHERE {side_clause(side)}
            ORDER BY p.created_at ASC
        """
        with self._engine.connect() as conn:
            rows = conn.execute(text(sql), {"token_id": token_id, "bucket": bucket}).mappings().all()
        return [map_row_to_token_pool(row) for row in rows]

    def list_native_market_pools(self, *, order: str, bucket: str, limit: int) -> list[MarketPoolRow]:
        order_column = _MARKET_POOL_ORDER.get(order, _MARKET_POOL_ORDER["volume"])
        sql = f"""
            SELECT
                p.pool_id, p.pair_contract, p.pair_type,
                p.base_token_id, b.symbol AS base_symbol, b.denom AS base_denom, b.exponent AS base_exp,
                p.quote_token_id, q.symbol AS quote_symbol, q.denom AS quote_denom, q.exponent AS quote_exp,
                COALESCE(pm.tvl_zig, 0) AS tvl_zig,
                COALESCE(pm.vol_buy_zig, 0) + COALESCE(pm.vol_sell_zig, 0) AS vol_zig,
                COALESCE(pm.tx_buy, 0) + COALESCE(pm.tx_sell, 0) AS tx,
                (
                    SELECT pr.price_in_zig
                    FROM prices pr
                    WHERE pr.pool_id = p.pool_id AND pr.token_id = p.base_token_id
                    ORDER BY pr.updated_at DESC
                    LIMIT 1
                ) AS price_in_zig
            FROM pools p
            JOIN tokens b ON b.token_id = p.base_token_id
            JOIN tokens q ON q.token_id = p.quote_token_id
            LEFT JOIN pool_matrix pm ON pm.pool_id = p.pool_id AND pm.bucket = :bucket
            WHERE p.is_uzig_quote = TRUE
            ORDER BY {order_column} DESC, p.pool_id ASC
            LIMIT :limit
        """
        with self._engine.connect() as conn:
            rows = conn.execute(text(sql), {"bucket": bucket, "limit": limit}).mappings().all()
        return [map_row_to_market_pool(row) for row in rows]
