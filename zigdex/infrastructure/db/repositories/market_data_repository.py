from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import text

from zigdex.application.ports.market_data_port import MarketDataPort
from zigdex.domain.entities.market import Bar, ClosePair, MatrixBucket, empty_matrix_bucket
from zigdex.infrastructure.db.mappers.market_mapper import map_row_to_bar, map_row_to_matrix_bucket
from zigdex.infrastructure.db.repositories.pool_repository import side_clause


def _bar_source(usd: bool) -> tuple[str, str]:
    if usd:
        return "ohlcv_1m_usd", "volume_usd"
    return "ohlcv_1m", "volume_zig"


class SqlMarketDataRepository(MarketDataPort):
    def __init__(self, engine):
        self._engine = engine

    def latest_exchange_rate(self) -> float | None:
        sql = "SELECT zig_usd FROM exchange_rates ORDER BY ts DESC LIMIT 1"
        with self._engine.connect() as conn:
            value = conn.execute(text(sql)).scalar()
        return float(value) if value else None

    def list_pool_bars(self, *, pool_id: int, start: datetime, end: datetime, usd: bool = False) -> list[Bar]:
        table, volume = _bar_source(usd)
        sql = f"""
            SELECT o.bucket_start, o.open, o.high, o.low, o.close, o.{volume} AS volume, o.trade_count
            FROM {table} o
            WHERE o.pool_id = :pool_id
              AND o.bucket_start >= :start
              AND o.bucket_start < :end
            ORDER BY o.bucket_start ASC
        """
        params = {"pool_id": pool_id, "start": start, "end": end}
        with self._engine.connect() as conn:
            rows = conn.execute(text(sql), params).mappings().all()
        return [map_row_to_bar(row) for row in rows]

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
        table, volume = _bar_source(usd)
        native_only = "AND p.is_uzig_quote = TRUE" if native_quote_only else ""
        sql = f"""
            SELECT o.bucket_start, o.open, o.high, o.low, o.close, o.{volume} AS volume, o.trade_count
            FROM {table} o
            JOIN pools p ON p.pool_id = o.pool_id
            WHERE {side_clause(side)} {native_only}
              AND o.bucket_start >= :start
              AND o.bucket_start < :end
            ORDER BY o.bucket_start ASC, o.pool_id ASC
        """
        params = {"token_id": token_id, "start": start, "end": end}
        with self._engine.connect() as conn:
            rows = conn.execute(text(sql), params).mappings().all()
        return [map_row_to_bar(row) for row in rows]

    def last_pool_bar_before(self, *, pool_id: int, ts: datetime, usd: bool = False) -> Bar | None:
        table, volume = _bar_source(usd)
        sql = f"""
            SELECT o.bucket_start, o.open, o.high, o.low, o.close, o.{volume} AS volume, o.trade_count
            FROM {table} o
            WHERE o.pool_id = :pool_id AND o.bucket_start < :ts
            ORDER BY o.bucket_start DESC
            LIMIT 1
        """
        with self._engine.connect() as conn:
            row = conn.execute(text(sql), {"pool_id": pool_id, "ts": ts}).mappings().first()
        return map_row_to_bar(row) if row else None

    def last_side_bar_before(
        self,
        *,
        token_id: int,
        side: str,
        native_quote_only: bool,
        ts: datetime,
        usd: bool = False,
    ) -> Bar | None:
        table, volume = _bar_source(usd)
        native_only = "AND p.is_uzig_quote = TRUE" if native_quote_only else ""
        sql = f"""
            SELECT o.bucket_start, o.open, o.high, o.low, o.close, o.{volume} AS volume, o.trade_count
            FROM {table} o
            JOIN pools p ON p.pool_id = o.pool_id
            WHERE {side_clause(side)} {native_only}
              AND o.bucket_start < :ts
            ORDER BY o.bucket_start DESC
            LIMIT 1
        """
        with self._engine.connect() as conn:
            row = conn.execute(text(sql), {"token_id": token_id, "ts": ts}).mappings().first()
        return map_row_to_bar(row) if row else None

    def latest_close(self, *, pool_id: int) -> float | None:
        sql = "SELECT close FROM ohlcv_1m WHERE pool_id = :pool_id ORDER BY bucket_start DESC LIMIT 1"
        with self._engine.connect() as conn:
            value = conn.execute(text(sql), {"pool_id": pool_id}).scalar()
        return float(value) if value is not None else None

    def close_pair(self, *, pool_id: int, lookback: datetime) -> ClosePair:
        sql = """
            SELECT
                (
                    SELECT close FROM ohlcv_1m
                    WHERE pool_id = :pool_id
                    ORDER BY bucket_start DESC
                    LIMIT 1
                ) AS last_close,
                (
                    SELECT close FROM ohlcv_1m
                    WHERE pool_id = :pool_id AND bucket_start <= :lookback
                    ORDER BY bucket_start DESC
                    LIMIT 1
                ) AS prev_close
        """
        with self._engine.connect() as conn:
            row = conn.execute(text(sql), {"pool_id": pool_id, "lookback": lookback}).mappings().first()
        if not row:
            return ClosePair(last_close=None, prev_close=None)
        return ClosePair(
            last_close=float(row["last_close"]) if row["last_close"] is not None else None,
            prev_close=float(row["prev_close"]) if row["prev_close"] is not None else None,
        )

    def matrix_by_side(self, *, token_id: int, side: str, buckets: Sequence[str]) -> dict[str, MatrixBucket]:
        sql = f"""
            SELECT pm.bucket,
                   COALESCE(SUM(pm.vol_buy_zig), 0) AS vol_buy,
                   COALESCE(SUM(pm.vol_sell_zig), 0) AS vol_sell,
                   COALESCE(SUM(pm.tx_buy), 0) AS tx_buy,
                   COALESCE(SUM(pm.tx_sell), 0) AS tx_sell,
                   COALESCE(SUM(pm.unique_traders), 0) AS unique_traders,
                   COALESCE(SUM(pm.tvl_zig), 0) AS tvl
            FROM pools p
            JOIN pool_matrix pm ON pm.pool_id = p.pool_id
            WHERE {side_clause(side)}
              AND pm.bucket = ANY(:buckets)
            GROUP BY pm.bucket
        """
        params = {"token_id": token_id, "buckets": list(buckets)}
        with self._engine.connect() as conn:
            rows = conn.execute(text(sql), params).mappings().all()
        return {row["bucket"]: map_row_to_matrix_bucket(row) for row in rows}

    def exchange_rate_at_or_before(self, *, ts: datetime) -> float | None:
        sql = "SELECT zig_usd FROM exchange_rates WHERE ts <= :ts ORDER BY ts DESC LIMIT 1"
        with self._engine.connect() as conn:
            value = conn.execute(text(sql), {"ts": ts}).scalar()
        return float(value) if value else None

    def native_market_totals(self, *, bucket: str) -> MatrixBucket:
        sql = """
            SELECT CAST(:bucket AS text) AS bucket,
                   COALESCE(SUM(pm.vol_buy_zig), 0) AS vol_buy,
                   COALESCE(SUM(pm.vol_sell_zig), 0) AS vol_sell,
                   COALESCE(SUM(pm.tx_buy), 0) AS tx_buy,
                   COALESCE(SUM(pm.tx_sell), 0) AS tx_sell,
                   COALESCE(SUM(pm.unique_traders), 0) AS unique_traders,
                   COALESCE(SUM(pm.tvl_zig), 0) AS tvl
            FROM pool_matrix pm
            JOIN pools p ON p.pool_id = pm.pool_id
            WHERE pm.bucket = :bucket
              AND p.is_uzig_quote = TRUE
        """
        with self._engine.connect() as conn:
            row = conn.execute(text(sql), {"bucket": bucket}).mappings().first()
        return map_row_to_matrix_bucket(row) if row else empty_matrix_bucket(bucket)
