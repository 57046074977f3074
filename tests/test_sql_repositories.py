from __future__ import annotations

import unittest
from pathlib import Path

from sqlalchemy import create_engine, text

from zigdex.infrastructure.db.repositories.pool_repository import SqlPoolRepository
from zigdex.infrastructure.db.repositories.token_repository import SqlTokenRepository, contains_pattern
from zigdex.infrastructure.db.repositories.trade_repository import _WORTH_ZIG_SQL


class _RecordedResult:
    def __init__(self, rows):
        self._rows = rows

    def mappings(self):
        return self

    def all(self):
        return list(self._rows)


class _RecordingConnection:
    def __init__(self, calls, rows):
        self._calls = calls
        self._rows = rows

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, statement, params):
        self._calls.append((str(statement), params))
        return _RecordedResult(self._rows)


class _RecordingEngine:
    def __init__(self, rows=()):
        self.calls = []
        self._rows = rows

    def connect(self):
        return _RecordingConnection(self.calls, self._rows)


_POOL_SCHEMA = (
    """
    CREATE TABLE tokens (
        token_id INTEGER PRIMARY KEY, denom TEXT, symbol TEXT, name TEXT, exponent INTEGER
    )
    """,
    """
    CREATE TABLE pools (
        pool_id INTEGER PRIMARY KEY, pair_contract TEXT, pair_type TEXT,
        base_token_id INTEGER, quote_token_id INTEGER, is_uzig_quote BOOLEAN
    )
    """,
    "CREATE TABLE pool_state (pool_id INTEGER, reserve_base_base NUMERIC, reserve_quote_base NUMERIC)",
    "CREATE TABLE prices (token_id INTEGER, pool_id INTEGER, price_in_zig NUMERIC, updated_at TIMESTAMP)",
    "CREATE TABLE pool_matrix (pool_id INTEGER, bucket TEXT, tvl_zig NUMERIC)",
)


def _pool_engine():
    engine = create_engine("sqlite://")
    with engine.begin() as conn:
        for ddl in _POOL_SCHEMA:
            conn.execute(text(ddl))
        conn.execute(
            text("INSERT INTO tokens VALUES (1, 'uzig', 'ZIG', 'Zig', 6), (2, 'ufoo', 'FOO', 'Foo', 6)")
        )
        conn.execute(
            text(
                "INSERT INTO pools VALUES "
                "(10, 'zig1pairfoo', 'xyk', 2, 1, 1), "
                "(11, 'zig1pairbar', 'xyk', 3, 1, 1), "
                "(12, 'zig1pairnoprice', 'xyk', 2, 1, 1)"
            )
        )
        conn.execute(
            text("INSERT INTO pool_state VALUES (10, 1000000000, 500000000), (12, 1000000, 1000000)")
        )
        conn.execute(
            text("INSERT INTO prices VALUES (:token_id, :pool_id, :price, :updated_at)"),
            [
                {"token_id": 2, "pool_id": 10, "price": 0.5, "updated_at": "2026-01-01 10:00:00"},
                {"token_id": 2, "pool_id": 10, "price": 0.2, "updated_at": "2026-01-01 11:00:00"},
                {"token_id": 2, "pool_id": 11, "price": 9.0, "updated_at": "2026-01-01 11:00:00"},
            ],
        )
        conn.execute(text("INSERT INTO pool_matrix VALUES (10, '24h', 1234.5)"))
    return engine


class PoolRepositoryTests(unittest.TestCase):
    def test_native_quoted_pools_carry_one_row_with_the_latest_price(self):
        pools = SqlPoolRepository(_pool_engine()).list_native_quoted_pools(token_id=2)

        self.assertEqual([pool.pool_id for pool in pools], [10])
        self.assertEqual(pools[0].price_in_zig, 0.2)
        self.assertEqual(pools[0].tvl_zig, 1234.5)
        self.assertEqual(pools[0].base_exponent, 6)

    def test_native_quoted_pools_skip_pools_where_the_token_is_not_base(self):
        pools = SqlPoolRepository(_pool_engine()).list_native_quoted_pools(token_id=1)

        self.assertEqual(pools, [])


class TokenRepositoryTests(unittest.TestCase):
    def test_contains_pattern_wraps_and_escapes_wildcards(self):
        self.assertEqual(contains_pattern("foo"), "%foo%")
        self.assertEqual(contains_pattern("50%_off"), "%50\\%\\_off%")
        self.assertEqual(contains_pattern("a\\b"), "%a\\\\b%")

    def test_candidates_match_names_by_substring(self):
        engine = _RecordingEngine(
            rows=[{"token_id": 7, "denom": "ufoo", "symbol": "FOO", "name": "Foo Token", "exponent": 6}]
        )

        tokens = SqlTokenRepository(engine).find_token_candidates(identifier="Foo")

        sql, params = engine.calls[0]
        self.assertIn("t.name ILIKE :name_pattern", sql)
        self.assertEqual(params["name_pattern"], "%Foo%")
        self.assertEqual(params["q"], "Foo")
        self.assertEqual(params["limit"], 25)
        self.assertEqual([token.token_id for token in tokens], [7])

    def test_candidates_are_ranked_before_the_cap(self):
        engine = _RecordingEngine()

        SqlTokenRepository(engine).find_token_candidates(identifier="zig")

        sql, _ = engine.calls[0]
        compact = " ".join(sql.split())
        self.assertIn("WHEN lower(t.denom) = lower(:q) THEN 0", compact)
        self.assertIn("WHEN lower(t.symbol) = lower(:q) THEN 1", compact)
        self.assertIn("THEN 2 ELSE 3 END, t.token_id DESC LIMIT :limit", compact)
        self.assertNotIn("ORDER BY t.token_id DESC", compact)

    def test_repository_source_escapes_like_wildcards(self):
        source = Path("zigdex/infrastructure/db/repositories/token_repository.py").read_text(encoding="utf-8")
        self.assertIn("t.name ILIKE :name_pattern ESCAPE '\\'", source)
        self.assertIn('"pattern": contains_pattern(search) if search else None', source)


class TradeRepositoryTests(unittest.TestCase):
    def test_worth_treats_every_native_alias_as_the_native_leg(self):
        compact = " ".join(_WORTH_ZIG_SQL.split())

        self.assertIn("WHEN lower(base.offer_asset_denom) IN ('uzig', 'zig')", compact)
        self.assertIn("WHEN lower(base.ask_asset_denom) IN ('uzig', 'zig')", compact)
        self.assertNotIn("= 'uzig'", compact)

    def test_worth_query_prices_usd_at_trade_time(self):
        source = Path("zigdex/infrastructure/db/repositories/trade_repository.py").read_text(encoding="utf-8")
        self.assertIn("WHERE ts <= t.created_at", source)
        self.assertIn("COALESCE(priced.fx_zig_usd, CAST(:zig_usd AS numeric)) AS worth_usd", source)
        self.assertIn("ORDER BY updated_at DESC", source)


if __name__ == "__main__":
    unittest.main()
