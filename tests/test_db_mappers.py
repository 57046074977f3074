from __future__ import annotations

import unittest
from datetime import datetime, timezone
from decimal import Decimal

from zigdex.domain.exceptions import MissingColumnError
from zigdex.infrastructure.db.mappers.market_mapper import map_row_to_bar
from zigdex.infrastructure.db.mappers.pool_mapper import map_row_to_pool_reserves, map_row_to_token_pool
from zigdex.infrastructure.db.mappers.token_mapper import map_row_to_token, map_row_to_token_security
from zigdex.infrastructure.db.mappers.trade_mapper import map_row_to_trade


class TokenMapperTests(unittest.TestCase):
    def test_map_row_to_token(self):
        token = map_row_to_token(
            {"token_id": 3, "denom": "coin.zig1x.ufoo", "symbol": "FOO", "name": "Foo", "exponent": 6}
        )

        self.assertEqual(token.token_id, 3)
        self.assertEqual(token.symbol, "FOO")
        self.assertEqual(token.exponent, 6)

    def test_missing_column_fails_loudly(self):
        with self.assertRaises(MissingColumnError):
            map_row_to_token({"token_id": 3, "denom": "x", "symbol": "X", "name": None})

    def test_security_supplies_are_kept_as_text(self):
        security = map_row_to_token_security(
            {
                "is_mintable": False,
                "can_change_minting_cap": None,
                "max_supply_base": Decimal("1000000000000000000000000"),
                "total_supply_base": None,
                "creator_address": None,
                "creator_balance_base": None,
                "creator_pct_of_max": Decimal("1.5"),
                "top10_pct_of_max": None,
                "holders_count": 42,
                "first_seen_at": None,
                "checked_at": None,
            }
        )

        self.assertEqual(security.max_supply_base, "1000000000000000000000000")
        self.assertIsNone(security.total_supply_base)
        self.assertEqual(security.creator_pct_of_max, 1.5)


class PoolMapperTests(unittest.TestCase):
    def test_map_row_to_pool_reserves_converts_decimals(self):
        pool = map_row_to_pool_reserves(
            {
                "pool_id": 9,
                "pair_contract": "zig1pair",
                "pair_type": "xyk",
                "price_in_zig": Decimal("0.25"),
                "reserve_base_base": Decimal("4000000"),
                "reserve_quote_base": None,
                "base_exp": 6,
                "quote_exp": None,
                "tvl_zig": None,
            }
        )

        self.assertEqual(pool.price_in_zig, 0.25)
        self.assertEqual(pool.reserve_base_base, 4_000_000.0)
        self.assertIsNone(pool.reserve_quote_base)
        self.assertIsNone(pool.quote_exponent)
        self.assertEqual(pool.tvl_zig, 0.0)

    def test_map_row_to_token_pool_builds_legs(self):
        row = {
            "pool_id": 9,
            "pair_contract": "zig1pair",
            "base_token_id": 3,
            "base_symbol": "FOO",
            "base_denom": "coin.zig1x.ufoo",
            "base_exp": 6,
            "quote_token_id": 1,
            "quote_symbol": "ZIG",
            "quote_denom": "uzig",
            "quote_exp": 6,
            "is_uzig_quote": True,
            "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
            "price_in_zig": 0.5,
            "tvl_zig": 100,
            "vol_zig": None,
            "tx": None,
            "unique_traders": 4,
        }

        pool = map_row_to_token_pool(row)

        self.assertEqual(pool.base.symbol, "FOO")
        self.assertEqual(pool.quote.denom, "uzig")
        self.assertEqual(pool.vol_zig, 0.0)
        self.assertEqual(pool.tx, 0)
        self.assertEqual(pool.unique_traders, 4)


class MarketAndTradeMapperTests(unittest.TestCase):
    def test_map_row_to_bar(self):
        bar = map_row_to_bar(
            {
                "bucket_start": datetime(2024, 1, 1, tzinfo=timezone.utc),
                "open": Decimal("1"),
                "high": Decimal("2"),
                "low": None,
                "close": Decimal("1.5"),
                "volume": Decimal("10"),
                "trade_count": 3,
            }
        )

        self.assertEqual(bar.high, 2.0)
        self.assertEqual(bar.low, 0.0)
        self.assertEqual(bar.trade_count, 3)

    def test_trade_mapper_requires_exponent_columns(self):
        row = {
            "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
            "tx_hash": "H",
            "pair_contract": "zig1pair",
            "signer": None,
            "direction": "buy",
            "is_router": None,
            "offer_asset_denom": "uzig",
            "offer_amount_base": 1,
            "ask_asset_denom": None,
            "ask_amount_base": None,
            "return_amount_base": 2,
            "is_uzig_quote": True,
            "bexp": 6,
            "offer_exp": None,
            "ask_exp": None,
            "pq_price_in_zig": None,
            "fx_zig_usd": None,
        }

        with self.assertRaises(MissingColumnError):
            map_row_to_trade(row)

        trade = map_row_to_trade({**row, "qexp": 6})
        self.assertFalse(trade.is_router)
        self.assertEqual(trade.return_amount_base, 2.0)


if __name__ == "__main__":
    unittest.main()
