from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import text

from zigdex.application.ports.trade_port import TradePort
from zigdex.domain.entities.trade import TradePage
from zigdex.domain.entities.trade_filters import TradePredicate
from zigdex.domain.services.token_identity import NATIVE_ALIASES
from zigdex.infrastructure.db.mappers.trade_mapper import map_row_to_trade
from zigdex.infrastructure.db.repositories.trade_predicates import translate_predicates

_NATIVE_DENOMS_SQL = ", ".join(f"'{alias}'" for alias in sorted(NATIVE_ALIASES))

# Native leg when a side is the native denom, else the quote leg valued in native.
_WORTH_ZIG_SQL = f"""
    COALESCE(
        CASE
            WHEN lower(base.offer_asset_denom) IN ({_NATIVE_DENOMS_SQL})
                THEN base.offer_amount_base / POWER(10, COALESCE(base.offer_exp, 6))
            WHEN lower(base.ask_asset_denom) IN ({_NATIVE_DENOMS_SQL})
                THEN base.ask_amount_base / POWER(10, COALESCE(base.ask_exp, 6))
        END,
        (
            CASE
                WHEN base.direction = 'buy'
                    THEN base.offer_amount_base / POWER(10, COALESCE(base.qexp, 6))
                ELSE base.return_amount_base / POWER(10, COALESCE(base.qexp, 6))
            END
        ) * CASE WHEN base.is_uzig_quote THEN 1 ELSE base.pq_price_in_zig END
    )
"""


def _worth_query(row_where: str) -> str:
    return f"""
        WITH base AS (
            SELECT
                t.created_at, t.tx_hash, t.signer, t.direction, t.is_router,
                t.offer_asset_denom, t.offer_amount_base::numeric AS offer_amount_base,
                t.ask_asset_denom, t.ask_amount_base::numeric AS ask_amount_base,
                t.return_amount_base::numeric AS return_amount_base,
                p.pair_contract,
                p.is_uzig_quote,
                q.exponent AS qexp,
                b.exponent AS bexp,
                toff.exponent AS offer_exp,
                task.exponent AS ask_exp,
                fx.zig_usd_at_trade AS fx_zig_usd,
                (
                    SELECT price_in_zig FROM prices
                    WHERE token_id = p.quote_token_id
                    ORDER BY updated_at DESC
                    LIMIT 1
                ) AS pq_price_in_zig
            FROM trades t
            JOIN pools p ON p.pool_id = t.pool_id
            JOIN tokens q ON q.token_id = p.quote_token_id
            JOIN tokens b ON b.token_id = p.base_token_id
            LEFT JOIN tokens toff ON toff.denom = t.offer_asset_denom
            LEFT JOIN tokens task ON task.denom = t.ask_asset_denom
            LEFT JOIN LATERAL (
                SELECT zig_usd AS zig_usd_at_trade
                FROM exchange_rates
                WHERE ts <= t.created_at
                ORDER BY ts DESC
                LIMIT 1
            ) fx ON TRUE
            WHERE {row_where}
        ),
        priced AS (
            SELECT base.*, {_WORTH_ZIG_SQL} AS worth_zig
            FROM base
        ),
        worth AS (
            SELECT priced.*,
                   priced.worth_zig * COALESCE(priced.fx_zig_usd, CAST(:zig_usd AS numeric)) AS worth_usd
            FROM priced
        )
    """


class SqlTradeRepository(TradePort):
    def __init__(self, engine):
        self._engine = engine

    def list_trades(
        self,
        *,
        predicates: Sequence[TradePredicate],
        zig_usd: float | None,
        limit: int,
        offset: int,
    ) -> TradePage:
        parts = translate_predicates(predicates)
        cte = _worth_query(" AND ".join(parts.row_clauses) or "TRUE")
        worth_where = " AND ".join(parts.worth_clauses) or "TRUE"
        page_sql = f"""
            {cte}
            SELECT w.*, COUNT(*) OVER () AS total
            FROM worth w
            WHERE {worth_where}
            ORDER BY w.created_at DESC
            LIMIT :limit OFFSET :offset
        """
        params = dict(parts.params)
        params["zig_usd"] = zig_usd
        with self._engine.connect() as conn:
            rows = conn.execute(text(page_sql), {**params, "limit": limit, "offset": offset}).mappings().all()
            if rows:
                total = int(rows[0]["total"])
            elif offset > 0:
                count_sql = f"{cte} SELECT COUNT(*) FROM worth w WHERE {worth_where}"
                total = int(conn.execute(text(count_sql), params).scalar() or 0)
            else:
                total = 0
        return TradePage(rows=[map_row_to_trade(row) for row in rows], total=total)

    def latest_trade_price(self, *, pool_id: int) -> float | None:
        sql = """
            SELECT price_in_quote
            FROM trades
            WHERE pool_id = :pool_id AND price_in_quote IS NOT NULL
            ORDER BY created_at DESC
            LIMIT 1
        """
        with self._engine.connect() as conn:
            value = conn.execute(text(sql), {"pool_id": pool_id}).scalar()
        return float(value) if value is not None else None
