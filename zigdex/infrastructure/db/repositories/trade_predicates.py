from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from zigdex.domain.entities.trade_filters import (
    ActionFilter,
    BaseTokenFilter,
    CreatedBetweenFilter,
    CreatedSinceFilter,
    DirectionFilter,
    EitherSideTokenFilter,
    LargeTradeFilter,
    PairContractFilter,
    PoolIdFilter,
    QuoteTokenFilter,
    SignerFilter,
    TradePredicate,
    WorthClassFilter,
    WorthRangeFilter,
)
from zigdex.domain.services.trade_shaping import SHARK_MAX, SHRIMP_MAX

_WORTH_COLUMNS = {"zig": "w.worth_zig", "usd": "w.worth_usd"}


@dataclass
class TradeQueryParts:
    """Bound-parameter SQL fragments for trade listing.

    ``row_clauses`` filter joined trade rows, ``worth_clauses`` filter on the computed
    worth columns. Clause text never contains caller values.
    """

    row_clauses: list[str] = field(default_factory=list)
    worth_clauses: list[str] = field(default_factory=list)
    params: dict[str, Any] = field(default_factory=dict)

    def bind(self, value: Any) -> str:
        name = f"f{len(self.params)}"
        self.params[name] = value
        return f":{name}"


def _worth_column(unit: str) -> str:
    return _WORTH_COLUMNS.get(unit, _WORTH_COLUMNS["usd"])


def translate_predicates(predicates: Sequence[TradePredicate]) -> TradeQueryParts:
    parts = TradeQueryParts()
    for predicate in predicates:
        if isinstance(predicate, ActionFilter):
            if predicate.include_liquidity:
                parts.row_clauses.append("t.action IN ('swap', 'provide', 'withdraw')")
            else:
                parts.row_clauses.append("t.action = 'swap'")
        elif isinstance(predicate, DirectionFilter):
            parts.row_clauses.append(f"t.direction = {parts.bind(predicate.direction)}")
        elif isinstance(predicate, BaseTokenFilter):
            parts.row_clauses.append(f"p.base_token_id = {parts.bind(predicate.token_id)}")
        elif isinstance(predicate, QuoteTokenFilter):
            parts.row_clauses.append(f"p.quote_token_id = {parts.bind(predicate.token_id)}")
        elif isinstance(predicate, EitherSideTokenFilter):
            token = parts.bind(predicate.token_id)
            parts.row_clauses.append(f"(p.base_token_id = {token} OR p.quote_token_id = {token})")
        elif isinstance(predicate, SignerFilter):
            parts.row_clauses.append(f"t.signer = {parts.bind(predicate.address)}")
        elif isinstance(predicate, PoolIdFilter):
            parts.row_clauses.append(f"p.pool_id = {parts.bind(predicate.pool_id)}")
        elif isinstance(predicate, PairContractFilter):
            parts.row_clauses.append(f"p.pair_contract = {parts.bind(predicate.pair_contract)}")
        elif isinstance(predicate, CreatedSinceFilter):
            parts.row_clauses.append(f"t.created_at >= {parts.bind(predicate.since)}")
        elif isinstance(predicate, CreatedBetweenFilter):
            start = parts.bind(predicate.start)
            end = parts.bind(predicate.end)
            parts.row_clauses.append(f"t.created_at >= {start} AND t.created_at < {end}")
        elif isinstance(predicate, LargeTradeFilter):
            parts.row_clauses.append(
                "EXISTS (SELECT 1 FROM large_trades lt"
                " WHERE lt.tx_hash = t.tx_hash AND lt.pool_id = t.pool_id AND lt.direction = t.direction"
                f" AND lt.bucket = {parts.bind(predicate.bucket)})"
            )
        elif isinstance(predicate, WorthClassFilter):
            worth = _worth_column(predicate.unit)
            if predicate.klass == "shrimp":
                parts.worth_clauses.append(f"{worth} < {parts.bind(SHRIMP_MAX)}")
            elif predicate.klass == "shark":
                low = parts.bind(SHRIMP_MAX)
                high = parts.bind(SHARK_MAX)
                parts.worth_clauses.append(f"{worth} >= {low} AND {worth} <= {high}")
            elif predicate.klass == "whale":
                parts.worth_clauses.append(f"{worth} > {parts.bind(SHARK_MAX)}")
            else:
                raise ValueError(f"Unknown worth class: {predicate.klass}")
        elif isinstance(predicate, WorthRangeFilter):
            worth = _worth_column(predicate.unit)
            if predicate.min_value is not None:
                parts.worth_clauses.append(f"{worth} >= {parts.bind(float(predicate.min_value))}")
            if predicate.max_value is not None:
                parts.worth_clauses.append(f"{worth} <= {parts.bind(float(predicate.max_value))}")
        else:
            raise TypeError(f"Unsupported trade predicate: {type(predicate).__name__}")
    return parts
