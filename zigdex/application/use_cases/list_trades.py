from __future__ import annotations

import logging
import math
import re
from collections.abc import Callable
from datetime import datetime, timedelta

from zigdex.application.dto.common import NotFoundOutput
from zigdex.application.dto.trades import ListTradesInput, ListTradesOutput
from zigdex.application.ports.market_data_port import MarketDataPort
from zigdex.application.ports.pool_port import PoolPort
from zigdex.application.ports.trade_port import TradePort
from zigdex.application.use_cases.summary_common import utcnow
from zigdex.application.use_cases.token_resolver import TokenResolver
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
from zigdex.domain.exceptions import InvalidQueryError
from zigdex.domain.services.token_identity import is_native_currency
from zigdex.domain.services.trade_shaping import WORTH_CLASSES, classify_trade, shape_trade

logger = logging.getLogger(__name__)

SCOPES = ("all", "token", "pool", "wallet", "recent", "large")
LARGE_BUCKETS = ("30m", "1h", "4h", "24h")
DIRECTIONS = ("buy", "sell", "provide", "withdraw")
PAGE_SIZES = (100, 500, 1000)
DEFAULT_TF = "24h"

TF_MINUTES = {
    "30m": 30,
    "1h": 60,
    "2h": 120,
    "4h": 240,
    "8h": 480,
    "12h": 720,
    "24h": 1440,
    "1d": 1440,
    "3d": 4320,
    "5d": 7200,
    "7d": 10080,
    "14d": 20160,
    "30d": 43200,
    "60d": 86400,
}

_DAYS_RE = re.compile(r"^(\d+)d$")


def tf_to_minutes(tf: str | None) -> int:
    key = (tf or DEFAULT_TF).lower()
    if key in TF_MINUTES:
        return TF_MINUTES[key]
    match = _DAYS_RE.match(key)
    if match:
        return max(1, int(match.group(1))) * 1440
    return TF_MINUTES[DEFAULT_TF]


class ListTradesUseCase:
    def __init__(
        self,
        *,
        resolver: TokenResolver,
        pool_port: PoolPort,
        trade_port: TradePort,
        market_data_port: MarketDataPort,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._resolver = resolver
        self._pool_port = pool_port
        self._trade_port = trade_port
        self._market_data_port = market_data_port
        self._clock = clock

    def execute(self, command: ListTradesInput) -> ListTradesOutput | NotFoundOutput:
        if command.scope not in SCOPES:
            raise InvalidQueryError(f"scope must be one of {', '.join(SCOPES)}.")

        unit = "zig" if command.unit == "zig" else "usd"
        if command.scope == "large":
            tf = (command.scope_ref or DEFAULT_TF).lower()
        else:
            tf = command.tf or DEFAULT_TF
        limit = command.limit if command.limit in PAGE_SIZES else PAGE_SIZES[0]
        page = max(1, command.page or 1)

        predicates: list[TradePredicate] = []
        scope_result = self._scope_predicates(command, predicates)
        if scope_result is not None:
            return scope_result
        predicates.extend(self._filter_predicates(command, unit=unit, tf=tf))

        zig_usd = self._market_data_port.latest_exchange_rate()
        result = self._trade_port.list_trades(
            predicates=predicates,
            zig_usd=zig_usd,
            limit=limit,
            offset=(page - 1) * limit,
        )
        rows = [
            classify_trade(shape_trade(row, zig_usd=zig_usd), unit=unit, zig_usd=zig_usd)
            for row in result.rows
        ]
        return ListTradesOutput(
            rows=rows,
            unit=unit,
            tf=tf,
            limit=limit,
            page=page,
            pages=max(1, math.ceil(result.total / limit)),
            total=result.total,
        )

    def _scope_predicates(
        self,
        command: ListTradesInput,
        predicates: list[TradePredicate],
    ) -> NotFoundOutput | None:
        if command.scope == "large":
            bucket = (command.scope_ref or DEFAULT_TF).lower()
            if bucket not in LARGE_BUCKETS:
                raise InvalidQueryError(f"bucket must be one of {', '.join(LARGE_BUCKETS)}.")
            predicates.append(LargeTradeFilter(bucket=bucket))
            return None
        if command.scope == "token":
            return self._token_predicate(command.scope_ref, command.dominant, predicates)
        if command.scope == "pool":
            pool_id = self._pool_port.find_pool_id(ref=command.scope_ref) if command.scope_ref else None
            if pool_id is None:
                return NotFoundOutput(error="pool not found")
            predicates.append(PoolIdFilter(pool_id=pool_id))
            return None
        if command.scope == "wallet":
            if not command.scope_ref:
                raise InvalidQueryError("wallet address is required.")
            predicates.append(SignerFilter(address=command.scope_ref))
        if command.scope in ("wallet", "recent"):
            return self._narrowing_predicates(command, predicates)
        return None

    def _token_predicate(
        self,
        ref: str | None,
        dominant: str | None,
        predicates: list[TradePredicate],
    ) -> NotFoundOutput | None:
        token = self._resolver.resolve(ref) if ref else None
        if token is None:
            return NotFoundOutput(error="token not found")
        if is_native_currency(token):
            predicates.append(EitherSideTokenFilter(token_id=token.token_id))
        elif self._resolver.dominant_side(token, dominant) == "quote":
            predicates.append(QuoteTokenFilter(token_id=token.token_id))
        else:
            predicates.append(BaseTokenFilter(token_id=token.token_id))
        return None

    def _narrowing_predicates(
        self,
        command: ListTradesInput,
        predicates: list[TradePredicate],
    ) -> NotFoundOutput | None:
        if command.token_ref:
            not_found = self._token_predicate(command.token_ref, command.dominant, predicates)
            if not_found is not None:
                return not_found
        if command.pair_contract:
            predicates.append(PairContractFilter(pair_contract=command.pair_contract))
        elif command.pool_ref:
            pool_id = self._pool_port.find_pool_id(ref=command.pool_ref)
            if pool_id is None:
                return NotFoundOutput(error="pool not found")
            predicates.append(PoolIdFilter(pool_id=pool_id))
        return None

    def _filter_predicates(self, command: ListTradesInput, *, unit: str, tf: str) -> list[TradePredicate]:
        windowed = command.scope != "large"
        predicates: list[TradePredicate] = []
        if windowed:
            predicates.append(ActionFilter(include_liquidity=command.include_liquidity))

        direction = (command.direction or "").lower()
        if direction in DIRECTIONS:
            predicates.append(DirectionFilter(direction=direction))

        if windowed:
            predicates.append(self._window_predicate(command, tf))

        klass = (command.klass or "").lower()
        if klass in WORTH_CLASSES:
            predicates.append(WorthClassFilter(klass=klass, unit=unit))
        if command.min_value is not None or command.max_value is not None:
            predicates.append(
                WorthRangeFilter(unit=unit, min_value=command.min_value, max_value=command.max_value)
            )
        return predicates

    def _window_predicate(self, command: ListTradesInput, tf: str) -> TradePredicate:
        if command.start is not None and command.end is not None:
            if command.start >= command.end:
                raise InvalidQueryError("from must be earlier than to.")
            return CreatedBetweenFilter(start=command.start, end=command.end)
        if command.days:
            return CreatedSinceFilter(since=self._clock() - timedelta(days=command.days))
        return CreatedSinceFilter(since=self._clock() - timedelta(minutes=tf_to_minutes(tf)))
