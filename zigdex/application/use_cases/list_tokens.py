from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from zigdex.application.dto.best_pool import BestPoolOutput
from zigdex.application.dto.common import ValuePair
from zigdex.application.dto.token_list import (
    MATRIX_BUCKETS,
    TOKEN_SORT_KEYS,
    ListMoversInput,
    ListMoversOutput,
    ListSwapTokensInput,
    ListSwapTokensOutput,
    ListTokensInput,
    ListTokensOutput,
    SwapTokenItem,
    TokenListItem,
)
from zigdex.application.ports.market_data_port import MarketDataPort
from zigdex.application.ports.pool_port import PoolPort
from zigdex.application.ports.token_port import TokenPort
from zigdex.application.use_cases.pool_selection import PoolSelector
from zigdex.application.use_cases.summary_common import utcnow
from zigdex.domain.entities.token import TokenMarketRow
from zigdex.domain.exceptions import InvalidQueryError
from zigdex.domain.services.price_change import change_pct
from zigdex.domain.services.units import to_usd
from zigdex.shared.concurrency import bounded_map

logger = logging.getLogger(__name__)

MAX_LIST_LIMIT = 500
MOVERS_UNIVERSE = 1000
BOARDS = ("gainers", "losers")
CHANGE_LOOKBACK = timedelta(minutes=1440)


def _value(native: float | None, fx: float | None) -> ValuePair:
    return ValuePair(native=native, usd=to_usd(native, fx))


def _list_item(
    row: TokenMarketRow,
    zig_usd: float | None,
    *,
    change: float | None = None,
    best: BestPoolOutput | None = None,
) -> TokenListItem:
    return TokenListItem(
        token_id=row.token_id,
        denom=row.denom,
        symbol=row.symbol,
        name=row.name,
        image_uri=row.image_uri,
        created_at=row.created_at,
        price=_value(row.price_in_zig, zig_usd),
        mcap=_value(row.mcap_zig, zig_usd),
        fdv=_value(row.fdv_zig, zig_usd),
        volume=_value(row.vol_zig, zig_usd),
        holders=row.holders,
        tx=row.tx,
        change_24h_pct=change,
        best_pool=best,
    )


class TokenChangeCalculator:
    """24h change of a token from the 1-minute closes of its reference pool."""

    def __init__(
        self,
        *,
        selector: PoolSelector,
        pool_port: PoolPort,
        market_data_port: MarketDataPort,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._selector = selector
        self._pool_port = pool_port
        self._market_data_port = market_data_port
        self._clock = clock

    def reference_pool_id(self, token_id: int, *, price_source: str, zig_usd: float | None) -> int | None:
        if price_source == "uzig":
            return self._pool_port.most_active_pool_id(token_id=token_id, side="base", native_quote_only=True)
        best = self._selector.best_sell_pool(token_id, zig_usd=zig_usd)
        return best.pool_id if best is not None else None

    def change_24h(self, token_id: int, *, price_source: str = "best", zig_usd: float | None = None) -> float | None:
        pool_id = self.reference_pool_id(token_id, price_source=price_source, zig_usd=zig_usd)
        if pool_id is None:
            return None
        pair = self._market_data_port.close_pair(pool_id=pool_id, lookback=self._clock() - CHANGE_LOOKBACK)
        return change_pct(pair)


class ListTokensUseCase:
    def __init__(
        self,
        *,
        token_port: TokenPort,
        selector: PoolSelector,
        change_calculator: TokenChangeCalculator,
        market_data_port: MarketDataPort,
        max_workers: int = 4,
    ):
        self._token_port = token_port
        self._selector = selector
        self._change_calculator = change_calculator
        self._market_data_port = market_data_port
        self._max_workers = max_workers

    def execute(self, command: ListTokensInput) -> ListTokensOutput:
        if command.sort not in TOKEN_SORT_KEYS:
            raise InvalidQueryError(f"sort must be one of {', '.join(TOKEN_SORT_KEYS)}.")
        if command.bucket not in MATRIX_BUCKETS:
            raise InvalidQueryError(f"bucket must be one of {', '.join(MATRIX_BUCKETS)}.")

        rows = self._token_port.list_market_rows(
            bucket=command.bucket,
            search=command.search or None,
            sort=command.sort,
            direction="asc" if command.direction == "asc" else "desc",
            limit=max(1, min(command.limit, MAX_LIST_LIMIT)),
            offset=max(0, command.offset),
        )
        zig_usd = self._market_data_port.latest_exchange_rate()

        def build(row: TokenMarketRow) -> TokenListItem:
            change = None
            best = None
            if command.include_change:
                change = self._change_calculator.change_24h(row.token_id, zig_usd=zig_usd)
            if command.include_best:
                best = self._selector.best_sell_pool(
                    row.token_id,
                    zig_usd=zig_usd,
                    amount_in=command.amount_in,
                    min_tvl_zig=command.min_best_tvl,
                )
            return _list_item(row, zig_usd, change=change, best=best)

        if command.include_change or command.include_best:
            items = bounded_map(build, rows, max_workers=self._max_workers)
        else:
            items = [_list_item(row, zig_usd) for row in rows]
        return ListTokensOutput(
            items=items,
            include_change=command.include_change,
            include_best=command.include_best,
        )


class ListMoversUseCase:
    """Gainers and losers by 24h change."""

    def __init__(
        self,
        *,
        token_port: TokenPort,
        change_calculator: TokenChangeCalculator,
        market_data_port: MarketDataPort,
        max_workers: int = 4,
    ):
        self._token_port = token_port
        self._change_calculator = change_calculator
        self._market_data_port = market_data_port
        self._max_workers = max_workers

    def execute(self, command: ListMoversInput) -> ListMoversOutput:
        if command.board not in BOARDS:
            raise InvalidQueryError("board must be gainers or losers.")
        bucket = command.bucket if command.bucket in MATRIX_BUCKETS else "24h"
        price_source = "uzig" if command.price_source == "uzig" else "best"

        rows = self._token_port.list_market_rows(
            bucket=bucket,
            search=None,
            sort="mcap",
            direction="desc",
            limit=MOVERS_UNIVERSE,
            offset=0,
        )
        zig_usd = self._market_data_port.latest_exchange_rate()
        changes = bounded_map(
            lambda row: self._change_calculator.change_24h(row.token_id, price_source=price_source, zig_usd=zig_usd),
            rows,
            max_workers=self._max_workers,
        )
        ranked = [(row, change) for row, change in zip(rows, changes) if change is not None]
        ranked.sort(key=lambda pair: pair[1], reverse=command.board == "gainers")
        logger.debug("token_movers: board=%s ranked=%s of=%s", command.board, len(ranked), len(rows))

        limit = max(1, min(command.limit, MAX_LIST_LIMIT))
        offset = max(0, command.offset)
        page = ranked[offset:offset + limit]
        return ListMoversOutput(
            items=[_list_item(row, zig_usd, change=change) for row, change in page],
            board=command.board,
            bucket=bucket,
            price_source=price_source,
            limit=limit,
            offset=offset,
            total=len(ranked),
        )


class ListSwapTokensUseCase:
    """Tokens ranked by bucket volume for swap pickers."""

    def __init__(self, *, token_port: TokenPort, market_data_port: MarketDataPort):
        self._token_port = token_port
        self._market_data_port = market_data_port

    def execute(self, command: ListSwapTokensInput) -> ListSwapTokensOutput:
        if command.bucket not in MATRIX_BUCKETS:
            raise InvalidQueryError(f"bucket must be one of {', '.join(MATRIX_BUCKETS)}.")
        limit = max(1, min(command.limit, MAX_LIST_LIMIT))
        offset = max(0, command.offset)

        rows = self._token_port.list_market_rows(
            bucket=command.bucket,
            search=None,
            sort="vol",
            direction="desc",
            limit=limit,
            offset=offset,
        )
        zig_usd = self._market_data_port.latest_exchange_rate()
        items = [
            SwapTokenItem(
                token_id=row.token_id,
                denom=row.denom,
                symbol=row.symbol,
                name=row.name,
                exponent=row.exponent,
                image_uri=row.image_uri,
                price=_value(row.price_in_zig, zig_usd),
                mcap=_value(row.mcap_zig, zig_usd),
                fdv=_value(row.fdv_zig, zig_usd),
                volume=_value(row.vol_zig, zig_usd),
                tvl=_value(row.tvl_zig, zig_usd),
                tx=row.tx,
            )
            for row in rows
        ]
        return ListSwapTokensOutput(items=items, bucket=command.bucket, limit=limit, offset=offset)
