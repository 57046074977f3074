from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timezone

from zigdex.application.dto.common import NotFoundOutput
from zigdex.application.dto.ohlcv import GetOhlcvInput, OhlcvOutput
from zigdex.application.ports.market_data_port import MarketDataPort
from zigdex.application.ports.pool_port import PoolPort
from zigdex.application.ports.token_port import TokenPort
from zigdex.application.use_cases.get_token_summary import StableReference
from zigdex.application.use_cases.pool_selection import PoolSelector
from zigdex.application.use_cases.summary_common import supply_figures, token_exponent, utcnow
from zigdex.application.use_cases.token_resolver import TokenResolver
from zigdex.domain.entities.market import Bar, OhlcvMeta
from zigdex.domain.entities.token import Token
from zigdex.domain.exceptions import InvalidQueryError
from zigdex.domain.services.ohlcv import (
    FILL_POLICIES,
    aggregate_bars,
    align_down,
    apply_market_cap,
    build_series,
    fill_series,
    invert_bar,
    resolve_window,
    timeframe_to_seconds,
)
from zigdex.domain.services.token_identity import is_native_currency
from zigdex.domain.services.units import invert_or_zero

logger = logging.getLogger(__name__)

MODES = ("price", "mcap")
UNITS = ("native", "usd")
PRICE_SOURCES = ("best", "uzig", "pool", "all")
STABLE_SOURCE = "stable_invert"


class GetTokenOhlcvUseCase:
    def __init__(
        self,
        *,
        resolver: TokenResolver,
        selector: PoolSelector,
        stable_reference: StableReference,
        token_port: TokenPort,
        pool_port: PoolPort,
        market_data_port: MarketDataPort,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._resolver = resolver
        self._selector = selector
        self._stable_reference = stable_reference
        self._token_port = token_port
        self._pool_port = pool_port
        self._market_data_port = market_data_port
        self._clock = clock

    def execute(self, command: GetOhlcvInput) -> OhlcvOutput | NotFoundOutput:
        if command.fill not in FILL_POLICIES:
            raise InvalidQueryError(f"fill must be one of {', '.join(FILL_POLICIES)}.")
        if command.mode not in MODES:
            raise InvalidQueryError("mode must be price or mcap.")
        if command.unit not in UNITS:
            raise InvalidQueryError("unit must be native or usd.")
        if command.price_source not in PRICE_SOURCES:
            raise InvalidQueryError(f"priceSource must be one of {', '.join(PRICE_SOURCES)}.")

        token = self._resolver.resolve(command.identifier)
        if token is None:
            return NotFoundOutput(error="token not found")

        tf = command.tf or "1m"
        step_sec = timeframe_to_seconds(tf)
        start, end = resolve_window(
            tf=tf,
            step_sec=step_sec,
            now=self._clock(),
            from_ts=command.start,
            to_ts=command.end,
            span=command.span,
            window=command.window,
        )
        if start >= end:
            raise InvalidQueryError("from must be earlier than to.")

        aligned_from = align_down(start.timestamp(), step_sec)
        aligned_to = align_down(end.timestamp(), step_sec)
        range_start = datetime.fromtimestamp(aligned_from, tz=timezone.utc)

        profile = self._token_port.get_profile(token_id=token.token_id)
        external = self._token_port.get_external_stats(token_id=token.token_id)
        circulating, _ = supply_figures(profile, external, token_exponent(token, profile))

        meta = OhlcvMeta(
            tf=tf,
            mode=command.mode,
            unit=command.unit,
            fill=command.fill,
            price_source=command.price_source,
            step_sec=step_sec,
            aligned_from_sec=aligned_from,
            aligned_to_sec_exclusive=aligned_to + step_sec,
            prev_close_seed=None,
        )

        if is_native_currency(token):
            return self._native_series(
                token,
                command,
                meta=replace(meta, price_source=STABLE_SOURCE),
                range_start=range_start,
                end=end,
                aligned_to=aligned_to,
                circulating=circulating,
            )

        dominant = self._resolver.dominant_side(token, command.dominant)
        pair_view = command.view if command.view in ("base", "quote") else "base"
        meta = replace(meta, dominant=dominant, pair_view=pair_view)
        usd = command.unit == "usd"
        native_only = command.price_source == "uzig" and dominant == "base"

        if command.price_source == "all":
            bars = self._market_data_port.list_side_bars(
                token_id=token.token_id,
                side=dominant,
                native_quote_only=native_only,
                start=range_start,
                end=end,
                usd=usd,
            )
            seed_bar = self._market_data_port.last_side_bar_before(
                token_id=token.token_id,
                side=dominant,
                native_quote_only=native_only,
                ts=range_start,
                usd=usd,
            )
        else:
            pool_id = self._pick_pool(token, command, dominant=dominant, native_only=native_only, usd=usd)
            if pool_id is None:
                logger.debug("token_ohlcv: no pool token_id=%s side=%s", token.token_id, dominant)
                return OhlcvOutput(bars=[], meta=meta)
            meta = replace(meta, pool_id=pool_id)
            bars = self._market_data_port.list_pool_bars(pool_id=pool_id, start=range_start, end=end, usd=usd)
            seed_bar = self._market_data_port.last_pool_bar_before(pool_id=pool_id, ts=range_start, usd=usd)

        seed = seed_bar.close if seed_bar is not None else None
        invert = dominant == "quote" and pair_view == "quote"
        series = build_series(
            bars,
            start_sec=aligned_from,
            end_sec=aligned_to,
            step_sec=meta.step_sec,
            fill=command.fill,
            prev_close_seed=seed,
            invert=invert,
            circulating_supply=circulating,
            mode=command.mode,
        )
        if seed is not None and invert:
            seed = invert_or_zero(seed)
        return OhlcvOutput(bars=series, meta=replace(meta, prev_close_seed=seed))

    def _pick_pool(
        self,
        token: Token,
        command: GetOhlcvInput,
        *,
        dominant: str,
        native_only: bool,
        usd: bool,
    ) -> int | None:
        pool_id = None
        if command.price_source == "pool" and command.pool_ref:
            pool_id = self._pool_port.find_pool_id(ref=command.pool_ref, token_id=token.token_id, side=dominant)
        if pool_id is None and dominant == "base" and command.price_source != "pool":
            best = self._selector.best_sell_pool(
                token.token_id,
                zig_usd=self._market_data_port.latest_exchange_rate(),
            )
            if best is not None:
                pool_id = best.pool_id
        if pool_id is None:
            pool_id = self._pool_port.most_active_pool_id(
                token_id=token.token_id,
                side=dominant,
                native_quote_only=native_only,
                usd=usd,
            )
        return pool_id

    def _native_series(
        self,
        token: Token,
        command: GetOhlcvInput,
        *,
        meta: OhlcvMeta,
        range_start: datetime,
        end: datetime,
        aligned_to: int,
        circulating: float | None,
    ) -> OhlcvOutput:
        pool_id = self._stable_reference.stable_pool_id(token)
        if pool_id is None:
            return OhlcvOutput(bars=[], meta=meta)

        bars: list[Bar] = self._market_data_port.list_pool_bars(pool_id=pool_id, start=range_start, end=end)
        seed_bar = self._market_data_port.last_pool_bar_before(pool_id=pool_id, ts=range_start)
        seed = seed_bar.close if seed_bar is not None else None

        filled = fill_series(
            aggregate_bars(bars, step_sec=meta.step_sec),
            start_sec=meta.aligned_from_sec,
            end_sec=aligned_to,
            step_sec=meta.step_sec,
            fill=command.fill,
            prev_close_seed=seed,
        )
        series = []
        for bar in filled:
            bar = invert_bar(bar)
            if command.unit == "usd":
                bar = replace(bar, volume=bar.volume * bar.close)
            if command.mode == "mcap":
                bar = apply_market_cap(bar, circulating)
            series.append(bar)
        return OhlcvOutput(
            bars=series,
            meta=replace(
                meta,
                pool_id=pool_id,
                prev_close_seed=invert_or_zero(seed) if seed is not None else None,
            ),
        )
