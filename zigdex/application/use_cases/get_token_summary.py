from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import datetime, timedelta

from zigdex.application.dto.best_pool import BestPoolOutput
from zigdex.application.dto.common import NotFoundOutput, ValuePair
from zigdex.application.dto.token_summary import (
    GetTokenSummaryInput,
    PriceBlock,
    TokenSummaryOutput,
)
from zigdex.application.ports.market_data_port import MarketDataPort
from zigdex.application.ports.pool_port import PoolPort
from zigdex.application.ports.token_port import TokenPort
from zigdex.application.ports.trade_port import TradePort
from zigdex.application.use_cases.pool_selection import PoolSelector
from zigdex.application.use_cases.summary_common import (
    MATRIX_BUCKETS,
    bucket_activity,
    market_caps,
    supply_figures,
    token_exponent,
    token_identity,
    utcnow,
)
from zigdex.application.use_cases.token_resolver import TokenResolver
from zigdex.domain.entities.token import ExternalTokenStats, Token
from zigdex.domain.services.pool_liquidity import reserves_mid_price, total_tvl_native
from zigdex.domain.services.price_change import CHANGE_BUCKETS, change_pct
from zigdex.domain.services.token_identity import is_native_currency
from zigdex.domain.services.units import invert_or_none, safe_div, to_usd

logger = logging.getLogger(__name__)

DEFAULT_STABLE_REFS = ("USDC", "usdc", "uusdc")


class StableReference:
    """Locates the stable/native pool used to price the native currency in USD."""

    def __init__(
        self,
        *,
        resolver: TokenResolver,
        token_port: TokenPort,
        pool_port: PoolPort,
        market_data_port: MarketDataPort,
        stable_token_refs: Sequence[str] = DEFAULT_STABLE_REFS,
    ):
        self._resolver = resolver
        self._token_port = token_port
        self._pool_port = pool_port
        self._market_data_port = market_data_port
        self._stable_token_refs = tuple(stable_token_refs)

    def stable_token(self) -> Token | None:
        for ref in self._stable_token_refs:
            token = self._resolver.resolve(ref)
            if token is not None:
                return token
        return None

    def stable_pool_id(self, native: Token) -> int | None:
        stable = self.stable_token()
        if stable is None:
            logger.warning("stable_reference: no stable token refs=%s", ",".join(self._stable_token_refs))
            return None
        return self._pool_port.most_active_pair_pool_id(
            base_token_id=stable.token_id,
            quote_token_id=native.token_id,
        )

    def stable_price_in_native(self, pool_id: int) -> float | None:
        stable = self.stable_token()
        if stable is not None:
            price = self._token_port.latest_price_in_zig(token_id=stable.token_id, pool_id=pool_id)
            if price is not None:
                return price
        return self._market_data_port.latest_close(pool_id=pool_id)


class GetTokenSummaryUseCase:
    def __init__(
        self,
        *,
        resolver: TokenResolver,
        selector: PoolSelector,
        stable_reference: StableReference,
        token_port: TokenPort,
        pool_port: PoolPort,
        market_data_port: MarketDataPort,
        trade_port: TradePort,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._resolver = resolver
        self._selector = selector
        self._stable_reference = stable_reference
        self._token_port = token_port
        self._pool_port = pool_port
        self._market_data_port = market_data_port
        self._trade_port = trade_port
        self._clock = clock

    def execute(self, command: GetTokenSummaryInput) -> TokenSummaryOutput | NotFoundOutput:
        token = self._resolver.resolve(command.identifier)
        if token is None:
            return NotFoundOutput(error="token not found")

        zig_usd = self._market_data_port.latest_exchange_rate()
        if zig_usd is None:
            logger.warning("token_summary: exchange rate missing token_id=%s", token.token_id)

        if is_native_currency(token):
            return self._native_summary(token, zig_usd)
        return self._token_summary(token, command, zig_usd)

    def _changes(self, pool_id: int | None, *, invert: bool) -> dict[str, float | None]:
        if pool_id is None:
            return {bucket: None for bucket in CHANGE_BUCKETS}
        now = self._clock()
        return {
            bucket: change_pct(
                self._market_data_port.close_pair(pool_id=pool_id, lookback=now - timedelta(minutes=minutes)),
                invert=invert,
            )
            for bucket, minutes in CHANGE_BUCKETS.items()
        }

    def _native_summary(self, token: Token, zig_usd: float | None) -> TokenSummaryOutput:
        profile = self._token_port.get_profile(token_id=token.token_id)
        external = self._token_port.get_external_stats(token_id=token.token_id)
        exponent = token_exponent(token, profile)
        circulating, maximum = supply_figures(profile, external, exponent)

        pool_id = self._stable_reference.stable_pool_id(token)
        stable_price = self._stable_reference.stable_price_in_native(pool_id) if pool_id is not None else None
        price_usd = invert_or_none(stable_price)
        if price_usd is None:
            price_usd = zig_usd
        fx = price_usd if price_usd is not None else zig_usd

        matrix = self._market_data_port.matrix_by_side(token_id=token.token_id, side="either", buckets=MATRIX_BUCKETS)
        activity = bucket_activity(matrix, fx)
        mcap, fdv = market_caps(
            price_native=1.0,
            circulating=circulating,
            maximum=maximum,
            external=external,
            fx=fx,
        )
        tvl = matrix["24h"].tvl if "24h" in matrix else 0.0

        return TokenSummaryOutput(
            token=token_identity(token, profile, exponent),
            price=PriceBlock(
                source="stable_invert" if pool_id is not None else "fx",
                pool_id=pool_id,
                native=1.0,
                usd=price_usd,
                change_pct=self._changes(pool_id, invert=True),
            ),
            mcap=mcap,
            fdv=fdv,
            circulating_supply=circulating,
            max_supply=maximum,
            dominant="base",
            pair_view="base",
            pools=self._pool_port.count_pools(token_id=token.token_id, side="either"),
            holders=self._token_port.get_holders_count(token_id=token.token_id),
            creation_time=self._pool_port.first_pool_created_at(token_id=token.token_id, side="either"),
            activity=activity,
            liquidity=ValuePair(native=tvl, usd=to_usd(tvl, fx)),
            external_stats=external,
            social=self._token_port.get_social(token_id=token.token_id),
        )

    def _select_pool(
        self,
        token: Token,
        *,
        dominant: str,
        price_source: str,
        pool_ref: str | None,
        zig_usd: float | None,
    ) -> tuple[int | None, BestPoolOutput | None, str]:
        if price_source == "pool" and pool_ref:
            pool_id = self._pool_port.find_pool_id(ref=pool_ref, token_id=token.token_id, side=dominant)
            return pool_id, None, price_source
        if dominant == "base" and price_source == "uzig":
            pool_id = self._pool_port.most_active_pool_id(
                token_id=token.token_id,
                side="base",
                native_quote_only=True,
            )
            return pool_id, None, price_source
        if dominant == "base":
            best = self._selector.best_sell_pool(token.token_id, zig_usd=zig_usd)
            if best is not None:
                return best.pool_id, best, "best"
            logger.debug("token_summary: no simulated pool, falling back token_id=%s", token.token_id)
            return self._pool_port.most_active_pool_id(token_id=token.token_id, side="base"), None, "best"
        return self._pool_port.most_active_pool_id(token_id=token.token_id, side="quote"), None, "best"

    def _latest_price_in_quote(self, pool_id: int) -> float | None:
        price = self._trade_port.latest_trade_price(pool_id=pool_id)
        if price is not None:
            return price
        price = self._market_data_port.latest_close(pool_id=pool_id)
        if price is not None:
            return price
        state = self._pool_port.get_pool_state(pool_id=pool_id)
        return reserves_mid_price(state) if state is not None else None

    def _base_usd_for_pool(self, pool_id: int, zig_usd: float | None) -> float | None:
        base = self._pool_port.get_base_token(pool_id=pool_id)
        if base is None:
            return None
        if is_native_currency(base):
            return zig_usd or None
        base_price = self._token_port.latest_price_in_zig(token_id=base.token_id)
        return to_usd(base_price, zig_usd) if zig_usd else None

    def _token_summary(
        self,
        token: Token,
        command: GetTokenSummaryInput,
        zig_usd: float | None,
    ) -> TokenSummaryOutput:
        profile = self._token_port.get_profile(token_id=token.token_id)
        external = self._token_port.get_external_stats(token_id=token.token_id)
        exponent = token_exponent(token, profile)
        circulating, maximum = supply_figures(profile, external, exponent)

        dominant = self._resolver.dominant_side(token, command.dominant)
        pair_view = command.view if command.view in ("base", "quote") else "base"
        pool_id, best, price_source = self._select_pool(
            token,
            dominant=dominant,
            price_source=command.price_source,
            pool_ref=command.pool_ref,
            zig_usd=zig_usd,
        )

        price_native: float | None = None
        price_usd: float | None = None
        if dominant == "quote":
            if pool_id is not None:
                price_native = self._latest_price_in_quote(pool_id)
                if pair_view == "quote" and price_native is not None and price_native > 0:
                    price_native = invert_or_none(price_native)
                price_usd = self._base_usd_for_pool(pool_id, zig_usd)
            liquidity_native = self._pool_port.quote_side_tvl_native(token_id=token.token_id)
        else:
            if pool_id is not None:
                price_native = self._token_port.latest_price_in_zig(token_id=token.token_id, pool_id=pool_id)
            if price_native is None and best is not None:
                price_native = best.price_native_mid
            liquidity_native = total_tvl_native(self._pool_port.list_base_pool_states(token_id=token.token_id))

        matrix = self._market_data_port.matrix_by_side(token_id=token.token_id, side=dominant, buckets=MATRIX_BUCKETS)
        mcap, fdv = market_caps(
            price_native=price_native,
            circulating=circulating,
            maximum=maximum,
            external=external,
            fx=zig_usd,
        )

        return TokenSummaryOutput(
            token=token_identity(token, profile, exponent),
            price=PriceBlock(
                source=price_source,
                pool_id=pool_id,
                native=_native_price(price_native, external, zig_usd),
                usd=_usd_price(price_usd, price_native, external, zig_usd),
                change_pct=self._changes(pool_id, invert=dominant == "quote" and pair_view == "quote"),
            ),
            mcap=mcap,
            fdv=fdv,
            circulating_supply=circulating,
            max_supply=maximum,
            dominant=dominant,
            pair_view=pair_view,
            pools=self._pool_port.count_pools(token_id=token.token_id, side=dominant),
            holders=self._token_port.get_holders_count(token_id=token.token_id),
            creation_time=self._pool_port.first_pool_created_at(token_id=token.token_id, side=dominant),
            activity=bucket_activity(matrix, zig_usd),
            liquidity=ValuePair(native=liquidity_native, usd=to_usd(liquidity_native, zig_usd)),
            external_stats=external,
            social=self._token_port.get_social(token_id=token.token_id),
            best_pool=best,
        )


def _native_price(
    price_native: float | None,
    external: ExternalTokenStats | None,
    zig_usd: float | None,
) -> float | None:
    if price_native is not None:
        return price_native
    if external is not None and external.price_usd is not None and zig_usd:
        return safe_div(external.price_usd, zig_usd)
    return None


def _usd_price(
    price_usd: float | None,
    price_native: float | None,
    external: ExternalTokenStats | None,
    zig_usd: float | None,
) -> float | None:
    if price_usd is not None:
        return price_usd
    if price_native is not None and zig_usd is not None:
        return to_usd(price_native, zig_usd)
    return external.price_usd if external is not None else None
