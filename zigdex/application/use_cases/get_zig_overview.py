from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from zigdex.application.dto.common import NotFoundOutput, ValuePair
from zigdex.application.dto.token_summary import PriceBlock
from zigdex.application.dto.zig_overview import (
    GetZigOverviewInput,
    OverviewPool,
    VolumeBreakdown,
    ZigOverviewOutput,
)
from zigdex.application.ports.market_data_port import MarketDataPort
from zigdex.application.ports.pool_port import PoolPort
from zigdex.application.ports.token_port import TokenPort
from zigdex.application.use_cases.summary_common import (
    market_caps,
    supply_figures,
    token_exponent,
    token_identity,
    utcnow,
)
from zigdex.application.use_cases.token_resolver import TokenResolver
from zigdex.domain.entities.pool import MarketPoolRow
from zigdex.domain.entities.token import Token
from zigdex.domain.services.price_change import CHANGE_BUCKETS
from zigdex.domain.services.token_identity import NATIVE_ALIASES, is_native_currency
from zigdex.domain.services.units import pct_change, to_usd

logger = logging.getLogger(__name__)

MAX_TOP_POOLS = 50
OVERVIEW_BUCKET = "24h"
PRICE_SOURCE = "exchange_rates"


def _overview_pool(row: MarketPoolRow, fx: float | None) -> OverviewPool:
    return OverviewPool(
        pool_id=row.pool_id,
        pair_contract=row.pair_contract,
        pair_type=row.pair_type,
        base=row.base,
        quote=row.quote,
        price_native_mid=row.price_in_zig,
        tvl=ValuePair(native=row.tvl_zig, usd=to_usd(row.tvl_zig, fx)),
        volume=ValuePair(native=row.vol_zig, usd=to_usd(row.vol_zig, fx)),
        tx=row.tx,
    )


class GetZigOverviewUseCase:
    """Market-wide view of the native currency priced from the exchange-rate series."""

    def __init__(
        self,
        *,
        resolver: TokenResolver,
        token_port: TokenPort,
        pool_port: PoolPort,
        market_data_port: MarketDataPort,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._resolver = resolver
        self._token_port = token_port
        self._pool_port = pool_port
        self._market_data_port = market_data_port
        self._clock = clock

    def execute(self, command: GetZigOverviewInput) -> ZigOverviewOutput | NotFoundOutput:
        token = self._native_token()
        if token is None:
            return NotFoundOutput(error="ZIG token not found")

        zig_usd = self._market_data_port.latest_exchange_rate()
        profile = self._token_port.get_profile(token_id=token.token_id)
        exponent = token_exponent(token, profile)
        circulating, maximum = supply_figures(profile, None, exponent)
        mcap, fdv = market_caps(
            price_native=1.0,
            circulating=circulating,
            maximum=maximum,
            external=None,
            fx=zig_usd,
        )

        totals = self._market_data_port.native_market_totals(bucket=OVERVIEW_BUCKET)
        limit = max(1, min(command.limit, MAX_TOP_POOLS))
        best = self._pool_port.list_native_market_pools(order="tvl", bucket=OVERVIEW_BUCKET, limit=1)
        top = self._pool_port.list_native_market_pools(order="volume", bucket=OVERVIEW_BUCKET, limit=limit)
        logger.debug("zig_overview: token_id=%s top_pools=%s", token.token_id, len(top))

        return ZigOverviewOutput(
            token=token_identity(token, profile, exponent),
            price=PriceBlock(
                source=PRICE_SOURCE,
                pool_id=None,
                native=1.0,
                usd=zig_usd,
                change_pct=self._changes(zig_usd),
            ),
            circulating_supply=circulating,
            max_supply=maximum,
            mcap=mcap,
            fdv=fdv,
            liquidity=ValuePair(native=totals.tvl, usd=to_usd(totals.tvl, zig_usd)),
            volume_24h=VolumeBreakdown(
                native=totals.volume,
                usd=to_usd(totals.volume, zig_usd),
                buy_native=totals.vol_buy,
                sell_native=totals.vol_sell,
            ),
            tx_24h=totals.tx_buy + totals.tx_sell,
            traders_24h=totals.unique_traders,
            holders=self._token_port.get_holders_count(token_id=token.token_id),
            best_pool=_overview_pool(best[0], zig_usd) if best else None,
            top_pools=[_overview_pool(row, zig_usd) for row in top],
        )

    def _native_token(self) -> Token | None:
        for ref in sorted(NATIVE_ALIASES):
            token = self._resolver.resolve(ref)
            if token is not None and is_native_currency(token):
                return token
        logger.warning("zig_overview: native token missing")
        return None

    def _changes(self, latest: float | None) -> dict[str, float | None]:
        if latest is None:
            return {bucket: None for bucket in CHANGE_BUCKETS}
        now = self._clock()
        return {
            bucket: pct_change(
                latest,
                self._market_data_port.exchange_rate_at_or_before(ts=now - timedelta(minutes=minutes)),
            )
            for bucket, minutes in CHANGE_BUCKETS.items()
        }
