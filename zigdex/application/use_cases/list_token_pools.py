from __future__ import annotations

from zigdex.application.dto.common import NotFoundOutput, ValuePair
from zigdex.application.dto.token_list import MATRIX_BUCKETS
from zigdex.application.dto.token_pools import ListTokenPoolsInput, ListTokenPoolsOutput, TokenPoolItem
from zigdex.application.ports.market_data_port import MarketDataPort
from zigdex.application.ports.pool_port import PoolPort
from zigdex.application.ports.token_port import TokenPort
from zigdex.application.use_cases.summary_common import supply_figures, token_exponent
from zigdex.application.use_cases.token_resolver import TokenResolver
from zigdex.domain.entities.pool import TokenPoolRow
from zigdex.domain.services.token_identity import is_native_currency
from zigdex.domain.services.units import to_usd

MAX_POOLS_LIMIT = 500


def _pair(native: float | None, fx: float | None) -> ValuePair:
    return ValuePair(native=native, usd=to_usd(native, fx))


def _times(price: float | None, supply: float | None) -> float | None:
    if price is None or supply is None:
        return None
    return price * supply


class ListTokenPoolsUseCase:
    def __init__(
        self,
        *,
        resolver: TokenResolver,
        token_port: TokenPort,
        pool_port: PoolPort,
        market_data_port: MarketDataPort,
    ):
        self._resolver = resolver
        self._token_port = token_port
        self._pool_port = pool_port
        self._market_data_port = market_data_port

    def execute(self, command: ListTokenPoolsInput) -> ListTokenPoolsOutput | NotFoundOutput:
        token = self._resolver.resolve(command.identifier)
        if token is None:
            return NotFoundOutput(error="token not found")

        bucket = command.bucket if command.bucket in MATRIX_BUCKETS else "24h"
        if is_native_currency(token):
            side = "either"
            dominant = "base"
        else:
            dominant = self._resolver.dominant_side(token, command.dominant)
            side = dominant

        profile = self._token_port.get_profile(token_id=token.token_id)
        zig_usd = self._market_data_port.latest_exchange_rate()
        rows = self._pool_port.list_token_pools(token_id=token.token_id, side=side, bucket=bucket)

        own_price = None
        if dominant == "quote":
            own_price = self._token_port.latest_price_in_zig(token_id=token.token_id)

        circulating = maximum = None
        if command.include_caps:
            external = self._token_port.get_external_stats(token_id=token.token_id)
            circulating, maximum = supply_figures(profile, external, token_exponent(token, profile))

        limit = max(1, min(command.limit, MAX_POOLS_LIMIT))
        offset = max(0, command.offset)
        items = [
            self._item(
                row,
                price_native=own_price if dominant == "quote" else row.price_in_zig,
                zig_usd=zig_usd,
                include_caps=command.include_caps,
                circulating=circulating,
                maximum=maximum,
            )
            for row in rows[offset:offset + limit]
        ]
        return ListTokenPoolsOutput(
            token_id=token.token_id,
            symbol=token.symbol,
            denom=token.denom,
            image_uri=profile.image_uri if profile else None,
            items=items,
            bucket=bucket,
            include_caps=command.include_caps,
            dominant=dominant,
        )

    @staticmethod
    def _item(
        row: TokenPoolRow,
        *,
        price_native: float | None,
        zig_usd: float | None,
        include_caps: bool,
        circulating: float | None,
        maximum: float | None,
    ) -> TokenPoolItem:
        return TokenPoolItem(
            pool_id=row.pool_id,
            pair_contract=row.pair_contract,
            base=row.base,
            quote=row.quote,
            is_uzig_quote=row.is_uzig_quote,
            created_at=row.created_at,
            price=_pair(price_native, zig_usd),
            tvl=_pair(row.tvl_zig, zig_usd),
            volume=_pair(row.vol_zig, zig_usd),
            tx=row.tx,
            unique_traders=row.unique_traders,
            mcap=_pair(_times(price_native, circulating), zig_usd) if include_caps else None,
            fdv=_pair(_times(price_native, maximum), zig_usd) if include_caps else None,
        )
