from __future__ import annotations

import logging

from zigdex.application.dto.best_pool import BestPoolOutput
from zigdex.application.dto.common import NotFoundOutput
from zigdex.application.dto.route import RouteInput, RouteOutput, RoutePairBlock
from zigdex.application.ports.market_data_port import MarketDataPort
from zigdex.application.use_cases.pool_selection import PoolSelector
from zigdex.application.use_cases.token_resolver import TokenResolver
from zigdex.domain.entities.token import Token
from zigdex.domain.exceptions import InvalidQueryError
from zigdex.domain.services.token_identity import is_native_currency, is_native_ref
from zigdex.domain.services.units import safe_div, to_usd

logger = logging.getLogger(__name__)

NATIVE_LABEL = "uzig"
SOURCE_DIRECT = "direct_uzig"
SOURCE_VIA = "via_uzig"


def _label(token: Token) -> str:
    return token.denom or token.symbol or str(token.token_id)


def _pair_block(side: str, best: BestPoolOutput, zig_usd: float | None) -> RoutePairBlock:
    sim = best.sim
    exec_price = sim.price if sim is not None else None
    return RoutePairBlock(
        pool_id=best.pool_id,
        pair_contract=best.pair_contract,
        pair_type=best.pair_type,
        side=side,
        price_native_exec=exec_price,
        price_usd_exec=to_usd(exec_price, zig_usd),
        price_native_mid=best.price_native_mid,
        price_usd_mid=to_usd(best.price_native_mid, zig_usd),
        amount_in=best.amount_used,
        amount_out=sim.out if sim is not None else None,
        price_impact=sim.impact if sim is not None else None,
        fee=best.fee,
    )


class RouteSwapUseCase:
    def __init__(
        self,
        *,
        resolver: TokenResolver,
        selector: PoolSelector,
        market_data_port: MarketDataPort,
    ):
        self._resolver = resolver
        self._selector = selector
        self._market_data_port = market_data_port

    def _resolve_ref(self, ref: str) -> Token | str | None:
        if is_native_ref(ref):
            return NATIVE_LABEL
        token = self._resolver.resolve(ref)
        if token is not None and is_native_currency(token):
            return NATIVE_LABEL
        return token

    def execute(self, command: RouteInput) -> RouteOutput | NotFoundOutput:
        if not command.from_ref or not command.to_ref:
            raise InvalidQueryError("missing from/to")

        source = self._resolve_ref(command.from_ref)
        if source is None:
            return NotFoundOutput(error="from token not found")
        target = self._resolve_ref(command.to_ref)
        if target is None:
            return NotFoundOutput(error="to token not found")

        zig_usd = self._market_data_port.latest_exchange_rate()
        if zig_usd is None:
            logger.warning("route_swap: exchange rate missing")

        if source == NATIVE_LABEL and isinstance(target, Token):
            return self._native_to_token(target, command, zig_usd)
        if isinstance(source, Token) and target == NATIVE_LABEL:
            return self._token_to_native(source, command, zig_usd)
        if isinstance(source, Token) and isinstance(target, Token):
            return self._token_to_token(source, target, command, zig_usd)
        raise InvalidQueryError("unsupported route (check from/to)")

    def _native_to_token(self, target: Token, command: RouteInput, zig_usd: float | None) -> RouteOutput:
        route = [NATIVE_LABEL, _label(target)]
        buy = self._selector.best_buy_pool(
            target.token_id,
            zig_usd=zig_usd,
            amount_in=command.amount_in,
            min_tvl_zig=command.min_tvl_zig,
        )
        if buy is None:
            return RouteOutput(
                route=route,
                pairs=[],
                price_native=None,
                price_usd=None,
                zig_per_from=1.0,
                usd_per_from=zig_usd,
                from_usd=zig_usd,
                to_usd=None,
                source=SOURCE_DIRECT,
            )
        block = _pair_block("buy", buy, zig_usd)
        return RouteOutput(
            route=route,
            pairs=[block],
            price_native=block.price_native_exec,
            price_usd=block.price_usd_exec,
            zig_per_from=1.0,
            usd_per_from=zig_usd,
            from_usd=zig_usd,
            to_usd=block.price_usd_mid,
            source=SOURCE_DIRECT,
        )

    def _token_to_native(self, source: Token, command: RouteInput, zig_usd: float | None) -> RouteOutput:
        route = [_label(source), NATIVE_LABEL]
        sell = self._selector.best_sell_pool(
            source.token_id,
            zig_usd=zig_usd,
            amount_in=command.amount_in,
            min_tvl_zig=command.min_tvl_zig,
        )
        if sell is None:
            return RouteOutput(
                route=route,
                pairs=[],
                price_native=None,
                price_usd=None,
                zig_per_from=None,
                usd_per_from=None,
                from_usd=None,
                to_usd=zig_usd,
                source=SOURCE_DIRECT,
            )
        block = _pair_block("sell", sell, zig_usd)
        from_usd = block.price_usd_mid
        return RouteOutput(
            route=route,
            pairs=[block],
            price_native=block.price_native_exec,
            price_usd=block.price_usd_exec,
            zig_per_from=block.price_native_exec,
            usd_per_from=from_usd,
            from_usd=from_usd,
            to_usd=zig_usd,
            source=SOURCE_DIRECT,
        )

    def _token_to_token(
        self,
        source: Token,
        target: Token,
        command: RouteInput,
        zig_usd: float | None,
    ) -> RouteOutput:
        route = [_label(source), NATIVE_LABEL, _label(target)]
        sell = self._selector.best_sell_pool(
            source.token_id,
            zig_usd=zig_usd,
            amount_in=command.amount_in,
            min_tvl_zig=command.min_tvl_zig,
        )
        native_out = sell.sim.out if sell is not None and sell.sim is not None else None
        buy = self._selector.best_buy_pool(
            target.token_id,
            zig_usd=zig_usd,
            amount_in=native_out,
            min_tvl_zig=command.min_tvl_zig,
        )
        if sell is None or buy is None:
            return RouteOutput(
                route=route,
                pairs=[],
                price_native=None,
                price_usd=None,
                zig_per_from=None,
                usd_per_from=None,
                from_usd=None,
                to_usd=None,
                source=SOURCE_VIA,
            )
        from_usd = to_usd(sell.price_native_mid, zig_usd)
        return RouteOutput(
            route=route,
            pairs=[_pair_block("sell", sell, zig_usd), _pair_block("buy", buy, zig_usd)],
            price_native=safe_div(sell.price_native_mid, buy.price_native_mid),
            price_usd=None,
            zig_per_from=sell.price_native_mid,
            usd_per_from=from_usd,
            from_usd=from_usd,
            to_usd=to_usd(buy.price_native_mid, zig_usd),
            source=SOURCE_VIA,
        )
