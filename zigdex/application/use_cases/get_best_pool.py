from __future__ import annotations

from dataclasses import replace

from zigdex.application.dto.best_pool import BestPoolOutput, GetBestPoolInput
from zigdex.application.dto.common import NotFoundOutput
from zigdex.application.ports.market_data_port import MarketDataPort
from zigdex.application.use_cases.pool_selection import PoolSelector
from zigdex.application.use_cases.token_resolver import TokenResolver


class GetBestPoolUseCase:
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

    def execute(self, command: GetBestPoolInput) -> BestPoolOutput | NotFoundOutput | None:
        token = self._resolver.resolve(command.identifier)
        if token is None:
            return NotFoundOutput(error="token not found")
        best = self._selector.best_sell_pool(
            token.token_id,
            zig_usd=self._market_data_port.latest_exchange_rate(),
            amount_in=command.amount_in,
            min_tvl_zig=command.min_tvl_zig,
        )
        if best is None:
            return None
        return replace(best, token_id=token.token_id)
