from __future__ import annotations

import logging

from zigdex.application.dto.best_pool import BestPoolOutput
from zigdex.application.ports.pool_port import PoolPort
from zigdex.domain.entities.pool import PoolLiquidity
from zigdex.domain.services.pool_liquidity import to_pool_liquidity
from zigdex.domain.services.xyk import DEFAULT_TRADE_USD, default_trade_size, pick_best_pool

logger = logging.getLogger(__name__)


class PoolSelector:
    """Best native-quoted pool for a token by simulated swap output."""

    def __init__(self, *, pool_port: PoolPort, default_trade_usd: float = DEFAULT_TRADE_USD):
        self._pool_port = pool_port
        self._default_trade_usd = default_trade_usd

    def native_quoted_pools(self, token_id: int, *, min_tvl_zig: float = 0.0) -> list[PoolLiquidity]:
        pools = [to_pool_liquidity(row) for row in self._pool_port.list_native_quoted_pools(token_id=token_id)]
        return [pool for pool in pools if pool.tvl_zig >= min_tvl_zig]

    def best_sell_pool(
        self,
        token_id: int,
        *,
        zig_usd: float | None,
        amount_in: float | None = None,
        min_tvl_zig: float = 0.0,
    ) -> BestPoolOutput | None:
        return self._best(token_id, side="sell", zig_usd=zig_usd, amount_in=amount_in, min_tvl_zig=min_tvl_zig)

    def best_buy_pool(
        self,
        token_id: int,
        *,
        zig_usd: float | None,
        amount_in: float | None = None,
        min_tvl_zig: float = 0.0,
    ) -> BestPoolOutput | None:
        return self._best(token_id, side="buy", zig_usd=zig_usd, amount_in=amount_in, min_tvl_zig=min_tvl_zig)

    def _best(
        self,
        token_id: int,
        *,
        side: str,
        zig_usd: float | None,
        amount_in: float | None,
        min_tvl_zig: float,
    ) -> BestPoolOutput | None:
        pools = self.native_quoted_pools(token_id, min_tvl_zig=min_tvl_zig)
        if not pools:
            return None
        amount = amount_in
        if amount is None:
            amount = default_trade_size(
                side,
                zig_usd=zig_usd,
                pools=pools,
                target_usd=self._default_trade_usd,
            )
        pick = pick_best_pool(pools, from_is_native=side == "buy", amount_in=amount)
        if pick is None:
            return None
        logger.debug(
            "pool_selection: picked token_id=%s side=%s pool_id=%s score=%s",
            token_id,
            side,
            pick.pool.pool_id,
            pick.score,
        )
        return BestPoolOutput(
            pool_id=pick.pool.pool_id,
            pair_contract=pick.pool.pair_contract,
            pair_type=pick.pool.pair_type,
            fee=pick.fee,
            price_native_mid=pick.pool.price_in_zig,
            tvl_native=pick.pool.tvl_zig,
            zig_reserve=pick.pool.zig_reserve,
            token_reserve=pick.pool.token_reserve,
            sim=pick.sim,
            score=pick.score,
            amount_used=amount,
        )
