from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from zigdex.domain.entities.pool import PoolLiquidity

DEFAULT_FEE = 0.003
XYK_FEE = 0.0001
CONCENTRATED_FEE = 0.01
DEFAULT_TRADE_USD = 100.0

_XYK_BPS = re.compile(r"xyk[_-](\d+)")
_EPS = 1e-18


@dataclass(frozen=True)
class SwapSimulation:
    out: float
    price: float
    impact: float


ZERO_SIMULATION = SwapSimulation(out=0.0, price=0.0, impact=0.0)


@dataclass(frozen=True)
class PoolCandidate:
    pool: PoolLiquidity
    fee: float
    sim: SwapSimulation | None
    score: float


def pair_fee(pair_type: str | None) -> float:
    if not pair_type:
        return DEFAULT_FEE
    kind = pair_type.lower()
    if kind == "xyk":
        return XYK_FEE
    if kind == "concentrated":
        return CONCENTRATED_FEE
    match = _XYK_BPS.search(kind)
    if match:
        return int(match.group(1)) / 10_000
    return DEFAULT_FEE


def simulate_xyk(
    *,
    from_is_native: bool,
    amount_in: float,
    reserve_native: float,
    reserve_token: float,
    fee: float,
) -> SwapSimulation:
    """Constant-product swap with the fee taken from the input.

    ``price`` is always native per token; ``impact`` is positive when the
    execution is worse than the reserves' mid price.
    """
    if not (reserve_native > 0 and reserve_token > 0) or not amount_in > 0:
        return ZERO_SIMULATION
    mid = reserve_native / reserve_token
    x_in = amount_in * (1 - fee)
    if from_is_native:
        out = x_in * reserve_token / (reserve_native + x_in)
        price = amount_in / max(out, _EPS)
        impact = price / mid - 1
    else:
        out = x_in * reserve_native / (reserve_token + x_in)
        price = out / amount_in
        impact = mid / max(price, _EPS) - 1
    return SwapSimulation(out=out, price=price, impact=impact)


def pick_best_pool(
    pools: Iterable[PoolLiquidity],
    *,
    from_is_native: bool,
    amount_in: float,
) -> PoolCandidate | None:
    # First-seen wins ties, including the all-zero case.
    best: PoolCandidate | None = None
    for pool in pools:
        fee = pair_fee(pool.pair_type)
        sim = None
        if pool.zig_reserve > 0 and pool.token_reserve > 0:
            sim = simulate_xyk(
                from_is_native=from_is_native,
                amount_in=amount_in,
                reserve_native=pool.zig_reserve,
                reserve_token=pool.token_reserve,
                fee=fee,
            )
        score = sim.out if sim is not None else 0.0
        if best is None or score > best.score:
            best = PoolCandidate(pool=pool, fee=fee, sim=sim, score=score)
    return best


def default_trade_size(
    side: str,
    *,
    zig_usd: float | None,
    pools: Sequence[PoolLiquidity],
    target_usd: float = DEFAULT_TRADE_USD,
) -> float:
    native_amount = target_usd / max(zig_usd or 0.0, 1e-9)
    if side == "buy":
        return native_amount
    avg_mid = sum(p.price_in_zig for p in pools) / len(pools) if pools else 1.0
    return native_amount / max(avg_mid, 1e-12)
