from __future__ import annotations

import pytest

from fakes import FakeMarketDataPort, FakePoolPort, FakeTokenPort, reserves
from zigdex.application.dto.common import NotFoundOutput
from zigdex.application.dto.route import RouteInput
from zigdex.application.use_cases.pool_selection import PoolSelector
from zigdex.application.use_cases.route_swap import RouteSwapUseCase
from zigdex.application.use_cases.token_resolver import TokenResolver
from zigdex.domain.exceptions import InvalidQueryError


def _use_case(pool_port: FakePoolPort, zig_usd: float | None = 0.1) -> RouteSwapUseCase:
    return RouteSwapUseCase(
        resolver=TokenResolver(token_port=FakeTokenPort(), pool_port=pool_port),
        selector=PoolSelector(pool_port=pool_port),
        market_data_port=FakeMarketDataPort(zig_usd=zig_usd),
    )


def test_native_to_token_simulates_buy():
    pools = FakePoolPort(native_pools={10: [reserves(3, zig=10_000, token=50_000)]})

    result = _use_case(pools).execute(RouteInput(from_ref="uzig", to_ref="FOO", amount_in=500))

    assert result.source == "direct_uzig"
    assert result.route == ["uzig", "coin.zig1abc.ufoo"]
    assert len(result.pairs) == 1
    pair = result.pairs[0]
    assert pair.side == "buy"
    assert pair.fee == pytest.approx(0.003)
    assert pair.amount_out == pytest.approx((500 * 0.997 * 50_000) / (10_000 + 500 * 0.997))
    assert pair.price_impact > 0
    assert pair.price_native_mid == pytest.approx(0.2)
    assert result.from_usd == 0.1
    assert result.to_usd == pytest.approx(0.02)


def test_native_alias_resolves_through_token_table():
    pools = FakePoolPort(native_pools={10: [reserves(3, zig=10_000, token=50_000)]})

    result = _use_case(pools).execute(RouteInput(from_ref="FOO", to_ref="ZIG", amount_in=100))

    assert result.route == ["coin.zig1abc.ufoo", "uzig"]
    assert result.pairs[0].side == "sell"
    assert result.zig_per_from == pytest.approx(result.pairs[0].price_native_exec)
    assert result.to_usd == 0.1


def test_token_to_token_chains_native_output():
    pools = FakePoolPort(
        native_pools={
            10: [reserves(3, zig=10_000, token=50_000)],
            20: [reserves(4, zig=20_000, token=10_000)],
        }
    )

    result = _use_case(pools).execute(RouteInput(from_ref="FOO", to_ref="BAR", amount_in=1_000))

    assert result.source == "via_uzig"
    assert result.route == ["coin.zig1abc.ufoo", "uzig", "coin.zig1def.ubar"]
    sell, buy = result.pairs
    assert buy.amount_in == pytest.approx(sell.amount_out)
    assert result.price_native == pytest.approx(0.2 / 2.0)


def test_token_to_token_without_pool_returns_empty_pairs():
    pools = FakePoolPort(native_pools={10: [reserves(3, zig=10_000, token=50_000)]})

    result = _use_case(pools).execute(RouteInput(from_ref="FOO", to_ref="BAR", amount_in=1_000))

    assert result.pairs == []
    assert result.price_native is None


def test_missing_endpoint_is_invalid():
    with pytest.raises(InvalidQueryError):
        _use_case(FakePoolPort()).execute(RouteInput(from_ref=None, to_ref="FOO"))


def test_unknown_tokens_are_not_found():
    use_case = _use_case(FakePoolPort())

    missing_from = use_case.execute(RouteInput(from_ref="nothing", to_ref="FOO"))
    missing_to = use_case.execute(RouteInput(from_ref="FOO", to_ref="nothing"))

    assert isinstance(missing_from, NotFoundOutput)
    assert missing_from.error == "from token not found"
    assert missing_to.error == "to token not found"
