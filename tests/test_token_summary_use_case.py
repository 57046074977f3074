from __future__ import annotations

import pytest

from fakes import FOO, USDC, ZIG, FakeMarketDataPort, FakePoolPort, FakeTokenPort, FakeTradePort, reserves
from zigdex.application.dto.common import NotFoundOutput
from zigdex.application.dto.token_summary import GetTokenSummaryInput
from zigdex.application.use_cases.get_token_summary import GetTokenSummaryUseCase, StableReference
from zigdex.application.use_cases.pool_selection import PoolSelector
from zigdex.application.use_cases.token_resolver import TokenResolver
from zigdex.domain.entities.market import ClosePair, MatrixBucket
from zigdex.domain.entities.token import TokenProfile


def _profile(token_id: int, total: float, maximum: float) -> TokenProfile:
    return TokenProfile(
        token_id=token_id,
        exponent=6,
        total_supply_base=total,
        max_supply_base=maximum,
        image_uri="https://img/foo.png",
        website=None,
        twitter=None,
        telegram=None,
        description=None,
        created_at=None,
    )


def _use_case(token_port, pool_port, market_port, trade_port=None) -> GetTokenSummaryUseCase:
    resolver = TokenResolver(token_port=token_port, pool_port=pool_port)
    return GetTokenSummaryUseCase(
        resolver=resolver,
        selector=PoolSelector(pool_port=pool_port),
        stable_reference=StableReference(
            resolver=resolver,
            token_port=token_port,
            pool_port=pool_port,
            market_data_port=market_port,
        ),
        token_port=token_port,
        pool_port=pool_port,
        market_data_port=market_port,
        trade_port=trade_port or FakeTradePort(),
    )


def test_summary_prices_token_through_best_pool():
    token_port = FakeTokenPort(
        profiles={FOO.token_id: _profile(FOO.token_id, 1e12, 2e12)},
        prices={FOO.token_id: 0.2},
        holders_count={FOO.token_id: 42},
    )
    pool_port = FakePoolPort(native_pools={FOO.token_id: [reserves(3, zig=10_000, token=50_000)]})
    market_port = FakeMarketDataPort(
        zig_usd=0.1,
        closes={3: ClosePair(last_close=0.22, prev_close=0.2)},
        matrix={
            "24h": MatrixBucket(
                bucket="24h",
                vol_buy=300.0,
                vol_sell=200.0,
                tx_buy=3,
                tx_sell=2,
                unique_traders=4,
                tvl=20_000.0,
            )
        },
    )

    summary = _use_case(token_port, pool_port, market_port).execute(GetTokenSummaryInput(identifier="FOO"))

    assert summary.token.symbol == "FOO"
    assert summary.price.source == "best"
    assert summary.price.pool_id == 3
    assert summary.price.native == pytest.approx(0.2)
    assert summary.price.usd == pytest.approx(0.02)
    assert summary.price.change_pct["24h"] == pytest.approx(10.0)
    assert summary.mcap.native == pytest.approx(200_000.0)
    assert summary.mcap.usd == pytest.approx(20_000.0)
    assert summary.fdv.native == pytest.approx(400_000.0)
    assert summary.activity.volume_native["24h"] == 500.0
    assert summary.activity.volume_native["30m"] == 0.0
    assert summary.activity.buys_24h == 3
    assert summary.holders == 42
    assert summary.pools == 1
    assert summary.best_pool.pool_id == 3
    assert summary.dominant == "base"


def test_native_summary_inverts_stable_pool():
    token_port = FakeTokenPort(prices={2: 8.0})
    pool_port = FakePoolPort(pair_pools={(2, 1): 5})
    market_port = FakeMarketDataPort(zig_usd=0.1, closes={5: ClosePair(last_close=8.0, prev_close=10.0)})

    summary = _use_case(token_port, pool_port, market_port).execute(GetTokenSummaryInput(identifier="uzig"))

    assert summary.price.source == "stable_invert"
    assert summary.price.pool_id == 5
    assert summary.price.native == 1.0
    assert summary.price.usd == pytest.approx(0.125)
    assert summary.price.change_pct["1h"] == pytest.approx(25.0)
    assert summary.mcap.native is None


def test_native_summary_falls_back_to_exchange_rate():
    summary = _use_case(FakeTokenPort(), FakePoolPort(), FakeMarketDataPort(zig_usd=0.1)).execute(
        GetTokenSummaryInput(identifier="ZIG")
    )

    assert summary.price.source == "fx"
    assert summary.price.usd == 0.1
    assert summary.price.change_pct["24h"] is None


def test_summary_of_unknown_token():
    result = _use_case(FakeTokenPort(), FakePoolPort(), FakeMarketDataPort()).execute(
        GetTokenSummaryInput(identifier="nothing")
    )

    assert isinstance(result, NotFoundOutput)
    assert result.error == "token not found"


def _quote_dominant_ports(**pool_overrides):
    token_port = FakeTokenPort(prices={FOO.token_id: 0.5})
    pool_port = FakePoolPort(
        quote_side_tokens={USDC.token_id},
        most_active={(USDC.token_id, "quote"): 7},
        base_tokens={7: FOO},
        quote_tvl={USDC.token_id: 2_500.0},
        **pool_overrides,
    )
    market_port = FakeMarketDataPort(zig_usd=0.1, closes={7: ClosePair(last_close=4.0, prev_close=5.0)})
    return token_port, pool_port, market_port


def test_quote_dominant_summary_inverts_price_under_quote_view():
    token_port, pool_port, market_port = _quote_dominant_ports()
    use_case = _use_case(token_port, pool_port, market_port, FakeTradePort(last_price=4.0))

    summary = use_case.execute(GetTokenSummaryInput(identifier="USDC", dominant="auto", view="quote"))

    assert summary.dominant == "quote"
    assert summary.pair_view == "quote"
    assert summary.price.pool_id == 7
    assert summary.price.native == pytest.approx(0.25)
    assert summary.price.change_pct["24h"] == pytest.approx(25.0)
    assert summary.liquidity.native == 2_500.0
    assert summary.liquidity.usd == pytest.approx(250.0)


def test_quote_dominant_summary_prices_usd_from_pool_base_token():
    token_port, pool_port, market_port = _quote_dominant_ports()
    use_case = _use_case(token_port, pool_port, market_port, FakeTradePort(last_price=4.0))

    summary = use_case.execute(GetTokenSummaryInput(identifier="USDC", dominant="auto"))

    assert summary.pair_view == "base"
    assert summary.price.native == pytest.approx(4.0)
    assert summary.price.usd == pytest.approx(0.05)
    assert summary.price.change_pct["1h"] == pytest.approx(-20.0)


def test_quote_dominant_summary_uses_exchange_rate_for_native_base():
    token_port, pool_port, market_port = _quote_dominant_ports()
    pool_port.base_tokens[7] = ZIG
    market_port.latest_closes[7] = 8.0

    summary = _use_case(token_port, pool_port, market_port).execute(
        GetTokenSummaryInput(identifier="USDC", dominant="quote")
    )

    assert summary.price.native == pytest.approx(8.0)
    assert summary.price.usd == pytest.approx(0.1)
