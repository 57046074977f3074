from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from fakes import FOO, FakeMarketDataPort, FakePoolPort, FakeTokenPort, FakeTradePort, reserves
from zigdex.api import deps
from zigdex.application.use_cases.get_best_pool import GetBestPoolUseCase
from zigdex.application.use_cases.get_token_holders import GetTokenHoldersUseCase
from zigdex.application.use_cases.get_token_ohlcv import GetTokenOhlcvUseCase
from zigdex.application.use_cases.get_token_security import GetTokenSecurityUseCase
from zigdex.application.use_cases.get_token_summary import GetTokenSummaryUseCase, StableReference
from zigdex.application.use_cases.get_zig_overview import GetZigOverviewUseCase
from zigdex.application.use_cases.list_tokens import (
    ListMoversUseCase,
    ListSwapTokensUseCase,
    ListTokensUseCase,
    TokenChangeCalculator,
)
from zigdex.application.use_cases.pool_selection import PoolSelector
from zigdex.application.use_cases.token_resolver import TokenResolver
from zigdex.domain.entities.market import ClosePair
from zigdex.domain.entities.token import TokenHolder, TokenMarketRow
from zigdex.main import app


def _market_row() -> TokenMarketRow:
    return TokenMarketRow(
        token_id=FOO.token_id,
        denom=FOO.denom,
        symbol=FOO.symbol,
        name=FOO.name,
        image_uri=None,
        created_at=None,
        exponent=6,
        price_in_zig=0.2,
        mcap_zig=1_000.0,
        fdv_zig=1_000.0,
        holders=3,
        vol_zig=10.0,
        tx=1,
        tvl_zig=20.0,
    )


@pytest.fixture
def ports():
    token_port = FakeTokenPort(
        prices={FOO.token_id: 0.2},
        market_rows=[_market_row()],
        holders={FOO.token_id: [TokenHolder(address="zig1whale", balance_base=5_000_000)]},
    )
    pool_port = FakePoolPort(native_pools={FOO.token_id: [reserves(3, zig=10_000, token=50_000)]})
    market_port = FakeMarketDataPort(zig_usd=0.1, closes={3: ClosePair(last_close=0.22, prev_close=0.2)})
    return token_port, pool_port, market_port


@pytest.fixture
def client(ports):
    token_port, pool_port, market_port = ports
    resolver = TokenResolver(token_port=token_port, pool_port=pool_port)
    selector = PoolSelector(pool_port=pool_port)
    calculator = TokenChangeCalculator(selector=selector, pool_port=pool_port, market_data_port=market_port)

    app.dependency_overrides[deps.get_list_tokens_use_case] = lambda: ListTokensUseCase(
        token_port=token_port,
        selector=selector,
        change_calculator=calculator,
        market_data_port=market_port,
        max_workers=1,
    )
    app.dependency_overrides[deps.get_list_movers_use_case] = lambda: ListMoversUseCase(
        token_port=token_port,
        change_calculator=calculator,
        market_data_port=market_port,
        max_workers=1,
    )
    stable_reference = StableReference(
        resolver=resolver,
        token_port=token_port,
        pool_port=pool_port,
        market_data_port=market_port,
    )

    app.dependency_overrides[deps.get_token_summary_use_case] = lambda: GetTokenSummaryUseCase(
        resolver=resolver,
        selector=selector,
        stable_reference=stable_reference,
        token_port=token_port,
        pool_port=pool_port,
        market_data_port=market_port,
        trade_port=FakeTradePort(),
    )
    app.dependency_overrides[deps.get_token_holders_use_case] = lambda: GetTokenHoldersUseCase(
        resolver=resolver,
        token_port=token_port,
    )
    app.dependency_overrides[deps.get_token_security_use_case] = lambda: GetTokenSecurityUseCase(
        resolver=resolver,
        token_port=token_port,
    )
    app.dependency_overrides[deps.get_token_ohlcv_use_case] = lambda: GetTokenOhlcvUseCase(
        resolver=resolver,
        selector=selector,
        stable_reference=stable_reference,
        pool_port=pool_port,
        token_port=token_port,
        market_data_port=market_port,
    )
    app.dependency_overrides[deps.get_best_pool_use_case] = lambda: GetBestPoolUseCase(
        resolver=resolver,
        selector=selector,
        market_data_port=market_port,
    )
    app.dependency_overrides[deps.get_list_swap_tokens_use_case] = lambda: ListSwapTokensUseCase(
        token_port=token_port,
        market_data_port=market_port,
    )
    app.dependency_overrides[deps.get_zig_overview_use_case] = lambda: GetZigOverviewUseCase(
        resolver=resolver,
        token_port=token_port,
        pool_port=pool_port,
        market_data_port=market_port,
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_list_tokens_wraps_items_in_data(client, ports):
    response = client.get("/tokens", params={"dir": "asc", "includeChange": "true"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"][0]["symbol"] == "FOO"
    assert body["data"][0]["price"] == {"native": 0.2, "usd": pytest.approx(0.02)}
    assert body["data"][0]["change_24h_pct"] == pytest.approx(10.0)
    assert ports[0].market_row_calls[0]["direction"] == "asc"


def test_list_tokens_rejects_unknown_sort(client):
    response = client.get("/tokens", params={"sort": "name"})

    assert response.status_code == 400


def test_gainers_board(client):
    response = client.get("/tokens/gainers")

    assert response.status_code == 200
    body = response.json()
    assert body["board"] == "gainers"
    assert body["total"] == 1
    assert body["data"][0]["token_id"] == FOO.token_id


def test_token_summary(client):
    response = client.get("/tokens/FOO")

    assert response.status_code == 200
    body = response.json()
    assert body["token"]["denom"] == FOO.denom
    assert body["price"]["pool_id"] == 3
    assert body["best_pool"]["pool_id"] == 3
    assert set(body["activity"]["tx"]) == {"30m", "1h", "4h", "24h"}


def test_unknown_token_is_404_envelope(client):
    response = client.get("/tokens/nothing")

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "token not found"}


def test_holders(client):
    response = client.get("/tokens/FOO/holders", params={"limit": 10})

    assert response.status_code == 200
    body = response.json()
    assert body["data"] == [{"address": "zig1whale", "balance": 5.0, "pct_of_max": None, "pct_of_total": None}]
    assert body["total_holders"] == 1


def test_holders_limit_is_validated(client):
    response = client.get("/tokens/FOO/holders", params={"limit": 0})

    assert response.status_code == 422


def test_security_groups_checks_into_categories(client):
    response = client.get("/tokens/FOO/security")

    assert response.status_code == 200
    body = response.json()
    assert body["source"] == "token_security"
    assert body["categories"]["supply"]["is_mintable"] is False
    assert body["categories"]["adoption"]["holders_count"] == 0
    assert 1 <= body["score"] <= 99


def test_best_pool_envelope(client):
    response = client.get("/tokens/FOO/best-pool", params={"amt": 100})

    assert response.status_code == 200
    body = response.json()
    assert body["data"]["pool_id"] == 3
    assert body["data"]["amount_used"] == 100


def test_ohlcv_rejects_unknown_fill(client):
    response = client.get("/tokens/FOO/ohlcv", params={"fill": "bogus"})

    assert response.status_code == 400


def test_ohlcv_returns_bars_under_data(client):
    response = client.get(
        "/tokens/FOO/ohlcv",
        params={"tf": "1h", "from": "2024-05-01T00:00:00", "to": "2024-05-01T03:00:00"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["data"] == []
    assert body["meta"]["step_sec"] == 3600
    assert body["meta"]["pool_id"] == 3


def test_swap_list_wraps_items_in_data(client, ports):
    response = client.get("/tokens/swap-list", params={"bucket": "1h", "limit": 5})

    assert response.status_code == 200
    body = response.json()
    assert body["bucket"] == "1h"
    assert body["data"][0]["symbol"] == "FOO"
    assert body["data"][0]["price"] == {"native": 0.2, "usd": pytest.approx(0.02)}
    assert ports[0].market_row_calls[0]["sort"] == "vol"


def test_swap_list_rejects_unknown_bucket(client):
    response = client.get("/tokens/swap-list", params={"bucket": "7d"})

    assert response.status_code == 400


def test_zig_overview(client):
    response = client.get("/zig/overview", params={"limit": 5})

    assert response.status_code == 200
    body = response.json()
    assert body["token"]["denom"] == "uzig"
    assert body["price"]["source"] == "exchange_rates"
    assert body["price"]["usd"] == pytest.approx(0.1)
    assert body["volume_24h"]["native"] == 0.0
    assert body["best_pool"] is None
    assert body["top_pools"] == []


def test_zig_overview_limit_is_validated(client):
    response = client.get("/zig/overview", params={"limit": 51})

    assert response.status_code == 422
