from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from fakes import FOO, FakePoolPort, FakeTokenPort
from zigdex.application.dto.common import NotFoundOutput
from zigdex.application.dto.holders import GetHoldersInput
from zigdex.application.use_cases.get_token_holders import GetTokenHoldersUseCase
from zigdex.application.use_cases.get_token_security import GetTokenSecurityUseCase
from zigdex.application.use_cases.token_resolver import TokenResolver
from zigdex.domain.entities.token import TokenHolder, TokenProfile, TokenSecurity

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def _profile(total: float | None, maximum: float | None) -> TokenProfile:
    return TokenProfile(
        token_id=FOO.token_id,
        exponent=6,
        total_supply_base=total,
        max_supply_base=maximum,
        image_uri=None,
        website=None,
        twitter=None,
        telegram=None,
        description=None,
        created_at=None,
    )


def _holders(count: int) -> list[TokenHolder]:
    return [TokenHolder(address=f"zig1h{i}", balance_base=(i + 1) * 1_000_000) for i in range(count)]


def _holders_use_case(token_port: FakeTokenPort) -> GetTokenHoldersUseCase:
    return GetTokenHoldersUseCase(
        resolver=TokenResolver(token_port=token_port, pool_port=FakePoolPort()),
        token_port=token_port,
    )


def test_holders_page_with_shares():
    token_port = FakeTokenPort(
        profiles={FOO.token_id: _profile(total=500_000_000, maximum=1_000_000_000)},
        holders={FOO.token_id: _holders(12)},
    )

    result = _holders_use_case(token_port).execute(GetHoldersInput(identifier="FOO", limit=200))

    assert result.total_holders == 12
    assert result.items[0].address == "zig1h11"
    assert result.items[0].balance == 12.0
    assert result.items[0].pct_of_max == pytest.approx(1.2)
    assert result.items[0].pct_of_total == pytest.approx(2.4)
    assert result.top10_pct_of_max == pytest.approx(sum(range(3, 13)) / 1_000 * 100)
    assert token_port.holder_calls == [(200, 0)]


def test_holders_fetches_top_ten_separately_for_later_pages():
    token_port = FakeTokenPort(
        profiles={FOO.token_id: _profile(total=None, maximum=0)},
        holders={FOO.token_id: _holders(12)},
    )

    result = _holders_use_case(token_port).execute(GetHoldersInput(identifier="FOO", limit=5, offset=10))

    assert [item.address for item in result.items] == ["zig1h1", "zig1h0"]
    assert result.items[0].pct_of_max is None
    assert result.items[0].pct_of_total is None
    assert result.top10_pct_of_max is None
    assert token_port.holder_calls == [(5, 10), (10, 0)]


def test_holders_clamps_limit():
    token_port = FakeTokenPort(holders={FOO.token_id: _holders(1)})

    result = _holders_use_case(token_port).execute(GetHoldersInput(identifier="FOO", limit=10_000, offset=-3))

    assert (result.limit, result.offset) == (500, 0)


def test_holders_unknown_token():
    result = _holders_use_case(FakeTokenPort()).execute(GetHoldersInput(identifier="nothing"))

    assert isinstance(result, NotFoundOutput)


def test_security_report():
    token_port = FakeTokenPort(
        security={
            FOO.token_id: TokenSecurity(
                is_mintable=False,
                can_change_minting_cap=False,
                max_supply_base="1000000000000",
                total_supply_base="1000000000000",
                creator_address="zig1creator",
                creator_balance_base=50_000_000_000,
                creator_pct_of_max=5.123456,
                top10_pct_of_max=22.222222,
                holders_count=2_000,
                first_seen_at=NOW - timedelta(days=100),
                checked_at=NOW,
            )
        }
    )
    use_case = GetTokenSecurityUseCase(
        resolver=TokenResolver(token_port=token_port, pool_port=FakePoolPort()),
        token_port=token_port,
        clock=lambda: NOW,
    )

    result = use_case.execute("FOO")

    assert result.checks.max_supply == 1_000_000.0
    assert result.checks.top10_pct_of_max == 22.2222
    assert result.checks.creator_pct_of_max == 5.1235
    assert result.dev.creator_balance == 50_000.0
    assert result.dev.holders_count == 2_000
    assert {item.key for item in result.bonuses} == {
        "not_mintable",
        "top10<30%",
        "creator<10%",
        "fully_minted_equals_max",
        "age>=90d",
    }
    assert result.score == 99
    assert result.last_updated == NOW


def test_security_without_row_still_scores():
    token_port = FakeTokenPort()
    use_case = GetTokenSecurityUseCase(
        resolver=TokenResolver(token_port=token_port, pool_port=FakePoolPort()),
        token_port=token_port,
        clock=lambda: NOW,
    )

    result = use_case.execute("FOO")

    assert result.checks.is_mintable is False
    assert result.checks.max_supply is None
    assert result.dev.creator_address is None
    assert 1 <= result.score <= 99
