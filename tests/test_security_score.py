from __future__ import annotations

from datetime import datetime, timedelta, timezone

from zigdex.domain.entities.token import TokenSecurity
from zigdex.domain.services.security_score import score_security

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def _security(**overrides) -> TokenSecurity:
    values = {
        "is_mintable": False,
        "can_change_minting_cap": False,
        "max_supply_base": "1000000",
        "total_supply_base": "1000000",
        "creator_address": "zig1creator",
        "creator_balance_base": 10.0,
        "creator_pct_of_max": 5.0,
        "top10_pct_of_max": 20.0,
        "holders_count": 20_000,
        "first_seen_at": NOW - timedelta(days=200),
        "checked_at": NOW,
    }
    values.update(overrides)
    return TokenSecurity(**values)


def _keys(adjustments) -> set[str]:
    return {item.key for item in adjustments}


def test_healthy_token_is_clamped_to_ninety_nine():
    result = score_security(_security(), now=NOW)

    assert result.penalties == []
    assert _keys(result.bonuses) == {
        "not_mintable",
        "top10<30%",
        "creator<10%",
        "holders>=10k",
        "fully_minted_equals_max",
        "age>=180d",
    }
    assert result.score == 99


def test_risky_token_accumulates_penalties():
    result = score_security(
        _security(
            is_mintable=True,
            can_change_minting_cap=True,
            top10_pct_of_max=80.0,
            creator_pct_of_max=30.0,
            holders_count=12,
            first_seen_at=NOW - timedelta(days=1),
        ),
        now=NOW,
    )

    assert sum(item.points for item in result.penalties) == 12 + 8 + 20 + 18 + 8
    assert result.bonuses == []
    assert result.score == 100 - 66


def test_middle_tiers():
    result = score_security(
        _security(
            top10_pct_of_max=55.0,
            creator_pct_of_max=12.0,
            holders_count=500,
            total_supply_base="10",
            first_seen_at=NOW - timedelta(days=95),
        ),
        now=NOW,
    )

    assert _keys(result.penalties) == {"top10>=50%", "creator>=10%", "holders<1k"}
    assert _keys(result.bonuses) == {"not_mintable", "age>=90d"}
    assert result.score == 100 - 12 - 10 - 4 + 4 + 4


def test_missing_row_scores_from_defaults():
    result = score_security(None, now=NOW)

    assert _keys(result.penalties) == {"holders<100"}
    assert _keys(result.bonuses) == {"not_mintable", "top10<30%"}
    assert result.score == 99


def test_score_never_drops_below_one():
    result = score_security(
        _security(
            is_mintable=True,
            can_change_minting_cap=True,
            top10_pct_of_max=99.0,
            creator_pct_of_max=99.0,
            holders_count=0,
        ),
        now=NOW,
    )
    assert result.score >= 1
