from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from zigdex.domain.entities.token import TokenSecurity

BASE_SCORE = 100
MIN_SCORE = 1
MAX_SCORE = 99


@dataclass(frozen=True)
class ScoreAdjustment:
    key: str
    points: int


@dataclass(frozen=True)
class SecurityScore:
    score: int
    penalties: list[ScoreAdjustment]
    bonuses: list[ScoreAdjustment]


def score_security(security: TokenSecurity | None, *, now: datetime) -> SecurityScore:
    penalties: list[ScoreAdjustment] = []
    bonuses: list[ScoreAdjustment] = []

    is_mintable = security.is_mintable if security else None
    can_change_cap = security.can_change_minting_cap if security else None
    top10 = (security.top10_pct_of_max if security else None) or 0.0
    creator = (security.creator_pct_of_max if security else None) or 0.0
    holders = (security.holders_count if security else None) or 0

    if is_mintable is True:
        penalties.append(ScoreAdjustment("is_mintable", 12))
    else:
        bonuses.append(ScoreAdjustment("not_mintable", 4))
    if can_change_cap is True:
        penalties.append(ScoreAdjustment("can_change_minting_cap", 8))

    if top10 >= 75:
        penalties.append(ScoreAdjustment("top10>=75%", 20))
    elif top10 >= 50:
        penalties.append(ScoreAdjustment("top10>=50%", 12))
    elif top10 >= 30:
        penalties.append(ScoreAdjustment("top10>=30%", 6))
    else:
        bonuses.append(ScoreAdjustment("top10<30%", 4))

    if creator >= 25:
        penalties.append(ScoreAdjustment("creator>=25%", 18))
    elif creator >= 10:
        penalties.append(ScoreAdjustment("creator>=10%", 10))
    elif creator > 0:
        bonuses.append(ScoreAdjustment("creator<10%", 3))

    if holders < 100:
        penalties.append(ScoreAdjustment("holders<100", 8))
    elif holders < 1000:
        penalties.append(ScoreAdjustment("holders<1k", 4))
    elif holders >= 10000:
        bonuses.append(ScoreAdjustment("holders>=10k", 5))

    if (
        security is not None
        and is_mintable is False
        and security.max_supply_base is not None
        and security.total_supply_base is not None
        and security.max_supply_base == security.total_supply_base
    ):
        bonuses.append(ScoreAdjustment("fully_minted_equals_max", 4))

    first_seen = security.first_seen_at if security else None
    if first_seen is not None:
        days_alive = (now - first_seen).total_seconds() / 86400
        if days_alive >= 180:
            bonuses.append(ScoreAdjustment("age>=180d", 6))
        elif days_alive >= 90:
            bonuses.append(ScoreAdjustment("age>=90d", 4))
        elif days_alive >= 30:
            bonuses.append(ScoreAdjustment("age>=30d", 2))

    score = BASE_SCORE - sum(p.points for p in penalties) + sum(b.points for b in bonuses)
    return SecurityScore(
        score=max(MIN_SCORE, min(MAX_SCORE, round(score))),
        penalties=penalties,
        bonuses=bonuses,
    )
