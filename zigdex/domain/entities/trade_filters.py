from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Union


@dataclass(frozen=True)
class ActionFilter:
    include_liquidity: bool


@dataclass(frozen=True)
class DirectionFilter:
    direction: str


@dataclass(frozen=True)
class BaseTokenFilter:
    token_id: int


@dataclass(frozen=True)
class QuoteTokenFilter:
    token_id: int


@dataclass(frozen=True)
class EitherSideTokenFilter:
    token_id: int


@dataclass(frozen=True)
class SignerFilter:
    address: str


@dataclass(frozen=True)
class PoolIdFilter:
    pool_id: int


@dataclass(frozen=True)
class PairContractFilter:
    pair_contract: str


@dataclass(frozen=True)
class CreatedSinceFilter:
    since: datetime


@dataclass(frozen=True)
class CreatedBetweenFilter:
    start: datetime
    end: datetime


@dataclass(frozen=True)
class LargeTradeFilter:
    """Trades flagged in the large-trade table for ``bucket``."""

    bucket: str


@dataclass(frozen=True)
class WorthClassFilter:
    klass: str
    unit: str


@dataclass(frozen=True)
class WorthRangeFilter:
    unit: str
    min_value: float | None = None
    max_value: float | None = None


TradePredicate = Union[
    ActionFilter,
    DirectionFilter,
    BaseTokenFilter,
    QuoteTokenFilter,
    EitherSideTokenFilter,
    SignerFilter,
    PoolIdFilter,
    PairContractFilter,
    CreatedSinceFilter,
    CreatedBetweenFilter,
    LargeTradeFilter,
    WorthClassFilter,
    WorthRangeFilter,
]
