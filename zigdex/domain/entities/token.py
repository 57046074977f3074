from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Token:
    token_id: int
    denom: str
    symbol: str | None
    name: str | None
    exponent: int | None


@dataclass(frozen=True)
class TokenProfile:
    token_id: int
    exponent: int | None
    total_supply_base: float | None
    max_supply_base: float | None
    image_uri: str | None
    website: str | None
    twitter: str | None
    telegram: str | None
    description: str | None
    created_at: datetime | None


@dataclass(frozen=True)
class ExternalTokenStats:
    price_usd: float | None
    market_cap_usd: float | None
    circulating_supply: float | None
    total_supply: float | None
    last_updated: datetime | None


@dataclass(frozen=True)
class TokenSocial:
    handle: str | None
    user_id: str | None
    name: str | None
    is_blue_verified: bool
    verified_type: str | None
    profile_picture: str | None
    cover_picture: str | None
    followers: int | None
    following: int | None
    created_at_twitter: datetime | None
    last_refreshed: datetime | None


@dataclass(frozen=True)
class TokenHolder:
    address: str
    balance_base: float


@dataclass(frozen=True)
class TokenSecurity:
    is_mintable: bool | None
    can_change_minting_cap: bool | None
    max_supply_base: str | None
    total_supply_base: str | None
    creator_address: str | None
    creator_balance_base: float | None
    creator_pct_of_max: float | None
    top10_pct_of_max: float | None
    holders_count: int | None
    first_seen_at: datetime | None
    checked_at: datetime | None


@dataclass(frozen=True)
class TokenMarketRow:
    token_id: int
    denom: str
    symbol: str | None
    name: str | None
    image_uri: str | None
    created_at: datetime | None
    exponent: int | None
    price_in_zig: float | None
    mcap_zig: float | None
    fdv_zig: float | None
    holders: int
    vol_zig: float
    tx: int
    tvl_zig: float
