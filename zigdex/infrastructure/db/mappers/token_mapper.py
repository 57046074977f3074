from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from zigdex.domain.entities.token import (
    ExternalTokenStats,
    Token,
    TokenHolder,
    TokenMarketRow,
    TokenProfile,
    TokenSecurity,
    TokenSocial,
)
from zigdex.infrastructure.db.mappers.common import float_or_zero, required, to_float, to_int


def map_row_to_token(row: Mapping[str, Any]) -> Token:
    return Token(
        token_id=int(required(row, "token_id")),
        denom=str(required(row, "denom")),
        symbol=required(row, "symbol"),
        name=required(row, "name"),
        exponent=to_int(required(row, "exponent")),
    )


def map_row_to_token_profile(row: Mapping[str, Any]) -> TokenProfile:
    return TokenProfile(
        token_id=int(required(row, "token_id")),
        exponent=to_int(required(row, "exponent")),
        total_supply_base=to_float(required(row, "total_supply_base")),
        max_supply_base=to_float(required(row, "max_supply_base")),
        image_uri=required(row, "image_uri"),
        website=required(row, "website"),
        twitter=required(row, "twitter"),
        telegram=required(row, "telegram"),
        description=required(row, "description"),
        created_at=required(row, "created_at"),
    )


def map_row_to_external_stats(row: Mapping[str, Any]) -> ExternalTokenStats:
    return ExternalTokenStats(
        price_usd=to_float(required(row, "price_usd")),
        market_cap_usd=to_float(required(row, "market_cap_usd")),
        circulating_supply=to_float(required(row, "circulating_supply")),
        total_supply=to_float(required(row, "total_supply")),
        last_updated=required(row, "last_updated"),
    )


def map_row_to_token_social(row: Mapping[str, Any]) -> TokenSocial:
    return TokenSocial(
        handle=required(row, "handle"),
        user_id=required(row, "user_id"),
        name=required(row, "name"),
        is_blue_verified=bool(required(row, "is_blue_verified")),
        verified_type=required(row, "verified_type"),
        profile_picture=required(row, "profile_picture"),
        cover_picture=required(row, "cover_picture"),
        followers=to_int(required(row, "followers")),
        following=to_int(required(row, "following")),
        created_at_twitter=required(row, "created_at_twitter"),
        last_refreshed=required(row, "last_refreshed"),
    )


def map_row_to_token_holder(row: Mapping[str, Any]) -> TokenHolder:
    return TokenHolder(
        address=str(required(row, "address")),
        balance_base=float_or_zero(required(row, "balance_base")),
    )


def map_row_to_token_security(row: Mapping[str, Any]) -> TokenSecurity:
    max_supply = required(row, "max_supply_base")
    total_supply = required(row, "total_supply_base")
    return TokenSecurity(
        is_mintable=required(row, "is_mintable"),
        can_change_minting_cap=required(row, "can_change_minting_cap"),
        max_supply_base=str(max_supply) if max_supply is not None else None,
        total_supply_base=str(total_supply) if total_supply is not None else None,
        creator_address=required(row, "creator_address"),
        creator_balance_base=to_float(required(row, "creator_balance_base")),
        creator_pct_of_max=to_float(required(row, "creator_pct_of_max")),
        top10_pct_of_max=to_float(required(row, "top10_pct_of_max")),
        holders_count=to_int(required(row, "holders_count")),
        first_seen_at=required(row, "first_seen_at"),
        checked_at=required(row, "checked_at"),
    )


def map_row_to_token_market_row(row: Mapping[str, Any]) -> TokenMarketRow:
    return TokenMarketRow(
        token_id=int(required(row, "token_id")),
        denom=str(required(row, "denom")),
        symbol=required(row, "symbol"),
        name=required(row, "name"),
        image_uri=required(row, "image_uri"),
        created_at=required(row, "created_at"),
        exponent=to_int(required(row, "exponent")),
        price_in_zig=to_float(required(row, "price_in_zig")),
        mcap_zig=to_float(required(row, "mcap_zig")),
        fdv_zig=to_float(required(row, "fdv_zig")),
        holders=to_int(required(row, "holders")) or 0,
        vol_zig=float_or_zero(required(row, "vol_zig")),
        tx=to_int(required(row, "tx")) or 0,
        tvl_zig=float_or_zero(required(row, "tvl_zig")),
    )
