from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone

from zigdex.application.dto.common import ValuePair
from zigdex.application.dto.token_summary import BucketActivity, TokenIdentity
from zigdex.domain.entities.market import MatrixBucket, empty_matrix_bucket
from zigdex.domain.entities.token import ExternalTokenStats, Token, TokenProfile
from zigdex.domain.services.units import NATIVE_EXPONENT, safe_div, scale, to_usd

MATRIX_BUCKETS = ("30m", "1h", "4h", "24h")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def token_exponent(token: Token, profile: TokenProfile | None) -> int:
    if profile is not None and profile.exponent is not None:
        return profile.exponent
    if token.exponent is not None:
        return token.exponent
    return NATIVE_EXPONENT


def supply_figures(
    profile: TokenProfile | None,
    external: ExternalTokenStats | None,
    exponent: int,
) -> tuple[float | None, float | None]:
    """Circulating and max supply in display units, falling back to external stats."""
    circulating = scale(profile.total_supply_base, exponent) if profile is not None else None
    maximum = scale(profile.max_supply_base, exponent) if profile is not None else None
    if circulating is None and external is not None:
        circulating = external.circulating_supply
    if maximum is None and external is not None:
        maximum = external.total_supply
    return circulating, maximum


def token_identity(token: Token, profile: TokenProfile | None, exponent: int) -> TokenIdentity:
    return TokenIdentity(
        token_id=token.token_id,
        denom=token.denom,
        symbol=token.symbol,
        name=token.name,
        exponent=exponent,
        image_uri=profile.image_uri if profile else None,
        website=profile.website if profile else None,
        twitter=profile.twitter if profile else None,
        telegram=profile.telegram if profile else None,
        description=profile.description if profile else None,
        created_at=profile.created_at if profile else None,
    )


def bucket_activity(matrix: Mapping[str, MatrixBucket], fx: float | None) -> BucketActivity:
    rows = {bucket: matrix.get(bucket) or empty_matrix_bucket(bucket) for bucket in MATRIX_BUCKETS}
    day = rows["24h"]
    return BucketActivity(
        volume_native={bucket: row.volume for bucket, row in rows.items()},
        volume_usd={bucket: to_usd(row.volume, fx) for bucket, row in rows.items()},
        tx={bucket: row.tx for bucket, row in rows.items()},
        unique_traders_24h=day.unique_traders,
        buys_24h=day.tx_buy,
        sells_24h=day.tx_sell,
        vol_buy_24h=ValuePair(native=day.vol_buy, usd=to_usd(day.vol_buy, fx)),
        vol_sell_24h=ValuePair(native=day.vol_sell, usd=to_usd(day.vol_sell, fx)),
    )


def market_caps(
    *,
    price_native: float | None,
    circulating: float | None,
    maximum: float | None,
    external: ExternalTokenStats | None,
    fx: float | None,
) -> tuple[ValuePair, ValuePair]:
    mcap_native = price_native * circulating if price_native is not None and circulating is not None else None
    fdv_native = price_native * maximum if price_native is not None and maximum is not None else None
    external_mcap = external.market_cap_usd if external is not None else None
    if mcap_native is None and external_mcap is not None and fx:
        mcap_native = safe_div(external_mcap, fx)
    mcap_usd = to_usd(mcap_native, fx) if mcap_native is not None else external_mcap
    return (
        ValuePair(native=mcap_native, usd=mcap_usd),
        ValuePair(native=fdv_native, usd=to_usd(fdv_native, fx)),
    )
