from __future__ import annotations

import math

NATIVE_EXPONENT = 6


def finite_or_none(value: float | None) -> float | None:
    if value is None:
        return None
    value = float(value)
    return value if math.isfinite(value) else None


def scale(
    amount_base: float | int | None,
    exponent: int | None = None,
    fallback_exponent: int = NATIVE_EXPONENT,
) -> float | None:
    """Base-unit amount to display units; ``None`` passes through."""
    if amount_base is None:
        return None
    resolved = fallback_exponent if exponent is None else int(exponent)
    return float(amount_base) / (10 ** resolved)


def to_usd(native_value: float | None, zig_usd: float | None) -> float | None:
    if native_value is None or zig_usd is None:
        return None
    if not (math.isfinite(native_value) and math.isfinite(zig_usd)):
        return None
    return finite_or_none(native_value * zig_usd)


def safe_div(numerator: float | None, denominator: float | None) -> float | None:
    if numerator is None or denominator is None or denominator == 0:
        return None
    return finite_or_none(numerator / denominator)


def pct_change(current: float | None, previous: float | None) -> float | None:
    if not current or not previous:
        return None
    return finite_or_none((current - previous) / previous * 100)


def invert_or_zero(value: float) -> float:
    return 1.0 / value if value > 0 else 0.0


def invert_or_none(value: float | None) -> float | None:
    if value is None or not value > 0:
        return None
    return finite_or_none(1.0 / value)
