from __future__ import annotations

import math

from zigdex.domain.services.units import (
    finite_or_none,
    invert_or_none,
    invert_or_zero,
    pct_change,
    safe_div,
    scale,
    to_usd,
)


def test_scale_uses_exponent_and_defaults_to_six():
    assert scale(1_500_000, 6) == 1.5
    assert scale(25, 1) == 2.5
    assert scale(2_000_000) == 2.0
    assert scale(None, 6) is None


def test_scale_zero_exponent_keeps_amount():
    assert scale(42, 0) == 42.0


def test_to_usd_needs_both_operands():
    assert to_usd(10.0, 0.5) == 5.0
    assert to_usd(None, 0.5) is None
    assert to_usd(10.0, None) is None
    assert to_usd(math.inf, 0.5) is None


def test_safe_div_guards_zero_and_missing():
    assert safe_div(1.0, 4.0) == 0.25
    assert safe_div(1.0, 0) is None
    assert safe_div(None, 2.0) is None


def test_finite_or_none_drops_nan_and_infinity():
    assert finite_or_none(math.nan) is None
    assert finite_or_none(-math.inf) is None
    assert finite_or_none(3) == 3.0


def test_inversion_guards():
    assert invert_or_zero(4.0) == 0.25
    assert invert_or_zero(0.0) == 0.0
    assert invert_or_zero(-1.0) == 0.0
    assert invert_or_none(0.0) is None
    assert invert_or_none(None) is None
    assert invert_or_none(2.0) == 0.5


def test_pct_change():
    assert math.isclose(pct_change(110.0, 100.0), 10.0)
    assert pct_change(0.0, 100.0) is None
    assert pct_change(100.0, None) is None
