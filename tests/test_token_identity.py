from __future__ import annotations

from zigdex.domain.entities.token import Token
from zigdex.domain.services.token_identity import (
    is_native_currency,
    is_native_ref,
    pick_token,
    token_match_rank,
)

ZIG = Token(token_id=1, denom="uzig", symbol="ZIG", name="Zigchain", exponent=6)
FOO = Token(token_id=10, denom="coin.zig1abc.ufoo", symbol="FOO", name="Foo Token", exponent=6)
FOO_COPY = Token(token_id=11, denom="coin.zig1def.ufoo", symbol="FOO", name="Foo Copy", exponent=6)


def test_native_aliases():
    assert is_native_ref("uzig")
    assert is_native_ref(" ZIG ")
    assert not is_native_ref("uzigx")
    assert not is_native_ref(None)
    assert is_native_currency(ZIG)
    assert not is_native_currency(FOO)


def test_match_rank_precedence():
    assert token_match_rank(FOO, "coin.zig1abc.ufoo") == 0
    assert token_match_rank(FOO, "foo") == 1
    assert token_match_rank(FOO, "token") == 2
    assert token_match_rank(FOO, "10") == 3
    assert token_match_rank(FOO, "bar") is None


def test_pick_token_prefers_denom_then_highest_id():
    assert pick_token([FOO_COPY, FOO], "coin.zig1abc.ufoo") is FOO
    assert pick_token([FOO, FOO_COPY], "FOO") is FOO_COPY
    assert pick_token([FOO], "nothing") is None


def test_uzig_and_zig_pick_the_same_token():
    assert pick_token([ZIG, FOO], "uzig") is pick_token([ZIG, FOO], "ZIG")
