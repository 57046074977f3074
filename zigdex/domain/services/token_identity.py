from __future__ import annotations

from collections.abc import Iterable

from zigdex.domain.entities.token import Token

NATIVE_ALIASES = frozenset({"uzig", "zig"})

# Lower rank wins.
RANK_DENOM = 0
RANK_SYMBOL = 1
RANK_NAME = 2
RANK_ID = 3


def is_native_ref(value: str | None) -> bool:
    return bool(value) and value.strip().lower() in NATIVE_ALIASES


def is_native_currency(token: Token) -> bool:
    return is_native_ref(token.denom) or is_native_ref(token.symbol)


def token_match_rank(token: Token, identifier: str) -> int | None:
    needle = identifier.strip().lower()
    if not needle:
        return None
    if token.denom and token.denom.lower() == needle:
        return RANK_DENOM
    if token.symbol and token.symbol.lower() == needle:
        return RANK_SYMBOL
    if token.name and needle in token.name.lower():
        return RANK_NAME
    if str(token.token_id) == identifier.strip():
        return RANK_ID
    return None


def pick_token(candidates: Iterable[Token], identifier: str) -> Token | None:
    """Best match by precedence denom, symbol, name, id; ties go to the highest id."""
    best: tuple[int, int] | None = None
    picked: Token | None = None
    for token in candidates:
        rank = token_match_rank(token, identifier)
        if rank is None:
            continue
        key = (rank, -token.token_id)
        if best is None or key < best:
            best = key
            picked = token
    return picked
