from __future__ import annotations

from zigdex.application.dto.common import NotFoundOutput
from zigdex.application.dto.holders import GetHoldersInput, GetHoldersOutput, HolderItem
from zigdex.application.ports.token_port import TokenPort
from zigdex.application.use_cases.summary_common import token_exponent
from zigdex.application.use_cases.token_resolver import TokenResolver
from zigdex.domain.entities.token import TokenHolder
from zigdex.domain.services.units import scale

MAX_HOLDERS_LIMIT = 500
TOP_HOLDERS = 10


def _pct(part: float, whole: float | None) -> float | None:
    if not whole:
        return None
    return part / whole * 100


class GetTokenHoldersUseCase:
    def __init__(self, *, resolver: TokenResolver, token_port: TokenPort):
        self._resolver = resolver
        self._token_port = token_port

    def execute(self, command: GetHoldersInput) -> GetHoldersOutput | NotFoundOutput:
        token = self._resolver.resolve(command.identifier)
        if token is None:
            return NotFoundOutput(error="token not found")

        profile = self._token_port.get_profile(token_id=token.token_id)
        exponent = token_exponent(token, profile)
        total_supply = scale(profile.total_supply_base, exponent) if profile else None
        max_supply = scale(profile.max_supply_base, exponent) if profile else None

        limit = max(1, min(command.limit, MAX_HOLDERS_LIMIT))
        offset = max(0, command.offset)
        holders = self._token_port.list_holders(token_id=token.token_id, limit=limit, offset=offset)
        if offset == 0 and len(holders) >= TOP_HOLDERS:
            top = holders[:TOP_HOLDERS]
        else:
            top = self._token_port.list_holders(token_id=token.token_id, limit=TOP_HOLDERS, offset=0)

        def balance(holder: TokenHolder) -> float:
            return scale(holder.balance_base, exponent) or 0.0

        return GetHoldersOutput(
            items=[
                HolderItem(
                    address=holder.address,
                    balance=balance(holder),
                    pct_of_max=_pct(balance(holder), max_supply),
                    pct_of_total=_pct(balance(holder), total_supply),
                )
                for holder in holders
            ],
            limit=limit,
            offset=offset,
            total_holders=self._token_port.count_positive_holders(token_id=token.token_id),
            top10_pct_of_max=_pct(sum(balance(holder) for holder in top), max_supply),
        )
