from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query

from zigdex.api.deps import get_list_trades_use_case
from zigdex.api.params import as_utc, not_found_response
from zigdex.api.schemas.trades import TradeResponse, TradesMetaResponse, TradesResponse
from zigdex.application.dto.common import NotFoundOutput
from zigdex.application.dto.trades import ListTradesInput
from zigdex.application.use_cases.list_trades import ListTradesUseCase
from zigdex.domain.exceptions import InvalidQueryError

router = APIRouter(prefix="/trades")


class TradeQuery:
    """Filter parameters shared by every trade listing."""

    def __init__(
        self,
        direction: str | None = None,
        unit: str = "usd",
        tf: str | None = None,
        start: datetime | None = Query(None, alias="from"),
        end: datetime | None = Query(None, alias="to"),
        days: int | None = Query(None, ge=1),
        include_liquidity: bool = Query(False, alias="includeLiquidity"),
        klass: str | None = Query(None, alias="class"),
        min_value: float | None = Query(None, alias="minValue"),
        max_value: float | None = Query(None, alias="maxValue"),
        limit: int | None = None,
        page: int | None = None,
        dominant: str | None = None,
    ):
        self.direction = direction
        self.unit = unit
        self.tf = tf
        self.start = as_utc(start)
        self.end = as_utc(end)
        self.days = days
        self.include_liquidity = include_liquidity
        self.klass = klass
        self.min_value = min_value
        self.max_value = max_value
        self.limit = limit
        self.page = page
        self.dominant = dominant

    def to_input(self, scope: str, **scope_fields) -> ListTradesInput:
        return ListTradesInput(
            scope=scope,
            direction=self.direction,
            unit=self.unit,
            tf=self.tf,
            start=self.start,
            end=self.end,
            days=self.days,
            include_liquidity=self.include_liquidity,
            klass=self.klass,
            min_value=self.min_value,
            max_value=self.max_value,
            limit=self.limit,
            page=self.page,
            dominant=self.dominant,
            **scope_fields,
        )


def _run(use_case: ListTradesUseCase, command: ListTradesInput):
    try:
        result = use_case.execute(command)
    except InvalidQueryError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if isinstance(result, NotFoundOutput):
        return not_found_response(result)
    return TradesResponse(
        data=[TradeResponse.model_validate(row) for row in result.rows],
        meta=TradesMetaResponse.model_validate(result),
    )


@router.get("", response_model=TradesResponse)
def all_trades(
    query: TradeQuery = Depends(),
    use_case: ListTradesUseCase = Depends(get_list_trades_use_case),
):
    return _run(use_case, query.to_input("all"))


@router.get("/recent", response_model=TradesResponse)
def recent_trades(
    token: str | None = None,
    pool_id: str | None = Query(None, alias="poolId"),
    pair: str | None = None,
    query: TradeQuery = Depends(),
    use_case: ListTradesUseCase = Depends(get_list_trades_use_case),
):
    return _run(use_case, query.to_input("recent", token_ref=token, pool_ref=pool_id, pair_contract=pair))


@router.get("/large", response_model=TradesResponse)
def large_trades(
    bucket: str = "24h",
    unit: str = "zig",
    direction: str | None = None,
    klass: str | None = Query(None, alias="class"),
    min_value: float | None = Query(None, alias="minValue"),
    max_value: float | None = Query(None, alias="maxValue"),
    limit: int | None = None,
    page: int | None = None,
    use_case: ListTradesUseCase = Depends(get_list_trades_use_case),
):
    command = ListTradesInput(
        scope="large",
        scope_ref=bucket,
        unit=unit,
        direction=direction,
        klass=klass,
        min_value=min_value,
        max_value=max_value,
        limit=limit,
        page=page,
    )
    return _run(use_case, command)


@router.get("/token/{identifier}", response_model=TradesResponse)
def token_trades(
    identifier: str,
    query: TradeQuery = Depends(),
    use_case: ListTradesUseCase = Depends(get_list_trades_use_case),
):
    return _run(use_case, query.to_input("token", scope_ref=identifier))


@router.get("/pool/{ref}", response_model=TradesResponse)
def pool_trades(
    ref: str,
    query: TradeQuery = Depends(),
    use_case: ListTradesUseCase = Depends(get_list_trades_use_case),
):
    return _run(use_case, query.to_input("pool", scope_ref=ref))


@router.get("/wallet/{address}", response_model=TradesResponse)
def wallet_trades(
    address: str,
    token: str | None = None,
    pool_id: str | None = Query(None, alias="poolId"),
    pair: str | None = None,
    query: TradeQuery = Depends(),
    use_case: ListTradesUseCase = Depends(get_list_trades_use_case),
):
    return _run(
        use_case,
        query.to_input("wallet", scope_ref=address, token_ref=token, pool_ref=pool_id, pair_contract=pair),
    )
