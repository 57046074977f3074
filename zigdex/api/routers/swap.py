from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from zigdex.api.deps import get_route_swap_use_case
from zigdex.api.params import not_found_response
from zigdex.api.schemas.swap import RouteResponse
from zigdex.application.dto.common import NotFoundOutput
from zigdex.application.dto.route import RouteInput
from zigdex.application.use_cases.route_swap import RouteSwapUseCase
from zigdex.domain.exceptions import InvalidQueryError

router = APIRouter()


@router.get("/swap", response_model=RouteResponse)
def route_swap(
    from_ref: str | None = Query(None, alias="from"),
    to_ref: str | None = Query(None, alias="to"),
    amount_in: float | None = Query(None, alias="amt", ge=0),
    min_tvl_zig: float = Query(0.0, alias="minTvl", ge=0),
    use_case: RouteSwapUseCase = Depends(get_route_swap_use_case),
):
    try:
        result = use_case.execute(
            RouteInput(from_ref=from_ref, to_ref=to_ref, amount_in=amount_in, min_tvl_zig=min_tvl_zig)
        )
    except InvalidQueryError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if isinstance(result, NotFoundOutput):
        return not_found_response(result)
    return RouteResponse.model_validate(result)
