"""Pay calculation endpoints."""

from fastapi import APIRouter, status

from practice_pay.api.schemas import ErrorResponse, PeriodPayRequest, PeriodPayResponse
from practice_pay.calculators import compute_period_pay
from practice_pay.models import parse_entries, parse_practice

router = APIRouter(prefix="/pay", tags=["pay"])


@router.post(
    "/period",
    response_model=PeriodPayResponse,
    status_code=status.HTTP_200_OK,
    responses={400: {"model": ErrorResponse}},
)
async def period_pay(payload: PeriodPayRequest) -> PeriodPayResponse:
    """Pay owed for the given entries of one pay period.

    A missing practice yields an all-zero result rather than an error.
    """
    practice = parse_practice(payload.practice) if payload.practice else None
    result = compute_period_pay(practice, parse_entries(payload.entries))
    return PeriodPayResponse(result=result.to_dict(), guarantee_applied=result.guarantee_applied)
