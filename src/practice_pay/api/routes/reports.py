"""Comparison and forecasting endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, status

from practice_pay.api.dependencies import AppClock, AppSettings, resolve_today
from practice_pay.api.schemas import (
    CompareRequest,
    ComparisonResponse,
    ErrorResponse,
    ForecastRequest,
    ForecastResponse,
)
from practice_pay.services.forecasting import (
    ScheduledDay,
    TimeOffScenario,
    project_future_income,
    simulate_scenario,
)
from practice_pay.services.metrics import ComparisonOptions, compare_metrics

router = APIRouter(tags=["reports"])


@router.post(
    "/metrics/compare",
    response_model=ComparisonResponse,
    status_code=status.HTTP_200_OK,
    responses={400: {"model": ErrorResponse}},
)
async def compare_practices(payload: CompareRequest, settings: AppSettings) -> ComparisonResponse:
    """Rank practices by pay, daily rate, production and efficiency."""
    snapshot = payload.to_snapshot()
    result = compare_metrics(
        snapshot.practices,
        snapshot.entries,
        snapshot.payments,
        ComparisonOptions(
            start_date=payload.start_date,
            end_date=payload.end_date,
            practice_ids=payload.practice_ids,
            active_only=payload.active_only,
        ),
        outstanding_threshold=settings.outstanding_insight_threshold,
    )
    return ComparisonResponse(**result.to_dict())


@router.post(
    "/forecast/{practice_id}",
    response_model=ForecastResponse,
    status_code=status.HTTP_200_OK,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def forecast_practice(
    practice_id: Annotated[str, Path()],
    payload: ForecastRequest,
    settings: AppSettings,
    clock: AppClock,
) -> ForecastResponse:
    """Projected income for upcoming periods, optionally with a time-off scenario."""
    today = resolve_today(payload.today, clock)
    snapshot = payload.to_snapshot()
    practice = snapshot.find_practice(practice_id)
    history = [e for e in snapshot.entries if str(e.practice_id) == str(practice.id)]

    projections = project_future_income(
        practice,
        history,
        today,
        schedule=[ScheduledDay(s.day, s.is_scheduled) for s in payload.schedule],
        months_ahead=payload.months_ahead,
        lookback_days=settings.forecast_lookback_days,
    )

    scenario = None
    if payload.scenario is not None:
        scenario = simulate_scenario(
            practice,
            history,
            TimeOffScenario(payload.scenario.start_date, payload.scenario.end_date),
            today,
            months_ahead=payload.months_ahead,
            lookback_days=settings.forecast_lookback_days,
        ).to_dict()

    return ForecastResponse(
        today=today,
        projections=[p.to_dict() for p in projections],
        scenario=scenario,
    )
