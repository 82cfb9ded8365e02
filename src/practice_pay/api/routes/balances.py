"""Balance reconciliation endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, status

from practice_pay.api.dependencies import AppClock, AppSettings, resolve_today
from practice_pay.api.schemas import (
    BalanceListResponse,
    BalanceResponse,
    ErrorResponse,
    SnapshotRequest,
)
from practice_pay.services.reconciliation import BalanceReconciler

router = APIRouter(prefix="/balances", tags=["balances"])


@router.post(
    "",
    response_model=BalanceListResponse,
    status_code=status.HTTP_200_OK,
    responses={400: {"model": ErrorResponse}},
)
async def list_balances(
    payload: SnapshotRequest,
    settings: AppSettings,
    clock: AppClock,
) -> BalanceListResponse:
    """Reportable balances for every active practice, most urgent first."""
    today = resolve_today(payload.today, clock)
    snapshot = payload.to_snapshot()
    records = BalanceReconciler(settings).calculate_practice_balances(
        snapshot.practices,
        snapshot.entries,
        snapshot.cheques,
        snapshot.direct_deposits,
        snapshot.e_transfers,
        today,
    )
    return BalanceListResponse(
        today=today,
        items=[record.to_dict() for record in records],
        total=len(records),
    )


@router.post(
    "/{practice_id}",
    response_model=BalanceResponse,
    status_code=status.HTTP_200_OK,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def practice_balance(
    practice_id: Annotated[str, Path()],
    payload: SnapshotRequest,
    settings: AppSettings,
    clock: AppClock,
) -> BalanceResponse:
    """Reconcile a single practice, whether or not it would be reported."""
    today = resolve_today(payload.today, clock)
    snapshot = payload.to_snapshot()
    practice = snapshot.find_practice(practice_id)

    def owned(records):
        return [r for r in records if str(r.practice_id) == str(practice.id)]

    record = BalanceReconciler(settings).reconcile(
        practice,
        owned(snapshot.entries),
        owned(snapshot.cheques),
        owned(snapshot.direct_deposits),
        owned(snapshot.e_transfers),
        today,
    )
    return BalanceResponse(today=today, balance=record.to_dict())
