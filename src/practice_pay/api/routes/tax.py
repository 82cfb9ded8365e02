"""Tax estimation endpoints."""

from fastapi import APIRouter, status

from practice_pay.api.dependencies import AppClock
from practice_pay.api.schemas import (
    ErrorResponse,
    QuarterlyPaymentResponse,
    TaxEstimateRequest,
    TaxEstimateResponse,
)
from practice_pay.calculators.tax_calculator import TaxCalculator

router = APIRouter(prefix="/tax", tags=["tax"])


@router.post(
    "/estimate",
    response_model=TaxEstimateResponse,
    status_code=status.HTTP_200_OK,
    responses={422: {"model": ErrorResponse}},
)
async def estimate_tax(payload: TaxEstimateRequest, clock: AppClock) -> TaxEstimateResponse:
    """Annual liability and the quarterly estimated payment schedule."""
    calculator = TaxCalculator()
    liability = calculator.total_liability(
        gross_income=payload.gross_income,
        business_expenses=payload.business_expenses,
        other_deductions=payload.other_deductions,
        filing_status=payload.filing_status,
        is_self_employed=payload.is_self_employed,
    )
    tax_year = payload.tax_year or clock.today().year
    schedule = calculator.quarterly_estimates(liability.total_tax, tax_year, payload.paid_ytd)

    return TaxEstimateResponse(
        gross_income=liability.gross_income,
        agi=liability.agi,
        taxable_income=liability.taxable_income,
        federal_income_tax=liability.federal_income_tax,
        self_employment_tax=liability.self_employment_tax,
        total_tax=liability.total_tax,
        effective_tax_rate=liability.effective_tax_rate,
        marginal_rate=calculator.marginal_rate(liability.taxable_income),
        should_pay_quarterly=schedule.should_pay_quarterly,
        quarterly_payment=schedule.quarterly_payment,
        quarters=[
            QuarterlyPaymentResponse(quarter=q.quarter, due_date=q.due_date, payment=q.payment)
            for q in schedule.quarters
        ],
    )
