"""Pay period, due date, pay and tax calculators."""

from practice_pay.calculators.due_dates import estimate_due_date, is_overdue
from practice_pay.calculators.pay_calculator import (
    calculate_month_pay,
    compute_period_pay,
    count_attendance_days,
    count_days_worked,
)
from practice_pay.calculators.periods import (
    calendar_week_periods,
    current_pay_period,
    generate_future_periods,
    generate_historical_periods,
    generate_periods,
    month_periods,
)
from practice_pay.calculators.tax_calculator import TaxCalculator
from practice_pay.calculators.types import (
    MonthPayResult,
    PayPeriod,
    PayResult,
    PeriodPayDetail,
    ScheduledPeriod,
)

__all__ = [
    "PayPeriod",
    "ScheduledPeriod",
    "PayResult",
    "PeriodPayDetail",
    "MonthPayResult",
    "TaxCalculator",
    "generate_periods",
    "month_periods",
    "calendar_week_periods",
    "generate_historical_periods",
    "current_pay_period",
    "generate_future_periods",
    "estimate_due_date",
    "is_overdue",
    "compute_period_pay",
    "calculate_month_pay",
    "count_attendance_days",
    "count_days_worked",
]
