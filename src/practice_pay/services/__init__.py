"""Practice pay services."""

from practice_pay.services.forecasting import (
    IncomeProjection,
    ScenarioResult,
    ScheduledDay,
    TimeOffScenario,
    aggregate_monthly_projections,
    calculate_average_performance,
    project_future_income,
    simulate_scenario,
)
from practice_pay.services.metrics import (
    ComparisonOptions,
    ComparisonResult,
    PracticeMetrics,
    calculate_contributions,
    calculate_practice_metrics,
    compare_metrics,
)
from practice_pay.services.reconciliation import (
    BalanceReconciler,
    BalanceRecord,
    calculate_practice_balances,
    reconcile,
    sum_confirmed_payments,
)
from practice_pay.services.status import BalanceClassifier, BalanceStatus, classify_status

__all__ = [
    "BalanceStatus",
    "BalanceClassifier",
    "classify_status",
    "BalanceRecord",
    "BalanceReconciler",
    "reconcile",
    "calculate_practice_balances",
    "sum_confirmed_payments",
    "PracticeMetrics",
    "ComparisonOptions",
    "ComparisonResult",
    "calculate_practice_metrics",
    "compare_metrics",
    "calculate_contributions",
    "IncomeProjection",
    "ScheduledDay",
    "TimeOffScenario",
    "ScenarioResult",
    "calculate_average_performance",
    "project_future_income",
    "simulate_scenario",
    "aggregate_monthly_projections",
]
