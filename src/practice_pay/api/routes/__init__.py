"""API routes."""

from practice_pay.api.routes.balances import router as balances_router
from practice_pay.api.routes.health import router as health_router
from practice_pay.api.routes.pay import router as pay_router
from practice_pay.api.routes.reports import router as reports_router
from practice_pay.api.routes.tax import router as tax_router

__all__ = ["health_router", "pay_router", "balances_router", "reports_router", "tax_router"]
