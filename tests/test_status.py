"""Unit tests for balance status classification."""

from decimal import Decimal

import pytest

from practice_pay.models import TaxStatus
from practice_pay.services.status import (
    STATUS_PRIORITY,
    BalanceClassifier,
    BalanceStatus,
    classify_status,
)


class TestClassifyStatus:
    """Test the classifier independent of any date logic."""

    def test_within_tolerance_is_paid_up(self):
        status = classify_status(Decimal("0.01"), True, True, TaxStatus.CONTRACTOR, Decimal("0"))
        assert status == BalanceStatus.PAID_UP

    def test_negative_balance_is_paid_up(self):
        status = classify_status(Decimal("-50"), False, True, TaxStatus.CONTRACTOR, None)
        assert status == BalanceStatus.PAID_UP

    def test_employee_gap_within_threshold_is_w2_discrepancy(self):
        status = classify_status(Decimal("2000"), True, True, TaxStatus.EMPLOYEE, Decimal("0.20"))
        assert status == BalanceStatus.W2_DISCREPANCY

    def test_employee_gap_at_threshold_is_w2_discrepancy(self):
        status = classify_status(Decimal("3000"), False, True, TaxStatus.EMPLOYEE, Decimal("0.30"))
        assert status == BalanceStatus.W2_DISCREPANCY

    def test_employee_gap_above_threshold_is_overdue(self):
        status = classify_status(Decimal("5000"), True, True, TaxStatus.EMPLOYEE, Decimal("0.50"))
        assert status == BalanceStatus.OVERDUE

    def test_employee_without_historical_pay_is_not_w2(self):
        status = classify_status(Decimal("100"), False, False, TaxStatus.EMPLOYEE, None)
        assert status == BalanceStatus.OWED

    def test_contractor_never_w2(self):
        status = classify_status(Decimal("100"), False, True, TaxStatus.CONTRACTOR, Decimal("0.01"))
        assert status == BalanceStatus.DUE_SOON

    @pytest.mark.parametrize(
        "is_overdue,resolved,expected",
        [
            (True, True, BalanceStatus.OVERDUE),
            (False, True, BalanceStatus.DUE_SOON),
            (False, False, BalanceStatus.OWED),
        ],
    )
    def test_due_date_cascade(self, is_overdue, resolved, expected):
        assert classify_status(Decimal("500"), is_overdue, resolved, "contractor", None) == expected


class TestBalanceClassifier:
    def test_custom_threshold(self):
        classifier = BalanceClassifier(w2_discrepancy_threshold=Decimal("0.10"))
        status = classifier.classify(Decimal("2000"), False, True, TaxStatus.EMPLOYEE, Decimal("0.20"))
        assert status == BalanceStatus.DUE_SOON

    def test_due_date_shown_only_for_overdue_and_due_soon(self):
        shown = {s for s in BalanceStatus if BalanceClassifier.shows_due_date(s)}
        assert shown == {BalanceStatus.OVERDUE, BalanceStatus.DUE_SOON}

    def test_priority_order(self):
        ordered = sorted(BalanceStatus, key=STATUS_PRIORITY.__getitem__)
        assert [s.value for s in ordered] == [
            "Overdue",
            "W2 Discrepancy",
            "Due Soon",
            "Owed",
            "Paid Up",
        ]
