"""Income tax estimation for practice income.

Brackets and limits are plain data so a different tax year can be passed in
without touching the calculation code.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from practice_pay.calculators.types import TaxBracket
from practice_pay.money import ZERO, percent_of, safe_divide

# 2024 federal brackets, single filer
FEDERAL_BRACKETS_SINGLE: tuple[TaxBracket, ...] = (
    TaxBracket(Decimal("0"), Decimal("11600"), Decimal("0.10")),
    TaxBracket(Decimal("11600"), Decimal("47150"), Decimal("0.12")),
    TaxBracket(Decimal("47150"), Decimal("100525"), Decimal("0.22")),
    TaxBracket(Decimal("100525"), Decimal("191950"), Decimal("0.24")),
    TaxBracket(Decimal("191950"), Decimal("243725"), Decimal("0.32")),
    TaxBracket(Decimal("243725"), Decimal("609350"), Decimal("0.35")),
    TaxBracket(Decimal("609350"), None, Decimal("0.37")),
)

STANDARD_DEDUCTIONS = {
    "single": Decimal("14600"),
    "married": Decimal("29200"),
}


@dataclass(frozen=True)
class SelfEmploymentRules:
    """Self-employment (SECA) tax parameters."""

    taxable_fraction: Decimal = Decimal("0.9235")
    social_security_rate: Decimal = Decimal("0.124")
    social_security_wage_base: Decimal = Decimal("168600")
    medicare_rate: Decimal = Decimal("0.029")
    additional_medicare_rate: Decimal = Decimal("0.009")
    additional_medicare_threshold: Decimal = Decimal("200000")


@dataclass(frozen=True)
class SelfEmploymentTax:
    total: Decimal = ZERO
    social_security: Decimal = ZERO
    medicare: Decimal = ZERO
    deduction: Decimal = ZERO  # half of SE tax is deductible from gross income


@dataclass(frozen=True)
class TaxLiability:
    gross_income: Decimal
    business_expenses: Decimal
    net_self_employment_income: Decimal
    self_employment_tax: Decimal
    self_employment_tax_deduction: Decimal
    other_deductions: Decimal
    agi: Decimal
    standard_deduction: Decimal
    taxable_income: Decimal
    federal_income_tax: Decimal
    total_tax: Decimal
    effective_tax_rate: Decimal


@dataclass(frozen=True)
class QuarterlyPayment:
    quarter: str
    due_date: date
    payment: Decimal


@dataclass(frozen=True)
class QuarterlySchedule:
    total_remaining: Decimal
    quarterly_payment: Decimal
    should_pay_quarterly: bool
    quarters: list[QuarterlyPayment] = field(default_factory=list)


@dataclass(frozen=True)
class YearEndProjection:
    projected_annual_income: Decimal
    projected_annual_expenses: Decimal
    liability: TaxLiability


def _cents(amount: Decimal) -> Decimal:
    return amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


class TaxCalculator:
    """Estimates federal income and self-employment tax.

    Contractors owe both halves of Social Security and Medicare; employees
    have tax withheld at source, which is why a W2 balance gap within the
    withholding threshold is reported as a discrepancy rather than a debt.
    """

    QUARTERLY_THRESHOLD = Decimal("1000")

    def __init__(
        self,
        brackets: tuple[TaxBracket, ...] = FEDERAL_BRACKETS_SINGLE,
        standard_deductions: dict[str, Decimal] | None = None,
        self_employment: SelfEmploymentRules | None = None,
    ):
        self.brackets = tuple(sorted(brackets, key=lambda b: b.min_amount))
        self.standard_deductions = standard_deductions or dict(STANDARD_DEDUCTIONS)
        self.self_employment = self_employment or SelfEmploymentRules()

    def federal_income_tax(self, taxable_income: Decimal) -> Decimal:
        """Calculate tax using progressive brackets."""
        if taxable_income <= 0:
            return ZERO

        total_tax = ZERO
        for bracket in self.brackets:
            if taxable_income <= bracket.min_amount:
                break
            upper = bracket.max_amount if bracket.max_amount is not None else taxable_income
            taxable_in_bracket = min(taxable_income, upper) - bracket.min_amount
            if taxable_in_bracket > 0:
                total_tax += taxable_in_bracket * bracket.rate

        return _cents(total_tax)

    def self_employment_tax(self, net_income: Decimal) -> SelfEmploymentTax:
        """SE tax on net self-employment income."""
        if net_income <= 0:
            return SelfEmploymentTax()

        rules = self.self_employment
        adjusted = net_income * rules.taxable_fraction

        social_security = min(adjusted, rules.social_security_wage_base) * rules.social_security_rate
        medicare = adjusted * rules.medicare_rate
        if adjusted > rules.additional_medicare_threshold:
            medicare += (adjusted - rules.additional_medicare_threshold) * rules.additional_medicare_rate

        se_total = _cents(social_security + medicare)
        return SelfEmploymentTax(
            total=se_total,
            social_security=_cents(social_security),
            medicare=_cents(medicare),
            deduction=_cents(se_total / 2),
        )

    def total_liability(
        self,
        gross_income: Decimal,
        business_expenses: Decimal = ZERO,
        other_deductions: Decimal = ZERO,
        filing_status: str = "single",
        is_self_employed: bool = True,
    ) -> TaxLiability:
        """Estimated annual federal liability (income tax plus SE tax)."""
        net_se_income = gross_income - business_expenses
        se_tax = (
            self.self_employment_tax(net_se_income) if is_self_employed else SelfEmploymentTax()
        )

        agi = gross_income - business_expenses - se_tax.deduction - other_deductions
        standard_deduction = self.standard_deductions.get(
            filing_status, self.standard_deductions["single"]
        )
        taxable_income = max(ZERO, agi - standard_deduction)

        federal = self.federal_income_tax(taxable_income)
        total_tax = federal + se_tax.total

        return TaxLiability(
            gross_income=gross_income,
            business_expenses=business_expenses,
            net_self_employment_income=net_se_income,
            self_employment_tax=se_tax.total,
            self_employment_tax_deduction=se_tax.deduction,
            other_deductions=other_deductions,
            agi=agi,
            standard_deduction=standard_deduction,
            taxable_income=taxable_income,
            federal_income_tax=federal,
            total_tax=total_tax,
            effective_tax_rate=percent_of(total_tax, gross_income) if gross_income > 0 else ZERO,
        )

    def quarterly_estimates(
        self, annual_tax: Decimal, tax_year: int, paid_ytd: Decimal = ZERO
    ) -> QuarterlySchedule:
        """Split the remaining annual tax into four estimated payments."""
        remaining = max(ZERO, annual_tax - paid_ytd)
        payment = remaining / 4
        due_dates = (
            ("Q1", date(tax_year, 4, 15)),
            ("Q2", date(tax_year, 6, 15)),
            ("Q3", date(tax_year, 9, 15)),
            ("Q4", date(tax_year + 1, 1, 15)),
        )
        return QuarterlySchedule(
            total_remaining=remaining,
            quarterly_payment=payment,
            should_pay_quarterly=annual_tax >= self.QUARTERLY_THRESHOLD,
            quarters=[QuarterlyPayment(q, due, payment) for q, due in due_dates],
        )

    def marginal_rate(self, taxable_income: Decimal) -> Decimal:
        for bracket in reversed(self.brackets):
            if taxable_income > bracket.min_amount:
                return bracket.rate
        return self.brackets[0].rate

    def project_year_end(
        self,
        income_ytd: Decimal,
        expenses_ytd: Decimal,
        months_elapsed: int,
        filing_status: str = "single",
    ) -> YearEndProjection:
        """Extrapolate year-to-date income and expenses to a full year."""
        months = Decimal(min(max(months_elapsed, 1), 12))
        remaining = Decimal(12) - months
        income = income_ytd + safe_divide(income_ytd, months) * remaining
        expenses = expenses_ytd + safe_divide(expenses_ytd, months) * remaining

        return YearEndProjection(
            projected_annual_income=income,
            projected_annual_expenses=expenses,
            liability=self.total_liability(
                gross_income=income,
                business_expenses=expenses,
                filing_status=filing_status,
                is_self_employed=True,
            ),
        )


_default_calculator = TaxCalculator()


def calculate_total_tax_liability(
    gross_income: Decimal,
    business_expenses: Decimal = ZERO,
    other_deductions: Decimal = ZERO,
    filing_status: str = "single",
    is_self_employed: bool = True,
) -> TaxLiability:
    return _default_calculator.total_liability(
        gross_income, business_expenses, other_deductions, filing_status, is_self_employed
    )


def calculate_quarterly_estimates(
    annual_tax: Decimal, paid_ytd: Decimal, tax_year: int
) -> QuarterlySchedule:
    return _default_calculator.quarterly_estimates(annual_tax, tax_year, paid_ytd)


def estimate_marginal_rate(taxable_income: Decimal) -> Decimal:
    return _default_calculator.marginal_rate(taxable_income)


def project_year_end_taxes(
    income_ytd: Decimal,
    expenses_ytd: Decimal,
    months_elapsed: int,
    filing_status: str = "single",
) -> YearEndProjection:
    return _default_calculator.project_year_end(
        income_ytd, expenses_ytd, months_elapsed, filing_status
    )
