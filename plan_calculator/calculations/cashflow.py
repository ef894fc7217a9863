"""
Cash Flow Generation

Turns an investment plan into a dated series of signed cash flows.
Payments are negative, regular returns and the lump sum are positive.
"""

from typing import List, Optional, Tuple
from datetime import date
from dateutil.relativedelta import relativedelta

from plan_calculator.calculations.plan import (
    InvestmentPlan,
    PaymentFrequency,
    plan_start_date,
)


def generate_payment_dates(
    start_date: date,
    count: int,
    frequency: PaymentFrequency,
    offset_months: int = 0,
) -> List[date]:
    """
    Generate installment dates for one leg of a plan.

    Args:
        start_date: Plan anchor date
        count: Number of installments
        frequency: Installment cadence
        offset_months: Months between the anchor and the first installment

    Returns:
        List of installment dates, one per installment
    """
    if frequency == PaymentFrequency.ANNUAL:
        offset_years = offset_months // 12
        return [start_date + relativedelta(years=offset_years + i) for i in range(count)]

    step = frequency.months_per_period
    return [
        start_date + relativedelta(months=offset_months + i * step)
        for i in range(count)
    ]


def generate_cash_flows(
    plan: InvestmentPlan, start_date: Optional[date] = None
) -> Tuple[List[float], List[date]]:
    """
    Generate the cash flows of an investment plan.

    Order is all payments, then all regular returns, then the lump sum.
    The series is not sorted by date.

    Args:
        plan: Investment plan
        start_date: Plan anchor (default: January 1 of the current year)

    Returns:
        Tuple of (amounts, dates), index-aligned
    """
    if start_date is None:
        start_date = plan_start_date()

    amounts: List[float] = []
    dates: List[date] = []

    # Payments
    periods = plan.payment_frequency.periods_per_year
    installment = plan.annual_payment / periods
    payment_count = plan.payment_years * periods
    amounts.extend(-installment for _ in range(payment_count))
    dates.extend(
        generate_payment_dates(start_date, payment_count, plan.payment_frequency)
    )

    # Regular returns
    if plan.has_regular_returns:
        periods = plan.return_frequency.periods_per_year
        installment = plan.return_amount / periods
        return_count = plan.return_years * periods
        amounts.extend(installment for _ in range(return_count))
        dates.extend(
            generate_payment_dates(
                start_date,
                return_count,
                plan.return_frequency,
                offset_months=(plan.return_start_year - 1) * 12,
            )
        )

    # Lump sum
    if plan.has_lump_sum:
        amounts.append(plan.final_return_amount)
        dates.append(start_date + relativedelta(years=plan.final_return_year - 1))

    return amounts, dates


def split_cash_flows(amounts: List[float]) -> Tuple[float, float]:
    """Return (total outflows, total inflows), outflows as a positive number."""
    outflows = -sum(cf for cf in amounts if cf < 0)
    inflows = sum(cf for cf in amounts if cf > 0)
    return outflows, inflows
