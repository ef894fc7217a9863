"""
Investment Plan Returns

Assembles XIRR, IRR, CAGR, totals and the tax-adjusted rate for a plan.
"""

import logging
import math
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Sequence, Tuple, Union

from plan_calculator.calculations.cashflow import generate_cash_flows
from plan_calculator.calculations.irr import (
    CalculationError,
    ErrorKind,
    NonConvergenceError,
    calculate_cagr,
    calculate_irr,
    calculate_xirr,
)
from plan_calculator.calculations.plan import InvestmentPlan
from plan_calculator.calculations.rating import ReturnRating, rate_xirr

logger = logging.getLogger(__name__)

PAYMENT = "Payment"
RETURN = "Return"


@dataclass(frozen=True)
class CashFlow:
    """A single dated cash flow, tagged for display."""

    date: date
    amount: float
    description: str


@dataclass(frozen=True)
class CalculationResult:
    """All metrics for one plan. Rates are decimals and may be NaN."""

    xirr: float
    irr: float
    cagr: float
    total_invested: float
    total_returns: float
    net_profit: float
    tax_adjusted_xirr: float
    cashflows: Tuple[CashFlow, ...] = ()

    @property
    def absolute_return(self) -> float:
        """Net profit as a fraction of the amount invested; NaN with nothing invested."""
        if not self.total_invested:
            return math.nan
        return self.net_profit / self.total_invested

    @property
    def rating(self) -> ReturnRating:
        return rate_xirr(self.xirr)


@dataclass(frozen=True)
class YearlyCashFlow:
    """Cash flows of one calendar year. Payments are a positive total."""

    year: int
    payments: float
    returns: float
    cumulative_net_flow: float


def yearly_breakdown(cashflows: Sequence[CashFlow]) -> List[YearlyCashFlow]:
    """
    Group cash flows by calendar year.

    Every year from the first to the last cash flow is listed, including
    years with no cash flows, with the running total of returns minus
    payments.
    """
    if not cashflows:
        return []

    years = [cf.date.year for cf in cashflows]
    payments = defaultdict(float)
    inflows = defaultdict(float)
    for cf in cashflows:
        if cf.amount < 0:
            payments[cf.date.year] += -cf.amount
        else:
            inflows[cf.date.year] += cf.amount

    breakdown = []
    cumulative = 0.0
    for year in range(min(years), max(years) + 1):
        cumulative += inflows[year] - payments[year]
        breakdown.append(
            YearlyCashFlow(
                year=year,
                payments=payments[year],
                returns=inflows[year],
                cumulative_net_flow=cumulative,
            )
        )
    return breakdown


@dataclass(frozen=True)
class Ok:
    value: CalculationResult

    is_ok = True


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    message: str

    is_ok = False


CalculationOutcome = Union[Ok, Err]


def calculate_tax_adjusted_xirr(xirr: float, tax_bracket: float) -> float:
    """
    Equivalent pre-tax rate a taxable instrument would need to match ``xirr``.

    Assumes the plan's own returns are tax-free: xirr / (1 - tax_bracket).
    """
    if not tax_bracket:
        return xirr
    return xirr / (1 - tax_bracket)


def cagr_years(plan: InvestmentPlan) -> int:
    """Plan length used for CAGR: lump-sum year, else last return year, else payment years."""
    if plan.final_return_year > 0:
        return plan.final_return_year
    if plan.has_regular_returns:
        return plan.return_start_year + plan.return_years - 1
    return plan.payment_years


def describe_cash_flows(amounts: List[float], dates: List[date]) -> Tuple[CashFlow, ...]:
    return tuple(
        CashFlow(date=d, amount=amount, description=PAYMENT if amount < 0 else RETURN)
        for amount, d in zip(amounts, dates)
    )


def calculate_returns(
    plan: InvestmentPlan, start_date: Optional[date] = None
) -> CalculationResult:
    """
    Calculate all return metrics for an investment plan.

    Args:
        plan: Investment plan
        start_date: Plan anchor (default: January 1 of the current year)

    Returns:
        CalculationResult

    Raises:
        CalculationError: If XIRR or IRR cannot be calculated
    """
    amounts, dates = generate_cash_flows(plan, start_date)

    total_invested = plan.annual_payment * plan.payment_years
    total_regular_returns = (
        plan.return_amount * plan.return_years if plan.has_regular_returns else 0.0
    )
    total_returns = total_regular_returns + plan.final_return_amount
    net_profit = total_returns - total_invested

    xirr = calculate_xirr(amounts, dates)
    irr = calculate_irr(amounts)
    if math.isnan(irr):
        raise NonConvergenceError("IRR did not converge.")

    cagr = calculate_cagr(total_invested, total_returns, cagr_years(plan))

    return CalculationResult(
        xirr=xirr,
        irr=irr,
        cagr=cagr,
        total_invested=total_invested,
        total_returns=total_returns,
        net_profit=net_profit,
        tax_adjusted_xirr=calculate_tax_adjusted_xirr(xirr, plan.tax_bracket),
        cashflows=describe_cash_flows(amounts, dates),
    )


def compute(plan: InvestmentPlan, start_date: Optional[date] = None) -> CalculationOutcome:
    """
    Calculate returns for a plan as a tagged outcome.

    Solver failures come back as ``Err`` carrying the solver's message
    unchanged. Programmer errors (e.g. misaligned arrays) still raise.
    """
    try:
        result = calculate_returns(plan, start_date)
    except CalculationError as e:
        logger.error(f"Calculation error: {e}")
        return Err(kind=e.kind, message=str(e))

    logger.debug(
        f"Calculated plan returns: xirr={result.xirr:.6f}, "
        f"{len(result.cashflows)} cash flows"
    )
    return Ok(value=result)


@dataclass
class InvestmentCalculator:
    """
    Holds the latest calculation for a calling layer.

    Each ``calculate`` replaces the held state wholesale; ``reset`` clears it.
    """

    result: Optional[CalculationResult] = None
    cash_flow_data: Optional[Tuple[List[float], List[date]]] = None
    error: Optional[str] = None
    start_date: Optional[date] = field(default=None, repr=False)

    def calculate(self, plan: InvestmentPlan) -> CalculationOutcome:
        outcome = compute(plan, self.start_date)
        if outcome.is_ok:
            result = outcome.value
            self.result = result
            self.cash_flow_data = (
                [cf.amount for cf in result.cashflows],
                [cf.date for cf in result.cashflows],
            )
            self.error = None
        else:
            self.result = None
            self.cash_flow_data = None
            self.error = outcome.message
        return outcome

    def reset(self) -> None:
        self.result = None
        self.cash_flow_data = None
        self.error = None
