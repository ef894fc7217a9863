"""
Financial calculation API endpoints.

These endpoints accept plan inputs and return calculated results.
Used by the browser front end for real-time updates.
"""

import math
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from plan_calculator.calculations import cashflow, irr
from plan_calculator.calculations.formatting import format_percentage
from plan_calculator.calculations.plan import InvestmentPlan, PaymentFrequency
from plan_calculator.calculations.rating import ReturnRating, comparison_text
from plan_calculator.calculations.returns import compute, yearly_breakdown
from plan_calculator.config import get_settings

router = APIRouter()


def _finite_or_none(value: float) -> Optional[float]:
    """JSON has no NaN; missing metrics are sent as null."""
    return value if math.isfinite(value) else None


class PlanInput(BaseModel):
    """Input for a plan calculation."""

    # Payments
    annual_payment: float = Field(ge=0)
    payment_years: int = Field(ge=0)
    payment_frequency: PaymentFrequency = PaymentFrequency.ANNUAL

    # Regular returns
    return_amount: float = Field(default=0.0, ge=0)
    return_start_year: int = Field(default=1, ge=1)
    return_years: int = Field(default=0, ge=0)
    return_frequency: PaymentFrequency = PaymentFrequency.ANNUAL

    # Lump sum
    final_return_year: int = Field(default=0, ge=0)
    final_return_amount: float = Field(default=0.0, ge=0)

    # Tax
    tax_bracket: float = Field(default=0.0, ge=0, lt=1)

    # Defaults to January 1 of the current year
    start_date: Optional[date] = None

    def to_plan(self) -> InvestmentPlan:
        return InvestmentPlan(
            annual_payment=self.annual_payment,
            payment_years=self.payment_years,
            return_amount=self.return_amount,
            return_start_year=self.return_start_year,
            return_years=self.return_years,
            final_return_year=self.final_return_year,
            final_return_amount=self.final_return_amount,
            payment_frequency=self.payment_frequency,
            return_frequency=self.return_frequency,
            tax_bracket=self.tax_bracket,
        )


class CashFlowItem(BaseModel):
    date: date
    amount: float
    description: str


class YearlyCashFlowItem(BaseModel):
    year: int
    payments: float
    returns: float
    cumulative_net_flow: float


class ReturnMetrics(BaseModel):
    """Calculated return metrics. Rates are decimals."""

    xirr: float
    irr: float
    cagr: Optional[float] = None
    tax_adjusted_xirr: float
    absolute_return: Optional[float] = None

    total_invested: float
    total_returns: float
    net_profit: float


class FormattedMetrics(BaseModel):
    """Metrics rendered as percentage strings."""

    xirr: str
    irr: str
    cagr: str
    tax_adjusted_xirr: str
    absolute_return: str


class ReturnsResponse(BaseModel):
    """Response with metrics, the XIRR rating and the dated cash flows."""

    metrics: ReturnMetrics
    formatted: FormattedMetrics
    rating: ReturnRating
    comparison: str
    cashflows: List[CashFlowItem]
    yearly_breakdown: List[YearlyCashFlowItem]


@router.post("/returns", response_model=ReturnsResponse)
async def calculate_returns_endpoint(inputs: PlanInput):
    """Calculate XIRR, IRR, CAGR and totals for an investment plan."""
    outcome = compute(inputs.to_plan(), inputs.start_date)
    if not outcome.is_ok:
        raise HTTPException(status_code=400, detail=outcome.message)

    result = outcome.value
    places = get_settings().percentage_decimal_places

    return ReturnsResponse(
        metrics=ReturnMetrics(
            xirr=result.xirr,
            irr=result.irr,
            cagr=_finite_or_none(result.cagr),
            tax_adjusted_xirr=result.tax_adjusted_xirr,
            absolute_return=_finite_or_none(result.absolute_return),
            total_invested=result.total_invested,
            total_returns=result.total_returns,
            net_profit=result.net_profit,
        ),
        formatted=FormattedMetrics(
            xirr=format_percentage(result.xirr, places),
            irr=format_percentage(result.irr, places),
            cagr=format_percentage(result.cagr, places),
            tax_adjusted_xirr=format_percentage(result.tax_adjusted_xirr, places),
            absolute_return=format_percentage(result.absolute_return, places),
        ),
        rating=result.rating,
        comparison=comparison_text(result.xirr),
        cashflows=[
            CashFlowItem(date=cf.date, amount=cf.amount, description=cf.description)
            for cf in result.cashflows
        ],
        yearly_breakdown=[
            YearlyCashFlowItem(
                year=row.year,
                payments=row.payments,
                returns=row.returns,
                cumulative_net_flow=row.cumulative_net_flow,
            )
            for row in yearly_breakdown(result.cashflows)
        ],
    )


class CashFlowResponse(BaseModel):
    """Generated cash flow series for a plan."""

    amounts: List[float]
    dates: List[date]
    total_outflows: float
    total_inflows: float


@router.post("/cashflows", response_model=CashFlowResponse)
async def generate_cashflows_endpoint(inputs: PlanInput):
    """Generate the dated cash flows of a plan without solving for rates."""
    amounts, dates = cashflow.generate_cash_flows(inputs.to_plan(), inputs.start_date)
    outflows, inflows = cashflow.split_cash_flows(amounts)

    return CashFlowResponse(
        amounts=amounts,
        dates=dates,
        total_outflows=outflows,
        total_inflows=inflows,
    )


class IRRInput(BaseModel):
    """Input for IRR calculation."""

    cash_flows: List[float]
    dates: Optional[List[date]] = None


class IRRResponse(BaseModel):
    """Response with IRR calculation."""

    irr: float
    formatted: str
    npv_at_10_percent: Optional[float] = None


@router.post("/irr", response_model=IRRResponse)
async def calculate_irr_endpoint(inputs: IRRInput):
    """Calculate XIRR when dates are given, otherwise equal-period IRR."""
    try:
        if inputs.dates:
            irr_val = irr.calculate_xirr(inputs.cash_flows, inputs.dates)
            npv = irr.calculate_xnpv(inputs.cash_flows, inputs.dates, 0.10)
        else:
            irr_val = irr.calculate_irr(inputs.cash_flows)
            if math.isnan(irr_val):
                raise irr.NonConvergenceError("IRR did not converge.")
            npv = irr.calculate_npv(inputs.cash_flows, 0.10)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return IRRResponse(
        irr=irr_val,
        formatted=format_percentage(irr_val, get_settings().percentage_decimal_places),
        npv_at_10_percent=_finite_or_none(npv),
    )


class CAGRInput(BaseModel):
    """Input for CAGR calculation."""

    initial_value: float
    final_value: float
    years: float


class CAGRResponse(BaseModel):
    cagr: Optional[float] = None
    formatted: str


@router.post("/cagr", response_model=CAGRResponse)
async def calculate_cagr_endpoint(inputs: CAGRInput):
    """Calculate CAGR; invalid inputs give a null rate rather than an error."""
    cagr = irr.calculate_cagr(inputs.initial_value, inputs.final_value, inputs.years)

    return CAGRResponse(
        cagr=_finite_or_none(cagr),
        formatted=format_percentage(cagr, get_settings().percentage_decimal_places),
    )
