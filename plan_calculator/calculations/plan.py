"""
Investment Plan Definitions

Describes an investment plan: an annual payment leg, an optional regular
return leg, and an optional one-time lump sum, each with its own cadence.
"""

import enum
from dataclasses import dataclass
from datetime import date
from typing import Optional


class PaymentFrequency(str, enum.Enum):
    """Cadence used to split an annual amount into equal installments."""

    ANNUAL = "ANNUAL"
    HALF_YEARLY = "HALF_YEARLY"
    QUARTERLY = "QUARTERLY"
    MONTHLY = "MONTHLY"

    @property
    def periods_per_year(self) -> int:
        return _PERIODS_PER_YEAR[self]

    @property
    def months_per_period(self) -> int:
        return 12 // self.periods_per_year


_PERIODS_PER_YEAR = {
    PaymentFrequency.ANNUAL: 1,
    PaymentFrequency.HALF_YEARLY: 2,
    PaymentFrequency.QUARTERLY: 4,
    PaymentFrequency.MONTHLY: 12,
}


class TaxBracket(float, enum.Enum):
    """Preset marginal tax rates offered to users (Indian slabs incl. surcharges)."""

    ZERO = 0.0
    FIVE = 0.05
    TEN = 0.10
    FIFTEEN = 0.15
    TWENTY = 0.20
    TWENTY_FIVE = 0.25
    THIRTY = 0.30
    SURCHARGE_FIFTY_LAKHS = 0.33
    SURCHARGE_ONE_CRORE = 0.35
    SURCHARGE_TWO_CRORE = 0.37
    SURCHARGE_FIVE_CRORE = 0.39


@dataclass(frozen=True)
class InvestmentPlan:
    """
    Parameters of a single investment plan.

    All amounts are annual figures. The frequencies only decide how each
    annual figure is split into installments; they never change the total
    paid or received in a plan-year. Years are 1-indexed from plan start.
    """

    annual_payment: float
    payment_years: int
    return_amount: float
    return_start_year: int
    return_years: int
    final_return_year: int = 0
    final_return_amount: float = 0.0
    payment_frequency: PaymentFrequency = PaymentFrequency.ANNUAL
    return_frequency: PaymentFrequency = PaymentFrequency.ANNUAL
    tax_bracket: float = 0.0

    def __post_init__(self):
        if not 0 <= self.tax_bracket < 1:
            raise ValueError("Tax bracket must be in the range [0, 1)")

    @property
    def has_regular_returns(self) -> bool:
        return self.return_amount > 0

    @property
    def has_lump_sum(self) -> bool:
        return self.final_return_amount > 0 and self.final_return_year > 0


def plan_start_date(today: Optional[date] = None) -> date:
    """January 1 of the current calendar year (or of ``today``'s year)."""
    if today is None:
        today = date.today()
    return date(today.year, 1, 1)
