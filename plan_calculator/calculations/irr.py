"""
IRR, XIRR and CAGR Calculations

XIRR is solved with Newton-Raphson over actual elapsed days (actual/365),
matching Excel's XIRR. IRR treats cash flows as equally spaced periods.
"""

import enum
import logging
import math
from typing import List, Sequence
from datetime import date
import numpy as np
from scipy.optimize import brentq

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 100
IRR_TOLERANCE = 1e-7
XIRR_TOLERANCE = 1e-10
DEFAULT_GUESS = 0.1
DAYS_PER_YEAR = 365.0

# Bracket search for the IRR fallback: -99% to 1000% per period, 1% steps
IRR_SEARCH_LOW = -0.99
IRR_SEARCH_HIGH = 10.0
IRR_SEARCH_POINTS = 1101


class ErrorKind(str, enum.Enum):
    """Categories of calculation failure reported to callers."""

    DEGENERATE_CASH_FLOW = "degenerate_cash_flow"
    NON_CONVERGENCE = "non_convergence"


class CalculationError(ValueError):
    """A solver failure whose message can be shown to the user as-is."""

    kind: ErrorKind


class DegenerateCashFlowError(CalculationError):
    kind = ErrorKind.DEGENERATE_CASH_FLOW


class NonConvergenceError(CalculationError):
    kind = ErrorKind.NON_CONVERGENCE


class CashFlowLengthError(ValueError):
    """Amounts and dates are not index-aligned."""


def _has_sign_change(cash_flows: Sequence[float]) -> bool:
    has_positive = any(cf > 0 for cf in cash_flows)
    has_negative = any(cf < 0 for cf in cash_flows)
    return has_positive and has_negative


def calculate_npv(cash_flows: List[float], discount_rate: float) -> float:
    """
    Calculate NPV (Net Present Value) of equally spaced cash flows.

    Discount factors that overflow count as zero present value.

    Args:
        cash_flows: Array of cash flows (negative = outflow, positive = inflow)
        discount_rate: Per-period discount rate (e.g., 0.10 for 10%)

    Returns:
        NPV value (may be non-finite for rates at or below -100%)
    """
    amounts = np.asarray(cash_flows, dtype=np.float64)
    periods = np.arange(len(amounts), dtype=np.float64)
    return _npv_vector(amounts, periods, discount_rate)


def _npv_derivative(cash_flows: List[float], rate: float) -> float:
    """Calculate derivative of NPV with respect to rate (for Newton-Raphson)."""
    amounts = np.asarray(cash_flows, dtype=np.float64)
    periods = np.arange(len(amounts), dtype=np.float64)
    with np.errstate(all="ignore"):
        return float(np.sum(-periods * amounts / (1 + rate) ** (periods + 1)))


def calculate_irr(cash_flows: List[float], guess: float = DEFAULT_GUESS) -> float:
    """
    Calculate IRR (Internal Rate of Return) using Newton-Raphson method.

    Matches Excel's IRR() function: period = position in the list, actual
    dates are ignored.

    Args:
        cash_flows: Array of periodic cash flows
        guess: Initial guess for rate (default 0.1 = 10%)

    Returns:
        Per-period IRR as decimal, or NaN if no root could be found
    """
    if len(cash_flows) < 2 or not _has_sign_change(cash_flows):
        logger.warning("IRR undefined: cash flows need both signs")
        return math.nan

    rate = guess

    for _ in range(MAX_ITERATIONS):
        npv = calculate_npv(cash_flows, rate)
        dnpv = _npv_derivative(cash_flows, rate)

        if dnpv == 0 or not (math.isfinite(npv) and math.isfinite(dnpv)):
            break

        new_rate = rate - npv / dnpv

        if not math.isfinite(new_rate) or new_rate <= -1:
            break

        # Relative tolerance; a root at exactly zero is left to the fallback
        if abs(new_rate - rate) < IRR_TOLERANCE * abs(new_rate):
            return new_rate

        rate = new_rate

    # Newton overshoots on long series (e.g. monthly periods), so fall back
    # to Brent's method on the sign change nearest zero.
    rate = _brent_irr(cash_flows)
    if math.isnan(rate):
        logger.warning("IRR did not converge from guess %s", guess)
    return rate


def _npv_vector(amounts: np.ndarray, periods: np.ndarray, rate: float) -> float:
    with np.errstate(all="ignore"):
        return float(np.sum(amounts / (1 + rate) ** periods))


def _brent_irr(cash_flows: List[float]) -> float:
    """Bracket the root nearest zero on a rate grid and solve with brentq."""
    amounts = np.asarray(cash_flows, dtype=np.float64)
    periods = np.arange(len(amounts), dtype=np.float64)

    grid = np.linspace(IRR_SEARCH_LOW, IRR_SEARCH_HIGH, IRR_SEARCH_POINTS)
    values = [_npv_vector(amounts, periods, rate) for rate in grid]

    brackets = [
        i
        for i in range(len(grid) - 1)
        if math.isfinite(values[i])
        and math.isfinite(values[i + 1])
        and values[i] * values[i + 1] <= 0
    ]
    if not brackets:
        return math.nan

    i = min(brackets, key=lambda i: min(abs(grid[i]), abs(grid[i + 1])))
    if values[i] == 0:
        return float(grid[i])
    if values[i + 1] == 0:
        return float(grid[i + 1])

    return float(
        brentq(
            lambda r: _npv_vector(amounts, periods, r),
            grid[i],
            grid[i + 1],
            xtol=1e-12,
            maxiter=1000,
        )
    )


def _year_fractions(dates: Sequence[date]) -> np.ndarray:
    """Years elapsed since the first date, actual/365."""
    base_date = dates[0]
    return np.array(
        [(d - base_date).days / DAYS_PER_YEAR for d in dates], dtype=np.float64
    )


def _sort_by_date(
    cash_flows: Sequence[float], dates: Sequence[date]
) -> tuple:
    """Stable sort of (amount, date) pairs by date."""
    pairs = sorted(zip(cash_flows, dates), key=lambda pair: pair[1])
    amounts = np.array([cf for cf, _ in pairs], dtype=np.float64)
    return amounts, [d for _, d in pairs]


def calculate_xnpv(
    cash_flows: List[float], dates: List[date], discount_rate: float
) -> float:
    """Calculate XNPV (NPV with specific dates), discounted to the earliest date."""
    if len(cash_flows) != len(dates):
        raise CashFlowLengthError("Cash flows and dates arrays must have same length")
    if not cash_flows:
        return 0.0

    amounts, sorted_dates = _sort_by_date(cash_flows, dates)
    years = _year_fractions(sorted_dates)
    with np.errstate(all="ignore"):
        return float(np.sum(amounts / (1 + discount_rate) ** years))


def calculate_xirr(
    cash_flows: List[float], dates: List[date], guess: float = DEFAULT_GUESS
) -> float:
    """
    Calculate XIRR (IRR with specific dates).

    Matches Excel's XIRR() function behavior for irregular cash flows.
    Cash flows need not be in date order.

    Args:
        cash_flows: Array of cash flows
        dates: Array of dates corresponding to each cash flow
        guess: Initial guess for rate (default 0.1 = 10%)

    Returns:
        Annual rate as decimal (0.12 = 12% per annum)

    Raises:
        CashFlowLengthError: If the arrays are not the same length
        DegenerateCashFlowError: If the cash flows never change sign
        NonConvergenceError: If Newton-Raphson does not converge
    """
    if len(cash_flows) != len(dates):
        raise CashFlowLengthError("Values and dates arrays must be of the same length")

    if not _has_sign_change(cash_flows):
        raise DegenerateCashFlowError(
            "XIRR requires at least one positive and one negative value."
        )

    amounts, sorted_dates = _sort_by_date(cash_flows, dates)
    years = _year_fractions(sorted_dates)

    rate = guess

    with np.errstate(all="ignore"):
        for _ in range(MAX_ITERATIONS):
            factor = (1 + rate) ** years
            xnpv = np.sum(amounts / factor)
            dxnpv = np.sum(-years * amounts / (factor * (1 + rate)))

            if dxnpv == 0 or not np.isfinite(dxnpv):
                break

            new_rate = float(rate - xnpv / dxnpv)

            if not math.isfinite(new_rate):
                break

            if abs(new_rate - rate) < XIRR_TOLERANCE:
                return new_rate

            rate = new_rate

    raise NonConvergenceError("XIRR did not converge.")


def calculate_cagr(initial_value: float, final_value: float, years: float) -> float:
    """
    Calculate CAGR (Compound Annual Growth Rate).

    Args:
        initial_value: Starting value (must be positive)
        final_value: Ending value
        years: Number of years (must be positive)

    Returns:
        CAGR as decimal, or NaN if the inputs admit no real growth rate
    """
    if initial_value <= 0 or years <= 0:
        return math.nan

    ratio = final_value / initial_value
    if ratio < 0:
        return math.nan
    if ratio == 0:
        return -1.0

    # Log space so very short horizons overflow to inf instead of raising
    try:
        return math.expm1(math.log(ratio) / years)
    except OverflowError:
        return math.inf
