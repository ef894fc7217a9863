"""
XIRR Rating

Grades a plan's XIRR against typical alternatives: fixed deposits (5-9%),
PPF (7.1%) and index funds (10-12%).
"""

import enum
import math


class ReturnRating(str, enum.Enum):
    POOR = "Poor"
    AVERAGE = "Average"
    GOOD = "Good"
    EXCELLENT = "Excellent"


# Upper bounds (exclusive) of each grade below EXCELLENT
POOR_BELOW = 0.07
AVERAGE_BELOW = 0.09
GOOD_BELOW = 0.12

_COMPARISONS = {
    ReturnRating.POOR: (
        "This return is lower than most fixed deposits (5-9%) and "
        "significantly lower than index funds (10-12%)."
    ),
    ReturnRating.AVERAGE: (
        "This return is comparable to fixed deposits but lower than "
        "index funds (10-12%)."
    ),
    ReturnRating.GOOD: (
        "This return is better than fixed deposits and comparable to PPF "
        "(7.1%), but still lower than index funds (10-12%)."
    ),
    ReturnRating.EXCELLENT: (
        "This return is competitive with most investment options including "
        "PPF and matching or exceeding index fund returns (10-12%)."
    ),
}


def rate_xirr(xirr: float) -> ReturnRating:
    """Grade an XIRR: Poor < 7% <= Average < 9% <= Good < 12% <= Excellent."""
    if math.isnan(xirr):
        raise ValueError("Cannot rate an undefined XIRR")
    if xirr < POOR_BELOW:
        return ReturnRating.POOR
    if xirr < AVERAGE_BELOW:
        return ReturnRating.AVERAGE
    if xirr < GOOD_BELOW:
        return ReturnRating.GOOD
    return ReturnRating.EXCELLENT


def comparison_text(xirr: float) -> str:
    """One-sentence comparison of ``xirr`` with common alternatives."""
    return _COMPARISONS[rate_xirr(xirr)]
