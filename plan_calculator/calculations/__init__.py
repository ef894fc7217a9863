"""
Financial Calculation Engine

Cash flow generation and return metrics (XIRR, IRR, CAGR) for investment plans.
All rate calculations are designed to match Excel formula behavior.
"""

from plan_calculator.calculations import plan, cashflow, irr, rating, returns, formatting

__all__ = ["plan", "cashflow", "irr", "rating", "returns", "formatting"]
