"""
Print the returns of a sample guaranteed-income plan.

Pays 10,000 a year for 2 years, receives 12,000 a year in years 3-4 and
a 50,000 lump sum in year 5.
"""
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from plan_calculator.calculations.formatting import format_currency, format_percentage
from plan_calculator.calculations.plan import InvestmentPlan, TaxBracket
from plan_calculator.calculations.rating import comparison_text
from plan_calculator.calculations.returns import compute, yearly_breakdown


def main():
    plan = InvestmentPlan(
        annual_payment=10000,
        payment_years=2,
        return_amount=12000,
        return_start_year=3,
        return_years=2,
        final_return_year=5,
        final_return_amount=50000,
        tax_bracket=TaxBracket.THIRTY,
    )

    outcome = compute(plan)
    if not outcome.is_ok:
        print(f"Calculation failed: {outcome.message}")
        return

    result = outcome.value
    print(f"XIRR:              {format_percentage(result.xirr)}")
    print(f"IRR:               {format_percentage(result.irr)}")
    print(f"CAGR:              {format_percentage(result.cagr)}")
    print(f"Tax-adjusted XIRR: {format_percentage(result.tax_adjusted_xirr)}")
    print(f"Total invested:    {format_currency(result.total_invested)}")
    print(f"Total returns:     {format_currency(result.total_returns)}")
    print(f"Net profit:        {format_currency(result.net_profit)}")
    print(f"Absolute return:   {format_percentage(result.absolute_return)}")
    print(f"Rating:            {result.rating.value} ({comparison_text(result.xirr)})")
    print()
    for cf in result.cashflows:
        print(f"  {cf.date.isoformat()}  {cf.description:<8} {format_currency(cf.amount):>12}")
    print()
    for row in yearly_breakdown(result.cashflows):
        print(
            f"  {row.year}  paid {format_currency(row.payments):>12}"
            f"  received {format_currency(row.returns):>12}"
            f"  net {format_currency(row.cumulative_net_flow):>12}"
        )


if __name__ == "__main__":
    main()
