"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os
from datetime import date

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from plan_calculator.calculations.plan import InvestmentPlan, PaymentFrequency


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")


@pytest.fixture(scope="session")
def anyio_backend():
    """Backend for async tests."""
    return "asyncio"


@pytest.fixture
def start_date():
    """Fixed plan anchor so generated dates are deterministic."""
    return date(2026, 1, 1)


@pytest.fixture
def small_plan():
    """Pay 1,000 for 2 years, 1,200 in years 3-4, 5,000 lump sum in year 5."""
    return InvestmentPlan(
        annual_payment=1000,
        payment_years=2,
        return_amount=1200,
        return_start_year=3,
        return_years=2,
        final_return_year=5,
        final_return_amount=5000,
    )


@pytest.fixture
def guaranteed_income_plan():
    """Pay 10,000 for 2 years, 12,000 in years 3-4, 50,000 in year 5, 30% bracket."""
    return InvestmentPlan(
        annual_payment=10000,
        payment_years=2,
        return_amount=12000,
        return_start_year=3,
        return_years=2,
        final_return_year=5,
        final_return_amount=50000,
        payment_frequency=PaymentFrequency.ANNUAL,
        return_frequency=PaymentFrequency.ANNUAL,
        tax_bracket=0.30,
    )


@pytest.fixture
def monthly_plan():
    """Pay 12,000 a year monthly for 5 years, receive 20,000 a year monthly for 5 years."""
    return InvestmentPlan(
        annual_payment=12000,
        payment_years=5,
        return_amount=20000,
        return_start_year=6,
        return_years=5,
        payment_frequency=PaymentFrequency.MONTHLY,
        return_frequency=PaymentFrequency.MONTHLY,
    )
