"""
Tests for the calculation API endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from plan_calculator.main import app


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def plan_payload():
    return {
        "annual_payment": 10000,
        "payment_years": 2,
        "return_amount": 12000,
        "return_start_year": 3,
        "return_years": 2,
        "final_return_year": 5,
        "final_return_amount": 50000,
        "payment_frequency": "ANNUAL",
        "return_frequency": "ANNUAL",
        "tax_bracket": 0.30,
        "start_date": "2026-01-01",
    }


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestReturnsEndpoint:
    """Test POST /api/calculate/returns."""

    def test_returns(self, client, plan_payload):
        response = client.post("/api/calculate/returns", json=plan_payload)
        assert response.status_code == 200

        data = response.json()
        metrics = data["metrics"]
        assert metrics["total_invested"] == 20000
        assert metrics["total_returns"] == 74000
        assert metrics["net_profit"] == 54000
        assert metrics["tax_adjusted_xirr"] == pytest.approx(
            metrics["xirr"] / 0.7, abs=1e-4
        )
        assert data["formatted"]["xirr"].endswith("%")
        assert len(data["cashflows"]) == 5
        assert data["cashflows"][0] == {
            "date": "2026-01-01",
            "amount": -10000,
            "description": "Payment",
        }

    def test_returns_summary(self, client, plan_payload):
        response = client.post("/api/calculate/returns", json=plan_payload)
        data = response.json()

        assert data["metrics"]["absolute_return"] == pytest.approx(2.7)
        assert data["formatted"]["absolute_return"] == "270.00%"
        assert data["rating"] == "Excellent"
        assert "index fund" in data["comparison"]

        breakdown = data["yearly_breakdown"]
        assert [row["year"] for row in breakdown] == [2026, 2027, 2028, 2029, 2030]
        assert breakdown[0] == {
            "year": 2026,
            "payments": 10000,
            "returns": 0,
            "cumulative_net_flow": -10000,
        }
        assert breakdown[-1]["cumulative_net_flow"] == 54000

    def test_degenerate_plan_returns_400(self, client, plan_payload):
        plan_payload.update(return_amount=0, final_return_amount=0)
        response = client.post("/api/calculate/returns", json=plan_payload)
        assert response.status_code == 400
        assert response.json()["detail"] == (
            "XIRR requires at least one positive and one negative value."
        )

    def test_invalid_tax_bracket(self, client, plan_payload):
        plan_payload["tax_bracket"] = 1.0
        response = client.post("/api/calculate/returns", json=plan_payload)
        assert response.status_code == 422

    def test_invalid_frequency(self, client, plan_payload):
        plan_payload["payment_frequency"] = "WEEKLY"
        response = client.post("/api/calculate/returns", json=plan_payload)
        assert response.status_code == 422

    def test_zero_payment_plan_returns_400(self, client, plan_payload):
        """Zero-amount payments are not outflows, so XIRR has no sign change."""
        plan_payload.update(annual_payment=0)
        response = client.post("/api/calculate/returns", json=plan_payload)
        assert response.status_code == 400


class TestCashFlowsEndpoint:
    def test_monthly_cashflows(self, client, plan_payload):
        plan_payload.update(
            payment_frequency="MONTHLY",
            annual_payment=12000,
            payment_years=1,
            return_amount=0,
            final_return_amount=0,
        )
        response = client.post("/api/calculate/cashflows", json=plan_payload)
        assert response.status_code == 200

        data = response.json()
        assert data["amounts"] == [-1000] * 12
        assert data["dates"][1] == "2026-02-01"
        assert data["total_outflows"] == 12000
        assert data["total_inflows"] == 0


class TestIRREndpoint:
    def test_xirr_with_dates(self, client):
        response = client.post(
            "/api/calculate/irr",
            json={
                "cash_flows": [-1000, 500, 600],
                "dates": ["2023-01-01", "2023-07-01", "2024-01-01"],
            },
        )
        assert response.status_code == 200
        assert response.json()["irr"] == pytest.approx(0.1323, abs=1e-4)

    def test_irr_without_dates(self, client):
        response = client.post(
            "/api/calculate/irr", json={"cash_flows": [-1000, 500, 600]}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["irr"] == pytest.approx(0.0639, abs=1e-4)
        assert data["formatted"] == "6.39%"

    def test_very_long_series(self, client):
        response = client.post(
            "/api/calculate/irr", json={"cash_flows": [-1.0] * 8000 + [1.0] * 8000}
        )
        assert response.status_code == 200
        data = response.json()
        assert abs(data["irr"]) < 1e-6
        assert data["npv_at_10_percent"] == pytest.approx(-11.0)

    def test_same_sign_returns_400(self, client):
        response = client.post(
            "/api/calculate/irr", json={"cash_flows": [-1000, -500, -600]}
        )
        assert response.status_code == 400

    def test_length_mismatch_returns_400(self, client):
        response = client.post(
            "/api/calculate/irr",
            json={"cash_flows": [-1000, 500, 600], "dates": ["2023-01-01"]},
        )
        assert response.status_code == 400


class TestCAGREndpoint:
    def test_cagr(self, client):
        response = client.post(
            "/api/calculate/cagr",
            json={"initial_value": 1000, "final_value": 1331, "years": 3},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["cagr"] == pytest.approx(0.10, abs=1e-4)
        assert data["formatted"] == "10.00%"

    def test_overflowing_cagr_is_null(self, client):
        response = client.post(
            "/api/calculate/cagr",
            json={"initial_value": 1, "final_value": 1e10, "years": 0.01},
        )
        assert response.status_code == 200
        assert response.json() == {"cagr": None, "formatted": "N/A"}

    def test_invalid_cagr_is_null(self, client):
        response = client.post(
            "/api/calculate/cagr",
            json={"initial_value": -1000, "final_value": 1331, "years": 3},
        )
        assert response.status_code == 200
        assert response.json() == {"cagr": None, "formatted": "N/A"}
