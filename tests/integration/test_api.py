"""Integration tests for API endpoints"""

import pytest
from datetime import date
from decimal import Decimal
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session
from finrisk_engine.infrastructure.database.repositories import AccountRepository, LedgerRepository

pytestmark = pytest.mark.integration


@pytest.fixture
def seeded_ledger(db: Session):
    """Receivables and payables as of 2025-03-15"""
    ledger = LedgerRepository(db)
    ledger.create_item("receivable", "Northwind", Decimal("1000"), date(2025, 1, 1))
    ledger.create_item("receivable", "Contoso", Decimal("60000"), date(2025, 3, 1))
    ledger.create_item("receivable", "Fabrikam", Decimal("500"), date(2025, 4, 10))
    ledger.create_item("receivable", "Tailspin", Decimal("2000"), date(2024, 10, 1), settled=True)
    ledger.create_item("payable", "Landlord", Decimal("70000"), date(2025, 3, 31))
    ledger.create_item("payable", "Supplier", Decimal("5000"), date(2025, 5, 20))
    return ledger


@pytest.fixture
def seeded_accounts(db: Session):
    accounts = AccountRepository(db)
    accounts.create_account("Operating", "checking", Decimal("10000"))
    accounts.create_account("Term loan", "loan", Decimal("-5000"))
    return accounts


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    client.get("/api/dscr", params={"operatingCF": 200, "debtService": 100})

    response = client.get("/metrics")
    assert response.status_code == 200
    assert "finrisk_dscr_evaluations_total" in response.text
    assert "http_request_duration_seconds" in response.text


def test_request_id_is_echoed(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"

    generated = client.get("/health")
    assert generated.headers["X-Request-ID"]


# --- DSCR ---


@pytest.mark.parametrize(
    "operating_cf, debt_service, dscr, status",
    [
        (200, 100, "2", "ok"),
        (120, 120, "1", "warning"),
        (80, 100, "0.8", "critical"),
        (-50, 0, "Infinity", "ok"),
    ],
)
def test_dscr_endpoint(client: TestClient, operating_cf, debt_service, dscr, status):
    response = client.get("/api/dscr", params={"operatingCF": operating_cf, "debtService": debt_service})

    assert response.status_code == 200
    assert response.json() == {"dscr": dscr, "status": status}


def test_dscr_endpoint_requires_both_values(client: TestClient):
    response = client.get("/api/dscr", params={"operatingCF": 100})
    assert response.status_code == 422


# --- Risk ---


def test_risk_analyze_uses_fallback_cash(client: TestClient):
    """No accounts: base cash falls back to the configured snapshot"""
    response = client.post(
        "/api/risk/analyze",
        json={"fxDelta": 10, "rateDelta": 5, "inflationDelta": 2, "liquidityGap": 3},
    )

    assert response.status_code == 200
    data = response.json()
    assert Decimal(data["baseCash"]) == Decimal("100000")
    assert Decimal(data["base"]["cash"]) == Decimal("97000")
    assert Decimal(data["base"]["score"]) == 66
    assert Decimal(data["base"]["factors"]["totalImpact"]) == 34
    assert Decimal(data["best"]["score"]) == 83
    assert Decimal(data["worst"]["score"]) == 49
    assert data["riskLevel"]["level"] == "medium"
    assert len(data["recommendations"]) == 4
    assert Decimal(data["parameters"]["liquidityGap"]) == 3


def test_risk_analyze_uses_account_cash(client: TestClient, seeded_accounts):
    response = client.post(
        "/api/risk/analyze",
        json={"fxDelta": 0, "rateDelta": 0, "inflationDelta": 0, "liquidityGap": 0},
    )

    assert response.status_code == 200
    data = response.json()
    assert Decimal(data["baseCash"]) == Decimal("10000")
    assert Decimal(data["base"]["score"]) == 100
    assert data["riskLevel"]["level"] == "low"


def test_risk_analyze_very_large_delta(client: TestClient):
    response = client.post(
        "/api/risk/analyze",
        json={"fxDelta": "1e25", "rateDelta": 0, "inflationDelta": 0, "liquidityGap": 0},
    )

    assert response.status_code == 200
    data = response.json()
    assert Decimal(data["base"]["cash"]) == Decimal("1E27") + Decimal("100000")
    assert data["riskLevel"]["level"] == "critical"


def test_risk_analyze_missing_field(client: TestClient):
    response = client.post("/api/risk/analyze", json={"fxDelta": 1, "rateDelta": 1, "inflationDelta": 1})
    assert response.status_code == 422


def test_validate_parameters(client: TestClient):
    response = client.get("/api/risk/parameters/validate", params={"fxDelta": 60, "rateDelta": 5})

    assert response.status_code == 200
    data = response.json()
    assert data["valid"] is False
    assert data["validation"]["fxDelta"]["valid"] is False
    assert data["validation"]["rateDelta"]["valid"] is True
    assert data["validation"]["liquidityGap"]["message"] == "Valid"


# --- Cash gap ---


def test_cash_gap_endpoint(client: TestClient, seeded_ledger):
    response = client.get("/api/dashboard/cashgap")

    assert response.status_code == 200
    data = response.json()
    # Settled items are not outstanding
    assert Decimal(data["totalAR"]) == Decimal("61500")
    assert Decimal(data["totalAP"]) == Decimal("75000")
    assert Decimal(data["cashGap"]) == Decimal("-13500")
    assert Decimal(data["arDueIn30Days"]) == Decimal("61500")
    assert Decimal(data["apDueIn30Days"]) == Decimal("70000")
    assert Decimal(data["netGap30Days"]) == Decimal("-8500")
    assert Decimal(data["netGap60Days"]) == Decimal("-8500")
    assert data["riskLevel"] == "high"
    assert data["asOf"] == "2025-03-15"
    assert len(data["timeline"]) == 6
    assert data["timeline"][0]["period"] == "2025-03"
    assert data["recommendations"]


def test_cash_gap_months_parameter(client: TestClient, seeded_ledger):
    response = client.get("/api/dashboard/cashgap", params={"months": 3})
    assert response.status_code == 200
    assert [p["period"] for p in response.json()["timeline"]] == ["2025-03", "2025-04", "2025-05"]

    response = client.get("/api/dashboard/cashgap", params={"months": 0})
    assert response.status_code == 400


def test_cash_gap_missing_due_date(client: TestClient, db: Session):
    LedgerRepository(db).create_item("payable", "Unknown", Decimal("10"), None)

    response = client.get("/api/dashboard/cashgap")
    assert response.status_code == 400


# --- Runway and dashboard ---


def test_runway_endpoint(client: TestClient, seeded_accounts):
    """Only liquid accounts count as cash; the loan does not shorten the runway"""
    response = client.get("/api/dashboard/runway", params={"monthlyExpenses": 2500})

    assert response.status_code == 200
    data = response.json()
    assert Decimal(data["currentCash"]) == Decimal("10000")
    assert data["runwayMonths"] == "4.00"
    assert data["runwayDays"] == "120"
    assert data["status"] == "warning"
    assert len(data["recommendations"]) == 3
    assert len(data["monthlyBreakdown"]) == 12
    assert data["monthlyBreakdown"][0]["period"] == "2025-04"
    assert Decimal(data["monthlyBreakdown"][3]["projectedCash"]) == 0


def test_runway_zero_expenses_is_infinite(client: TestClient, seeded_accounts):
    response = client.get("/api/dashboard/runway", params={"monthlyExpenses": 0, "months": 2})

    assert response.status_code == 200
    data = response.json()
    assert data["runwayMonths"] == "Infinity"
    assert data["runwayDays"] == "Infinity"
    assert data["status"] == "healthy"
    assert len(data["monthlyBreakdown"]) == 2


def test_runway_no_cash_is_critical(client: TestClient):
    response = client.get("/api/dashboard/runway", params={"monthlyExpenses": 100})

    assert response.status_code == 200
    assert response.json()["status"] == "critical"
    assert Decimal(response.json()["runwayMonths"]) == 0


def test_runway_rejects_bad_input(client: TestClient):
    assert client.get("/api/dashboard/runway").status_code == 422
    assert client.get("/api/dashboard/runway", params={"monthlyExpenses": -1}).status_code == 400
    assert client.get("/api/dashboard/runway", params={"monthlyExpenses": 1, "months": 0}).status_code == 400


def test_dashboard_overview(client: TestClient, seeded_ledger, seeded_accounts):
    response = client.get("/api/dashboard/overview", params={"monthlyExpenses": 1000})

    assert response.status_code == 200
    data = response.json()
    assert data["runway"]["status"] == "healthy"
    assert data["cashGap"]["riskLevel"] == "high"
    assert data["overallRisk"] == "high"
    summary = data["summary"]
    assert Decimal(summary["totalCash"]) == Decimal("10000")
    assert Decimal(summary["totalAR"]) == Decimal("61500")
    assert Decimal(summary["totalAP"]) == Decimal("75000")
    assert Decimal(summary["netPosition"]) == Decimal("-3500")
    assert summary["runwayStatus"] == "healthy"
    assert summary["cashGapStatus"] == "high"


def test_cash_flow_forecast(client: TestClient, seeded_ledger, seeded_accounts):
    response = client.get("/api/dashboard/forecast", params={"monthlyExpenses": 1000, "months": 3})

    assert response.status_code == 200
    data = response.json()
    assert data["asOf"] == "2025-03-15"
    months = data["months"]
    assert [m["period"] for m in months] == ["2025-03", "2025-04", "2025-05"]
    assert [Decimal(m["projectedInflows"]) for m in months] == [61000, 500, 0]
    assert [Decimal(m["projectedOutflows"]) for m in months] == [71000, 1000, 6000]
    assert [Decimal(m["openingCash"]) for m in months] == [10000, 0, -500]
    assert [Decimal(m["closingCash"]) for m in months] == [0, -500, -6500]
    assert {m["confidence"] for m in months} == {"high"}


def test_cash_flow_forecast_rejects_negative_expenses(client: TestClient):
    response = client.get("/api/dashboard/forecast", params={"monthlyExpenses": -5})
    assert response.status_code == 400


# --- Aging ---


def test_aging_records(client: TestClient, seeded_ledger):
    response = client.get("/api/aging/ar")

    assert response.status_code == 200
    records = response.json()
    assert [r["counterparty"] for r in records] == ["Tailspin", "Northwind", "Contoso", "Fabrikam"]
    assert [r["status"] for r in records] == ["paid", "overdue", "overdue", "outstanding"]
    assert [r["agingBucket"] for r in records] == ["90+", "60-90", "0-30", "0-30"]
    assert [r["riskLevel"] for r in records] == ["low", "high", "medium", "low"]
    assert records[1]["agingDays"] == 73
    assert records[3]["agingDays"] == -26


def test_aging_summary(client: TestClient, seeded_ledger):
    response = client.get("/api/aging/ar/summary")

    assert response.status_code == 200
    data = response.json()
    assert data["reportType"] == "ar"
    assert data["totalCount"] == 4
    assert Decimal(data["totalAmount"]) == Decimal("63500")
    assert [b["bucket"] for b in data["buckets"]] == ["0-30", "30-60", "60-90", "90+"]
    assert [b["count"] for b in data["buckets"]] == [2, 0, 1, 1]
    assert Decimal(data["overdueAmount"]) == Decimal("61000")
    assert data["overdueCount"] == 2
    assert Decimal(data["overduePercentage"]) == Decimal("96.06")
    assert data["averageAgingDays"] == 57


def test_aging_payables(client: TestClient, seeded_ledger):
    response = client.get("/api/aging/ap")
    assert response.status_code == 200
    assert {r["counterparty"] for r in response.json()} == {"Landlord", "Supplier"}


def test_aging_unknown_report_type(client: TestClient):
    response = client.get("/api/aging/gl")
    assert response.status_code == 422


# --- Simulation ---


def test_simulation_requires_accounts(client: TestClient):
    response = client.post(
        "/api/simulation/run",
        json={"fxDelta": 0, "rateDelta": 0, "inflationDelta": 0, "horizonMonths": 6},
    )
    assert response.status_code == 404


def test_simulation_run_and_history(client: TestClient, seeded_accounts):
    response = client.post(
        "/api/simulation/run",
        json={
            "fxDelta": 0,
            "rateDelta": 12,
            "inflationDelta": 0,
            "horizonMonths": 3,
            "monthlyNetCashFlow": -4000,
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["id"]
    assert Decimal(data["currentState"]["cash"]) == Decimal("10000")
    assert Decimal(data["currentState"]["debt"]) == Decimal("5000")
    assert Decimal(data["currentState"]["netWorth"]) == Decimal("5000")
    assert [p["month"] for p in data["projections"]] == [1, 2, 3]
    assert [Decimal(p["cash"]) for p in data["projections"]] == [
        Decimal("6000"),
        Decimal("2000"),
        Decimal("-2000"),
    ]
    assert Decimal(data["projections"][0]["debt"]) == Decimal("5050")
    assert data["summary"]["cashDeficitMonth"] == 3
    assert data["narrative"].endswith("Cash deficit possible in month 3")
    assert data["parameters"]["horizonMonths"] == 3

    history = client.get("/api/simulation/history")
    assert history.status_code == 200
    runs = history.json()["runs"]
    assert len(runs) == 1
    assert runs[0]["id"] == data["id"]
    assert runs[0]["cashDeficitMonth"] == 3
    assert runs[0]["parameters"]["horizonMonths"] == 3


def test_simulation_invalid_horizon(client: TestClient, seeded_accounts):
    response = client.post(
        "/api/simulation/run",
        json={"fxDelta": 0, "rateDelta": 0, "inflationDelta": 0, "horizonMonths": 5},
    )
    assert response.status_code == 400
    assert "horizon" in response.json()["detail"]

    assert client.get("/api/simulation/history").json()["runs"] == []
