import logging

from fastapi.testclient import TestClient

from pennylog.core.config import settings
from pennylog.main import app

client = TestClient(app)

week_expenses = [
    {"amount": 350, "category": "Food", "date": "2025-11-03"},
    {"amount": 150, "category": "Transport", "date": "2025-11-04"},
]


def test_health():
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert "Education" in data["categories"]


def test_categorize_endpoint():
    response = client.post(
        "/api/expenses/categorize",
        json={"note": "You paid ₹350 to Zomato", "vendor": "Google Pay", "amount": 350},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["category"] == "Food"
    assert data["scores"]["Food"] == 4.0


def test_categorize_rejects_negative_amount():
    response = client.post("/api/expenses/categorize", json={"note": "lunch", "amount": -5})
    assert response.status_code == 422


def test_notification_endpoint():
    response = client.post(
        "/api/expenses/notifications",
        json={
            "title": "Google Pay",
            "text": "You paid ₹350 to Zomato",
            "package_name": "com.google.android.apps.nbu.paisa.user",
        },
    )
    assert response.status_code == 200
    data = response.json()
    assert data["refund"] is False
    assert data["transaction"]["merchant"] == "Zomato"
    assert data["suggested_category"] == "Food"


def test_refund_notification():
    response = client.post(
        "/api/expenses/notifications",
        json={"title": "Paytm", "text": "Refund of ₹120 credited back to your account"},
    )
    assert response.status_code == 200
    assert response.json()["refund"] is True


def test_unrecognised_notification():
    response = client.post("/api/expenses/notifications", json={"title": "Chat", "text": "See you soon"})
    assert response.status_code == 422


def test_weekly_report():
    response = client.post("/api/reports/weekly", json={"expenses": week_expenses})
    assert response.status_code == 200
    data = response.json()
    assert data["top_category"] == "Food"
    assert data["top_category_percentage"] == 70
    assert data["highest_spending_day"] == "Monday"
    assert len(data["tips"]) <= 3


def test_weekly_report_rejects_malformed_date():
    bad = week_expenses + [{"amount": 10, "category": "Food", "date": "yesterday"}]
    response = client.post("/api/reports/weekly", json={"expenses": bad})
    assert response.status_code == 422
    assert response.json()["index"] == 2


def test_patterns_report_insufficient_data():
    response = client.post("/api/reports/patterns", json={"expenses": week_expenses})
    assert response.status_code == 200
    data = response.json()
    assert data["trend"] == "insufficient_data"
    assert data["weekly_totals"] == []


def test_weekly_report_amounts_are_json_numbers():
    expenses = [
        {"amount": 350, "category": "Food", "date": "2025-11-03"},
        {"amount": "150.25", "category": "Transport", "date": "2025-11-04"},
    ]
    data = client.post("/api/reports/weekly", json={"expenses": expenses}).json()
    assert data["total"] == 500.25
    assert data["category_totals"] == {"Food": 350.0, "Transport": 150.25}
    assert data["daily_totals"] == {"Monday": 350.0, "Tuesday": 150.25}
    assert data["average_per_day"] == 71.46
    assert isinstance(data["total"], float)


def test_patterns_report_amounts_are_json_numbers():
    expenses = [
        {"amount": 100, "category": "Food", "date": "2025-11-03"},
        {"amount": 100, "category": "Food", "date": "2025-11-04"},
        {"amount": 103, "category": "Food", "date": "2025-11-05"},
        {"amount": 200, "category": "Food", "date": "2025-11-10"},
        {"amount": 100, "category": "Food", "date": "2025-11-11"},
        {"amount": 111, "category": "Food", "date": "2025-11-12"},
        {"amount": 11, "category": "Food", "date": "2025-11-13"},
    ]
    data = client.post("/api/reports/patterns", json={"expenses": expenses}).json()
    assert data["weekly_totals"] == [303.0, 422.0]
    assert all(isinstance(total, float) for total in data["weekly_totals"])
    assert data["average_weekly"] == 362.5
    assert data["change_percentage"] == 39.27
    assert data["trend"] == "increasing"


def test_startup_configures_package_logging():
    logging.getLogger("pennylog").setLevel(logging.NOTSET)
    with TestClient(app) as started:
        assert started.get("/api/health").status_code == 200
        assert logging.getLogger("pennylog").level == getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
