# tests/test_web_app.py
import pytest

from loan_amortization_web.app import app

LOAN = {"principal": "50000", "rate": "5", "term": "60"}


@pytest.fixture
def client():
    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client


def test_summary(client):
    resp = client.get("/api/summary", query_string=LOAN)
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["monthly_payment"] == 943.56
    assert data["effective_interest_rate"] == 5.0
    assert data["total_interest"] == pytest.approx(data["total_payment"] - 50000, abs=0.01)


def test_summary_accepts_json_body(client):
    resp = client.post(
        "/api/summary",
        json={"principal": 12000, "annual_interest_rate": 0, "loan_term_months": 12},
    )
    assert resp.status_code == 200
    assert resp.get_json()["monthly_payment"] == 1000.0


def test_schedule(client):
    resp = client.get("/api/schedule", query_string={**LOAN, "start_date": "2024-01-15"})
    assert resp.status_code == 200
    data = resp.get_json()
    assert len(data["schedule"]) == 60
    assert data["schedule"][0]["due_date"] == "2024-02-15"
    assert data["schedule"][-1]["remaining_balance"] == 0.0
    assert "progress" not in data


def test_schedule_with_progress(client):
    resp = client.get("/api/schedule", query_string={**LOAN, "paid_up_to_month": "12"})
    progress = resp.get_json()["progress"]
    assert progress["payments_made"] == 12
    assert progress["total_payments"] == 60
    assert 0 < progress["remaining_balance"] < 50000


def test_schedule_csv(client):
    resp = client.get("/api/schedule", query_string={**LOAN, "format": "csv", "start_date": "2024-01-15"})
    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert "amortization-schedule.csv" in resp.headers["Content-Disposition"]
    lines = resp.get_data(as_text=True).splitlines()
    assert lines[0] == "Month,Due Date,Principal,Interest,Total Payment,Remaining Balance"
    assert lines[1].startswith("1,2024-02-15,")
    assert len(lines) == 61


def test_early_payoff(client):
    resp = client.post(
        "/api/early-payoff",
        json={**LOAN, "extra_monthly_payment": 200, "start_date": "2024-01-15"},
    )
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["months_to_payoff"] < 60
    assert data["interest_saved"] > 0
    assert data["converged"] is True


def test_breakdown(client):
    resp = client.get("/api/breakdown", query_string={**LOAN, "payment_number": "1"})
    assert resp.get_json() == {"principal": 735.23, "interest": 208.33}


def test_breakdown_out_of_range(client):
    resp = client.get("/api/breakdown", query_string={**LOAN, "payment_number": "61"})
    assert resp.status_code == 200
    assert resp.get_json() == {"principal": 0.0, "interest": 0.0}


def test_remaining_balance(client):
    resp = client.get("/api/remaining-balance", query_string={**LOAN, "payments_completed": "70"})
    assert resp.get_json() == {"remaining_balance": 0.0}


@pytest.mark.parametrize(
    "params",
    [
        {"principal": "50000", "rate": "5", "term": "0"},
        {"principal": "50000", "rate": "-2", "term": "60"},
        {"principal": "abc", "rate": "5", "term": "60"},
        {"principal": "50000", "rate": "5", "term": "five"},
        {"rate": "5", "term": "60"},
        {"principal": "50000", "rate": "5", "term": "601"},
    ],
)
def test_invalid_terms_return_400(client, params):
    resp = client.get("/api/summary", query_string=params)
    assert resp.status_code == 400
    assert "error" in resp.get_json()


@pytest.mark.parametrize("term", [12.7, 12.0, True, "12.7"])
def test_non_integer_term_in_json_returns_400(client, term):
    resp = client.post("/api/summary", json={"principal": 1000, "rate": 5, "loan_term_months": term})
    assert resp.status_code == 400
    assert "whole number" in resp.get_json()["error"]


def test_integer_term_in_json_is_accepted(client):
    resp = client.post("/api/summary", json={"principal": 1000, "rate": 5, "loan_term_months": 12})
    assert resp.status_code == 200


def test_non_integer_paid_up_to_month_returns_400(client):
    resp = client.post("/api/schedule", json={**LOAN, "paid_up_to_month": 2.5})
    assert resp.status_code == 400


def test_invalid_start_date_returns_400(client):
    resp = client.get("/api/schedule", query_string={**LOAN, "start_date": "2024-13-01"})
    assert resp.status_code == 400


def test_negative_extra_payment_returns_400(client):
    resp = client.get("/api/early-payoff", query_string={**LOAN, "extra_monthly_payment": "-10"})
    assert resp.status_code == 400
