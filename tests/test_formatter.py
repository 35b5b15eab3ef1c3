# tests/test_formatter.py
import csv
import io
from datetime import date
from decimal import Decimal

import pytest

from loan_amortization.config import CSV_HEADERS
from loan_amortization.data_models import LoanTerms
from loan_amortization.engine import (
    calculate_early_payoff,
    calculate_loan_summary,
    generate_amortization_schedule,
)
from loan_amortization.formatter import (
    format_currency,
    format_percentage,
    print_early_payoff,
    print_summary,
    schedule_to_csv,
    serialize_early_payoff,
    serialize_schedule,
    serialize_summary,
)

START = date(2024, 1, 15)


@pytest.mark.parametrize(
    "amount, expected",
    [
        (1234.56, "$1,234.56"),
        (0, "$0.00"),
        (Decimal("943.5617"), "$943.56"),
        (1234567.891, "$1,234,567.89"),
        (-5, "-$5.00"),
        ("2.005", "$2.01"),
    ],
)
def test_format_currency_usd(amount, expected):
    assert format_currency(amount) == expected


def test_format_currency_other_codes():
    assert format_currency(1000, "PHP") == "₱1,000.00"
    assert format_currency(1000, "eur") == "€1,000.00"
    assert format_currency(1000, "JPY") == "JPY 1,000.00"


def test_format_percentage():
    assert format_percentage(5) == "5.00%"
    assert format_percentage(Decimal("6.5")) == "6.50%"
    assert format_percentage(3.14159, 3) == "3.142%"
    assert format_percentage(12, 0) == "12%"


def test_schedule_to_csv():
    sched = generate_amortization_schedule(LoanTerms(12_000, 0, 12), START)
    rows = list(csv.reader(io.StringIO(schedule_to_csv(sched))))
    assert rows[0] == CSV_HEADERS
    assert len(rows) == 13
    assert rows[1] == ["1", "2024-02-15", "1000.00", "0.00", "1000.00", "11000.00"]
    assert rows[-1][-1] == "0.00"


def test_serialize_schedule():
    sched = generate_amortization_schedule(LoanTerms(50_000, 5, 60), START)
    data = serialize_schedule(sched)
    assert len(data) == 60
    assert set(data[0]) == {
        "month",
        "due_date",
        "principal_payment",
        "interest_payment",
        "total_payment",
        "remaining_balance",
    }
    assert data[0]["due_date"] == "2024-02-15"
    assert data[0]["interest_payment"] == 208.33
    assert data[-1]["remaining_balance"] == 0.0


def test_serialize_summary_and_payoff():
    terms = LoanTerms(50_000, 5, 60)
    summary = serialize_summary(calculate_loan_summary(terms))
    assert summary["monthly_payment"] == 943.56
    assert summary["effective_interest_rate"] == 5.0

    payoff = serialize_early_payoff(calculate_early_payoff(terms, 200, START))
    assert payoff["converged"] is True
    assert payoff["months_to_payoff"] < 60


def test_print_summary(capsys):
    print_summary(calculate_loan_summary(LoanTerms(50_000, 5, 60)))
    out = capsys.readouterr().out
    assert "Monthly payment    : $943.56" in out
    assert "Interest rate      : 5.00%" in out


def test_print_early_payoff_flags_cap(capsys):
    terms = LoanTerms(100_000, 5, 360)
    print_early_payoff(calculate_early_payoff(terms, 0, START, max_iterations=12), 360)
    out = capsys.readouterr().out
    assert "Months to payoff   : 12" in out
    assert "Warning" in out
