"""Output helpers for the amortization engine.

This module provides the display formatters used by every front end, simple
functions to render schedules and summaries in a tabular text format, and the
CSV/JSON serializers for schedule export. We rely only on built-in printing
and string formatting here; the CLI decides where the output goes.
"""

from __future__ import annotations

import csv
import io
from decimal import Decimal
from typing import Any, Dict, Iterable, List

from .config import CSV_HEADERS, CURRENCY_SYMBOLS, DATE_FORMAT, DEFAULT_CURRENCY
from .data_models import EarlyPayoffResult, LoanSummary, MonthlyPayment, PaymentProgress
from .utils import Number, round_money, to_decimal


def format_currency(amount: Number, currency: str = DEFAULT_CURRENCY) -> str:
    """Format an amount US style with two decimals, e.g. ``"$1,234.56"``.

    Negative amounts carry the sign before the symbol (``"-$5.00"``). Codes
    without a known symbol are used as a prefix (``"JPY 1,000.00"``).
    """
    value = round_money(to_decimal(amount))
    code = currency.upper()
    symbol = CURRENCY_SYMBOLS.get(code, f"{code} ")
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


def format_percentage(value: Number, decimals: int = 2) -> str:
    """Format a percentage value, e.g. ``format_percentage(5) == "5.00%"``."""
    return f"{to_decimal(value):.{decimals}f}%"


def print_summary(summary: LoanSummary, currency: str = DEFAULT_CURRENCY) -> None:
    """Print a summary of loan metrics in a human-readable format."""
    print("Summary")
    print("-" * 72)
    print(f"Monthly payment    : {format_currency(summary.monthly_payment, currency)}")
    print(f"Total payment      : {format_currency(summary.total_payment, currency)}")
    print(f"Total interest     : {format_currency(summary.total_interest, currency)}")
    print(f"Interest rate      : {format_percentage(summary.effective_interest_rate)}")
    print("-" * 72)


def print_schedule(schedule: Iterable[MonthlyPayment]) -> None:
    """Print the amortization schedule as a simple table."""
    print("\t".join(CSV_HEADERS))
    for row in schedule:
        print("\t".join(_csv_row(row)))


def print_progress(progress: PaymentProgress, currency: str = DEFAULT_CURRENCY) -> None:
    print("Progress")
    print("-" * 72)
    print(f"Payments made      : {progress.payments_made}/{progress.total_payments}")
    print(f"Principal paid     : {format_currency(progress.principal_paid, currency)}")
    print(f"Interest paid      : {format_currency(progress.interest_paid, currency)}")
    print(f"Remaining balance  : {format_currency(progress.remaining_balance, currency)}")
    print("-" * 72)


def print_early_payoff(
    result: EarlyPayoffResult, loan_term_months: int, currency: str = DEFAULT_CURRENCY
) -> None:
    """Print an early-payoff projection next to the original term."""
    print("Early payoff")
    print("-" * 72)
    print(f"Months to payoff   : {result.months_to_payoff}")
    months_saved = loan_term_months - result.months_to_payoff
    if months_saved > 0:
        print(f"Term reduction     : {months_saved} months")
    print(f"Payoff date        : {result.payoff_date.strftime(DATE_FORMAT)}")
    print(f"Interest saved     : {format_currency(result.interest_saved, currency)}")
    print(f"New total cost     : {format_currency(result.new_total_cost, currency)}")
    if not result.converged:
        print("Warning            : simulation stopped before the balance reached zero")
    print("-" * 72)


def print_comparison(s1: LoanSummary, s2: LoanSummary) -> None:
    """Print a comparison of two loan summaries side by side.

    The difference column is scenario2 - scenario1, so a negative difference
    means the second scenario is cheaper.
    """
    print("Comparison")
    print("=" * 72)
    keys = [
        "monthly_payment",
        "total_payment",
        "total_interest",
    ]
    print(f"{'Metric':20s} {'Scenario1':>15s} {'Scenario2':>15s} {'Difference':>15s}")
    for key in keys:
        v1 = getattr(s1, key)
        v2 = getattr(s2, key)
        diff = v2 - v1
        print(f"{key:20s} {v1:15.2f} {v2:15.2f} {diff:15.2f}")
    print("=" * 72)


def _csv_row(row: MonthlyPayment) -> List[str]:
    return [
        str(row.month),
        row.due_date.strftime(DATE_FORMAT),
        f"{round_money(row.principal_payment):.2f}",
        f"{round_money(row.interest_payment):.2f}",
        f"{round_money(row.total_payment):.2f}",
        f"{round_money(row.remaining_balance):.2f}",
    ]


def schedule_to_csv(schedule: Iterable[MonthlyPayment]) -> str:
    """Render a schedule as CSV text with a header row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for row in schedule:
        writer.writerow(_csv_row(row))
    return buffer.getvalue()


def _money(value: Decimal) -> float:
    return float(round_money(value))


def serialize_schedule(schedule: Iterable[MonthlyPayment]) -> List[Dict[str, Any]]:
    """Convert schedule rows into JSON-serialisable dictionaries."""
    serialized = []
    for row in schedule:
        serialized.append(
            {
                "month": row.month,
                "due_date": row.due_date.strftime(DATE_FORMAT),
                "principal_payment": _money(row.principal_payment),
                "interest_payment": _money(row.interest_payment),
                "total_payment": _money(row.total_payment),
                "remaining_balance": _money(row.remaining_balance),
            }
        )
    return serialized


def serialize_summary(summary: LoanSummary) -> Dict[str, Any]:
    return {
        "monthly_payment": float(summary.monthly_payment),
        "total_payment": float(summary.total_payment),
        "total_interest": float(summary.total_interest),
        "effective_interest_rate": float(summary.effective_interest_rate),
    }


def serialize_early_payoff(result: EarlyPayoffResult) -> Dict[str, Any]:
    return {
        "months_to_payoff": result.months_to_payoff,
        "interest_saved": float(result.interest_saved),
        "new_total_cost": float(result.new_total_cost),
        "converged": result.converged,
        "payoff_date": result.payoff_date.strftime(DATE_FORMAT),
    }


def serialize_progress(progress: PaymentProgress) -> Dict[str, Any]:
    return {
        "payments_made": progress.payments_made,
        "total_payments": progress.total_payments,
        "principal_paid": _money(progress.principal_paid),
        "interest_paid": _money(progress.interest_paid),
        "remaining_balance": _money(progress.remaining_balance),
    }
