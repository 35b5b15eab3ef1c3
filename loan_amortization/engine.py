"""Core calculation engine for the amortization calculator.

This module implements the financial logic for fixed-rate, equal-installment
(annuity) loans: the monthly payment, the period-by-period schedule, summary
figures, point queries against the schedule and early-payoff projections.
Every function is pure; schedules are rebuilt on each call and nothing is
cached between calls.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from itertools import islice
from typing import Iterator, List, Optional, Sequence, Tuple

from .config import EARLY_PAYOFF_MAX_ITERATIONS, RESIDUAL_BALANCE_THRESHOLD
from .data_models import (
    EarlyPayoffResult,
    LoanSummary,
    LoanTerms,
    MonthlyPayment,
    PaymentBreakdown,
    PaymentProgress,
)
from .utils import Number, add_months, round_money, to_decimal

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def calculate_monthly_payment(terms: LoanTerms) -> Decimal:
    """Return the constant monthly payment for a loan.

    The formula is:

        payment = P * (r * (1 + r)^n) / ((1 + r)^n - 1)

    where ``P`` is the principal, ``r`` is the monthly interest rate and
    ``n`` is the number of payments. When the interest rate is zero, the
    payment is exactly ``P / n``. The result is not rounded.
    """
    if terms.annual_interest_rate == 0:
        return terms.principal / Decimal(terms.loan_term_months)
    rate = terms.monthly_rate
    factor = (1 + rate) ** terms.loan_term_months
    return terms.principal * (rate * factor) / (factor - 1)


def generate_amortization_schedule(
    terms: LoanTerms, start_date: Optional[date] = None
) -> List[MonthlyPayment]:
    """Build the full amortization schedule for a loan.

    Parameters
    ----------
    terms: LoanTerms
        The loan to amortize.
    start_date: date, optional
        The date the loan starts; defaults to today. Each payment falls due
        one calendar month after the previous one, so a day rolled over at a
        month end stays rolled over (Jan 31, Mar 3, Apr 3, ...).

    Returns
    -------
    List[MonthlyPayment]
        One row per month, ``terms.loan_term_months`` rows in total. The last
        row pays off whatever balance remains so that it ends at exactly zero.
    """
    start = start_date or date.today()
    monthly_payment = calculate_monthly_payment(terms)
    rate = terms.monthly_rate

    schedule: List[MonthlyPayment] = []
    balance = terms.principal
    due_date = start
    for month in range(1, terms.loan_term_months + 1):
        due_date = add_months(due_date, 1)
        interest_payment = balance * rate
        if month == terms.loan_term_months:
            # Last payment clears the balance left by accumulated drift
            principal_payment = balance
        else:
            principal_payment = max(ZERO, monthly_payment - interest_payment)
        balance = max(ZERO, balance - principal_payment)
        schedule.append(
            MonthlyPayment(
                month=month,
                due_date=due_date,
                principal_payment=principal_payment,
                interest_payment=interest_payment,
                total_payment=principal_payment + interest_payment,
                remaining_balance=balance,
            )
        )

    logger.debug(
        "Generated %d-month schedule for principal %s at %s%%",
        terms.loan_term_months,
        terms.principal,
        terms.annual_interest_rate,
    )
    return schedule


def calculate_loan_summary(terms: LoanTerms) -> LoanSummary:
    """Return the monthly payment, total paid and total interest, rounded to cents."""
    monthly_payment = calculate_monthly_payment(terms)
    total_payment = monthly_payment * terms.loan_term_months
    total_interest = total_payment - terms.principal
    return LoanSummary(
        monthly_payment=round_money(monthly_payment),
        total_payment=round_money(total_payment),
        total_interest=round_money(total_interest),
        effective_interest_rate=terms.annual_interest_rate,
    )


def calculate_remaining_balance(terms: LoanTerms, payments_completed: int) -> Decimal:
    """Return the balance reported by schedule row ``payments_completed``.

    The index is 0-based into the schedule, so the value is the balance left
    once the payment numbered ``payments_completed + 1`` has been made. Any
    count at or beyond the term, or below zero, yields zero.
    """
    if payments_completed >= terms.loan_term_months or payments_completed < 0:
        return ZERO
    schedule = generate_amortization_schedule(terms)
    return schedule[payments_completed].remaining_balance


def get_payment_breakdown(terms: LoanTerms, payment_number: int) -> PaymentBreakdown:
    """Split a payment (1-based) into principal and interest.

    Payment numbers outside the schedule give a zero breakdown instead of
    raising.
    """
    if payment_number < 1 or payment_number > terms.loan_term_months:
        return PaymentBreakdown(principal=ZERO, interest=ZERO)
    payment = generate_amortization_schedule(terms)[payment_number - 1]
    return PaymentBreakdown(principal=payment.principal_payment, interest=payment.interest_payment)


def calculate_payoff_date(terms: LoanTerms, start_date: Optional[date] = None) -> date:
    """Return the due date of the final scheduled payment."""
    schedule = generate_amortization_schedule(terms, start_date)
    return schedule[-1].due_date


def _accelerated_payments(
    balance: Decimal, rate: Decimal, payment: Decimal
) -> Iterator[Tuple[Decimal, Decimal]]:
    """Yield ``(interest, balance)`` for each month paying ``payment``.

    The generator stops once the balance is cleared. If the payment does not
    cover the interest it never stops, so callers must bound it.
    """
    threshold = Decimal(RESIDUAL_BALANCE_THRESHOLD)
    while balance > 0:
        interest = balance * rate
        balance -= min(balance, payment - interest)
        if balance.copy_abs() < threshold:
            balance = ZERO
        yield interest, balance


def calculate_early_payoff(
    terms: LoanTerms,
    extra_monthly_payment: Number,
    start_date: Optional[date] = None,
    max_iterations: int = EARLY_PAYOFF_MAX_ITERATIONS,
) -> EarlyPayoffResult:
    """Project the effect of paying ``extra_monthly_payment`` on top of every installment.

    The loan is re-amortized month by month, charging interest on the
    shrinking balance, until it is paid off or ``max_iterations`` months have
    been simulated. ``converged`` on the result tells the two cases apart.
    """
    extra = to_decimal(extra_monthly_payment)
    if extra < 0:
        raise ValueError(f"Extra monthly payment must not be negative; got {extra}")
    if max_iterations < 1:
        raise ValueError(f"max_iterations must be positive; got {max_iterations}")

    payment = calculate_monthly_payment(terms) + extra
    months = 0
    total_interest = ZERO
    balance = terms.principal
    payoff_date = start_date or date.today()
    periods = _accelerated_payments(terms.principal, terms.monthly_rate, payment)
    for interest, balance in islice(periods, max_iterations):
        total_interest += interest
        months += 1
        payoff_date = add_months(payoff_date, 1)

    converged = balance <= 0
    if not converged:
        logger.warning(
            "Early payoff simulation stopped after %d months with %s outstanding",
            months,
            round_money(balance),
        )

    standard = calculate_loan_summary(terms)
    return EarlyPayoffResult(
        months_to_payoff=months,
        interest_saved=round_money(standard.total_interest - total_interest),
        new_total_cost=round_money(terms.principal + total_interest),
        converged=converged,
        payoff_date=payoff_date,
    )


def calculate_payment_progress(schedule: Sequence[MonthlyPayment], paid_up_to_month: int) -> PaymentProgress:
    """Summarize the first ``paid_up_to_month`` payments of a schedule.

    The count is clamped to the schedule length. With no payments made the
    remaining balance is the principal the schedule started from.
    """
    paid = max(0, min(paid_up_to_month, len(schedule)))
    rows = schedule[:paid]
    if rows:
        remaining = rows[-1].remaining_balance
    elif schedule:
        remaining = schedule[0].remaining_balance + schedule[0].principal_payment
    else:
        remaining = ZERO
    return PaymentProgress(
        payments_made=paid,
        total_payments=len(schedule),
        principal_paid=sum((row.principal_payment for row in rows), ZERO),
        interest_paid=sum((row.interest_payment for row in rows), ZERO),
        remaining_balance=remaining,
    )
