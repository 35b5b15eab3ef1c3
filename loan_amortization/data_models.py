"""Data models for the amortization engine.

This module defines dataclasses representing the entities exchanged with the
engine: the loan terms supplied by the caller, individual schedule rows and
the aggregate results derived from them. All records are immutable; they are
computed on demand and carry no identity.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from .utils import to_decimal


class InvalidLoanTerms(ValueError):
    """Raised when loan terms cannot describe a repayable loan."""


@dataclass(frozen=True)
class LoanTerms:
    """Principal, nominal annual rate and term of a fixed-rate loan.

    Attributes
    ----------
    principal: Decimal
        The amount borrowed. Must be positive.
    annual_interest_rate: Decimal
        Nominal annual interest rate in percent (``5`` means 5 %). Must not
        be negative; there is no upper bound.
    loan_term_months: int
        Number of monthly payments. Must be at least one.

    Numeric inputs may be given as ``int``, ``float``, ``str`` or
    ``Decimal``; they are converted and validated on construction so that
    the engine functions can rely on well-formed terms.
    """

    principal: Decimal
    annual_interest_rate: Decimal
    loan_term_months: int

    def __post_init__(self) -> None:
        try:
            principal = to_decimal(self.principal)
            rate = to_decimal(self.annual_interest_rate)
        except ValueError as exc:
            raise InvalidLoanTerms(str(exc)) from exc
        term = self.loan_term_months
        if isinstance(term, bool) or not isinstance(term, int):
            raise InvalidLoanTerms(f"Loan term must be a whole number of months; got {term!r}")
        if term < 1:
            raise InvalidLoanTerms(f"Loan term must be at least one month; got {term}")
        if rate < 0:
            raise InvalidLoanTerms(f"Annual interest rate must not be negative; got {rate}")
        if principal <= 0:
            raise InvalidLoanTerms(f"Principal must be positive; got {principal}")
        object.__setattr__(self, "principal", principal)
        object.__setattr__(self, "annual_interest_rate", rate)

    @property
    def monthly_rate(self) -> Decimal:
        """Periodic rate as a fraction, ``annual_interest_rate / 100 / 12``."""
        return self.annual_interest_rate / Decimal(100) / Decimal(12)


@dataclass(frozen=True)
class MonthlyPayment:
    """One row of an amortization schedule.

    ``principal_payment + interest_payment == total_payment`` and
    ``remaining_balance`` never drops below zero. The last row of a schedule
    always has a zero balance.
    """

    month: int
    due_date: date
    principal_payment: Decimal
    interest_payment: Decimal
    total_payment: Decimal
    remaining_balance: Decimal


@dataclass(frozen=True)
class LoanSummary:
    """Aggregate figures for a loan, rounded to cents.

    ``effective_interest_rate`` echoes the nominal annual rate.
    """

    monthly_payment: Decimal
    total_payment: Decimal
    total_interest: Decimal
    effective_interest_rate: Decimal


@dataclass(frozen=True)
class PaymentBreakdown:
    principal: Decimal
    interest: Decimal


@dataclass(frozen=True)
class EarlyPayoffResult:
    """Outcome of paying a fixed extra amount every month.

    Attributes
    ----------
    months_to_payoff: int
        Number of simulated payments.
    interest_saved: Decimal
        Interest of the standard schedule minus the simulated interest.
    new_total_cost: Decimal
        Principal plus the simulated interest.
    converged: bool
        ``True`` when the balance reached zero; ``False`` when the simulation
        stopped at its iteration cap with a balance still outstanding.
    payoff_date: date
        Due date of the last simulated payment.
    """

    months_to_payoff: int
    interest_saved: Decimal
    new_total_cost: Decimal
    converged: bool
    payoff_date: date


@dataclass(frozen=True)
class PaymentProgress:
    """Totals over the payments already made on a schedule."""

    payments_made: int
    total_payments: int
    principal_paid: Decimal
    interest_paid: Decimal
    remaining_balance: Decimal
