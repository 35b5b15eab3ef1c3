"""Command-line interface for the amortization engine.

This module uses the ``click`` library to implement a multi-command
interface. Users can view a loan summary, print or export the full
amortization schedule, project an early payoff, query a single payment or
the outstanding balance, and compare two loan scenarios.
"""

from __future__ import annotations

import json
import logging
import shlex
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import click

from .config import EARLY_PAYOFF_MAX_ITERATIONS, MAX_PRINTED_ROWS
from .data_models import InvalidLoanTerms, LoanTerms
from .engine import (
    calculate_early_payoff,
    calculate_loan_summary,
    calculate_payment_progress,
    calculate_remaining_balance,
    generate_amortization_schedule,
    get_payment_breakdown,
)
from .formatter import (
    format_currency,
    print_comparison,
    print_early_payoff,
    print_progress,
    print_schedule,
    print_summary,
    schedule_to_csv,
    serialize_progress,
    serialize_schedule,
    serialize_summary,
)
from .utils import parse_date, to_decimal


def parse_amount(value: str) -> Decimal:
    """Parse a numeric string with optional suffixes.

    Accepts plain numbers ("500000", "12,500.50") and shorthand with
    ``k``/``m`` suffixes (e.g., "500k" meaning 500_000).
    """
    value = value.strip().lower().replace(",", "")
    factor = Decimal(1)
    if value.endswith("k"):
        factor = Decimal(1_000)
        value = value[:-1]
    elif value.endswith("m"):
        factor = Decimal(1_000_000)
        value = value[:-1]
    try:
        return to_decimal(value) * factor
    except ValueError:
        raise click.BadParameter(f"Invalid amount: {value}")


def build_terms_from_options(principal: str, rate: float, term: int) -> LoanTerms:
    try:
        return LoanTerms(parse_amount(principal), to_decimal(rate), term)
    except InvalidLoanTerms as exc:
        raise click.BadParameter(str(exc))


def parse_start_date(start_date: Optional[str]) -> date:
    if not start_date:
        return date.today()
    try:
        return parse_date(start_date)
    except ValueError as exc:
        raise click.BadParameter(str(exc))


def loan_options(func: Callable) -> Callable:
    """Attach the options describing a loan to a command."""
    func = click.option("--term", "-t", "term", required=True, type=int, help="Loan term in months")(func)
    func = click.option("--rate", "-r", "rate", required=True, type=float, help="Annual interest rate (percent)")(func)
    func = click.option("--principal", "-p", "principal", required=True, help="Loan amount")(func)
    return func


def start_date_option(func: Callable) -> Callable:
    return click.option(
        "--start-date", "-s", "start_date", help="Loan start date (YYYY-MM-DD or YYYY-MM); defaults to today"
    )(func)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """A command-line loan amortization calculator."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@loan_options
@click.option("--output", "output", type=str, help="Output file path (.json)")
def summary(principal: str, rate: float, term: int, output: Optional[str]) -> None:
    """Compute and print the summary metrics for a loan."""
    terms = build_terms_from_options(principal, rate, term)
    summary_data = calculate_loan_summary(terms)
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Summary export must use .json extension")
        with path.open("w", encoding="utf-8") as f:
            json.dump({"summary": serialize_summary(summary_data)}, f, indent=2)
        click.echo(f"Summary exported to {path}")
    else:
        print_summary(summary_data)


@cli.command()
@loan_options
@start_date_option
@click.option("--paid", "paid", type=int, help="Number of payments already made")
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def schedule(
    principal: str,
    rate: float,
    term: int,
    start_date: Optional[str],
    paid: Optional[int],
    output: Optional[str],
) -> None:
    """Compute and print the full amortization schedule."""
    terms = build_terms_from_options(principal, rate, term)
    schedule_entries = generate_amortization_schedule(terms, parse_start_date(start_date))
    summary_data = calculate_loan_summary(terms)
    progress = calculate_payment_progress(schedule_entries, paid) if paid is not None else None
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            data: Dict[str, Any] = {
                "summary": serialize_summary(summary_data),
                "schedule": serialize_schedule(schedule_entries),
            }
            if progress is not None:
                data["progress"] = serialize_progress(progress)
            with path.open("w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        elif path.suffix.lower() == ".csv":
            with path.open("w", newline="", encoding="utf-8") as f:
                f.write(schedule_to_csv(schedule_entries))
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv")
        click.echo(f"Schedule exported to {path}")
        return

    print_summary(summary_data)
    if progress is not None:
        print_progress(progress)
    # Limit schedule length printed to avoid flooding the terminal
    if len(schedule_entries) > MAX_PRINTED_ROWS:
        click.echo(f"Schedule has {len(schedule_entries)} rows; showing first {MAX_PRINTED_ROWS} rows.")
        print_schedule(schedule_entries[:MAX_PRINTED_ROWS])
    else:
        print_schedule(schedule_entries)


@cli.command()
@loan_options
@start_date_option
@click.option("--extra", "extra", required=True, help="Extra amount paid every month")
@click.option(
    "--max-iterations",
    "max_iterations",
    type=click.IntRange(min=1),
    default=EARLY_PAYOFF_MAX_ITERATIONS,
    show_default=True,
    help="Maximum number of months to simulate",
)
def payoff(
    principal: str,
    rate: float,
    term: int,
    start_date: Optional[str],
    extra: str,
    max_iterations: int,
) -> None:
    """Project an early payoff from a fixed extra monthly payment."""
    terms = build_terms_from_options(principal, rate, term)
    extra_amount = parse_amount(extra)
    if extra_amount < 0:
        raise click.BadParameter("Extra payment must not be negative")
    result = calculate_early_payoff(terms, extra_amount, parse_start_date(start_date), max_iterations)
    print_early_payoff(result, terms.loan_term_months)


@cli.command()
@loan_options
@click.option("--payment", "payment_number", required=True, type=int, help="Payment number (1-based)")
def breakdown(principal: str, rate: float, term: int, payment_number: int) -> None:
    """Show how one payment splits between principal and interest."""
    terms = build_terms_from_options(principal, rate, term)
    split = get_payment_breakdown(terms, payment_number)
    click.echo(f"Payment {payment_number}")
    click.echo(f"Principal          : {format_currency(split.principal)}")
    click.echo(f"Interest           : {format_currency(split.interest)}")


@cli.command()
@loan_options
@click.option("--paid", "paid", required=True, type=int, help="Number of payments completed")
def balance(principal: str, rate: float, term: int, paid: int) -> None:
    """Print the outstanding balance reported for a number of completed payments."""
    terms = build_terms_from_options(principal, rate, term)
    remaining = calculate_remaining_balance(terms, paid)
    click.echo(f"Remaining balance  : {format_currency(remaining)}")


def parse_scenario_opts(opts: str) -> Dict[str, Any]:
    """Map a quoted option string such as ``"-p 500k -r 3.5 -t 360"`` to loan options."""
    tokens = shlex.split(opts)
    params: Dict[str, Any] = {"principal": None, "rate": None, "term": None}
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if i + 1 >= len(tokens):
            raise click.BadParameter(f"Missing value for {token} in scenario")
        value = tokens[i + 1]
        try:
            if token in ("-p", "--principal"):
                params["principal"] = value
            elif token in ("-r", "--rate"):
                params["rate"] = float(value)
            elif token in ("-t", "--term"):
                params["term"] = int(value)
            else:
                raise click.BadParameter(f"Unknown option in scenario: {token}")
        except ValueError:
            raise click.BadParameter(f"Invalid value for {token} in scenario: {value}")
        i += 2
    for required in ("principal", "rate", "term"):
        if params[required] is None:
            raise click.BadParameter(f"Scenario missing required option {required}")
    return params


@cli.command()
@click.option("--scenario1", "scenario1", required=True, help="First scenario options quoted string")
@click.option("--scenario2", "scenario2", required=True, help="Second scenario options quoted string")
def compare(scenario1: str, scenario2: str) -> None:
    """Compare two loan scenarios.

    Scenarios are provided as quoted option strings, for example:

        loan-amortize compare --scenario1 "-p 500k -r 3.5 -t 360" --scenario2 "-p 500k -r 3.2 -t 300"
    """
    terms1 = build_terms_from_options(**parse_scenario_opts(scenario1))
    terms2 = build_terms_from_options(**parse_scenario_opts(scenario2))
    print_comparison(calculate_loan_summary(terms1), calculate_loan_summary(terms2))


if __name__ == "__main__":
    cli()
