import logging
import os

from flask import Flask, Response, jsonify, request

from loan_amortization.data_models import LoanTerms
from loan_amortization.engine import (
    calculate_early_payoff,
    calculate_loan_summary,
    calculate_payment_progress,
    calculate_remaining_balance,
    generate_amortization_schedule,
    get_payment_breakdown,
)
from loan_amortization.formatter import (
    schedule_to_csv,
    serialize_early_payoff,
    serialize_progress,
    serialize_schedule,
    serialize_summary,
)
from loan_amortization.utils import parse_date, round_money, to_decimal

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config["MAX_TERM_MONTHS"] = int(os.environ.get("LOAN_API_MAX_TERM_MONTHS", "600"))


def _params() -> dict:
    """Merge query-string arguments with a JSON body, the body taking precedence."""
    params = request.args.to_dict()
    if request.is_json:
        body = request.get_json(silent=True)
        if isinstance(body, dict):
            params.update(body)
    return params


def _first(params: dict, *names: str):
    for name in names:
        value = params.get(name)
        if value is not None and value != "":
            return value
    raise ValueError(f"Missing required parameter: {names[0]}")


def _int_param(params: dict, *names: str) -> int:
    value = _first(params, *names)
    # JSON floats and booleans would otherwise be truncated by int()
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ValueError(f"{names[0]} must be a whole number; got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{names[0]} must be a whole number; got {value!r}") from exc


def _terms_from_params(params: dict) -> LoanTerms:
    term = _int_param(params, "loan_term_months", "term")
    max_term = app.config["MAX_TERM_MONTHS"]
    if term > max_term:
        raise ValueError(f"Loan term must not exceed {max_term} months; got {term}")
    return LoanTerms(
        principal=_first(params, "principal"),
        annual_interest_rate=_first(params, "annual_interest_rate", "rate"),
        loan_term_months=term,
    )


def _start_date(params: dict):
    value = params.get("start_date")
    return parse_date(str(value)) if value else None


@app.errorhandler(ValueError)
def handle_value_error(exc: ValueError):
    logger.warning("Rejected %s %s: %s", request.method, request.path, exc)
    return jsonify({"error": str(exc)}), 400


@app.route("/api/summary", methods=["GET", "POST"])
def summary():
    terms = _terms_from_params(_params())
    return jsonify(serialize_summary(calculate_loan_summary(terms)))


@app.route("/api/schedule", methods=["GET", "POST"])
def schedule():
    params = _params()
    terms = _terms_from_params(params)
    entries = generate_amortization_schedule(terms, _start_date(params))
    if params.get("format") == "csv":
        return Response(
            schedule_to_csv(entries),
            mimetype="text/csv",
            headers={"Content-Disposition": "attachment; filename=amortization-schedule.csv"},
        )
    payload = {
        "summary": serialize_summary(calculate_loan_summary(terms)),
        "schedule": serialize_schedule(entries),
    }
    if params.get("paid_up_to_month") is not None:
        progress = calculate_payment_progress(entries, _int_param(params, "paid_up_to_month"))
        payload["progress"] = serialize_progress(progress)
    return jsonify(payload)


@app.route("/api/early-payoff", methods=["GET", "POST"])
def early_payoff():
    params = _params()
    terms = _terms_from_params(params)
    extra = to_decimal(_first(params, "extra_monthly_payment", "extra"))
    result = calculate_early_payoff(terms, extra, _start_date(params))
    return jsonify(serialize_early_payoff(result))


@app.get("/api/breakdown")
def breakdown():
    params = _params()
    terms = _terms_from_params(params)
    split = get_payment_breakdown(terms, _int_param(params, "payment_number"))
    return jsonify({"principal": float(round_money(split.principal)), "interest": float(round_money(split.interest))})


@app.get("/api/remaining-balance")
def remaining_balance():
    params = _params()
    terms = _terms_from_params(params)
    remaining = calculate_remaining_balance(terms, _int_param(params, "payments_completed"))
    return jsonify({"remaining_balance": float(round_money(remaining))})


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    logger.info("Starting loan amortization API...")
    app.run(host="0.0.0.0", port=8710, debug=True)
