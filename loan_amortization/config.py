"""Shared constants for the amortization engine and its front ends."""

# Upper bound on simulated periods in an early-payoff projection (50 years).
EARLY_PAYOFF_MAX_ITERATIONS = 600

# Amounts below half a cent left over after a payment are treated as paid off.
RESIDUAL_BALANCE_THRESHOLD = "0.005"

DEFAULT_CURRENCY = "USD"

CURRENCY_SYMBOLS = {
    "USD": "$",
    "PHP": "₱",
    "EUR": "€",
    "GBP": "£",
}

DATE_FORMAT = "%Y-%m-%d"

# Column order of the downloadable schedule.
CSV_HEADERS = [
    "Month",
    "Due Date",
    "Principal",
    "Interest",
    "Total Payment",
    "Remaining Balance",
]

# Rows printed to the terminal before the schedule is truncated.
MAX_PRINTED_ROWS = 120
