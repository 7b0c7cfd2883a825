"""
Shared text formatting for exports and reports.

All money is rendered as "$" + exactly two decimals, e.g. "$1234.50",
"$-12.00". Amounts carry no thousands separator so reports can be parsed
back by simple tools.
"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from finanzmanager.models.ledger import Transaction, json_number


CURRENCY_SYMBOL = "$"
CENTS = Decimal("0.01")


def format_currency(value: float) -> str:
    """
    Format an amount as $<value with two decimals>.

    Ties round away from zero on the exact binary value: 3.625 -> $3.63.
    """
    # + 0.0 turns -0.0 into 0.0
    cents = Decimal(value + 0.0).quantize(CENTS, rounding=ROUND_HALF_UP)
    return f"{CURRENCY_SYMBOL}{cents}"


def format_signed_amount(entry: Transaction) -> str:
    """+$10.00 for income, -$10.00 for expenses."""
    sign = "+" if entry.is_income else "-"
    return f"{sign}{format_currency(entry.amount)}"


def format_number(value: float) -> str:
    """Shortest plain rendering of a number: 5.0 -> "5", 7.5 -> "7.5"."""
    return str(json_number(value))


def format_german_date(day: date) -> str:
    """German short date without zero padding, e.g. 1.3.2024."""
    return f"{day.day}.{day.month}.{day.year}"


def export_filename(profile_name: str, extension: str, day: date) -> str:
    """Export_<name>_<YYYY-MM-DD>.<ext>"""
    return f"Export_{profile_name}_{day.isoformat()}.{extension}"


def report_filename(profile_name: str) -> str:
    """Finanzbericht_<name>.pdf"""
    return f"Finanzbericht_{profile_name}.pdf"
