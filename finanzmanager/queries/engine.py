"""
Filtering & Summary Engine

DESIGN DECISION: Everything shown on screen or sent in a report is derived
from a profile by the functions below. They are pure: no I/O, no mutation
of the input, same output for the same (entries, month_filter, tax_rate).

Month filtering is a plain string-prefix test on the stored date string.
"2024-03" matches "2024-03-15" but not "2024-3-15". Dates are never
parsed, so entries with unusual date strings are kept as-is.
"""

from typing import Iterable, Sequence

from finanzmanager.models.ledger import (
    LedgerView,
    Profile,
    Summary,
    Transaction,
    TransactionType,
)


def filter_entries(
    entries: Iterable[Transaction],
    month_filter: str = "",
) -> list[Transaction]:
    """
    Entries whose date starts with month_filter, newest first.

    An empty filter keeps every entry. Sorting compares the raw date
    strings; entries with equal dates keep their insertion order.
    """
    matching = [e for e in entries if not month_filter or e.date.startswith(month_filter)]
    # sorted() is stable with reverse=True, ties stay in insertion order
    return sorted(matching, key=lambda e: e.date, reverse=True)


def compute_tax(income: float, expense: float, tax_rate: float) -> float:
    """Flat tax on the period's profit. Never negative."""
    return max(0.0, (income - expense) * tax_rate / 100)


def compute_summary(entries: Iterable[Transaction], tax_rate: float) -> Summary:
    """
    Reduce entries to income, expense, tax and net.

    net is always exactly income - expense - tax.
    """
    income = 0.0
    expense = 0.0
    for entry in entries:
        if entry.type == TransactionType.INCOME:
            income += entry.amount
        else:
            expense += entry.amount

    tax = compute_tax(income, expense, tax_rate)
    return Summary(
        income=income,
        expense=expense,
        tax=tax,
        net=income - expense - tax,
    )


def derive_view(profile: Profile) -> LedgerView:
    """Filtered entries of a profile plus the summary over that same set."""
    filtered = filter_entries(profile.entries, profile.month_filter)
    return LedgerView(
        filtered_entries=filtered,
        summary=compute_summary(filtered, profile.tax_rate),
    )


def overall_summary(profile: Profile) -> Summary:
    """Summary over all entries, ignoring the month filter (used by the PDF report)."""
    return compute_summary(profile.entries, profile.tax_rate)


def recent_entries(view: LedgerView, limit: int = 15) -> Sequence[Transaction]:
    """The newest `limit` entries of a view."""
    return view.filtered_entries[:limit]
