"""Filtering and summary package."""

from finanzmanager.queries.engine import (
    compute_summary,
    compute_tax,
    derive_view,
    filter_entries,
    overall_summary,
    recent_entries,
)

__all__ = [
    "compute_summary",
    "compute_tax",
    "derive_view",
    "filter_entries",
    "overall_summary",
    "recent_entries",
]
