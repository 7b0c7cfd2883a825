"""
Finanz-Manager - Source Package

A local bookkeeping tool for small business entities ("profiles").
Entries are recorded per profile, summarized with a flat tax rate,
exported as JSON/CSV/PDF and posted to chat webhooks.

DESIGN PRINCIPLES:
1. Summaries are pure functions of the ledger
2. Every store change is persisted immediately
3. No failure is fatal - everything degrades to a status message
4. Every step is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Finanz-Manager Team"
