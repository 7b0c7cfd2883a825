"""
CSV export of a profile's ledger.

Format:
    Datum,Beschreibung,Betrag,Typ
    "2024-03-01","Beratung",100,"Einnahme"

Text fields are always double-quoted and embedded quotes are doubled
(RFC 4180). The amount is written unquoted in its shortest numeric form.
Rows follow the profile's natural entry order; no month filter is applied.
"""

from finanzmanager.exports.formatting import format_number
from finanzmanager.models.ledger import Profile, Transaction


CSV_HEADER = "Datum,Beschreibung,Betrag,Typ"


def _quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def entry_to_csv_row(entry: Transaction) -> str:
    return ",".join([
        _quote(entry.date),
        _quote(entry.description),
        format_number(entry.amount),
        _quote(entry.type.value),
    ])


def profile_to_csv(profile: Profile) -> str:
    """Header plus one line per entry, each terminated by a newline."""
    lines = [CSV_HEADER]
    lines.extend(entry_to_csv_row(entry) for entry in profile.entries)
    return "\n".join(lines) + "\n"
