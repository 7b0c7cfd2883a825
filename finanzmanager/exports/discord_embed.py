"""
Chat webhook report (Discord embed format).

The report uses the same filtered view as the screen: the month filter
applies to both the summary and the entry list. The list shows at most
the `limit` newest entries.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from finanzmanager.exports.formatting import (
    format_currency,
    format_number,
    format_signed_amount,
)
from finanzmanager.models.ledger import Profile, Summary, Transaction
from finanzmanager.queries.engine import derive_view, recent_entries


COLOR_PROFIT = 3066993   # green
COLOR_LOSS = 15158332    # red
EMPTY_LIST_PLACEHOLDER = "_Keine Einträge vorhanden_"


def format_entry_line(entry: Transaction) -> str:
    return f"📅 {entry.date} **{entry.description}**: {format_signed_amount(entry)}"


def format_summary_block(summary: Summary, tax_rate: float) -> str:
    return (
        f">>> Einnahmen: **{format_currency(summary.income)}**\n"
        f"Ausgaben: **{format_currency(summary.expense)}**\n"
        f"Steuer ({format_number(tax_rate)}%): **{format_currency(summary.tax)}**\n"
        f"**Gewinn: {format_currency(summary.net)}**"
    )


def format_timestamp(moment: datetime) -> str:
    """ISO 8601 in UTC with millisecond precision and a Z suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    utc = moment.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_embed_payload(
    profile: Profile,
    now: Optional[datetime] = None,
    limit: int = 15,
) -> dict[str, Any]:
    """Build the JSON body posted to the webhooks."""
    now = now or datetime.now(timezone.utc)
    view = derive_view(profile)
    summary = view.summary

    lines = "\n".join(format_entry_line(e) for e in recent_entries(view, limit))

    return {
        "embeds": [{
            "title": f"📊 Finanzbericht: {profile.name}",
            "color": COLOR_PROFIT if summary.net >= 0 else COLOR_LOSS,
            "fields": [
                {"name": "Verantwortlich", "value": profile.responsible or "Nicht angegeben", "inline": True},
                {"name": "Steuernummer", "value": profile.tax_id or "N/A", "inline": True},
                {"name": "Monat", "value": profile.month_filter or "Gesamtzeitraum", "inline": True},
                {"name": "Zusammenfassung", "value": format_summary_block(summary, profile.tax_rate)},
                {"name": "Letzte Einträge", "value": lines or EMPTY_LIST_PLACEHOLDER},
            ],
            "timestamp": format_timestamp(now),
        }]
    }
