"""
Downloadable export artifacts.

Wraps the individual formatters into (filename, bytes, mime type)
bundles the UI can hand straight to a download button.
"""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from finanzmanager.exports.csv_export import profile_to_csv
from finanzmanager.exports.formatting import export_filename, report_filename
from finanzmanager.exports.json_export import profile_to_json
from finanzmanager.exports.pdf_export import profile_to_pdf
from finanzmanager.models.ledger import Profile


class ExportFormat(str, Enum):
    JSON = "json"
    CSV = "csv"
    PDF = "pdf"


class ExportArtifact(BaseModel):
    filename: str
    content: bytes
    mime_type: str


def build_export(
    profile: Profile,
    export_format: ExportFormat,
    today: Optional[date] = None,
) -> ExportArtifact:
    """
    Render a profile in the requested format.

    `today` names the JSON/CSV files and dates the PDF. File names use the
    UTC date, the PDF prints the local date.
    """
    if export_format == ExportFormat.JSON:
        day = today or datetime.now(timezone.utc).date()
        return ExportArtifact(
            filename=export_filename(profile.name, "json", day),
            content=profile_to_json(profile).encode("utf-8"),
            mime_type="application/json",
        )
    if export_format == ExportFormat.CSV:
        day = today or datetime.now(timezone.utc).date()
        return ExportArtifact(
            filename=export_filename(profile.name, "csv", day),
            content=profile_to_csv(profile).encode("utf-8"),
            mime_type="text/csv",
        )
    if export_format == ExportFormat.PDF:
        return ExportArtifact(
            filename=report_filename(profile.name),
            content=profile_to_pdf(profile, today),
            mime_type="application/pdf",
        )
    raise ValueError(f"Unsupported export format: {export_format}")
