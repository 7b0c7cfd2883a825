"""
Report Formatter Package

Turns a profile into JSON, CSV, PDF or a chat webhook message.
"""

from finanzmanager.exports.artifacts import (
    ExportArtifact,
    ExportFormat,
    build_export,
)
from finanzmanager.exports.csv_export import CSV_HEADER, profile_to_csv
from finanzmanager.exports.discord_embed import build_embed_payload
from finanzmanager.exports.formatting import (
    export_filename,
    format_currency,
    format_signed_amount,
    report_filename,
)
from finanzmanager.exports.json_export import (
    ImportFormatError,
    merge_import,
    parse_import_payload,
    profile_to_json,
)
from finanzmanager.exports.pdf_export import (
    PdfReport,
    build_pdf_content,
    profile_to_pdf,
)

__all__ = [
    "CSV_HEADER",
    "ExportArtifact",
    "ExportFormat",
    "ImportFormatError",
    "PdfReport",
    "build_embed_payload",
    "build_export",
    "build_pdf_content",
    "export_filename",
    "format_currency",
    "format_signed_amount",
    "merge_import",
    "parse_import_payload",
    "profile_to_csv",
    "profile_to_json",
    "profile_to_pdf",
    "report_filename",
]
