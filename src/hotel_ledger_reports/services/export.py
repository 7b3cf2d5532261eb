"""Delimited-text export of report rows for spreadsheet tools."""

from __future__ import annotations

import csv
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date
from io import StringIO
from typing import Any

from hotel_ledger_reports.domain.artifacts import ExportArtifact, ExportEncoding
from hotel_ledger_reports.domain.labels import label
from hotel_ledger_reports.domain.reports import Column, ReportSummary
from hotel_ledger_reports.exceptions import ExportEncodingError
from hotel_ledger_reports.logging_config import get_logger
from hotel_ledger_reports.services.aggregation import to_amount

logger = get_logger(__name__)

# (label key, summary attribute, column the figure sits under)
_SUMMARY_LINES = (
    ("total_debit", "total_debit", "debit"),
    ("total_credit", "total_credit", "credit"),
    ("net_balance", "net_balance", "balance"),
)


@dataclass(frozen=True, slots=True)
class ExportOptions:
    encoding: ExportEncoding = ExportEncoding.UTF8_BOM
    slug: str = "report"
    language: str = "ar"
    generated_on: date = field(default_factory=date.today)


def export_filename(slug: str, generated_on: date, extension: str) -> str:
    """`<slug>_<YYYY-MM-DD>.<ext>`"""
    safe_slug = re.sub(r"[^a-z0-9_-]+", "_", slug.lower()).strip("_") or "report"
    return f"{safe_slug}_{generated_on.isoformat()}.{extension}"


def format_cell(column: Column, row: Any, position: int) -> str:
    value = column.value_for(row, position)
    if column.key == "#":
        return str(value)
    if column.numeric:
        return f"{to_amount(value):.2f}"
    return str(value)


def _summary_anchor(columns: Sequence[Column], target_key: str) -> int:
    keys = [c.key for c in columns]
    if target_key in keys:
        return keys.index(target_key)
    numeric = [i for i, c in enumerate(columns) if c.numeric]
    return numeric[-1] if numeric else max(len(columns) - 1, 0)


def summary_rows(
    summary: ReportSummary, columns: Sequence[Column], language: str
) -> list[list[str]]:
    """Label/value rows, each value aligned under its column and its label just before."""
    width = max(len(columns), 2)
    presented = summary.rounded()
    rows: list[list[str]] = []
    for label_key, attribute, target_key in _SUMMARY_LINES:
        anchor = _summary_anchor(columns, target_key)
        cells = [""] * width
        value = f"{getattr(presented, attribute):.2f}"
        if anchor == 0:
            cells[0], cells[1] = label(label_key, language), value
        else:
            cells[anchor - 1] = label(label_key, language)
            cells[anchor] = value
        rows.append(cells)
    return rows


class ExportFormatter:
    """Serializes rows to CSV/TSV bytes under a caller-chosen encoding policy."""

    def render_text(
        self,
        rows: Sequence[Any],
        summary: ReportSummary | None,
        columns: Sequence[Column],
        options: ExportOptions,
    ) -> str:
        output = StringIO()
        writer = csv.writer(
            output,
            delimiter=options.encoding.delimiter,
            quotechar='"',
            quoting=csv.QUOTE_MINIMAL,
            lineterminator="\r\n",
        )

        writer.writerow([c.title for c in columns])
        for position, row in enumerate(rows, start=1):
            writer.writerow([format_cell(c, row, position) for c in columns])

        if summary is not None:
            writer.writerow([])
            writer.writerows(summary_rows(summary, columns, options.language))

        return output.getvalue()

    def to_delimited(
        self,
        rows: Sequence[Any],
        summary: ReportSummary | None,
        columns: Sequence[Column],
        options: ExportOptions | None = None,
    ) -> ExportArtifact:
        options = options or ExportOptions()
        text = self.render_text(rows, summary, columns, options)
        try:
            encoded = text.encode(options.encoding.codec)
        except UnicodeEncodeError as e:
            logger.error(
                "export_encoding_failed",
                encoding=options.encoding.value,
                reason=str(e),
            )
            raise ExportEncodingError(options.encoding.value, str(e)) from e

        artifact = ExportArtifact(
            content=options.encoding.bom + encoded,
            encoding=options.encoding,
            filename=export_filename(
                options.slug, options.generated_on, options.encoding.extension
            ),
            row_count=len(rows),
        )
        logger.info(
            "export_artifact_created",
            filename=artifact.filename,
            rows=len(rows),
            encoding=options.encoding.value,
            size=len(artifact.content),
        )
        return artifact
