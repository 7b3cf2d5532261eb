"""Printable HTML documents and the preview-then-print surface.

The builder only prepares content. Publishing the document as an
addressable resource and invoking print are host actions driven through
PreviewSurface, which owns at most one live resource at a time.
"""

from __future__ import annotations

import webbrowser
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from jinja2 import BaseLoader, Environment, select_autoescape

from hotel_ledger_reports.domain.artifacts import PreviewResource, PrintArtifact
from hotel_ledger_reports.domain.labels import label
from hotel_ledger_reports.domain.reports import Column, ReportSummary
from hotel_ledger_reports.exceptions import PreviewError
from hotel_ledger_reports.logging_config import get_logger
from hotel_ledger_reports.services.export import format_cell

logger = get_logger(__name__)

RTL_LANGUAGES = frozenset({"ar"})

PRINT_TEMPLATE = """<!DOCTYPE html>
<html lang="{{ language }}" dir="{{ direction }}">
<head>
<meta charset="UTF-8">
<title>{{ title }}</title>
<style>
  body { font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif; padding: 20px; color: #1e293b; }
  .header { text-align: center; margin-bottom: 30px; border-bottom: 2px solid #e2e8f0; padding-bottom: 20px; }
  .header h1 { margin: 0; color: #0f172a; font-size: 24px; }
  .meta { margin-top: 10px; font-size: 14px; color: #64748b; }
  .meta span + span::before { content: " | "; }
  table { width: 100%; border-collapse: collapse; margin-top: 20px; font-size: 12px; }
  th, td { border: 1px solid #e2e8f0; padding: 10px; text-align: {{ align }}; }
  th { background-color: #f8fafc; font-weight: 600; color: #475569; }
  tr:nth-child(even) { background-color: #f8fafc; }
  .amount { font-family: 'Courier New', monospace; font-weight: 600; }
  .empty { text-align: center; color: #64748b; }
  .footer { margin-top: 30px; border-top: 2px solid #e2e8f0; padding-top: 20px; }
  .summary-grid { display: flex; justify-content: flex-end; gap: 40px; }
  .summary-item { text-align: center; }
  .summary-label { display: block; font-size: 12px; color: #64748b; margin-bottom: 4px; }
  .summary-value { font-size: 16px; font-weight: bold; color: #0f172a; }
  @media print { .header { margin-bottom: 10px; } }
</style>
</head>
<body>
  <div class="header">
    <h1>{{ title }}</h1>
    <div class="meta">
      {% for item in meta_items %}<span>{{ item.label }}: <bdi>{{ item.value }}</bdi></span>{% endfor %}
    </div>
  </div>
  <table>
    <thead>
      <tr>{% for column in columns %}<th>{{ column.title }}</th>{% endfor %}</tr>
    </thead>
    <tbody>
      {% for cells in body %}
      <tr>{% for cell in cells %}<td{% if cell.numeric %} class="amount"{% endif %}{% if cell.ltr %} dir="ltr"{% endif %}>{{ cell.text }}</td>{% endfor %}</tr>
      {% else %}
      <tr><td class="empty" colspan="{{ columns|length }}">{{ no_rows }}</td></tr>
      {% endfor %}
    </tbody>
  </table>
  {% if summary %}
  <div class="footer">
    <div class="summary-grid">
      {% for item in summary %}
      <div class="summary-item">
        <span class="summary-label">{{ item.label }}</span>
        <span class="summary-value">{{ item.value }}</span>
      </div>
      {% endfor %}
    </div>
  </div>
  {% endif %}
</body>
</html>
"""

# Dates and identifiers keep left-to-right order inside RTL documents
_LTR_KEYS = {
    "date",
    "number",
    "check_in",
    "check_out",
    "check_in_date",
    "check_out_date",
    "contract_date",
    "mobile",
    "national_id",
}


@dataclass(frozen=True, slots=True)
class PrintMeta:
    """Header information for a printed report."""

    title: str
    columns: Sequence[Column]
    language: str = "ar"
    start_date: str = ""
    end_date: str = ""
    account: str = ""
    currency: str = ""
    generated_at: datetime = field(default_factory=datetime.now)


def text_direction(language: str) -> str:
    return "rtl" if language in RTL_LANGUAGES else "ltr"


class PrintArtifactBuilder:
    """Renders report rows into a self-contained, style-embedded HTML document."""

    def __init__(self) -> None:
        env = Environment(loader=BaseLoader(), autoescape=select_autoescape())
        self._template = env.from_string(PRINT_TEMPLATE)

    def _meta_items(self, meta: PrintMeta) -> list[dict[str, str]]:
        items = []
        for key in ("start_date", "end_date", "account", "currency"):
            value = getattr(meta, key)
            if value:
                items.append({"label": label(key, meta.language), "value": value})
        items.append(
            {
                "label": label("generated_at", meta.language),
                "value": meta.generated_at.strftime("%Y-%m-%d %H:%M"),
            }
        )
        return items

    def to_printable(
        self,
        rows: Sequence[Any],
        summary: ReportSummary | None,
        meta: PrintMeta,
    ) -> PrintArtifact:
        direction = text_direction(meta.language)
        body = [
            [
                {
                    "text": format_cell(column, row, position),
                    "numeric": column.numeric,
                    "ltr": column.key in _LTR_KEYS,
                }
                for column in meta.columns
            ]
            for position, row in enumerate(rows, start=1)
        ]
        summary_items = None
        if summary is not None:
            presented = summary.rounded()
            summary_items = [
                {
                    "label": label(key, meta.language),
                    "value": f"{getattr(presented, key):.2f}",
                }
                for key in ("total_debit", "total_credit", "net_balance")
            ]

        html = self._template.render(
            title=meta.title,
            language=meta.language,
            direction=direction,
            align="right" if direction == "rtl" else "left",
            meta_items=self._meta_items(meta),
            columns=meta.columns,
            body=body,
            summary=summary_items,
            no_rows=label("no_rows", meta.language),
        )
        logger.info(
            "print_artifact_created",
            title=meta.title,
            rows=len(rows),
            direction=direction,
        )
        return PrintArtifact(
            html=html, title=meta.title, language=meta.language, direction=direction
        )


class PreviewSurface:
    """Isolated preview of one print artifact at a time.

    Loading a new artifact revokes the previous resource; closing revokes the
    current one. Printing is delegated to a host-supplied handler.
    """

    def __init__(
        self,
        directory: Path | None = None,
        print_handler: Callable[[str], Any] | None = None,
    ) -> None:
        self._directory = directory
        self._print_handler = print_handler or webbrowser.open
        self._resource: PreviewResource | None = None

    @property
    def resource(self) -> PreviewResource | None:
        return self._resource

    @property
    def is_open(self) -> bool:
        return self._resource is not None

    def load(self, artifact: PrintArtifact) -> PreviewResource:
        self.close()
        if self._directory is not None:
            self._directory.mkdir(parents=True, exist_ok=True)
        self._resource = artifact.publish(self._directory)
        logger.info("preview_resource_created", path=str(self._resource.path))
        return self._resource

    def print(self) -> None:
        if self._resource is None:
            raise PreviewError("Nothing is loaded in the preview surface")
        logger.info("preview_print_requested", path=str(self._resource.path))
        self._print_handler(self._resource.url)

    def close(self) -> None:
        if self._resource is None:
            return
        self._resource.revoke()
        logger.info("preview_resource_revoked", path=str(self._resource.path))
        self._resource = None

    def __enter__(self) -> PreviewSurface:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
