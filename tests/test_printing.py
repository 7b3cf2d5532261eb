"""Tests for printable HTML documents and the preview surface."""

from datetime import datetime

import pytest

from hotel_ledger_reports.domain.labels import default_columns, report_title
from hotel_ledger_reports.domain.reports import LedgerRow, ReportSummary, ReportVariant
from hotel_ledger_reports.exceptions import PreviewError
from hotel_ledger_reports.services.printing import (
    PreviewSurface,
    PrintArtifactBuilder,
    PrintMeta,
    text_direction,
)


def _meta(language: str = "en", **kwargs) -> PrintMeta:
    return PrintMeta(
        title=report_title(ReportVariant.ACCOUNT_STATEMENT, language),
        columns=default_columns(ReportVariant.ACCOUNT_STATEMENT, language),
        language=language,
        generated_at=datetime(2025, 3, 31, 9, 30),
        **kwargs,
    )


class TestPrintArtifactBuilder:
    def test_english_document_is_ltr(self, ledger_rows) -> None:
        summary = ReportSummary(total_debit=450.0, total_credit=120.5, net_balance=329.5)

        artifact = PrintArtifactBuilder().to_printable(ledger_rows, summary, _meta())

        assert artifact.direction == "ltr"
        assert artifact.title == "Account Statement"
        assert '<html lang="en" dir="ltr">' in artifact.html
        assert "<h1>Account Statement</h1>" in artifact.html
        assert "Refund, partial" in artifact.html
        assert "329.50" in artifact.html
        assert "Net Balance" in artifact.html
        assert "text-align: left" in artifact.html

    def test_arabic_document_is_rtl(self, ledger_rows) -> None:
        artifact = PrintArtifactBuilder().to_printable(
            ledger_rows, None, _meta("ar", account="11 - النقدية", currency="SAR")
        )

        assert artifact.direction == "rtl"
        assert 'dir="rtl"' in artifact.html
        assert "كشف حساب" in artifact.html
        assert "<bdi>11 - النقدية</bdi>" in artifact.html
        assert "text-align: right" in artifact.html
        # Dates stay left-to-right inside the RTL table
        assert '<td dir="ltr">2025-03-01</td>' in artifact.html

    def test_meta_header_lists_filters(self, ledger_rows) -> None:
        meta = _meta(start_date="2025-03-01", end_date="2025-03-31", currency="SAR")

        html = PrintArtifactBuilder().to_printable(ledger_rows, None, meta).html

        assert "Start Date: <bdi>2025-03-01</bdi>" in html
        assert "End Date: <bdi>2025-03-31</bdi>" in html
        assert "Generated: <bdi>2025-03-31 09:30</bdi>" in html
        assert "Account:" not in html

    def test_no_summary_means_no_footer(self, ledger_rows) -> None:
        html = PrintArtifactBuilder().to_printable(ledger_rows, None, _meta()).html

        assert 'class="footer"' not in html

    def test_empty_report_shows_placeholder(self) -> None:
        html = PrintArtifactBuilder().to_printable([], ReportSummary.zero(), _meta()).html

        assert "No records found" in html
        assert 'colspan="9"' in html

    def test_cell_content_is_escaped(self) -> None:
        row = LedgerRow(
            id="1",
            date="2025-03-01",
            type="Journal",
            number="JV-1",
            description="<script>alert(1)</script>",
            debit=0.0,
            credit=0.0,
            balance=0.0,
        )

        html = PrintArtifactBuilder().to_printable([row], None, _meta()).html

        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_text_direction(self) -> None:
        assert text_direction("ar") == "rtl"
        assert text_direction("en") == "ltr"


class TestPreviewSurface:
    @pytest.fixture
    def artifact(self, ledger_rows):
        return PrintArtifactBuilder().to_printable(ledger_rows, None, _meta())

    def test_load_publishes_resource(self, artifact, tmp_path) -> None:
        surface = PreviewSurface(directory=tmp_path / "previews")

        resource = surface.load(artifact)

        assert surface.is_open
        assert resource.path.exists()
        assert resource.path.read_text(encoding="utf-8") == artifact.html
        assert resource.url.startswith("file://")

    def test_print_invokes_handler_with_url(self, artifact, tmp_path) -> None:
        printed = []
        surface = PreviewSurface(directory=tmp_path, print_handler=printed.append)

        resource = surface.load(artifact)
        surface.print()

        assert printed == [resource.url]

    def test_print_without_resource_raises(self, tmp_path) -> None:
        surface = PreviewSurface(directory=tmp_path, print_handler=lambda url: None)

        with pytest.raises(PreviewError):
            surface.print()

    def test_close_revokes_resource(self, artifact, tmp_path) -> None:
        surface = PreviewSurface(directory=tmp_path)
        resource = surface.load(artifact)

        surface.close()

        assert not surface.is_open
        assert resource.revoked
        assert not resource.path.exists()
        with pytest.raises(PreviewError):
            resource.url

    def test_loading_again_revokes_previous(self, artifact, tmp_path) -> None:
        surface = PreviewSurface(directory=tmp_path)

        first = surface.load(artifact)
        second = surface.load(artifact)

        assert first.revoked
        assert not first.path.exists()
        assert second.path.exists()
        assert list(tmp_path.glob("print-preview-*.html")) == [second.path]

    def test_context_manager_closes(self, artifact, tmp_path) -> None:
        with PreviewSurface(directory=tmp_path) as surface:
            resource = surface.load(artifact)

        assert resource.revoked
        assert list(tmp_path.iterdir()) == []

    def test_revoke_is_idempotent(self, artifact, tmp_path) -> None:
        resource = artifact.publish(tmp_path)

        resource.revoke()
        resource.revoke()

        assert resource.revoked
