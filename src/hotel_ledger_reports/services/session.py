"""Reports-screen state machine.

ReportSession plays the host screen: it owns the mutable ReportFilter, drives
ReportQuery -> aggregation -> table/export/print, and turns every engine error
into a user-visible message instead of letting it escape.

    IDLE -> VALIDATING -> QUERYING -> AGGREGATING -> RENDERED
    RENDERED -> EXPORTING -> IDLE
    RENDERED -> PRINTING_PREPARING -> PRINTING_PREVIEW -> IDLE

Queries are tagged with a monotonically increasing request id. A response is
applied only if its id is still the latest one issued, whatever order the
responses arrive in.
"""

from __future__ import annotations

import asyncio
import dataclasses
from collections.abc import Sequence
from datetime import date
from enum import Enum
from typing import Any

from hotel_ledger_reports.domain.accounts import FlatAccountOption
from hotel_ledger_reports.domain.artifacts import (
    ExportArtifact,
    ExportEncoding,
    PreviewResource,
)
from hotel_ledger_reports.domain.labels import default_columns, report_title
from hotel_ledger_reports.domain.reports import (
    Column,
    ReportFilter,
    ReportResult,
    ReportSummary,
    ReportVariant,
)
from hotel_ledger_reports.exceptions import HotelLedgerReportsError
from hotel_ledger_reports.logging_config import LogContext, get_logger
from hotel_ledger_reports.services.account_tree import flatten
from hotel_ledger_reports.services.aggregation import normalize
from hotel_ledger_reports.services.export import ExportFormatter, ExportOptions
from hotel_ledger_reports.services.printing import (
    PreviewSurface,
    PrintArtifactBuilder,
    PrintMeta,
)
from hotel_ledger_reports.services.report_query import ReportQuery

logger = get_logger(__name__)


class ScreenState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    QUERYING = "querying"
    AGGREGATING = "aggregating"
    RENDERED = "rendered"
    EXPORTING = "exporting"
    PRINTING_PREPARING = "printing:preparing"
    PRINTING_PREVIEW = "printing:preview"


class ReportSession:
    def __init__(
        self,
        query: ReportQuery,
        *,
        language: str = "ar",
        report_filter: ReportFilter | None = None,
        columns: Sequence[Column] | None = None,
        page_size: int = 10,
        debounce_seconds: float = 0.4,
        formatter: ExportFormatter | None = None,
        builder: PrintArtifactBuilder | None = None,
        preview: PreviewSurface | None = None,
    ) -> None:
        self._query = query
        self.language = language
        self.filter = report_filter or ReportFilter()
        self._columns = list(columns) if columns is not None else None
        self.page_size = page_size
        self.debounce_seconds = debounce_seconds
        self._formatter = formatter or ExportFormatter()
        self._builder = builder or PrintArtifactBuilder()
        self.preview = preview or PreviewSurface()

        self.state = ScreenState.IDLE
        self.result = ReportResult.empty()
        self.page = 1
        self.error_message: str | None = None
        self.account_options: list[FlatAccountOption] = []
        self._latest_request = 0
        self._debounce_task: asyncio.Task[Any] | None = None

    @property
    def variant(self) -> ReportVariant:
        return self._query.variant

    @property
    def columns(self) -> list[Column]:
        if self._columns is not None:
            return self._columns
        return default_columns(self.variant, self.language)

    @property
    def summary(self) -> ReportSummary:
        return self.result.summary or ReportSummary.zero()

    def _snapshot(self) -> ReportFilter:
        return dataclasses.replace(self.filter, extra=dict(self.filter.extra))

    def _fail(self, error: HotelLedgerReportsError, *, clear_rows: bool) -> None:
        logger.warning(
            "report_action_failed",
            variant=self.variant.value,
            state=self.state.value,
            error=error.error_code,
            message=error.message,
        )
        self.error_message = error.message
        if clear_rows:
            self.result = ReportResult(
                summary=ReportSummary.zero() if self.variant.is_ledger else None
            )
        self.state = ScreenState.IDLE

    def dismiss_error(self) -> None:
        self.error_message = None

    async def load_account_options(self) -> list[FlatAccountOption]:
        """Fetch the chart of accounts and flatten it for the active language."""
        try:
            tree = await self._query.fetch_account_tree()
        except HotelLedgerReportsError as e:
            self._fail(e, clear_rows=False)
            return self.account_options
        self.account_options = flatten(tree, self.language)
        return self.account_options

    async def search(self, page: int = 1) -> ReportResult | None:
        """Run the paginated query for the current filter.

        Returns the applied result, or None when the query failed or was
        superseded by a newer one before it resolved.
        """
        self._latest_request += 1
        request_id = self._latest_request
        self.error_message = None

        with LogContext(variant=self.variant.value, request_id=request_id):
            self.state = ScreenState.VALIDATING
            snapshot = self._snapshot()
            try:
                self._query.validate(snapshot)
            except HotelLedgerReportsError as e:
                self._fail(e, clear_rows=True)
                return None

            self.state = ScreenState.QUERYING
            try:
                raw = await self._query.run(snapshot, page, self.page_size)
            except HotelLedgerReportsError as e:
                if request_id != self._latest_request:
                    logger.info("stale_failure_discarded")
                    return None
                self._fail(e, clear_rows=True)
                return None

            if request_id != self._latest_request:
                logger.info("stale_result_discarded", latest=self._latest_request)
                return None

            self.state = ScreenState.AGGREGATING
            self.result = normalize(raw, self.variant)
            self.page = page
            self.state = ScreenState.RENDERED
            logger.info(
                "report_rendered",
                rows=len(self.result.rows),
                total_records=self.result.total_records,
            )
            return self.result

    def schedule_search(self, page: int = 1) -> asyncio.Task[ReportResult | None]:
        """Debounced search for keystroke-driven filters.

        Each call cancels the previously scheduled one, so only the last edit
        inside the debounce window reaches the ledger source.
        """
        if self._debounce_task is not None and not self._debounce_task.done():
            self._debounce_task.cancel()

        async def delayed() -> ReportResult | None:
            await asyncio.sleep(self.debounce_seconds)
            return await self.search(page)

        self._debounce_task = asyncio.get_running_loop().create_task(delayed())
        return self._debounce_task

    async def _fetch_full_extent(self, snapshot: ReportFilter) -> ReportResult:
        raw = await self._query.run(snapshot)
        return normalize(raw, self.variant)

    async def export(
        self,
        encoding: ExportEncoding = ExportEncoding.UTF8_BOM,
        generated_on: date | None = None,
    ) -> ExportArtifact | None:
        """Fetch every row for the current filter and serialize it."""
        self.error_message = None
        snapshot = self._snapshot()
        self.state = ScreenState.EXPORTING
        try:
            full = await self._fetch_full_extent(snapshot)
            options = ExportOptions(
                encoding=encoding,
                slug=self.variant.value,
                language=self.language,
                generated_on=generated_on or date.today(),
            )
            artifact = self._formatter.to_delimited(
                full.rows, full.summary, self.columns, options
            )
        except HotelLedgerReportsError as e:
            self._fail(e, clear_rows=False)
            return None
        self.state = ScreenState.IDLE
        return artifact

    def _account_label(self, account_id: str) -> str:
        for option in self.account_options:
            if option.id == account_id:
                # drop the "- " indent, one per depth level
                return option.label[2 * option.depth :]
        return account_id

    async def open_print_preview(self) -> PreviewResource | None:
        """Build the printable document and load it into the preview surface."""
        self.error_message = None
        snapshot = self._snapshot()
        self.state = ScreenState.PRINTING_PREPARING
        try:
            full = await self._fetch_full_extent(snapshot)
            meta = PrintMeta(
                title=report_title(self.variant, self.language),
                columns=self.columns,
                language=self.language,
                start_date=snapshot.start_date,
                end_date=snapshot.end_date,
                account=self._account_label(snapshot.account),
                currency=snapshot.currency,
            )
            artifact = self._builder.to_printable(full.rows, full.summary, meta)
            resource = self.preview.load(artifact)
        except HotelLedgerReportsError as e:
            self._fail(e, clear_rows=False)
            return None
        self.state = ScreenState.PRINTING_PREVIEW
        return resource

    def print_preview(self) -> None:
        self.preview.print()

    def close_preview(self) -> None:
        self.preview.close()
        self.state = ScreenState.IDLE
