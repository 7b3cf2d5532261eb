"""Filtered, paginated or full-extent queries against the ledger source."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx

from hotel_ledger_reports.api_client import APIError, ReportsAPIClient
from hotel_ledger_reports.domain.reports import RawReport, ReportFilter, ReportVariant
from hotel_ledger_reports.exceptions import (
    InvalidPaginationError,
    MalformedResponseError,
    MissingFilterFieldError,
    SourceError,
)
from hotel_ledger_reports.logging_config import get_logger

logger = get_logger(__name__)

# ReportFilter attribute -> query parameter, per variant
_PARAM_MAP: dict[ReportVariant, tuple[tuple[str, str], ...]] = {
    ReportVariant.ACCOUNT_STATEMENT: (
        ("account", "account"),
        ("currency", "currency"),
        ("start_date", "start_date"),
        ("end_date", "end_date"),
        ("created_by", "created_by"),
        ("reservation", "reservation"),
    ),
    ReportVariant.BALADY: (
        ("start_date", "check_in_date__gte"),
        ("end_date", "check_out_date__lte"),
    ),
    ReportVariant.DAILY_BOOKINGS: (
        ("reservation", "number"),
        ("start_date", "check_in_date"),
        ("end_date", "check_out_date"),
    ),
}
_PARAM_MAP[ReportVariant.FUND_MOVEMENT] = _PARAM_MAP[
    ReportVariant.ACCOUNT_STATEMENT
] + (
    ("account_type", "account_type"),
    ("payment_method", "payment_method"),
)


def _records_total(payload: Any) -> int | None:
    if not isinstance(payload, Mapping):
        return None
    for key in ("recordsFiltered", "recordsTotal"):
        value = payload.get(key)
        if value is None:
            continue
        try:
            return int(value)
        except (TypeError, ValueError):
            continue
    return None


class ReportQuery:
    """Builds the canonical parameter set for one report variant and fetches it.

    Stateless between calls: the filter is read, never mutated. Source failures
    surface as SourceError and are not retried.
    """

    def __init__(
        self,
        client: ReportsAPIClient,
        variant: ReportVariant,
        default_page_size: int = 10,
    ) -> None:
        self._client = client
        self._variant = variant
        self._default_page_size = default_page_size

    @property
    def variant(self) -> ReportVariant:
        return self._variant

    def validate(self, report_filter: ReportFilter) -> None:
        for field_name in self._variant.required_fields:
            value = getattr(report_filter, field_name, "")
            if not str(value or "").strip():
                raise MissingFilterFieldError(field_name, self._variant.value)

    def _pagination(
        self, page: int | None, page_size: int | None
    ) -> tuple[int, int] | None:
        if page is None and page_size is None:
            return None
        page = 1 if page is None else page
        page_size = self._default_page_size if page_size is None else page_size
        if page < 1 or page_size < 1:
            raise InvalidPaginationError(page, page_size)
        return (page - 1) * page_size, page_size

    def build_params(
        self,
        report_filter: ReportFilter,
        page: int | None = None,
        page_size: int | None = None,
    ) -> dict[str, str]:
        """Translate the filter to query parameters. Empty values are left out."""
        params: dict[str, str] = {}
        for attribute, param in _PARAM_MAP[self._variant]:
            value = str(getattr(report_filter, attribute, "") or "").strip()
            if value:
                params[param] = value
        for key, value in report_filter.extra.items():
            if value not in (None, ""):
                params.setdefault(key, str(value))

        window = self._pagination(page, page_size)
        if window is None:
            if self._variant is not ReportVariant.DAILY_BOOKINGS:
                params["is_export"] = "true"
        else:
            offset, length = window
            params["start"] = str(offset)
            params["length"] = str(length)
        return params

    async def _fetch(self, params: dict[str, str], full_extent: bool) -> Any:
        if self._variant.is_ledger:
            return await self._client.fetch_statement_account(params)
        if self._variant is ReportVariant.BALADY:
            return await self._client.fetch_balady(params)
        if full_extent:
            return await self._client.fetch_all_reservations_movements(params)
        return await self._client.fetch_daily_reservations_movements(params)

    async def run(
        self,
        report_filter: ReportFilter,
        page: int | None = None,
        page_size: int | None = None,
    ) -> RawReport:
        """Fetch one page, or the full extent when no pagination is given.

        Raises MissingFilterFieldError before any request when a required
        field is empty.
        """
        self.validate(report_filter)
        params = self.build_params(report_filter, page, page_size)
        full_extent = page is None and page_size is None

        logger.info(
            "report_query_started",
            variant=self._variant.value,
            full_extent=full_extent,
            params=params,
        )
        try:
            payload = await self._fetch(params, full_extent)
        except (APIError, httpx.HTTPError) as e:
            raise self._source_error("report_query_failed", e) from e

        return RawReport(payload=payload, total_records=_records_total(payload))

    async def fetch_account_tree(self) -> list[dict[str, Any]]:
        """Raw chart of accounts feeding the account selector."""
        try:
            return await self._client.fetch_account_tree()
        except (APIError, httpx.HTTPError) as e:
            raise self._source_error("account_tree_fetch_failed", e) from e

    def _source_error(self, event: str, error: Exception) -> SourceError:
        if isinstance(error, APIError):
            logger.warning(
                event,
                variant=self._variant.value,
                status_code=error.status_code,
                detail=error.detail,
            )
            if 200 <= error.status_code < 300:
                return MalformedResponseError(
                    error.detail, status_code=error.status_code
                )
            return SourceError(error.detail, status_code=error.status_code)
        logger.warning(event, variant=self._variant.value, error=str(error))
        return SourceError(f"Ledger source request failed: {error}")
