"""Normalization of ledger source payloads into typed rows and totals.

The ledger source is loosely typed: rows may arrive nested under ``legs``
next to summary fields, wrapped in a ``data``/``results`` envelope, or as a
bare list. Decoding tries the nested shape first and falls back to a flat
row array. Shape mismatches and unparsable amounts never raise; a report
with partially malformed data still renders.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from hotel_ledger_reports.domain.reports import (
    BaladyRow,
    LedgerRow,
    RawReport,
    ReportResult,
    ReportSummary,
    ReportVariant,
)
from hotel_ledger_reports.logging_config import get_logger

logger = get_logger(__name__)

_DEBIT_KEYS = ("debit", "total_debit", "totalDebit")
_CREDIT_KEYS = ("credit", "total_credit", "totalCredit")
_BALANCE_KEYS = ("balance", "net_balance", "netBalance")


def to_amount(value: Any) -> float:
    """Coerce an upstream amount to float; anything unparsable becomes 0.0."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        # thousands separators
        value = value.replace(",", "").strip()
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(amount) or math.isinf(amount):
        return 0.0
    return amount


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _first_present(container: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in container and container[key] not in (None, ""):
            return container[key]
    return None


def unwrap_payload(payload: Any) -> tuple[list[Any], Mapping[str, Any] | None]:
    """Split a raw payload into (row items, summary container or None)."""
    if isinstance(payload, Mapping):
        inner = payload.get("data")
        if isinstance(inner, Mapping) and isinstance(inner.get("legs"), list):
            payload = inner
        if isinstance(payload.get("legs"), list):
            return list(payload["legs"]), payload
        for key in ("data", "results"):
            if isinstance(payload.get(key), list):
                return list(payload[key]), None
        return [], None
    if isinstance(payload, list):
        return list(payload), None
    return [], None


def to_ledger_row(item: Mapping[str, Any], position: int) -> LedgerRow:
    raw_id = item.get("id")
    return LedgerRow(
        id=_text(raw_id) if raw_id not in (None, "") else f"leg-{position}",
        date=_text(item.get("date")),
        type=_text(item.get("type_display") or item.get("type")),
        number=_text(item.get("number")),
        description=_text(item.get("description")),
        debit=to_amount(item.get("debit")),
        credit=to_amount(item.get("credit")),
        balance=to_amount(item.get("balance")),
        payment_method=_text(
            item.get("payment_method_display")
            or item.get("payment_method")
            or item.get("category")
        ),
    )


def to_balady_row(item: Mapping[str, Any], position: int) -> BaladyRow:
    raw_id = item.get("id")
    row_id = _text(raw_id) if raw_id not in (None, "") else f"row-{position}"
    return BaladyRow(
        id=row_id,
        contract_number=_text(item.get("contract_number") or row_id),
        guest_name=_text(item.get("guest_name")),
        national_id=_text(item.get("guest_id_number") or "-"),
        mobile=_text(item.get("guest_phone") or "-"),
        check_in=_text(item.get("check_in_date")),
        check_out=_text(item.get("check_out_date")),
        unit_number=_text(item.get("apartment_name")),
        contract_date=_text(item.get("created_at")),
    )


def derive_summary(rows: list[LedgerRow]) -> ReportSummary:
    """Sum debit and credit locally. No rounding here; round when presenting."""
    total_debit = math.fsum(row.debit for row in rows)
    total_credit = math.fsum(row.credit for row in rows)
    return ReportSummary(
        total_debit=total_debit,
        total_credit=total_credit,
        net_balance=total_debit - total_credit,
    )


def _summary_from_source(
    container: Mapping[str, Any], rows: list[LedgerRow]
) -> ReportSummary | None:
    debit = _first_present(container, _DEBIT_KEYS)
    credit = _first_present(container, _CREDIT_KEYS)
    balance = _first_present(container, _BALANCE_KEYS)
    if debit is None and credit is None and balance is None:
        return None

    derived = derive_summary(rows)
    total_debit = to_amount(debit) if debit is not None else derived.total_debit
    total_credit = to_amount(credit) if credit is not None else derived.total_credit
    net_balance = (
        to_amount(balance) if balance is not None else total_debit - total_credit
    )
    return ReportSummary(
        total_debit=total_debit, total_credit=total_credit, net_balance=net_balance
    )


def normalize(
    raw: RawReport | Any, variant: ReportVariant = ReportVariant.ACCOUNT_STATEMENT
) -> ReportResult:
    """Turn a raw source answer into rows (in source order) and a summary.

    Ledger variants always get a summary: the source's when it supplies one,
    otherwise a locally derived one. Other variants carry no summary.
    """
    if not isinstance(raw, RawReport):
        raw = RawReport(payload=raw)

    items, container = unwrap_payload(raw.payload)
    skipped = 0
    rows: list[Any] = []
    for position, item in enumerate(items, start=1):
        if not isinstance(item, Mapping):
            skipped += 1
            continue
        if variant.is_ledger:
            rows.append(to_ledger_row(item, position))
        elif variant is ReportVariant.BALADY:
            rows.append(to_balady_row(item, position))
        else:
            rows.append(dict(item))

    if skipped:
        logger.warning("malformed_rows_skipped", variant=variant.value, count=skipped)

    summary: ReportSummary | None = None
    if variant.is_ledger:
        summary = _summary_from_source(container, rows) if container else None
        if summary is None:
            summary = derive_summary(rows)
            logger.debug("ledger_summary_derived", rows=len(rows))

    total = raw.total_records if raw.total_records is not None else len(rows)
    return ReportResult(rows=tuple(rows), summary=summary, total_records=total)
