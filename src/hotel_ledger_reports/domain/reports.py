"""Report filter, row and summary models shared by every report screen."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any


class ReportVariant(str, Enum):
    """The report screens served by the engine."""

    ACCOUNT_STATEMENT = "account_statement"
    FUND_MOVEMENT = "fund_movement"
    BALADY = "balady"
    DAILY_BOOKINGS = "daily_bookings"

    @property
    def is_ledger(self) -> bool:
        return self in (ReportVariant.ACCOUNT_STATEMENT, ReportVariant.FUND_MOVEMENT)

    @property
    def required_fields(self) -> tuple[str, ...]:
        if self.is_ledger:
            return ("account", "currency")
        return ()


@dataclass
class ReportFilter:
    """Filter values owned and mutated by the invoking screen.

    Dates are ISO calendar strings; start <= end is left to the caller.
    """

    account: str = ""
    currency: str = ""
    start_date: str = ""
    end_date: str = ""
    created_by: str = ""
    reservation: str = ""
    account_type: str = ""
    payment_method: str = ""
    extra: dict[str, str] = field(default_factory=dict)

    @classmethod
    def current_month(cls, today: date | None = None, **kwargs: Any) -> ReportFilter:
        """First of the month through today, the statement screen's default window."""
        today = today or date.today()
        return cls(
            start_date=today.replace(day=1).isoformat(),
            end_date=today.isoformat(),
            **kwargs,
        )


@dataclass(frozen=True, slots=True)
class LedgerRow:
    """A normalized ledger leg with numeric amounts."""

    id: str
    date: str
    type: str
    number: str
    description: str
    debit: float
    credit: float
    balance: float
    payment_method: str = ""


@dataclass(frozen=True, slots=True)
class BaladyRow:
    """One tenancy contract line of the Balady regulatory report."""

    id: str
    contract_number: str
    guest_name: str
    national_id: str
    mobile: str
    check_in: str
    check_out: str
    unit_number: str
    contract_date: str


@dataclass(frozen=True, slots=True)
class ReportSummary:
    """Debit/credit totals for a ledger report.

    Values are stored unrounded; use `rounded()` when presenting.
    """

    total_debit: float = 0.0
    total_credit: float = 0.0
    net_balance: float = 0.0

    @classmethod
    def zero(cls) -> ReportSummary:
        return cls()

    def rounded(self) -> ReportSummary:
        return ReportSummary(
            total_debit=round(self.total_debit, 2),
            total_credit=round(self.total_credit, 2),
            net_balance=round(self.net_balance, 2),
        )


@dataclass(frozen=True, slots=True)
class RawReport:
    """What the ledger source answered for one query, before normalization."""

    payload: Any
    total_records: int | None = None


@dataclass(frozen=True, slots=True)
class ReportResult:
    """Normalized rows plus summary, ready for a table, an export or a print."""

    rows: tuple[Any, ...] = ()
    summary: ReportSummary | None = None
    total_records: int = 0

    @classmethod
    def empty(cls) -> ReportResult:
        return cls()


@dataclass(frozen=True, slots=True)
class Column:
    """One exported/printed column.

    `key` is looked up on each row (attribute or mapping key). The special key
    `#` yields the 1-based row position.
    """

    key: str
    title: str
    numeric: bool = False

    def value_for(self, row: Any, position: int) -> Any:
        if self.key == "#":
            return position
        if isinstance(row, Mapping):
            value = row.get(self.key)
        else:
            value = getattr(row, self.key, None)
        if isinstance(value, Mapping):
            # Daily booking rows nest guest/apartment objects
            value = value.get("name") or value.get("id")
        return "" if value is None else value
