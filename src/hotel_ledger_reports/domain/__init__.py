from hotel_ledger_reports.domain.accounts import AccountNode, FlatAccountOption
from hotel_ledger_reports.domain.artifacts import (
    ExportArtifact,
    ExportEncoding,
    PreviewResource,
    PrintArtifact,
)
from hotel_ledger_reports.domain.reports import (
    BaladyRow,
    Column,
    LedgerRow,
    RawReport,
    ReportFilter,
    ReportResult,
    ReportSummary,
    ReportVariant,
)

__all__ = [
    "AccountNode",
    "BaladyRow",
    "Column",
    "ExportArtifact",
    "ExportEncoding",
    "FlatAccountOption",
    "LedgerRow",
    "PreviewResource",
    "PrintArtifact",
    "RawReport",
    "ReportFilter",
    "ReportResult",
    "ReportSummary",
    "ReportVariant",
]
