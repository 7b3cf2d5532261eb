from hotel_ledger_reports.domain.accounts import AccountNode, FlatAccountOption
from hotel_ledger_reports.domain.artifacts import (
    ExportArtifact,
    ExportEncoding,
    PrintArtifact,
)
from hotel_ledger_reports.domain.reports import (
    LedgerRow,
    ReportFilter,
    ReportSummary,
    ReportVariant,
)

__all__ = [
    "AccountNode",
    "ExportArtifact",
    "ExportEncoding",
    "FlatAccountOption",
    "LedgerRow",
    "PrintArtifact",
    "ReportFilter",
    "ReportSummary",
    "ReportVariant",
]

__version__ = "0.1.0"
