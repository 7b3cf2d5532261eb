from hotel_ledger_reports.services.account_tree import flatten
from hotel_ledger_reports.services.aggregation import derive_summary, normalize
from hotel_ledger_reports.services.export import ExportFormatter, ExportOptions
from hotel_ledger_reports.services.printing import (
    PreviewSurface,
    PrintArtifactBuilder,
    PrintMeta,
)
from hotel_ledger_reports.services.report_query import ReportQuery
from hotel_ledger_reports.services.session import ReportSession, ScreenState

__all__ = [
    "ExportFormatter",
    "ExportOptions",
    "PreviewSurface",
    "PrintArtifactBuilder",
    "PrintMeta",
    "ReportQuery",
    "ReportSession",
    "ScreenState",
    "derive_summary",
    "flatten",
    "normalize",
]
