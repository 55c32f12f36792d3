# Core reusable components for stock reconciliation
# These patterns can be reused for any pair of stock extracts

from .config import Settings
from .errors import (
    StockReconciliationError,
    UnreadableExtractError,
    EmptyExtractError,
    MissingColumnError,
    BriefUnavailableError,
)
from .parsers import HeaderResolver, QuantityParser, find_header, clean_text
from .quality import DataQualityReport, DataQualityChecker
from .reconciliation import StockExtract, StockReconciler, ReconciliationResult
from .analysis import (
    summarize_by_centro,
    build_chart_data,
    build_difference_report,
    top_discrepancies,
    compute_key_metrics,
)
from .report import ExcelReportWriter
from .insights import InsightGenerator, DiscrepancyBrief

__all__ = [
    "Settings",
    "StockReconciliationError",
    "UnreadableExtractError",
    "EmptyExtractError",
    "MissingColumnError",
    "BriefUnavailableError",
    "HeaderResolver",
    "QuantityParser",
    "find_header",
    "clean_text",
    "DataQualityReport",
    "DataQualityChecker",
    "StockExtract",
    "StockReconciler",
    "ReconciliationResult",
    "summarize_by_centro",
    "build_chart_data",
    "build_difference_report",
    "top_discrepancies",
    "compute_key_metrics",
    "ExcelReportWriter",
    "InsightGenerator",
    "DiscrepancyBrief",
]
