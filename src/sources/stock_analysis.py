"""
End-to-end analysis: load the extracts, reconcile them, build the workbook.
"""

import base64
import logging
from dataclasses import dataclass, field

from core.config import Settings
from core.quality import DataQualityReport
from core.reconciliation import ReconciliationResult, StockReconciler
from core.report import ExcelReportWriter
from sources.sap_wms_client import SapWmsLoader

logger = logging.getLogger(__name__)


@dataclass
class AnalysisOutput:
    """Workbook plus the tables the dashboard renders."""

    file_bytes: bytes
    result: ReconciliationResult
    quality_reports: dict[str, DataQualityReport] = field(default_factory=dict)

    @property
    def file_b64(self) -> str:
        return base64.b64encode(self.file_bytes).decode("ascii")


def generate_analysis_file(
    sap, wms, adjustments=None, settings: Settings | None = None
) -> AnalysisOutput:
    """
    Reconcile SAP against WMS stock and build the analysis workbook.

    Args:
        sap: SAP stock extract (path, bytes or uploaded file)
        wms: WMS stock extract
        adjustments: Optional SAP adjustments log

    Raises:
        StockReconciliationError: unreadable files, empty extracts or
            missing required columns
    """
    settings = settings or Settings()
    extracts = SapWmsLoader(settings).load(sap, wms, adjustments)
    result = StockReconciler(settings).reconcile(
        extracts.sap, extracts.wms, extracts.adjustments
    )
    file_bytes = ExcelReportWriter().to_bytes(result)
    logger.info("Analysis workbook built (%d bytes)", len(file_bytes))

    return AnalysisOutput(
        file_bytes=file_bytes,
        result=result,
        quality_reports=extracts.quality_reports,
    )
