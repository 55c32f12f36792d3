"""
Excel workbook writer for reconciliation results.
"""

import base64
import io
import logging
from pathlib import Path

import pandas as pd

from core.reconciliation import ReconciliationResult

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "analisis_stock.xlsx"
XLSX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

ANALYSIS_SHEET = "Análisis de Stock"
SHRINKAGE_SHEET = "Merma (Z42)"
EXPIRY_SHEET = "Vencimiento (Z44)"


class ExcelReportWriter:
    """
    Writes the analysis workbook.

    The analysis sheet is always present (header only when empty); the
    shrinkage and expiry sheets are only added when they have rows.
    """

    def __init__(self, engine: str = "openpyxl"):
        self.engine = engine

    def sheets(self, result: ReconciliationResult) -> dict[str, pd.DataFrame]:
        sheets = {ANALYSIS_SHEET: result.analysis_report}
        if len(result.shrinkage_report) > 0:
            sheets[SHRINKAGE_SHEET] = result.shrinkage_report
        if len(result.expiry_report) > 0:
            sheets[EXPIRY_SHEET] = result.expiry_report
        return sheets

    def write(self, result: ReconciliationResult, target) -> None:
        """Write the workbook to a path or a binary file object."""
        with pd.ExcelWriter(target, engine=self.engine) as writer:
            for name, frame in self.sheets(result).items():
                frame.to_excel(writer, sheet_name=name, index=False)
        if isinstance(target, (str, Path)):
            logger.info("Workbook written to %s", target)

    def to_bytes(self, result: ReconciliationResult) -> bytes:
        buffer = io.BytesIO()
        self.write(result, buffer)
        return buffer.getvalue()

    def to_base64(self, result: ReconciliationResult) -> str:
        return base64.b64encode(self.to_bytes(result)).decode("ascii")
