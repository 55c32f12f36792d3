"""
Command line entry point.

    stock-reconcile sap.xlsx wms.xlsx --adjustments ajustes.xlsx -o analisis_stock.xlsx
"""

import argparse
import logging
import sys
from pathlib import Path

from core.config import Settings
from core.errors import StockReconciliationError
from core.log import setup_logging
from core.report import DEFAULT_FILENAME
from sources.stock_analysis import generate_analysis_file

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Reconcile SAP stock against WMS stock and write an Excel report"
    )
    parser.add_argument("sap", type=Path, help="SAP stock extract (.xlsx or .csv)")
    parser.add_argument("wms", type=Path, help="WMS stock extract (.xlsx or .csv)")
    parser.add_argument(
        "--adjustments", type=Path, default=None, help="Optional SAP adjustments log"
    )
    parser.add_argument(
        "-o", "--output", type=Path, default=Path(DEFAULT_FILENAME), help="Workbook to write"
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default from env)")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()
    setup_logging(args.log_level or settings.log_level)

    try:
        output = generate_analysis_file(args.sap, args.wms, args.adjustments, settings)
    except StockReconciliationError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1

    args.output.write_bytes(output.file_bytes)
    logger.info("Report saved to %s", args.output)

    for key, value in output.result.summary().items():
        print(f"{key}: {value:,.2f}" if isinstance(value, float) else f"{key}: {value}")
    for report in output.quality_reports.values():
        for issue in report.issues:
            print(f"[{report.source_name}] {issue.column}: {issue.description}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
