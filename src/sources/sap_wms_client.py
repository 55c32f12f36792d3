"""
Client-specific data loader for the SAP / WMS stock extracts.

THIS FILE CONTAINS CLIENT-SPECIFIC LOGIC:
- Which column roles each export must provide
- The validation messages shown to the ops team
- The quality checks that matter for their exports

To adapt for a new client:
1. Update the role tables (SAP_ROLES, WMS_ROLES, ADJUSTMENT_ROLES)
2. Adjust the required roles and messages in _validate()
3. The core parsers, reconciler and report writer can be reused as-is
"""

import base64
import binascii
import io
import logging
from dataclasses import dataclass, field
from pathlib import Path

import pandas as pd

from core.config import Settings
from core.errors import EmptyExtractError, MissingColumnError, UnreadableExtractError
from core.parsers import (
    AREA_SYNONYMS,
    CENTRO_SYNONYMS,
    LOCATION_SYNONYMS,
    MOVEMENT_CLASS_SYNONYMS,
    PRODUCT_NAME_SYNONYMS,
    QTY_SYNONYMS,
    SKU_SYNONYMS,
    WAREHOUSE_SYNONYMS,
    HeaderResolver,
)
from core.quality import DataQualityChecker, DataQualityReport
from core.reconciliation import StockExtract

logger = logging.getLogger(__name__)

UNREADABLE_MESSAGE = (
    "Could not parse one of the Excel files. Ensure they are valid .xlsx format."
)

SAP_ROLES = {
    "sku": SKU_SYNONYMS,
    "qty": QTY_SYNONYMS,
    "centro": CENTRO_SYNONYMS,
    "name": PRODUCT_NAME_SYNONYMS,
    "warehouse": WAREHOUSE_SYNONYMS,
}
WMS_ROLES = {
    "sku": SKU_SYNONYMS,
    "qty": QTY_SYNONYMS,
    "area": AREA_SYNONYMS,
    "warehouse": WAREHOUSE_SYNONYMS,
    "location": LOCATION_SYNONYMS,
}
ADJUSTMENT_ROLES = {
    "sku": SKU_SYNONYMS,
    "qty": QTY_SYNONYMS,
    "movement": MOVEMENT_CLASS_SYNONYMS,
}


def _source_bytes(source) -> tuple[bytes, str | None]:
    """Return the raw bytes and file name of a path, bytes or uploaded file."""
    if isinstance(source, (str, Path)):
        path = Path(source)
        try:
            return path.read_bytes(), path.name
        except OSError as exc:
            raise UnreadableExtractError(f"Could not open {path}: {exc.strerror}") from exc
    if isinstance(source, (bytes, bytearray)):
        return bytes(source), None
    if hasattr(source, "getvalue"):
        return source.getvalue(), getattr(source, "name", None)
    if hasattr(source, "read"):
        return source.read(), getattr(source, "name", None)
    raise TypeError(f"Unsupported extract source: {type(source).__name__}")


def read_extract(source, filename: str | None = None) -> pd.DataFrame:
    """
    Read the first sheet of an extract into a DataFrame.

    Args:
        source: Path, raw bytes, or a file-like/uploaded file object
        filename: Overrides the name used to detect the format (.csv vs Excel)

    Blank rows are dropped. An empty payload gives an empty DataFrame.
    """
    if source is None:
        return pd.DataFrame()

    data, name = _source_bytes(source)
    name = filename or name or ""
    if not data:
        return pd.DataFrame()

    try:
        if name.lower().endswith(".csv"):
            df = _read_csv(data)
        else:
            df = pd.read_excel(
                io.BytesIO(data), sheet_name=0, dtype=object, engine="openpyxl"
            )
    except Exception as exc:
        logger.error("Error reading extract %s: %s", name or "<bytes>", exc)
        raise UnreadableExtractError(UNREADABLE_MESSAGE) from exc

    return df.dropna(how="all").reset_index(drop=True)


def _read_csv(data: bytes) -> pd.DataFrame:
    """Read a CSV as text columns; rows whose cells are all blank are dropped."""
    df = None
    for encoding in ("utf-8-sig", "cp1252"):
        try:
            df = pd.read_csv(
                io.BytesIO(data), dtype=str, keep_default_na=False, encoding=encoding
            )
            break
        except UnicodeDecodeError:
            continue
    if df is None:
        df = pd.read_csv(
            io.BytesIO(data), dtype=str, keep_default_na=False, encoding="latin-1"
        )

    if df.empty:
        return df
    blank = df.apply(lambda column: column.str.strip() == "").all(axis=1)
    return df[~blank]


def read_base64_extract(payload: str, filename: str | None = None) -> pd.DataFrame:
    """Read a base64 encoded extract (a data: URI prefix is accepted)."""
    if not payload:
        return pd.DataFrame()
    if payload.startswith("data:") and "," in payload:
        payload = payload.split(",", 1)[1]
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise UnreadableExtractError(UNREADABLE_MESSAGE) from exc
    return read_extract(data, filename=filename)


@dataclass
class LoadedExtracts:
    """Container for the validated extracts of one reconciliation."""

    sap: StockExtract
    wms: StockExtract
    adjustments: StockExtract | None
    quality_reports: dict[str, DataQualityReport] = field(default_factory=dict)


class SapWmsLoader:
    """
    Loads and validates the SAP stock, WMS stock and SAP adjustments extracts.

    Client-specific quirks handled:
    - Column headers vary between exports (Spanish/English, SAP field texts)
    - SAP stock is compared only on one storage location (PT01 by default)
    - The adjustments log is optional and silently skipped when its
      columns can't be found
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or Settings()
        self.sap_resolver = HeaderResolver(SAP_ROLES)
        self.wms_resolver = HeaderResolver(WMS_ROLES)
        self.adjustment_resolver = HeaderResolver(ADJUSTMENT_ROLES)

    def load(self, sap, wms, adjustments=None) -> LoadedExtracts:
        """Read and validate all extracts (paths, bytes or uploaded files)."""
        return self.load_frames(
            read_extract(sap), read_extract(wms), read_extract(adjustments)
        )

    def load_frames(
        self,
        sap_df: pd.DataFrame,
        wms_df: pd.DataFrame,
        adjustments_df: pd.DataFrame | None = None,
    ) -> LoadedExtracts:
        """Validate already-read extracts."""
        if len(sap_df) == 0 or len(wms_df) == 0:
            raise EmptyExtractError("SAP or WMS file is empty or could not be read.")

        sap = StockExtract("SAP", sap_df, self.sap_resolver.resolve(sap_df))
        wms = StockExtract("WMS", wms_df, self.wms_resolver.resolve(wms_df))
        logger.info("SAP headers: %s", sap.headers)
        logger.info("WMS headers: %s", wms.headers)
        self._validate(sap, wms)

        adjustments = None
        if adjustments_df is not None and len(adjustments_df) > 0:
            headers = self.adjustment_resolver.resolve(adjustments_df)
            missing = HeaderResolver.missing(headers, ["sku", "qty", "movement"])
            if missing:
                logger.warning(
                    "Adjustments file ignored, columns not found: %s", ", ".join(missing)
                )
            else:
                adjustments = StockExtract("Ajustes", adjustments_df, headers)

        quality_reports = {
            "sap": self._check_sap_quality(sap),
            "wms": self._check_wms_quality(wms),
        }
        if adjustments is not None:
            quality_reports["adjustments"] = self._check_adjustment_quality(adjustments)

        return LoadedExtracts(
            sap=sap, wms=wms, adjustments=adjustments, quality_reports=quality_reports
        )

    def _validate(self, sap: StockExtract, wms: StockExtract) -> None:
        """Raise MissingColumnError for the first required column not found."""
        code = self.settings.warehouse_code
        checks = [
            (sap, ["sku", "qty"], "Could not find required SKU or Quantity columns in SAP file."),
            (
                sap,
                ["warehouse"],
                f'Could not find "Almacén" column in SAP file, which is required for {code} filtering.',
            ),
            (
                sap,
                ["centro"],
                'Could not find "Centro" column in SAP file, which is required for grouping.',
            ),
            (wms, ["sku", "qty"], "Could not find required SKU or Quantity columns in WMS file."),
            (
                wms,
                ["area", "location"],
                'Could not find required "Área" or "Ubicación" columns in WMS file for "Stock para Traslado" calculation.',
            ),
            (
                wms,
                ["warehouse"],
                f'Could not find "AREA SAP" or "Almacén" column in WMS file, which is required for {code} filtering.',
            ),
        ]
        for extract, roles, message in checks:
            missing = HeaderResolver.missing(extract.headers, roles)
            if missing:
                raise MissingColumnError(message, source=extract.name, roles=missing)

    def _check_sap_quality(self, sap: StockExtract) -> DataQualityReport:
        """Run quality checks on the SAP stock extract."""
        checker = DataQualityChecker("SAP Stock")
        checker.check_blank_values(sap.headers["sku"])
        checker.check_unparseable_quantities(sap.headers["qty"])
        checker.check_negative_quantities(sap.headers["qty"])
        checker.check_invalid_values(
            sap.headers["warehouse"],
            valid_values={self.settings.warehouse_code},
            description=f"{{count:,}} rows outside {self.settings.warehouse_code} (not compared)",
        )
        return checker.run(sap.frame)

    def _check_wms_quality(self, wms: StockExtract) -> DataQualityReport:
        """Run quality checks on the WMS stock extract."""
        checker = DataQualityChecker("WMS Stock")
        checker.check_blank_values(wms.headers["sku"])
        checker.check_unparseable_quantities(wms.headers["qty"])
        checker.check_negative_quantities(wms.headers["qty"])
        checker.check_invalid_values(
            wms.headers["warehouse"],
            valid_values={self.settings.warehouse_code},
            description=f"{{count:,}} rows outside {self.settings.warehouse_code} (not compared)",
        )
        return checker.run(wms.frame)

    def _check_adjustment_quality(self, adjustments: StockExtract) -> DataQualityReport:
        """Run quality checks on the SAP adjustments log."""
        s = self.settings
        checker = DataQualityChecker("SAP Adjustments")
        checker.check_blank_values(adjustments.headers["sku"])
        checker.check_unparseable_quantities(adjustments.headers["qty"])
        checker.check_invalid_values(
            adjustments.headers["movement"],
            valid_values={
                *s.inventory_difference_movements,
                s.shrinkage_movement,
                s.expiry_movement,
            },
            description="{count:,} rows with movement classes that are not reconciled",
        )
        return checker.run(adjustments.frame)
