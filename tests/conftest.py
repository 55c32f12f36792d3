"""
Shared fixtures: a small SAP / WMS / adjustments scenario.

Expected reconciliation (warehouse PT01):

    SKU   Centro  SAP    WMS    Dif   Ajuste  Traslado
    1001  C100    1500   1450   -50   -30     50
    1002  C200    50     50     0     0       0
    1006          0      30     30    0       0
    1007          0      0      0     5       0

1005 only has staged WMS stock outside PT01 and is dropped.
"""

import io

import pandas as pd
import pytest

from core.config import Settings
from core.reconciliation import ReconciliationResult, StockReconciler
from sources.sap_wms_client import SapWmsLoader


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def sap_df() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "Material": ["1001", "1001", "1002", "1003", None, "1004"],
            "Texto breve de material": [
                "Leche Entera",
                "Leche Entera",
                "Yogurt",
                "Queso",
                "Sin código",
                "Mantequilla",
            ],
            "Centro": ["C100", "C100", "C200", "C300", "C100", "C100"],
            "Almacén": ["PT01", "pt01 ", "PT01", "PT02", "PT01", "PT01"],
            "Libre utilización": ["1,200", 300, 50, 80, 10, "n/a"],
        },
        dtype=object,
    )


@pytest.fixture
def wms_df() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "SKU": ["1001", "1001", "1002", "1005", "1006"],
            "Cantidad": [1400, 50, "50", 20, 30.0],
            "Área": ["AREA ALMACEN", "Area Stage 1", "AREA ALMACEN", "AREA STAGE", "AREA ALMACEN"],
            "AREA SAP": ["PT01", "PT01", "PT01", "PT02", "PT01"],
            "Ubicación": ["A-01", "7001", "A-02", "7002", "B-01"],
        },
        dtype=object,
    )


@pytest.fixture
def adjustments_df() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "Material": ["1001", "1001", "1007", "1002", "1003", "9999", "1002", "1002"],
            "Cantidad": [-40, 10, 5, -3, -7, -2, 100, 1],
            "Clase de movimiento": ["Z59", "z60", "Z65", "Z42", "Z42", "Z44", "Z01", ""],
        },
        dtype=object,
    )


def _to_xlsx_bytes(df: pd.DataFrame) -> bytes:
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        df.to_excel(writer, index=False)
    return buffer.getvalue()


@pytest.fixture
def xlsx_bytes():
    """Serialize a DataFrame to an in-memory .xlsx workbook."""
    return _to_xlsx_bytes


@pytest.fixture
def xlsx_files(tmp_path, sap_df, wms_df, adjustments_df) -> dict:
    """The scenario written to .xlsx files on disk."""
    paths = {}
    for name, df in {"sap": sap_df, "wms": wms_df, "adjustments": adjustments_df}.items():
        path = tmp_path / f"{name}.xlsx"
        path.write_bytes(_to_xlsx_bytes(df))
        paths[name] = path
    return paths


@pytest.fixture
def result(settings, sap_df, wms_df, adjustments_df) -> ReconciliationResult:
    extracts = SapWmsLoader(settings).load_frames(sap_df, wms_df, adjustments_df)
    return StockReconciler(settings).reconcile(
        extracts.sap, extracts.wms, extracts.adjustments
    )
