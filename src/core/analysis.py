"""
Summary functions over a reconciled stock report.

Computes:
- Monthly adjustment per centro (table + pie chart slices)
- Largest SAP vs WMS discrepancies
- Key metrics for the dashboard, the CLI and the AI brief
"""

import pandas as pd

from core.columns import (
    COL_ADJUSTMENT,
    COL_CENTRO,
    COL_DIFFERENCE,
    COL_SAP,
    COL_TOTAL,
    COL_TRANSFER,
    COL_WMS,
    DIFFERENCE_COLUMNS,
)


def summarize_by_centro(
    report: pd.DataFrame, undefined_centro: str = "INDEFINIDO"
) -> pd.DataFrame:
    """
    Sum the monthly inventory-difference adjustment per centro.

    Lines without a centro are grouped under undefined_centro. Centros keep
    the order in which they first appear in the report.

    Returns DataFrame with columns Centro, Ajuste Mensual (Dif. Inventario).
    """
    if len(report) == 0:
        return pd.DataFrame(columns=[COL_CENTRO, COL_ADJUSTMENT])

    centros = report[COL_CENTRO].fillna("").astype(str).replace("", undefined_centro)
    return (
        pd.DataFrame({COL_CENTRO: centros, COL_ADJUSTMENT: report[COL_ADJUSTMENT]})
        .groupby(COL_CENTRO, sort=False)[COL_ADJUSTMENT]
        .sum()
        .reset_index()
    )


def build_chart_data(summary: pd.DataFrame, colors: tuple[str, ...]) -> list[dict]:
    """
    Pie chart slices for the adjustment summary.

    Colours are assigned by position before empty slices are removed, so a
    centro keeps its colour whether or not its neighbours have adjustments.
    """
    slices = []
    for index, row in enumerate(summary.itertuples(index=False)):
        slices.append(
            {
                "name": row[0],
                "value": abs(float(row[1])),
                "fill": colors[index % len(colors)],
            }
        )
    return [s for s in slices if s["value"] > 0]


def build_difference_report(summary: pd.DataFrame) -> pd.DataFrame:
    """Centros with a non-zero adjustment total, as Centro / Diferencia."""
    report = summary.rename(columns={COL_ADJUSTMENT: COL_DIFFERENCE})
    if len(report) == 0:
        return pd.DataFrame(columns=DIFFERENCE_COLUMNS)
    return report[report[COL_DIFFERENCE] != 0].reset_index(drop=True)


def top_discrepancies(report: pd.DataFrame, limit: int = 20) -> pd.DataFrame:
    """Lines where WMS and SAP disagree, largest absolute difference first."""
    mismatched = report[report[COL_DIFFERENCE] != 0].copy()
    mismatched["abs_difference"] = mismatched[COL_DIFFERENCE].abs()
    mismatched = mismatched.sort_values("abs_difference", ascending=False, kind="stable")
    return mismatched.drop(columns="abs_difference").head(limit).reset_index(drop=True)


def compute_key_metrics(result) -> dict:
    """Compute summary metrics for a ReconciliationResult."""
    report = result.analysis_report
    return {
        "skus_reported": len(report),
        "skus_with_difference": int((report[COL_DIFFERENCE] != 0).sum()),
        "total_sap_stock": float(report[COL_SAP].sum()),
        "total_wms_stock": float(report[COL_WMS].sum()),
        "net_difference": float(report[COL_DIFFERENCE].sum()),
        "absolute_difference": float(report[COL_DIFFERENCE].abs().sum()),
        "total_adjustment": float(report[COL_ADJUSTMENT].sum()),
        "total_transfer_stock": float(report[COL_TRANSFER].sum()),
        "shrinkage_total": float(result.shrinkage_report[COL_TOTAL].sum()),
        "expiry_total": float(result.expiry_report[COL_TOTAL].sum()),
    }
