"""
Reusable reconciliation engine for SAP vs WMS stock.

Aggregates both extracts (plus the optional SAP adjustments log) per SKU,
compares them on the configured storage location and produces the report
tables shown to the user and written to the workbook.
"""

import logging
from dataclasses import dataclass, field
import numpy as np
import pandas as pd

from core.config import Settings
from core.parsers import QuantityParser, clean_text_series
from core import analysis
from core.columns import (
    ANALYSIS_COLUMNS,
    CENTRO_TOTAL_COLUMNS,
    COL_ADJUSTMENT,
    COL_CENTRO,
    COL_DIFFERENCE,
    COL_NAME,
    COL_SAP,
    COL_SKU,
    COL_TOTAL,
    COL_TRANSFER,
    COL_WAREHOUSE,
    COL_WMS,
    DIFFERENCE_COLUMNS,
)

logger = logging.getLogger(__name__)

_QTY_FIELDS = ["sap_qty", "wms_qty", "adjustment", "transfer_qty"]


@dataclass
class StockExtract:
    """One source extract with its resolved headers (role -> column)."""

    name: str
    frame: pd.DataFrame
    headers: dict[str, str | None]

    def text(self, role: str) -> pd.Series:
        """Trimmed text of a role's column; empty strings if unresolved."""
        column = self.headers.get(role)
        if column is None:
            return pd.Series("", index=self.frame.index, dtype=object)
        return clean_text_series(self.frame[column])

    def quantities(self, role: str = "qty") -> pd.Series:
        column = self.headers.get(role)
        if column is None:
            return pd.Series(np.nan, index=self.frame.index, dtype=float)
        return QuantityParser().parse_series(self.frame[column])


@dataclass
class ReconciliationResult:
    """Everything produced by one SAP vs WMS reconciliation."""

    analysis_report: pd.DataFrame
    shrinkage_report: pd.DataFrame
    expiry_report: pd.DataFrame
    adjustment_by_centro: pd.DataFrame
    chart_data: list[dict] = field(default_factory=list)
    difference_report: pd.DataFrame = field(
        default_factory=lambda: pd.DataFrame(columns=DIFFERENCE_COLUMNS)
    )

    @property
    def sku_count(self) -> int:
        return len(self.analysis_report)

    def summary(self) -> dict:
        return analysis.compute_key_metrics(self)


def _contributions(skus: pd.Series, **quantities: pd.Series) -> pd.DataFrame:
    frame = pd.DataFrame({"sku": skus})
    for name in _QTY_FIELDS:
        frame[name] = quantities.get(name, 0.0)
    return frame


def _centro_totals(centros: pd.Series, quantities: pd.Series) -> pd.DataFrame:
    if len(centros) == 0:
        return pd.DataFrame(columns=CENTRO_TOTAL_COLUMNS)
    totals = (
        pd.DataFrame({COL_CENTRO: centros, COL_TOTAL: quantities})
        .groupby(COL_CENTRO, sort=False)[COL_TOTAL]
        .sum()
        .reset_index()
    )
    return totals


def _first_non_blank(keys: pd.Series, values: pd.Series) -> dict[str, str]:
    present = (keys != "") & (values != "")
    pairs = pd.DataFrame({"key": keys[present], "value": values[present]})
    pairs = pairs.drop_duplicates("key", keep="first")
    return dict(zip(pairs["key"], pairs["value"]))


class StockReconciler:
    """
    Compares SAP and WMS stock per SKU on one storage location.

    Usage:
        reconciler = StockReconciler(Settings())
        result = reconciler.reconcile(sap_extract, wms_extract, adjustments_extract)

    Lines keep the order in which SKUs are first seen (SAP, then WMS, then
    adjustments). Centro tables keep first-seen centro order.
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or Settings()

    def reconcile(
        self,
        sap: StockExtract,
        wms: StockExtract,
        adjustments: StockExtract | None = None,
    ) -> ReconciliationResult:
        s = self.settings

        # SKU -> centro from every SAP row, regardless of storage location
        sap_skus = sap.text("sku")
        sap_centros = sap.text("centro")
        sku_to_centro = _first_non_blank(sap_skus, sap_centros)

        # SAP stock on the compared storage location
        sap_qty = sap.quantities()
        sap_in_scope = (
            (sap.text("warehouse").str.upper() == s.warehouse_code)
            & (sap_skus != "")
            & sap_qty.notna()
        )
        sap_part = _contributions(sap_skus[sap_in_scope], sap_qty=sap_qty[sap_in_scope])
        line_centro = _first_non_blank(sap_skus[sap_in_scope], sap_centros[sap_in_scope])
        line_name = _first_non_blank(sap_skus[sap_in_scope], sap.text("name")[sap_in_scope])
        logger.info(
            "SAP: %d of %d rows on %s", int(sap_in_scope.sum()), len(sap.frame), s.warehouse_code
        )

        # WMS stock plus stock staged for transfer
        wms_skus = wms.text("sku")
        wms_qty = wms.quantities()
        wms_valid = (wms_skus != "") & wms_qty.notna()
        on_location = wms.text("warehouse").str.upper() == s.warehouse_code
        staged = wms.text("area").str.upper().str.startswith(
            s.transfer_area_prefix
        ) & wms.text("location").str.startswith(s.transfer_location_prefix)
        wms_part = _contributions(
            wms_skus[wms_valid],
            wms_qty=wms_qty.where(on_location, 0.0)[wms_valid],
            transfer_qty=wms_qty.where(staged, 0.0)[wms_valid],
        )
        logger.info("WMS: %d of %d rows usable", int(wms_valid.sum()), len(wms.frame))

        parts = [sap_part, wms_part]
        shrinkage = pd.DataFrame(columns=CENTRO_TOTAL_COLUMNS)
        expiry = pd.DataFrame(columns=CENTRO_TOTAL_COLUMNS)

        if adjustments is not None and len(adjustments.frame) > 0:
            adj_skus = adjustments.text("sku")
            adj_qty = adjustments.quantities()
            movements = adjustments.text("movement").str.upper()
            adj_valid = (adj_skus != "") & adj_qty.notna() & (movements != "")
            centros = adj_skus.map(sku_to_centro).fillna(s.undefined_centro)

            is_difference = adj_valid & movements.isin(s.inventory_difference_movements)
            is_shrinkage = adj_valid & (movements == s.shrinkage_movement)
            is_expiry = adj_valid & (movements == s.expiry_movement)

            parts.append(
                _contributions(adj_skus[is_difference], adjustment=adj_qty[is_difference])
            )
            shrinkage = _centro_totals(centros[is_shrinkage], adj_qty[is_shrinkage])
            expiry = _centro_totals(centros[is_expiry], adj_qty[is_expiry])
            logger.info(
                "Adjustments: %d inventory differences, %d shrinkage, %d expiry rows",
                int(is_difference.sum()),
                int(is_shrinkage.sum()),
                int(is_expiry.sum()),
            )

        lines = self._aggregate_lines(parts)
        report = self._build_analysis_report(lines, line_centro, line_name)

        adjustment_by_centro = analysis.summarize_by_centro(
            report, undefined_centro=s.undefined_centro
        )
        result = ReconciliationResult(
            analysis_report=report,
            shrinkage_report=shrinkage,
            expiry_report=expiry,
            adjustment_by_centro=adjustment_by_centro,
            chart_data=analysis.build_chart_data(adjustment_by_centro, s.chart_colors),
            difference_report=analysis.build_difference_report(adjustment_by_centro),
        )
        logger.info("Reconciliation finished: %d SKUs reported", result.sku_count)
        return result

    def _aggregate_lines(self, parts: list[pd.DataFrame]) -> pd.DataFrame:
        """Sum every contribution per SKU, keeping first-seen order."""
        parts = [p for p in parts if len(p) > 0]
        if not parts:
            return pd.DataFrame(columns=_QTY_FIELDS, index=pd.Index([], name="sku"))
        combined = pd.concat(parts, ignore_index=True)
        return combined.groupby("sku", sort=False)[_QTY_FIELDS].sum()

    def _build_analysis_report(
        self,
        lines: pd.DataFrame,
        line_centro: dict[str, str],
        line_name: dict[str, str],
    ) -> pd.DataFrame:
        skus = lines.index.to_series()
        report = pd.DataFrame(
            {
                COL_CENTRO: skus.map(line_centro).fillna("").astype(object),
                COL_WAREHOUSE: self.settings.warehouse_code,
                COL_SKU: skus.astype(object),
                COL_NAME: skus.map(line_name).fillna("").astype(object),
                COL_SAP: lines["sap_qty"].astype(float),
                COL_WMS: lines["wms_qty"].astype(float),
                COL_DIFFERENCE: (lines["wms_qty"] - lines["sap_qty"]).astype(float),
                COL_ADJUSTMENT: lines["adjustment"].astype(float),
                COL_TRANSFER: lines["transfer_qty"].astype(float),
            },
            columns=ANALYSIS_COLUMNS,
        )

        # Transfer-only lines are dropped: nothing to reconcile
        keep = (report[COL_SAP] != 0) | (report[COL_WMS] != 0) | (report[COL_ADJUSTMENT] != 0)
        return report[keep].reset_index(drop=True)
