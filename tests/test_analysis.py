"""Tests for the report summaries."""

import pandas as pd

from core.analysis import (
    build_chart_data,
    build_difference_report,
    summarize_by_centro,
    top_discrepancies,
)
from core.columns import COL_ADJUSTMENT, COL_CENTRO, COL_DIFFERENCE, COL_SKU


def test_summarize_by_centro_groups_blank_centro():
    report = pd.DataFrame(
        {
            COL_CENTRO: ["C2", "", "C1", "C2", None],
            COL_ADJUSTMENT: [1.0, 2.0, 3.0, 4.0, 5.0],
        }
    )

    summary = summarize_by_centro(report, undefined_centro="SIN CENTRO")

    assert summary.to_dict(orient="records") == [
        {COL_CENTRO: "C2", COL_ADJUSTMENT: 5.0},
        {COL_CENTRO: "SIN CENTRO", COL_ADJUSTMENT: 7.0},
        {COL_CENTRO: "C1", COL_ADJUSTMENT: 3.0},
    ]


def test_summarize_empty_report():
    summary = summarize_by_centro(pd.DataFrame(columns=[COL_CENTRO, COL_ADJUSTMENT]))

    assert list(summary.columns) == [COL_CENTRO, COL_ADJUSTMENT]
    assert summary.empty


def test_chart_colors_cycle_and_use_absolute_values():
    summary = pd.DataFrame(
        {COL_CENTRO: ["A", "B", "C", "D"], COL_ADJUSTMENT: [-4.0, 2.0, 0.0, 1.0]}
    )

    chart = build_chart_data(summary, ("red", "blue", "green"))

    assert chart == [
        {"name": "A", "value": 4.0, "fill": "red"},
        {"name": "B", "value": 2.0, "fill": "blue"},
        {"name": "D", "value": 1.0, "fill": "red"},
    ]


def test_difference_report_drops_zero_centros():
    summary = pd.DataFrame({COL_CENTRO: ["A", "B"], COL_ADJUSTMENT: [0.0, -3.0]})

    report = build_difference_report(summary)

    assert report.to_dict(orient="records") == [{COL_CENTRO: "B", COL_DIFFERENCE: -3.0}]


def test_top_discrepancies_sorted_by_absolute_difference(result):
    top = top_discrepancies(result.analysis_report)

    assert top[COL_SKU].tolist() == ["1001", "1006"]
    assert top_discrepancies(result.analysis_report, limit=1)[COL_SKU].tolist() == ["1001"]
