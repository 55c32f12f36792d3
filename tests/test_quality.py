"""Tests for the data quality checker."""

import pandas as pd

from core.quality import DataQualityChecker, DataQualityIssue


def test_checks_chain_and_report_counts():
    df = pd.DataFrame(
        {
            "sku": ["1", "", None, "4"],
            "qty": ["10", "abc", "-5", ""],
            "almacen": ["PT01", "pt01", "PT02", ""],
        },
        dtype=object,
    )

    report = (
        DataQualityChecker("SAP Stock")
        .check_blank_values("sku")
        .check_unparseable_quantities("qty")
        .check_negative_quantities("qty")
        .check_invalid_values("almacen", valid_values={"PT01"})
        .run(df)
    )

    by_type = {issue.issue_type: issue for issue in report.issues}
    assert report.total_rows == 4
    assert by_type["blank"].count == 2
    assert by_type["blank"].percentage == 50.0
    assert by_type["blank"].description == "2 rows without a value (skipped)"
    # blank quantities are not reported as unparseable
    assert by_type["unparseable"].count == 1
    assert by_type["unparseable"].sample_values == ["abc"]
    assert by_type["negative"].count == 1
    assert by_type["negative"].severity == "info"
    assert by_type["out_of_scope"].sample_values == ["PT02"]


def test_missing_columns_are_skipped():
    df = pd.DataFrame({"sku": ["1"]})

    report = (
        DataQualityChecker("WMS Stock")
        .check_blank_values(None)
        .check_unparseable_quantities("qty")
        .run(df)
    )

    assert report.issues == []


def test_custom_check_and_summary():
    def always_critical(df):
        return [
            DataQualityIssue(
                column="*",
                issue_type="custom",
                severity="critical",
                count=len(df),
                percentage=100.0,
            )
        ]

    df = pd.DataFrame({"sku": ["", "2"]})
    report = (
        DataQualityChecker("SAP Adjustments")
        .check_blank_values("sku")
        .add_check(always_critical)
        .run(df)
    )

    assert report.has_critical_issues
    assert report.summary() == {
        "source": "SAP Adjustments",
        "total_rows": 2,
        "critical": 1,
        "warnings": 1,
        "info": 0,
    }
