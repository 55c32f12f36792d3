"""
Reusable data quality checking framework.

Provides a structured way to assess and report on the row-level problems
found in stock extracts. Problems never stop a reconciliation: the rows
are skipped and the report tells the user how many and why.
"""

from dataclasses import dataclass, field
from typing import Callable, Any
import pandas as pd

from core.parsers import QuantityParser, clean_text_series


@dataclass
class DataQualityIssue:
    """A single data quality issue found in the data."""

    column: str
    issue_type: str  # e.g., "blank", "unparseable", "negative", "out_of_scope"
    severity: str  # "critical", "warning", "info"
    count: int
    percentage: float
    sample_values: list[Any] = field(default_factory=list)
    description: str = ""


@dataclass
class DataQualityReport:
    """Summary report of data quality for a single data source."""

    source_name: str
    total_rows: int
    issues: list[DataQualityIssue] = field(default_factory=list)

    @property
    def critical_issues(self) -> list[DataQualityIssue]:
        return [i for i in self.issues if i.severity == "critical"]

    @property
    def warning_issues(self) -> list[DataQualityIssue]:
        return [i for i in self.issues if i.severity == "warning"]

    @property
    def has_critical_issues(self) -> bool:
        return len(self.critical_issues) > 0

    def summary(self) -> dict:
        """Return a summary dict for display."""
        return {
            "source": self.source_name,
            "total_rows": self.total_rows,
            "critical": len(self.critical_issues),
            "warnings": len(self.warning_issues),
            "info": len([i for i in self.issues if i.severity == "info"]),
        }


def _issue(
    df: pd.DataFrame,
    column: str,
    mask: pd.Series,
    issue_type: str,
    severity: str,
    description: str,
) -> list[DataQualityIssue]:
    count = int(mask.sum())
    if count == 0:
        return []
    return [
        DataQualityIssue(
            column=column,
            issue_type=issue_type,
            severity=severity,
            count=count,
            percentage=(count / len(df)) * 100,
            sample_values=df.loc[mask, column].head(5).tolist(),
            description=description.format(count=count),
        )
    ]


class DataQualityChecker:
    """
    Reusable data quality checker for stock extracts.

    Checks for common issues:
    - Blank keys
    - Unparseable quantities
    - Negative quantities
    - Values outside the expected set

    Extend by adding custom checks via add_check().
    """

    def __init__(self, source_name: str):
        self.source_name = source_name
        self._checks: list[Callable[[pd.DataFrame], list[DataQualityIssue]]] = []
        self._quantity_parser = QuantityParser()

    def add_check(
        self, check_fn: Callable[[pd.DataFrame], list[DataQualityIssue]]
    ) -> "DataQualityChecker":
        """Add a custom check function. Returns self for chaining."""
        self._checks.append(check_fn)
        return self

    def check_blank_values(
        self, column: str | None, severity: str = "warning"
    ) -> "DataQualityChecker":
        """Add a check for empty cells in a key column."""

        def check(df: pd.DataFrame) -> list[DataQualityIssue]:
            if column is None or column not in df.columns:
                return []
            mask = clean_text_series(df[column]) == ""
            return _issue(
                df, column, mask, "blank", severity,
                "{count:,} rows without a value (skipped)",
            )

        self._checks.append(check)
        return self

    def check_unparseable_quantities(
        self, column: str | None, severity: str = "warning"
    ) -> "DataQualityChecker":
        """Add a check for quantity cells that are present but not numeric."""

        def check(df: pd.DataFrame) -> list[DataQualityIssue]:
            if column is None or column not in df.columns:
                return []
            present = clean_text_series(df[column]) != ""
            parsed = self._quantity_parser.parse_series(df[column])
            mask = present & parsed.isna()
            return _issue(
                df, column, mask, "unparseable", severity,
                "{count:,} quantities couldn't be parsed (skipped)",
            )

        self._checks.append(check)
        return self

    def check_negative_quantities(
        self, column: str | None, severity: str = "info"
    ) -> "DataQualityChecker":
        """Add a check for negative quantities."""

        def check(df: pd.DataFrame) -> list[DataQualityIssue]:
            if column is None or column not in df.columns:
                return []
            mask = self._quantity_parser.parse_series(df[column]) < 0
            return _issue(
                df, column, mask, "negative", severity,
                "{count:,} negative quantities",
            )

        self._checks.append(check)
        return self

    def check_invalid_values(
        self,
        column: str | None,
        valid_values: set,
        severity: str = "info",
        description: str = "{count:,} values outside the expected set",
    ) -> "DataQualityChecker":
        """Add a check for values outside valid_values (case-insensitive)."""

        def check(df: pd.DataFrame) -> list[DataQualityIssue]:
            if column is None or column not in df.columns:
                return []
            values = clean_text_series(df[column]).str.upper()
            valid = {str(v).upper() for v in valid_values}
            mask = (values != "") & ~values.isin(valid)
            return _issue(df, column, mask, "out_of_scope", severity, description)

        self._checks.append(check)
        return self

    def run(self, df: pd.DataFrame) -> DataQualityReport:
        """Run all checks and return a quality report."""
        all_issues = []
        for check_fn in self._checks:
            all_issues.extend(check_fn(df))

        return DataQualityReport(
            source_name=self.source_name, total_rows=len(df), issues=all_issues
        )
