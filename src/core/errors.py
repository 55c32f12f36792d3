"""
Errors raised while loading and reconciling stock extracts.

Messages are user-facing: the dashboard and the CLI show them as-is.
"""


class StockReconciliationError(Exception):
    """Base class for all reconciliation errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnreadableExtractError(StockReconciliationError):
    """An uploaded file could not be parsed as a spreadsheet."""


class EmptyExtractError(StockReconciliationError):
    """The SAP or WMS extract has no data rows."""


class MissingColumnError(StockReconciliationError):
    """A required column could not be matched to any header."""

    def __init__(self, message: str, source: str, roles: list[str]):
        super().__init__(message)
        self.source = source
        self.roles = roles


class BriefUnavailableError(StockReconciliationError):
    """The language model could not produce a discrepancy brief."""
