"""
Custom exception hierarchy for the forecasting engine.

Exception Hierarchy:
    DailycastError (base)
    └── HistoryDataError   - Ingested history has an unusable shape

    ValidationError        - Input validation failed

The forecasting path itself never raises: missing or messy data degrades
to documented fallback values instead.
"""


class DailycastError(Exception):
    """Base exception for all engine errors."""

    def __init__(self, message: str, details: str = None):
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class HistoryDataError(DailycastError):
    """
    History handed over by the ingestion layer has an unexpected structure.

    Raised only when building a HistoryStore from a frame or row mapping
    that lacks required columns, never while forecasting.
    """

    def __init__(self, message: str, details: str = None, missing: list = None):
        super().__init__(message, details)
        self.missing = missing or []


class ValidationError(Exception):
    """
    Input validation failed.

    Used for validating user input (range queries) before processing.
    """

    def __init__(self, field: str, message: str, value: any = None):
        self.field = field
        self.message = message
        self.value = value
        super().__init__(f"{field}: {message}")

    def __str__(self) -> str:
        if self.value is not None:
            return f"{self.field}: {self.message} (got: {self.value!r})"
        return f"{self.field}: {self.message}"
