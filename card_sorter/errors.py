"""Errors raised by the sorting pipeline."""


class SorterError(Exception):
    """Base error for this package."""


class ConfigError(SorterError):
    """Raised when environment configuration is invalid."""


class ParseError(SorterError):
    """Raised when an uploaded file cannot be parsed into a dataset."""


class SortSpecError(SorterError):
    """Raised when a sort key or sort spec is invalid."""


class ProcessingError(SorterError):
    """Raised when filtering, normalization or sorting fails unexpectedly."""

    GENERIC_MESSAGE = "Error processing file"

    def __init__(self, message: str = GENERIC_MESSAGE):
        super().__init__(message)
