"""
Exceptions raised by SQL Dump.
"""

from typing import Optional


class DumpError(Exception):
    """Base class for all fatal dump errors."""


class ConfigurationError(DumpError):
    """Invalid or insufficient input, detected before connecting."""


class CatalogQueryFailed(DumpError):
    """The table catalog could not be read."""


class RowReadFailed(DumpError):
    """Reading the rows of a table failed part way through."""

    def __init__(self, table: str, message: Optional[str] = None):
        self.table = table
        super().__init__(message or f"Failed to read rows from table '{table}'")
