"""
SQL Dump
========
Exports the base tables of a SQL Server database as replayable SQL:
- INSERT statements with round-trippable literals
- Row limits
- Transaction wrapping
- Identity insert toggles
- Table inclusion or exclusion lists
"""

__version__ = "1.0.0"

from .config import ConfigLoader
from .connection import DatabaseConnection, build_connection_string
from .dumper import DatabaseDumper
from .exceptions import CatalogQueryFailed, ConfigurationError, DumpError, RowReadFailed
from .literals import encode_literal, quote_identifier, sql_literal, to_row_value
from .models import (
    AuthMode,
    BinaryValue,
    BooleanValue,
    DumpConfig,
    DumpOptions,
    DumpStats,
    NullValue,
    OtherValue,
    RowValue,
    TableDescriptor,
    TableStats,
    TextValue,
    TimestampValue,
    UuidValue,
)
from .row_serializer import RowSerializer
from .table_selector import TableSelector
from .utils import format_options_display, print_dry_run_info, setup_logging

__all__ = [
    # Core classes
    "ConfigLoader",
    "DatabaseConnection",
    "DatabaseDumper",
    "RowSerializer",
    "TableSelector",
    # Literals
    "encode_literal",
    "quote_identifier",
    "sql_literal",
    "to_row_value",
    # Errors
    "CatalogQueryFailed",
    "ConfigurationError",
    "DumpError",
    "RowReadFailed",
    # Models
    "AuthMode",
    "BinaryValue",
    "BooleanValue",
    "DumpConfig",
    "DumpOptions",
    "DumpStats",
    "NullValue",
    "OtherValue",
    "RowValue",
    "TableDescriptor",
    "TableStats",
    "TextValue",
    "TimestampValue",
    "UuidValue",
    # Utilities
    "build_connection_string",
    "format_options_display",
    "print_dry_run_info",
    "setup_logging",
]
