"""
Utility functions for SQL Dump.
"""

import logging
import sys
from pathlib import Path
from typing import Any

from .models import DumpOptions, TableDescriptor

DEFAULT_LOG_LEVEL = 'WARNING'


def setup_logging(log_settings: dict[str, Any]) -> None:
    """
    Setup logging configuration.

    Diagnostics always go to stderr so that a dump written to stdout is never
    mixed with log output.
    """
    log_level = getattr(logging, log_settings.get('level', DEFAULT_LOG_LEVEL).upper())
    log_file = log_settings.get('file')

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True
    )


def format_options_display(options: DumpOptions) -> list[str]:
    """Format dump options for display in dry-run mode."""
    parts = []
    if options.limit is not None:
        parts.append(f"limit={options.limit}")
    if options.include_identity_insert:
        parts.append("identity_insert")
    if options.use_transaction:
        parts.append("transaction")
    if options.table_name_filter:
        mode = "exclude" if options.list_is_exclusive else "include"
        parts.append(f"{mode}={','.join(sorted(options.table_name_filter))}")
    return parts


def print_dry_run_info(tables: list[TableDescriptor], options: DumpOptions) -> None:
    """Log what would be dumped in dry-run mode."""
    settings_parts = format_options_display(options)
    if settings_parts:
        logging.info(f"Would dump {len(tables)} table(s) ({', '.join(settings_parts)})")
    else:
        logging.info(f"Would dump {len(tables)} table(s)")

    for table in tables:
        if table.has_identity:
            logging.info(f"  - {table.name} (identity: {table.identity_column})")
        else:
            logging.info(f"  - {table.name}")
