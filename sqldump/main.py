#!/usr/bin/env python3
"""
SQL Dump - CLI Entry Point
==========================
Dumps the base tables of a SQL Server database as INSERT statements:
- Integrated or SQL Server authentication
- Row limits
- Optional transaction wrapping
- Optional identity insert toggles
- Table inclusion or exclusion lists
"""

import argparse
import io
import logging
import sys
from contextlib import contextmanager
from typing import Iterator, Optional, TextIO

import yaml

from . import __version__
from .config import ConfigLoader
from .dumper import DatabaseDumper
from .exceptions import DumpError
from .models import AuthMode, DumpConfig
from .utils import print_dry_run_info, setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='sqldump',
        description='SQL Dump - export SQL Server tables as INSERT statements'
    )
    parser.add_argument('server', nargs='?', help='Server to connect to')
    parser.add_argument('database', nargs='?', help='Database to dump')
    parser.add_argument('tables', nargs='*', help='Tables to dump (default: all base tables)')
    parser.add_argument(
        '-i', '--use-integrated-security',
        dest='authentication',
        action='store_const',
        const=AuthMode.INTEGRATED.value,
        help='Use Integrated Security to connect to server (default)'
    )
    parser.add_argument(
        '-s', '--use-sql-server-authentication',
        dest='authentication',
        action='store_const',
        const=AuthMode.SQL.value,
        help='Use SQL Server authentication to connect to server'
    )
    parser.add_argument('-u', '--username', help='Username for SQL Server authentication')
    parser.add_argument('-p', '--password', help='Password for SQL Server authentication')
    parser.add_argument('-l', '--limit', type=int, help='Limit number of records per table')
    parser.add_argument(
        '-t', '--use-transaction',
        action='store_true',
        default=None,
        help='Wrap all insert statements in a transaction'
    )
    parser.add_argument(
        '-d', '--identity-insert',
        action='store_true',
        default=None,
        help='Include statements to enable identity insert and include identity columns in output'
    )
    parser.add_argument(
        '-e', '--exclude',
        action='store_true',
        default=None,
        help='Supplied tables are excluded, rather than included'
    )
    parser.add_argument('-c', '--config', help='Path to a YAML configuration file')
    parser.add_argument('-o', '--output', help='Write the dump to this file instead of stdout')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose output')
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Show which tables would be dumped without dumping them'
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


@contextmanager
def open_sink(config: DumpConfig) -> Iterator[TextIO]:
    """Open the dump output with the configured encoding, stdout by default."""
    if config.output_file:
        with open(config.output_file, 'w', encoding=config.output_encoding, newline='\n') as f:
            yield f
        return

    sys.stdout.flush()
    out = io.TextIOWrapper(sys.stdout.buffer, encoding=config.output_encoding, newline='\n')
    try:
        yield out
    finally:
        out.flush()
        # leave sys.stdout.buffer open for the interpreter
        out.detach()


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point."""
    args = build_parser().parse_intermixed_args(argv)

    # Load configuration
    try:
        loader = ConfigLoader(args.config)
    except FileNotFoundError:
        print(f"ERROR: Configuration file '{args.config}' not found", file=sys.stderr)
        sys.exit(1)
    except (yaml.YAMLError, DumpError) as e:
        print(f"ERROR: Invalid configuration file: {e}", file=sys.stderr)
        sys.exit(1)

    # Setup logging
    log_settings = loader.get_logging_settings()
    if args.verbose:
        log_settings['level'] = 'DEBUG'
    elif args.dry_run:
        log_settings['level'] = 'INFO'
    setup_logging(log_settings)

    overrides = {
        'server': args.server,
        'database': args.database,
        'authentication': args.authentication,
        'username': args.username,
        'password': args.password,
        'limit': args.limit,
        'use_transaction': args.use_transaction,
        'identity_insert': args.identity_insert,
        'exclude': args.exclude,
        'tables': args.tables or None,
        'output_file': args.output,
    }

    try:
        config = loader.resolve(overrides)
        dumper = DatabaseDumper(config)

        # Dry run mode
        if args.dry_run:
            logging.info("DRY RUN MODE - No data will be dumped")
            print_dry_run_info(dumper.preview(), config.options)
            sys.exit(0)

        with open_sink(config) as out:
            stats = dumper.run(out)

        logging.info("=" * 50)
        logging.info("DUMP COMPLETE")
        logging.info(f"Tables: {stats.total_tables}")
        logging.info(f"Total Rows: {stats.total_rows}")

    except DumpError as e:
        logging.error(f"ERROR: {e}", exc_info=args.verbose)
        sys.exit(1)
    except (OSError, UnicodeError) as e:
        logging.error(f"ERROR: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
