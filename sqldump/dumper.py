"""
Main dump orchestration for SQL Dump.
"""

import logging
from typing import TextIO

from .connection import DatabaseConnection
from .models import DumpConfig, DumpStats, TableDescriptor
from .row_serializer import RowSerializer
from .table_selector import TableSelector


class DatabaseDumper:
    """Dumps the selected tables of one database to a text sink."""

    def __init__(self, config: DumpConfig):
        self.config = config
        self.options = config.options
        self.stats = DumpStats()

    def _connect(self) -> DatabaseConnection:
        return DatabaseConnection.from_config(self.config)

    def run(self, sink: TextIO) -> DumpStats:
        """Connect, dump every selected table to ``sink`` and disconnect."""
        with self._connect() as conn:
            return self.dump(conn, sink)

    def preview(self) -> list[TableDescriptor]:
        """Resolve the tables that would be dumped without reading any rows."""
        with self._connect() as conn:
            return self.select_tables(conn)

    def select_tables(self, conn: DatabaseConnection) -> list[TableDescriptor]:
        selector = TableSelector(conn)
        return selector.select_tables(
            self.options.table_name_filter,
            self.options.list_is_exclusive
        )

    def dump(self, conn: DatabaseConnection, sink: TextIO) -> DumpStats:
        """
        Dump over an already open connection.

        Tables are read one after another; each table's cursor is closed
        before the next one is opened.
        """
        tables = self.select_tables(conn)
        logging.info(f"Dumping {len(tables)} table(s) from '{self.config.database}'")

        serializer = RowSerializer(conn, self.options.batch_size)

        if self.options.use_transaction:
            sink.write("begin transaction\n")
            sink.write("\n")

        for i, table in enumerate(tables):
            if i > 0:
                sink.write("\n")

            table_stats = serializer.write_table(table, self.options, sink)

            self.stats.tables.append(table_stats)
            self.stats.total_rows += table_stats.rows_dumped
            logging.info(f"  {table_stats.table}: {table_stats.rows_dumped} rows")

        if self.options.use_transaction:
            sink.write("\n")
            sink.write("commit transaction\n")

        sink.flush()
        return self.stats

