"""
Rendering of table rows as INSERT statements.
"""

import logging
from typing import Any, Iterator, Optional, TextIO

import pyodbc

from .connection import DatabaseConnection
from .exceptions import RowReadFailed
from .literals import quote_identifier, sql_literal
from .models import DumpOptions, TableDescriptor, TableStats


class RowSerializer:
    """Streams the rows of one table at a time as INSERT statements."""

    DEFAULT_BATCH_SIZE = 1000

    def __init__(self, connection: DatabaseConnection, batch_size: int = DEFAULT_BATCH_SIZE):
        self.connection = connection
        self.batch_size = batch_size

    def build_select_query(self, table: TableDescriptor, limit: Optional[int] = None) -> str:
        """Build the row query. The limit is applied by the server."""
        if limit is not None:
            return f"select top {int(limit)} * from {quote_identifier(table.name)}"
        return f"select * from {quote_identifier(table.name)}"

    @staticmethod
    def uses_identity_insert(table: TableDescriptor, options: DumpOptions) -> bool:
        return options.include_identity_insert and table.has_identity

    def opening_statements(self, table: TableDescriptor, options: DumpOptions) -> list[str]:
        if not self.uses_identity_insert(table, options):
            return []
        return [f"set identity_insert {quote_identifier(table.name)} on", ""]

    def closing_statements(self, table: TableDescriptor, options: DumpOptions) -> list[str]:
        if not self.uses_identity_insert(table, options):
            return []
        return ["", f"set identity_insert {quote_identifier(table.name)} off"]

    def serialize(self, table: TableDescriptor, options: DumpOptions) -> Iterator[str]:
        """
        Lazily produce every output line for a table.

        Lines are the optional identity insert toggles (with their blank
        separators) around one INSERT statement per row.
        """
        yield from self.opening_statements(table, options)
        yield from self.iter_inserts(table, options)
        yield from self.closing_statements(table, options)

    def write_table(self, table: TableDescriptor, options: DumpOptions, sink: TextIO) -> TableStats:
        """
        Write a table's statements to a sink.

        Statements already written stay in the sink if reading fails part way.

        Returns:
            TableStats with the number of rows written.
        """
        stats = TableStats(table=table.name)

        for line in self.opening_statements(table, options):
            sink.write(line + '\n')

        for statement in self.iter_inserts(table, options):
            sink.write(statement + '\n')
            stats.rows_dumped += 1

        for line in self.closing_statements(table, options):
            sink.write(line + '\n')

        return stats

    def iter_inserts(self, table: TableDescriptor, options: DumpOptions) -> Iterator[str]:
        """Yield one INSERT statement per row read from the table."""
        query = self.build_select_query(table, options.limit)
        logging.debug(f"Dumping table '{table.name}' with query: {query}")

        cursor = self.connection.get_cursor()
        try:
            try:
                cursor.execute(query)
                columns = self._output_columns(cursor.description, table, options.include_identity_insert)
                prefix = self._statement_prefix(table, columns)

                while True:
                    rows = cursor.fetchmany(self.batch_size)
                    if not rows:
                        break
                    for row in rows:
                        values = ', '.join(sql_literal(row[index], type_code) for index, _, type_code in columns)
                        yield f"{prefix}{values})"
            except pyodbc.Error as e:
                logging.debug(f"Error reading table '{table.name}': {e}")
                raise RowReadFailed(table.name, f"Failed to read rows from table '{table.name}': {e}") from e
        finally:
            cursor.close()

    @staticmethod
    def _output_columns(
        description: list[tuple],
        table: TableDescriptor,
        include_identity: bool
    ) -> list[tuple[int, str, Any]]:
        """
        Pick the (index, name, type) of every column that goes into the output.

        The same list drives both the column names and the values of a row.
        """
        columns = []
        for index, column in enumerate(description):
            name, type_code = column[0], column[1]
            if include_identity or name != table.identity_column:
                columns.append((index, name, type_code))
        return columns

    @staticmethod
    def _statement_prefix(table: TableDescriptor, columns: list[tuple[int, str, Any]]) -> str:
        column_list = ', '.join(quote_identifier(name) for _, name, _ in columns)
        return f"insert into {quote_identifier(table.name)} ({column_list}) values ("
