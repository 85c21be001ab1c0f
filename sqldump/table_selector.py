"""
Resolution of the base tables to dump.
"""

import logging
from typing import Iterable

import pyodbc

from .connection import DatabaseConnection
from .exceptions import CatalogQueryFailed
from .models import TableDescriptor


class TableSelector:
    """Reads the table catalog and applies the inclusion/exclusion filter."""

    DEFAULT_SCHEMA = 'dbo'

    # At most one identity column per table is reported: the first one in
    # catalog column order.
    CATALOG_QUERY = """select
\tt.table_name,
\t(select top 1
\t\tc.column_name
\tfrom
\t\tinformation_schema.columns c
\twhere
\t\tc.table_schema = t.table_schema
\t\tand c.table_name = t.table_name
\t\tand columnproperty(object_id(quotename(c.table_schema) + '.' + quotename(c.table_name)), c.column_name, 'IsIdentity') = 1
\torder by
\t\tc.ordinal_position
\t) as identity_column
from
\tinformation_schema.tables t
where
\tt.table_schema = ?
\tand t.table_type = 'BASE TABLE'{filter}
order by
\tt.table_name"""

    def __init__(self, connection: DatabaseConnection, schema: str = DEFAULT_SCHEMA):
        self.connection = connection
        self.schema = schema

    def build_query(
        self,
        table_names: Iterable[str],
        list_is_exclusive: bool = False
    ) -> tuple[str, tuple]:
        """
        Build the catalog query and its parameters.

        An empty name list selects every base table. Otherwise the names are
        an inclusion list, or an exclusion list when ``list_is_exclusive``.
        """
        names = sorted(set(table_names))
        params: tuple = (self.schema,)

        if not names:
            return self.CATALOG_QUERY.format(filter=''), params

        placeholders = ', '.join('?' for _ in names)
        operator = 'not in' if list_is_exclusive else 'in'
        clause = f"\n\tand t.table_name {operator} ({placeholders})"
        return self.CATALOG_QUERY.format(filter=clause), params + tuple(names)

    def select_tables(
        self,
        table_names: Iterable[str] = (),
        list_is_exclusive: bool = False
    ) -> list[TableDescriptor]:
        """Return the tables to dump, ordered by name."""
        query, params = self.build_query(table_names, list_is_exclusive)

        try:
            rows = self.connection.execute_query(query, params)
        except pyodbc.Error as e:
            logging.debug(f"Failed to read table catalog: {e}")
            raise CatalogQueryFailed(f"Failed to read table catalog: {e}") from e

        tables = [TableDescriptor(name=row[0], identity_column=row[1]) for row in rows]
        logging.info(f"Selected {len(tables)} table(s) from schema '{self.schema}'")
        return tables
