"""
Database connection management for SQL Dump.
"""

import logging
from typing import Optional

import pyodbc

from .exceptions import DumpError
from .models import AuthMode, DumpConfig


def _quote_value(value: str) -> str:
    """Brace-quote an ODBC attribute value when it needs it."""
    if any(c in value for c in ';{}') or value != value.strip():
        return '{' + value.replace('}', '}}') + '}'
    return value


def _yes_no(flag: bool) -> str:
    return 'yes' if flag else 'no'


def build_connection_string(
    server: str,
    database: str,
    auth_mode: AuthMode = AuthMode.INTEGRATED,
    username: Optional[str] = None,
    password: Optional[str] = None,
    driver: Optional[str] = None,
    encrypt: Optional[bool] = None,
    trust_server_certificate: Optional[bool] = None
) -> str:
    """Build an ODBC connection string for SQL Server."""
    driver = driver or DatabaseConnection.DEFAULT_DRIVER
    parts = [
        f"DRIVER={{{driver}}}",
        f"SERVER={_quote_value(server)}",
        f"DATABASE={_quote_value(database)}",
    ]

    if auth_mode == AuthMode.SQL:
        parts.append(f"UID={_quote_value(username or '')}")
        parts.append(f"PWD={_quote_value(password or '')}")
    else:
        parts.append("Trusted_Connection=yes")

    if encrypt is not None:
        parts.append(f"Encrypt={_yes_no(encrypt)}")
    if trust_server_certificate is not None:
        parts.append(f"TrustServerCertificate={_yes_no(trust_server_certificate)}")

    return ';'.join(parts) + ';'


class DatabaseConnection:
    """Manages a SQL Server connection with context manager support."""

    DEFAULT_DRIVER = 'ODBC Driver 18 for SQL Server'

    def __init__(
        self,
        server: str,
        database: str,
        auth_mode: AuthMode = AuthMode.INTEGRATED,
        username: Optional[str] = None,
        password: Optional[str] = None,
        driver: Optional[str] = None,
        timeout: int = 0,
        encrypt: Optional[bool] = None,
        trust_server_certificate: Optional[bool] = None
    ):
        self.server = server
        self.database = database
        self.auth_mode = auth_mode
        self.username = username
        self.password = password
        self.driver = driver or self.DEFAULT_DRIVER
        self.timeout = timeout
        self.encrypt = encrypt
        self.trust_server_certificate = trust_server_certificate
        self.connection = None

    @classmethod
    def from_config(cls, config: DumpConfig) -> "DatabaseConnection":
        return cls(
            server=config.server,
            database=config.database,
            auth_mode=config.auth_mode,
            username=config.username,
            password=config.password,
            driver=config.driver,
            timeout=config.timeout,
            encrypt=config.encrypt,
            trust_server_certificate=config.trust_server_certificate
        )

    def __enter__(self) -> "DatabaseConnection":
        """Context manager entry - establish connection."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - close connection."""
        self.disconnect()

    @property
    def connection_string(self) -> str:
        return build_connection_string(
            self.server,
            self.database,
            self.auth_mode,
            self.username,
            self.password,
            self.driver,
            self.encrypt,
            self.trust_server_certificate
        )

    def connect(self) -> None:
        """Establish database connection."""
        try:
            # autocommit keeps the read-only session free of an open transaction
            self.connection = pyodbc.connect(
                self.connection_string,
                timeout=self.timeout,
                autocommit=True
            )
            logging.info(f"Connected to {self.server}/{self.database}")
        except pyodbc.Error as e:
            logging.debug(f"Failed to connect to database: {e}")
            raise DumpError(f"Failed to connect to {self.server}/{self.database}: {e}") from e

    def disconnect(self) -> None:
        """Close database connection."""
        if self.connection is not None:
            self.connection.close()
            self.connection = None
            logging.debug("Database connection closed")

    def execute_query(self, query: str, params: Optional[tuple] = None) -> list[tuple]:
        """Execute a query and return results."""
        cursor = self.connection.cursor()
        try:
            if params:
                cursor.execute(query, params)
            else:
                cursor.execute(query)
            return cursor.fetchall()
        finally:
            cursor.close()

    def get_cursor(self):
        """Get a cursor for streaming a result set."""
        return self.connection.cursor()
