"""
Data models and enums for SQL Dump.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Union
from uuid import UUID


class AuthMode(Enum):
    """How the connection authenticates against the server."""
    INTEGRATED = "integrated"
    SQL = "sql"


@dataclass(frozen=True)
class TableDescriptor:
    """A base table selected for dumping."""
    name: str
    identity_column: Optional[str] = None

    def __post_init__(self):
        if not self.name:
            raise ValueError("Table name must not be empty")

    @property
    def has_identity(self) -> bool:
        return self.identity_column is not None


# Cell values, converted once at the driver boundary.

@dataclass(frozen=True)
class NullValue:
    pass


@dataclass(frozen=True)
class TextValue:
    value: str


@dataclass(frozen=True)
class TimestampValue:
    value: datetime


@dataclass(frozen=True)
class BinaryValue:
    value: bytes


@dataclass(frozen=True)
class UuidValue:
    value: UUID


@dataclass(frozen=True)
class BooleanValue:
    value: bool


@dataclass(frozen=True)
class OtherValue:
    """Anything without a dedicated encoding; holds the raw textual form."""
    text: str


RowValue = Union[
    NullValue, TextValue, TimestampValue, BinaryValue, UuidValue, BooleanValue, OtherValue
]


@dataclass(frozen=True)
class DumpOptions:
    """Options controlling what is dumped and how."""
    limit: Optional[int] = None
    include_identity_insert: bool = False
    list_is_exclusive: bool = False
    table_name_filter: frozenset[str] = frozenset()
    use_transaction: bool = False
    batch_size: int = 1000


@dataclass
class DumpConfig:
    """Resolved configuration for a single dump run."""
    server: str
    database: str
    auth_mode: AuthMode = AuthMode.INTEGRATED
    username: Optional[str] = None
    password: Optional[str] = None
    driver: Optional[str] = None
    timeout: int = 0
    encrypt: Optional[bool] = None
    trust_server_certificate: Optional[bool] = None
    options: DumpOptions = field(default_factory=DumpOptions)
    output_file: Optional[str] = None
    output_encoding: str = "utf-8"


@dataclass
class TableStats:
    """Statistics for a single table dump."""
    table: str
    rows_dumped: int = 0


@dataclass
class DumpStats:
    """Overall dump statistics."""
    tables: list[TableStats] = field(default_factory=list)
    total_rows: int = 0

    @property
    def total_tables(self) -> int:
        return len(self.tables)
