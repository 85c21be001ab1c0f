"""
Conversion of cell values into SQL Server literals.

Raw values coming from the driver are first turned into one of the
``RowValue`` variants by :func:`to_row_value`; :func:`encode_literal` then
renders the variant as literal text that parses back to the same value.
"""

from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Callable, Optional
from uuid import UUID

from .models import (
    BinaryValue,
    BooleanValue,
    NullValue,
    OtherValue,
    RowValue,
    TextValue,
    TimestampValue,
    UuidValue,
)


def quote_identifier(name: str) -> str:
    """
    Bracket-quote a table or column name.

    Examples:
        >>> quote_identifier("Orders")
        '[Orders]'
        >>> quote_identifier("odd]name")
        '[odd]]name]'
    """
    return f"[{name.replace(']', ']]')}]"


def to_row_value(value: Any, declared_type: Optional[type] = None) -> RowValue:
    """
    Classify a raw driver value.

    Args:
        value: The cell value as returned by the driver.
        declared_type: The column's Python type from the cursor description,
            if known. Used where the driver hands back a plain representation
            (e.g. a GUID returned as ``str``).
    """
    if value is None:
        return NullValue()
    # bool before anything numeric, it is an int subclass
    if isinstance(value, bool) or declared_type is bool:
        return BooleanValue(bool(value))
    if isinstance(value, UUID):
        return UuidValue(value)
    if declared_type is UUID:
        return UuidValue(UUID(str(value)))
    if isinstance(value, str):
        return TextValue(value)
    if isinstance(value, datetime):
        return TimestampValue(value)
    if isinstance(value, date):
        return TimestampValue(datetime.combine(value, time()))
    if isinstance(value, (bytes, bytearray, memoryview)):
        return BinaryValue(bytes(value))
    return OtherValue(_invariant_text(value))


def _invariant_text(value: Any) -> str:
    """Locale-independent text for values without a dedicated encoding."""
    if isinstance(value, Decimal):
        return format(value, 'f')
    return str(value)


def _encode_text(v: TextValue) -> str:
    return "'" + v.value.replace("'", "''") + "'"


def _encode_timestamp(v: TimestampValue) -> str:
    dt = v.value
    # milliseconds are truncated, not rounded
    return (
        f"'{dt.year:04d}-{dt.month:02d}-{dt.day:02d} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d}.{dt.microsecond // 1000:03d}'"
    )


def _encode_binary(v: BinaryValue) -> str:
    return f"'0x{v.value.hex()}'"


_ENCODERS: dict[type, Callable[[Any], str]] = {
    NullValue: lambda v: 'null',
    TextValue: _encode_text,
    TimestampValue: _encode_timestamp,
    BinaryValue: _encode_binary,
    UuidValue: lambda v: f"'{v.value}'",
    BooleanValue: lambda v: '1' if v.value else '0',
    OtherValue: lambda v: v.text,
}


def encode_literal(value: RowValue) -> str:
    """Render a classified cell value as SQL literal text."""
    try:
        encoder = _ENCODERS[type(value)]
    except KeyError:
        raise TypeError(f"Not a row value: {value!r}") from None
    return encoder(value)


def sql_literal(value: Any, declared_type: Optional[type] = None) -> str:
    """Classify and encode a raw driver value in one step."""
    return encode_literal(to_row_value(value, declared_type))
