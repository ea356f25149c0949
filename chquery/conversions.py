"""Conversions between Python values and the wire form of column types.

Each ``*_to_*`` function turns a Python value into the number or pair the
column is stored as. Each ``*_from_*`` function goes the other way. Values
that the column cannot hold raise :class:`ConversionError`.
"""

from __future__ import annotations

import functools
import ipaddress
import uuid
from collections.abc import Callable
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Optional, TypeVar, Union

__all__ = [
    "ConversionError",
    "Precision",
    "optional",
    "ipv4_to_int",
    "ipv4_from_int",
    "uuid_to_pair",
    "uuid_from_pair",
    "uuid_to_text",
    "uuid_from_text",
    "datetime_to_seconds",
    "datetime_from_seconds",
    "datetime64_to_ticks",
    "datetime64_from_ticks",
    "date_to_days",
    "date_from_days",
    "date32_to_days",
    "date32_from_days",
]

_U16_MAX = (1 << 16) - 1
_U32_MAX = (1 << 32) - 1
_U64_MAX = (1 << 64) - 1
_I32_MIN, _I32_MAX = -(1 << 31), (1 << 31) - 1
_I64_MIN, _I64_MAX = -(1 << 63), (1 << 63) - 1

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_DATE_ORIGIN = date(1970, 1, 1)
# Older servers accept a narrower range (1925 to 2283).
_DATE32_MIN = date(1900, 1, 1)
_DATE32_MAX = date(2299, 12, 31)

T = TypeVar("T")
R = TypeVar("R")


class ConversionError(ValueError):
    """Raised when a value cannot be represented in the target column type."""


class Precision(Enum):
    """Fractional digits of a ``DateTime64`` column."""

    SECONDS = 0
    MILLIS = 3
    MICROS = 6
    NANOS = 9

    @property
    def nanos_per_tick(self) -> int:
        """Number of nanoseconds in one tick of this precision."""
        return 10 ** (9 - self.value)


def optional(func: Callable[[T], R]) -> Callable[[Optional[T]], Optional[R]]:
    """Wrap a conversion so that ``None`` (a ``Nullable`` NULL) passes through."""

    @functools.wraps(func)
    def wrapper(value: Optional[T]) -> Optional[R]:
        return None if value is None else func(value)

    return wrapper


def _check_range(value: int, low: int, high: int, what: str) -> int:
    number = int(value)
    if not low <= number <= high:
        raise ConversionError(f"{number} is out of range for {what}")
    return number


# === IPv4 ===


def ipv4_to_int(address: Union[ipaddress.IPv4Address, str]) -> int:
    """Return the ``IPv4`` column value of an address."""
    try:
        return int(ipaddress.IPv4Address(address))
    except ValueError as err:
        raise ConversionError(str(err)) from err


def ipv4_from_int(value: int) -> ipaddress.IPv4Address:
    """Build an address from an ``IPv4`` column value."""
    return ipaddress.IPv4Address(_check_range(value, 0, _U32_MAX, "IPv4"))


# === UUID ===


def uuid_to_pair(value: uuid.UUID) -> tuple[int, int]:
    """Split a UUID into its high and low 64-bit halves."""
    high, low = divmod(value.int, 1 << 64)
    return high, low


def uuid_from_pair(pair: tuple[int, int]) -> uuid.UUID:
    """Join high and low 64-bit halves into a UUID."""
    high, low = pair
    high = _check_range(high, 0, _U64_MAX, "UUID half")
    low = _check_range(low, 0, _U64_MAX, "UUID half")
    return uuid.UUID(int=(high << 64) | low)


def uuid_to_text(value: uuid.UUID) -> str:
    """Return the canonical text form of a UUID."""
    return str(value)


def uuid_from_text(text: str) -> uuid.UUID:
    """Parse a UUID from text."""
    try:
        return uuid.UUID(text)
    except (ValueError, TypeError) as err:
        raise ConversionError(f"invalid UUID {text!r}: {err}") from err


# === DateTime and DateTime64 ===


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _unix_micros(value: datetime) -> int:
    return (_as_utc(value) - _EPOCH) // timedelta(microseconds=1)


def datetime_to_seconds(value: datetime) -> int:
    """Return the ``DateTime`` column value; naive values are taken as UTC."""
    seconds = _unix_micros(value) // 1_000_000
    if not 0 <= seconds <= _U32_MAX:
        raise ConversionError(f"{value} cannot be represented as DateTime")
    return seconds


def datetime_from_seconds(value: int) -> datetime:
    """Build a UTC datetime from a ``DateTime`` column value."""
    seconds = _check_range(value, 0, _U32_MAX, "DateTime")
    return _EPOCH + timedelta(seconds=seconds)


def datetime64_to_ticks(value: datetime, precision: Union[Precision, int]) -> int:
    """Return the ``DateTime64`` column value at the given precision.

    Sub-tick parts are truncated toward zero.
    """
    step = Precision(precision).nanos_per_tick
    nanos = _unix_micros(value) * 1000
    ticks = abs(nanos) // step
    if nanos < 0:
        ticks = -ticks
    if not _I64_MIN <= ticks <= _I64_MAX:
        raise ConversionError(f"{value} cannot be represented as DateTime64")
    return ticks


def datetime64_from_ticks(value: int, precision: Union[Precision, int]) -> datetime:
    """Build a UTC datetime from a ``DateTime64`` column value.

    Parts finer than a microsecond are dropped.
    """
    step = Precision(precision).nanos_per_tick
    ticks = _check_range(value, _I64_MIN, _I64_MAX, "DateTime64")
    nanos = ticks * step
    try:
        return _EPOCH + timedelta(microseconds=nanos // 1000)
    except OverflowError as err:
        raise ConversionError(f"cannot create a datetime from {ticks}") from err


# === Date and Date32 ===


def _as_date(value: date) -> date:
    return value.date() if isinstance(value, datetime) else value


def date_to_days(value: date) -> int:
    """Return the ``Date`` column value: days since 1970-01-01."""
    day = _as_date(value)
    if day < _DATE_ORIGIN:
        raise ConversionError(f"{day} cannot be represented as Date")
    days = (day - _DATE_ORIGIN).days
    if days > _U16_MAX:
        raise ConversionError(f"{day} cannot be represented as Date")
    return days


def date_from_days(days: int) -> date:
    """Build a date from a ``Date`` column value."""
    count = _check_range(days, 0, _U16_MAX, "Date")
    return _DATE_ORIGIN + timedelta(days=count)


def date32_to_days(value: date) -> int:
    """Return the ``Date32`` column value: signed days since 1970-01-01."""
    day = _as_date(value)
    if day < _DATE32_MIN or day > _DATE32_MAX:
        raise ConversionError(f"{day} cannot be represented as Date")
    return (day - _DATE_ORIGIN).days


def date32_from_days(days: int) -> date:
    """Build a date from a ``Date32`` column value."""
    count = _check_range(days, _I32_MIN, _I32_MAX, "Date32")
    try:
        return _DATE_ORIGIN + timedelta(days=count)
    except OverflowError as err:
        raise ConversionError(f"cannot create a date from {count}") from err