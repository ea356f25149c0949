"""Rendering of Python values as SQL literals and query parameters."""

from __future__ import annotations

import dataclasses
import ipaddress
import math
import uuid
from collections.abc import Mapping
from decimal import Decimal
from enum import Enum
from typing import Any

from .escape import escape, identifier, string

__all__ = [
    "SerializerError",
    "Int128",
    "UInt128",
    "Identifier",
    "write_arg",
    "write_param",
    "bind_value",
]


class SerializerError(Exception):
    """Raised when a value cannot be rendered as SQL."""

    @classmethod
    def unsupported(cls, what: str) -> "SerializerError":
        return cls(f"{what} is unsupported")


class Int128(int):
    """A signed 128-bit integer, rendered with an explicit ``::Int128`` cast."""

    _LOW = -(1 << 127)
    _HIGH = (1 << 127) - 1

    def __new__(cls, value: int = 0) -> "Int128":
        number = int(value)
        if not cls._LOW <= number <= cls._HIGH:
            raise ValueError(f"{number} does not fit in {cls.__name__}")
        return super().__new__(cls, number)


class UInt128(Int128):
    """An unsigned 128-bit integer, rendered with an explicit ``::UInt128`` cast."""

    _LOW = 0
    _HIGH = (1 << 128) - 1


@dataclasses.dataclass(frozen=True)
class Identifier:
    """A string bound as an identifier, for instance a table name."""

    name: str

    def write(self) -> str:
        """Return the quoted identifier."""
        return identifier(self.name)


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    text = format(Decimal(repr(float(value))), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _render(value: Any, as_param: bool) -> str:
    if value is None:
        return "NULL"
    if isinstance(value, Enum):
        return string(value.name)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Int128):
        if as_param:
            return str(int(value))
        cast = "UInt128" if isinstance(value, UInt128) else "Int128"
        return f"{int(value)}::{cast}"
    if isinstance(value, int):
        return str(int(value))
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, (uuid.UUID, ipaddress.IPv4Address, ipaddress.IPv6Address)):
        value = str(value)
    if isinstance(value, str):
        # Top-level parameters are sent unquoted; nested values are quoted.
        return escape(value) if as_param else string(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        raise SerializerError.unsupported("serialize_bytes")
    if isinstance(value, Mapping):
        raise SerializerError.unsupported("serialize_map")
    if isinstance(value, tuple):
        if hasattr(value, "_fields"):
            raise SerializerError.unsupported("serialize_tuple_struct")
        if not value:
            raise SerializerError.unsupported("serialize_unit")
        return "(" + ",".join(_render(item, False) for item in value) + ")"
    if isinstance(value, (list, set, frozenset)):
        return "[" + ",".join(_render(item, False) for item in value) + "]"
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        raise SerializerError.unsupported("serialize_struct")
    raise SerializerError.unsupported(f"values of type {type(value).__name__}")


def write_arg(value: Any) -> str:
    """Render ``value`` as an SQL literal to be placed into query text."""
    return _render(value, as_param=False)


def write_param(value: Any) -> str:
    """Render ``value`` as a server-side query parameter."""
    return _render(value, as_param=True)


def bind_value(value: Any) -> str:
    """Render a value bound to a ``?`` placeholder."""
    if isinstance(value, Identifier):
        return value.write()
    return write_arg(value)