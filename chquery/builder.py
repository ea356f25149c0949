"""Query templates with ``?`` placeholders for bound arguments and ``?fields``."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import Any, Optional, Union

from .escape import identifier
from .serialize import SerializerError, bind_value

__all__ = ["InvalidParamsError", "SqlBuilder", "join_column_names"]


class InvalidParamsError(ValueError):
    """Raised when a query template cannot be turned into SQL text."""


class _Placeholder(Enum):
    ARG = "?"
    FIELDS = "?fields"


_Part = Union[_Placeholder, str]


def join_column_names(column_names: Iterable[str]) -> Optional[str]:
    """Join column names as quoted identifiers, or return None if there are none."""
    names = list(column_names)
    if not names:
        return None
    return ",".join(identifier(name) for name in names)


def _parse(template: str) -> list[_Part]:
    parts: list[_Part] = []
    rest = template
    while (idx := rest.find("?")) != -1:
        if rest.startswith("?", idx + 1):
            # "??" is an escaped question mark.
            parts.append(rest[: idx + 1])
            rest = rest[idx + 2 :]
            continue
        if idx:
            parts.append(rest[:idx])
        rest = rest[idx + 1 :]
        if rest.startswith("fields"):
            parts.append(_Placeholder.FIELDS)
            rest = rest[len("fields") :]
        else:
            parts.append(_Placeholder.ARG)
    if rest:
        parts.append(rest)
    return parts


class SqlBuilder:
    """Builds SQL text from a template, collecting the first error it meets."""

    def __init__(self, template: str) -> None:
        self._parts: list[_Part] = _parse(template)
        self._output_format: Optional[str] = None
        self._error: Optional[str] = None

    def __str__(self) -> str:
        if self._error is not None:
            return self._error
        text = "".join(
            part.value if isinstance(part, _Placeholder) else part for part in self._parts
        )
        if self._output_format is not None:
            text += f" FORMAT {self._output_format}"
        return text

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"

    @property
    def failed(self) -> bool:
        """Whether an error has been recorded."""
        return self._error is not None

    def set_output_format(self, output_format: str) -> None:
        """Append ``FORMAT <output_format>`` to the finished query."""
        if self._error is None:
            self._output_format = str(output_format)

    def bind_arg(self, value: Any) -> None:
        """Replace the first unbound ``?`` with the rendered ``value``."""
        if self._error is not None:
            return
        position = next(
            (i for i, part in enumerate(self._parts) if part is _Placeholder.ARG), None
        )
        if position is None:
            self._fail("unexpected bind(), all arguments are already bound")
            return
        try:
            rendered = bind_value(value)
        except SerializerError as err:
            self._fail(f"invalid argument: {err}")
            return
        self._parts[position] = rendered

    def bind_fields(self, column_names: Iterable[str]) -> None:
        """Replace every ``?fields`` with the quoted, comma-joined column names."""
        if self._error is not None:
            return
        fields = join_column_names(column_names)
        if fields is not None:
            self._parts = [
                fields if part is _Placeholder.FIELDS else part for part in self._parts
            ]
        elif _Placeholder.FIELDS in self._parts:
            self._fail("argument ?fields cannot be used with non-struct row types")

    def finish(self) -> str:
        """Return the final SQL text, raising InvalidParamsError on any problem."""
        if self._error is None:
            for part in self._parts:
                if part is _Placeholder.ARG:
                    self._fail("unbound query argument")
                    break
                if part is _Placeholder.FIELDS:
                    self._fail("unbound query argument ?fields")
                    break
        if self._error is not None:
            raise InvalidParamsError(self._error)
        sql = "".join(part for part in self._parts if isinstance(part, str))
        if self._output_format is not None:
            sql += f" FORMAT {self._output_format}"
        return sql

    def _fail(self, message: str) -> None:
        self._error = f"invalid SQL: {message}"