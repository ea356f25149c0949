"""Statements for watching live views built from tables or queries."""

from __future__ import annotations

import copy
import hashlib
import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Optional, Union

from .builder import SqlBuilder

__all__ = [
    "WATCH_OPTIONS",
    "WatchParams",
    "Watch",
    "is_table_name",
    "make_live_view_name",
]

# Client settings a watch must be run with; compression must be disabled too.
WATCH_OPTIONS: dict[str, str] = {
    "max_execution_time": "0",
    "allow_experimental_live_view": "1",
    "output_format_json_quote_64bit_integers": "0",
}

_ASCII_WHITESPACE = re.compile(r"[ \t\n\r\x0c]+")


def is_table_name(sql: str) -> bool:
    """Whether ``sql`` is a single word, taken to be a table or view name."""
    return len([word for word in _ASCII_WHITESPACE.split(sql) if word]) == 1


def make_live_view_name(sql: str) -> str:
    """Derive a stable live view name from the query text."""
    return "lv_" + hashlib.sha1(sql.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class WatchParams:
    """Everything needed to create and watch a live view."""

    sql: Optional[str]
    view: str
    refresh: Optional[timedelta] = None
    limit: Optional[int] = None
    only_events: bool = False

    def create_statement(self) -> Optional[str]:
        """The ``CREATE LIVE VIEW`` statement, or None when watching a table."""
        if self.sql is None:
            return None
        refresh = ""
        if self.refresh is not None:
            refresh = f" REFRESH {self.refresh // timedelta(seconds=1)}"
        return f"CREATE LIVE VIEW IF NOT EXISTS {self.view}{refresh} AS {self.sql}"

    def watch_statement(self) -> str:
        """The ``WATCH`` statement producing JSON rows with progress."""
        statement = f"WATCH {self.view}"
        if self.only_events:
            statement += " EVENTS"
        if self.limit is not None:
            statement += f" LIMIT {self.limit}"
        return statement + " FORMAT JSONEachRowWithProgress"


def _to_timedelta(interval: Union[timedelta, int, float, None]) -> Optional[timedelta]:
    if interval is None or isinstance(interval, timedelta):
        return interval
    return timedelta(seconds=interval)


class Watch:
    """Describes a watch over a table name or an SQL query."""

    def __init__(self, template: str) -> None:
        self._sql = SqlBuilder(template)
        self._refresh: Optional[timedelta] = None
        self._limit: Optional[int] = None
        self._only_events = False

    @property
    def is_events(self) -> bool:
        """Whether only versions are emitted instead of rows."""
        return self._only_events

    def bind(self, value: Any) -> "Watch":
        """Bind a value to the next ``?`` placeholder."""
        self._sql.bind_arg(value)
        return self

    def limit(self, limit: Optional[int]) -> "Watch":
        """Limit the number of updates after the initial one."""
        if limit is not None and limit < 0:
            raise ValueError("limit must not be negative")
        self._limit = limit
        return self

    def refresh(self, interval: Union[timedelta, int, float, None]) -> "Watch":
        """Set the refresh interval; meaningful only for SQL queries."""
        self._refresh = _to_timedelta(interval)
        return self

    def only_events(self) -> "Watch":
        """Return a watch that emits only versions."""
        other = copy.deepcopy(self)
        other._only_events = True
        return other

    def params(self, column_names: Iterable[str] = ()) -> WatchParams:
        """Finish the query and return the parameters of the watch."""
        names = list(column_names)
        if self._only_events:
            names = []
        elif not names:
            raise ValueError("only structs are supported in the watch API")
        builder = copy.deepcopy(self._sql)
        builder.bind_fields(names)
        sql = builder.finish()
        if is_table_name(sql):
            query, view = None, sql
        else:
            query, view = sql, make_live_view_name(sql)
        return WatchParams(
            sql=query,
            view=view,
            refresh=self._refresh,
            limit=self._limit,
            only_events=self._only_events,
        )