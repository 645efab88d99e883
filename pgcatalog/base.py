"""Shared plumbing for query classes built on a DB-API 2.0 connection."""

from __future__ import annotations

from contextlib import closing
from typing import Any, Iterable


class NoRowsError(LookupError):
    """Raised when a query that must yield a row yields none."""

    def __init__(self, message: str = "no rows in result set") -> None:
        super().__init__(message)


class QueryBase:
    """Runs SQL against a DB-API connection that uses the ``format`` paramstyle.

    The connection may also be a transaction-bound connection; every query
    opens its own cursor and closes it when done.
    """

    def __init__(self, db: Any) -> None:
        self.db = db

    @staticmethod
    def _row_placeholders(count: int) -> str:
        return "(" + ",".join(["%s"] * count) + ")"

    def _execute(self, sql: str, params: Iterable[Any] = ()) -> int:
        with closing(self.db.cursor()) as cur:
            cur.execute(sql, tuple(params))
            return cur.rowcount

    def _fetch_all(self, sql: str, params: Iterable[Any] = ()) -> list[tuple]:
        with closing(self.db.cursor()) as cur:
            cur.execute(sql, tuple(params))
            return [tuple(row) for row in cur.fetchall()]

    def _fetch_one(self, sql: str, params: Iterable[Any] = ()) -> tuple:
        with closing(self.db.cursor()) as cur:
            cur.execute(sql, tuple(params))
            row = cur.fetchone()
        if row is None:
            raise NoRowsError()
        return tuple(row)