import pytest

from pgcatalog.base import NoRowsError, QueryBase


class FakeCursor:
    def __init__(self, db):
        self._db = db
        self._rows = []
        self.rowcount = -1
        self.closed = False

    def execute(self, sql, params=()):
        self._db.calls.append((sql, params))
        self._rows = list(self._db.rows)
        self.rowcount = self._db.rowcount

    def fetchone(self):
        return self._rows.pop(0) if self._rows else None

    def fetchall(self):
        rows, self._rows = self._rows, []
        return rows

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, rows=(), rowcount=0):
        self.rows = list(rows)
        self.rowcount = rowcount
        self.calls = []
        self.cursors = []

    def cursor(self):
        cur = FakeCursor(self)
        self.cursors.append(cur)
        return cur


def test_keeps_connection():
    conn = FakeConnection()
    assert QueryBase(conn).db is conn


def test_fetch_one_returns_first_row():
    conn = FakeConnection(rows=[(1, "a"), (2, "b")])
    assert QueryBase(conn)._fetch_one("SELECT x", [5]) == (1, "a")
    assert conn.calls == [("SELECT x", (5,))]


def test_fetch_one_without_rows_raises():
    conn = FakeConnection()
    with pytest.raises(NoRowsError):
        QueryBase(conn)._fetch_one("SELECT x")


def test_no_rows_error_is_lookup_error():
    conn = FakeConnection()
    with pytest.raises(LookupError):
        QueryBase(conn)._fetch_one("SELECT x")


def test_fetch_all_returns_every_row():
    rows = [(1, "a"), (2, "b")]
    conn = FakeConnection(rows=rows)
    assert QueryBase(conn)._fetch_all("SELECT x") == rows


def test_execute_returns_rowcount():
    conn = FakeConnection(rowcount=3)
    assert QueryBase(conn)._execute("UPDATE t SET a=%s", ("v",)) == 3
    assert conn.calls[0][1] == ("v",)


def test_cursors_are_closed():
    conn = FakeConnection(rows=[(1,)])
    base = QueryBase(conn)
    base._fetch_one("SELECT 1")
    base._fetch_all("SELECT 1")
    base._execute("SELECT 1")
    assert len(conn.cursors) == 3
    assert all(cur.closed for cur in conn.cursors)


def test_row_placeholders():
    assert QueryBase._row_placeholders(3) == "(%s,%s,%s)"
    assert QueryBase._row_placeholders(13).count("%s") == 13