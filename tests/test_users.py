import pytest

from pgcatalog.base import NoRowsError
from pgcatalog.users import User, UserQueries

USERS = [
    (1001, "N:user:1001", "first@example.com", "First", "User", False, 1, "11111111-1111-1111-1111-111111111111"),
    (1002, "N:user:1002", "second@example.com", "Second", "User", False, 1, "22222222-2222-2222-2222-222222222222"),
    (2001, "N:user:2001", "third@example.com", "Third", "User", False, -1, "00000000-1111-0000-2222-000000002001"),
]


class FakeCursor:
    def __init__(self, db):
        self._db = db
        self._rows = []
        self.rowcount = -1

    def execute(self, sql, params=()):
        self._rows, self.rowcount = self._db.handle(sql, tuple(params))

    def fetchone(self):
        return self._rows.pop(0) if self._rows else None

    def fetchall(self):
        rows, self._rows = self._rows, []
        return rows

    def close(self):
        pass


class UsersDB:
    def __init__(self):
        self.calls = []

    def cursor(self):
        return FakeCursor(self)

    def handle(self, sql, params):
        self.calls.append((sql, params))
        index = 7 if "WHERE cognito_id=%s" in sql else 0
        found = [row[:7] for row in USERS if row[index] == params[0]]
        return found, len(found)


@pytest.fixture
def queries():
    return UserQueries(UsersDB())


def test_get_user_by_id(queries):
    user = queries.get_user_by_id(1001)
    assert user.id == 1001
    assert user == User(*USERS[0][:7])


def test_get_user_by_cognito_id(queries):
    assert queries.get_by_cognito_id("22222222-2222-2222-2222-222222222222").id == 1002


def test_get_user_by_id_no_preferred_org(queries):
    user = queries.get_user_by_id(2001)
    assert user.id == 2001
    assert user.preferred_org == -1


def test_missing_user_raises(queries):
    with pytest.raises(NoRowsError):
        queries.get_user_by_id(5)


def test_preferred_org_is_coalesced_in_query():
    db = UsersDB()
    UserQueries(db).get_user_by_id(1001)
    sql, params = db.calls[0]
    assert "COALESCE(preferred_org_id, -1)" in sql
    assert params == (1001,)