import pytest

from pgcatalog.team_user import TeamClaim, TeamUserQueries, UserTeamMembership

MEMBERSHIP_ROWS = [
    (1001, "user1001@example.com", "N:user:1001", 1, "Org One", "N:organization:org-one",
     8, 11, "Publishers", "N:team:publishers", 16, "publishers"),
    (1001, "user1001@example.com", "N:user:1001", 1, "Org One", "N:organization:org-one",
     8, 12, "Analysts", "N:team:analysts", 2, None),
]


class FakeCursor:
    def __init__(self, db):
        self.db = db
        self.rows = []
        self.rowcount = -1

    def execute(self, sql, params=()):
        self.db.executed.append((sql, params))
        if self.db.error is not None:
            raise self.db.error
        (user_id,) = params
        self.rows = [r for r in self.db.rows if r[0] == user_id]
        self.rowcount = len(self.rows)

    def fetchall(self):
        return list(self.rows)

    def fetchone(self):
        return self.rows[0] if self.rows else None

    def close(self):
        pass


class FakeDatabase:
    def __init__(self, rows, error=None):
        self.rows = rows
        self.error = error
        self.executed = []

    def cursor(self):
        return FakeCursor(self)


@pytest.fixture
def db():
    return FakeDatabase(MEMBERSHIP_ROWS)


@pytest.fixture
def queries(db):
    return TeamUserQueries(db)


def test_get_team_memberships(queries, db):
    memberships = queries.get_team_memberships(1001)
    assert len(memberships) == 2
    assert memberships[0] == UserTeamMembership(*MEMBERSHIP_ROWS[0])
    assert db.executed[-1][1] == (1001,)


def test_get_team_memberships_none(queries):
    assert queries.get_team_memberships(4242) == []


def test_get_team_claims(queries):
    claims = queries.get_team_claims(1001)
    assert len(claims) == 2
    assert claims[0] == TeamClaim(11, "Publishers", "N:team:publishers", 16, "publishers")


def test_team_claim_without_type_uses_placeholder(queries):
    claims = queries.get_team_claims(1001)
    assert claims[1].team_type == "<none>"
    assert claims[1].int_id == 12


def test_query_error_propagates():
    queries = TeamUserQueries(FakeDatabase([], error=RuntimeError("connection lost")))
    with pytest.raises(RuntimeError, match="connection lost"):
        queries.get_team_claims(1001)


def test_malformed_row_raises():
    queries = TeamUserQueries(FakeDatabase([(1001, "user1001@example.com")]))
    with pytest.raises(TypeError):
        queries.get_team_memberships(1001)