"""A store bundling every query class over one connection, with transaction support."""

from __future__ import annotations

from typing import Any, Callable, TypeVar

from .files import FileQueries
from .organization_storage import OrganizationStorageQueries
from .organization_user import OrganizationUserQueries
from .organizations import OrganizationQueries
from .package_storage import PackageStorageQueries
from .packages import PackageQueries
from .team_user import TeamUserQueries
from .tokens import TokenQueries
from .users import UserQueries

T = TypeVar("T")


class Queries(
    FileQueries,
    OrganizationStorageQueries,
    OrganizationUserQueries,
    OrganizationQueries,
    PackageStorageQueries,
    PackageQueries,
    TeamUserQueries,
    TokenQueries,
    UserQueries,
):
    """All queries, run against a single DB-API connection."""


class SQLStore(Queries):
    """Queries on a connection, plus running a group of them in one transaction."""

    def __init__(self, db: Any) -> None:
        super().__init__(db)

    def exec_tx(self, fn: Callable[[Queries], T]) -> T:
        """Run ``fn`` with transaction-bound queries; commit on success, roll back on error.

        ``fn`` should only use the queries it is given. If rolling back fails
        too, a RuntimeError naming both errors is raised.
        """
        queries = Queries(self.db)
        try:
            result = fn(queries)
        except Exception as err:
            try:
                self.db.rollback()
            except Exception as rb_err:
                raise RuntimeError(f"tx err: {err}, rb err: {rb_err}") from err
            raise
        self.db.commit()
        return result