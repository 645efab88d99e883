"""Queries on the users table."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from .base import NoRowsError, QueryBase

logger = logging.getLogger(__name__)

_COLUMNS = (
    "id, node_id, email, first_name, last_name, is_super_admin, "
    "COALESCE(preferred_org_id, -1) as preferred_org_id"
)


@dataclass
class User:
    """A user; ``preferred_org`` is -1 when none is set."""

    id: int
    node_id: str
    email: str
    first_name: str
    last_name: str
    is_super_admin: bool
    preferred_org: int


class UserQueries(QueryBase):
    """Lookups of a single user."""

    def _get_user(self, column: str, value: Any) -> User:
        sql = f"SELECT {_COLUMNS} FROM pennsieve.users WHERE {column}=%s;"
        try:
            return User(*self._fetch_one(sql, (value,)))
        except NoRowsError:
            logger.error("No rows were returned!")
            raise

    def get_by_cognito_id(self, cognito_id: str) -> User:
        """Return the user with the given cognito id."""
        return self._get_user("cognito_id", cognito_id)

    def get_user_by_id(self, user_id: int) -> User:
        """Return the user with the given id."""
        return self._get_user("id", user_id)