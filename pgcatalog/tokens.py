"""Queries on API tokens and the users they belong to."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .base import NoRowsError, QueryBase
from .users import User

logger = logging.getLogger(__name__)


@dataclass
class Token:
    """An API token record."""

    id: int
    name: str
    token: str
    organization_id: int
    user_id: int
    cognito_id: str
    last_used: datetime | None
    created_at: datetime
    updated_at: datetime


class TokenQueries(QueryBase):
    """Lookups keyed on a token's cognito id."""

    def _fetch_or_log(self, sql: str, value: Any) -> tuple:
        try:
            return self._fetch_one(sql, (value,))
        except NoRowsError:
            logger.error("No rows were returned!")
            raise

    def get_token_by_cognito_id(self, cognito_id: str) -> Token:
        """Return the token record with the given cognito id."""
        sql = (
            "SELECT id, name, token, organization_id, user_id, cognito_id, last_used, "
            "created_at, updated_at FROM pennsieve.users WHERE cognito_id=%s;"
        )
        return Token(*self._fetch_or_log(sql, cognito_id))

    def get_user_by_cognito_id(self, cognito_id: str) -> User:
        """Return the user owning the token; the preferred org is the token's organization."""
        sql = (
            "SELECT pennsieve.users.id, pennsieve.users.node_id, email, first_name, "
            "last_name, is_super_admin, pennsieve.tokens.organization_id as preferred_org_id "
            "FROM pennsieve.users JOIN pennsieve.tokens "
            "ON pennsieve.tokens.user_id = pennsieve.users.id "
            "WHERE pennsieve.tokens.token=%s;"
        )
        return User(*self._fetch_or_log(sql, cognito_id))