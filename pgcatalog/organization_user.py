"""Queries on organization membership and the claims derived from it."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .base import NoRowsError, QueryBase

logger = logging.getLogger(__name__)

_ORG_USER_COLUMNS = "organization_id, user_id, permission_bit, created_at, updated_at"


@dataclass
class OrganizationUser:
    """Membership of a user in an organization."""

    organization_id: int
    user_id: int
    permission: int
    created_at: datetime
    updated_at: datetime


@dataclass
class FeatureFlag:
    """A feature flag set on an organization."""

    organization_id: int
    feature: str
    enabled: bool
    created_at: datetime
    updated_at: datetime


@dataclass
class OrganizationClaim:
    """A user's role in an organization together with its enabled features."""

    role: int
    int_id: int
    node_id: str
    enabled_features: list[FeatureFlag] = field(default_factory=list)


class OrganizationUserNotFoundError(LookupError):
    """The user is not a member of the organization."""

    def __init__(self, error_message: str = "") -> None:
        super().__init__(f"organization user was not found (error: {error_message})")
        self.error_message = error_message


@dataclass(frozen=True)
class _OrgClaimQuery:
    name: str
    query: str
    params_format: str

    def params_message(self, user_id: int, org_identifier: Any) -> str:
        return self.params_format.format(user_id, org_identifier)

    def __str__(self) -> str:
        return self.name


_ORG_CLAIM_QUERY_FORMAT = (
    "SELECT o.id, o.node_id, ou.permission_bit, f.feature, f.enabled, f.created_at, f.updated_at "
    "FROM pennsieve.users u JOIN pennsieve.organization_user ou ON u.id = ou.user_id "
    "JOIN pennsieve.organizations o ON ou.organization_id = o.id "
    "LEFT JOIN pennsieve.feature_flags f ON o.id = f.organization_id and f.enabled = true "
    "WHERE u.id = %s AND {column} = %s"
)

_ORG_CLAIM_BY_NODE_ID = _OrgClaimQuery(
    name="GetOrganizationClaimByNodeId",
    query=_ORG_CLAIM_QUERY_FORMAT.format(column="o.node_id"),
    params_format="user id: {}, workspace node id: {}",
)

_ORG_CLAIM_BY_ID = _OrgClaimQuery(
    name="GetOrganizationClaim",
    query=_ORG_CLAIM_QUERY_FORMAT.format(column="o.id"),
    params_format="user id: {}, workspace id: {}",
)


class OrganizationUserQueries(QueryBase):
    """Membership lookups, insertion and claim construction."""

    def get_organization_user_by_id(self, user_id: int) -> OrganizationUser:
        """Return a membership of the user; raises NoRowsError if there is none."""
        sql = f"SELECT {_ORG_USER_COLUMNS} FROM pennsieve.organization_user WHERE user_id=%s;"
        return OrganizationUser(*self._fetch_one(sql, (user_id,)))

    def get_organization_user(self, org_id: int, user_id: int) -> OrganizationUser:
        """Return the user's membership in the organization."""
        sql = (
            f"SELECT {_ORG_USER_COLUMNS} FROM pennsieve.organization_user "
            "WHERE organization_id=%s AND user_id=%s;"
        )
        try:
            return OrganizationUser(*self._fetch_one(sql, (org_id, user_id)))
        except NoRowsError as err:
            logger.info("No rows were returned!")
            raise OrganizationUserNotFoundError(str(err)) from err

    def add_organization_user(
        self, org_id: int, user_id: int, permission: int
    ) -> OrganizationUser:
        """Add the user to the organization; an existing membership is returned unchanged."""
        try:
            return self.get_organization_user(org_id, user_id)
        except OrganizationUserNotFoundError:
            pass

        statement = (
            "INSERT INTO pennsieve.organization_user "
            "(organization_id, user_id, permission_bit) VALUES (%s, %s, %s)"
        )
        try:
            self._execute(statement, (org_id, user_id, permission))
        except Exception as err:
            raise RuntimeError(f"database error on insert: {err}") from err

        try:
            return self.get_organization_user(org_id, user_id)
        except Exception as err:
            raise RuntimeError(f"database error on query: {err}") from err

    def get_organization_claim(self, user_id: int, organization_id: int) -> OrganizationClaim:
        """Return the user's claim for the workspace with the given id."""
        return self._query_organization_claim(_ORG_CLAIM_BY_ID, user_id, organization_id)

    def get_organization_claim_by_node_id(
        self, user_id: int, organization_node_id: str
    ) -> OrganizationClaim:
        """Return the user's claim for the workspace with the given node id."""
        return self._query_organization_claim(
            _ORG_CLAIM_BY_NODE_ID, user_id, organization_node_id
        )

    def _query_organization_claim(
        self, claim_query: _OrgClaimQuery, user_id: int, org_identifier: Any
    ) -> OrganizationClaim:
        try:
            rows = self._fetch_all(claim_query.query, (user_id, org_identifier))
        except Exception as err:
            raise RuntimeError(
                f"error getting organization claim with query {claim_query}: {err}"
            ) from err

        org_id = 0
        org_node_id = ""
        role = 0
        flags: list[FeatureFlag] = []
        for org_id, org_node_id, role, feature, enabled, created_at, updated_at in rows:
            # An organization without flags yields a single row of nulls.
            if None not in (feature, enabled, created_at, updated_at):
                flags.append(FeatureFlag(org_id, feature, enabled, created_at, updated_at))

        if not org_id:
            raise OrganizationUserNotFoundError(
                claim_query.params_message(user_id, org_identifier)
            )

        return OrganizationClaim(
            role=role, int_id=org_id, node_id=org_node_id, enabled_features=flags
        )