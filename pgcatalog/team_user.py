"""Queries on team membership and the claims derived from it."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .base import QueryBase

logger = logging.getLogger(__name__)

NO_TEAM_TYPE = "<none>"

_MEMBERSHIP_QUERY = (
    "select "
    "  u.id as user_id, "
    "  u.email as user_email, "
    "  u.node_id as user_node_id, "
    "  o.id as org_id, "
    "  o.name as org_name, "
    "  o.node_id as org_node_id, "
    "  ou.permission_bit as org_permission_bit, "
    "  t.id as team_id, "
    "  t.name as team_name, "
    "  t.node_id as team_node_id, "
    "  ot.permission_bit as team_permission_bit, "
    "  ot.system_team_type as system_team_type "
    "from pennsieve.users u "
    "join pennsieve.organization_user ou on ou.user_id=u.id "
    "join pennsieve.organizations o on ou.organization_id=o.id "
    "left join pennsieve.organization_team ot on o.id=ot.organization_id "
    "left join pennsieve.teams t on ot.team_id=t.id "
    "join pennsieve.team_user tu on tu.team_id=t.id and tu.user_id=u.id "
    "where u.id=%s "
    "  and o.id=u.preferred_org_id;"
)


@dataclass
class UserTeamMembership:
    """A user's membership in a team of their preferred organization."""

    user_id: int
    user_email: str
    user_node_id: str
    org_id: int
    org_name: str
    org_node_id: str
    org_user_permission: int
    team_id: int
    team_name: str
    team_node_id: str
    team_permission: int
    team_type: str | None


@dataclass
class TeamClaim:
    """A user's claim on a team."""

    int_id: int
    name: str
    node_id: str
    permission: int
    team_type: str


class TeamUserQueries(QueryBase):
    """Team membership lookups."""

    def get_team_memberships(self, user_id: int) -> list[UserTeamMembership]:
        """Return the user's teams within their preferred organization."""
        try:
            rows = self._fetch_all(_MEMBERSHIP_QUERY, (user_id,))
            return [UserTeamMembership(*row) for row in rows]
        except Exception as err:
            logger.error("unable to check user team membership (error: %s)", err)
            raise

    def get_team_claims(self, user_id: int) -> list[TeamClaim]:
        """Return a claim for each team the user belongs to."""
        try:
            memberships = self.get_team_memberships(user_id)
        except Exception as err:
            logger.error("unable to get user team memberships (error: %s)", err)
            raise
        return [
            TeamClaim(
                int_id=m.team_id,
                name=m.team_name,
                node_id=m.team_node_id,
                permission=m.team_permission,
                team_type=m.team_type if m.team_type is not None else NO_TEAM_TYPE,
            )
            for m in memberships
        ]