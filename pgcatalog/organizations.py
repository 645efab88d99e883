"""Queries on the organizations table."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .base import NoRowsError, QueryBase

logger = logging.getLogger(__name__)

_COLUMNS = (
    "id, name, slug, node_id, storage_bucket, publish_bucket, embargo_bucket, "
    "created_at, updated_at"
)


@dataclass
class Organization:
    """A row of the organizations table."""

    id: int
    name: str
    slug: str
    node_id: str
    storage_bucket: str | None
    publish_bucket: str | None
    embargo_bucket: str | None
    created_at: datetime
    updated_at: datetime


class OrganizationQueries(QueryBase):
    """Lookups of a single organization."""

    def _get_organization(self, column: str, value: Any) -> Organization:
        sql = f"SELECT {_COLUMNS} FROM pennsieve.organizations WHERE {column}=%s;"
        try:
            return Organization(*self._fetch_one(sql, (value,)))
        except NoRowsError:
            logger.error("No rows were returned!")
            raise

    def get_organization(self, organization_id: int) -> Organization:
        """Return the organization with the given id."""
        return self._get_organization("id", organization_id)

    def get_organization_by_node_id(self, node_id: str) -> Organization:
        """Return the organization with the given node id."""
        return self._get_organization("node_id", node_id)

    def get_organization_by_name(self, name: str) -> Organization:
        """Return the organization with the given name."""
        return self._get_organization("name", name)

    def get_organization_by_slug(self, slug: str) -> Organization:
        """Return the organization with the given slug."""
        return self._get_organization("slug", slug)