"""Queries on per-organization storage totals."""

from __future__ import annotations

import logging

from .base import QueryBase

logger = logging.getLogger(__name__)


class OrganizationStorageQueries(QueryBase):
    """Reads and adjusts the storage size recorded for an organization."""

    def increment_organization_storage(self, organization_id: int, size: int) -> None:
        """Add ``size`` (which may be negative) to the organization's storage."""
        sql = (
            "INSERT INTO pennsieve.organization_storage "
            "AS organization_storage (organization_id, size) "
            "VALUES (%s, %s) ON CONFLICT (organization_id) "
            "DO UPDATE SET size = COALESCE(organization_storage.size, 0) + EXCLUDED.size"
        )
        try:
            self._execute(sql, (organization_id, size))
        except Exception:
            logger.exception("Error incrementing organization size")
            raise

    def get_organization_storage_by_id(self, organization_id: int) -> int:
        """Return the storage recorded for the organization."""
        sql = (
            "select p.size from pennsieve.organization_storage as p "
            "where p.organization_id = %s;"
        )
        return self._fetch_one(sql, (organization_id,))[0]