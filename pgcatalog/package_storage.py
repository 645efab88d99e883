"""Queries on per-package storage totals."""

from __future__ import annotations

import logging

from .base import QueryBase

logger = logging.getLogger(__name__)

_ANCESTORS_CTE = (
    "WITH RECURSIVE ancestors(id, parent_id) AS ("
    "SELECT packages.id, packages.parent_id "
    "FROM packages packages "
    "WHERE packages.id = %s "
    "UNION "
    "SELECT parents.id, parents.parent_id "
    "FROM packages parents "
    "JOIN ancestors ON ancestors.parent_id = parents.id"
    ") "
)


class PackageStorageQueries(QueryBase):
    """Reads and adjusts the storage size recorded for packages."""

    def increment_package_storage(self, package_id: int, size: int) -> None:
        """Add ``size`` (which may be negative) to the package's storage."""
        sql = (
            "INSERT INTO package_storage AS package_storage (package_id, size) "
            "VALUES (%s, %s) ON CONFLICT (package_id) "
            "DO UPDATE SET size = COALESCE(package_storage.size, 0) + EXCLUDED.size;"
        )
        try:
            self._execute(sql, (package_id, size))
        except Exception:
            logger.exception("Error incrementing package size")
            raise

    def increment_package_storage_ancestors(self, parent_id: int, size: int) -> None:
        """Add ``size`` to ``parent_id`` and every package above it."""
        sql = (
            _ANCESTORS_CTE
            + "INSERT INTO package_storage "
            "AS package_storage (package_id, size) "
            "SELECT id, %s FROM ancestors "
            "ON CONFLICT (package_id) "
            "DO UPDATE SET size = COALESCE(package_storage.size, 0) + EXCLUDED.size;"
        )
        try:
            self._execute(sql, (parent_id, size))
        except Exception:
            logger.exception("Error incrementing package size")
            raise

    def get_package_storage_by_id(self, package_id: int) -> int:
        """Return the storage recorded for the package."""
        sql = "select p.size from package_storage as p where p.package_id = %s;"
        return self._fetch_one(sql, (package_id,))[0]