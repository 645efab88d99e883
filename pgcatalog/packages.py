"""Queries on the packages table: folders, packages and their hierarchy."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

from .base import NoRowsError, QueryBase

logger = logging.getLogger(__name__)

COLLECTION = "Collection"
DELETING = "DELETING"
ROOT_PARENT_ID = -1

_INSERT_COLUMNS = (
    "name, type, state, node_id, parent_id, dataset_id, owner_id, size, "
    "import_id, attributes, created_at, updated_at"
)
_RETURN_COLUMNS = (
    "id, name, type, state, node_id, parent_id, dataset_id, owner_id, size, "
    "import_id, created_at, updated_at"
)
_SELECT_COLUMNS = (
    "id, name, type, state, node_id, parent_id, dataset_id, owner_id, size, "
    "created_at, updated_at"
)

_ANCESTORS_QUERY = (
    "WITH RECURSIVE ancestors(id, parent_id) AS ("
    "SELECT packages.id, packages.parent_id "
    "FROM packages packages "
    "WHERE packages.id = %s "
    "UNION "
    "SELECT parents.id, parents.parent_id "
    "FROM packages parents "
    "JOIN ancestors ON ancestors.parent_id = parents.id"
    ") "
    "SELECT id FROM ancestors"
)

_NAME_PATTERN = re.compile(r"(?P<name>[^.]*)\.?(?P<extension>.*)")


@dataclass
class PackageParams:
    """Values needed to insert a package; ``parent_id`` of -1 means the dataset root."""

    name: str
    package_type: str
    package_state: str
    node_id: str
    parent_id: int
    dataset_id: int
    owner_id: int
    size: int | None = None
    import_id: str | None = None
    attributes: list[Mapping[str, Any]] | None = field(default_factory=list)


@dataclass
class Package:
    """A row of the packages table; ``parent_id`` is None for packages at the root."""

    id: int
    name: str
    package_type: str
    package_state: str
    node_id: str
    parent_id: int | None
    dataset_id: int
    owner_id: int
    size: int | None
    created_at: Any
    updated_at: Any
    import_id: str | None = None


def expand_name(original_name: str, index: int) -> str:
    """Return ``original_name`` with `` (index)`` inserted before the first dot."""
    match = _NAME_PATTERN.match(original_name)
    stem = match.group("name")
    extension = match.group("extension")
    if extension:
        updated = f"{stem} ({index}).{extension}"
    else:
        updated = f"{stem} ({index})"
    logger.debug("Expanded name with index %d: %s", index, updated)
    return updated


def _attributes_json(attributes: Iterable[Mapping[str, Any]] | None) -> str:
    # A missing attribute list is stored as an empty JSON array.
    return json.dumps([dict(a) for a in attributes or []])


def _conflict_target(parent_id: int) -> tuple[int | None, str]:
    if parent_id >= 0:
        return parent_id, "(name,dataset_id,parent_id) WHERE parent_id IS NOT NULL"
    return None, "(name,dataset_id) WHERE parent_id IS NULL"


def _from_returning(row: tuple) -> Package:
    (pid, name, ptype, state, node_id, parent_id, dataset_id, owner_id, size,
     import_id, created_at, updated_at) = row
    return Package(
        id=pid,
        name=name,
        package_type=ptype,
        package_state=state,
        node_id=node_id,
        parent_id=parent_id,
        dataset_id=dataset_id,
        owner_id=owner_id,
        size=size,
        created_at=created_at,
        updated_at=updated_at,
        import_id=import_id,
    )


class PackageQueries(QueryBase):
    """Creation and lookup of packages and folders."""

    def add_folder(self, params: PackageParams) -> Package:
        """Add a folder, or return the existing folder of that name in the same place."""
        if params.package_type != COLLECTION:
            raise ValueError("record is not of type COLLECTION")

        now = datetime.now(timezone.utc)
        sql_parent_id, constraint = _conflict_target(params.parent_id)
        values = (
            params.name,
            params.package_type,
            params.package_state,
            params.node_id,
            sql_parent_id,
            params.dataset_id,
            params.owner_id,
            None,
            params.import_id,
            _attributes_json(params.attributes),
            now,
            now,
        )
        sql = (
            f"INSERT INTO packages({_INSERT_COLUMNS}) VALUES {self._row_placeholders(12)} "
            f"ON CONFLICT {constraint} DO UPDATE SET updated_at=EXCLUDED.updated_at "
            f"RETURNING {_RETURN_COLUMNS};"
        )
        try:
            return _from_returning(self._fetch_one(sql, values))
        except NoRowsError:
            logger.error("Error creating or getting a folder")
            raise

    def add_packages(self, records: list[PackageParams]) -> list[Package]:
        """Add non-folder packages, renaming those whose names are taken.

        Packages may sit in different folders, which must already exist. A
        package whose name is in use gets `` (1)``, `` (2)``, ... inserted
        before its extension until it fits.
        """
        if any(r.package_type == COLLECTION for r in records):
            raise ValueError(
                "cannot create COLLECTION package with add_packages, use add_folder instead"
            )

        by_parent: dict[int, list[PackageParams]] = {}
        for record in records:
            by_parent.setdefault(record.parent_id, []).append(record)

        inserted_all: list[Package] = []
        for parent_id, group in by_parent.items():
            inserted, failed = self._add_package_by_parent(parent_id, group)
            inserted_all.extend(inserted)

            original_names = {p.name: p.name for p in failed}
            index = 1
            while failed:
                renamed = []
                for package in failed:
                    original = original_names[package.name]
                    new_name = expand_name(original, index)
                    original_names[new_name] = original
                    renamed.append(replace(package, name=new_name))
                inserted, failed = self._add_package_by_parent(parent_id, renamed)
                inserted_all.extend(inserted)
                index += 1
        return inserted_all

    def get_package_children(
        self, parent: Package | None, dataset_id: int, only_folders: bool
    ) -> list[Package]:
        """Return the children of ``parent`` (the dataset root when None), skipping deleted ones."""
        conditions = ["dataset_id = %s"]
        params: list[Any] = [dataset_id]
        if parent is None:
            conditions.append("parent_id IS NULL")
        else:
            conditions.append("parent_id = %s")
            params.append(parent.id)
        conditions.append("state != %s")
        params.append(DELETING)
        if only_folders:
            conditions.append("type = %s")
            params.append(COLLECTION)

        sql = f"SELECT {_SELECT_COLUMNS} FROM packages WHERE {' AND '.join(conditions)};"
        return [Package(*row) for row in self._fetch_all(sql, params)]

    def get_package_by_node_id(self, node_id: str) -> Package:
        """Return the package with the given node id."""
        sql = f"SELECT {_SELECT_COLUMNS} FROM packages WHERE node_id = %s"
        return Package(*self._fetch_one(sql, (node_id,)))

    def get_package_ancestor_ids(self, package_id: int) -> list[int]:
        """Return the package id followed by the ids of its folders up to the root."""
        try:
            rows = self._fetch_all(_ANCESTORS_QUERY, (package_id,))
        except Exception:
            logger.exception("Error fetching package ancestors")
            raise
        return [row[0] for row in rows]

    def _add_package_by_parent(
        self, parent_id: int, records: list[PackageParams]
    ) -> tuple[list[Package], list[PackageParams]]:
        """Insert packages sharing one parent (-1 for the root).

        Returns the newly inserted packages and the records that were not
        inserted because of a name conflict.
        """
        if any(r.parent_id != parent_id for r in records):
            raise ValueError("mismatch provided parent id and parent id in package params")

        valid: dict[str, PackageParams] = {}
        for record in records:
            valid.setdefault(record.name, record)
        expected_node_ids = {r.node_id for r in valid.values()}

        now = datetime.now(timezone.utc)
        sql_parent_id, constraint = _conflict_target(parent_id)
        values: list[Any] = []
        for row in valid.values():
            values.extend(
                [
                    row.name,
                    row.package_type,
                    row.package_state,
                    row.node_id,
                    sql_parent_id,
                    row.dataset_id,
                    row.owner_id,
                    row.size,
                    row.import_id,
                    _attributes_json(row.attributes),
                    now,
                    now,
                ]
            )

        inserts = ",".join(self._row_placeholders(12) for _ in valid)
        sql = (
            f"INSERT INTO packages({_INSERT_COLUMNS}) VALUES {inserts} "
            f"ON CONFLICT {constraint} DO UPDATE SET updated_at=EXCLUDED.updated_at "
            f"RETURNING {_RETURN_COLUMNS};"
        )
        # A conflicting row comes back as the existing package, whose node id
        # differs from the one requested.
        inserted = [
            package
            for package in map(_from_returning, self._fetch_all(sql, values))
            if package.node_id in expected_node_ids
        ]
        inserted_ids = {p.node_id for p in inserted}
        failed = [r for r in records if r.node_id not in inserted_ids]
        for record in failed:
            logger.debug("Package not inserted: %s", record.node_id)
        return inserted, failed