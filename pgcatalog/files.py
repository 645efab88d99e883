"""Queries on the files table."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from .base import QueryBase

logger = logging.getLogger(__name__)

UNPROCESSED = "unprocessed"
UPLOADED = "uploaded"
CHUNK_SIZE = "32"

_INSERT_COLUMNS = (
    "package_id, name, file_type, s3_bucket, s3_key, object_type, size, checksum, "
    "uuid, processing_state, uploaded_state, created_at, updated_at"
)
_RETURN_COLUMNS = "id, " + _INSERT_COLUMNS


@dataclass
class FileParams:
    """Values needed to insert a file."""

    package_id: int
    name: str
    file_type: str
    s3_bucket: str
    s3_key: str
    object_type: str
    size: int
    uuid: UUID | str
    checksum: str = ""
    sha256: str = ""


@dataclass
class File:
    """A row of the files table."""

    id: Any
    package_id: int
    name: str
    file_type: str
    s3_bucket: str
    s3_key: str
    object_type: str
    size: int
    checksum: str
    uuid: Any
    processing_state: str
    uploaded_state: str
    created_at: datetime
    updated_at: datetime


class FileRecordNotFoundError(LookupError):
    """No file matched the update."""

    def __init__(self, upload_id: str = "") -> None:
        super().__init__(f"file not found: {upload_id}" if upload_id else "file not found")


class MultipleRowsAffectedError(RuntimeError):
    """An update meant for one file touched several rows."""

    def __init__(self, count: int) -> None:
        super().__init__(f"multiple rows affected: {count}")
        self.count = count


class FileQueries(QueryBase):
    """Insertion and update of file records."""

    def add_files(self, files: list[FileParams]) -> list[File]:
        """Insert files; a file whose uuid exists at the same S3 location is touched and returned.

        A file whose uuid exists at a different S3 location is left alone and
        not returned.
        """
        if not files:
            raise ValueError("no files to add")

        now = datetime.now(timezone.utc)
        values: list[Any] = []
        for row in files:
            etag = json.dumps(
                {"checksum": row.checksum, "chunkSize": CHUNK_SIZE, "sha256": row.sha256}
            )
            values.extend(
                [
                    row.package_id,
                    row.name,
                    str(row.file_type),
                    row.s3_bucket,
                    row.s3_key,
                    str(row.object_type),
                    row.size,
                    etag,
                    str(row.uuid),
                    UNPROCESSED,
                    UPLOADED,
                    now,
                    now,
                ]
            )

        inserts = ",".join(self._row_placeholders(13) for _ in files)
        sql = (
            f"INSERT INTO files({_INSERT_COLUMNS}) VALUES {inserts} "
            "ON CONFLICT (uuid) DO UPDATE SET updated_at = EXCLUDED.updated_at "
            "WHERE files.s3_bucket = EXCLUDED.s3_bucket AND files.s3_key = EXCLUDED.s3_key "
            f"RETURNING {_RETURN_COLUMNS};"
        )
        return [File(*row) for row in self._fetch_all(sql, values)]

    def update_bucket_for_file(
        self, upload_id: str, bucket: str, s3_key: str, organization_id: int
    ) -> None:
        """Point the file with ``upload_id`` at a new storage location."""
        sql = (
            f'UPDATE "{int(organization_id)}".files '
            "SET s3_bucket=%s, s3_key=%s WHERE UUID=%s;"
        )
        affected = self._execute(sql, (bucket, s3_key, upload_id))
        if affected == 0:
            error = FileRecordNotFoundError(upload_id)
            logger.error("%s", error)
            raise error
        if affected != 1:
            error = MultipleRowsAffectedError(affected)
            logger.error("%s", error)
            raise error