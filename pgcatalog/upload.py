"""Resolution of file types for uploaded files and merging of multi-file packages."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Mapping

logger = logging.getLogger(__name__)

PERSYST = "Persyst"
GENERIC_DATA = "GenericData"

# Split on the first '.'; everything after it is the extension.
_NAME_PATTERN = re.compile(r"(?P<name>[^.]*)?\.?(?P<extension>.*)")


@dataclass
class FileDTO:
    """A file in an upload manifest."""

    upload_id: str
    target_path: str
    target_name: str
    merge_package_id: str = ""
    file_type: str = ""


def package_type_resolver(
    items: list[FileDTO], extension_types: Mapping[str, str]
) -> list[FileDTO]:
    """Fill in missing file types and merge files that form one package.

    ``extension_types`` maps an extension (everything after the first dot)
    to a file type name; unknown extensions become ``GenericData``. Items
    are updated in place and the same list is returned.
    """
    for item in items:
        file_name = ""
        if not item.file_type:
            match = _NAME_PATTERN.match(item.target_name)
            file_name = match.group("name") or ""
            extension = match.group("extension") or ""
            item.file_type = extension_types.get(extension, GENERIC_DATA)

        if item.file_type == PERSYST:
            _merge_persyst(file_name, item, items)
    return items


def _merge_persyst(file_name: str, lay_file: FileDTO, items: list[FileDTO]) -> None:
    """Pair a '.lay' file with a '.dat' file of the same name in the same folder."""
    for other in items:
        if lay_file.target_path != other.target_path or lay_file.target_name == other.target_name:
            continue
        if other.target_name.startswith(file_name) and other.target_name.endswith(".dat"):
            other.merge_package_id = lay_file.upload_id
            lay_file.merge_package_id = lay_file.upload_id
            other.file_type = PERSYST
            logger.debug("Found match in: %s", other.target_name)
            break