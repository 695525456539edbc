"""Metadata tree scanner: file classification plus cross-file name indexes."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple

from .models import FileCategory, MetadataFile, MetadataIndexes

logger = logging.getLogger(__name__)

OBJECT_SUFFIX = ".object-meta.xml"
FIELD_SUFFIX = ".field-meta.xml"
FLOW_SUFFIX = ".flow-meta.xml"
APEX_CLASS_SUFFIX = ".cls"
APEX_TRIGGER_SUFFIX = ".trigger"
AURA_SUFFIXES = (".cmp", ".app")


def classify(path: Path) -> Optional[Tuple[FileCategory, str]]:
    """Return ``(category, name)`` for a metadata file, or None.

    Field files are not classified; they only feed the field-name index.
    """
    entry = path.name
    dir_parts = path.parent.parts

    if entry.endswith(OBJECT_SUFFIX):
        return FileCategory.CUSTOM_OBJECT, path.parent.name
    if entry.endswith(APEX_CLASS_SUFFIX):
        return FileCategory.APEX_CLASS, entry[: -len(APEX_CLASS_SUFFIX)]
    if entry.endswith(APEX_TRIGGER_SUFFIX):
        return FileCategory.APEX_TRIGGER, entry[: -len(APEX_TRIGGER_SUFFIX)]
    if entry.endswith(FLOW_SUFFIX):
        return FileCategory.FLOW, entry[: -len(FLOW_SUFFIX)]
    if entry.endswith(".js") and "lwc" in dir_parts and not entry.endswith(".js-meta.xml"):
        # One entry per component: the main module named after its folder.
        base_name = entry[: -len(".js")]
        if path.parent.name == base_name:
            return FileCategory.LWC, base_name
        return None
    if "aura" in dir_parts and entry.endswith(AURA_SUFFIXES) and not entry.endswith("-meta.xml"):
        return FileCategory.AURA, entry.rsplit(".", 1)[0]
    return None


class MetadataScanner:
    """Walks a source tree once, classifying files and indexing their names."""

    def scan(self, source_dir: Path) -> Tuple[List[MetadataFile], MetadataIndexes]:
        root = Path(source_dir)
        if not root.is_dir():
            raise NotADirectoryError(f"Not a metadata source directory: {root}")

        files: List[MetadataFile] = []
        names: Dict[FileCategory, Set[str]] = {category: set() for category in FileCategory}
        field_names: Set[str] = set()

        self._walk(root, files, names, field_names)

        indexes = MetadataIndexes(
            object_names=frozenset(names[FileCategory.CUSTOM_OBJECT]),
            field_names=frozenset(field_names),
            apex_class_names=frozenset(names[FileCategory.APEX_CLASS]),
            apex_trigger_names=frozenset(names[FileCategory.APEX_TRIGGER]),
            lwc_names=frozenset(names[FileCategory.LWC]),
            aura_names=frozenset(names[FileCategory.AURA]),
            flow_names=frozenset(names[FileCategory.FLOW]),
        )
        logger.debug("Scanned %s: %d metadata files, %d fields", root, len(files), len(field_names))
        return files, indexes

    def _walk(
        self,
        directory: Path,
        files: List[MetadataFile],
        names: Dict[FileCategory, Set[str]],
        field_names: Set[str],
    ) -> None:
        # Listing errors propagate: a partial scan is never returned.
        for entry in directory.iterdir():
            if entry.is_dir():
                self._walk(entry, files, names, field_names)
                continue
            if not entry.is_file():
                continue

            if entry.name.endswith(FIELD_SUFFIX):
                field_names.add(entry.name[: -len(FIELD_SUFFIX)])
                continue

            classified = classify(entry)
            if classified is None:
                continue
            category, name = classified
            files.append(MetadataFile(path=entry, category=category, name=name))
            names[category].add(name)
