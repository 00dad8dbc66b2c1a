"""Parse, mutate and commit the XML parts of one package as a unit of work."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Set

from odf_restyler.errors import EntryNotFound
from odf_restyler.model.document_node import DocumentNode
from odf_restyler.parser.odf_package import OdfPackage, PathLike
from odf_restyler.parser.xml_tree import parse_xml
from odf_restyler.renderer.xml_writer import serialize_xml
from odf_restyler.utils.logger import get_logger

LOGGER = get_logger(__name__)


class PackageTransaction:
    """Open a package, hand out parsed parts, and write back only what changed."""

    def __init__(self, path: PathLike) -> None:
        self.package = OdfPackage.open(path)
        self._trees: Dict[str, DocumentNode] = {}
        self._dirty: Set[str] = set()

    def __enter__(self) -> "PackageTransaction":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self.package.close()

    @property
    def source(self) -> Path:
        return self.package.path

    def tree(self, entry: str, required: bool = True) -> Optional[DocumentNode]:
        """Return the parsed tree for ``entry``, parsing it on first use.

        A missing entry raises :class:`EntryNotFound` when ``required``;
        otherwise ``None`` is returned.
        """
        if entry in self._trees:
            return self._trees[entry]
        if not self.package.has_entry(entry):
            if required:
                raise EntryNotFound(entry)
            LOGGER.debug("Skipping optional part %s", entry)
            return None
        root = parse_xml(self.package.read_entry(entry), part=entry)
        self._trees[entry] = root
        return root

    def update(self, entry: str, root: Optional[DocumentNode] = None) -> None:
        """Mark ``entry`` for re-serialization, optionally replacing its tree."""
        if root is not None:
            self._trees[entry] = root
        if entry not in self._trees:
            raise EntryNotFound(entry)
        self._dirty.add(entry)

    @property
    def changed_entries(self) -> Set[str]:
        return set(self._dirty)

    def commit(self, output_path: PathLike) -> bool:
        """Write the package when any part changed; return whether it was written."""
        if not self._dirty:
            LOGGER.info("No changes in %s; nothing written", self.source.name)
            return False
        replacements = {entry: serialize_xml(self._trees[entry]) for entry in sorted(self._dirty)}
        self.package.commit(replacements, output_path)
        LOGGER.info("Wrote %s (%s)", output_path, ", ".join(sorted(self._dirty)))
        return True
