"""Summaries of an OpenDocument package: manifest, metadata and body statistics."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from odf_restyler.model.document_node import DocumentNode
from odf_restyler.parser.odf_package import CONTENT_XML_PATH, MANIFEST_XML_PATH, META_XML_PATH, OdfPackage
from odf_restyler.parser.xml_tree import parse_xml
from odf_restyler.utils.logger import get_logger
from odf_restyler.utils.namespaces import DRAW, MANIFEST, META, OFFICE, TABLE, TEXT

LOGGER = get_logger(__name__)

_MIMETYPE_PREFIX = "application/vnd.oasis.opendocument."

_DOCUMENT_TYPES = {
    "text": "text",
    "text-master": "text",
    "text-template": "text",
    "spreadsheet": "spreadsheet",
    "spreadsheet-template": "spreadsheet",
    "presentation": "presentation",
    "presentation-template": "presentation",
    "graphics": "graphics",
    "graphics-template": "graphics",
}

_EXTENSION_TYPES = {
    ".odt": "text",
    ".ott": "text",
    ".odm": "text",
    ".ods": "spreadsheet",
    ".ots": "spreadsheet",
    ".odp": "presentation",
    ".otp": "presentation",
    ".odg": "graphics",
    ".otg": "graphics",
}

MetaValue = Union[str, Dict[str, int]]


@dataclass(slots=True, frozen=True)
class ManifestEntry:
    full_path: str
    media_type: str


@dataclass(slots=True)
class DocumentStatistics:
    """Counts taken from the body of ``content.xml``."""

    paragraphs: int = 0
    headings: int = 0
    tables: int = 0
    spans: int = 0
    images: int = 0
    words: int = 0

    def as_dict(self) -> Dict[str, int]:
        return {
            "paragraphs": self.paragraphs,
            "headings": self.headings,
            "tables": self.tables,
            "spans": self.spans,
            "images": self.images,
            "words": self.words,
        }


@dataclass(slots=True)
class PackageInfo:
    path: Path
    mimetype: Optional[str]
    document_type: str
    entries: List[str] = field(default_factory=list)
    manifest: List[ManifestEntry] = field(default_factory=list)
    metadata: Dict[str, MetaValue] = field(default_factory=dict)
    statistics: DocumentStatistics = field(default_factory=DocumentStatistics)

    def as_dict(self) -> Dict[str, object]:
        return {
            "path": str(self.path),
            "mimetype": self.mimetype,
            "document_type": self.document_type,
            "entries": list(self.entries),
            "manifest": [{"full_path": e.full_path, "media_type": e.media_type} for e in self.manifest],
            "metadata": dict(self.metadata),
            "statistics": self.statistics.as_dict(),
        }


def detect_document_type(mimetype: Optional[str], path: Optional[Path] = None) -> str:
    """Map the package mimetype (or, failing that, the extension) to a document type."""
    if mimetype and mimetype.startswith(_MIMETYPE_PREFIX):
        kind = _DOCUMENT_TYPES.get(mimetype[len(_MIMETYPE_PREFIX):])
        if kind:
            return kind
    if path is not None:
        return _EXTENSION_TYPES.get(path.suffix.lower(), "unknown")
    return "unknown"


def parse_manifest(root: DocumentNode) -> List[ManifestEntry]:
    return [
        ManifestEntry(entry.get(MANIFEST, "full-path", ""), entry.get(MANIFEST, "media-type", ""))
        for entry in root.iter(MANIFEST, "file-entry")
    ]


def parse_metadata(root: DocumentNode) -> Dict[str, MetaValue]:
    """Flatten ``office:meta`` into local name -> text.

    ``meta:document-statistic`` becomes a dict of its numeric attributes;
    repeated elements such as ``meta:keyword`` are joined with ``", "``.
    """
    metadata: Dict[str, MetaValue] = {}
    meta = root.find(OFFICE, "meta")
    if meta is None:
        return metadata
    for child in meta.iter_children():
        if child.matches(META, "document-statistic"):
            counts: Dict[str, int] = {}
            for attribute in child.attributes:
                if attribute.is_namespace_declaration:
                    continue
                try:
                    counts[attribute.local_name] = int(attribute.value)
                except ValueError:
                    LOGGER.warning("Ignoring non-numeric statistic %s=%r", attribute.name, attribute.value)
            metadata["document-statistic"] = counts
            continue
        if child.matches(META, "user-defined"):
            key = child.get(META, "name") or child.local_name
        else:
            key = child.local_name
        value = child.text_content().strip()
        previous = metadata.get(key)
        if isinstance(previous, str) and previous:
            value = f"{previous}, {value}"
        metadata[key] = value
    return metadata


def collect_statistics(content_root: DocumentNode) -> DocumentStatistics:
    """Count body elements; words are taken from outermost paragraphs and headings only."""
    stats = DocumentStatistics()
    body = content_root.find(OFFICE, "body")
    if body is None:
        return stats
    words: List[str] = []
    stack: List[Tuple[DocumentNode, bool]] = [(body, False)]
    while stack:
        node, in_paragraph = stack.pop()
        block = node.matches(TEXT, "p") or node.matches(TEXT, "h")
        if node.matches(TEXT, "p"):
            stats.paragraphs += 1
        elif node.matches(TEXT, "h"):
            stats.headings += 1
        elif node.matches(TEXT, "span"):
            stats.spans += 1
        elif node.matches(TABLE, "table"):
            stats.tables += 1
        elif node.matches(DRAW, "image"):
            stats.images += 1
        if block and not in_paragraph:
            words.extend(node.text_content().split())
        stack.extend((child, in_paragraph or block) for child in node.iter_children())
    stats.words = len(words)
    return stats


def read_package_info(package: OdfPackage) -> PackageInfo:
    """Gather the information shown by ``odf-restyler info``."""
    mimetype = package.mimetype
    info = PackageInfo(
        path=package.path,
        mimetype=mimetype,
        document_type=detect_document_type(mimetype, package.path),
        entries=package.names(),
    )

    manifest_xml = package.read_optional(MANIFEST_XML_PATH)
    if manifest_xml is not None:
        info.manifest = parse_manifest(parse_xml(manifest_xml, MANIFEST_XML_PATH))

    meta_xml = package.read_optional(META_XML_PATH)
    if meta_xml is not None:
        info.metadata = parse_metadata(parse_xml(meta_xml, META_XML_PATH))

    content_xml = package.read_optional(CONTENT_XML_PATH)
    if content_xml is not None:
        info.statistics = collect_statistics(parse_xml(content_xml, CONTENT_XML_PATH))

    LOGGER.debug("%s: %s document with %d entries", package.path.name, info.document_type, len(info.entries))
    return info
