"""Replace direct character formatting with named character styles."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional, Tuple, Union

from odf_restyler.model.document_node import DocumentNode
from odf_restyler.model.reference_catalog import DEFAULT_CATALOG, ReferenceCatalog
from odf_restyler.model.style_model import RenameRequest, StyleInventory
from odf_restyler.parser.mapping_loader import FormattingKind, StyleMappings, load_style_mappings
from odf_restyler.parser.odf_package import CONTENT_XML_PATH, STYLES_XML_PATH, PathLike
from odf_restyler.parser.style_inventory import StyleInventoryParser
from odf_restyler.transform.style_rewriter import StyleRewriter
from odf_restyler.transform.transaction import PackageTransaction
from odf_restyler.utils.logger import get_logger
from odf_restyler.utils.namespaces import FO, OFFICE, OFFICEOOO, STYLE, QName

LOGGER = get_logger(__name__)

TEXT_FAMILY = "text"

# Text properties written into a newly created character style.
STYLE_PROPERTIES: Dict[FormattingKind, Tuple[Tuple[QName, str], ...]] = {
    FormattingKind.BOLD: (((FO, "font-weight"), "bold"),),
    FormattingKind.ITALIC: (((FO, "font-style"), "italic"),),
    FormattingKind.BOLD_ITALIC: (((FO, "font-weight"), "bold"), ((FO, "font-style"), "italic")),
    FormattingKind.SUPERSCRIPT: (((STYLE, "text-position"), "super 58%"),),
    FormattingKind.SUBSCRIPT: (((STYLE, "text-position"), "sub 58%"),),
}

_WEIGHT = frozenset({(FO, "font-weight"), (STYLE, "font-weight-asian"), (STYLE, "font-weight-complex")})
_POSTURE = frozenset({(FO, "font-style"), (STYLE, "font-style-asian"), (STYLE, "font-style-complex")})
_POSITION = frozenset({(STYLE, "text-position")})

# Text-property attributes that a named style of each kind takes over.
KIND_ATTRIBUTES: Dict[FormattingKind, FrozenSet[QName]] = {
    FormattingKind.BOLD: _WEIGHT,
    FormattingKind.ITALIC: _POSTURE,
    FormattingKind.BOLD_ITALIC: _WEIGHT | _POSTURE,
    FormattingKind.SUPERSCRIPT: _POSITION,
    FormattingKind.SUBSCRIPT: _POSITION,
}

# Revision ids written by LibreOffice; they carry no formatting.
_NON_FORMATTING = frozenset({(OFFICEOOO, "rsid"), (OFFICEOOO, "paragraph-rsid")})

_BOLD_WEIGHTS = {"bold", "700", "800", "900"}


@dataclass(slots=True)
class ChangeTracker:
    """Counts the references and automatic styles moved onto each character style."""

    total_changes: int = 0
    style_counts: Dict[str, int] = field(default_factory=dict)
    created_styles: List[str] = field(default_factory=list)
    reparented_styles: List[str] = field(default_factory=list)

    def add_change(self, style_name: str, count: int = 1) -> None:
        self.total_changes += count
        self.style_counts[style_name] = self.style_counts.get(style_name, 0) + count


def classify_text_style(style: DocumentNode) -> Optional[FormattingKind]:
    """Classify an automatic text style by its ``style:text-properties``."""
    properties = style.find(STYLE, "text-properties")
    if properties is None:
        return None
    bold = (properties.get(FO, "font-weight") or "").lower() in _BOLD_WEIGHTS
    italic = (properties.get(FO, "font-style") or "").lower() in ("italic", "oblique")
    position = (properties.get(STYLE, "text-position") or "").lower()
    if bold and italic:
        return FormattingKind.BOLD_ITALIC
    if bold:
        return FormattingKind.BOLD
    if italic:
        return FormattingKind.ITALIC
    if position.startswith("super"):
        return FormattingKind.SUPERSCRIPT
    if position.startswith("sub"):
        return FormattingKind.SUBSCRIPT
    return None


def encode_style_name(label: str) -> str:
    """Internal style name for a visible label (spaces become ``_20_``)."""
    return label.replace(" ", "_20_")


def has_other_formatting(style: DocumentNode, kind: FormattingKind) -> bool:
    """Whether ``style`` sets anything beyond the properties that make it ``kind``."""
    if style.get(STYLE, "parent-style-name"):
        return True
    covered = KIND_ATTRIBUTES[kind] | _NON_FORMATTING
    for child in style.iter_children():
        if not child.matches(STYLE, "text-properties") or any(True for _ in child.iter_children()):
            return True
        for attribute in child.attributes:
            if attribute.is_namespace_declaration:
                continue
            if (attribute.namespace, attribute.local_name) not in covered:
                return True
    return False


class DirectFormattingConverter:
    """Point spans that use ad hoc bold/italic/... styles at named character styles.

    Automatic ``text`` styles in ``content.xml`` are classified by their text
    properties. When a classified style sets nothing else, every text-family
    reference to it is retargeted to the named style and the automatic
    definition stays in place. A style that also sets other formatting
    (colour, size, ...) keeps its references; it inherits from the named
    style instead and loses only the properties the named style provides.
    Missing named styles are created in ``office:styles``.
    """

    def __init__(self, mappings: StyleMappings, catalog: ReferenceCatalog = DEFAULT_CATALOG) -> None:
        self._mappings = dict(mappings)
        self._rewriter = StyleRewriter(catalog)
        self.tracker = ChangeTracker()

    def convert(self, content_root: DocumentNode, styles_root: Optional[DocumentNode] = None) -> ChangeTracker:
        automatic = content_root.find(OFFICE, "automatic-styles")
        if automatic is None or not self._mappings:
            return self.tracker
        inventory = StyleInventoryParser(styles_root, content_root).parse()
        office_styles = styles_root.find(OFFICE, "styles") if styles_root is not None else None
        if styles_root is not None and office_styles is not None:
            destination = (styles_root, office_styles)
        else:
            destination = (content_root, automatic)

        for style in automatic.find_all(STYLE, "style"):
            if style.get(STYLE, "family") != TEXT_FAMILY:
                continue
            kind = classify_text_style(style)
            label = self._mappings.get(kind) if kind is not None else None
            automatic_name = style.get(STYLE, "name")
            if kind is None or not label or not automatic_name:
                continue
            target = encode_style_name(label)
            if automatic_name == target:
                continue
            if has_other_formatting(style, kind):
                self._reparent(style, kind, target, label, inventory, destination)
                continue
            request = RenameRequest(automatic_name, target, family=TEXT_FAMILY, include_definitions=False)
            result = self._rewriter.rewrite(content_root, request)
            if result.changed:
                self._ensure_style(inventory, target, label, kind, destination)
                self.tracker.add_change(label, result.count)
                LOGGER.info("Converted direct %s formatting (%s) to style %r", kind.value, automatic_name, label)
        return self.tracker

    def _reparent(
        self,
        style: DocumentNode,
        kind: FormattingKind,
        target: str,
        label: str,
        inventory: StyleInventory,
        destination: Tuple[DocumentNode, DocumentNode],
    ) -> None:
        name = style.get(STYLE, "name")
        parent = style.get(STYLE, "parent-style-name")
        if parent:
            LOGGER.info("Keeping %s: it already inherits from %r", name, parent)
            return
        properties = style.find(STYLE, "text-properties")
        if properties is not None:
            for namespace, local in KIND_ATTRIBUTES[kind]:
                properties.remove(namespace, local)
        style.set(STYLE, "parent-style-name", target)
        self._ensure_style(inventory, target, label, kind, destination)
        self.tracker.reparented_styles.append(name)
        self.tracker.add_change(label)
        LOGGER.info("Style %s now inherits %s formatting from %r", name, kind.value, label)

    def _ensure_style(
        self,
        inventory: StyleInventory,
        name: str,
        label: str,
        kind: FormattingKind,
        destination: Tuple[DocumentNode, DocumentNode],
    ) -> None:
        if inventory.exists(name, TEXT_FAMILY) or name in self.tracker.created_styles:
            return
        root, container = destination
        root.declare_namespace("style", STYLE)
        root.declare_namespace("fo", FO)

        attributes: List[Tuple[QName, str]] = [((STYLE, "name"), name)]
        if label != name:
            attributes.append(((STYLE, "display-name"), label))
        attributes.append(((STYLE, "family"), TEXT_FAMILY))
        definition = container.new_child(STYLE, "style", attributes)
        definition.new_child(STYLE, "text-properties", STYLE_PROPERTIES[kind])
        self.tracker.created_styles.append(name)
        LOGGER.info("Created character style %r", label)


@dataclass(slots=True)
class ConversionReport:
    tracker: ChangeTracker
    written: bool = False
    output_path: Optional[Path] = None


def convert_direct_formatting(
    input_path: PathLike,
    mappings: Union[StyleMappings, PathLike],
    output_path: PathLike,
) -> ConversionReport:
    """Run :class:`DirectFormattingConverter` over a package and commit the result."""
    if not isinstance(mappings, dict):
        mappings = load_style_mappings(mappings)
    with PackageTransaction(input_path) as txn:
        content = txn.tree(CONTENT_XML_PATH)
        styles = txn.tree(STYLES_XML_PATH, required=False)
        tracker = DirectFormattingConverter(mappings).convert(content, styles)
        report = ConversionReport(tracker)
        if tracker.total_changes == 0:
            LOGGER.info("No direct formatting found to convert")
            return report
        txn.update(CONTENT_XML_PATH)
        if styles is not None and tracker.created_styles:
            txn.update(STYLES_XML_PATH)
        report.written = txn.commit(output_path)
        report.output_path = Path(output_path)
    return report
