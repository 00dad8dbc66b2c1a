"""Collect style definitions from styles.xml and content.xml into an inventory."""
from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from odf_restyler.model.document_node import DocumentNode
from odf_restyler.model.reference_catalog import DEFAULT_CATALOG, ReferenceCatalog, ReferenceRule
from odf_restyler.model.style_model import StyleInfo, StyleInventory
from odf_restyler.parser.xml_tree import parse_xml
from odf_restyler.utils.logger import get_logger
from odf_restyler.utils.namespaces import OFFICE, STYLE, QName

LOGGER = get_logger(__name__)


class StyleInventoryParser:
    """Walk the style-bearing parts and record every style definition.

    Definition elements are taken from the catalog's definition rules, so
    the inventory and the rewrite engine agree on what a style is.
    """

    def __init__(
        self,
        styles_root: Optional[DocumentNode],
        content_root: Optional[DocumentNode] = None,
        catalog: ReferenceCatalog = DEFAULT_CATALOG,
    ) -> None:
        self._roots = [root for root in (styles_root, content_root) if root is not None]
        self._catalog = catalog
        self._definitions: Dict[QName, ReferenceRule] = {
            rule.element: rule for rule in catalog.definition_rules() if rule.element is not None
        }

    def parse(self) -> StyleInventory:
        styles: Dict[Tuple[Optional[str], str], StyleInfo] = {}
        for root in self._roots:
            for style in self._collect(root):
                styles[(style.family, style.name)] = style
        LOGGER.debug("Inventory holds %d style definitions", len(styles))
        return StyleInventory(styles)

    def _collect(self, root: DocumentNode) -> List[StyleInfo]:
        found: List[StyleInfo] = []
        stack: List[Tuple[DocumentNode, bool]] = [(root, False)]
        while stack:
            node, automatic = stack.pop()
            automatic = automatic or node.matches(OFFICE, "automatic-styles")
            rule = self._definitions.get(node.qname)
            if rule is not None:
                name = node.get(*rule.attribute)
                if name:
                    family = self._catalog.resolve_family(rule, node, None)
                    display_name = node.get(STYLE, "display-name") or name
                    found.append(StyleInfo(name, display_name, family, automatic))
            stack.extend((child, automatic) for child in reversed(list(node.iter_children())))
        return found


def build_inventory(styles_xml: Optional[bytes], content_xml: Optional[bytes] = None) -> StyleInventory:
    """Build the inventory from raw part bytes; either part may be absent."""
    styles_root = parse_xml(styles_xml, "styles.xml") if styles_xml is not None else None
    content_root = parse_xml(content_xml, "content.xml") if content_xml is not None else None
    return StyleInventoryParser(styles_root, content_root).parse()
