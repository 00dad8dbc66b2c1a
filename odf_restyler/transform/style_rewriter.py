"""Rename a style consistently across every attribute that defines or references it."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple, Union

from odf_restyler.model.document_node import Attribute, DocumentNode
from odf_restyler.model.reference_catalog import DEFAULT_CATALOG, ReferenceCatalog, ReferenceRule, RuleKind
from odf_restyler.model.style_model import RenameRequest
from odf_restyler.utils.logger import get_logger
from odf_restyler.utils.namespaces import STYLE

LOGGER = get_logger(__name__)


@dataclass(slots=True, frozen=True)
class AttributeChange:
    """One attribute value that the rewrite replaced."""

    element: str
    attribute: str
    family: Optional[str]
    old_value: str
    new_value: str
    kind: RuleKind = RuleKind.REFERENCE


@dataclass(slots=True)
class RewriteResult:
    """Outcome of a rewrite; unpacks as ``(root, changed)``."""

    root: DocumentNode
    changes: List[AttributeChange] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.changes)

    @property
    def count(self) -> int:
        return len(self.changes)

    def __iter__(self) -> Iterator[Union[DocumentNode, bool]]:
        yield self.root
        yield self.changed


class StyleRewriter:
    """Apply a :class:`RenameRequest` to a document tree in place.

    Each element is visited exactly once, in pre-order. For every attribute
    the catalog is asked which rules apply to the ``(element, attribute)``
    pair; a rule fires when its family matches the request and the value
    equals the old name. Attributes that no rule covers are never touched,
    whatever their value.
    """

    def __init__(self, catalog: ReferenceCatalog = DEFAULT_CATALOG) -> None:
        self._catalog = catalog

    def rewrite(self, root: DocumentNode, request: RenameRequest) -> RewriteResult:
        if request.family is None:
            LOGGER.warning(
                "Renaming %r without a style family: references in every family will be changed",
                request.old_name,
            )
        result = RewriteResult(root)
        stack: List[Tuple[DocumentNode, Optional[str]]] = [(root, None)]
        while stack:
            node, parent_family = stack.pop()
            renamed_family = self._rewrite_node(node, parent_family, request, result.changes)
            if renamed_family is not False and request.new_display_name is not None:
                self._relabel(node, renamed_family, request.new_display_name, result.changes)
            context = node.get(STYLE, "family") or parent_family
            stack.extend((child, context) for child in reversed(list(node.iter_children())))

        LOGGER.debug("Rewrite %r -> %r changed %d attribute(s)", request.old_name, request.new_name, result.count)
        return result

    def _rewrite_node(
        self,
        node: DocumentNode,
        parent_family: Optional[str],
        request: RenameRequest,
        changes: List[AttributeChange],
    ) -> Union[Optional[str], bool]:
        """Rewrite matching attributes on one node.

        Returns the family of a matched definition on this node, or ``False``
        when the node defines nothing that was renamed.
        """
        renamed_family: Union[Optional[str], bool] = False
        for attribute in node.attributes:
            if attribute.is_namespace_declaration:
                continue
            rules = self._catalog.rules_for(node.qname, (attribute.namespace, attribute.local_name))
            for rule in rules:
                if rule.kind is RuleKind.DISPLAY_NAME:
                    continue
                if rule.kind is RuleKind.DEFINITION and not request.include_definitions:
                    continue
                family = self._catalog.resolve_family(rule, node, parent_family)
                if request.family is not None and family != request.family:
                    continue
                new_value = self._replace(attribute.value, rule, request)
                if new_value is None:
                    continue
                if rule.kind is RuleKind.DEFINITION:
                    renamed_family = family
                if new_value != attribute.value:
                    changes.append(
                        AttributeChange(node.tag, attribute.name, family, attribute.value, new_value, rule.kind)
                    )
                    attribute.value = new_value
                break
        return renamed_family

    def _relabel(
        self,
        node: DocumentNode,
        family: Optional[str],
        display_name: str,
        changes: List[AttributeChange],
    ) -> None:
        current: Optional[Attribute] = node.get_attribute(STYLE, "display-name")
        old_value = current.value if current is not None else ""
        if old_value == display_name:
            return
        node.set(STYLE, "display-name", display_name)
        name = node.get_attribute(STYLE, "display-name")
        changes.append(
            AttributeChange(
                node.tag,
                name.name if name is not None else "style:display-name",
                family,
                old_value,
                display_name,
                RuleKind.DISPLAY_NAME,
            )
        )

    @staticmethod
    def _replace(value: str, rule: ReferenceRule, request: RenameRequest) -> Optional[str]:
        """Return the rewritten value, or ``None`` when ``value`` does not name the old style."""
        if not rule.multi_valued:
            return request.new_name if value == request.old_name else None
        tokens = value.split(" ")
        if request.old_name not in tokens:
            return None
        return " ".join(request.new_name if token == request.old_name else token for token in tokens)


def rewrite(
    root: DocumentNode, request: RenameRequest, catalog: ReferenceCatalog = DEFAULT_CATALOG
) -> RewriteResult:
    """Rename the requested style in ``root``; see :class:`StyleRewriter`."""
    return StyleRewriter(catalog).rewrite(root, request)
