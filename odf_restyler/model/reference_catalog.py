"""Static table of the attributes that define or reference styles by name.

A style name alone is not an identity in OpenDocument: ``Footer`` can be a
paragraph style and a list style at the same time. Every rule therefore
carries the family its attribute lives in. Two sentinels cover families that
depend on where the attribute sits:

* ``FAMILY_FROM_ELEMENT`` - the element's own ``style:family`` attribute
  (``style:style/@style:name``, ``@style:parent-style-name``, ...).
* ``FAMILY_FROM_PARENT`` - the ``style:family`` of the nearest enclosing
  element (``style:map/@style:apply-style-name`` inside a conditional style).
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from odf_restyler.model.document_node import DocumentNode
from odf_restyler.utils.namespaces import QName, STYLE, odf

FAMILY_FROM_ELEMENT = "<element style:family>"
FAMILY_FROM_PARENT = "<enclosing style:family>"

# Families implied by definition elements that carry no style:family.
FAMILY_LIST = "list"
FAMILY_PAGE_LAYOUT = "page-layout"
FAMILY_MASTER_PAGE = "master-page"
FAMILY_DATA_STYLE = "data-style"


class RuleKind(enum.Enum):
    REFERENCE = "reference"
    DEFINITION = "definition"
    DISPLAY_NAME = "display-name"


@dataclass(frozen=True)
class ReferenceRule:
    """Attribute ``attribute`` on ``element`` (``None``: any element) names a style of ``family``."""

    element: Optional[QName]
    attribute: QName
    family: str
    kind: RuleKind = RuleKind.REFERENCE
    multi_valued: bool = False


def _refs(elements: Iterable[str], attribute: str, family: str, **kw) -> List[ReferenceRule]:
    return [ReferenceRule(odf(element), odf(attribute), family, **kw) for element in elements]


def _any(attribute: str, family: str) -> ReferenceRule:
    return ReferenceRule(None, odf(attribute), family)


_DRAW_SHAPES = (
    "draw:rect", "draw:line", "draw:polyline", "draw:polygon", "draw:regular-polygon",
    "draw:path", "draw:circle", "draw:ellipse", "draw:connector", "draw:caption",
    "draw:measure", "draw:control", "draw:page-thumbnail", "draw:frame", "draw:g",
    "draw:custom-shape", "dr3d:scene",
)
_INDEX_BODIES = (
    "text:table-of-content", "text:illustration-index", "text:table-index",
    "text:object-index", "text:user-index", "text:alphabetical-index",
    "text:bibliography", "text:index-title",
)
_INDEX_TEMPLATES = (
    "text:table-of-content-entry-template", "text:illustration-index-entry-template",
    "text:table-index-entry-template", "text:object-index-entry-template",
    "text:user-index-entry-template", "text:alphabetical-index-entry-template",
    "text:bibliography-entry-template", "text:index-title-template",
    "text:index-source-style",
)
_INDEX_ENTRY_PARTS = (
    "text:index-entry-chapter", "text:index-entry-text", "text:index-entry-page-number",
    "text:index-entry-span", "text:index-entry-bibliography", "text:index-entry-tab-stop",
    "text:index-entry-link-start", "text:index-entry-link-end",
)
_DATA_STYLES = (
    "number:number-style", "number:currency-style", "number:percentage-style",
    "number:date-style", "number:time-style", "number:boolean-style", "number:text-style",
)

REFERENCE_CATALOG: Tuple[ReferenceRule, ...] = tuple(
    [
        # Definitions and their display labels.
        ReferenceRule(odf("style:style"), odf("style:name"), FAMILY_FROM_ELEMENT, RuleKind.DEFINITION),
        ReferenceRule(odf("text:list-style"), odf("style:name"), FAMILY_LIST, RuleKind.DEFINITION),
        ReferenceRule(odf("style:page-layout"), odf("style:name"), FAMILY_PAGE_LAYOUT, RuleKind.DEFINITION),
        ReferenceRule(odf("style:master-page"), odf("style:name"), FAMILY_MASTER_PAGE, RuleKind.DEFINITION),
        *_refs(_DATA_STYLES, "style:name", FAMILY_DATA_STYLE, kind=RuleKind.DEFINITION),
        ReferenceRule(odf("style:style"), odf("style:display-name"), FAMILY_FROM_ELEMENT, RuleKind.DISPLAY_NAME),
        ReferenceRule(odf("text:list-style"), odf("style:display-name"), FAMILY_LIST, RuleKind.DISPLAY_NAME),
        ReferenceRule(odf("style:master-page"), odf("style:display-name"), FAMILY_MASTER_PAGE, RuleKind.DISPLAY_NAME),
        # Style-to-style links.
        ReferenceRule(odf("style:style"), odf("style:parent-style-name"), FAMILY_FROM_ELEMENT),
        ReferenceRule(odf("style:style"), odf("style:next-style-name"), FAMILY_FROM_ELEMENT),
        ReferenceRule(odf("style:style"), odf("style:list-style-name"), FAMILY_LIST),
        ReferenceRule(odf("style:style"), odf("style:master-page-name"), FAMILY_MASTER_PAGE),
        ReferenceRule(odf("style:style"), odf("style:data-style-name"), FAMILY_DATA_STYLE),
        ReferenceRule(odf("style:style"), odf("style:percentage-data-style-name"), FAMILY_DATA_STYLE),
        ReferenceRule(odf("style:map"), odf("style:apply-style-name"), FAMILY_FROM_PARENT),
        ReferenceRule(odf("style:master-page"), odf("style:page-layout-name"), FAMILY_PAGE_LAYOUT),
        ReferenceRule(odf("style:master-page"), odf("style:next-style-name"), FAMILY_MASTER_PAGE),
        ReferenceRule(odf("style:master-page"), odf("draw:style-name"), "drawing-page"),
        ReferenceRule(odf("style:handout-master"), odf("style:page-layout-name"), FAMILY_PAGE_LAYOUT),
        ReferenceRule(odf("presentation:notes"), odf("style:page-layout-name"), FAMILY_PAGE_LAYOUT),
        # Paragraph content.
        *_refs(("text:p", "text:h"), "text:style-name", "paragraph"),
        *_refs(("text:p", "text:h"), "text:cond-style-name", "paragraph"),
        *_refs(("text:p", "text:h"), "text:class-names", "paragraph", multi_valued=True),
        *_refs(_INDEX_TEMPLATES, "text:style-name", "paragraph"),
        ReferenceRule(odf("text:notes-configuration"), odf("text:default-style-name"), "paragraph"),
        ReferenceRule(odf("text:notes-configuration"), odf("text:master-page-name"), FAMILY_MASTER_PAGE),
        _any("draw:text-style-name", "paragraph"),
        # Character content.
        *_refs(("text:span", "text:a", "text:list-level-style-number", "text:list-level-style-bullet",
                "text:outline-level-style", "text:linenumbering-configuration", "text:ruby-text",
                *_INDEX_ENTRY_PARTS), "text:style-name", "text"),
        ReferenceRule(odf("text:span"), odf("text:class-names"), "text", multi_valued=True),
        ReferenceRule(odf("text:a"), odf("text:visited-style-name"), "text"),
        ReferenceRule(odf("text:notes-configuration"), odf("text:citation-style-name"), "text"),
        ReferenceRule(odf("text:notes-configuration"), odf("text:citation-body-style-name"), "text"),
        ReferenceRule(odf("text:ruby"), odf("text:style-name"), "ruby"),
        # Lists and sections.
        *_refs(("text:list", "text:numbered-paragraph"), "text:style-name", FAMILY_LIST),
        ReferenceRule(odf("text:list-item"), odf("text:style-override"), FAMILY_LIST),
        ReferenceRule(odf("text:list-header"), odf("text:style-override"), FAMILY_LIST),
        *_refs(("text:section", *_INDEX_BODIES), "text:style-name", "section"),
        # Tables.
        ReferenceRule(odf("table:table"), odf("table:style-name"), "table"),
        ReferenceRule(odf("table:table-column"), odf("table:style-name"), "table-column"),
        ReferenceRule(odf("table:table-row"), odf("table:style-name"), "table-row"),
        *_refs(("table:table-cell", "table:covered-table-cell"), "table:style-name", "table-cell"),
        *_refs(("table:table-column", "table:table-row"), "table:default-cell-style-name", "table-cell"),
        # Drawings, presentations, charts.
        *_refs(_DRAW_SHAPES, "draw:style-name", "graphic"),
        ReferenceRule(odf("draw:page"), odf("draw:style-name"), "drawing-page"),
        ReferenceRule(odf("draw:page"), odf("draw:master-page-name"), FAMILY_MASTER_PAGE),
        ReferenceRule(odf("presentation:notes"), odf("draw:style-name"), "drawing-page"),
        _any("presentation:style-name", "presentation"),
        _any("chart:style-name", "chart"),
    ]
)


class ReferenceCatalog:
    """Index over a rule table; lookups by ``(element, attribute)``."""

    def __init__(self, rules: Iterable[ReferenceRule] = REFERENCE_CATALOG) -> None:
        self._rules: Tuple[ReferenceRule, ...] = tuple(rules)
        self._specific: Dict[Tuple[QName, QName], List[ReferenceRule]] = {}
        self._wildcard: Dict[QName, List[ReferenceRule]] = {}
        for rule in self._rules:
            if rule.element is None:
                self._wildcard.setdefault(rule.attribute, []).append(rule)
            else:
                self._specific.setdefault((rule.element, rule.attribute), []).append(rule)

    @property
    def rules(self) -> Tuple[ReferenceRule, ...]:
        return self._rules

    def rules_for(self, element: QName, attribute: QName) -> List[ReferenceRule]:
        """Element-specific rules win over wildcard rules for the same attribute."""
        specific = self._specific.get((element, attribute))
        if specific:
            return specific
        return self._wildcard.get(attribute, [])

    def definition_rules(self) -> List[ReferenceRule]:
        return [rule for rule in self._rules if rule.kind is RuleKind.DEFINITION]

    @staticmethod
    def resolve_family(rule: ReferenceRule, node: DocumentNode, parent_family: Optional[str]) -> Optional[str]:
        if rule.family == FAMILY_FROM_ELEMENT:
            return node.get(STYLE, "family")
        if rule.family == FAMILY_FROM_PARENT:
            return parent_family
        return rule.family


DEFAULT_CATALOG = ReferenceCatalog()
