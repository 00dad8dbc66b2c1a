"""Readable listing of the body of ``content.xml``: headings, paragraphs, list items and table cells."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from odf_restyler.model.document_node import Child, Comment, DocumentNode, ProcessingInstruction
from odf_restyler.utils.logger import get_logger
from odf_restyler.utils.namespaces import OFFICE, TABLE, TEXT, XLINK

LOGGER = get_logger(__name__)

HEADING = "heading"
PARAGRAPH = "paragraph"
LIST_ITEM = "list-item"
TABLE_CELL = "table-cell"

# Containers that hold table rows without being rows themselves.
_ROW_GROUPS = {"table-header-rows", "table-rows", "table-row-group"}


@dataclass(slots=True)
class ContentBlock:
    """One block of text in document order.

    ``level`` is the outline level of a heading or the nesting depth of a
    list item. Table cells carry the table name and their 1-based row and
    column; ``value`` holds ``office:value`` when the cell has one.
    """

    kind: str
    text: str
    style_name: Optional[str] = None
    level: int = 0
    table: Optional[str] = None
    row: int = 0
    column: int = 0
    value: Optional[str] = None
    links: List[Tuple[str, str]] = field(default_factory=list)

    def as_dict(self) -> Dict[str, object]:
        payload: Dict[str, object] = {"kind": self.kind, "text": self.text, "style_name": self.style_name}
        if self.kind in (HEADING, LIST_ITEM):
            payload["level"] = self.level
        if self.kind == TABLE_CELL:
            payload.update(table=self.table, row=self.row, column=self.column, value=self.value)
        if self.links:
            payload["links"] = [{"text": text, "href": href} for text, href in self.links]
        return payload


@dataclass(slots=True, frozen=True)
class _Cell:
    table: Optional[str]
    row: int
    column: int
    value: Optional[str]


def inline_text(block: DocumentNode) -> str:
    """Text of a paragraph or heading with ``text:s``, ``text:tab`` and ``text:line-break`` expanded.

    Annotations are skipped. Paragraphs nested inside ``block`` (text boxes,
    notes) contribute their text on a new line.
    """
    parts: List[str] = []
    stack: List[Child] = list(reversed(block.children))
    while stack:
        item = stack.pop()
        if isinstance(item, (Comment, ProcessingInstruction)):
            continue
        if not isinstance(item, DocumentNode):
            parts.append(item)
        elif item.matches(TEXT, "s"):
            parts.append(" " * _count(item.get(TEXT, "c")))
        elif item.matches(TEXT, "tab"):
            parts.append("\t")
        elif item.matches(TEXT, "line-break"):
            parts.append("\n")
        elif item.matches(OFFICE, "annotation"):
            continue
        else:
            if item.matches(TEXT, "p") or item.matches(TEXT, "h"):
                parts.append("\n")
            stack.extend(reversed(item.children))
    return "".join(parts)


def _count(raw: Optional[str]) -> int:
    try:
        return max(int(raw), 1) if raw else 1
    except ValueError:
        LOGGER.warning("Ignoring invalid repeat count %r", raw)
        return 1


def _links(block: DocumentNode) -> List[Tuple[str, str]]:
    return [(link.text_content(), link.get(XLINK, "href", "")) for link in block.iter(TEXT, "a")]


def _table_rows(table: DocumentNode) -> List[DocumentNode]:
    rows: List[DocumentNode] = []
    stack = list(reversed(list(table.iter_children())))
    while stack:
        node = stack.pop()
        if node.matches(TABLE, "table-row"):
            rows.append(node)
        elif node.namespace == TABLE and node.local_name in _ROW_GROUPS:
            stack.extend(reversed(list(node.iter_children())))
    return rows


def _table_cells(table: DocumentNode) -> List[Tuple[DocumentNode, _Cell]]:
    name = table.get(TABLE, "name")
    cells: List[Tuple[DocumentNode, _Cell]] = []
    row_number = 1
    for row in _table_rows(table):
        column = 1
        for cell in row.iter_children():
            if cell.matches(TABLE, "table-cell"):
                cells.append((cell, _Cell(name, row_number, column, cell.get(OFFICE, "value"))))
            elif not cell.matches(TABLE, "covered-table-cell"):
                continue
            column += _count(cell.get(TABLE, "number-columns-repeated"))
        row_number += _count(row.get(TABLE, "number-rows-repeated"))
    return cells


def read_content(content_root: DocumentNode) -> List[ContentBlock]:
    """List the text blocks of ``office:body`` in document order.

    Paragraphs nested inside another paragraph are part of the outer block's
    text and are not listed on their own. Repeated table cells are listed
    once, at their first position.
    """
    body = content_root.find(OFFICE, "body")
    if body is None:
        LOGGER.warning("content.xml has no office:body")
        return []

    blocks: List[ContentBlock] = []
    stack: List[Tuple[DocumentNode, int, Optional[_Cell]]] = [(body, 0, None)]
    while stack:
        node, depth, cell = stack.pop()
        if node.matches(TEXT, "h"):
            blocks.append(
                ContentBlock(
                    HEADING,
                    inline_text(node),
                    node.get(TEXT, "style-name"),
                    level=_count(node.get(TEXT, "outline-level")),
                    links=_links(node),
                )
            )
            continue
        if node.matches(TEXT, "p"):
            block = ContentBlock(PARAGRAPH, inline_text(node), node.get(TEXT, "style-name"), links=_links(node))
            if cell is not None:
                block.kind = TABLE_CELL
                block.table, block.row, block.column, block.value = cell.table, cell.row, cell.column, cell.value
            elif depth:
                block.kind = LIST_ITEM
                block.level = depth
            blocks.append(block)
            continue
        if node.matches(TABLE, "table"):
            stack.extend((child, depth, position) for child, position in reversed(_table_cells(node)))
            continue
        if node.matches(OFFICE, "annotation"):
            continue
        if node.matches(TEXT, "list"):
            depth += 1
        stack.extend((child, depth, cell) for child in reversed(list(node.iter_children())))
    return blocks


def extract_all_text(content_root: DocumentNode) -> str:
    """All body text as one line with runs of whitespace collapsed."""
    return " ".join(" ".join(block.text for block in read_content(content_root)).split())
