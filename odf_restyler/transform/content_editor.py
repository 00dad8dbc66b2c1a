"""Text edits on ``content.xml``: replace text runs and append paragraphs."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Sequence, Tuple

from odf_restyler.errors import NotATextDocument
from odf_restyler.model.document_node import Comment, DocumentNode, ProcessingInstruction
from odf_restyler.parser.odf_package import CONTENT_XML_PATH, PathLike
from odf_restyler.transform.transaction import PackageTransaction
from odf_restyler.utils.logger import get_logger
from odf_restyler.utils.namespaces import OFFICE, TEXT

LOGGER = get_logger(__name__)


def replace_text(content_root: DocumentNode, old: str, new: str) -> int:
    """Replace ``old`` with ``new`` in every text run of ``office:body``.

    Matching is done per text run, so a phrase split across spans is not
    found. Markup, comments and processing instructions are untouched.
    Returns the number of occurrences replaced.
    """
    if not old:
        raise ValueError("Text to replace must not be empty")
    body = content_root.find(OFFICE, "body")
    if body is None:
        return 0
    count = 0
    for node in body.iter():
        for index, child in enumerate(node.children):
            if isinstance(child, (DocumentNode, Comment, ProcessingInstruction)):
                continue
            occurrences = child.count(old)
            if occurrences:
                node.children[index] = child.replace(old, new)
                count += occurrences
    return count


def add_paragraph(content_root: DocumentNode, text: str, style_name: Optional[str] = None) -> DocumentNode:
    """Append a ``text:p`` holding ``text`` to the end of ``office:text``."""
    body = content_root.find(OFFICE, "body")
    container = body.find(OFFICE, "text") if body is not None else None
    if container is None:
        raise NotATextDocument("Paragraphs can only be added to text documents")
    content_root.declare_namespace("text", TEXT)
    attributes = [((TEXT, "style-name"), style_name)] if style_name else []
    paragraph = container.new_child(TEXT, "p", attributes)
    if text:
        paragraph.append(text)
    return paragraph


@dataclass(slots=True)
class EditReport:
    replacements: Dict[str, int] = field(default_factory=dict)
    added_paragraphs: int = 0
    written: bool = False
    output_path: Optional[Path] = None

    @property
    def total_changes(self) -> int:
        return sum(self.replacements.values()) + self.added_paragraphs


def edit_content(
    input_path: PathLike,
    output_path: PathLike,
    replacements: Sequence[Tuple[str, str]] = (),
    paragraphs: Sequence[str] = (),
    style_name: Optional[str] = None,
) -> EditReport:
    """Apply text replacements, then append ``paragraphs``; commit when anything changed."""
    report = EditReport()
    with PackageTransaction(input_path) as txn:
        content = txn.tree(CONTENT_XML_PATH)
        for old, new in replacements:
            count = replace_text(content, old, new)
            report.replacements[old] = report.replacements.get(old, 0) + count
            LOGGER.info("Replaced %r in %d place(s)", old, count)
        for text in paragraphs:
            add_paragraph(content, text, style_name)
        report.added_paragraphs = len(paragraphs)
        if report.total_changes == 0:
            LOGGER.info("No text changes in %s", txn.source.name)
            return report
        txn.update(CONTENT_XML_PATH)
        report.written = txn.commit(output_path)
        report.output_path = Path(output_path)
    return report
