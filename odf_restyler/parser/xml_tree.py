"""Single-pass, lossless XML parser producing :class:`DocumentNode` trees."""
from __future__ import annotations

from typing import List, Optional
from xml.parsers import expat

from odf_restyler.errors import MalformedXML
from odf_restyler.model.document_node import (
    Attribute,
    Comment,
    DocumentNode,
    NamespaceScope,
    ProcessingInstruction,
)
from odf_restyler.utils.namespaces import XML_NS, XMLNS_NS

_BASE_SCOPE: NamespaceScope = {"xml": XML_NS}


class _TreeBuilder:
    """Expat callbacks that maintain the open-element stack.

    Expat runs without namespace processing so prefixes, declarations and
    attribute order reach us untouched; namespace URIs are resolved here from
    the declarations in scope.
    """

    def __init__(self, parser: expat.XMLParserType, part: Optional[str]) -> None:
        self._parser = parser
        self._part = part
        self._stack: List[DocumentNode] = []
        self.root: Optional[DocumentNode] = None

    def start(self, tag: str, flat_attrs: List[str]) -> None:
        parent_scope = self._stack[-1].scope if self._stack else dict(_BASE_SCOPE)
        pairs = list(zip(flat_attrs[::2], flat_attrs[1::2]))
        scope = parent_scope
        for name, value in pairs:
            if name == "xmlns" or name.startswith("xmlns:"):
                if scope is parent_scope:
                    scope = dict(parent_scope)
                scope[name[6:] or None] = value

        node = DocumentNode(tag, self._resolve(tag, scope, is_attribute=False), scope=scope)
        for name, value in pairs:
            if name == "xmlns" or name.startswith("xmlns:"):
                namespace: Optional[str] = XMLNS_NS
            else:
                namespace = self._resolve(name, scope, is_attribute=True)
            node.attributes.append(Attribute(name, value, namespace))

        if self._stack:
            self._stack[-1].children.append(node)
        self._stack.append(node)

    def end(self, tag: str) -> None:
        node = self._stack.pop()
        if not self._stack:
            self.root = node

    def data(self, text: str) -> None:
        if not self._stack:
            return
        children = self._stack[-1].children
        if children and type(children[-1]) is str:
            children[-1] = children[-1] + text
        else:
            children.append(text)

    def comment(self, text: str) -> None:
        if self._stack:
            self._stack[-1].children.append(Comment(text))

    def processing_instruction(self, target: str, data: str) -> None:
        if self._stack:
            body = f"{target} {data}" if data else target
            self._stack[-1].children.append(ProcessingInstruction(body))

    @property
    def unclosed(self) -> int:
        return len(self._stack)

    def _resolve(self, name: str, scope: NamespaceScope, *, is_attribute: bool) -> Optional[str]:
        if ":" not in name:
            # Unprefixed attributes never take the default namespace.
            return None if is_attribute else scope.get(None) or None
        prefix = name.split(":", 1)[0]
        if prefix not in scope:
            raise MalformedXML(
                f"unbound namespace prefix {prefix!r} in {name!r}",
                part=self._part,
                line=self._parser.CurrentLineNumber,
                column=self._parser.CurrentColumnNumber,
            )
        return scope[prefix]


def parse_xml(data: bytes, part: Optional[str] = None) -> DocumentNode:
    """Parse one XML part into a :class:`DocumentNode` tree.

    Raises :class:`MalformedXML` when the input is not well-formed, including
    input that ends before every opened element is closed.
    """
    parser = expat.ParserCreate()
    parser.ordered_attributes = True
    parser.buffer_text = True
    builder = _TreeBuilder(parser, part)
    parser.StartElementHandler = builder.start
    parser.EndElementHandler = builder.end
    parser.CharacterDataHandler = builder.data
    parser.CommentHandler = builder.comment
    parser.ProcessingInstructionHandler = builder.processing_instruction
    try:
        parser.Parse(data, True)
    except expat.ExpatError as exc:
        raise MalformedXML(
            expat.ErrorString(exc.code), part=part, line=exc.lineno, column=exc.offset
        ) from exc

    if builder.root is None or builder.unclosed:
        raise MalformedXML("premature end of input: unclosed element", part=part)
    return builder.root
