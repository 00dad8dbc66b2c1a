"""Generic, lossless element tree for one XML part of an OpenDocument package."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union

from odf_restyler.utils.namespaces import XML_NS, XMLNS_NS, QName

NamespaceScope = Dict[Optional[str], str]


class Comment(str):
    """An XML comment kept in the children list (value excludes the delimiters)."""


class ProcessingInstruction(str):
    """A processing instruction kept in the children list (``target data``)."""


@dataclass(slots=True)
class Attribute:
    """A single attribute exactly as written in the source part."""

    name: str
    value: str
    namespace: Optional[str] = None

    @property
    def prefix(self) -> Optional[str]:
        return self.name.split(":", 1)[0] if ":" in self.name else None

    @property
    def local_name(self) -> str:
        return self.name.split(":", 1)[-1]

    @property
    def is_namespace_declaration(self) -> bool:
        return self.name == "xmlns" or self.name.startswith("xmlns:")

    def matches(self, namespace: Optional[str], local: str) -> bool:
        return self.namespace == namespace and self.local_name == local


Child = Union["DocumentNode", str]


@dataclass(slots=True)
class DocumentNode:
    """One XML element with ordered attributes and mixed content.

    ``tag`` keeps the qualified name as written (prefix included) and
    ``namespace`` the URI it resolved to, so identity checks go through
    :meth:`matches` while serialization reproduces the original prefix.
    ``children`` interleaves nested nodes and text runs in document order.
    ``scope`` is the in-scope prefix map, used only when new prefixed names
    have to be created; it takes no part in equality.
    """

    tag: str
    namespace: Optional[str] = None
    attributes: List[Attribute] = field(default_factory=list)
    children: List[Child] = field(default_factory=list)
    scope: NamespaceScope = field(default_factory=dict, compare=False, repr=False)

    @property
    def prefix(self) -> Optional[str]:
        return self.tag.split(":", 1)[0] if ":" in self.tag else None

    @property
    def local_name(self) -> str:
        return self.tag.split(":", 1)[-1]

    @property
    def qname(self) -> QName:
        return self.namespace, self.local_name

    def matches(self, namespace: Optional[str], local: str) -> bool:
        return self.namespace == namespace and self.local_name == local

    # ------------------------------------------------------------------
    # Attribute access
    def get_attribute(self, namespace: Optional[str], local: str) -> Optional[Attribute]:
        for attribute in self.attributes:
            if attribute.matches(namespace, local) and not attribute.is_namespace_declaration:
                return attribute
        return None

    def get(self, namespace: Optional[str], local: str, default: Optional[str] = None) -> Optional[str]:
        attribute = self.get_attribute(namespace, local)
        return default if attribute is None else attribute.value

    def set(self, namespace: Optional[str], local: str, value: str) -> None:
        """Update an attribute in place, or append it with an in-scope prefix."""
        attribute = self.get_attribute(namespace, local)
        if attribute is not None:
            attribute.value = value
            return
        self.attributes.append(Attribute(self._qualified(namespace, local), value, namespace))

    def remove(self, namespace: Optional[str], local: str) -> bool:
        """Drop an attribute; return whether it was present."""
        attribute = self.get_attribute(namespace, local)
        if attribute is None:
            return False
        self.attributes.remove(attribute)
        return True

    def declare_namespace(self, prefix: str, namespace: str) -> None:
        """Bind ``prefix`` on this element unless some prefix is already bound to ``namespace``.

        The binding is visible to every descendant that does not bind
        ``prefix`` itself, including elements that carried their own
        declarations when parsed, and to nothing outside this element.
        """
        if self.prefix_for(namespace) is not None:
            return
        bound = self.scope.get(prefix)
        if bound is not None:
            raise ValueError(f"Prefix {prefix!r} is already bound to {bound!r} on <{self.tag}>")
        self.attributes.append(Attribute(f"xmlns:{prefix}", namespace, XMLNS_NS))
        inherited = self.scope
        self.scope = dict(inherited)
        self.scope[prefix] = namespace
        stack: List[DocumentNode] = list(self.iter_children())
        while stack:
            node = stack.pop()
            if node.scope is inherited:
                node.scope = self.scope
            elif node.scope is not self.scope:
                if node.scope.get(prefix, namespace) != namespace:
                    continue
                node.scope[prefix] = namespace
            stack.extend(node.iter_children())

    def prefix_for(self, namespace: Optional[str]) -> Optional[str]:
        """Return a prefix bound to ``namespace`` in this node's scope."""
        if namespace == XML_NS:
            return "xml"
        for prefix, uri in self.scope.items():
            if uri == namespace and prefix is not None:
                return prefix
        return None

    # ------------------------------------------------------------------
    # Structure
    def append(self, child: Child) -> None:
        self.children.append(child)

    def new_child(
        self,
        namespace: str,
        local: str,
        attributes: Sequence[Tuple[QName, str]] = (),
        index: Optional[int] = None,
    ) -> "DocumentNode":
        """Create a child element named with the prefixes in scope here."""
        child = DocumentNode(self._qualified(namespace, local), namespace, scope=self.scope)
        for (attr_ns, attr_local), value in attributes:
            child.set(attr_ns, attr_local, value)
        if index is None:
            self.children.append(child)
        else:
            self.children.insert(index, child)
        return child

    def iter_children(self) -> Iterator["DocumentNode"]:
        for child in self.children:
            if isinstance(child, DocumentNode):
                yield child

    def find(self, namespace: Optional[str], local: str) -> Optional["DocumentNode"]:
        for child in self.iter_children():
            if child.matches(namespace, local):
                return child
        return None

    def find_all(self, namespace: Optional[str], local: str) -> List["DocumentNode"]:
        return [child for child in self.iter_children() if child.matches(namespace, local)]

    def iter(self, namespace: Optional[str] = None, local: Optional[str] = None) -> Iterator["DocumentNode"]:
        """Pre-order walk over this node and all descendant elements.

        With ``local`` given only elements matching ``(namespace, local)`` are
        yielded. The walk uses an explicit stack so deep documents do not hit
        the recursion limit.
        """
        stack: List[DocumentNode] = [self]
        while stack:
            node = stack.pop()
            if local is None or node.matches(namespace, local):
                yield node
            stack.extend(reversed([child for child in node.children if isinstance(child, DocumentNode)]))

    def text_content(self) -> str:
        """Concatenate every text run below this node, skipping comments and PIs."""
        parts: List[str] = []
        stack: List[Child] = list(reversed(self.children))
        while stack:
            item = stack.pop()
            if isinstance(item, DocumentNode):
                stack.extend(reversed(item.children))
            elif not isinstance(item, (Comment, ProcessingInstruction)):
                parts.append(item)
        return "".join(parts)

    def _qualified(self, namespace: Optional[str], local: str) -> str:
        if namespace is None:
            return local
        prefix = self.prefix_for(namespace)
        if prefix is None:
            raise ValueError(f"No prefix bound to namespace {namespace!r} on <{self.tag}>")
        return f"{prefix}:{local}"
