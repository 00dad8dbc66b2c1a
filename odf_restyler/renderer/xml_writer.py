"""Serialize :class:`DocumentNode` trees back into XML bytes."""
from __future__ import annotations

from typing import List

from odf_restyler.model.document_node import Comment, DocumentNode, ProcessingInstruction

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

_TEXT_ESCAPES = str.maketrans({"&": "&amp;", "<": "&lt;", "\r": "&#13;"})
_ATTR_ESCAPES = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        '"': "&quot;",
        "\t": "&#9;",
        "\n": "&#10;",
        "\r": "&#13;",
    }
)


def escape_text(text: str) -> str:
    return text.translate(_TEXT_ESCAPES).replace("]]>", "]]&gt;")


def escape_attribute(value: str) -> str:
    return value.translate(_ATTR_ESCAPES)


def _start_tag(node: DocumentNode, close: bool) -> str:
    attrs = "".join(f' {attr.name}="{escape_attribute(attr.value)}"' for attr in node.attributes)
    return f"<{node.tag}{attrs}{'/>' if close else '>'}"


def serialize_xml(root: DocumentNode, *, declaration: bool = True) -> bytes:
    """Write ``root`` as UTF-8 XML, attributes and children in stored order.

    Elements without any children are written self-closing. A newline follows
    the XML declaration, as office suites write it.
    """
    out: List[str] = [XML_DECLARATION + "\n"] if declaration else []
    # Work items are nodes still to open or closing tags still to emit.
    stack: List[object] = [root]
    while stack:
        item = stack.pop()
        if isinstance(item, tuple):
            out.append(item[1])
        elif isinstance(item, DocumentNode):
            if not item.children:
                out.append(_start_tag(item, close=True))
                continue
            out.append(_start_tag(item, close=False))
            stack.append(("end", f"</{item.tag}>"))
            stack.extend(reversed(item.children))
        elif isinstance(item, Comment):
            out.append(f"<!--{item}-->")
        elif isinstance(item, ProcessingInstruction):
            out.append(f"<?{item}?>")
        else:
            out.append(escape_text(str(item)))
    return "".join(out).encode("utf-8")
