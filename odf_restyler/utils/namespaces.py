"""OpenDocument namespace URIs and helpers for (namespace, local) names."""
from __future__ import annotations

from typing import Dict, Optional, Tuple

QName = Tuple[Optional[str], str]

XML_NS = "http://www.w3.org/XML/1998/namespace"
XMLNS_NS = "http://www.w3.org/2000/xmlns/"

ODF_NAMESPACES: Dict[str, str] = {
    "chart": "urn:oasis:names:tc:opendocument:xmlns:chart:1.0",
    "config": "urn:oasis:names:tc:opendocument:xmlns:config:1.0",
    "dc": "http://purl.org/dc/elements/1.1/",
    "dr3d": "urn:oasis:names:tc:opendocument:xmlns:dr3d:1.0",
    "draw": "urn:oasis:names:tc:opendocument:xmlns:drawing:1.0",
    "fo": "urn:oasis:names:tc:opendocument:xmlns:xsl-fo-compatible:1.0",
    "form": "urn:oasis:names:tc:opendocument:xmlns:form:1.0",
    "manifest": "urn:oasis:names:tc:opendocument:xmlns:manifest:1.0",
    "math": "http://www.w3.org/1998/Math/MathML",
    "meta": "urn:oasis:names:tc:opendocument:xmlns:meta:1.0",
    "number": "urn:oasis:names:tc:opendocument:xmlns:datastyle:1.0",
    "office": "urn:oasis:names:tc:opendocument:xmlns:office:1.0",
    "presentation": "urn:oasis:names:tc:opendocument:xmlns:presentation:1.0",
    "script": "urn:oasis:names:tc:opendocument:xmlns:script:1.0",
    "style": "urn:oasis:names:tc:opendocument:xmlns:style:1.0",
    "svg": "urn:oasis:names:tc:opendocument:xmlns:svg-compatible:1.0",
    "table": "urn:oasis:names:tc:opendocument:xmlns:table:1.0",
    "text": "urn:oasis:names:tc:opendocument:xmlns:text:1.0",
    "xlink": "http://www.w3.org/1999/xlink",
    # LibreOffice / OOo extensions
    "loext": "urn:org:documentfoundation:names:experimental:office:xmlns:loext:1.0",
    "officeooo": "http://openoffice.org/2009/office",
    "ooo": "http://openoffice.org/2004/office",
    "ooow": "http://openoffice.org/2004/writer",
}

CHART = ODF_NAMESPACES["chart"]
DRAW = ODF_NAMESPACES["draw"]
FO = ODF_NAMESPACES["fo"]
MANIFEST = ODF_NAMESPACES["manifest"]
META = ODF_NAMESPACES["meta"]
NUMBER = ODF_NAMESPACES["number"]
OFFICE = ODF_NAMESPACES["office"]
OFFICEOOO = ODF_NAMESPACES["officeooo"]
PRESENTATION = ODF_NAMESPACES["presentation"]
STYLE = ODF_NAMESPACES["style"]
TABLE = ODF_NAMESPACES["table"]
TEXT = ODF_NAMESPACES["text"]
XLINK = ODF_NAMESPACES["xlink"]


def odf(prefixed: str) -> QName:
    """Turn a conventional ``prefix:local`` name into a (namespace, local) pair."""
    prefix, local = prefixed.split(":", 1)
    return ODF_NAMESPACES[prefix], local


def clark(name: QName) -> str:
    """Render a (namespace, local) pair in ``{uri}local`` notation for messages."""
    namespace, local = name
    if namespace is None:
        return local
    return f"{{{namespace}}}{local}"
