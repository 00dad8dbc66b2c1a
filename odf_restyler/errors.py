"""Exception hierarchy shared by the parser, container and rewrite layers."""
from __future__ import annotations

from typing import Optional


class OdfRestylerError(Exception):
    """Base class for every error raised by the library."""


class MalformedXML(OdfRestylerError, ValueError):
    """An XML part is not well-formed (or uses an undeclared prefix)."""

    def __init__(
        self,
        message: str,
        part: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        self.part = part
        self.line = line
        self.column = column
        location = part or "<xml>"
        if line is not None:
            location = f"{location}:{line}:{column or 0}"
        super().__init__(f"{location}: {message}")


class ContainerNotFound(OdfRestylerError, FileNotFoundError):
    """The package path does not exist."""


class ContainerCorrupt(OdfRestylerError, ValueError):
    """The package exists but is not a readable ZIP archive."""


class EntryNotFound(OdfRestylerError, KeyError):
    """A named entry is missing from the package."""

    def __init__(self, entry: str) -> None:
        self.entry = entry
        super().__init__(entry)

    def __str__(self) -> str:
        return f"Entry not found in package: {self.entry}"


class WriteError(OdfRestylerError, OSError):
    """Writing the output package failed; nothing was placed at the target."""


class NoMatchingStyle(OdfRestylerError, LookupError):
    """A rename request did not match any attribute in the document."""


class AmbiguousStyleFamily(OdfRestylerError, ValueError):
    """A style name exists in several families and none was given."""


class StyleNameConflict(OdfRestylerError, ValueError):
    """The target name is already defined in the same family."""


class NotATextDocument(OdfRestylerError, ValueError):
    """The document body has no ``office:text`` to add paragraphs to."""
