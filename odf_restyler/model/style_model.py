"""Style records, the read-only style inventory and rename requests."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Mapping, Optional, Tuple


@dataclass(slots=True, frozen=True)
class StyleInfo:
    """One style definition found in ``styles.xml`` or ``content.xml``."""

    name: str
    display_name: str
    family: Optional[str]
    automatic: bool = False


@dataclass(frozen=True)
class RenameRequest:
    """Rename ``old_name`` to ``new_name`` within ``family`` (``None``: every family).

    ``new_display_name`` also relabels the renamed definitions; without it
    ``style:display-name`` is left alone. ``include_definitions=False`` only
    retargets references, leaving the definition of ``old_name`` in place.
    """

    old_name: str
    new_name: str
    family: Optional[str] = None
    new_display_name: Optional[str] = None
    include_definitions: bool = True

    def __post_init__(self) -> None:
        if not self.old_name or not self.new_name:
            raise ValueError("Style names must be non-empty")
        if self.old_name == self.new_name and self.new_display_name is None:
            raise ValueError(f"Old and new style name are identical: {self.old_name!r}")


class StyleInventory:
    """Collection of style definitions keyed by ``(family, name)``."""

    def __init__(self, styles: Mapping[Tuple[Optional[str], str], StyleInfo]) -> None:
        self._styles = dict(styles)

    def __len__(self) -> int:
        return len(self._styles)

    def __iter__(self) -> Iterator[StyleInfo]:
        return iter(self._styles.values())

    def get(self, name: str, family: Optional[str] = None) -> Optional[StyleInfo]:
        """Return the style called ``name``; without a family, the first found."""
        if family is not None:
            return self._styles.get((family, name))
        for style in self._styles.values():
            if style.name == name:
                return style
        return None

    def exists(self, name: str, family: Optional[str] = None) -> bool:
        return self.get(name, family) is not None

    def families_of(self, name: str) -> List[Optional[str]]:
        """Return every family that defines ``name``, in discovery order."""
        return [family for family, style_name in self._styles if style_name == name]

    def as_mapping(self) -> Dict[str, StyleInfo]:
        """Flatten to name -> info; a later definition shadows an earlier one."""
        return {style.name: style for style in self._styles.values()}

    def by_family(self) -> Dict[str, List[StyleInfo]]:
        grouped: Dict[str, List[StyleInfo]] = {}
        for style in self._styles.values():
            grouped.setdefault(style.family or "unknown", []).append(style)
        for styles in grouped.values():
            styles.sort(key=lambda style: style.name)
        return dict(sorted(grouped.items()))
