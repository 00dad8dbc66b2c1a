"""Load the formatting-kind -> character-style mapping file."""
from __future__ import annotations

import csv
import enum
from pathlib import Path
from typing import Dict, Iterable, Optional, Union

from odf_restyler.utils.logger import get_logger

LOGGER = get_logger(__name__)


class FormattingKind(enum.Enum):
    """Direct character formatting that can be replaced by a named style."""

    BOLD = "Bold"
    ITALIC = "Italic"
    BOLD_ITALIC = "Bold Italic"
    SUPERSCRIPT = "Superscript"
    SUBSCRIPT = "Subscript"

    @classmethod
    def from_label(cls, label: str) -> Optional["FormattingKind"]:
        for kind in cls:
            if kind.value.lower() == label.strip().lower():
                return kind
        return None


StyleMappings = Dict[FormattingKind, str]


def parse_style_mappings(lines: Iterable[str], source: str = "<mappings>") -> StyleMappings:
    """Parse CSV lines of ``formatting-kind, style-name``.

    Lines whose first field starts with ``#`` are comments. Lines with fewer
    than two fields, an empty style name, or an unknown formatting kind are
    skipped with a warning. A later line for the same kind wins.
    """
    mappings: StyleMappings = {}
    for line_number, record in enumerate(csv.reader(lines, skipinitialspace=True), start=1):
        if not record or not "".join(record).strip():
            continue
        if record[0].lstrip().startswith("#"):
            continue
        if len(record) < 2 or not record[1].strip():
            LOGGER.warning("%s:%d: skipping line - expected 'kind, style name'", source, line_number)
            continue
        kind = FormattingKind.from_label(record[0])
        if kind is None:
            LOGGER.warning("%s:%d: unknown formatting kind %r", source, line_number, record[0].strip())
            continue
        mappings[kind] = record[1].strip()
    return mappings


def load_style_mappings(path: Union[str, Path]) -> StyleMappings:
    """Read a mapping file from disk; see :func:`parse_style_mappings`."""
    mapping_path = Path(path)
    with mapping_path.open(newline="", encoding="utf-8") as handle:
        mappings = parse_style_mappings(handle, source=mapping_path.name)
    LOGGER.info("Loaded %d style mapping(s) from %s", len(mappings), mapping_path.name)
    return mappings
