"""End-to-end style rename: package in, validated rewrite of each part, package out."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from odf_restyler.errors import AmbiguousStyleFamily, NoMatchingStyle, StyleNameConflict
from odf_restyler.model.style_model import RenameRequest, StyleInventory
from odf_restyler.parser.odf_package import CONTENT_XML_PATH, STYLES_XML_PATH, PathLike
from odf_restyler.parser.style_inventory import StyleInventoryParser
from odf_restyler.transform.style_rewriter import AttributeChange, StyleRewriter
from odf_restyler.transform.transaction import PackageTransaction
from odf_restyler.utils.logger import get_logger

LOGGER = get_logger(__name__)

DEFAULT_PARTS = (CONTENT_XML_PATH, STYLES_XML_PATH)


@dataclass(slots=True)
class RenameReport:
    """What a rename did to each part of the package."""

    request: RenameRequest
    changes: Dict[str, List[AttributeChange]] = field(default_factory=dict)
    written: bool = False
    output_path: Optional[Path] = None

    @property
    def changed(self) -> bool:
        return any(self.changes.values())

    def count(self, part: Optional[str] = None) -> int:
        if part is not None:
            return len(self.changes.get(part, []))
        return sum(len(changes) for changes in self.changes.values())


def check_request(request: RenameRequest, inventory: StyleInventory, infer_family: bool = False) -> RenameRequest:
    """Validate ``request`` against the styles the document defines.

    With ``infer_family`` a request without a family takes the only family
    that defines ``old_name``; several candidates raise
    :class:`AmbiguousStyleFamily`. Renaming onto a name that already exists
    in the same family raises :class:`StyleNameConflict`.
    """
    families = inventory.families_of(request.old_name)
    if request.family is None and infer_family:
        if len(families) > 1:
            listed = ", ".join(sorted(str(family) for family in families))
            raise AmbiguousStyleFamily(
                f"Style {request.old_name!r} exists in several families ({listed}); choose one"
            )
        if families and families[0] is not None:
            request = replace(request, family=families[0])
            LOGGER.info("Inferred family %r for style %r", request.family, request.old_name)

    targets = [request.family] if request.family is not None else families
    if request.include_definitions and request.old_name != request.new_name:
        for family in targets:
            if inventory.exists(request.new_name, family):
                raise StyleNameConflict(
                    f"Style {request.new_name!r} already exists in family {family!r}"
                )
    elif not request.include_definitions and not any(inventory.exists(request.new_name, f) for f in targets):
        LOGGER.warning("Retargeting to %r, which is not defined in the document", request.new_name)
    return request


def rename_style(
    input_path: PathLike,
    request: RenameRequest,
    output_path: PathLike,
    *,
    parts: Sequence[str] = DEFAULT_PARTS,
    require_match: bool = False,
    infer_family: bool = False,
) -> RenameReport:
    """Rename a style in every requested part and commit when anything changed.

    ``content.xml`` must be present; other parts are skipped when missing.
    With ``require_match`` a rename that changes nothing raises
    :class:`NoMatchingStyle` instead of returning an unchanged report.
    """
    with PackageTransaction(input_path) as txn:
        content = txn.tree(CONTENT_XML_PATH)
        styles = txn.tree(STYLES_XML_PATH, required=False)
        inventory = StyleInventoryParser(styles, content).parse()
        request = check_request(request, inventory, infer_family)

        report = RenameReport(request)
        rewriter = StyleRewriter()
        for entry in parts:
            root = txn.tree(entry, required=entry == CONTENT_XML_PATH)
            if root is None:
                continue
            result = rewriter.rewrite(root, request)
            report.changes[entry] = result.changes
            if result.changed:
                LOGGER.info("%s: %d attribute(s) renamed", entry, result.count)
                txn.update(entry)

        if not report.changed:
            if require_match:
                raise NoMatchingStyle(f"Style {request.old_name!r} not found in {txn.source.name}")
            return report

        report.written = txn.commit(output_path)
        report.output_path = Path(output_path)
    return report


def default_output_path(input_path: PathLike, tag: str) -> Path:
    """``report.odt`` -> ``report_<tag>.odt`` in the same directory."""
    source = Path(input_path)
    return source.with_name(f"{source.stem}_{tag}{source.suffix}")
