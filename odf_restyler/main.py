"""Command-line entry point for the OpenDocument style tools."""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional, Sequence

from odf_restyler.errors import OdfRestylerError
from odf_restyler.model.style_model import RenameRequest, StyleInventory
from odf_restyler.parser.content_reader import (
    HEADING,
    LIST_ITEM,
    TABLE_CELL,
    ContentBlock,
    extract_all_text,
    read_content,
)
from odf_restyler.parser.odf_package import CONTENT_XML_PATH, STYLES_XML_PATH, OdfPackage
from odf_restyler.parser.package_info import PackageInfo, read_package_info
from odf_restyler.parser.style_inventory import build_inventory
from odf_restyler.parser.xml_tree import parse_xml
from odf_restyler.transform.character_styles import convert_direct_formatting
from odf_restyler.transform.content_editor import edit_content
from odf_restyler.transform.rename_workflow import default_output_path, rename_style
from odf_restyler.utils.logger import get_logger, set_verbose

LOGGER = get_logger(__name__)

DEFAULT_MAPPING_FILE = "charstyles.txt"


def load_inventory(input_path: Path) -> StyleInventory:
    """Read the style inventory of a package without modifying it."""
    with OdfPackage.open(input_path) as package:
        return build_inventory(package.read_optional(STYLES_XML_PATH), package.read_entry(CONTENT_XML_PATH))


def command_rename(args: argparse.Namespace) -> int:
    input_path = Path(args.input)
    output_path = Path(args.output) if args.output else default_output_path(input_path, "renamed")
    request = RenameRequest(
        args.old_name,
        args.new_name,
        family=args.family,
        new_display_name=args.display_name,
        include_definitions=not args.references_only,
    )
    infer_family = args.family is None and not args.all_families
    report = rename_style(input_path, request, output_path, require_match=True, infer_family=infer_family)
    for part, changes in report.changes.items():
        print(f"{part}: {len(changes)} change(s)")
    print(f"Renamed {request.old_name!r} -> {request.new_name!r}; saved to {report.output_path}")
    return 0


def command_styles(args: argparse.Namespace) -> int:
    inventory = load_inventory(Path(args.input))
    grouped = inventory.by_family()
    if args.family:
        grouped = {family: styles for family, styles in grouped.items() if family == args.family}

    if args.json:
        payload = {
            family: [
                {"name": s.name, "display_name": s.display_name, "automatic": s.automatic} for s in styles
            ]
            for family, styles in grouped.items()
        }
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return 0

    for family, styles in grouped.items():
        print(f"[{family}]")
        for style in styles:
            marker = " (automatic)" if style.automatic else ""
            if style.display_name != style.name:
                print(f"  {style.name} - {style.display_name}{marker}")
            else:
                print(f"  {style.name}{marker}")
    return 0


def command_convert(args: argparse.Namespace) -> int:
    input_path = Path(args.input)
    output_path = Path(args.output) if args.output else default_output_path(input_path, "converted")
    report = convert_direct_formatting(input_path, Path(args.mapping), output_path)
    tracker = report.tracker
    for style_name, count in sorted(tracker.style_counts.items()):
        print(f"{style_name}: {count} change(s)")
    for style_name in tracker.reparented_styles:
        print(f"Style {style_name} now inherits from a character style")
    for style_name in tracker.created_styles:
        print(f"Created style {style_name}")
    if report.written:
        print(f"Total changes: {tracker.total_changes}; saved to {report.output_path}")
    else:
        print("No direct formatting to convert; nothing written")
    return 0


def _describe_block(block: ContentBlock) -> str:
    if block.kind == HEADING:
        return f"Heading (level {block.level}): {block.text}"
    if block.kind == LIST_ITEM:
        return f"{'  ' * (block.level - 1)}- {block.text}"
    if block.kind == TABLE_CELL:
        text = block.value if block.value is not None else block.text
        return f"{block.table or 'Table'} [{block.row},{block.column}]: {text}"
    style = f" ({block.style_name})" if block.style_name else ""
    return f"Paragraph{style}: {block.text}"


def command_text(args: argparse.Namespace) -> int:
    with OdfPackage.open(args.input) as package:
        content = parse_xml(package.read_entry(CONTENT_XML_PATH), CONTENT_XML_PATH)
    if args.plain:
        print(extract_all_text(content))
        return 0
    blocks = read_content(content)
    if args.json:
        print(json.dumps([block.as_dict() for block in blocks], indent=2, ensure_ascii=False))
        return 0
    for block in blocks:
        if block.text.strip() or block.value:
            print(_describe_block(block))
    return 0


def command_edit(args: argparse.Namespace) -> int:
    input_path = Path(args.input)
    output_path = Path(args.output) if args.output else default_output_path(input_path, "edited")
    report = edit_content(
        input_path,
        output_path,
        replacements=[tuple(pair) for pair in args.replace or []],
        paragraphs=args.append or [],
        style_name=args.style,
    )
    for old, count in report.replacements.items():
        print(f"Replaced {old!r} in {count} place(s)")
    if report.added_paragraphs:
        print(f"Added {report.added_paragraphs} paragraph(s)")
    if report.written:
        print(f"Saved to {report.output_path}")
    else:
        print("Nothing changed; nothing written")
    return 0


def _print_info(info: PackageInfo) -> None:
    print(f"File: {info.path}")
    print(f"Mimetype: {info.mimetype or '-'}")
    print(f"Document type: {info.document_type}")
    print(f"Entries ({len(info.entries)}):")
    for entry in info.entries:
        print(f"  {entry}")
    if info.manifest:
        print(f"Manifest ({len(info.manifest)}):")
        for item in info.manifest:
            print(f"  {item.full_path} [{item.media_type}]")
    if info.metadata:
        print("Metadata:")
        for key, value in info.metadata.items():
            if isinstance(value, dict):
                value = ", ".join(f"{name}={count}" for name, count in value.items())
            print(f"  {key}: {value}")
    print("Statistics:")
    for key, value in info.statistics.as_dict().items():
        print(f"  {key}: {value}")


def command_info(args: argparse.Namespace) -> int:
    with OdfPackage.open(args.input) as package:
        info = read_package_info(package)
    if args.json:
        print(json.dumps(info.as_dict(), indent=2, ensure_ascii=False))
    else:
        _print_info(info)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="odf-restyler",
        description="Inspect OpenDocument packages and rename or apply styles without losing content",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    rename = commands.add_parser("rename", help="Rename a style and every reference to it")
    rename.add_argument("input", help="Path to the input package (.odt, .ods, ...)")
    rename.add_argument("old_name", help="Internal name of the style to rename")
    rename.add_argument("new_name", help="New internal style name")
    rename.add_argument("-o", "--output", help="Output path (default: <name>_renamed.<ext>)")
    scope = rename.add_mutually_exclusive_group()
    scope.add_argument("--family", help="Only rename within this style family (paragraph, text, ...)")
    scope.add_argument("--all-families", action="store_true", help="Rename in every family that uses the name")
    rename.add_argument("--display-name", help="Also set the user-visible name of the renamed style")
    rename.add_argument(
        "--references-only",
        action="store_true",
        help="Retarget references to an existing style and keep the old definition",
    )
    rename.set_defaults(handler=command_rename)

    styles = commands.add_parser("styles", help="List the styles defined in a package")
    styles.add_argument("input", help="Path to the package")
    styles.add_argument("--family", help="Only list this family")
    styles.add_argument("--json", action="store_true", help="Print JSON instead of text")
    styles.set_defaults(handler=command_styles)

    convert = commands.add_parser("convert", help="Replace direct bold/italic/... formatting by character styles")
    convert.add_argument("input", help="Path to the package")
    convert.add_argument(
        "mapping", nargs="?", default=DEFAULT_MAPPING_FILE, help=f"Mapping file (default: {DEFAULT_MAPPING_FILE})"
    )
    convert.add_argument("-o", "--output", help="Output path (default: <name>_converted.<ext>)")
    convert.set_defaults(handler=command_convert)

    text = commands.add_parser("text", help="List headings, paragraphs, list items and table cells")
    text.add_argument("input", help="Path to the package")
    output = text.add_mutually_exclusive_group()
    output.add_argument("--json", action="store_true", help="Print JSON instead of text")
    output.add_argument("--plain", action="store_true", help="Print all text on one line")
    text.set_defaults(handler=command_text)

    edit = commands.add_parser("edit", help="Replace text and append paragraphs")
    edit.add_argument("input", help="Path to the package")
    edit.add_argument(
        "--replace", nargs=2, action="append", metavar=("OLD", "NEW"), help="Replace OLD with NEW (repeatable)"
    )
    edit.add_argument("--append", action="append", metavar="TEXT", help="Append a paragraph (repeatable)")
    edit.add_argument("--style", help="Paragraph style for appended paragraphs")
    edit.add_argument("-o", "--output", help="Output path (default: <name>_edited.<ext>)")
    edit.set_defaults(handler=command_edit)

    info = commands.add_parser("info", help="Show entries, manifest, metadata and statistics")
    info.add_argument("input", help="Path to the package")
    info.add_argument("--json", action="store_true", help="Print JSON instead of text")
    info.set_defaults(handler=command_info)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Parse ``argv`` and run the chosen command; return the exit status."""
    args = build_parser().parse_args(argv)
    set_verbose(args.verbose)
    try:
        return args.handler(args)
    except (OdfRestylerError, OSError, ValueError) as exc:
        LOGGER.error("%s", exc)
        return 1


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":  # pragma: no cover
    run()
