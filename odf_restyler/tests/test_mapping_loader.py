"""Tests for the character style mapping file."""
import tempfile
import unittest
from pathlib import Path

from odf_restyler.parser.mapping_loader import FormattingKind, load_style_mappings, parse_style_mappings


class MappingLoaderTest(unittest.TestCase):
    """CSV lines map formatting kinds to style names."""

    def test_parse_lines(self) -> None:
        lines = [
            "# kind, style",
            "Bold, Strong Emphasis",
            "",
            "italic,Emphasis",
            "Bold Italic, Strong",
            "Superscript, Sup",
            "Subscript, Sub",
        ]
        mappings = parse_style_mappings(lines)
        self.assertEqual(mappings[FormattingKind.BOLD], "Strong Emphasis")
        self.assertEqual(mappings[FormattingKind.ITALIC], "Emphasis")
        self.assertEqual(len(mappings), 5)

    def test_invalid_lines_skipped_with_warning(self) -> None:
        with self.assertLogs("odf_restyler.parser.mapping_loader", level="WARNING") as logs:
            mappings = parse_style_mappings(["Bold", "Underline, Under", "Italic, ", "Italic, Emphasis"], "map.txt")
        self.assertEqual(mappings, {FormattingKind.ITALIC: "Emphasis"})
        self.assertEqual(len(logs.output), 3)
        self.assertIn("map.txt:1", logs.output[0])

    def test_quoted_style_name(self) -> None:
        mappings = parse_style_mappings(['Bold, "Strong, Loud"'])
        self.assertEqual(mappings[FormattingKind.BOLD], "Strong, Loud")

    def test_from_label(self) -> None:
        self.assertIs(FormattingKind.from_label(" BOLD italic "), FormattingKind.BOLD_ITALIC)
        self.assertIsNone(FormattingKind.from_label("Strike"))

    def test_load_from_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "charstyles.txt"
            path.write_text("# comment\nBold,Strong Emphasis\n", encoding="utf-8")
            self.assertEqual(load_style_mappings(path), {FormattingKind.BOLD: "Strong Emphasis"})

    def test_missing_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_style_mappings(Path(tempfile.gettempdir()) / "does-not-exist-charstyles.txt")


if __name__ == "__main__":
    unittest.main()
