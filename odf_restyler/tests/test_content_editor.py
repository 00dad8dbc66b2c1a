"""Tests for text replacement and appended paragraphs."""
import tempfile
import unittest
from pathlib import Path

from odf_restyler.errors import NotATextDocument
from odf_restyler.parser.xml_tree import parse_xml
from odf_restyler.renderer.xml_writer import serialize_xml
from odf_restyler.tests.odf_fixtures import CONTENT_XML, NS_DECLARATIONS, read_entries, write_package
from odf_restyler.transform.content_editor import add_paragraph, edit_content, replace_text
from odf_restyler.utils.namespaces import OFFICE, TEXT


class ReplaceTextTest(unittest.TestCase):
    """Only text runs inside the body change."""

    def test_counts_every_occurrence(self) -> None:
        root = parse_xml(CONTENT_XML)
        self.assertEqual(replace_text(root, "code", "text"), 2)
        paragraphs = [p.text_content() for p in root.iter(TEXT, "p")]
        self.assertEqual(paragraphs, ["text", "more text here"])

    def test_markup_and_comments_untouched(self) -> None:
        root = parse_xml(
            f"<office:document-content {NS_DECLARATIONS}><office:automatic-styles>"
            '<style:style style:name="P" style:family="paragraph"/></office:automatic-styles>'
            '<office:body><office:text><!-- P P --><text:p text:style-name="P">P and P</text:p>'
            "</office:text></office:body></office:document-content>".encode()
        )
        self.assertEqual(replace_text(root, "P", "Q"), 2)
        xml = serialize_xml(root, declaration=False)
        self.assertIn(b'<!-- P P --><text:p text:style-name="P">Q and Q</text:p>', xml)
        self.assertIn(b'style:name="P"', xml)

    def test_replacement_is_escaped(self) -> None:
        root = parse_xml(CONTENT_XML)
        replace_text(root, "Intro", "A & B <1>")
        self.assertIn(b">A &amp; B &lt;1></text:h>", serialize_xml(root))

    def test_empty_search_rejected(self) -> None:
        with self.assertRaises(ValueError):
            replace_text(parse_xml(CONTENT_XML), "", "x")


class AddParagraphTest(unittest.TestCase):
    """Paragraphs are appended to office:text."""

    def test_appended_last(self) -> None:
        root = parse_xml(CONTENT_XML)
        paragraph = add_paragraph(root, "The end", "Standard")
        office_text = root.find(OFFICE, "body").find(OFFICE, "text")
        self.assertIs(list(office_text.iter_children())[-1], paragraph)
        self.assertEqual(paragraph.tag, "text:p")
        self.assertEqual(paragraph.get(TEXT, "style-name"), "Standard")
        self.assertEqual(paragraph.text_content(), "The end")

    def test_without_style(self) -> None:
        paragraph = add_paragraph(parse_xml(CONTENT_XML), "plain")
        self.assertIsNone(paragraph.get(TEXT, "style-name"))

    def test_text_prefix_declared_when_missing(self) -> None:
        root = parse_xml(
            b'<office:document-content xmlns:office="urn:oasis:names:tc:opendocument:xmlns:office:1.0">'
            b"<office:body><office:text/></office:body></office:document-content>"
        )
        add_paragraph(root, "hello")
        xml = serialize_xml(root, declaration=False)
        self.assertIn(b'xmlns:text="urn:oasis:names:tc:opendocument:xmlns:text:1.0"', xml)
        self.assertIn(b"<office:text><text:p>hello</text:p></office:text>", xml)

    def test_spreadsheet_rejected(self) -> None:
        root = parse_xml(
            f"<office:document-content {NS_DECLARATIONS}><office:body><office:spreadsheet/>"
            "</office:body></office:document-content>".encode()
        )
        with self.assertRaises(NotATextDocument):
            add_paragraph(root, "x")


class EditContentTest(unittest.TestCase):
    """The package workflow only writes content.xml."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.tmp = Path(self._tmp.name)
        self.source = write_package(self.tmp / "sample.odt")

    def test_edit_package(self) -> None:
        output = self.tmp / "out.odt"
        report = edit_content(self.source, output, [("code", "CODE"), ("Intro", "Overview")], ["Added"])
        self.assertTrue(report.written)
        self.assertEqual(report.replacements, {"code": 2, "Intro": 1})
        self.assertEqual(report.total_changes, 4)
        before, after = read_entries(self.source), read_entries(output)
        self.assertIn(b"Overview</text:h>", after["content.xml"])
        self.assertIn(b"<text:p>Added</text:p>", after["content.xml"])
        for name in before:
            if name != "content.xml":
                self.assertEqual(before[name], after[name], name)

    def test_nothing_changed(self) -> None:
        output = self.tmp / "out.odt"
        report = edit_content(self.source, output, [("absent", "x")])
        self.assertFalse(report.written)
        self.assertEqual(report.replacements, {"absent": 0})
        self.assertFalse(output.exists())


if __name__ == "__main__":
    unittest.main()
