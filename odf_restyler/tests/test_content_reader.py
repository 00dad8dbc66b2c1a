"""Tests for listing the text blocks of a document body."""
import unittest

from odf_restyler.parser.content_reader import (
    HEADING,
    LIST_ITEM,
    PARAGRAPH,
    TABLE_CELL,
    extract_all_text,
    inline_text,
    read_content,
)
from odf_restyler.parser.xml_tree import parse_xml
from odf_restyler.tests.odf_fixtures import CONTENT_XML, NS_DECLARATIONS

BODY = f"""<office:document-content {NS_DECLARATIONS} xmlns:xlink="http://www.w3.org/1999/xlink">
<office:body><office:text>
<text:h text:style-name="Heading_20_2" text:outline-level="2">Plan</text:h>
<text:p text:style-name="Standard">a<text:s text:c="3"/>b<text:tab/>c<text:line-break/>d</text:p>
<text:list><text:list-item><text:p>first</text:p>
<text:list><text:list-item><text:p>nested</text:p></text:list-item></text:list>
</text:list-item></text:list>
<table:table table:name="Prices">
<table:table-header-rows><table:table-row>
<table:table-cell><text:p>Item</text:p></table:table-cell>
<table:table-cell table:number-columns-repeated="2"><text:p>Cost</text:p></table:table-cell>
<table:table-cell><text:p>Note</text:p></table:table-cell>
</table:table-row></table:table-header-rows>
<table:table-row>
<table:table-cell table:number-columns-spanned="2"><text:p>Tea</text:p></table:table-cell>
<table:covered-table-cell/>
<table:table-cell office:value-type="float" office:value="2.5"><text:p>2,50</text:p></table:table-cell>
</table:table-row>
</table:table>
<text:p>See <text:a xlink:href="https://example.org/">the site</text:a><office:annotation><text:p>note</text:p>
</office:annotation>.</text:p>
<text:p>outer<draw:frame><draw:text-box><text:p>boxed</text:p></draw:text-box></draw:frame></text:p>
</office:text></office:body>
</office:document-content>""".encode("utf-8")


class ReadContentTest(unittest.TestCase):
    """Blocks come out in document order with their context."""

    def setUp(self) -> None:
        self.blocks = read_content(parse_xml(BODY))

    def test_kinds_in_order(self) -> None:
        self.assertEqual(
            [block.kind for block in self.blocks],
            [HEADING, PARAGRAPH, LIST_ITEM, LIST_ITEM] + [TABLE_CELL] * 5 + [PARAGRAPH, PARAGRAPH],
        )

    def test_heading(self) -> None:
        heading = self.blocks[0]
        self.assertEqual((heading.text, heading.style_name, heading.level), ("Plan", "Heading_20_2", 2))

    def test_spacing_elements_expanded(self) -> None:
        self.assertEqual(self.blocks[1].text, "a   b\tc\nd")

    def test_list_depth(self) -> None:
        self.assertEqual([(b.text, b.level) for b in self.blocks[2:4]], [("first", 1), ("nested", 2)])

    def test_table_positions(self) -> None:
        cells = [(b.text, b.table, b.row, b.column) for b in self.blocks[4:9]]
        self.assertEqual(
            cells,
            [
                ("Item", "Prices", 1, 1),
                ("Cost", "Prices", 1, 2),
                ("Note", "Prices", 1, 4),
                ("Tea", "Prices", 2, 1),
                ("2,50", "Prices", 2, 3),
            ],
        )
        self.assertEqual(self.blocks[8].value, "2.5")
        self.assertEqual(self.blocks[8].as_dict()["value"], "2.5")

    def test_links_and_annotations(self) -> None:
        block = self.blocks[9]
        self.assertEqual(block.text, "See the site.")
        self.assertEqual(block.links, [("the site", "https://example.org/")])
        self.assertEqual(block.as_dict()["links"], [{"text": "the site", "href": "https://example.org/"}])

    def test_nested_paragraph_part_of_outer_block(self) -> None:
        self.assertEqual(self.blocks[10].text, "outer\nboxed")
        self.assertEqual(len(self.blocks), 11)

    def test_missing_body(self) -> None:
        with self.assertLogs("odf_restyler.parser.content_reader", level="WARNING"):
            self.assertEqual(read_content(parse_xml(f"<office:document-content {NS_DECLARATIONS}/>".encode())), [])


class ExtractTextTest(unittest.TestCase):
    """All text on one line."""

    def test_fixture(self) -> None:
        self.assertEqual(extract_all_text(parse_xml(CONTENT_XML)), "Intro code more code here")

    def test_whitespace_collapsed(self) -> None:
        self.assertTrue(extract_all_text(parse_xml(BODY)).startswith("Plan a b c d first nested Item Cost"))

    def test_invalid_space_count(self) -> None:
        paragraph = parse_xml(f'<text:p {NS_DECLARATIONS}>x<text:s text:c="many"/>y</text:p>'.encode())
        with self.assertLogs("odf_restyler.parser.content_reader", level="WARNING"):
            self.assertEqual(inline_text(paragraph), "x y")


if __name__ == "__main__":
    unittest.main()
