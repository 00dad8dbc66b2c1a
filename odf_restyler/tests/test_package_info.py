"""Tests for package summaries."""
import tempfile
import unittest
from pathlib import Path

from odf_restyler.parser.odf_package import OdfPackage
from odf_restyler.parser.package_info import (
    ManifestEntry,
    collect_statistics,
    detect_document_type,
    read_package_info,
)
from odf_restyler.parser.xml_tree import parse_xml
from odf_restyler.tests.odf_fixtures import NS_DECLARATIONS, write_package


class PackageInfoTest(unittest.TestCase):
    """Manifest, metadata and statistics are read from the package."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.source = write_package(Path(self._tmp.name) / "sample.odt")

    def test_read_package_info(self) -> None:
        with OdfPackage.open(self.source) as package:
            info = read_package_info(package)
        self.assertEqual(info.document_type, "text")
        self.assertEqual(info.entries[0], "mimetype")
        self.assertEqual(len(info.manifest), 5)
        self.assertIn(ManifestEntry("Pictures/img1.png", "image/png"), info.manifest)

    def test_metadata(self) -> None:
        with OdfPackage.open(self.source) as package:
            metadata = read_package_info(package).metadata
        self.assertEqual(metadata["generator"], "LibreOffice/7.6")
        self.assertEqual(metadata["title"], "Sample")
        self.assertEqual(metadata["keyword"], "alpha, beta")
        self.assertEqual(metadata["document-statistic"], {"table-count": 0, "paragraph-count": 3, "word-count": 5})

    def test_statistics(self) -> None:
        with OdfPackage.open(self.source) as package:
            statistics = read_package_info(package).statistics
        self.assertEqual(statistics.headings, 1)
        self.assertEqual(statistics.paragraphs, 2)
        self.assertEqual(statistics.spans, 1)
        self.assertEqual(statistics.tables, 0)
        self.assertEqual(statistics.words, 5)

    def test_as_dict(self) -> None:
        with OdfPackage.open(self.source) as package:
            payload = read_package_info(package).as_dict()
        self.assertEqual(payload["mimetype"], "application/vnd.oasis.opendocument.text")
        self.assertEqual(payload["statistics"]["words"], 5)

    def test_table_statistics(self) -> None:
        content = parse_xml(
            f"<office:document-content {NS_DECLARATIONS}><office:body><office:spreadsheet>"
            "<table:table><table:table-row><table:table-cell><text:p>1 2</text:p></table:table-cell>"
            "</table:table-row></table:table></office:spreadsheet></office:body></office:document-content>".encode()
        )
        statistics = collect_statistics(content)
        self.assertEqual((statistics.tables, statistics.paragraphs, statistics.words), (1, 1, 2))

    def test_text_box_words_counted_once(self) -> None:
        content = parse_xml(
            f"<office:document-content {NS_DECLARATIONS}><office:body><office:text>"
            "<text:p>outer words<draw:frame><draw:text-box><text:p>inner caption</text:p>"
            "</draw:text-box></draw:frame></text:p><text:h>Title</text:h>"
            "</office:text></office:body></office:document-content>".encode()
        )
        statistics = collect_statistics(content)
        self.assertEqual((statistics.paragraphs, statistics.headings, statistics.words), (2, 1, 5))


class DocumentTypeTest(unittest.TestCase):
    """Mimetype first, file extension as fallback."""

    def test_detect(self) -> None:
        self.assertEqual(detect_document_type("application/vnd.oasis.opendocument.spreadsheet"), "spreadsheet")
        self.assertEqual(detect_document_type("application/vnd.oasis.opendocument.text-template"), "text")
        self.assertEqual(detect_document_type(None, Path("slides.ODP")), "presentation")
        self.assertEqual(detect_document_type("application/zip", Path("drawing.odg")), "graphics")
        self.assertEqual(detect_document_type(None, Path("notes.txt")), "unknown")


if __name__ == "__main__":
    unittest.main()
