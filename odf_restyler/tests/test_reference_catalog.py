"""Tests for the style reference catalog."""
import unittest
from dataclasses import FrozenInstanceError

from odf_restyler.model.reference_catalog import (
    DEFAULT_CATALOG,
    FAMILY_FROM_ELEMENT,
    FAMILY_FROM_PARENT,
    ReferenceCatalog,
    ReferenceRule,
    RuleKind,
)
from odf_restyler.parser.xml_tree import parse_xml
from odf_restyler.utils.namespaces import DRAW, STYLE, TABLE, TEXT, odf


class ReferenceCatalogTest(unittest.TestCase):
    """Lookups by element and attribute carry the right family."""

    def test_paragraph_style_reference(self) -> None:
        rules = DEFAULT_CATALOG.rules_for((TEXT, "p"), (TEXT, "style-name"))
        self.assertEqual([rule.family for rule in rules], ["paragraph"])
        self.assertIs(rules[0].kind, RuleKind.REFERENCE)

    def test_same_attribute_different_families(self) -> None:
        span = DEFAULT_CATALOG.rules_for((TEXT, "span"), (TEXT, "style-name"))
        lst = DEFAULT_CATALOG.rules_for((TEXT, "list"), (TEXT, "style-name"))
        cell = DEFAULT_CATALOG.rules_for((TABLE, "table-cell"), (TABLE, "style-name"))
        self.assertEqual(span[0].family, "text")
        self.assertEqual(lst[0].family, "list")
        self.assertEqual(cell[0].family, "table-cell")

    def test_unknown_attribute_has_no_rules(self) -> None:
        self.assertEqual(DEFAULT_CATALOG.rules_for((TEXT, "p"), (TEXT, "id")), [])
        self.assertEqual(DEFAULT_CATALOG.rules_for((TEXT, "bookmark"), (TEXT, "name")), [])

    def test_wildcard_rule_applies_to_any_element(self) -> None:
        rules = DEFAULT_CATALOG.rules_for(("urn:unknown", "shape"), (DRAW, "text-style-name"))
        self.assertEqual([rule.family for rule in rules], ["paragraph"])

    def test_specific_rule_wins_over_wildcard(self) -> None:
        catalog = ReferenceCatalog(
            [
                ReferenceRule(None, odf("text:style-name"), "text"),
                ReferenceRule(odf("text:p"), odf("text:style-name"), "paragraph"),
            ]
        )
        self.assertEqual([r.family for r in catalog.rules_for((TEXT, "p"), (TEXT, "style-name"))], ["paragraph"])
        self.assertEqual([r.family for r in catalog.rules_for((TEXT, "x"), (TEXT, "style-name"))], ["text"])

    def test_definition_rules(self) -> None:
        elements = {rule.element for rule in DEFAULT_CATALOG.definition_rules()}
        self.assertIn((STYLE, "style"), elements)
        self.assertIn((TEXT, "list-style"), elements)
        self.assertIn((STYLE, "master-page"), elements)
        self.assertIn((STYLE, "page-layout"), elements)

    def test_multi_valued_class_names(self) -> None:
        rules = DEFAULT_CATALOG.rules_for((TEXT, "p"), (TEXT, "class-names"))
        self.assertTrue(rules[0].multi_valued)

    def test_catalog_is_immutable(self) -> None:
        self.assertIsInstance(DEFAULT_CATALOG.rules, tuple)
        with self.assertRaises(FrozenInstanceError):
            DEFAULT_CATALOG.rules[0].family = "other"  # type: ignore[misc]

    def test_resolve_family_sentinels(self) -> None:
        node = parse_xml(
            b'<style:style xmlns:style="urn:oasis:names:tc:opendocument:xmlns:style:1.0"'
            b' style:name="A" style:family="table-cell"/>'
        )
        from_element = ReferenceRule(None, odf("style:name"), FAMILY_FROM_ELEMENT)
        from_parent = ReferenceRule(None, odf("style:apply-style-name"), FAMILY_FROM_PARENT)
        self.assertEqual(ReferenceCatalog.resolve_family(from_element, node, "paragraph"), "table-cell")
        self.assertEqual(ReferenceCatalog.resolve_family(from_parent, node, "paragraph"), "paragraph")


if __name__ == "__main__":
    unittest.main()
