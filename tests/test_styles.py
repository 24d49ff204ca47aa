"""
Tests for the style registry and the built-in flat style.
"""

import pytest

from cardcodec.errors import DuplicateStyleError, UnknownStyleError
from cardcodec.model import Card, Version
from cardcodec.styles import (
    FLAT_STYLE,
    FlatContact,
    Style,
    StyleRegistry,
    default_mapping_table,
    default_registry,
)
from cardcodec.styles.flat import export_flat_contact, field_table, import_flat_card


def _noop_export(contact, mapping, include_unknowns):
    return Card()


def _noop_import(card, mapping, include_unknowns):
    return None


class TestStyleRegistry:
    """Registration and lookup."""

    def test_default_registry(self):
        registry = default_registry()
        assert registry.names() == ["flat"]
        assert registry.get("flat") is FLAT_STYLE
        assert "flat" in registry

    def test_duplicate_style(self):
        registry = default_registry()
        with pytest.raises(DuplicateStyleError):
            registry.register(Style("flat", _noop_export, _noop_import))

    def test_duplicate_in_constructor(self):
        style = Style("tree", _noop_export, _noop_import)
        with pytest.raises(DuplicateStyleError):
            StyleRegistry([style, style])

    def test_unknown_style(self):
        with pytest.raises(UnknownStyleError):
            default_registry().get("tree")

    def test_registries_independent(self):
        first = default_registry()
        first.register(Style("tree", _noop_export, _noop_import))
        assert "tree" not in default_registry()
        assert len(first) == 2


class TestFlatMappings:
    """The built-in field tables."""

    def test_languages_and_versions(self):
        table = default_mapping_table()
        assert set(table.languages("flat")) == {"en", "en_AU"}
        for language in ("en", "en_AU"):
            assert set(table.versions("flat", language)) == set(Version)

    def test_address_spelling_per_version(self):
        assert ("ADDRESS_HOME", 'ADR;TYPE="home"') in field_table("en", Version.V40)
        assert ("ADDRESS_HOME", "ADR;TYPE=home") in field_table("en", Version.V30)
        assert ("ADDRESS_HOME", "ADR;HOME") in field_table("en", Version.V21)

    def test_phone_canonicalised(self):
        mapping = default_mapping_table().field_mapping("flat", "en", Version.V40)
        assert mapping.property_for("PHONE") == 'TEL;TYPE="voice"'
        assert mapping.property_for("PHONE_HOME") == 'TEL;TYPE="voice,home"'
        assert mapping.property_for("PHONE_FAX_WORK") == 'TEL;TYPE="fax,work"'

    def test_en_au_mobile(self):
        mapping = default_mapping_table().field_mapping("flat", "en_AU", Version.V21)
        assert mapping.property_for("PHONE_MOBILE") == "TEL;CELL"
        assert mapping.property_for("PHONE_CELL") is None


class TestFlatStyle:
    """Export and import of FlatContacts."""

    def mapping(self, version=Version.V40):
        return default_mapping_table().field_mapping("flat", "en", version)

    def test_export_heading_becomes_fn(self):
        contact = FlatContact("Jane Doe", [("PHONE_CELL", "555"), ("EMAIL_WORK", "j@w.com")])
        card = export_flat_contact(contact, self.mapping())
        assert card.pairs() == [
            ("FN", "Jane Doe"),
            ('TEL;TYPE="cell"', "555"),
            ('EMAIL;TYPE="work"', "j@w.com"),
        ]

    def test_export_explicit_fn_wins(self):
        contact = FlatContact("Heading", [("N", "Doe;Jane;;;"), ("FN", "Jane Doe")])
        card = export_flat_contact(contact, self.mapping())
        assert card.pairs() == [("N", "Doe;Jane;;;"), ("FN", "Jane Doe")]

    def test_export_unknown_field(self):
        contact = FlatContact("", [("X-SKYPE", "jane.doe")])
        assert export_flat_contact(contact, self.mapping()).pairs() == [("X-SKYPE", "jane.doe")]
        assert export_flat_contact(contact, self.mapping(), include_unknowns=False).pairs() == []

    def test_import(self):
        card = Card()
        card.add("FN", "Jane Doe")
        card.add('TEL;TYPE="cell";PREF=1', "555")
        card.add("X-SKYPE", "jane.doe")
        contact = import_flat_card(card, self.mapping())
        assert contact.heading == "Jane Doe"
        assert contact.fields == [
            ("FN", "Jane Doe"),
            ('TEL;TYPE="cell";PREF=1', "555"),
            ("X-SKYPE", "jane.doe"),
        ]

    def test_import_drops_unknowns(self):
        card = Card()
        card.add('TEL;TYPE="cell"', "555")
        card.add("X-SKYPE", "jane.doe")
        contact = import_flat_card(card, self.mapping(), include_unknowns=False)
        assert contact.fields == [("PHONE_CELL", "555")]

    def test_heading_from_n(self):
        card = Card()
        card.add("N", "Doe;Jane;;;")
        assert import_flat_card(card, self.mapping()).heading == "Jane Doe"

    def test_import_export_preserves_card(self):
        card = Card()
        card.add("N", "Doe;Jane;;;")
        card.add("FN", "Jane Doe")
        card.add('ADR;TYPE="home"', ";;1 Main St;Town;;;")
        card.add("X-SKYPE", "jane.doe")
        contact = import_flat_card(card, self.mapping())
        assert contact.as_dict()["ADDRESS_HOME"] == ";;1 Main St;Town;;;"
        assert export_flat_contact(contact, self.mapping()) == card
