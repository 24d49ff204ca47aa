"""
Tests for the style → language → version field mapping table.
"""

import pytest

from cardcodec.errors import (
    InvalidInputError,
    UnknownLanguageError,
    UnknownStyleError,
    UnknownVersionError,
)
from cardcodec.mappings import (
    FieldMapping,
    MappingTable,
    mapping_table_from_dict,
    mapping_table_from_yaml,
    mapping_table_to_dict,
    mapping_table_to_yaml,
    property_key,
)
from cardcodec.model import Version


TABLE_YAML = """
flat:
  en:
    "4.0":
      - [FN, FN]
      - [PHONE_CELL, "TEL;CELL"]
      - [EMAIL_HOME, "EMAIL;TYPE=home"]
    2.1:
      - [FN, FN]
      - [PHONE_CELL, "TEL;TYPE=cell"]
"""


class TestFieldMapping:
    """Lookups in both directions."""

    def build(self) -> FieldMapping:
        return FieldMapping((("FN", "FN"), ("PHONE", "TEL;VOICE"), ("PHONE2", "TEL;VOICE")))

    def test_property_for(self):
        assert self.build().property_for("PHONE") == "TEL;VOICE"
        assert self.build().property_for("FAX") is None

    def test_field_for_first_match(self):
        assert self.build().field_for("TEL;VOICE") == "PHONE"
        assert self.build().field_for("TEL;CELL") is None

    def test_field_names(self):
        assert self.build().field_names() == ["FN", "PHONE", "PHONE2"]

    def test_field_for_ignores_parameter_spelling(self):
        mapping = FieldMapping((("ADDRESS_HOME", "ADR;TYPE=home"), ("ADDRESS_WORK", "ADR;TYPE=work")))
        assert mapping.field_for('adr;type="work"') == "ADDRESS_WORK"
        assert mapping.field_for("ADR;TYPE=WORK") == "ADDRESS_WORK"
        assert mapping.field_for("ADR;WORK") == "ADDRESS_WORK"

    def test_field_for_extra_tokens_do_not_match(self):
        mapping = FieldMapping((("ADDRESS_HOME", "ADR;TYPE=home"),))
        assert mapping.field_for("ADR;TYPE=home,pref") is None
        assert mapping.field_for("ADR") is None


class TestPropertyKey:
    """Spelling-independent property keys."""

    @pytest.mark.parametrize("prop", [
        "ADR;TYPE=home,work",
        "adr;type=WORK,HOME",
        'ADR;TYPE="home,work"',
        "ADR;HOME;WORK",
        "ADR;TYPE=home;TYPE=work",
    ])
    def test_same_key(self, prop):
        assert property_key(prop) == ("ADR", frozenset({"HOME", "WORK"}))

    def test_pref_value_ignored(self):
        assert property_key('TEL;TYPE="cell";PREF=1') == ("TEL", frozenset({"CELL", "PREF"}))

    def test_other_parameters_kept_whole(self):
        assert property_key("PHOTO;VALUE=uri") == ("PHOTO", frozenset({"VALUE=URI"}))

    def test_bare_name(self):
        assert property_key("note") == ("NOTE", frozenset())


class TestMappingTable:
    """Building and validating lookups."""

    def test_yaml_properties_canonicalised(self):
        table = mapping_table_from_yaml(TABLE_YAML)
        v40 = table.field_mapping("flat", "en", Version.V40)
        assert v40.property_for("PHONE_CELL") == 'TEL;TYPE="cell"'
        assert v40.property_for("EMAIL_HOME") == 'EMAIL;TYPE="home"'
        v21 = table.field_mapping("flat", "en", "2.1")
        assert v21.property_for("PHONE_CELL") == "TEL;CELL"

    def test_unknown_style(self):
        with pytest.raises(UnknownStyleError):
            mapping_table_from_yaml(TABLE_YAML).field_mapping("tree", "en", Version.V40)

    def test_unknown_language(self):
        with pytest.raises(UnknownLanguageError):
            mapping_table_from_yaml(TABLE_YAML).field_mapping("flat", "de", Version.V40)

    def test_unknown_version(self):
        with pytest.raises(UnknownVersionError):
            mapping_table_from_yaml(TABLE_YAML).field_mapping("flat", "en", Version.V30)

    def test_listing(self):
        table = mapping_table_from_yaml(TABLE_YAML)
        assert table.style_names() == ["flat"]
        assert table.languages("flat") == ["en"]
        assert set(table.versions("flat", "en")) == {Version.V40, Version.V21}

    def test_add_in_code(self):
        table = MappingTable()
        table.add("mine", "en", "3.0", [("WORK_MAIL", "EMAIL;WORK;PREF")])
        mapping = table.field_mapping("mine", "en", Version.V30)
        assert mapping.entries == (("WORK_MAIL", "EMAIL;TYPE=work,pref"),)

    def test_bad_entry(self):
        with pytest.raises(InvalidInputError):
            mapping_table_from_dict({"flat": {"en": {"4.0": [["FN"]]}}})

    def test_bad_version_key(self):
        with pytest.raises(UnknownVersionError):
            mapping_table_from_dict({"flat": {"en": {"5.0": [["FN", "FN"]]}}})

    def test_not_a_mapping(self):
        with pytest.raises(InvalidInputError):
            mapping_table_from_dict(["flat"])

    def test_dict_roundtrip(self):
        table = mapping_table_from_yaml(TABLE_YAML)
        before = mapping_table_to_dict(table)
        after = mapping_table_to_dict(mapping_table_from_yaml(mapping_table_to_yaml(table)))
        assert before == after
