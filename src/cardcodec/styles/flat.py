"""
The "flat" style: one contact per heading, one field per property.

A FlatContact is a heading (the display name) plus an ordered list of
(field name, value) pairs. Field names come from the style's language
table, e.g. PHONE_CELL in "en" and PHONE_MOBILE in "en_AU".

Unmapped fields and properties are carried under their own name when
include_unknowns is set, so a card survives import followed by export.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from cardcodec.mappings import FieldMapping, MappingTable
from cardcodec.model import Card, Version
from cardcodec.styles.registry import Style

_LOGGER = logging.getLogger(__name__)

STYLE_NAME = "flat"

# (field name, property name, qualifiers). Qualifiers use the 2.1 spelling;
# EMAIL and TEL are canonicalised per version when the table is built.
_EN_FIELDS: List[Tuple[str, str, Tuple[str, ...]]] = [
    ("FN", "FN", ()),
    ("N", "N", ()),
    ("NICKNAME", "NICKNAME", ()),
    ("ORG", "ORG", ()),
    ("TITLE", "TITLE", ()),
    ("BDAY", "BDAY", ()),
    ("ADDRESS_HOME", "ADR", ("HOME",)),
    ("ADDRESS_WORK", "ADR", ("WORK",)),
    ("EMAIL", "EMAIL", ()),
    ("EMAIL_HOME", "EMAIL", ("HOME",)),
    ("EMAIL_WORK", "EMAIL", ("WORK",)),
    ("EMAIL_PREF", "EMAIL", ("PREF",)),
    ("PHONE", "TEL", ()),
    ("PHONE_HOME", "TEL", ("HOME",)),
    ("PHONE_WORK", "TEL", ("WORK",)),
    ("PHONE_CELL", "TEL", ("CELL",)),
    ("PHONE_FAX_HOME", "TEL", ("FAX", "HOME")),
    ("PHONE_FAX_WORK", "TEL", ("FAX", "WORK")),
    ("PHONE_PREF", "TEL", ("PREF",)),
    ("URL", "URL", ()),
    ("NOTE", "NOTE", ()),
]

_RENAMED = {
    "en_AU": {"PHONE_CELL": "PHONE_MOBILE"},
}

LANGUAGES = ("en", "en_AU")


def _qualified(name: str, qualifiers: Tuple[str, ...], version: Version) -> str:
    """Spell a qualified property the way version writes TYPE parameters."""
    if not qualifiers or name in ("EMAIL", "TEL"):
        return ";".join((name,) + qualifiers)
    types = ",".join(q.lower() for q in qualifiers)
    if version is Version.V40:
        return f'{name};TYPE="{types}"'
    if version is Version.V30:
        return f"{name};TYPE={types}"
    return ";".join((name,) + qualifiers)


def field_table(language: str, version: Version) -> List[Tuple[str, str]]:
    renamed = _RENAMED.get(language, {})
    return [
        (renamed.get(field_name, field_name), _qualified(name, qualifiers, version))
        for field_name, name, qualifiers in _EN_FIELDS
    ]


def add_flat_mappings(table: MappingTable) -> MappingTable:
    for language in LANGUAGES:
        for version in Version:
            table.add(STYLE_NAME, language, version, field_table(language, version))
    return table


@dataclass
class FlatContact:
    """
    A contact as a heading plus ordered fields.

    Properties:
        heading:
            Display name, taken from FN (or N when FN is absent)

        fields:
            (field name, value) pairs in card order
    """

    heading: str = ""
    fields: List[Tuple[str, str]] = field(default_factory=list)

    def get(self, field_name: str) -> Optional[str]:
        for name, value in self.fields:
            if name == field_name:
                return value
        return None

    def as_dict(self) -> Dict[str, str]:
        """Fields as a dict; a repeated field keeps its first value."""
        result: Dict[str, str] = {}
        for name, value in self.fields:
            result.setdefault(name, value)
        return result


def _heading_from_n(value: str) -> str:
    parts = value.split(";")
    family = parts[0] if parts else ""
    given = parts[1] if len(parts) > 1 else ""
    return " ".join(p for p in (given, family) if p)


def export_flat_contact(contact: FlatContact, mapping: FieldMapping, include_unknowns: bool = True) -> Card:
    """Fold a FlatContact into a Card; the heading becomes FN if no FN field exists."""
    card = Card()
    if contact.heading and contact.get("FN") is None:
        card.add(mapping.property_for("FN") or "FN", contact.heading)

    for name, value in contact.fields:
        prop = mapping.property_for(name)
        if prop is None:
            if not include_unknowns:
                _LOGGER.debug("Dropping unmapped field %s", name)
                continue
            prop = name
        card.add(prop, value)
    return card


def import_flat_card(card: Card, mapping: FieldMapping, include_unknowns: bool = True) -> FlatContact:
    """Turn a Card into a FlatContact."""
    contact = FlatContact()
    for record in card:
        name = mapping.field_for(record.property)
        if name is None:
            if not include_unknowns:
                _LOGGER.debug("Dropping unmapped property %s", record.property)
                continue
            name = record.property
        contact.fields.append((name, record.value))

    fn = card.get("FN")
    if fn is not None:
        contact.heading = fn
    else:
        n = card.get("N")
        contact.heading = _heading_from_n(n) if n else ""
    return contact


FLAT_STYLE = Style(name=STYLE_NAME, export_contact=export_flat_contact, import_card=import_flat_card)


__all__ = [
    "STYLE_NAME",
    "LANGUAGES",
    "FLAT_STYLE",
    "FlatContact",
    "field_table",
    "add_flat_mappings",
    "export_flat_contact",
    "import_flat_card",
]
