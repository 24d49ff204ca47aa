"""
Style field mappings: style → language → version → field mapping.

A field mapping pairs the field names a style shows to a user (e.g.
"PHONE_CELL") with the canonical property that carries the field in a
given vCard version (e.g. 'TEL;TYPE="cell"' in 4.0).

The table is data. It can be built in code or loaded from YAML:

    flat:
      en:
        "4.0":
          - [FN, FN]
          - [PHONE_CELL, "TEL;CELL"]

Properties are canonicalised for their version on load, so EMAIL and
TEL entries may be written in any qualifier spelling.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple

import yaml

from cardcodec.errors import (
    InvalidInputError,
    UnknownLanguageError,
    UnknownStyleError,
    UnknownVersionError,
)
from cardcodec.model import Version
from cardcodec.qualifiers import canonicalise, split_property


def property_key(prop: str) -> Tuple[str, FrozenSet[str]]:
    """
    Spelling-independent key of a property: upper-cased name plus the
    set of its parameter tokens.

    'ADR;TYPE=HOME', 'adr;type="home"' and 'ADR;HOME' share the key
    ('ADR', {'HOME'}). TYPE lists contribute one token per value, PREF=n
    counts as PREF, other NAME=value parameters are kept whole.
    """
    name, params = split_property(prop)
    tokens = set()
    for param in params.split(";"):
        param = param.strip()
        if not param:
            continue
        key, sep, values = param.partition("=")
        key = key.strip().upper()
        values = values.replace('"', "").strip().upper()
        if not sep:
            tokens.add(key)
        elif key == "TYPE":
            tokens.update(v.strip() for v in values.split(",") if v.strip())
        elif key == "PREF":
            tokens.add("PREF")
        else:
            tokens.add(f"{key}={values}")
    return name.upper(), frozenset(tokens)


@dataclass(frozen=True)
class FieldMapping:
    """Ordered (field name, canonical property) pairs for one version."""

    entries: Tuple[Tuple[str, str], ...] = ()

    def property_for(self, field_name: str) -> Optional[str]:
        """
        Retrieve the property carrying a field.

        Args:
            field_name: Style field name

        Returns:
            Canonical property or None if the field is not mapped
        """
        for name, prop in self.entries:
            if name == field_name:
                return prop
        return None

    def field_for(self, prop: str) -> Optional[str]:
        """
        Retrieve the field a property maps to.

        An exact match wins; otherwise the property matches an entry with
        the same property_key(), so parameter case, quoting and order do
        not matter.

        Returns:
            Field name or None if the property is not mapped
        """
        for name, mapped in self.entries:
            if mapped == prop:
                return name
        key = property_key(prop)
        for name, mapped in self.entries:
            if property_key(mapped) == key:
                return name
        return None

    def field_names(self) -> List[str]:
        return [name for name, _ in self.entries]


@dataclass
class MappingTable:
    """
    Three-level lookup used to validate a session and find its mapping.

    INVARIANTS:
        - Every property in a FieldMapping is canonical for its version
    """

    styles: Dict[str, Dict[str, Dict[Version, FieldMapping]]] = field(default_factory=dict)

    def add(
        self,
        style: str,
        language: str,
        version: Version,
        entries: Iterable[Tuple[str, str]],
    ) -> FieldMapping:
        version = Version.from_string(version)
        mapping = FieldMapping(tuple(
            (name, canonicalise(prop, version)) for name, prop in entries
        ))
        self.styles.setdefault(style, {}).setdefault(language, {})[version] = mapping
        return mapping

    def style_names(self) -> List[str]:
        return list(self.styles)

    def languages(self, style: str) -> List[str]:
        if style not in self.styles:
            raise UnknownStyleError(f"No mapping for style {style!r}")
        return list(self.styles[style])

    def versions(self, style: str, language: str) -> List[Version]:
        return list(self._language(style, language))

    def field_mapping(self, style: str, language: str, version: Version) -> FieldMapping:
        """
        Look up the mapping for a (style, language, version) triple.

        Raises:
            UnknownStyleError: If the style has no mapping
            UnknownLanguageError: If the style has no such language
            UnknownVersionError: If the language has no such version
        """
        version = Version.from_string(version)
        versions = self._language(style, language)
        if version not in versions:
            raise UnknownVersionError(
                f"Style {style!r}, language {language!r} has no mapping for vCard {version.value}"
            )
        return versions[version]

    def _language(self, style: str, language: str) -> Dict[Version, FieldMapping]:
        languages = self.styles.get(style)
        if languages is None:
            raise UnknownStyleError(f"No mapping for style {style!r}")
        if language not in languages:
            raise UnknownLanguageError(f"Style {style!r} has no language {language!r}")
        return languages[language]


def mapping_table_to_dict(t: MappingTable) -> Dict[str, Any]:
    return {
        style: {
            language: {
                version.value: [[name, prop] for name, prop in mapping.entries]
                for version, mapping in versions.items()
            }
            for language, versions in languages.items()
        }
        for style, languages in t.styles.items()
    }


def mapping_table_from_dict(d: Dict[str, Any]) -> MappingTable:
    if not isinstance(d, dict):
        raise InvalidInputError("Mapping table must be a mapping of styles")
    table = MappingTable()
    for style, languages in d.items():
        for language, versions in (languages or {}).items():
            for version, entries in (versions or {}).items():
                pairs = []
                for entry in entries or []:
                    if len(entry) != 2:
                        raise InvalidInputError(
                            f"{style}/{language}/{version}: expected [field, property], got {entry!r}"
                        )
                    pairs.append((str(entry[0]), str(entry[1])))
                table.add(style, language, Version.from_string(str(version)), pairs)
    return table


def mapping_table_to_yaml(t: MappingTable) -> str:
    return yaml.safe_dump(mapping_table_to_dict(t), sort_keys=False)


def mapping_table_from_yaml(s: str) -> MappingTable:
    return mapping_table_from_dict(yaml.safe_load(s))


__all__ = [
    "property_key",
    "FieldMapping",
    "MappingTable",
    "mapping_table_to_dict",
    "mapping_table_from_dict",
    "mapping_table_to_yaml",
    "mapping_table_from_yaml",
]
