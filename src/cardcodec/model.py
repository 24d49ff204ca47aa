"""
Core Card Model Objects

Defines the fundamental data structures handled by the codec.

These are plain value objects representing:
    - Versions (the three supported vCard revisions)
    - Records (one property paired with one value)
    - Cards (ordered sequences of records)
    - Sessions (style, language and version of one transcoding run)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about escaping, charsets or line endings
        - Carry canonical property names once parsing is done
        - Preserve record order exactly as read or built
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Tuple, Union

from cardcodec.errors import UnknownVersionError


# Properties whose value is a positional, semicolon-delimited sequence.
COMPOUND_PROPERTIES = frozenset({"ADR", "N"})

# Marker lines that frame a card and never carry a CHARSET parameter.
STRUCTURAL_PROPERTIES = frozenset({"BEGIN", "VERSION", "END"})


class Version(Enum):
    """
    The vCard revisions the codec reads and writes.

    The version selects the escaping rules, the line terminator, the
    output text encoding and the qualifier parameter grammar.
    """

    V21 = "2.1"
    V30 = "3.0"
    V40 = "4.0"

    @classmethod
    def from_string(cls, value: Union["Version", str]) -> "Version":
        """
        Resolve a Version from its textual form ("2.1", "3.0", "4.0").

        Raises:
            UnknownVersionError: If the value names no supported version
        """
        if isinstance(value, Version):
            return value
        try:
            return cls(str(value).strip())
        except ValueError:
            raise UnknownVersionError(f"Unknown vCard version: {value!r}") from None


def property_name(prop: str) -> str:
    """Return the bare, upper-cased property name without parameters."""
    return prop.split(";", 1)[0].strip().upper()


def is_compound(prop: str) -> bool:
    """True if the property's value is a positional compound (ADR, N)."""
    return property_name(prop) in COMPOUND_PROPERTIES


@dataclass(frozen=True)
class Record:
    """
    One property/value pair of a card.

    Properties:
        property:
            Property name with its parameters, e.g. 'TEL;TYPE="cell"'.
            Canonical once produced by the parser.

        value:
            Unescaped value text. Compound values keep their semicolons.
    """

    property: str
    value: str

    def base_name(self) -> str:
        return property_name(self.property)


@dataclass
class Card:
    """
    An ordered sequence of Records delimited by BEGIN/END markers.

    A card has no identity beyond its position in a batch; two cards with
    the same records compare equal.
    """

    records: List[Record] = field(default_factory=list)

    def add(self, prop: str, value: str) -> Record:
        record = Record(prop, value)
        self.records.append(record)
        return record

    def get(self, prop: str) -> Optional[str]:
        """
        Return the value of the first record matching prop.

        A full property (with parameters) must match exactly; a bare name
        matches any record with that base name.

        Args:
            prop: Property name, with or without parameters

        Returns:
            The value or None if no record matches
        """
        bare = ";" not in prop
        for record in self.records:
            if record.property == prop:
                return record.value
            if bare and record.base_name() == prop.upper():
                return record.value
        return None

    def pairs(self) -> List[Tuple[str, str]]:
        return [(r.property, r.value) for r in self.records]

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)


@dataclass(frozen=True)
class Session:
    """
    State of one transcoding operation: style, language and version.

    Sessions are immutable; a new operation with different settings uses
    a new Session.
    """

    style: str
    language: str
    version: Version

    def __post_init__(self):
        object.__setattr__(self, "version", Version.from_string(self.version))


__all__ = [
    "COMPOUND_PROPERTIES",
    "STRUCTURAL_PROPERTIES",
    "Version",
    "Record",
    "Card",
    "Session",
    "property_name",
    "is_compound",
]
