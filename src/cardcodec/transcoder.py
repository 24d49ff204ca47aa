"""
Transcoding orchestrator.

A Transcoder holds the Session (style, language, version) of one
operation, checks it against the style registry and the mapping table,
and then drives cards through the parser or the serializer:

    import:  text → parse → cards → style.import_card → contacts
    export:  contacts → style.export_contact → cards → serialize → bytes

It does no text scanning of its own. Each Transcoder owns its session,
so concurrent operations simply use separate instances.
"""

import logging
from typing import Any, Iterable, List, Optional

from cardcodec.mappings import MappingTable
from cardcodec.model import Card, Session, Version
from cardcodec.parser import Text, parse
from cardcodec.qualifiers import canonicalise
from cardcodec.serializer import serialize_cards
from cardcodec.settings import CodecSettings
from cardcodec.styles import StyleRegistry, default_mapping_table, default_registry

_LOGGER = logging.getLogger(__name__)


class Transcoder:
    """
    Validated session plus dispatch between styles and the codec.

    Raises on construction:
        UnknownStyleError: Style not registered or not mapped
        UnknownLanguageError: Style has no mapping for the language
        UnknownVersionError: Language has no mapping for the version
    """

    def __init__(
        self,
        session: Session,
        registry: Optional[StyleRegistry] = None,
        mappings: Optional[MappingTable] = None,
        settings: Optional[CodecSettings] = None,
    ):
        self.session = session
        self.registry = registry if registry is not None else default_registry()
        self.mappings = mappings if mappings is not None else default_mapping_table()
        self.settings = settings if settings is not None else CodecSettings()

        self.style = self.registry.get(session.style)
        self.field_mapping = self.mappings.field_mapping(
            session.style, session.language, session.version
        )

    @property
    def version(self) -> Version:
        return self.session.version

    def parse(self, text: Text) -> List[Card]:
        return parse(
            text,
            self.version,
            v21_charset=self.settings.v21_charset,
            unfold=self.settings.unfold_lines,
        )

    def serialize(self, cards: Iterable[Card]) -> bytes:
        return serialize_cards(cards, self.version, v21_charset=self.settings.v21_charset)

    def import_text(self, text: Text) -> List[Any]:
        """
        Parse text and hand each card to the style's import function.

        Returns:
            One contact per card, in card order
        """
        cards = self.parse(text)
        _LOGGER.debug("Importing %d card(s) with style %s/%s",
                      len(cards), self.session.style, self.session.language)
        return [
            self.style.import_card(card, self.field_mapping, self.settings.include_unknowns)
            for card in cards
        ]

    def export_contacts(self, contacts: Iterable[Any]) -> bytes:
        """
        Fold contacts into cards with the style and serialize them.

        The first failing contact aborts the batch; nothing is returned
        for the contacts before it.
        """
        cards = [
            self.style.export_contact(contact, self.field_mapping, self.settings.include_unknowns)
            for contact in contacts
        ]
        _LOGGER.debug("Exporting %d card(s) with style %s/%s",
                      len(cards), self.session.style, self.session.language)
        return self.serialize(cards)


def recanonicalise(card: Card, version: Version) -> Card:
    """Return a copy of card with every property canonical for version."""
    converted = Card()
    for record in card:
        converted.add(canonicalise(record.property, version), record.value)
    return converted


def convert(
    text: Text,
    source_version: Version,
    target_version: Version,
    settings: Optional[CodecSettings] = None,
) -> bytes:
    """
    Re-encode vCard text from one version to another.

    Qualifiers of EMAIL and TEL are rewritten for the target version;
    values are unescaped under the source rules and escaped again under
    the target rules.
    """
    settings = settings if settings is not None else CodecSettings()
    source_version = Version.from_string(source_version)
    target_version = Version.from_string(target_version)
    cards = parse(text, source_version, v21_charset=settings.v21_charset,
                  unfold=settings.unfold_lines)
    converted = [recanonicalise(card, target_version) for card in cards]
    return serialize_cards(converted, target_version, v21_charset=settings.v21_charset)


__all__ = ["Transcoder", "convert", "recanonicalise"]
