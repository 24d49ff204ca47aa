"""
Tests for JSON/YAML dumps of parsed cards.

These tests ensure lossless round-trip using the explicit
serialization functions in `cardcodec.serialization`.
"""

import json

import pytest

from cardcodec.errors import InvalidInputError
from cardcodec.model import Card, Record
from cardcodec.parser import parse
from cardcodec.serialization import (
    card_from_dict,
    card_to_dict,
    cards_from_json,
    cards_from_list,
    cards_from_yaml,
    cards_to_json,
    cards_to_list,
    cards_to_yaml,
    record_from_dict,
)


def build_sample_cards():
    text = (
        "BEGIN:VCARD\r\n"
        "VERSION:4.0\r\n"
        "FN:Zoë Müller\r\n"
        "N:Müller;Zoë;;;\r\n"
        "TEL;TYPE=cell,pref:555\r\n"
        "NOTE:semi\\;colon\r\n"
        "END:VCARD\r\n"
        "BEGIN:VCARD\r\n"
        "VERSION:4.0\r\n"
        "FN:Bob\r\n"
        "END:VCARD\r\n"
    )
    return parse(text, "4.0")


def test_card_dict_shape():
    card = Card([Record("FN", "Bob")])
    assert card_to_dict(card) == {"records": [{"property": "FN", "value": "Bob"}]}


def test_json_roundtrip():
    cards = build_sample_cards()
    before = cards_to_list(cards)
    restored = cards_from_json(cards_to_json(cards))
    assert cards_to_list(restored) == before
    assert restored == cards


def test_json_keeps_unicode():
    assert "Zoë" in cards_to_json(build_sample_cards())


def test_yaml_roundtrip():
    cards = build_sample_cards()
    restored = cards_from_yaml(cards_to_yaml(cards))
    assert restored == cards
    assert restored[0].get("TEL") == "555"


def test_empty_documents():
    assert cards_from_yaml("") == []
    assert cards_from_json("[]") == []


def test_bad_record():
    with pytest.raises(InvalidInputError):
        record_from_dict({"value": "no property"})


def test_not_a_list():
    with pytest.raises(InvalidInputError):
        cards_from_list(json.loads('{"records": []}'))


def test_missing_value_is_empty():
    card = card_from_dict({"records": [{"property": "NOTE"}]})
    assert card.pairs() == [("NOTE", "")]
