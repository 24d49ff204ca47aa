"""
Serialization helpers for parsed cards (Card, Record).

Provides lossless JSON/YAML round-trip via intermediate dict representation.
This module intentionally keeps serialization structure stable and explicit;
it is for inspecting and storing parsed cards, not for writing vCard text.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List

import yaml

from cardcodec.errors import InvalidInputError
from cardcodec.model import Card, Record


def record_to_dict(r: Record) -> Dict[str, Any]:
    return {"property": r.property, "value": r.value}


def record_from_dict(d: Dict[str, Any]) -> Record:
    try:
        return Record(property=d["property"], value=d.get("value", ""))
    except (KeyError, TypeError) as e:
        raise InvalidInputError(f"Not a record: {d!r}") from e


def card_to_dict(c: Card) -> Dict[str, Any]:
    return {"records": [record_to_dict(r) for r in c.records]}


def card_from_dict(d: Dict[str, Any]) -> Card:
    return Card(records=[record_from_dict(r) for r in d.get("records", [])])


def cards_to_list(cards: List[Card]) -> List[Dict[str, Any]]:
    return [card_to_dict(c) for c in cards]


def cards_from_list(items: List[Dict[str, Any]] | None) -> List[Card]:
    if items is None:
        return []
    if not isinstance(items, list):
        raise InvalidInputError(f"Expected a list of cards, got {type(items).__name__}")
    return [card_from_dict(d) for d in items]


def cards_to_json(cards: List[Card]) -> str:
    return json.dumps(cards_to_list(cards), ensure_ascii=False)


def cards_from_json(s: str) -> List[Card]:
    return cards_from_list(json.loads(s))


def cards_to_yaml(cards: List[Card]) -> str:
    return yaml.safe_dump(cards_to_list(cards), allow_unicode=True, sort_keys=False)


def cards_from_yaml(s: str) -> List[Card]:
    return cards_from_list(yaml.safe_load(s))
