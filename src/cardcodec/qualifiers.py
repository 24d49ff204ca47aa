"""
Qualifier canonicalization for EMAIL and TEL properties.

Producers spell qualifiers in many ways: 'TEL;CELL;PREF',
'TEL;TYPE=cell,pref', 'tel;type="CELL";pref=1'. This module folds them
into the single spelling each version expects, so that the same phone
number always maps to the same property string.

Rules:
    - Only EMAIL and TEL are rewritten. Every other property passes
      through unchanged.
    - Qualifier tokens are found by case-insensitive substring search in
      the parameter text, independent of their order.
    - Tokens are emitted in a fixed order, so the result does not depend
      on how the input was written and canonicalising twice changes
      nothing.
    - A TEL without CELL, FAX or MSG is a voice number.
    - MSG is kept and written like CELL and FAX, not dropped, so a
      TEL;MSG never becomes a voice number.

Examples (version 4.0):
    TEL;CELL;PREF       -> TEL;TYPE="cell";PREF=1
    EMAIL;WORK          -> EMAIL;TYPE="work"
    TEL                 -> TEL;TYPE="voice"
    TEL;PAGER           -> TEL;PAGER         (nothing recognised)
"""

from typing import List, Tuple

from cardcodec.errors import InvalidInputError
from cardcodec.model import Version


PREF = "PREF"

# Emission order per property. "VOICE" for TEL is only emitted as the
# implicit default, see _detect_tel().
EMAIL_QUALIFIERS = ("HOME", "WORK")
TEL_QUALIFIERS = ("CELL", "FAX", "MSG", "VOICE", "HOME", "WORK")

_RECOGNISED = {
    "EMAIL": EMAIL_QUALIFIERS + (PREF,),
    "TEL": TEL_QUALIFIERS + (PREF,),
}


def _detect_email(params: str) -> List[str]:
    return [q for q in EMAIL_QUALIFIERS if q in params]


def _detect_tel(params: str) -> List[str]:
    detected = []
    for qualifier in TEL_QUALIFIERS:
        if qualifier == "VOICE":
            if not any(q in params for q in ("CELL", "FAX", "MSG")):
                detected.append(qualifier)
        elif qualifier in params:
            detected.append(qualifier)
    return detected


def _assemble(name: str, qualifiers: List[str], pref: bool, version: Version) -> str:
    parts = [name]
    if version is Version.V40:
        if qualifiers:
            parts.append('TYPE="%s"' % ",".join(q.lower() for q in qualifiers))
        if pref:
            parts.append("PREF=1")
    elif version is Version.V30:
        types = [q.lower() for q in qualifiers]
        if pref:
            types.append("pref")
        if types:
            parts.append("TYPE=" + ",".join(types))
    elif version is Version.V21:
        parts.extend(qualifiers)
        if pref:
            parts.append(PREF)
    else:
        raise InvalidInputError(f"No qualifier grammar for {version!r}")
    return ";".join(parts)


def split_property(raw: str) -> Tuple[str, str]:
    """Split 'NAME;params' into ('NAME', 'params')."""
    name, _, params = raw.partition(";")
    return name.strip(), params


def canonicalise(raw_property_name: str, version: Version) -> str:
    """
    Rewrite EMAIL/TEL qualifiers into version's parameter syntax.

    Args:
        raw_property_name: Property name with its raw parameters,
            e.g. 'EMAIL;HOME;PREF'. CHARSET and similar transport
            parameters should already be removed.
        version: Target version

    Returns:
        The canonical property string

    Raises:
        InvalidInputError: If raw_property_name is None
    """
    if raw_property_name is None:
        raise InvalidInputError("canonicalise() needs a property name")
    version = Version.from_string(version)

    name, params = split_property(raw_property_name)
    upper_name = name.upper()
    if upper_name not in _RECOGNISED:
        return raw_property_name

    upper_params = params.upper()
    if params and not any(token in upper_params for token in _RECOGNISED[upper_name]):
        return raw_property_name

    if upper_name == "EMAIL":
        qualifiers = _detect_email(upper_params)
    else:
        qualifiers = _detect_tel(upper_params)
    pref = PREF in upper_params

    return _assemble(upper_name, qualifiers, pref, version)


__all__ = [
    "EMAIL_QUALIFIERS",
    "TEL_QUALIFIERS",
    "split_property",
    "canonicalise",
]
