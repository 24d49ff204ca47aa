"""
Codec settings and their YAML form.

Settings are plain data handed to a Transcoder; the codec never reads
or writes them on its own.

YAML form:

    v21_charset: ISO-8859-1
    include_unknowns: false
    unfold_lines: true
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict

import yaml

from cardcodec.charsets import DEFAULT_V21_CHARSET, output_charset
from cardcodec.errors import InvalidInputError


@dataclass
class CodecSettings:
    """
    Tunables of one transcoding operation.

    Properties:
        v21_charset:
            Charset for 2.1 output values, and for 2.1 byte input lines
            that carry no CHARSET parameter. Must be ASCII compatible.

        include_unknowns:
            Keep properties (import) and fields (export) that the style
            mapping does not know. False drops them.

        unfold_lines:
            Join folded continuation lines when parsing
    """

    v21_charset: str = DEFAULT_V21_CHARSET
    include_unknowns: bool = True
    unfold_lines: bool = True

    def __post_init__(self):
        self.v21_charset = output_charset(self.v21_charset)


def settings_to_dict(s: CodecSettings) -> Dict[str, Any]:
    return asdict(s)


def settings_from_dict(d: Dict[str, Any] | None) -> CodecSettings:
    if d is None:
        return CodecSettings()
    if not isinstance(d, dict):
        raise InvalidInputError(f"Settings must be a mapping, got {type(d).__name__}")
    known = {f.name for f in fields(CodecSettings)}
    unknown = sorted(set(d) - known)
    if unknown:
        raise InvalidInputError(f"Unknown settings: {unknown}")
    return CodecSettings(**d)


def settings_to_yaml(s: CodecSettings) -> str:
    return yaml.safe_dump(settings_to_dict(s))


def settings_from_yaml(s: str) -> CodecSettings:
    return settings_from_dict(yaml.safe_load(s))


__all__ = [
    "CodecSettings",
    "settings_to_dict",
    "settings_from_dict",
    "settings_to_yaml",
    "settings_from_yaml",
]
