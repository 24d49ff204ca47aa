"""
Style registry.

A style turns canonical cards into structured contacts and back. The
registry maps style names to Style objects; whoever hosts the codec
decides which styles to register.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List

from cardcodec.errors import DuplicateStyleError, UnknownStyleError
from cardcodec.mappings import FieldMapping
from cardcodec.model import Card


ExportFunction = Callable[[Any, FieldMapping, bool], Card]
ImportFunction = Callable[[Card, FieldMapping, bool], Any]


@dataclass(frozen=True)
class Style:
    """
    An export/import function pair registered under a name.

    Properties:
        name:
            Registry key, e.g. "flat"

        export_contact:
            (contact, field mapping, include_unknowns) -> Card

        import_card:
            (card, field mapping, include_unknowns) -> contact
    """

    name: str
    export_contact: ExportFunction
    import_card: ImportFunction


class StyleRegistry:
    """Name → Style lookup with duplicate detection."""

    def __init__(self, styles: Iterable[Style] = ()):
        self._styles: Dict[str, Style] = {}
        for style in styles:
            self.register(style)

    def register(self, style: Style) -> None:
        """
        Add a style.

        Raises:
            DuplicateStyleError: If a style with the same name exists
        """
        if style.name in self._styles:
            raise DuplicateStyleError(f"Style {style.name!r} is already registered")
        self._styles[style.name] = style

    def get(self, name: str) -> Style:
        """
        Retrieve a style by name.

        Raises:
            UnknownStyleError: If no style has that name
        """
        if name not in self._styles:
            raise UnknownStyleError(f"No style named {name!r}")
        return self._styles[name]

    def names(self) -> List[str]:
        return list(self._styles)

    def __contains__(self, name: str) -> bool:
        return name in self._styles

    def __len__(self) -> int:
        return len(self._styles)


__all__ = ["Style", "StyleRegistry", "ExportFunction", "ImportFunction"]
