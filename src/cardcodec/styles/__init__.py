"""Styles mapping canonical cards to structured contacts (flat, ...)."""

from cardcodec.mappings import MappingTable

from .flat import FLAT_STYLE, FlatContact, add_flat_mappings
from .registry import Style, StyleRegistry


def default_registry() -> StyleRegistry:
    """A fresh registry holding the built-in styles."""
    return StyleRegistry([FLAT_STYLE])


def default_mapping_table() -> MappingTable:
    """A fresh mapping table for the built-in styles."""
    return add_flat_mappings(MappingTable())


__all__ = [
    "Style",
    "StyleRegistry",
    "FlatContact",
    "FLAT_STYLE",
    "default_registry",
    "default_mapping_table",
]
