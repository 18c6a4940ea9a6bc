#!/usr/bin/env python3
"""
Shared Drawing Palette

The stroke color table used by both the encoder and the decoder. A path's
color travels on the wire as a 4-bit index into this table, so both sides
must read the same tuple; nothing else in the package may repeat the
literal values.
"""

from typing import Optional


# Predefined palette (must match between creator and viewer)
PALETTE = ("#E31B44", "#ED4B92", "#A855F7", "#3B82F6", "#1E293B")

# Index used for colors outside the table
DEFAULT_COLOR_INDEX = 0


def color_index(color: Optional[str]) -> int:
    """Return the palette index of a color, or the default index if unknown."""
    if color is None:
        return DEFAULT_COLOR_INDEX
    normalized = color.strip().upper()
    for idx, entry in enumerate(PALETTE):
        if entry == normalized:
            return idx
    return DEFAULT_COLOR_INDEX


def color_for_index(index: int) -> str:
    """Return the palette color for an index, falling back to the default."""
    if 0 <= index < len(PALETTE):
        return PALETTE[index]
    return PALETTE[DEFAULT_COLOR_INDEX]
