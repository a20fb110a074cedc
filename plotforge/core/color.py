# PlotForge - Plot Capture and Rendering
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Packed color values.

A color is a single 32-bit integer laid out as 0xAABBGGRR, red in the low
byte. Channels are extracted with the pure functions below; nothing in
PlotForge stores colors in any other form.
"""

from __future__ import annotations

import re

BYTE_MASK = 0xFF

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{6})([0-9a-fA-F]{2})?$")


def rgba(r: int, g: int, b: int, a: int = BYTE_MASK) -> int:
    return ((a & BYTE_MASK) << 24) | ((b & BYTE_MASK) << 16) | ((g & BYTE_MASK) << 8) | (r & BYTE_MASK)


def rgb(r: int, g: int, b: int) -> int:
    return rgba(r, g, b, BYTE_MASK)


def red(col: int) -> int:
    return col & BYTE_MASK


def green(col: int) -> int:
    return (col >> 8) & BYTE_MASK


def blue(col: int) -> int:
    return (col >> 16) & BYTE_MASK


def alpha(col: int) -> int:
    return (col >> 24) & BYTE_MASK


def byte_frac(value: int) -> float:
    return value / 255.0


def red_frac(col: int) -> float:
    return byte_frac(red(col))


def green_frac(col: int) -> float:
    return byte_frac(green(col))


def blue_frac(col: int) -> float:
    return byte_frac(blue(col))


def alpha_frac(col: int) -> float:
    return byte_frac(alpha(col))


def is_transparent(col: int) -> bool:
    return alpha(col) == 0


def is_opaque(col: int) -> bool:
    return alpha(col) == BYTE_MASK


def to_hex(col: int) -> str:
    """Format the color channels as ``#RRGGBB``, ignoring alpha."""
    return f"#{red(col):02X}{green(col):02X}{blue(col):02X}"


def to_hex_alpha(col: int) -> str:
    """Format as ``#RRGGBB`` when opaque, ``#RRGGBBAA`` otherwise."""
    if is_opaque(col):
        return to_hex(col)
    return f"{to_hex(col)}{alpha(col):02X}"


def from_hex(text: str) -> int:
    """Parse ``#RRGGBB`` or ``#RRGGBBAA`` into a packed color.

    Raises:
        ValueError: If the string is not a hex color.
    """
    m = _HEX_RE.match(text.strip())
    if m is None:
        raise ValueError(f"Invalid hex color: '{text}'")
    value = int(m.group(1), 16)
    a = int(m.group(2), 16) if m.group(2) else BYTE_MASK
    return rgba((value >> 16) & BYTE_MASK, (value >> 8) & BYTE_MASK, value & BYTE_MASK, a)


BLACK = rgb(0, 0, 0)
WHITE = rgb(255, 255, 255)
TRANSPARENT_WHITE = rgba(255, 255, 255, 0)
