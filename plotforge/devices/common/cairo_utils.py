# PlotForge - Plot Capture and Rendering
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Shared Cairo rendering utilities."""

import cairo

from ...core import color
from ...core.constants import (
    LINE_CAP_ROUND, LINE_CAP_BUTT, LINE_CAP_SQUARE,
    LINE_JOIN_ROUND, LINE_JOIN_MITRE, LINE_JOIN_BEVEL,
    LWD_TO_PT, MIN_LINE_WIDTH,
)

_CAIRO_LINE_CAP = {
    LINE_CAP_ROUND: cairo.LINE_CAP_ROUND,
    LINE_CAP_BUTT: cairo.LINE_CAP_BUTT,
    LINE_CAP_SQUARE: cairo.LINE_CAP_SQUARE,
}

_CAIRO_LINE_JOIN = {
    LINE_JOIN_ROUND: cairo.LINE_JOIN_ROUND,
    LINE_JOIN_MITRE: cairo.LINE_JOIN_MITER,
    LINE_JOIN_BEVEL: cairo.LINE_JOIN_BEVEL,
}

ANTIALIAS_MAP = {
    "none": cairo.ANTIALIAS_NONE,
    "fast": cairo.ANTIALIAS_FAST,
    "good": cairo.ANTIALIAS_GOOD,
    "best": cairo.ANTIALIAS_BEST,
    "gray": cairo.ANTIALIAS_GRAY,
    "subpixel": cairo.ANTIALIAS_SUBPIXEL,
}


def set_color(cc, col):
    """Set a packed color as the Cairo source."""
    a = color.alpha(col)
    # Opaque colors go through set_source_rgb: an alpha of exactly 1 can
    # still push some vector surfaces into image fallback.
    if a == color.BYTE_MASK:
        cc.set_source_rgb(color.red_frac(col), color.green_frac(col), color.blue_frac(col))
    else:
        cc.set_source_rgba(color.red_frac(col), color.green_frac(col), color.blue_frac(col),
                           color.byte_frac(a))


def set_linetype(cc, line):
    """Apply a LineInfo's width, cap, join, miter limit and dash pattern."""
    lwd = line.lwd if line.lwd > MIN_LINE_WIDTH else MIN_LINE_WIDTH
    cc.set_line_width(lwd * LWD_TO_PT)
    cc.set_line_cap(_CAIRO_LINE_CAP.get(line.lend, cairo.LINE_CAP_SQUARE))
    cc.set_line_join(_CAIRO_LINE_JOIN.get(line.ljoin, cairo.LINE_JOIN_ROUND))
    cc.set_miter_limit(line.lmitre)
    cc.set_dash([d * LWD_TO_PT for d in line.dashes()], 0)
