# PlotForge - Plot Capture and Rendering
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
PlotForge shared constants.

Line cap and join codes follow the numbering of the capturing graphics
engine so they survive a trip through the JSON record format unchanged.
"""

# line cap types
LINE_CAP_ROUND = 1
LINE_CAP_BUTT = 2
LINE_CAP_SQUARE = 3

# line join types
LINE_JOIN_ROUND = 1
LINE_JOIN_MITRE = 2
LINE_JOIN_BEVEL = 3

LINE_CAPS = frozenset({LINE_CAP_ROUND, LINE_CAP_BUTT, LINE_CAP_SQUARE})
LINE_JOINS = frozenset({LINE_JOIN_ROUND, LINE_JOIN_MITRE, LINE_JOIN_BEVEL})

# line type (dash) codes
LTY_SOLID = 0
LTY_BLANK = -1
LTY_BLANK_UNSIGNED = 0xFFFFFFFF

# a dash code holds at most 8 nibbles
LTY_MAX_DASHES = 8

# 1 lwd = 1/96 inch, document units are 1/72 inch (points)
LWD_TO_PT = 72.0 / 96.0
MIN_LINE_WIDTH = 0.01

# circles smaller than this are still painted as a dot on raster surfaces
MIN_CIRCLE_RADIUS = 0.5

DEFAULT_MITRE_LIMIT = 10.0
SVG_MITRE_LIMIT = 4.0

# font weights
FONT_WEIGHT_NORMAL = 400
FONT_WEIGHT_BOLD = 700
