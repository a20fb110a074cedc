# PlotForge - Plot Capture and Rendering
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Pages shared by the renderer tests."""

from __future__ import annotations

from plotforge.core import color
from plotforge.core.constants import LINE_CAP_BUTT, LINE_JOIN_MITRE
from plotforge.core.page_builder import PageBuilder
from plotforge.core.scene import Clip, FontInfo, LineInfo, Page, Rect

RED = color.rgb(255, 0, 0)
GREEN = color.rgb(0, 255, 0)
BLUE = color.rgb(0, 0, 255)
HALF_BLACK = color.rgba(0, 0, 0, 128)

RASTER_PIXELS = (RED, GREEN, BLUE, HALF_BLACK)


def sample_page(page_id: str = "sample", width: float = 200, height: float = 100,
                fill: int = color.WHITE) -> Page:
    """One draw call of every kind, spread over two clips."""
    b = PageBuilder()
    b.new_page(width, height, fill, page_id)
    b.rect(10, 10, 50, 30, fill=RED, line=LineInfo(lwd=2))
    b.clip(20, 20, 100, 50)
    b.circle(80, 50, 10, fill=color.rgba(0, 0, 255, 128),
             line=LineInfo(col=GREEN, lty=0x44, lend=LINE_CAP_BUTT))
    b.line(0, 0, 100, 100, line=LineInfo(ljoin=LINE_JOIN_MITRE, lmitre=5))
    b.polyline([(0, 0), (10, 5), (20, 0)])
    b.text(50, 50, "a<b & \"c\" 'd'", rot=90, hadj=0.5,
           font=FontInfo(family="serif", weight=700, italic=True, size=14, width=40))
    b.clip(0, 0, width, height)
    b.polygon([(100, 10), (120, 10), (110, 30)], fill=BLUE)
    b.path([(0, 0), (10, 0), (10, 10), (0, 10), (20, 20), (30, 20), (25, 30)], [4, 3],
           winding=False, fill=GREEN)
    b.raster(RASTER_PIXELS, 2, 2, 150, 60, 20, 20, interpolate=False)
    return b.close_page()


def interleaved_page() -> Page:
    """Three rects whose clip ids run 1, 2, 1."""
    clips = [Clip(1, (0, 0, 50, 50)), Clip(2, (50, 0, 50, 50))]
    draw_calls = [Rect(1, (0, 0, 10, 10)), Rect(2, (60, 0, 10, 10)), Rect(1, (20, 0, 10, 10))]
    return Page("interleaved", 100, 50, color.WHITE, clips, draw_calls).freeze()
