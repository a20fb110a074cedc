# PlotForge - Plot Capture and Rendering
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Shared Cairo Rendering Module

This module provides the Cairo render target used by every Cairo-backed
output format (PNG, PDF, PS/EPS, TIFF).

Architecture:
- render_cairo() is the main entry point for device implementations
- CairoTarget implements one handler per draw call kind and is driven by
  the clip-aware dispatcher in core.dispatch
- Text is drawn with Cairo's toy font API; the host-measured advance width
  is used for horizontal adjustment when available

Submodules:
- cairo_utils: Color and line style setup
- cairo_images: Raster pixel conversion and painting
"""

import math

import cairo

from ...core import color
from ...core.constants import FONT_WEIGHT_BOLD, MIN_CIRCLE_RADIUS
from ...core.dispatch import RenderTarget, render_page
from .cairo_images import paint_raster
from .cairo_utils import ANTIALIAS_MAP, set_color, set_linetype


def render_cairo(page, surface, scale: float = 1.0, config=None) -> None:
    """
    Render a Page onto a Cairo surface.

    Device implementations should:
    1. Create a Cairo surface sized for the page at the requested scale
    2. Call this function to paint the page
    3. Finalize output (write to buffer, finish the surface, etc.)

    Args:
        page: Page to render
        surface: Cairo surface to paint on
        scale: Uniform scale from page units to surface units
        config: Optional RenderConfig (anti-aliasing and tolerance)
    """
    cc = cairo.Context(surface)
    if config is not None:
        cc.set_antialias(ANTIALIAS_MAP[config.antialias])
        cc.set_tolerance(config.tolerance)
    cc.scale(scale, scale)
    render_page(page, CairoTarget(cc))
    surface.flush()


class CairoTarget(RenderTarget):
    """Paints draw calls onto a Cairo context."""

    def __init__(self, cc):
        self.cc = cc

    def begin_page(self, page):
        cc = self.cc
        if not color.is_transparent(page.fill):
            set_color(cc, page.fill)
            cc.new_path()
            cc.rectangle(0, 0, page.width, page.height)
            cc.fill()

    def set_clip(self, clip):
        cc = self.cc
        r = clip.rect
        cc.reset_clip()
        cc.new_path()
        cc.rectangle(r.x, r.y, r.width, r.height)
        cc.clip()

    def _fill_stroke(self, fill, line):
        """Fill then stroke the current path; either step may be skipped."""
        cc = self.cc
        if not color.is_transparent(fill):
            set_color(cc, fill)
            cc.fill_preserve()
        if line.strokes:
            set_color(cc, line.col)
            set_linetype(cc, line)
            cc.stroke_preserve()
        cc.new_path()

    def rect(self, dc):
        r = dc.rect
        self.cc.new_path()
        self.cc.rectangle(r.x, r.y, r.width, r.height)
        self._fill_stroke(dc.fill, dc.line)

    def circle(self, dc):
        radius = max(dc.radius, MIN_CIRCLE_RADIUS)
        self.cc.new_path()
        self.cc.arc(dc.center.x, dc.center.y, radius, 0, 2 * math.pi)
        self._fill_stroke(dc.fill, dc.line)

    def line(self, dc):
        if not dc.line.strokes:
            return
        cc = self.cc
        cc.new_path()
        cc.move_to(dc.orig.x, dc.orig.y)
        cc.line_to(dc.dest.x, dc.dest.y)
        self._fill_stroke(color.TRANSPARENT_WHITE, dc.line)

    def polyline(self, dc):
        if not dc.line.strokes:
            return
        cc = self.cc
        cc.new_path()
        first, *rest = dc.points
        cc.move_to(first.x, first.y)
        for p in rest:
            cc.line_to(p.x, p.y)
        self._fill_stroke(color.TRANSPARENT_WHITE, dc.line)

    def polygon(self, dc):
        cc = self.cc
        cc.new_path()
        first, *rest = dc.points
        cc.move_to(first.x, first.y)
        for p in rest:
            cc.line_to(p.x, p.y)
        cc.close_path()
        self._fill_stroke(dc.fill, dc.line)

    def path(self, dc):
        cc = self.cc
        cc.new_path()
        for subpath in dc.subpaths():
            first, *rest = subpath
            cc.move_to(first.x, first.y)
            for p in rest:
                cc.line_to(p.x, p.y)
            cc.close_path()
        cc.set_fill_rule(cairo.FILL_RULE_WINDING if dc.winding else cairo.FILL_RULE_EVEN_ODD)
        self._fill_stroke(dc.fill, dc.line)
        cc.set_fill_rule(cairo.FILL_RULE_WINDING)

    def text(self, dc):
        if color.is_transparent(dc.col):
            return
        cc = self.cc
        font = dc.font
        cc.save()
        try:
            cc.new_path()
            cc.select_font_face(
                font.family,
                cairo.FONT_SLANT_ITALIC if font.italic else cairo.FONT_SLANT_NORMAL,
                cairo.FONT_WEIGHT_BOLD if font.weight >= FONT_WEIGHT_BOLD else cairo.FONT_WEIGHT_NORMAL,
            )
            cc.set_font_size(font.size)
            set_color(cc, dc.col)
            cc.move_to(dc.pos.x, dc.pos.y)
            if dc.rot != 0:
                cc.rotate(-dc.rot / 180 * math.pi)
            if dc.hadj != 0:
                advance = font.width if font.width > 0 else cc.text_extents(dc.text).x_advance
                cc.rel_move_to(-advance * dc.hadj, 0)
            cc.show_text(dc.text)
        finally:
            cc.restore()

    def raster(self, dc):
        paint_raster(self.cc, dc)
