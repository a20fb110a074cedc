# PlotForge - Plot Capture and Rendering
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
SVG Output Device

Writes a Page as a self-contained SVG document. The markup is generated
directly rather than through Cairo's SVG surface, so text stays text and
every clip becomes a named <clipPath>.

Document layout:
- <svg> header with width/height scaled and an unscaled viewBox
- <defs> holding one <clipPath> per Clip
- a full-size background <rect>
- one <g clip-path="..."> per run of draw calls sharing a clip

Two presentation modes are provided:

Style sheet mode (SvgRenderer) declares default stroke and fill settings in
an embedded <style> block and writes only the differences as inline
``style`` declarations. Extra CSS rules may be appended to the sheet.

Portable mode (SvgPortableRenderer) writes every presentation setting as an
explicit attribute and relies only on SVG's own defaults, so documents can
be inlined into HTML next to each other. Clip ids carry a token that is
unique per render to keep them from colliding.

The SVGZ variants gzip the same documents.
"""

from __future__ import annotations

import gzip
import uuid
from xml.sax.saxutils import escape

from ...core import color
from ...core.constants import (
    LINE_CAP_BUTT, LINE_CAP_SQUARE, LINE_CAP_ROUND,
    LINE_JOIN_BEVEL, LINE_JOIN_MITRE, LINE_JOIN_ROUND,
    DEFAULT_MITRE_LIMIT, SVG_MITRE_LIMIT, LWD_TO_PT,
    FONT_WEIGHT_NORMAL, FONT_WEIGHT_BOLD,
)
from ...core.dispatch import RenderTarget, render_page
from ..common.cairo_images import raster_base64
from ..common.renderer import Renderer

SVG_HEADER = ('<svg xmlns="http://www.w3.org/2000/svg" '
              'xmlns:xlink="http://www.w3.org/1999/xlink" class="plotforge" ')

STYLE_SHEET = (
    "  <style type='text/css'><![CDATA[\n"
    "    .plotforge line, .plotforge polyline, .plotforge polygon, .plotforge path, "
    ".plotforge rect, .plotforge circle {\n"
    "      fill: none;\n"
    "      stroke: #000000;\n"
    "      stroke-linecap: round;\n"
    "      stroke-linejoin: round;\n"
    "      stroke-miterlimit: 10.00;\n"
    "    }\n"
)

_ATTR_ENTITIES = {'"': "&quot;", "'": "&apos;"}


def _fmt(value):
    return f"{value:.2f}"


def xml_escape(text):
    """Escape &, <, >, double and single quotes."""
    return escape(text, _ATTR_ENTITIES)


def _points(points):
    return " ".join(f"{_fmt(p.x)},{_fmt(p.y)}" for p in points)


def _path_data(path):
    parts = []
    for subpath in path.subpaths():
        first, *rest = subpath
        parts.append(f"M{_fmt(first.x)} {_fmt(first.y)}")
        parts.extend(f"L{_fmt(p.x)} {_fmt(p.y)}" for p in rest)
        parts.append("Z")
    return "".join(parts)


def _dasharray(line):
    # Dash lengths stay in 1/96 inch; only the width is converted to points
    return ", ".join(_fmt(d) for d in line.dashes())


class SvgWriter(RenderTarget):
    """
    Document structure shared by both presentation modes.

    Subclasses supply ``defs_extra``, ``background``, ``paint`` and
    ``text_style``.
    """

    def __init__(self, scale: float, clip_suffix: str = "") -> None:
        self.scale = scale
        self.clip_suffix = clip_suffix
        self._parts: list[str] = []
        self._group_open = False

    def write(self, text: str) -> None:
        self._parts.append(text)

    def getvalue(self) -> str:
        return "".join(self._parts)

    def clip_ref(self, clip_id) -> str:
        return f"c{clip_id}{self.clip_suffix}"

    # Page structure

    def begin_page(self, page):
        self.write(f'{SVG_HEADER}width="{_fmt(page.width * self.scale)}" '
                   f'height="{_fmt(page.height * self.scale)}" '
                   f'viewBox="0 0 {_fmt(page.width)} {_fmt(page.height)}">\n<defs>\n')
        self.defs_extra()
        for clip in page.clips:
            r = clip.rect
            self.write(f'<clipPath id="{self.clip_ref(clip.id)}"><rect x="{_fmt(r.x)}" '
                       f'y="{_fmt(r.y)}" width="{_fmt(r.width)}" height="{_fmt(r.height)}"/>'
                       f'</clipPath>\n')
        self.write("</defs>\n")
        self.write(self.background(page.fill) + "\n")

    def set_clip(self, clip):
        close = "</g>" if self._group_open else ""
        self.write(f'{close}<g clip-path="url(#{self.clip_ref(clip.id)})">\n')
        self._group_open = True

    def end_page(self, page):
        self.write("</g>\n</svg>")

    # Mode hooks

    def defs_extra(self):
        pass

    def background(self, fill) -> str:
        raise NotImplementedError

    def paint(self, line, fill=None, fill_rule=None) -> str:
        """Presentation for a stroked shape; ``fill`` None means the shape has no interior."""
        raise NotImplementedError

    def text_style(self, dc) -> str:
        raise NotImplementedError

    # Shapes

    def rect(self, dc):
        r = dc.rect
        self.write(f'<rect x="{_fmt(r.x)}" y="{_fmt(r.y)}" width="{_fmt(r.width)}" '
                   f'height="{_fmt(r.height)}" {self.paint(dc.line, dc.fill)}/>\n')

    def circle(self, dc):
        self.write(f'<circle cx="{_fmt(dc.center.x)}" cy="{_fmt(dc.center.y)}" '
                   f'r="{_fmt(dc.radius)}" {self.paint(dc.line, dc.fill)}/>\n')

    def line(self, dc):
        self.write(f'<line x1="{_fmt(dc.orig.x)}" y1="{_fmt(dc.orig.y)}" '
                   f'x2="{_fmt(dc.dest.x)}" y2="{_fmt(dc.dest.y)}" {self.paint(dc.line)}/>\n')

    def polyline(self, dc):
        self.write(f'<polyline points="{_points(dc.points)}" '
                   f'{self.paint(dc.line, color.TRANSPARENT_WHITE)}/>\n')

    def polygon(self, dc):
        self.write(f'<polygon points="{_points(dc.points)}" {self.paint(dc.line, dc.fill)}/>\n')

    def path(self, dc):
        rule = "nonzero" if dc.winding else "evenodd"
        self.write(f'<path d="{_path_data(dc)}" {self.paint(dc.line, dc.fill, rule)}/>\n')

    def text(self, dc):
        # The clip must sit on an outer element or the transform would move it
        if dc.rot == 0:
            place = f'x="{_fmt(dc.pos.x)}" y="{_fmt(dc.pos.y)}" '
        else:
            place = (f'transform="translate({_fmt(dc.pos.x)},{_fmt(dc.pos.y)}) '
                     f'rotate({_fmt(-dc.rot)})" ')
        if dc.hadj == 0.5:
            place += 'text-anchor="middle" '
        elif dc.hadj == 1:
            place += 'text-anchor="end" '
        length = ""
        if dc.font.width > 0:
            length = f' textLength="{_fmt(dc.font.width)}px" lengthAdjust="spacingAndGlyphs"'
        self.write(f'<g><text {place}{self.text_style(dc)}{length}>'
                   f'{xml_escape(dc.text)}</text></g>\n')

    def raster(self, dc):
        r = dc.rect
        attrs = (f'x="{_fmt(r.x)}" y="{_fmt(r.y)}" width="{_fmt(r.width)}" '
                 f'height="{_fmt(r.height)}" preserveAspectRatio="none" ')
        if not dc.interpolate:
            attrs += 'image-rendering="pixelated" '
        if dc.rot != 0:
            attrs += f'transform="rotate({_fmt(-dc.rot)},{_fmt(r.x)},{_fmt(r.y)})" '
        self.write(f'<g><image {attrs}xlink:href="data:image/png;base64,'
                   f'{raster_base64(dc)}"/></g>\n')


class SvgStyleWriter(SvgWriter):
    """Writes differences from the embedded style sheet as inline CSS."""

    def __init__(self, scale, extra_css=None):
        super().__init__(scale)
        self.extra_css = extra_css

    def defs_extra(self):
        self.write(STYLE_SHEET)
        if self.extra_css:
            self.write(f"{self.extra_css}\n")
        self.write("  ]]></style>\n")

    @staticmethod
    def _fill_css(fill):
        a = color.alpha(fill)
        if a == 0:
            return ""
        css = f"fill: {color.to_hex(fill)};"
        if a != color.BYTE_MASK:
            css += f"fill-opacity: {_fmt(color.byte_frac(a))};"
        return css

    def background(self, fill):
        fill_css = self._fill_css(fill) or "fill: none;"
        return f'<rect width="100%" height="100%" style="stroke: none;{fill_css}"/>'

    @staticmethod
    def _line_css(line):
        css = [f"stroke-width: {_fmt(line.lwd * LWD_TO_PT)};"]

        # Opaque black is the style sheet default
        if line.is_blank or color.is_transparent(line.col):
            css.append("stroke: none;")
        elif line.col != color.BLACK:
            css.append(f"stroke: {color.to_hex(line.col)};")
            a = color.alpha(line.col)
            if a != color.BYTE_MASK:
                css.append(f"stroke-opacity: {_fmt(color.byte_frac(a))};")

        dashes = _dasharray(line)
        if dashes:
            css.append(f"stroke-dasharray: {dashes};")

        if line.lend == LINE_CAP_BUTT:
            css.append("stroke-linecap: butt;")
        elif line.lend == LINE_CAP_SQUARE:
            css.append("stroke-linecap: square;")

        if line.ljoin == LINE_JOIN_BEVEL:
            css.append("stroke-linejoin: bevel;")
        elif line.ljoin == LINE_JOIN_MITRE:
            css.append("stroke-linejoin: miter;")
            if abs(line.lmitre - DEFAULT_MITRE_LIMIT) > 1e-3:
                css.append(f"stroke-miterlimit: {_fmt(line.lmitre)};")
        return "".join(css)

    def paint(self, line, fill=None, fill_rule=None):
        css = self._line_css(line)
        if fill is not None:
            css += self._fill_css(fill)
        if fill_rule is not None:
            css += f"fill-rule: {fill_rule};"
        return f'style="{css}"'

    def text_style(self, dc):
        font = dc.font
        css = f"font-family: {xml_escape(font.family)};font-size: {_fmt(font.size)}px;"
        if font.weight == FONT_WEIGHT_BOLD:
            css += "font-weight: bold;"
        elif font.weight != FONT_WEIGHT_NORMAL:
            css += f"font-weight: {font.weight};"
        if font.italic:
            css += "font-style: italic;"
        if dc.col != color.BLACK:
            css += self._fill_css(dc.col) or "fill: none;"
        if font.features:
            css += f"font-feature-settings: {xml_escape(font.features)};"
        return f'style="{css}"'


class SvgPortableWriter(SvgWriter):
    """Writes every presentation setting as an explicit attribute."""

    def __init__(self, scale):
        super().__init__(scale, clip_suffix=f"-{uuid.uuid4().hex}")

    @staticmethod
    def _fill_attrs(fill):
        a = color.alpha(fill)
        if a == 0:
            return ' fill="none"'
        attrs = f' fill="{color.to_hex(fill)}"'
        if a != color.BYTE_MASK:
            attrs += f' fill-opacity="{_fmt(color.byte_frac(a))}"'
        return attrs

    def background(self, fill):
        return f'<rect width="100%" height="100%" stroke="none"{self._fill_attrs(fill)}/>'

    @staticmethod
    def _line_attrs(line):
        attrs = [f'stroke-width="{_fmt(line.lwd * LWD_TO_PT)}"']

        # SVG draws no stroke unless one is given
        a = color.alpha(line.col)
        if a != 0 and not line.is_blank:
            attrs.append(f'stroke="{color.to_hex(line.col)}"')
            if a != color.BYTE_MASK:
                attrs.append(f'stroke-opacity="{_fmt(color.byte_frac(a))}"')

        dashes = _dasharray(line)
        if dashes:
            attrs.append(f'stroke-dasharray="{dashes}"')

        if line.lend == LINE_CAP_ROUND:
            attrs.append('stroke-linecap="round"')
        elif line.lend == LINE_CAP_SQUARE:
            attrs.append('stroke-linecap="square"')

        if line.ljoin == LINE_JOIN_ROUND:
            attrs.append('stroke-linejoin="round"')
        elif line.ljoin == LINE_JOIN_BEVEL:
            attrs.append('stroke-linejoin="bevel"')
        elif abs(line.lmitre - SVG_MITRE_LIMIT) > 1e-3:
            attrs.append(f'stroke-miterlimit="{_fmt(line.lmitre)}"')
        return " ".join(attrs)

    def paint(self, line, fill=None, fill_rule=None):
        attrs = self._line_attrs(line)
        if fill is not None:
            attrs += self._fill_attrs(fill)
        if fill_rule is not None:
            attrs += f' fill-rule="{fill_rule}"'
        return attrs

    def text_style(self, dc):
        font = dc.font
        attrs = f'font-family="{xml_escape(font.family)}" font-size="{_fmt(font.size)}px"'
        if font.weight == FONT_WEIGHT_BOLD:
            attrs += ' font-weight="bold"'
        elif font.weight != FONT_WEIGHT_NORMAL:
            attrs += f' font-weight="{font.weight}"'
        if font.italic:
            attrs += ' font-style="italic"'
        if dc.col != color.BLACK:
            attrs += self._fill_attrs(dc.col)
        if font.features:
            attrs += f' font-feature-settings="{xml_escape(font.features)}"'
        return attrs


# Renderers

class SvgRenderer(Renderer):
    text = True

    def __init__(self, config=None, extra_css=None):
        super().__init__(config)
        self.extra_css = extra_css if extra_css is not None else self.config.extra_css

    def document(self, page, scale):
        writer = SvgStyleWriter(scale, self.extra_css)
        render_page(page, writer)
        return writer.getvalue()

    def render(self, page, scale=1.0):
        self._data = self.document(page, scale)


class SvgPortableRenderer(Renderer):
    text = True

    def document(self, page, scale):
        writer = SvgPortableWriter(scale)
        render_page(page, writer)
        return writer.getvalue()

    def render(self, page, scale=1.0):
        self._data = self.document(page, scale)


def gzip_document(text: str) -> bytes:
    # mtime 0 keeps the output byte-for-byte reproducible
    return gzip.compress(text.encode("utf-8"), mtime=0)


class SvgzRenderer(SvgRenderer):
    text = False

    def render(self, page, scale=1.0):
        self._data = gzip_document(self.document(page, scale))


class SvgzPortableRenderer(SvgPortableRenderer):
    text = False

    def render(self, page, scale=1.0):
        self._data = gzip_document(self.document(page, scale))
