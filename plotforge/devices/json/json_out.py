# PlotForge - Plot Capture and Rendering
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
JSON Output Device

Projects a Page field for field into a JSON object so a remote client can
re-render it. No geometry is computed here.

Conventions:
- floats are rounded to 2 decimals
- colors are "#RRGGBB", with a trailing alpha byte ("#RRGGBBAA") when not
  fully opaque
- every draw call record has a "type" tag and its "clip_id"
- raster pixels are embedded as base64 PNG

core.scene_reader parses this format back into a Page.
"""

import json

from ...core import color
from ...core.error import ClipNotFoundError, PageIntegrityError
from ..common.cairo_images import raster_base64
from ..common.renderer import Renderer

FORMAT_VERSION = 1


def _num(value):
    return round(float(value), 2)


def _col(col):
    return color.to_hex_alpha(col)


def _point(p):
    return [_num(p.x), _num(p.y)]


def line_record(line) -> dict:
    return {
        "col": _col(line.col),
        "lwd": _num(line.lwd),
        "lty": line.lty,
        "lend": line.lend,
        "ljoin": line.ljoin,
        "lmitre": _num(line.lmitre),
    }


def _rect(dc):
    r = dc.rect
    return {"x": _num(r.x), "y": _num(r.y), "w": _num(r.width), "h": _num(r.height),
            "fill": _col(dc.fill), "line": line_record(dc.line)}


def _text(dc):
    font = dc.font
    return {
        "x": _num(dc.pos.x), "y": _num(dc.pos.y),
        "rot": _num(dc.rot), "hadj": _num(dc.hadj),
        "col": _col(dc.col),
        "str": dc.text,
        "weight": font.weight,
        "features": font.features,
        "font_family": font.family,
        "fontsize": _num(font.size),
        "italic": font.italic,
        "txtwidth_px": _num(font.width),
    }


def _circle(dc):
    return {"x": _num(dc.center.x), "y": _num(dc.center.y), "r": _num(dc.radius),
            "fill": _col(dc.fill), "line": line_record(dc.line)}


def _line(dc):
    return {"x0": _num(dc.orig.x), "y0": _num(dc.orig.y),
            "x1": _num(dc.dest.x), "y1": _num(dc.dest.y),
            "line": line_record(dc.line)}


def _polyline(dc):
    return {"line": line_record(dc.line), "points": [_point(p) for p in dc.points]}


def _polygon(dc):
    return {"fill": _col(dc.fill), "line": line_record(dc.line),
            "points": [_point(p) for p in dc.points]}


def _path(dc):
    return {"fill": _col(dc.fill), "line": line_record(dc.line),
            "nper": list(dc.nper), "winding": dc.winding,
            "points": [_point(p) for p in dc.points]}


def _raster(dc):
    r = dc.rect
    return {"x": _num(r.x), "y": _num(r.y), "w": _num(r.width), "h": _num(r.height),
            "rot": _num(dc.rot), "interpolate": dc.interpolate,
            "raster": {"w": dc.src_width, "h": dc.src_height, "data": raster_base64(dc)}}


_RECORDS = {
    "rect": _rect,
    "text": _text,
    "circle": _circle,
    "line": _line,
    "polyline": _polyline,
    "polygon": _polygon,
    "path": _path,
    "raster": _raster,
}


def draw_call_record(dc) -> dict:
    record = {"type": dc.KIND, "clip_id": dc.clip_id}
    record.update(_RECORDS[dc.KIND](dc))
    return record


def page_record(page, scale: float = 1.0) -> dict:
    """Build the JSON-ready dict for a Page."""
    if not page.clips:
        raise PageIntegrityError(f"Page {page.id} has no clips")
    clip_ids = {c.id for c in page.clips}
    for dc in page.draw_calls:
        if dc.clip_id not in clip_ids:
            raise ClipNotFoundError(f"Clip {dc.clip_id} not found in page {page.id}")

    return {
        "version": FORMAT_VERSION,
        "id": page.id,
        "w": _num(page.width),
        "h": _num(page.height),
        "scale": _num(scale),
        "fill": _col(page.fill),
        "clips": [
            {"id": c.id, "x": _num(c.rect.x), "y": _num(c.rect.y),
             "w": _num(c.rect.width), "h": _num(c.rect.height)}
            for c in page.clips
        ],
        "draw_calls": [draw_call_record(dc) for dc in page.draw_calls],
    }


class JsonRenderer(Renderer):
    text = True

    def render(self, page, scale=1.0):
        self._data = json.dumps(page_record(page, scale))
