# PlotForge - Plot Capture and Rendering
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
JSON Scene Reader

Parses the record format written by the JSON renderer back into a frozen
Page, so captured pages can be stored on disk and re-rendered later (this
is what the command line tool reads).

Raster images are decoded from their embedded PNG with Pillow. PNG stores
straight (non-premultiplied) alpha, which is exactly the packed color form.
"""

from __future__ import annotations

import base64
import binascii
import io
import json
import logging

import numpy as np
from PIL import Image, UnidentifiedImageError

from . import color
from . import scene
from .error import PageIntegrityError

logger = logging.getLogger(__name__)


def _line(rec) -> scene.LineInfo:
    return scene.LineInfo(
        col=color.from_hex(rec["col"]),
        lwd=float(rec["lwd"]),
        lty=int(rec["lty"]),
        lend=int(rec["lend"]),
        ljoin=int(rec["ljoin"]),
        lmitre=float(rec["lmitre"]),
    )


def _fill(rec) -> int:
    return color.from_hex(rec["fill"])


def decode_png_pixels(data: str) -> tuple[int, int, tuple]:
    """
    Decode a base64 PNG into (width, height, packed pixels).

    Raises:
        PageIntegrityError: If the data is not a readable PNG.
    """
    try:
        with Image.open(io.BytesIO(base64.b64decode(data, validate=True))) as im:
            rgba = np.asarray(im.convert("RGBA"), dtype=np.uint32)
    except (binascii.Error, UnidentifiedImageError, OSError) as e:
        raise PageIntegrityError(f"Invalid raster data: {e}") from e
    height, width = rgba.shape[:2]
    packed = (rgba[..., 0] | (rgba[..., 1] << 8) | (rgba[..., 2] << 16)
              | (rgba[..., 3] << 24))
    return width, height, tuple(int(v) for v in packed.ravel())


def _rect(rec, clip_id):
    return scene.Rect(clip_id, (rec["x"], rec["y"], rec["w"], rec["h"]),
                      _fill(rec), _line(rec["line"]))


def _text(rec, clip_id):
    font = scene.FontInfo(
        family=rec["font_family"],
        weight=int(rec["weight"]),
        italic=bool(rec["italic"]),
        size=float(rec["fontsize"]),
        features=rec.get("features", ""),
        width=float(rec.get("txtwidth_px", 0.0)),
    )
    return scene.Text(clip_id, (rec["x"], rec["y"]), rec["str"], float(rec["rot"]),
                      float(rec["hadj"]), color.from_hex(rec["col"]), font)


def _circle(rec, clip_id):
    return scene.Circle(clip_id, (rec["x"], rec["y"]), float(rec["r"]),
                        _fill(rec), _line(rec["line"]))


def _line_call(rec, clip_id):
    return scene.Line(clip_id, (rec["x0"], rec["y0"]), (rec["x1"], rec["y1"]),
                      _line(rec["line"]))


def _polyline(rec, clip_id):
    return scene.Polyline(clip_id, rec["points"], _line(rec["line"]))


def _polygon(rec, clip_id):
    return scene.Polygon(clip_id, rec["points"], _fill(rec), _line(rec["line"]))


def _path(rec, clip_id):
    return scene.Path(clip_id, rec["points"], rec["nper"], bool(rec.get("winding", True)),
                      _fill(rec), _line(rec["line"]))


def _raster(rec, clip_id):
    width, height, pixels = decode_png_pixels(rec["raster"]["data"])
    return scene.Raster(clip_id, (rec["x"], rec["y"], rec["w"], rec["h"]), width, height,
                        pixels, float(rec.get("rot", 0.0)), bool(rec.get("interpolate", True)))


_READERS = {
    "rect": _rect,
    "text": _text,
    "circle": _circle,
    "line": _line_call,
    "polyline": _polyline,
    "polygon": _polygon,
    "path": _path,
    "raster": _raster,
}


def draw_call_from_record(rec: dict) -> scene.DrawCall:
    kind = rec.get("type")
    reader = _READERS.get(kind)
    if reader is None:
        raise PageIntegrityError(f"Unknown draw call type: {kind!r}")
    return reader(rec, int(rec["clip_id"]))


def page_from_json(source) -> scene.Page:
    """
    Build a frozen Page from a JSON record (str, bytes or already parsed dict).

    Raises:
        PageIntegrityError: If the record is malformed.
    """
    try:
        rec = json.loads(source) if isinstance(source, (str, bytes, bytearray)) else source
        clips = [scene.Clip(int(c["id"]), (c["x"], c["y"], c["w"], c["h"]))
                 for c in rec["clips"]]
        draw_calls = [draw_call_from_record(dc) for dc in rec["draw_calls"]]
        page = scene.Page(rec["id"], rec["w"], rec["h"], color.from_hex(rec["fill"]),
                          clips, draw_calls)
    except PageIntegrityError:
        raise
    except (KeyError, TypeError, ValueError) as e:
        raise PageIntegrityError(f"Malformed page record: {e!r}") from e
    logger.debug("Read page %s with %d draw calls", page.id, len(page.draw_calls))
    return page.freeze()


def load_page(path) -> scene.Page:
    """Read a Page from a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        return page_from_json(f.read())
