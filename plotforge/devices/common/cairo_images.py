# PlotForge - Plot Capture and Rendering
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Cairo Image Rendering Module

Pixel format conversion and painting for Raster draw calls.

Raster pixels arrive as packed 0xAABBGGRR colors. Cairo's ARGB32 format
stores native-endian 0xAARRGGBB words with the color channels premultiplied
by alpha, so every pixel that is not fully opaque has its channels scaled by
alpha/255 before the surface is built. Alpha itself passes through.

The same conversion backs the inline PNG used by the SVG and JSON renderers.
"""

import base64
import io
import math

import cairo
import numpy as np

from ...core.error import EncodingError


def raster_to_argb32(raster):
    """
    Convert a Raster's pixels to a premultiplied Cairo ARGB32 buffer.

    Args:
        raster: Raster draw call

    Returns:
        (bytearray, stride) ready for cairo.ImageSurface.create_for_data
    """
    width, height = raster.src_width, raster.src_height
    packed = (np.asarray(raster.pixels, dtype=np.int64) & 0xFFFFFFFF).astype(np.uint32)

    r = packed & 0xFF
    g = (packed >> 8) & 0xFF
    b = (packed >> 16) & 0xFF
    a = packed >> 24

    partial = a < 0xFF
    r = np.where(partial, r * a // 0xFF, r)
    g = np.where(partial, g * a // 0xFF, g)
    b = np.where(partial, b * a // 0xFF, b)

    argb = (a << 24) | (r << 16) | (g << 8) | b

    stride = cairo.ImageSurface.format_stride_for_width(cairo.FORMAT_ARGB32, width)
    data = bytearray(stride * height)
    rows = np.frombuffer(data, dtype=np.uint32).reshape(height, stride // 4)
    rows[:, :width] = argb.reshape(height, width)
    return data, stride


def _image_surface(raster):
    data, stride = raster_to_argb32(raster)
    surface = cairo.ImageSurface.create_for_data(
        data, cairo.FORMAT_ARGB32, raster.src_width, raster.src_height, stride)
    # create_for_data does not keep the buffer alive on its own
    return surface, data


def paint_raster(cc, raster):
    """
    Paint a Raster draw call onto a Cairo context.

    The image is placed at the target rectangle's origin, rotated by -rot
    degrees, scaled to fill the rectangle, and sampled with nearest-neighbor
    or bilinear filtering depending on ``raster.interpolate``.
    """
    rect = raster.rect
    if rect.width == 0 or rect.height == 0:
        return

    image, _data = _image_surface(raster)
    cc.save()
    try:
        cc.translate(rect.x, rect.y)
        cc.rotate(-raster.rot * math.pi / 180)
        cc.scale(rect.width / raster.src_width, rect.height / raster.src_height)

        cc.set_source_surface(image, 0, 0)
        pattern = cc.get_source()
        if raster.interpolate:
            pattern.set_filter(cairo.FILTER_BILINEAR)
            pattern.set_extend(cairo.EXTEND_PAD)
        else:
            pattern.set_filter(cairo.FILTER_NEAREST)

        cc.new_path()
        cc.rectangle(0, 0, raster.src_width, raster.src_height)
        cc.clip()
        cc.paint()
    finally:
        cc.restore()
        image.finish()


def raster_png(raster) -> bytes:
    """Encode a Raster's pixels (at source resolution) as PNG."""
    image, _data = _image_surface(raster)
    buf = io.BytesIO()
    try:
        image.write_to_png(buf)
    except (cairo.Error, OSError) as e:
        raise EncodingError(f"Failed to encode raster as PNG: {e}") from e
    finally:
        image.finish()
    return buf.getvalue()


def raster_base64(raster) -> str:
    """Base64 of ``raster_png`` for data URIs and JSON records."""
    return base64.b64encode(raster_png(raster)).decode("ascii")
