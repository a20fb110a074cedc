# PlotForge - Plot Capture and Rendering
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
TIFF Output Device

Renders a Page to a TIFF image using Cairo for rendering.

Cairo's ARGB32 pixels are premultiplied, which TIFF calls associated alpha
(ExtraSamples = 1). Pillow's encoder only writes unassociated RGBA, so the
file is assembled here: pixels are reordered to RGBA with numpy, packed into
zlib-compressed strips, and described by an IFD built with Pillow's
ImageFileDirectory_v2.

Layout: 8-byte little-endian header, the single IFD with its auxiliary
values, then the strip data.
"""

import struct
import zlib

import cairo
import numpy as np
from PIL import TiffImagePlugin

from ...core.error import EncodingError
from ..common.renderer import CairoRenderer

# TIFF tag numbers
IMAGE_WIDTH = 256
IMAGE_LENGTH = 257
BITS_PER_SAMPLE = 258
COMPRESSION = 259
PHOTOMETRIC = 262
STRIP_OFFSETS = 273
ORIENTATION = 274
SAMPLES_PER_PIXEL = 277
ROWS_PER_STRIP = 278
STRIP_BYTE_COUNTS = 279
PLANAR_CONFIG = 284
EXTRA_SAMPLES = 338

COMPRESSION_NONE = 1
COMPRESSION_ADOBE_DEFLATE = 8
PHOTOMETRIC_RGB = 2
EXTRA_SAMPLE_ASSOCIATED_ALPHA = 1
TYPE_SHORT = 3

# Target uncompressed strip size in bytes
STRIP_SIZE = 8192

HEADER_SIZE = 8


def surface_to_rgba(surface) -> np.ndarray:
    """
    Reorder a Cairo ARGB32 surface into an (h, w, 4) RGBA uint8 array.

    Cairo stores native-endian 32-bit words, so channels are pulled out
    arithmetically rather than by byte position. The color channels stay
    premultiplied.
    """
    width, height = surface.get_width(), surface.get_height()
    stride = surface.get_stride()
    words = np.frombuffer(surface.get_data(), dtype=np.uint32)
    words = words.reshape(height, stride // 4)[:, :width]

    rgba = np.empty((height, width, 4), dtype=np.uint8)
    rgba[..., 0] = (words >> 16) & 0xFF
    rgba[..., 1] = (words >> 8) & 0xFF
    rgba[..., 2] = words & 0xFF
    rgba[..., 3] = words >> 24
    return rgba


def _patch_strip_offsets(ifd_bytes: bytes, ifd_offset: int, offsets) -> bytes:
    """
    Write absolute strip offsets into a serialized little-endian IFD.

    Pillow's tobytes() shifts StripOffsets past its own auxiliary data, so
    the entry is overwritten once the final layout is known.
    """
    data = bytearray(ifd_bytes)
    (count,) = struct.unpack_from("<H", data, 0)
    for pos in range(2, 2 + count * 12, 12):
        tag, typ, n = struct.unpack_from("<HHL", data, pos)
        if tag != STRIP_OFFSETS:
            continue
        fmt = "<%d%s" % (n, "H" if typ == TYPE_SHORT else "L")
        if struct.calcsize(fmt) <= 4:
            value_pos = pos + 8
        else:
            (value_pos,) = struct.unpack_from("<L", data, pos + 8)
            value_pos -= ifd_offset
        struct.pack_into(fmt, data, value_pos, *offsets)
        return bytes(data)
    raise EncodingError("TIFF directory has no StripOffsets entry")


def encode_tiff(rgba: np.ndarray, compression: str = "deflate") -> bytes:
    """
    Encode premultiplied RGBA pixels as a little-endian TIFF.

    Args:
        rgba: (h, w, 4) uint8 array
        compression: "deflate" or "none"
    """
    height, width = rgba.shape[:2]
    row_bytes = width * 4
    rows_per_strip = max(1, STRIP_SIZE // row_bytes)
    raw = np.ascontiguousarray(rgba).tobytes()

    strips = []
    for start in range(0, height, rows_per_strip):
        chunk = raw[start * row_bytes:min(start + rows_per_strip, height) * row_bytes]
        if compression == "deflate":
            chunk = zlib.compress(chunk)
        strips.append(chunk)

    ifd = TiffImagePlugin.ImageFileDirectory_v2(prefix=b"II")
    ifd[IMAGE_WIDTH] = width
    ifd[IMAGE_LENGTH] = height
    ifd[BITS_PER_SAMPLE] = (8, 8, 8, 8)
    ifd[COMPRESSION] = (COMPRESSION_ADOBE_DEFLATE if compression == "deflate"
                        else COMPRESSION_NONE)
    ifd[PHOTOMETRIC] = PHOTOMETRIC_RGB
    # Placeholders; patched once the IFD size is known
    ifd[STRIP_OFFSETS] = (0,) * len(strips)
    ifd[ORIENTATION] = 1
    ifd[SAMPLES_PER_PIXEL] = 4
    ifd[ROWS_PER_STRIP] = rows_per_strip
    ifd[STRIP_BYTE_COUNTS] = tuple(len(s) for s in strips)
    ifd[PLANAR_CONFIG] = 1
    ifd[EXTRA_SAMPLES] = (EXTRA_SAMPLE_ASSOCIATED_ALPHA,)

    ifd_bytes = ifd.tobytes(HEADER_SIZE)
    offsets = []
    offset = HEADER_SIZE + len(ifd_bytes)
    for strip in strips:
        offsets.append(offset)
        offset += len(strip)
    ifd_bytes = _patch_strip_offsets(ifd_bytes, HEADER_SIZE, offsets)

    header = b"II*\x00" + struct.pack("<L", HEADER_SIZE)
    return b"".join([header, ifd_bytes, *strips])


class TiffRenderer(CairoRenderer):

    def create_surface(self, stream, width, height):
        return cairo.ImageSurface(cairo.FORMAT_ARGB32, int(width), int(height))

    def encode(self, surface, stream):
        if surface.get_width() == 0 or surface.get_height() == 0:
            raise EncodingError("Cannot encode an empty image as TIFF")
        rgba = surface_to_rgba(surface)
        return encode_tiff(rgba, self.config.tiff_compression)
