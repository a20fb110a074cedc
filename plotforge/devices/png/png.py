# PlotForge - Plot Capture and Rendering
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
PNG Output Device

Renders a Page to a PNG image using Cairo. The image is
``int(width * scale)`` by ``int(height * scale)`` pixels with an alpha
channel, so a transparent page background stays transparent.
"""

import base64

import cairo

from ..common.renderer import CairoRenderer

BASE64_PREFIX = "data:image/png;base64,"


class PngRenderer(CairoRenderer):

    def create_surface(self, stream, width, height):
        return cairo.ImageSurface(cairo.FORMAT_ARGB32, int(width), int(height))

    def encode(self, surface, stream):
        surface.write_to_png(stream)
        return stream.getvalue()


class PngBase64Renderer(PngRenderer):
    """PNG wrapped in a data URI, for embedding in HTML or JSON."""

    text = True

    def encode(self, surface, stream):
        png = super().encode(surface, stream)
        return BASE64_PREFIX + base64.b64encode(png).decode("ascii")
