# PlotForge - Plot Capture and Rendering
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Renderer Base Classes

Every output format is a Renderer: ``render(page, scale)`` converts one
Page into the format and keeps the result, ``get_data()`` hands it back.
The buffer is only replaced once encoding has fully succeeded, so a failed
render never leaves partial output behind.
"""

from __future__ import annotations

import io

import cairo

from ...config import RenderConfig
from ...core.error import EncodingError
from .cairo_renderer import render_cairo


class Renderer:
    """Converts a Page into one output format."""

    #: True when get_data() returns str rather than bytes
    text = False

    def __init__(self, config: RenderConfig | None = None) -> None:
        self.config = config or RenderConfig()
        self._data = "" if self.text else b""

    def render(self, page, scale: float = 1.0) -> None:
        raise NotImplementedError

    def get_data(self):
        return self._data


class CairoRenderer(Renderer):
    """
    Base for formats produced from a Cairo surface.

    Subclasses implement ``create_surface`` and ``encode``. The surface is
    finished whether or not rendering succeeds.
    """

    def create_surface(self, stream, width: float, height: float):
        raise NotImplementedError

    def encode(self, surface, stream):
        """Return the output for a fully painted surface."""
        surface.finish()
        return stream.getvalue()

    def render(self, page, scale: float = 1.0) -> None:
        stream = io.BytesIO()
        width, height = page.width * scale, page.height * scale
        try:
            surface = self.create_surface(stream, width, height)
        except (cairo.Error, MemoryError) as e:
            raise EncodingError(f"Failed to create {width:g}x{height:g} surface: {e}") from e

        try:
            render_cairo(page, surface, scale, self.config)
            data = self.encode(surface, stream)
        except (cairo.Error, OSError) as e:
            raise EncodingError(f"{type(self).__name__} failed: {e}") from e
        finally:
            surface.finish()

        self._data = data
