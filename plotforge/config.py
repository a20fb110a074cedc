# PlotForge - Plot Capture and Rendering
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Render configuration shared by the renderer factories.

A RenderConfig is built once (by the CLI or the embedding host) and closed
over by every factory in a RendererRegistry, so each renderer instance sees
the same settings without any module-level state.
"""

from __future__ import annotations

from dataclasses import dataclass

ANTIALIAS_MODES = ("none", "fast", "good", "best", "gray", "subpixel")

TIFF_COMPRESSIONS = ("none", "deflate")


@dataclass(frozen=True)
class RenderConfig:
    """
    Settings for all renderers.

    Attributes:
        antialias: Cairo anti-aliasing mode name (see ANTIALIAS_MODES)
        tolerance: Cairo curve flattening tolerance in device units
        extra_css: Rules injected verbatim into the SVG style sheet
        compress_pdf: Compress PDF content streams with pypdf
        tiff_compression: "deflate" or "none"
    """

    antialias: str = "gray"
    tolerance: float = 0.1
    extra_css: str | None = None
    compress_pdf: bool = True
    tiff_compression: str = "deflate"

    def __post_init__(self):
        if self.antialias not in ANTIALIAS_MODES:
            raise ValueError(f"Unknown antialias mode: '{self.antialias}'")
        if self.tiff_compression not in TIFF_COMPRESSIONS:
            raise ValueError(f"Unknown TIFF compression: '{self.tiff_compression}'")
        if self.tolerance <= 0:
            raise ValueError("Tolerance must be positive")
