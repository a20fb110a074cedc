# PlotForge - Plot Capture and Rendering
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Renderer Registry

Maps stable string ids to renderer metadata and a zero-argument factory.
A registry is an ordinary object: build one at startup with
create_default_registry() and hand it to whatever issues render requests.
Several registries can coexist (tests build their own).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterator

from ..config import RenderConfig
from ..core.error import RendererNotFoundError

logger = logging.getLogger(__name__)

RENDERER_TYPES = ("raster", "vector", "text")


@dataclass(frozen=True)
class RendererInfo:
    """
    Description of one output format.

    Attributes:
        id: Stable identifier used in render requests
        mime: MIME type of the output
        fileext: File extension including the dot
        name: Display name
        type: "raster", "vector" or "text"
        text: True when the renderer produces str rather than bytes
        description: One-line human description
    """

    id: str
    mime: str
    fileext: str
    name: str
    type: str
    text: bool
    description: str

    def __post_init__(self):
        if self.type not in RENDERER_TYPES:
            raise ValueError(f"Unknown renderer type: '{self.type}'")


class RendererRegistry:
    """Renderer id -> (RendererInfo, factory)."""

    def __init__(self) -> None:
        self._entries: dict[str, tuple[RendererInfo, Callable]] = {}

    def register(self, info: RendererInfo, factory: Callable) -> None:
        if info.id in self._entries:
            raise ValueError(f"Renderer '{info.id}' is already registered")
        self._entries[info.id] = (info, factory)

    def __contains__(self, renderer_id: str) -> bool:
        return renderer_id in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def find(self, renderer_id: str) -> tuple[RendererInfo, Callable]:
        """
        Raises:
            RendererNotFoundError: If no renderer has this id.
        """
        try:
            return self._entries[renderer_id]
        except KeyError:
            raise RendererNotFoundError(f"Unknown renderer: '{renderer_id}'") from None

    def find_info(self, renderer_id: str) -> RendererInfo:
        return self.find(renderer_id)[0]

    def find_factory(self, renderer_id: str) -> Callable:
        return self.find(renderer_id)[1]

    def create(self, renderer_id: str):
        """Return a fresh renderer instance."""
        renderer = self.find_factory(renderer_id)()
        logger.debug("Created renderer '%s'", renderer_id)
        return renderer

    def infos(self) -> list[RendererInfo]:
        return [info for info, _ in self._entries.values()]


def create_default_registry(config: RenderConfig | None = None) -> RendererRegistry:
    """Build a registry holding every built-in renderer, configured by ``config``."""
    from .json.json_out import JsonRenderer
    from .pdf.pdf import PdfRenderer
    from .png.png import PngBase64Renderer, PngRenderer
    from .ps.ps import EpsRenderer, PsRenderer
    from .svg.svg import (
        SvgPortableRenderer, SvgRenderer, SvgzPortableRenderer, SvgzRenderer,
    )
    from .tiff.tiff import TiffRenderer

    config = config or RenderConfig()
    registry = RendererRegistry()

    def add(cls, *fields):
        registry.register(RendererInfo(*fields), lambda: cls(config))

    add(SvgRenderer, "svg", "image/svg+xml", ".svg", "SVG", "vector", True,
        "Scalable Vector Graphics (SVG).")
    add(SvgzRenderer, "svgz", "image/svg+xml", ".svgz", "SVGZ", "vector", False,
        "Compressed Scalable Vector Graphics (SVGZ).")
    add(SvgPortableRenderer, "svgp", "image/svg+xml", ".svg", "Portable SVG", "vector", True,
        "Version of the SVG renderer that produces portable SVGs.")
    add(SvgzPortableRenderer, "svgzp", "image/svg+xml", ".svgz", "Portable SVGZ", "vector",
        False, "Version of the SVG renderer that produces portable SVGZs.")
    add(PngRenderer, "png", "image/png", ".png", "PNG", "raster", False,
        "Portable Network Graphics (PNG).")
    add(PngBase64Renderer, "png-base64", "text/plain", ".txt", "Base64 PNG", "raster", True,
        "Base64 encoded Portable Network Graphics (PNG).")
    add(PdfRenderer, "pdf", "application/pdf", ".pdf", "PDF", "vector", False,
        "Adobe Portable Document Format (PDF).")
    add(PsRenderer, "ps", "application/postscript", ".ps", "PS", "vector", False,
        "PostScript (PS).")
    add(EpsRenderer, "eps", "application/postscript", ".eps", "EPS", "vector", False,
        "Encapsulated PostScript (EPS).")
    add(TiffRenderer, "tiff", "image/tiff", ".tiff", "TIFF", "raster", False,
        "Tagged Image File Format (TIFF).")
    add(JsonRenderer, "json", "application/json", ".json", "JSON", "text", True,
        "Plot data serialized to JSON format.")
    return registry
