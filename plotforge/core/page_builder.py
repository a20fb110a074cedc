# PlotForge - Plot Capture and Rendering
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
PageBuilder - Live Page Construction

This module is the boundary between the host graphics engine and the scene
model. The host's callback glue calls these methods as drawing events occur;
the builder stamps every DrawCall with the active clip id and only creates a
new Clip when the clipping rectangle actually changes.

Architecture:
- new_page() opens a page whose first clip is the page bounds
- clip() switches the active clip, reusing an existing clip with the same
  rectangle so repeated clip toggles do not grow the clip list
- shape methods append DrawCalls to the open page
- snapshot()/replay() make the builder a live drawing surface for the
  history store
"""

from __future__ import annotations

import logging
import uuid

from . import color
from . import scene
from .error import PageIntegrityError

logger = logging.getLogger(__name__)


def new_page_id() -> str:
    return uuid.uuid4().hex


class PageBuilder:
    """
    Builds a Page from a stream of drawing events.

    Only one page is open at a time. All shape methods raise
    PageIntegrityError when no page is open.
    """

    def __init__(self) -> None:
        self.page: scene.Page | None = None
        self.current_clip_id = -1
        self._next_clip_id = 0

    @property
    def is_open(self) -> bool:
        return self.page is not None

    def new_page(self, width: float, height: float, fill: int = color.WHITE,
                 page_id: str | None = None) -> scene.Page:
        """
        Open a new page, discarding any page still open.

        Args:
            width: Page width in points
            height: Page height in points
            fill: Background color
            page_id: Identifier for the page; generated if omitted
        """
        self.page = scene.Page(page_id or new_page_id(), width, height, fill)
        self._next_clip_id = 0
        self.current_clip_id = -1
        self.clip(0, 0, width, height)
        logger.debug("Opened page %s (%gx%g)", self.page.id, width, height)
        return self.page

    def close_page(self) -> scene.Page | None:
        """Freeze and return the open page."""
        page = self.page
        self.page = None
        self.current_clip_id = -1
        if page is not None:
            page.freeze()
        return page

    def clip(self, x: float, y: float, width: float, height: float) -> int:
        """
        Make the given rectangle the active clip and return its id.

        An existing clip with an identical rectangle is reused.
        """
        page = self._require_page()
        rect = scene.Rectangle(float(x), float(y), float(width), float(height))
        for existing in page.clips:
            if existing.rect == rect:
                self.current_clip_id = existing.id
                return existing.id
        clip = page.add_clip(scene.Clip(self._next_clip_id, rect))
        self._next_clip_id += 1
        self.current_clip_id = clip.id
        return clip.id

    def add(self, draw_call: scene.DrawCall) -> scene.DrawCall:
        """Append an already built DrawCall."""
        return self._require_page().add_draw_call(draw_call)

    # Shapes

    def rect(self, x, y, width, height, fill=color.TRANSPARENT_WHITE, line=None):
        return self.add(scene.Rect(self.current_clip_id, (x, y, width, height), fill,
                                   line or scene.LineInfo()))

    def text(self, x, y, text, rot=0.0, hadj=0.0, col=color.BLACK, font=None):
        return self.add(scene.Text(self.current_clip_id, (x, y), text, rot, hadj, col,
                                   font or scene.FontInfo()))

    def circle(self, x, y, radius, fill=color.TRANSPARENT_WHITE, line=None):
        return self.add(scene.Circle(self.current_clip_id, (x, y), radius, fill,
                                     line or scene.LineInfo()))

    def line(self, x1, y1, x2, y2, line=None):
        return self.add(scene.Line(self.current_clip_id, (x1, y1), (x2, y2),
                                   line or scene.LineInfo()))

    def polyline(self, points, line=None):
        return self.add(scene.Polyline(self.current_clip_id, points, line or scene.LineInfo()))

    def polygon(self, points, fill=color.TRANSPARENT_WHITE, line=None):
        return self.add(scene.Polygon(self.current_clip_id, points, fill,
                                      line or scene.LineInfo()))

    def path(self, points, nper, winding=True, fill=color.TRANSPARENT_WHITE, line=None):
        return self.add(scene.Path(self.current_clip_id, points, nper, winding, fill,
                                   line or scene.LineInfo()))

    def raster(self, pixels, src_width, src_height, x, y, width, height, rot=0.0,
               interpolate=True):
        return self.add(scene.Raster(self.current_clip_id, (x, y, width, height),
                                     src_width, src_height, pixels, rot, interpolate))

    # DrawingSurface protocol

    def snapshot(self) -> scene.Page | None:
        """Frozen copy of the open page, or None when no page is open."""
        if self.page is None:
            return None
        return self.page.snapshot()

    def replay(self, page: scene.Page) -> None:
        """Replace the open page with a mutable copy of ``page``."""
        self.page = page.copy()
        clip_ids = [c.id for c in self.page.clips]
        self._next_clip_id = max(clip_ids) + 1 if clip_ids else 0
        if self.page.draw_calls:
            self.current_clip_id = self.page.draw_calls[-1].clip_id
        else:
            self.current_clip_id = clip_ids[0] if clip_ids else -1
        logger.debug("Replayed page %s onto live surface", page.id)

    def _require_page(self) -> scene.Page:
        if self.page is None:
            raise PageIntegrityError("No page is open")
        return self.page
