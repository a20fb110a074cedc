# PlotForge - Plot Capture and Rendering
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Clip-Aware Dispatcher

Walks a Page's draw calls in paint order and feeds each one to the render
target's handler for its kind. The active clip is the only state shared by
every backend, so the dispatcher re-establishes it only when a draw call's
clip id differs from the previous one.

Clip ids are not assumed to be grouped or increasing: a page may go back to
an earlier clip at any time (e.g. 1, 2, 1), and every change triggers a
fresh linear search of the page's clip list.
"""

from __future__ import annotations

from .error import PageIntegrityError
from .scene import DRAW_CALL_KINDS, Clip, Page


class RenderTarget:
    """
    Base class for anything the dispatcher can drive.

    Subclasses implement one method per draw call kind, named after the
    kind (``rect``, ``text``, ``circle``, ``line``, ``polyline``,
    ``polygon``, ``path``, ``raster``), each taking the DrawCall.
    """

    def begin_page(self, page: Page) -> None:
        """Called once before the first clip is set (paint background here)."""

    def set_clip(self, clip: Clip) -> None:
        """Make ``clip`` the active clipping rectangle."""

    def end_page(self, page: Page) -> None:
        """Called once after the last draw call."""


def handler_table(target: RenderTarget) -> dict:
    """Map every draw call kind to the target's bound handler."""
    table = {}
    for kind in DRAW_CALL_KINDS:
        handler = getattr(target, kind, None)
        if handler is None:
            raise TypeError(f"{type(target).__name__} has no handler for '{kind}'")
        table[kind] = handler
    return table


def render_page(page: Page, target: RenderTarget) -> None:
    """
    Render every draw call of ``page`` through ``target``.

    Raises:
        PageIntegrityError: If the page has no clips.
        ClipNotFoundError: If a draw call references an unknown clip id.
    """
    if not page.clips:
        raise PageIntegrityError(f"Page {page.id} has no clips")

    handlers = handler_table(target)

    target.begin_page(page)

    active = page.clips[0]
    target.set_clip(active)

    for draw_call in page.draw_calls:
        if draw_call.clip_id != active.id:
            active = page.find_clip(draw_call.clip_id)
            target.set_clip(active)
        handlers[draw_call.KIND](draw_call)

    target.end_page(page)
