# PlotForge - Plot Capture and Rendering
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Graphics Device

Ties the live PageBuilder, the PlotHistory and a RendererRegistry together
and answers render requests and history queries.

Page lifecycle:
- new_page() stores any open page, then opens a fresh page on the builder
  and gives it its own history entry at the next free index
- redraw_current() refreshes that entry with the builder's current state
  while the host is still drawing
- finalize_page() writes the open page over its entry and closes it

Every history change bumps ``upid`` so clients can poll for updates.

Render requests take a target width and height plus a zoom. A negative width
or height means "natural size": the stored page is rendered at zoom 1. When a
target size is given and differs from the stored page, an optional
``relayout`` callable supplied by the host can re-run its layout for
``(width / zoom, height / zoom)``. Without one the stored page is rendered as
captured, scaled by ``zoom``.

Threading: the host thread owns the live page. Requests arriving on other
threads go through ``submit_render()``, which queues the render on the
device's TaskQueue; the host runs it from ``tasks.pump()`` so the relayout
hook never runs concurrently with drawing. The internal lock only keeps
the history and update counter consistent for the read-only queries
(``state``, ``query``, ``plot_index``) that servers call directly.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Callable

from .history import PlotHistory
from .page_builder import PageBuilder
from .error import PageNotFoundError
from .task_queue import TaskQueue
from . import color

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeviceState:
    hsize: int
    upid: int
    active: bool


@dataclass(frozen=True)
class QueryResult:
    state: DeviceState
    ids: tuple


class GraphicsDevice:
    """
    Capture device: one live page plus a history of stored pages.

    Args:
        registry: RendererRegistry used to resolve renderer ids
        surface: Live drawing surface; a new PageBuilder if omitted
        relayout: Optional ``relayout(page, width, height) -> Page`` hook
        tasks: Queue drained by the host thread; a new TaskQueue if omitted
    """

    def __init__(self, registry, surface: PageBuilder | None = None,
                 relayout: Callable | None = None, tasks: TaskQueue | None = None) -> None:
        self.registry = registry
        self.surface = surface if surface is not None else PageBuilder()
        self.relayout = relayout
        self.tasks = tasks if tasks is not None else TaskQueue()
        self.history = PlotHistory()
        self.upid = 0
        self.active = True
        self._open_index: int | None = None
        self._lock = threading.RLock()

    def _bump(self) -> None:
        self.upid += 1

    def _next_index(self) -> int:
        indices = self.history.indices()
        return indices[-1] + 1 if indices else 0

    # Page lifecycle

    def new_page(self, width: float, height: float, fill: int = color.WHITE,
                 page_id: str | None = None):
        """Store any open page, then open a new one with its own history entry."""
        with self._lock:
            if self.surface.is_open:
                self.finalize_page()
            page = self.surface.new_page(width, height, fill, page_id)
            self._open_index = self._next_index()
            self.history.put_current(self._open_index, self.surface)
            self._bump()
            return page

    def _current_index(self) -> int:
        # A page replayed onto the surface directly has no entry of its own
        return self._open_index if self._open_index is not None else self._next_index()

    def finalize_page(self) -> int | None:
        """
        Store the open page over its history entry and close it.

        Returns:
            The index used, or None if no page was open.
        """
        with self._lock:
            index = self._current_index()
            page = self.surface.close_page()
            if page is None:
                return None
            self.history.put(index, page)
            self._open_index = None
            self._bump()
            return index

    def redraw_current(self) -> bool:
        """Overwrite the most recent history entry with the live page."""
        with self._lock:
            if not self.history.put_last(self._current_index(), self.surface):
                return False
            self._bump()
            return True

    def close(self) -> None:
        with self._lock:
            if self.surface.is_open:
                self.finalize_page()
            self.active = False
            self._bump()
        self.tasks.close()

    # Queries

    def state(self) -> DeviceState:
        with self._lock:
            return DeviceState(len(self.history), self.upid, self.active)

    def _resolve_index(self, index: int) -> int:
        # Negative indices count back from the newest entry
        if index < 0:
            indices = self.history.indices()
            if -index > len(indices):
                raise PageNotFoundError(f"No page at index {index}")
            return indices[index]
        if index not in self.history:
            raise PageNotFoundError(f"No page at index {index}")
        return index

    def page(self, index: int):
        with self._lock:
            return self.history.get(self._resolve_index(index))

    def query(self, index: int = 0, limit: int = 0) -> QueryResult:
        """Page ids stored at indices >= ``index``, at most ``limit`` of them."""
        with self._lock:
            stored = [i for i in self.history.indices() if i >= index]
            ids = tuple(self.history.get(i).id for i in stored[:max(limit, 0)])
            return QueryResult(self.state(), ids)

    def plot_index(self, page_id: str) -> int:
        with self._lock:
            for index in self.history.indices():
                if self.history.get(index).id == page_id:
                    return index
        raise PageNotFoundError(f"No page with id '{page_id}'")

    # History edits

    def remove(self, index: int) -> bool:
        with self._lock:
            try:
                index = self._resolve_index(index)
            except PageNotFoundError:
                return False
            self.history.remove(index)
            if index == self._open_index:
                self._open_index = None
            self._bump()
            return True

    def remove_id(self, page_id: str) -> bool:
        """Raises PageNotFoundError for an unknown id."""
        with self._lock:
            return self.remove(self.plot_index(page_id))

    def clear(self) -> bool:
        with self._lock:
            had_pages = len(self.history) > 0
            self.history.clear()
            self._open_index = None
            self._bump()
            return had_pages

    # Rendering

    def render(self, index: int, width: float = -1, height: float = -1,
               zoom: float = 1.0, renderer_id: str = "svg"):
        """
        Render a stored page.

        Returns:
            str for text renderers, bytes otherwise.

        Raises:
            PageNotFoundError: Unknown page index.
            RendererNotFoundError: Unknown renderer id.
        """
        if width < 0 or height < 0:
            zoom = 1.0
        if zoom <= 0:
            raise ValueError(f"Zoom must be positive, got {zoom}")

        info, factory = self.registry.find(renderer_id)
        page = self.page(index)

        if width >= 0 and height >= 0 and self.relayout is not None:
            target = (width / zoom, height / zoom)
            if target != page.size:
                page = self.relayout(page, *target)

        start = time.perf_counter()
        renderer = factory()
        renderer.render(page, zoom)
        data = renderer.get_data()
        logger.debug("Rendered page %s with '%s' in %.1f ms", page.id, info.id,
                     (time.perf_counter() - start) * 1000)
        return data

    def submit_render(self, index: int, width: float = -1, height: float = -1,
                      zoom: float = 1.0, renderer_id: str = "svg") -> Future:
        """
        Queue a render for the host thread; safe to call from any thread.

        The returned Future completes when the host pumps ``tasks`` and
        carries the same result or exception as render().
        """
        return self.tasks.submit(self.render, index, width, height, zoom, renderer_id)
