# PlotForge - Plot Capture and Rendering
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Snapshot History Store

Keeps captured Pages under integer indices. The store owns every page it
holds; pages are frozen on the way in so renderers can borrow them without
copying. Removal leaves a gap, nothing is ever renumbered.
"""

from __future__ import annotations

import logging
from typing import Iterator, Protocol

from .scene import Page

logger = logging.getLogger(__name__)


class DrawingSurface(Protocol):
    """A live surface whose current state can be captured and restored."""

    def snapshot(self) -> Page | None:
        ...

    def replay(self, page: Page) -> None:
        ...


class PlotHistory:
    """Index-addressed collection of frozen Page snapshots."""

    def __init__(self) -> None:
        self._items: dict[int, Page] = {}
        self._last_index: int | None = None

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, index: int) -> bool:
        return index in self._items

    def __iter__(self) -> Iterator[int]:
        return iter(self.indices())

    def indices(self) -> list[int]:
        return sorted(self._items)

    @property
    def last_index(self) -> int | None:
        """Index of the most recently inserted entry, if it still exists."""
        return self._last_index

    def put(self, index: int, page: Page) -> None:
        """Insert or overwrite the entry at ``index``."""
        self._items[index] = page.snapshot()
        self._last_index = index
        logger.debug("History put %d -> page %s", index, page.id)

    def put_current(self, index: int, surface: DrawingSurface) -> bool:
        """
        Capture the surface's current page at ``index``.

        Returns:
            False if the surface has nothing to capture.
        """
        page = surface.snapshot()
        if page is None:
            return False
        self.put(index, page)
        return True

    def put_last(self, index: int, surface: DrawingSurface) -> bool:
        """
        Capture the surface's current page over the most recently inserted
        entry, whatever its index. With no previous entry, ``index`` is used.

        Returns:
            False if the surface has nothing to capture.
        """
        page = surface.snapshot()
        if page is None:
            return False
        target = self._last_index if self._last_index is not None else index
        self.put(target, page)
        return True

    def get(self, index: int) -> Page | None:
        return self._items.get(index)

    def remove(self, index: int) -> bool:
        page = self._items.pop(index, None)
        if page is None:
            return False
        if self._last_index == index:
            self._last_index = None
        logger.debug("History remove %d (page %s)", index, page.id)
        return True

    def clear(self) -> None:
        self._items.clear()
        self._last_index = None
        logger.debug("History cleared")

    def play(self, index: int, surface: DrawingSurface) -> bool:
        """
        Restore the page stored at ``index`` onto a live surface.

        Returns:
            False if nothing is stored at ``index``; the surface is untouched.
        """
        page = self._items.get(index)
        if page is None:
            return False
        surface.replay(page)
        return True
