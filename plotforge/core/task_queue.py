# PlotForge - Plot Capture and Rendering
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Cross-Thread Task Queue

The capture host is single threaded: pages may only be built, relaid out or
stored from its own thread. Worker threads (for example a server answering
render requests) submit work here and get a Future back; the host thread
calls pump() from its event loop to run everything that has queued up.
GraphicsDevice owns one (``device.tasks``) and queues renders on it from
submit_render().

A threading.Event signals pending work so the host can sleep in wait()
instead of polling.
"""

from __future__ import annotations

import logging
import queue
import threading
from concurrent.futures import Future
from typing import Callable

logger = logging.getLogger(__name__)


class TaskQueue:
    """Marshals callables onto the thread that calls pump()."""

    def __init__(self) -> None:
        self._queue: queue.Queue = queue.Queue()
        self._pending = threading.Event()
        self._closed = False
        self._lock = threading.Lock()

    @property
    def closed(self) -> bool:
        return self._closed

    def submit(self, fn: Callable, *args, **kwargs) -> Future:
        """
        Queue ``fn(*args, **kwargs)`` for the owner thread. Safe from any thread.

        Raises:
            RuntimeError: If the queue has been closed.
        """
        future: Future = Future()
        with self._lock:
            if self._closed:
                raise RuntimeError("Task queue is closed")
            self._queue.put((future, fn, args, kwargs))
            self._pending.set()
        return future

    def wait(self, timeout: float | None = None) -> bool:
        """Block until work is pending. Returns False on timeout."""
        return self._pending.wait(timeout)

    def pump(self) -> int:
        """
        Run every queued task on the calling thread.

        Task exceptions are delivered through their futures.

        Returns:
            Number of tasks run.
        """
        self._pending.clear()
        count = 0
        while True:
            try:
                future, fn, args, kwargs = self._queue.get_nowait()
            except queue.Empty:
                break
            count += 1
            if not future.set_running_or_notify_cancel():
                continue
            try:
                result = fn(*args, **kwargs)
            except Exception as e:
                logger.debug("Queued task %r raised %s", fn, e)
                future.set_exception(e)
            else:
                future.set_result(result)
        return count

    def close(self) -> None:
        """Refuse further submissions and cancel anything still queued."""
        with self._lock:
            self._closed = True
        while True:
            try:
                future, _fn, _args, _kwargs = self._queue.get_nowait()
            except queue.Empty:
                break
            future.cancel()
        self._pending.set()
