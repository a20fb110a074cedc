# PlotForge - Plot Capture and Rendering
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
PlotForge error types.

Three families of failure can abort an operation:

- not-found: an unknown page index, renderer id or clip id
- precondition violation: a malformed Page handed in from upstream
- encoding failure: the underlying container or codec failed to write

None of them are retried. A render call either returns a complete buffer
or raises one of these.
"""


class PlotForgeError(Exception):
    """Base class for all PlotForge errors."""


class NotFoundError(PlotForgeError, LookupError):
    """A lookup by index or identifier found nothing."""


class PageNotFoundError(NotFoundError):
    """No page is stored at the requested index or under the requested id."""


class RendererNotFoundError(NotFoundError):
    """No renderer is registered under the requested id."""


class PageIntegrityError(PlotForgeError, ValueError):
    """A Page or DrawCall breaks a structural invariant."""


class ClipNotFoundError(NotFoundError, PageIntegrityError):
    """A DrawCall references a clip id that its Page does not define."""


class FrozenPageError(PageIntegrityError):
    """Attempt to append to a Page that has already been stored."""


class EncodingError(PlotForgeError):
    """The output container or codec failed while encoding a rendered page."""
