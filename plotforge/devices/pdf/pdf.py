# PlotForge - Plot Capture and Rendering
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
PDF Output Device

Renders a Page to a single-page PDF document using Cairo's PDF surface.

Cairo writes uncompressed content streams. When ``compress_pdf`` is set in
the render config the finished document is passed through pypdf, which
applies FlateDecode to every page content stream. Compression is
best-effort: if pypdf cannot process the document the uncompressed bytes
are kept and a warning is logged.
"""

import io
import logging

import cairo
from pypdf import PdfReader, PdfWriter
from pypdf.errors import PyPdfError

from ..common.renderer import CairoRenderer

logger = logging.getLogger(__name__)

# Suppress noisy "Multiple definitions in dictionary" warnings from pypdf
logging.getLogger('pypdf').setLevel(logging.ERROR)


def compress_pdf(data: bytes) -> bytes:
    """Return ``data`` with FlateDecode-compressed page content streams."""
    reader = PdfReader(io.BytesIO(data), strict=False)
    writer = PdfWriter()
    for page in reader.pages:
        writer.add_page(page)
    for page in writer.pages:
        page.compress_content_streams()
    out = io.BytesIO()
    writer.write(out)
    return out.getvalue()


class PdfRenderer(CairoRenderer):

    def create_surface(self, stream, width, height):
        return cairo.PDFSurface(stream, width, height)

    def encode(self, surface, stream):
        data = super().encode(surface, stream)
        if not self.config.compress_pdf:
            return data
        try:
            return compress_pdf(data)
        except (PyPdfError, ValueError, OSError) as e:
            logger.warning("PDF compression failed, keeping uncompressed output: %s", e)
            return data
