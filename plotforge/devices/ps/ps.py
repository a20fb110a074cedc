# PlotForge - Plot Capture and Rendering
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
PostScript Output Device

Renders a Page to a single-page PostScript document, or to Encapsulated
PostScript with a bounding box equal to the page size.
"""

import cairo

from ..common.renderer import CairoRenderer


class PsRenderer(CairoRenderer):

    def create_surface(self, stream, width, height):
        return cairo.PSSurface(stream, width, height)


class EpsRenderer(PsRenderer):

    def create_surface(self, stream, width, height):
        surface = super().create_surface(stream, width, height)
        surface.set_eps(True)
        return surface
