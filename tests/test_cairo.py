# PlotForge - Plot Capture and Rendering
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import base64
import io
import sys
import unittest

import cairo
import numpy as np
from PIL import Image
from pypdf import PdfReader

from plotforge.config import RenderConfig
from plotforge.core import color
from plotforge.core.constants import LINE_CAP_BUTT, LTY_BLANK, LWD_TO_PT, MIN_LINE_WIDTH
from plotforge.core.error import EncodingError
from plotforge.core.page_builder import PageBuilder
from plotforge.core.scene import LineInfo
from plotforge.devices.common.cairo_images import raster_png, raster_to_argb32
from plotforge.devices.common.cairo_utils import set_linetype
from plotforge.devices.pdf.pdf import PdfRenderer
from plotforge.devices.png.png import BASE64_PREFIX, PngBase64Renderer, PngRenderer
from plotforge.devices.ps.ps import EpsRenderer, PsRenderer
from plotforge.devices.tiff.tiff import TiffRenderer, encode_tiff

from samples import BLUE, GREEN, RED, sample_page


def render(renderer, page, scale=1.0):
    renderer.render(page, scale)
    return renderer.get_data()


class RasterConversionTests(unittest.TestCase):
    def test_premultiplied_argb32(self) -> None:
        page = sample_page()
        raster = page.draw_calls[-1]
        data, stride = raster_to_argb32(raster)
        self.assertGreaterEqual(stride, 8)
        words = [int.from_bytes(data[i:i + 4], sys.byteorder)
                 for i in (0, 4, stride, stride + 4)]
        self.assertEqual(words[0], 0xFFFF0000)
        self.assertEqual(words[1], 0xFF00FF00)
        self.assertEqual(words[2], 0xFF0000FF)
        self.assertEqual(words[3], 0x80000000)

    def test_partial_alpha_scales_channels(self) -> None:
        b = PageBuilder()
        b.new_page(10, 10)
        raster = b.raster([color.rgba(255, 255, 255, 51)], 1, 1, 0, 0, 1, 1)
        data, _ = raster_to_argb32(raster)
        word = int.from_bytes(data[:4], sys.byteorder)
        self.assertEqual(word, (51 << 24) | (51 << 16) | (51 << 8) | 51)

    def test_raster_png(self) -> None:
        raster = sample_page().draw_calls[-1]
        with Image.open(io.BytesIO(raster_png(raster))) as im:
            self.assertEqual(im.size, (2, 2))
            self.assertEqual(im.convert("RGBA").getpixel((0, 0)), (255, 0, 0, 255))


def paint(builder, config=None):
    """Render the builder's page to PNG without anti-aliasing and decode it."""
    data = render(PngRenderer(config or RenderConfig(antialias="none")), builder.close_page())
    with Image.open(io.BytesIO(data)) as im:
        return im.convert("RGBA")


def canvas(fill=color.WHITE):
    b = PageBuilder()
    b.new_page(100, 100, fill)
    return b


NO_LINE = LineInfo(lty=LTY_BLANK)
WHITE_PX = (255, 255, 255, 255)
BLACK_PX = (0, 0, 0, 255)
RED_PX = (255, 0, 0, 255)
BLUE_PX = (0, 0, 255, 255)


class CairoPaintTests(unittest.TestCase):
    def test_path_subpaths_are_separate(self) -> None:
        b = canvas()
        b.path([(10, 10), (40, 10), (40, 40), (10, 40), (60, 10), (90, 10), (75, 40)],
               [4, 3], fill=BLUE, line=NO_LINE)
        im = paint(b)
        self.assertEqual(im.getpixel((25, 25)), BLUE_PX)
        self.assertEqual(im.getpixel((75, 20)), BLUE_PX)
        # Inside the polygon the seven points would make if joined
        self.assertEqual(im.getpixel((50, 35)), WHITE_PX)

    def test_winding_rule(self) -> None:
        points = [(10, 10), (90, 10), (90, 90), (10, 90),
                  (30, 30), (70, 30), (70, 70), (30, 70)]
        for winding, centre in ((True, BLUE_PX), (False, WHITE_PX)):
            with self.subTest(winding=winding):
                b = canvas()
                b.path(points, [4, 4], winding=winding, fill=BLUE, line=NO_LINE)
                im = paint(b)
                self.assertEqual(im.getpixel((20, 20)), BLUE_PX)
                self.assertEqual(im.getpixel((50, 50)), centre)

    def test_clip_switching(self) -> None:
        b = canvas()
        b.clip(0, 0, 50, 100)
        b.rect(0, 0, 100, 100, fill=RED, line=NO_LINE)
        b.clip(0, 0, 100, 100)
        b.rect(60, 0, 10, 10, fill=BLUE, line=NO_LINE)
        im = paint(b)
        self.assertEqual(im.getpixel((25, 50)), RED_PX)
        self.assertEqual(im.getpixel((75, 50)), WHITE_PX)
        self.assertEqual(im.getpixel((65, 5)), BLUE_PX)

    def test_transparent_fill_leaves_background(self) -> None:
        b = canvas(fill=GREEN)
        b.rect(10, 10, 80, 80, fill=color.rgba(255, 0, 0, 0), line=NO_LINE)
        b.circle(50, 50, 20, fill=color.TRANSPARENT_WHITE,
                 line=LineInfo(col=color.rgba(0, 0, 0, 0), lwd=10))
        self.assertEqual(paint(b).getpixel((50, 50)), (0, 255, 0, 255))

    def test_dash_gaps(self) -> None:
        # 0x44 at lwd 8: 32 on, 32 off, in 1/96 inch; 24 px each at 72/96
        b = canvas()
        b.line(0, 50, 100, 50, line=LineInfo(lwd=8, lty=0x44, lend=LINE_CAP_BUTT))
        im = paint(b)
        self.assertEqual(im.getpixel((12, 50)), BLACK_PX)
        self.assertEqual(im.getpixel((36, 50)), WHITE_PX)
        self.assertEqual(im.getpixel((60, 50)), BLACK_PX)
        self.assertEqual(im.getpixel((84, 50)), WHITE_PX)

    def test_line_width_in_points(self) -> None:
        # lwd 16 is 12 px wide: rows 44 to 55
        b = canvas()
        b.line(0, 50, 100, 50, line=LineInfo(lwd=16, lend=LINE_CAP_BUTT))
        im = paint(b)
        self.assertEqual(im.getpixel((50, 44)), BLACK_PX)
        self.assertEqual(im.getpixel((50, 55)), BLACK_PX)
        self.assertEqual(im.getpixel((50, 42)), WHITE_PX)
        self.assertEqual(im.getpixel((50, 57)), WHITE_PX)

    def test_line_width_floor(self) -> None:
        cc = cairo.Context(cairo.ImageSurface(cairo.FORMAT_ARGB32, 1, 1))
        set_linetype(cc, LineInfo(lwd=0))
        self.assertAlmostEqual(cc.get_line_width(), MIN_LINE_WIDTH * LWD_TO_PT)
        set_linetype(cc, LineInfo(lwd=2, lty=0x31))
        self.assertEqual(cc.get_dash(), ((1.5, 4.5), 0.0))


class PngTests(unittest.TestCase):
    def test_size_follows_scale(self) -> None:
        for scale, size in ((1.0, (200, 100)), (2.0, (400, 200)), (0.5, (100, 50))):
            data = render(PngRenderer(), sample_page(), scale)
            with Image.open(io.BytesIO(data)) as im:
                self.assertEqual(im.format, "PNG")
                self.assertEqual(im.size, size)

    def test_pixels(self) -> None:
        data = render(PngRenderer(), sample_page())
        with Image.open(io.BytesIO(data)) as im:
            im = im.convert("RGBA")
            self.assertEqual(im.getpixel((35, 25)), (255, 0, 0, 255))
            self.assertEqual(im.getpixel((195, 5)), (255, 255, 255, 255))

    def test_transparent_background(self) -> None:
        data = render(PngRenderer(), sample_page(fill=color.TRANSPARENT_WHITE))
        with Image.open(io.BytesIO(data)) as im:
            self.assertEqual(im.convert("RGBA").getpixel((195, 5))[3], 0)

    def test_base64(self) -> None:
        text = render(PngBase64Renderer(), sample_page())
        self.assertIsInstance(text, str)
        self.assertTrue(text.startswith(BASE64_PREFIX))
        png = base64.b64decode(text[len(BASE64_PREFIX):])
        self.assertTrue(png.startswith(b"\x89PNG\r\n\x1a\n"))

    def test_antialias_config(self) -> None:
        data = render(PngRenderer(RenderConfig(antialias="none")), sample_page())
        self.assertTrue(data.startswith(b"\x89PNG"))


class PdfTests(unittest.TestCase):
    def _media_box(self, data):
        reader = PdfReader(io.BytesIO(data))
        self.assertEqual(len(reader.pages), 1)
        box = reader.pages[0].mediabox
        return float(box.width), float(box.height)

    def test_page_size(self) -> None:
        data = render(PdfRenderer(), sample_page())
        self.assertTrue(data.startswith(b"%PDF"))
        self.assertEqual(self._media_box(data), (200.0, 100.0))

    def test_uncompressed(self) -> None:
        data = render(PdfRenderer(RenderConfig(compress_pdf=False)), sample_page(), 2.0)
        self.assertEqual(self._media_box(data), (400.0, 200.0))


class PostScriptTests(unittest.TestCase):
    def test_ps(self) -> None:
        data = render(PsRenderer(), sample_page())
        self.assertTrue(data.startswith(b"%!PS-Adobe-3.0"))
        self.assertNotIn(b"EPSF", data.splitlines()[0])

    def test_eps(self) -> None:
        data = render(EpsRenderer(), sample_page())
        self.assertTrue(data.splitlines()[0].startswith(b"%!PS-Adobe-3.0 EPSF"))
        self.assertIn(b"%%BoundingBox: 0 0 200 100", data)


class TiffTests(unittest.TestCase):
    def _open(self, data):
        im = Image.open(io.BytesIO(data))
        im.load()
        return im

    def test_associated_alpha(self) -> None:
        im = self._open(render(TiffRenderer(), sample_page()))
        self.assertEqual(im.format, "TIFF")
        self.assertEqual(im.size, (200, 100))
        self.assertIn(im.tag_v2[338], (1, (1,)))
        self.assertEqual(im.tag_v2[259], 8)
        self.assertEqual(im.convert("RGBA").getpixel((35, 25)), (255, 0, 0, 255))

    def test_uncompressed(self) -> None:
        renderer = TiffRenderer(RenderConfig(tiff_compression="none"))
        im = self._open(render(renderer, sample_page(), 0.5))
        self.assertEqual(im.size, (100, 50))
        self.assertEqual(im.tag_v2[259], 1)
        self.assertEqual(im.convert("RGBA").getpixel((95, 2)), (255, 255, 255, 255))

    def _opaque_pixels(self, width, height):
        rgba = np.zeros((height, width, 4), dtype=np.uint8)
        rgba[..., 0] = np.arange(width, dtype=np.uint32)[None, :] % 256
        rgba[..., 1] = np.arange(height, dtype=np.uint32)[:, None] % 256
        rgba[..., 2] = 7
        rgba[..., 3] = 255
        return rgba

    def test_encode_decodes_pixels(self) -> None:
        # (3, 5) fits one strip; (700, 13) spans seven
        for width, height in ((1, 1), (3, 5), (700, 13)):
            for compression in ("deflate", "none"):
                with self.subTest(size=(width, height), compression=compression):
                    rgba = self._opaque_pixels(width, height)
                    im = self._open(encode_tiff(rgba, compression))
                    self.assertEqual(im.size, (width, height))
                    np.testing.assert_array_equal(np.asarray(im.convert("RGBA")), rgba)

    def test_strips_follow_directory(self) -> None:
        data = encode_tiff(self._opaque_pixels(700, 13), "none")
        im = self._open(data)
        offsets = im.tag_v2[273]
        counts = im.tag_v2[279]
        self.assertEqual(len(offsets), 7)
        self.assertEqual(offsets[-1] + counts[-1], len(data))
        self.assertEqual(sum(counts), 700 * 13 * 4)

    def test_empty_image_fails(self) -> None:
        b = PageBuilder()
        b.new_page(0, 10)
        renderer = TiffRenderer()
        with self.assertRaises(EncodingError):
            renderer.render(b.close_page(), 1.0)
        self.assertEqual(renderer.get_data(), b"")


if __name__ == "__main__":
    unittest.main()
