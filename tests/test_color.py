# PlotForge - Plot Capture and Rendering
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import unittest

from plotforge.core import color


class PackedColorTests(unittest.TestCase):
    def test_red_is_low_byte(self) -> None:
        col = color.rgba(0x11, 0x22, 0x33, 0x44)
        self.assertEqual(col, 0x44332211)
        self.assertEqual(
            (color.red(col), color.green(col), color.blue(col), color.alpha(col)),
            (0x11, 0x22, 0x33, 0x44),
        )

    def test_rgb_is_opaque(self) -> None:
        self.assertTrue(color.is_opaque(color.rgb(1, 2, 3)))
        self.assertFalse(color.is_transparent(color.rgb(1, 2, 3)))
        self.assertTrue(color.is_transparent(color.TRANSPARENT_WHITE))

    def test_fractions(self) -> None:
        col = color.rgba(255, 0, 51, 0)
        self.assertEqual(color.red_frac(col), 1.0)
        self.assertEqual(color.green_frac(col), 0.0)
        self.assertAlmostEqual(color.blue_frac(col), 0.2)
        self.assertEqual(color.alpha_frac(col), 0.0)

    def test_hex_formats(self) -> None:
        self.assertEqual(color.to_hex(color.rgb(255, 128, 0)), "#FF8000")
        self.assertEqual(color.to_hex_alpha(color.rgb(255, 128, 0)), "#FF8000")
        self.assertEqual(color.to_hex_alpha(color.rgba(255, 128, 0, 16)), "#FF800010")

    def test_from_hex(self) -> None:
        self.assertEqual(color.from_hex("#FF8000"), color.rgb(255, 128, 0))
        self.assertEqual(color.from_hex("#ff800010"), color.rgba(255, 128, 0, 16))
        col = color.rgba(1, 2, 3, 4)
        self.assertEqual(color.from_hex(color.to_hex_alpha(col)), col)

    def test_from_hex_rejects_garbage(self) -> None:
        for text in ("", "#12345", "red", "#GGGGGG"):
            with self.assertRaises(ValueError):
                color.from_hex(text)


if __name__ == "__main__":
    unittest.main()
