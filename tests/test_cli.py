# PlotForge - Plot Capture and Rendering
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import contextlib
import io
import os
import tempfile
import unittest

from PIL import Image

from plotforge.cli import get_output_path, main
from plotforge.devices.json.json_out import JsonRenderer

from samples import sample_page


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = self._tmp.name
        renderer = JsonRenderer()
        renderer.render(sample_page(), 1.0)
        self.input = os.path.join(self.tmp, "plot.json")
        with open(self.input, "w", encoding="utf-8") as f:
            f.write(renderer.get_data())

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _run(self, *argv) -> tuple[int, str]:
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            code = main(list(argv))
        return code, out.getvalue()

    def test_render_svg(self) -> None:
        output = os.path.join(self.tmp, "out.svg")
        code, _ = self._run(self.input, "-r", "svg", "-o", output)
        self.assertEqual(code, 0)
        with open(output, encoding="utf-8") as f:
            self.assertTrue(f.read().startswith("<svg "))

    def test_derived_output_name(self) -> None:
        out_dir = os.path.join(self.tmp, "out")
        code, _ = self._run(self.input, "-r", "png", "--scale", "2", "--output-dir", out_dir)
        self.assertEqual(code, 0)
        with Image.open(os.path.join(out_dir, "plot.png")) as im:
            self.assertEqual(im.size, (400, 200))

    def test_list_renderers(self) -> None:
        code, text = self._run("--list-renderers")
        self.assertEqual(code, 0)
        self.assertIn("png-base64", text)

    def test_missing_input(self) -> None:
        code, text = self._run(os.path.join(self.tmp, "missing.json"))
        self.assertEqual(code, 1)
        self.assertIn("PlotForge Error:", text)

    def test_malformed_input(self) -> None:
        bad = os.path.join(self.tmp, "bad.json")
        with open(bad, "w", encoding="utf-8") as f:
            f.write("{}")
        code, text = self._run(bad)
        self.assertEqual(code, 1)
        self.assertIn("PlotForge Error:", text)

    def test_get_output_path(self) -> None:
        self.assertEqual(get_output_path("x.pdf", "a.json", "out", ".pdf"), "x.pdf")
        self.assertEqual(get_output_path(None, "dir/a.json", "out", ".pdf"),
                         os.path.join("out", "a.pdf"))
        self.assertEqual(get_output_path(None, "-", ".", ".svg"), os.path.join(".", "stdin.svg"))


if __name__ == "__main__":
    unittest.main()
