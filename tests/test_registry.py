# PlotForge - Plot Capture and Rendering
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import unittest

from plotforge.config import RenderConfig
from plotforge.core.error import RendererNotFoundError
from plotforge.devices.registry import RendererInfo, RendererRegistry, create_default_registry

from samples import sample_page

DEFAULT_IDS = {"svg", "svgz", "svgp", "svgzp", "png", "png-base64", "pdf", "ps", "eps",
               "tiff", "json"}


class RendererRegistryTests(unittest.TestCase):
    def test_default_ids(self) -> None:
        registry = create_default_registry()
        self.assertEqual(set(registry), DEFAULT_IDS)
        self.assertEqual(len(registry.infos()), len(DEFAULT_IDS))

    def test_unknown_id(self) -> None:
        registry = create_default_registry()
        with self.assertRaises(RendererNotFoundError):
            registry.find("bmp")
        with self.assertRaises(LookupError):
            registry.create("bmp")
        self.assertNotIn("bmp", registry)

    def test_metadata(self) -> None:
        info = create_default_registry().find_info("pdf")
        self.assertEqual(info.mime, "application/pdf")
        self.assertEqual(info.fileext, ".pdf")
        self.assertEqual(info.type, "vector")
        self.assertFalse(info.text)

    def test_text_flag_matches_output(self) -> None:
        registry = create_default_registry()
        page = sample_page()
        for info in registry.infos():
            renderer = registry.create(info.id)
            renderer.render(page, 1.0)
            expected = str if info.text else bytes
            self.assertIsInstance(renderer.get_data(), expected, info.id)

    def test_factories_make_fresh_instances(self) -> None:
        registry = create_default_registry()
        self.assertIsNot(registry.create("svg"), registry.create("svg"))

    def test_registries_are_independent(self) -> None:
        plain = create_default_registry()
        styled = create_default_registry(RenderConfig(extra_css=".x { fill: red; }"))
        page = sample_page()
        outputs = []
        for registry in (plain, styled):
            renderer = registry.create("svg")
            renderer.render(page, 1.0)
            outputs.append(renderer.get_data())
        self.assertNotIn(".x { fill: red; }", outputs[0])
        self.assertIn(".x { fill: red; }", outputs[1])

    def test_register(self) -> None:
        registry = RendererRegistry()
        info = RendererInfo("null", "text/plain", ".txt", "Null", "text", True, "Nothing.")
        registry.register(info, lambda: None)
        self.assertEqual(registry.find("null")[0], info)
        with self.assertRaises(ValueError):
            registry.register(info, lambda: None)
        with self.assertRaises(ValueError):
            RendererInfo("x", "a/b", ".x", "X", "audio", False, "")


if __name__ == "__main__":
    unittest.main()
