# PlotForge - Plot Capture and Rendering
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
PlotForge command line interface.

Renders pages saved in the JSON record format to any registered output
format:

    plotforge plot.json -r pdf -o plot.pdf
    plotforge *.json -r png --scale 2 --output-dir out
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from importlib.metadata import PackageNotFoundError, version

from .config import ANTIALIAS_MODES, TIFF_COMPRESSIONS, RenderConfig
from .core.error import PlotForgeError
from .core.scene_reader import load_page, page_from_json
from .devices.registry import create_default_registry

logger = logging.getLogger(__name__)


def _get_version() -> str:
    try:
        return version("plotforge")
    except PackageNotFoundError:
        return "unknown"


def get_output_path(outputfile: str | None, inputfile: str, output_dir: str,
                    fileext: str) -> str:
    """
    Derive the output path for one input file.

    Args:
        outputfile: The -o argument value (or None)
        inputfile: Input file name, "-" for stdin
        output_dir: Directory for derived names
        fileext: Extension of the selected renderer, including the dot

    Returns:
        ``outputfile`` when given, else ``<output_dir>/<input base name><fileext>``
    """
    if outputfile:
        return outputfile
    if inputfile == "-":
        base = "stdin"
    else:
        base = os.path.splitext(os.path.basename(inputfile))[0]
    return os.path.join(output_dir, base + fileext)


def build_argument_parser(available_renderers: list[str]) -> argparse.ArgumentParser:
    """
    Create and configure the PlotForge argument parser.

    Args:
        available_renderers: Registered renderer ids.
    """
    parser = argparse.ArgumentParser(
        prog="plotforge",
        description="PlotForge - render captured plot pages",
    )
    parser.add_argument(
        "-V", "--version", action="version",
        version=f"PlotForge {_get_version()}"
    )
    parser.add_argument("inputfiles", nargs="*",
                        help="Page records in JSON format ('-' reads stdin)")
    parser.add_argument(
        "-o", "--output", dest="outputfile",
        help="Specify output filename (single input only)"
    )
    parser.add_argument(
        "--output-dir", dest="output_dir", default=".",
        help="Directory for derived output names (default: current directory)"
    )
    parser.add_argument(
        "-r", "--renderer", default="svg", choices=available_renderers,
        help=f'Specify output format ({", ".join(available_renderers)})'
    )
    parser.add_argument(
        "--scale", type=float, default=1.0,
        help="Scale factor applied to the page size (default: 1.0)"
    )
    parser.add_argument(
        "--antialias", choices=ANTIALIAS_MODES, default="gray",
        help="Set anti-aliasing mode for Cairo rendering (default: gray)"
    )
    parser.add_argument(
        "--extra-css", dest="extra_css_file",
        help="File of CSS rules appended to the SVG style sheet"
    )
    parser.add_argument(
        "--no-pdf-compress", action="store_true",
        help="Keep Cairo's uncompressed PDF content streams"
    )
    parser.add_argument(
        "--tiff-compression", choices=TIFF_COMPRESSIONS, default="deflate",
        help="TIFF strip compression (default: deflate)"
    )
    parser.add_argument(
        "--list-renderers", action="store_true",
        help="List available output formats and exit"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose output"
    )
    return parser


def _list_renderers(registry) -> None:
    for info in registry.infos():
        print(f"{info.id:<12} {info.type:<7} {info.fileext:<6} {info.description}")


def _write_output(path: str, data) -> None:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    if isinstance(data, str):
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(data)
    else:
        with open(path, "wb") as f:
            f.write(data)


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the PlotForge command line tool.

    Returns:
        Exit code: 0 for success, 1 for error
    """
    # Parse against the default ids first; the real registry needs options
    parser = build_argument_parser(list(create_default_registry()))
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    extra_css = None
    if args.extra_css_file:
        try:
            with open(args.extra_css_file, "r", encoding="utf-8") as f:
                extra_css = f.read()
        except OSError as e:
            print(f"PlotForge Error: Cannot read CSS file '{args.extra_css_file}': {e}")
            return 1

    try:
        config = RenderConfig(
            antialias=args.antialias,
            extra_css=extra_css,
            compress_pdf=not args.no_pdf_compress,
            tiff_compression=args.tiff_compression,
        )
    except ValueError as e:
        print(f"PlotForge Error: {e}")
        return 1
    registry = create_default_registry(config)

    if args.list_renderers:
        _list_renderers(registry)
        return 0

    if not args.inputfiles:
        parser.print_usage()
        print("PlotForge Error: No input files.")
        return 1
    if args.outputfile and len(args.inputfiles) > 1:
        print("PlotForge Error: -o can only be used with a single input file.")
        return 1
    if args.scale <= 0:
        print("PlotForge Error: Scale must be positive.")
        return 1

    info = registry.find_info(args.renderer)
    for inputfile in args.inputfiles:
        try:
            if inputfile == "-":
                page = page_from_json(sys.stdin.read())
            else:
                page = load_page(inputfile)
            renderer = registry.create(info.id)
            renderer.render(page, args.scale)
            output_path = get_output_path(args.outputfile, inputfile, args.output_dir,
                                          info.fileext)
            _write_output(output_path, renderer.get_data())
        except FileNotFoundError:
            print(f"PlotForge Error: Input file '{inputfile}' not found.")
            return 1
        except PermissionError:
            print(f"PlotForge Error: Permission denied for '{inputfile}'.")
            return 1
        except UnicodeDecodeError:
            print(f"PlotForge Error: '{inputfile}' is not a text file.")
            return 1
        except PlotForgeError as e:
            print(f"PlotForge Error: {inputfile}: {e}")
            return 1
        except OSError as e:
            print(f"PlotForge Error: Cannot process '{inputfile}': {e}")
            return 1
        logger.info("Wrote %s", output_path)

    return 0


if __name__ == "__main__":
    sys.exit(main())
