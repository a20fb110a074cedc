# PlotForge - Plot Capture and Rendering
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
PlotForge Scene Data Model

A Page is one captured drawing surface: its size, background fill, the
rectangular Clips referenced by its draw calls, and the DrawCalls
themselves in paint order.

DrawCall is a closed family of eight frozen dataclasses. Each one carries a
class-level ``KIND`` tag that renderers use to look up their handler, and a
``clip_id`` naming a Clip of the owning Page.

Pages are append-only while under construction and immutable after
``freeze()``. The history store only ever holds frozen pages, so renderers
can read them without copying.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Iterable, Iterator, Sequence

from . import color
from .constants import (
    LINE_CAP_ROUND, LINE_JOIN_ROUND, LINE_CAPS, LINE_JOINS,
    LTY_SOLID, LTY_BLANK, LTY_BLANK_UNSIGNED, LTY_MAX_DASHES,
    DEFAULT_MITRE_LIMIT, FONT_WEIGHT_NORMAL,
)
from .error import ClipNotFoundError, FrozenPageError, PageIntegrityError


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Rectangle:
    x: float
    y: float
    width: float
    height: float


def _as_point(p) -> Point:
    if isinstance(p, Point):
        return p
    x, y = p
    return Point(float(x), float(y))


def _as_rect(r) -> Rectangle:
    if isinstance(r, Rectangle):
        return r
    x, y, w, h = r
    return Rectangle(float(x), float(y), float(w), float(h))


def is_blank_lty(lty: int) -> bool:
    return lty == LTY_BLANK or lty == LTY_BLANK_UNSIGNED


def decode_dash(lty: int, lwd: float) -> list[float]:
    """Decode a nibble-packed line type into dash/gap lengths.

    The code is read as a sequence of 4-bit nibbles, low nibble first. Each
    nonzero nibble is a length in 1/96 inch, scaled by the line width (but
    never by less than 1). Decoding stops at the first zero nibble or after
    8 entries, so every integer decodes in bounded time.

    Solid and blank codes both decode to an empty list (no dashing).

    Args:
        lty: Line type code.
        lwd: Line width in 1/96 inch.

    Returns:
        Dash lengths in 1/96 inch.
    """
    if lty == LTY_SOLID or is_blank_lty(lty):
        return []
    code = lty & 0xFFFFFFFF
    scale = lwd if lwd > 1 else 1
    dashes = []
    while len(dashes) < LTY_MAX_DASHES:
        nibble = code & 0xF
        if nibble == 0:
            break
        dashes.append(nibble * scale)
        code >>= 4
    return dashes


@dataclass(frozen=True)
class LineInfo:
    """Stroke styling: color, width (1/96 inch), dash code, cap, join, miter limit."""

    col: int = color.BLACK
    lwd: float = 1.0
    lty: int = LTY_SOLID
    lend: int = LINE_CAP_ROUND
    ljoin: int = LINE_JOIN_ROUND
    lmitre: float = DEFAULT_MITRE_LIMIT

    def __post_init__(self):
        if self.lend not in LINE_CAPS:
            raise PageIntegrityError(f"Invalid line cap: {self.lend}")
        if self.ljoin not in LINE_JOINS:
            raise PageIntegrityError(f"Invalid line join: {self.ljoin}")

    @property
    def is_blank(self) -> bool:
        return is_blank_lty(self.lty)

    @property
    def is_solid(self) -> bool:
        return self.lty == LTY_SOLID

    @property
    def strokes(self) -> bool:
        """True when a stroke with this style paints anything."""
        return not color.is_transparent(self.col) and not self.is_blank

    def dashes(self) -> list[float]:
        return decode_dash(self.lty, self.lwd)


@dataclass(frozen=True)
class FontInfo:
    """Font descriptor. ``width`` is the precomputed advance width in pixels (0 if unknown)."""

    family: str = "sans"
    weight: int = FONT_WEIGHT_NORMAL
    italic: bool = False
    size: float = 12.0
    features: str = ""
    width: float = 0.0


@dataclass(frozen=True)
class Clip:
    id: int
    rect: Rectangle

    def __post_init__(self):
        object.__setattr__(self, "rect", _as_rect(self.rect))


# Draw calls

@dataclass(frozen=True)
class DrawCall:
    KIND: ClassVar[str] = ""

    clip_id: int


@dataclass(frozen=True)
class Rect(DrawCall):
    KIND: ClassVar[str] = "rect"

    rect: Rectangle
    fill: int = color.TRANSPARENT_WHITE
    line: LineInfo = field(default_factory=LineInfo)

    def __post_init__(self):
        object.__setattr__(self, "rect", _as_rect(self.rect))


@dataclass(frozen=True)
class Text(DrawCall):
    KIND: ClassVar[str] = "text"

    pos: Point
    text: str
    rot: float = 0.0
    hadj: float = 0.0
    col: int = color.BLACK
    font: FontInfo = field(default_factory=FontInfo)

    def __post_init__(self):
        object.__setattr__(self, "pos", _as_point(self.pos))


@dataclass(frozen=True)
class Circle(DrawCall):
    KIND: ClassVar[str] = "circle"

    center: Point
    radius: float
    fill: int = color.TRANSPARENT_WHITE
    line: LineInfo = field(default_factory=LineInfo)

    def __post_init__(self):
        object.__setattr__(self, "center", _as_point(self.center))


@dataclass(frozen=True)
class Line(DrawCall):
    KIND: ClassVar[str] = "line"

    orig: Point
    dest: Point
    line: LineInfo = field(default_factory=LineInfo)

    def __post_init__(self):
        object.__setattr__(self, "orig", _as_point(self.orig))
        object.__setattr__(self, "dest", _as_point(self.dest))


@dataclass(frozen=True)
class Polyline(DrawCall):
    KIND: ClassVar[str] = "polyline"
    MIN_POINTS: ClassVar[int] = 2

    points: tuple
    line: LineInfo = field(default_factory=LineInfo)

    def __post_init__(self):
        points = tuple(_as_point(p) for p in self.points)
        if len(points) < self.MIN_POINTS:
            raise PageIntegrityError(
                f"{self.KIND} needs at least {self.MIN_POINTS} points, got {len(points)}")
        object.__setattr__(self, "points", points)


@dataclass(frozen=True)
class Polygon(DrawCall):
    KIND: ClassVar[str] = "polygon"
    MIN_POINTS: ClassVar[int] = 3

    points: tuple
    fill: int = color.TRANSPARENT_WHITE
    line: LineInfo = field(default_factory=LineInfo)

    def __post_init__(self):
        points = tuple(_as_point(p) for p in self.points)
        if len(points) < self.MIN_POINTS:
            raise PageIntegrityError(
                f"{self.KIND} needs at least {self.MIN_POINTS} points, got {len(points)}")
        object.__setattr__(self, "points", points)


@dataclass(frozen=True)
class Path(DrawCall):
    """Compound closed path.

    ``nper`` holds the vertex count of each sub-path, consumed in order from
    ``points``. ``winding`` True selects the nonzero rule, False even-odd.
    """

    KIND: ClassVar[str] = "path"

    points: tuple
    nper: tuple
    winding: bool = True
    fill: int = color.TRANSPARENT_WHITE
    line: LineInfo = field(default_factory=LineInfo)

    def __post_init__(self):
        points = tuple(_as_point(p) for p in self.points)
        nper = tuple(int(n) for n in self.nper)
        if any(n < 1 for n in nper):
            raise PageIntegrityError(f"Path sub-path counts must be positive: {list(nper)}")
        if sum(nper) != len(points):
            raise PageIntegrityError(
                f"Path sub-path counts {list(nper)} do not match {len(points)} points")
        object.__setattr__(self, "points", points)
        object.__setattr__(self, "nper", nper)

    def subpaths(self) -> Iterator[tuple]:
        """Yield the points of each sub-path in order."""
        start = 0
        for n in self.nper:
            yield self.points[start:start + n]
            start += n


@dataclass(frozen=True)
class Raster(DrawCall):
    """Bitmap image.

    ``pixels`` is row-major, ``src_width * src_height`` packed colors.
    ``rect`` is the target area in page coordinates, ``rot`` degrees
    counter-clockwise around its origin.
    """

    KIND: ClassVar[str] = "raster"

    rect: Rectangle
    src_width: int
    src_height: int
    pixels: tuple
    rot: float = 0.0
    interpolate: bool = True

    def __post_init__(self):
        object.__setattr__(self, "rect", _as_rect(self.rect))
        if self.src_width < 1 or self.src_height < 1:
            raise PageIntegrityError(
                f"Raster source size must be positive: {self.src_width}x{self.src_height}")
        pixels = tuple(self.pixels)
        if len(pixels) != self.src_width * self.src_height:
            raise PageIntegrityError(
                f"Raster has {len(pixels)} pixels, expected "
                f"{self.src_width}x{self.src_height}")
        object.__setattr__(self, "pixels", pixels)


DRAW_CALL_TYPES = (Rect, Text, Circle, Line, Polyline, Polygon, Path, Raster)
DRAW_CALL_KINDS = tuple(cls.KIND for cls in DRAW_CALL_TYPES)


class Page:
    """One captured drawing surface.

    Clips keep insertion order and unique ids. DrawCalls are kept in paint
    order and need not be grouped by clip.
    """

    def __init__(self, id: str, width: float, height: float, fill: int = color.WHITE,
                 clips: Iterable[Clip] = (), draw_calls: Iterable[DrawCall] = ()) -> None:
        self.id = id
        self.width = float(width)
        self.height = float(height)
        self.fill = fill
        self._clips: list[Clip] = []
        self._draw_calls: list[DrawCall] = []
        self._frozen = False

        for clip in clips:
            self.add_clip(clip)
        # Draw calls passed in bulk are checked at render time, not here, so
        # a reader can hand over a page exactly as it was recorded.
        self._draw_calls.extend(draw_calls)

    def __repr__(self) -> str:
        return (f"Page(id={self.id!r}, size={self.width:g}x{self.height:g}, "
                f"clips={len(self._clips)}, draw_calls={len(self._draw_calls)}, "
                f"frozen={self._frozen})")

    @property
    def size(self) -> tuple[float, float]:
        return (self.width, self.height)

    @property
    def clips(self) -> Sequence[Clip]:
        return self._clips

    @property
    def draw_calls(self) -> Sequence[DrawCall]:
        return self._draw_calls

    @property
    def frozen(self) -> bool:
        return self._frozen

    def add_clip(self, clip: Clip) -> Clip:
        if self._frozen:
            raise FrozenPageError(f"Page {self.id} is frozen")
        if any(c.id == clip.id for c in self._clips):
            raise PageIntegrityError(f"Duplicate clip id {clip.id} in page {self.id}")
        self._clips.append(clip)
        return clip

    def add_draw_call(self, draw_call: DrawCall) -> DrawCall:
        if self._frozen:
            raise FrozenPageError(f"Page {self.id} is frozen")
        self.find_clip(draw_call.clip_id)
        self._draw_calls.append(draw_call)
        return draw_call

    def find_clip(self, clip_id: int) -> Clip:
        """Linear search for a clip by id.

        Raises:
            ClipNotFoundError: If no clip has this id.
        """
        for clip in self._clips:
            if clip.id == clip_id:
                return clip
        raise ClipNotFoundError(f"Clip {clip_id} not found in page {self.id}")

    def freeze(self) -> Page:
        if not self._frozen:
            self._clips = tuple(self._clips)
            self._draw_calls = tuple(self._draw_calls)
            self._frozen = True
        return self

    def copy(self) -> Page:
        """Return a mutable copy. DrawCalls are immutable and shared."""
        page = Page(self.id, self.width, self.height, self.fill, self._clips)
        page._draw_calls.extend(self._draw_calls)
        return page

    def snapshot(self) -> Page:
        """Return a frozen copy, or self if already frozen."""
        if self._frozen:
            return self
        return self.copy().freeze()
