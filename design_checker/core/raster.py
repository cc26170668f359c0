"""Raster container, stride samplers, brightness maps and region tiling.

A Raster is an immutable (height, width, 4) RGBA uint8 buffer. Every analysis
module only reads it. Sampling is lazy: the samplers walk numpy views of the
buffer and never build a full per-pixel list, so large images stay cheap.

Decoding and bounded resizing (load_raster) sit here as the thin Pillow edge
of the engine; the analysis modules never see anything but a Raster.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import NamedTuple

import numpy as np
from PIL import Image, ImageDraw

from design_checker.core.palette import Color

ALPHA_CUTOFF = 128  # alpha <= this is treated as transparent
MAX_DIMENSION = 1920
_CHUNK = 4096  # pixels converted per numpy slice in iter_pixels


@dataclass(frozen=True, eq=False)
class Raster:
    """Read-only RGBA pixel buffer."""

    pixels: np.ndarray  # (h, w, 4) uint8

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @classmethod
    def from_array(cls, arr: np.ndarray) -> Raster:
        """Accept (h, w, 3) RGB or (h, w, 4) RGBA arrays. Copies the data."""
        arr = np.asarray(arr)
        if arr.ndim != 3 or arr.shape[2] not in (3, 4):
            raise ValueError(f'Expected (h, w, 3|4) array, got shape {arr.shape}')
        if arr.shape[2] == 3:
            alpha = np.full(arr.shape[:2] + (1,), 255, dtype=np.uint8)
            arr = np.concatenate([arr.astype(np.uint8), alpha], axis=2)
        pixels = np.array(arr, dtype=np.uint8, copy=True)
        pixels.flags.writeable = False
        return cls(pixels)

    @classmethod
    def from_bytes(cls, width: int, height: int, data: bytes) -> Raster:
        expected = width * height * 4
        if len(data) != expected:
            raise ValueError(f'RGBA buffer for {width}x{height} needs {expected} bytes, got {len(data)}')
        arr = np.frombuffer(data, dtype=np.uint8).reshape(height, width, 4)
        return cls.from_array(arr)

    @classmethod
    def from_image(cls, image: Image.Image) -> Raster:
        return cls.from_array(np.array(image.convert('RGBA')))

    @classmethod
    def solid(cls, width: int, height: int, rgb: tuple[int, int, int], alpha: int = 255) -> Raster:
        arr = np.empty((height, width, 4), dtype=np.uint8)
        arr[..., :3] = rgb
        arr[..., 3] = alpha
        return cls.from_array(arr)

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.pixels.copy())


class Region(NamedTuple):
    """Axis-aligned rectangle in raster coordinates."""

    x: int
    y: int
    width: int
    height: int


def load_raster(path: str, max_dimension: int = MAX_DIMENSION) -> Raster:
    """Decode an image file and shrink it to fit max_dimension (aspect preserved)."""
    with Image.open(path) as image:
        image.load()
        if max(image.size) > max_dimension:
            image.thumbnail((max_dimension, max_dimension), Image.Resampling.LANCZOS)
        return Raster.from_image(image)


def iter_pixels(raster: Raster, stride: int, opaque_only: bool = False) -> Iterator[tuple[int, int, Color]]:
    """Yield (x, y, colour) for every stride-th pixel in row-major order."""
    if stride < 1:
        raise ValueError(f'stride must be >= 1, got {stride}')
    flat = raster.pixels.reshape(-1, 4)
    w = raster.width
    span = stride * _CHUNK
    for start in range(0, len(flat), span):
        block = flat[start : start + span : stride].tolist()
        for offset, (r, g, b, a) in enumerate(block):
            if opaque_only and a <= ALPHA_CUTOFF:
                continue
            y, x = divmod(start + offset * stride, w)
            yield x, y, Color.from_rgb(r, g, b)


def iter_grid(raster: Raster, stride: int, opaque_only: bool = True) -> Iterator[tuple[int, int, Color]]:
    """Yield (x, y, colour) on a stride x stride lattice starting at (0, 0)."""
    if stride < 1:
        raise ValueError(f'stride must be >= 1, got {stride}')
    lattice = raster.pixels[::stride, ::stride]
    for j, row in enumerate(lattice):
        for i, (r, g, b, a) in enumerate(row.tolist()):
            if opaque_only and a <= ALPHA_CUTOFF:
                continue
            yield i * stride, j * stride, Color.from_rgb(r, g, b)


def brightness_map(raster: Raster) -> np.ndarray:
    """Mean of R, G, B per pixel as float64 (h, w)."""
    return raster.pixels[..., :3].astype(np.float64).sum(axis=2) / 3.0


def luma_map(raster: Raster) -> np.ndarray:
    """Rec. 709 greyscale, truncated to whole levels like a greyscale conversion would store it."""
    rgb = raster.pixels[..., :3].astype(np.float64)
    return np.floor(0.2126 * rgb[..., 0] + 0.7152 * rgb[..., 1] + 0.0722 * rgb[..., 2])


def window(values: np.ndarray, cx: int, cy: int, radius: int) -> np.ndarray:
    """Square window [c - radius, c + radius) around (cx, cy), clamped to bounds."""
    h, w = values.shape[:2]
    return values[max(0, cy - radius) : min(h, cy + radius), max(0, cx - radius) : min(w, cx + radius)]


def grid_regions(width: int, height: int, cells: int = 3) -> list[Region]:
    """Tile the raster into cells x cells regions, row by row.

    Cell size is ceil(dim / cells); the last row/column is clamped to the edge
    and may be narrower (or empty on tiny rasters). Regions never overlap.
    """
    cell_w = -(-width // cells)
    cell_h = -(-height // cells)
    regions = []
    for row in range(cells):
        for col in range(cells):
            x = min(col * cell_w, width)
            y = min(row * cell_h, height)
            regions.append(Region(x, y, max(0, min(cell_w, width - x)), max(0, min(cell_h, height - y))))
    return regions


def annotate(raster: Raster, boxes: list[Region], colour: str = '#ff0000') -> Image.Image:
    """Copy the raster as an image with rectangle outlines drawn over each box."""
    image = raster.to_image()
    draw = ImageDraw.Draw(image)
    outline = Color.parse(colour).rgb + (255,)
    for box in boxes:
        draw.rectangle((box.x, box.y, box.x + box.width, box.y + box.height), outline=outline)
    return image
