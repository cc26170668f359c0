"""Palette extraction, colour-harmony classification and palette contrast checks.

Samples every 10th pixel (row-major), counts exact hex colours and keeps the
most frequent ones (ties: first seen wins). A seed palette from an external
extractor can be supplied; it is topped up with frequency-ranked colours,
skipping duplicates. A raster with nothing to sample falls back to the
achromatic ramp #000000..#ffffff.

Harmony, first match wins:
  complementary        any pair 170-190 deg apart      85 + 5/pair, max 100
  triadic              any triple ~120 deg apart       80 + 5/triple, max 100
  analogous            hue range < 60                  80
  split_complementary  hue range < 120                 70
  mixed                otherwise                       60
  insufficient_colors  fewer than 2 colours            0

The first four palette entries are cross-checked for WCAG AA contrast; pairs
under 4.5:1 are listed as contrast issues.

Example:
    uv run design-tool colour screenshot.png
    uv run design-tool colour screenshot.png --seed-palette '#1e40af,#f59e0b'
"""

from __future__ import annotations

from collections.abc import Iterable
from itertools import combinations
from typing import NamedTuple

from design_checker.core.palette import Color, contrast_ratio, hue_distance
from design_checker.core.raster import Raster, iter_pixels
from design_checker.core.types import (
    AnalysisRequest,
    ColorResult,
    ContrastCheck,
    Degraded,
    Ok,
    Report,
    Technique,
    guarded,
)

technique = Technique(
    name='colour',
    help='Palette extraction, harmony classification and palette contrast checks.',
)

SAMPLE_STRIDE = 10
DEFAULT_COUNT = 8
CONTRAST_CHECK_COUNT = 4
FALLBACK_RAMP = ('#000000', '#333333', '#666666', '#999999', '#cccccc', '#ffffff')

HARMONY_TYPES = ('complementary', 'triadic', 'analogous', 'split_complementary', 'mixed', 'insufficient_colors')


class Harmony(NamedTuple):
    type: str
    score: int


def count_colours(samples: Iterable[tuple[int, int, Color]]) -> dict[Color, int]:
    """Occurrence count per colour; dict order is first-seen order."""
    counts: dict[Color, int] = {}
    for _x, _y, colour in samples:
        counts[colour] = counts.get(colour, 0) + 1
    return counts


def rank_colours(counts: dict[Color, int], limit: int) -> list[Color]:
    # sorted() is stable, so equal counts keep first-seen order
    ranked = sorted(counts.items(), key=lambda item: -item[1])
    return [colour for colour, _n in ranked[:limit]]


def extract_palette(raster: Raster, count: int = DEFAULT_COUNT, seed: Iterable[str] | None = None) -> list[Color]:
    """Top `count` colours of the raster, optionally completing a seed palette."""
    palette: list[Color] = []
    for value in seed or ():
        try:
            colour = Color.parse(value)
        except ValueError:
            continue
        if colour not in palette:
            palette.append(colour)
    palette = palette[:count]
    if len(palette) >= count:
        return palette

    extracted = rank_colours(count_colours(iter_pixels(raster, SAMPLE_STRIDE)), count)
    if not extracted and not palette:
        return [Color(h) for h in FALLBACK_RAMP[:count]]

    for colour in extracted:
        if len(palette) >= count:
            break
        if colour not in palette:
            palette.append(colour)
    return palette


def _count_triads(hues: list[float]) -> int:
    # O(n^3) over the palette; fine for palettes of a handful of colours
    triads = 0
    for trio in combinations(hues, 3):
        lo, mid, hi = sorted(trio)
        gaps = (mid - lo, hi - mid, 360 - hi + lo)
        if all(abs(gap - 120) < 30 for gap in gaps):
            triads += 1
    return triads


def classify_harmony(palette: list[Color] | list[str]) -> Harmony:
    colours = []
    for value in palette:
        try:
            colours.append(Color.parse(value))
        except ValueError:
            colours.append(Color('#000000'))

    if len(colours) < 2:
        return Harmony('insufficient_colors', 0)

    hues = [c.hue for c in colours]

    pairs = sum(1 for h1, h2 in combinations(hues, 2) if 170 < hue_distance(h1, h2) < 190)
    if pairs > 0:
        return Harmony('complementary', min(85 + pairs * 5, 100))

    triads = _count_triads(hues)
    if triads > 0:
        return Harmony('triadic', min(80 + triads * 5, 100))

    hue_range = max(hues) - min(hues)
    if hue_range < 60:
        return Harmony('analogous', 80)
    if hue_range < 120:
        return Harmony('split_complementary', 70)
    return Harmony('mixed', 60)


def check_accessibility(foreground: str | Color, background: str | Color, location: str = '') -> ContrastCheck:
    return ContrastCheck(
        foreground=str(foreground),
        background=str(background),
        ratio=contrast_ratio(foreground, background),
        location=location,
    )


def color_statistics(palette: list[Color]) -> dict[str, float]:
    """Mean HSL lightness/saturation and hue spread of a palette."""
    if not palette:
        return {'brightness_avg': 0.0, 'saturation_avg': 0.0, 'hue_diversity': 0.0}
    hsl = [c.hsl() for c in palette]
    hues = [h for h, _s, _l in hsl]
    return {
        'brightness_avg': round(sum(light for _h, _s, light in hsl) / len(hsl), 3),
        'saturation_avg': round(sum(s for _h, s, _l in hsl) / len(hsl), 3),
        'hue_diversity': round((max(hues) - min(hues)) / 360, 3),
    }


def analyze(raster: Raster, count: int = DEFAULT_COUNT, seed: Iterable[str] | None = None) -> ColorResult:
    palette = extract_palette(raster, count, seed)
    harmony = classify_harmony(palette)

    issues = []
    head = palette[:CONTRAST_CHECK_COUNT]
    for fg, bg in combinations(head, 2):
        check = check_accessibility(fg, bg)
        if not check.passes_aa:
            issues.append(check)

    return ColorResult(
        palette=[c.hex for c in palette],
        harmony_type=harmony.type,
        harmony_score=harmony.score,
        contrast_issues=issues,
        statistics=color_statistics(palette),
    )


def _fallback(count: int = DEFAULT_COUNT) -> ColorResult:
    palette = [Color(h) for h in FALLBACK_RAMP[:count]]
    harmony = classify_harmony(palette)
    return ColorResult(
        palette=[c.hex for c in palette],
        harmony_type=harmony.type,
        harmony_score=harmony.score,
        statistics=color_statistics(palette),
    )


def evaluate(raster: Raster, count: int = DEFAULT_COUNT, seed: Iterable[str] | None = None) -> Ok | Degraded:
    return guarded(analyze, lambda: _fallback(count), raster, count, seed)


@technique.run
def run(request: AnalysisRequest, report: Report) -> None:
    report.add_outcome('colour', evaluate(request.raster, request.palette_size, request.seed_palette))
