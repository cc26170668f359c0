"""Composition analysis: grid lines, balance, spacing, hierarchy, alignment.

Line detection: a pixel is an edge when its brightness differs from either
neighbour across the scan direction by more than 30. A column (row) with
edge pixels on more than 10% of its length is a line. Lines within 20px of
the last kept line are merged away.

  grid_alignment       >= 3 lines on both axes, gap std-dev < 30% of mean gap
  balance              radial (radial score > 0.7) > symmetric (mirror
                       similarity > 0.8) > asymmetric
  spacing_consistency  > 60% of a 10x10 sample lattice has 30-80% bright
                       (> 200) pixels within 20px
  visual_hierarchy     3x3 regions ranked by contrast + mean brightness
  alignment_score      lines, common aspect ratio, rule-of-thirds contrast

Score: 25 grid + 25/23/20 balance + 25 spacing + alignment/4.

Any failure returns a fixed result (score 50, asymmetric, no grid/spacing).

Example:
    uv run design-tool layout screenshot.png --design-type mobile
"""

from __future__ import annotations

import numpy as np

from design_checker.core.raster import Raster, Region, brightness_map, grid_regions, luma_map, window
from design_checker.core.scoring import round_half_up
from design_checker.core.types import AnalysisRequest, Degraded, LayoutResult, Ok, Report, Technique, guarded

technique = Technique(
    name='layout',
    help='Grid alignment, balance, spacing, visual hierarchy and alignment score.',
)

EDGE_THRESHOLD = 30
LINE_FRACTION = 0.1
MIN_LINE_GAP = 20
GRID_MIN_LINES = 3
GRID_MAX_CV = 0.3

RADIAL_THRESHOLD = 0.7
SYMMETRY_THRESHOLD = 0.8
RADIAL_VARIANCE_SCALE = 10000

SPACING_CELLS = 10
SPACING_RADIUS = 20
BRIGHT_LEVEL = 200
SPACING_RATIO_RANGE = (0.3, 0.8)
SPACING_MIN_FRACTION = 0.6

FOCAL_CONTRAST = 30
SECONDARY_CONTRAST = 20

COMMON_RATIOS = (16 / 9, 4 / 3, 3 / 2, 5 / 4, 1.618)
RATIO_TOLERANCE = 0.1
THIRDS_RADIUS = 10
THIRDS_CONTRAST = 50
THIRDS_POINTS = 5
THIRDS_CAP = 30

BALANCE_POINTS = {'symmetric': 25, 'radial': 23, 'asymmetric': 20}

POSITIONS = (
    'top-left',
    'top-center',
    'top-right',
    'middle-left',
    'center',
    'middle-right',
    'bottom-left',
    'bottom-center',
    'bottom-right',
)

DESIGN_HINTS = {
    'web': 'Layout follows web design conventions',
    'mobile': 'Vertical flow optimized for mobile viewing',
    'print': 'Traditional print layout hierarchy',
}


def merge_close_lines(lines: list[int], min_distance: int = MIN_LINE_GAP) -> list[int]:
    """Keep the first line of each cluster; later lines must be min_distance past the last kept one."""
    kept: list[int] = []
    for pos in lines:
        if not kept or pos - kept[-1] >= min_distance:
            kept.append(pos)
    return kept


def detect_vertical_lines(values: np.ndarray) -> list[int]:
    h, w = values.shape
    if h < 3 or w < 3:
        return []
    centre = values[1:-1, 1:-1]
    left = np.abs(centre - values[1:-1, :-2]) > EDGE_THRESHOLD
    right = np.abs(centre - values[1:-1, 2:]) > EDGE_THRESHOLD
    counts = (left | right).sum(axis=0)
    lines = [int(i) + 1 for i in np.flatnonzero(counts > h * LINE_FRACTION)]
    return merge_close_lines(lines)


def detect_horizontal_lines(values: np.ndarray) -> list[int]:
    return detect_vertical_lines(values.T)


def spacing_is_regular(lines: list[int]) -> bool:
    """True when there are >= 3 lines and gap std-dev < 30% of the mean gap."""
    if len(lines) < GRID_MIN_LINES:
        return False
    gaps = np.diff(np.asarray(lines, dtype=np.float64))
    mean = gaps.mean()
    return len(gaps) >= 2 and float(gaps.std()) < mean * GRID_MAX_CV


def grid_alignment(luma: np.ndarray) -> bool:
    return spacing_is_regular(detect_vertical_lines(luma)) and spacing_is_regular(detect_horizontal_lines(luma))


def mirror_similarity(values: np.ndarray) -> float:
    """1 - mean |left - mirrored right| / 255 over the two half-widths."""
    h, w = values.shape
    half = w // 2
    if h == 0 or half == 0:
        raise ValueError(f'Cannot mirror a {w}x{h} raster')
    left = values[:, :half]
    right = values[:, ::-1][:, :half]
    return max(0.0, 1.0 - float(np.abs(left - right).mean()) / 255.0)


def radial_score(values: np.ndarray) -> tuple[float, float]:
    """Return (score, spread) of brightness inside the central disc.

    Mean brightness is weighted by 1 - d/max_radius; the score uses the plain
    mean squared deviation from that weighted mean. Spread is max - min.
    """
    h, w = values.shape
    cx, cy = w / 2, h / 2
    max_radius = min(cx, cy)
    if max_radius <= 0:
        raise ValueError(f'No centre disc for a {w}x{h} raster')
    ys, xs = np.ogrid[:h, :w]
    dist = np.sqrt((xs - cx) ** 2 + (ys - cy) ** 2)
    inside = dist <= max_radius
    weights = 1.0 - dist[inside] / max_radius
    disc = values[inside]
    total_weight = weights.sum()
    if total_weight <= 0:
        raise ValueError('Zero total weight in centre disc')
    avg = float((disc * weights).sum() / total_weight)
    variance = float(((disc - avg) ** 2).mean())
    return max(0.0, 1.0 - variance / RADIAL_VARIANCE_SCALE), float(disc.max() - disc.min())


def classify_balance(values: np.ndarray) -> str:
    symmetry = mirror_similarity(values)
    radial, spread = radial_score(values)
    # a flat disc has no radial structure
    if radial > RADIAL_THRESHOLD and spread > 0:
        return 'radial'
    if symmetry > SYMMETRY_THRESHOLD:
        return 'symmetric'
    return 'asymmetric'


def spacing_consistency(values: np.ndarray) -> bool:
    h, w = values.shape
    step_y = max(1, h // SPACING_CELLS)
    step_x = max(1, w // SPACING_CELLS)
    lo, hi = SPACING_RATIO_RANGE
    good = 0
    total = 0
    for cy in range(0, h, step_y):
        for cx in range(0, w, step_x):
            patch = window(values, cx, cy, SPACING_RADIUS)
            ratio = float((patch > BRIGHT_LEVEL).mean())
            if lo < ratio < hi:
                good += 1
            total += 1
    return total > 0 and good / total > SPACING_MIN_FRACTION


def region_stats(values: np.ndarray, region: Region) -> tuple[float, float]:
    """(contrast, mean brightness) of a region; empty regions give (0, 0)."""
    patch = values[region.y : region.y + region.height, region.x : region.x + region.width]
    if patch.size == 0:
        return 0.0, 0.0
    return float(patch.max() - patch.min()), float(patch.mean())


def visual_hierarchy(values: np.ndarray, design_type: str = 'web') -> list[str]:
    h, w = values.shape
    ranked = []
    for index, region in enumerate(grid_regions(w, h)):
        contrast, brightness = region_stats(values, region)
        ranked.append((index, contrast, brightness))
    ranked.sort(key=lambda item: -(item[1] + item[2]))

    hierarchy = []
    top_index, top_contrast, _ = ranked[0]
    if top_contrast > FOCAL_CONTRAST:
        hierarchy.append(f'Strong focal point detected in {POSITIONS[top_index]}')
    else:
        hierarchy.append('Balanced composition with no dominant focal point')

    second_index, second_contrast, _ = ranked[1]
    if second_contrast > SECONDARY_CONTRAST:
        hierarchy.append(f'Secondary emphasis in {POSITIONS[second_index]}')

    hint = DESIGN_HINTS.get(design_type)
    if hint:
        hierarchy.append(hint)
    return hierarchy


def local_contrast(values: np.ndarray, cx: int, cy: int, radius: int = THIRDS_RADIUS) -> float:
    patch = window(values, cx, cy, radius)
    if patch.size == 0:
        return 0.0
    return float(patch.max() - patch.min())


def rule_of_thirds(values: np.ndarray) -> int:
    h, w = values.shape
    points = 0
    for x in (w / 3, 2 * w / 3):
        for y in (h / 3, 2 * h / 3):
            if local_contrast(values, int(x), int(y)) > THIRDS_CONTRAST:
                points += THIRDS_POINTS
    return min(points, THIRDS_CAP)


def alignment_score(values: np.ndarray) -> int:
    h, w = values.shape
    score = 0
    if len(detect_vertical_lines(values)) >= 2:
        score += 25
    if len(detect_horizontal_lines(values)) >= 2:
        score += 25
    aspect = w / h
    if any(abs(aspect - ratio) < RATIO_TOLERANCE for ratio in COMMON_RATIOS):
        score += 20
    score += rule_of_thirds(values)
    return round_half_up(max(0, min(100, score)))


def composition_score(grid: bool, balance: str, spacing: bool, alignment: int) -> int:
    score = 25.0 if grid else 0.0
    score += BALANCE_POINTS[balance]
    score += 25.0 if spacing else 0.0
    score += alignment / 100 * 25
    return round_half_up(score)


def analyze(raster: Raster, design_type: str = 'web') -> LayoutResult:
    if raster.width == 0 or raster.height == 0:
        raise ValueError(f'Empty raster {raster.width}x{raster.height}')
    values = brightness_map(raster)

    grid = grid_alignment(luma_map(raster))
    hierarchy = visual_hierarchy(values, design_type)
    balance = classify_balance(values)
    spacing = spacing_consistency(values)
    alignment = alignment_score(values)

    return LayoutResult(
        score=composition_score(grid, balance, spacing, alignment),
        grid_alignment=grid,
        visual_hierarchy=hierarchy,
        balance=balance,
        spacing_consistency=spacing,
        alignment_score=alignment,
    )


def degraded_result() -> LayoutResult:
    return LayoutResult(
        score=50,
        grid_alignment=False,
        visual_hierarchy=['Unable to analyze hierarchy'],
        balance='asymmetric',
        spacing_consistency=False,
        alignment_score=50,
    )


def evaluate(raster: Raster, design_type: str = 'web') -> Ok | Degraded:
    return guarded(analyze, degraded_result, raster, design_type)


@technique.run
def run(request: AnalysisRequest, report: Report) -> None:
    report.add_outcome('layout', evaluate(request.raster, request.design_type))
