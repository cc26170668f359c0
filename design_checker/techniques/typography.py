"""Typographic hierarchy and readability from detected word boxes.

Works on TextBox lists only (pure geometry, no pixels). Boxes come from the
ocr technique or a --boxes JSON file and are filtered to confidence > 30
before they get here.

  font_count         5px height bins taller than 8px, clamped to 1..4
  hierarchy_score    distinct 2px size bins, size progression, sparse headings
  readability_score  mean height, text density, OCR confidence, line length

With no boxes all three are 0. When text detection is unavailable the
module reports a fixed fallback (2 / 70 / 75).

Example:
    uv run design-tool typography screenshot.png --boxes words.json
    uv run design-tool typography screenshot.png --ocr
"""

from __future__ import annotations

from collections import Counter

from design_checker.core.scoring import round_half_up
from design_checker.core.types import (
    AnalysisRequest,
    Degraded,
    Ok,
    Report,
    Technique,
    TextBox,
    TypographyResult,
    guarded,
)

technique = Technique(
    name='typography',
    help='Font-size count, hierarchy and readability scores from text boxes.',
)

FONT_BIN = 5
SIZE_BIN = 2
LINE_BIN = 5
MIN_FONT_HEIGHT = 8
SMALL_TEXT = 8
LOW_CONFIDENCE = 40


def _bin(value: float, width: int) -> int:
    return round_half_up(value / width) * width


def estimate_font_count(boxes: list[TextBox]) -> int:
    if not boxes:
        return 0
    bins = {_bin(b.height, FONT_BIN) for b in boxes}
    sized = [h for h in bins if h > MIN_FONT_HEIGHT]
    return max(1, min(len(sized), 4))


def distinct_sizes(boxes: list[TextBox]) -> list[int]:
    """2px size bins, largest first."""
    ordered = sorted((b.height for b in boxes), reverse=True)
    return list(dict.fromkeys(_bin(h, SIZE_BIN) for h in ordered))


def hierarchy_score(boxes: list[TextBox]) -> int:
    if not boxes:
        return 0
    sizes = distinct_sizes(boxes)
    score = 0
    if len(sizes) >= 2:
        score += 30
    if len(sizes) >= 3:
        score += 20
    if len(sizes) >= 4:
        score += 10

    if all(a - b >= 2 for a, b in zip(sizes, sizes[1:])):
        score += 20

    heights = [b.height for b in boxes]
    largest = max(heights)
    if heights.count(largest) / len(heights) < 0.3:
        score += 20

    return min(score, 100)


def text_density(boxes: list[TextBox]) -> float:
    """Summed box area over the area of the boxes' common bounding box."""
    if not boxes:
        return 0.0
    area = sum(b.width * b.height for b in boxes)
    min_x = min(b.x for b in boxes)
    max_x = max(b.x + b.width for b in boxes)
    min_y = min(b.y for b in boxes)
    max_y = max(b.y + b.height for b in boxes)
    # zero-area bounds raise ZeroDivisionError; the module degrades on it
    return area / ((max_x - min_x) * (max_y - min_y))


def line_lengths(boxes: list[TextBox]) -> list[int]:
    """Characters per line, lines grouped by y rounded to 5px."""
    lines: Counter[int] = Counter()
    for b in boxes:
        lines[_bin(b.y, LINE_BIN)] += len(b.text)
    return list(lines.values())


def readability_score(boxes: list[TextBox]) -> int:
    if not boxes:
        return 0
    score = 0

    mean_height = sum(b.height for b in boxes) / len(boxes)
    if mean_height >= 12:
        score += 25
    elif mean_height >= 10:
        score += 15
    elif mean_height >= 8:
        score += 10

    density = text_density(boxes)
    if density < 0.7:
        score += 25
    elif density < 0.85:
        score += 15

    mean_conf = sum(b.confidence for b in boxes) / len(boxes)
    if mean_conf >= 80:
        score += 25
    elif mean_conf >= 60:
        score += 15
    elif mean_conf >= 40:
        score += 10

    lengths = line_lengths(boxes)
    mean_line = sum(lengths) / len(lengths)
    if 30 <= mean_line <= 75:
        score += 25
    elif 20 <= mean_line <= 90:
        score += 15

    return min(score, 100)


def identify_issues(boxes: list[TextBox], font_count: int, hierarchy: int, readability: int) -> list[str]:
    issues = []
    if font_count > 3:
        issues.append('Too many different font sizes detected - consider reducing for better consistency')
    if hierarchy < 50:
        issues.append('Weak typographic hierarchy - consider creating clearer size distinctions')
    if readability < 60:
        issues.append('Text readability could be improved - check font size and contrast')
    if any(b.height < SMALL_TEXT for b in boxes):
        issues.append('Some text appears too small for comfortable reading')
    if sum(b.confidence < LOW_CONFIDENCE for b in boxes) > len(boxes) * 0.2:
        issues.append('Some text appears unclear or hard to read')
    return issues


def typography_statistics(boxes: list[TextBox]) -> dict[str, float]:
    if not boxes:
        return {'total_words': 0, 'average_word_length': 0.0, 'average_text_size': 0.0, 'text_coverage': 0.0}
    density = text_density(boxes)
    return {
        'total_words': len(boxes),
        'average_word_length': round(sum(len(b.text) for b in boxes) / len(boxes), 2),
        'average_text_size': round(sum(b.height for b in boxes) / len(boxes), 2),
        'text_coverage': round(density * 100, 2),
    }


def analyze(boxes: list[TextBox]) -> TypographyResult:
    font_count = estimate_font_count(boxes)
    hierarchy = hierarchy_score(boxes)
    readability = readability_score(boxes)
    return TypographyResult(
        font_count=font_count,
        hierarchy_score=hierarchy,
        readability_score=readability,
        issues=identify_issues(boxes, font_count, hierarchy, readability),
        text_regions=list(boxes),
        statistics=typography_statistics(boxes),
    )


def degraded_result() -> TypographyResult:
    return TypographyResult(
        font_count=2,
        hierarchy_score=70,
        readability_score=75,
        issues=['Unable to perform detailed typography analysis'],
        text_regions=[],
    )


def _require_boxes(boxes: list[TextBox] | None) -> TypographyResult:
    if boxes is None:
        raise RuntimeError('text detection unavailable')
    return analyze(boxes)


def evaluate(boxes: list[TextBox] | None) -> Ok | Degraded:
    return guarded(_require_boxes, degraded_result, boxes)


@technique.run
def run(request: AnalysisRequest, report: Report) -> None:
    report.add_outcome('typography', evaluate(request.text_boxes))
