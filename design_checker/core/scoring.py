"""Weighted overall score and threshold-triggered recommendations."""

from __future__ import annotations

import math

from design_checker.core.types import AccessibilityResult, ColorResult, LayoutResult, TypographyResult

WEIGHTS = {
    'colour': 0.25,
    'layout': 0.30,
    'typography': 0.25,
    'accessibility': 0.20,
}


def round_half_up(value: float) -> int:
    """Round .5 upwards (2.5 -> 3), unlike Python's banker's rounding."""
    return int(math.floor(value + 0.5))


def overall_score(colour: int, layout: int, typography: int, accessibility: int) -> int:
    total = (
        colour * WEIGHTS['colour']
        + layout * WEIGHTS['layout']
        + typography * WEIGHTS['typography']
        + accessibility * WEIGHTS['accessibility']
    )
    return round_half_up(total)


def recommendation_triggers(
    colour: ColorResult,
    layout: LayoutResult,
    typography: TypographyResult,
    accessibility: AccessibilityResult,
    design_type: str = 'web',
    target_audience: str | None = None,
) -> list[str]:
    recs = []

    if colour.harmony_score < 70:
        recs.append('Consider using a more harmonious color palette based on color theory principles')
    if colour.contrast_issues:
        recs.append('Improve text contrast to meet WCAG accessibility standards')

    if typography.font_count > 3:
        recs.append('Reduce the number of font families to improve visual consistency')
    if typography.hierarchy_score < 60:
        recs.append('Strengthen typographic hierarchy with more distinct size differences')

    if layout.score < 70:
        recs.append('Consider improving layout structure and visual balance')
    if not layout.grid_alignment:
        recs.append('Align elements to a consistent grid system for better organization')

    if accessibility.score < 80:
        recs.append('Review accessibility guidelines to ensure inclusive design')

    if design_type == 'web':
        recs.append('Ensure responsive design principles are applied')
        recs.append('Consider mobile-first design approach')
    elif design_type == 'mobile':
        recs.append('Ensure touch targets are at least 44px in size')
        recs.append('Consider thumb-friendly navigation patterns')

    if target_audience:
        audience = target_audience.lower()
        if 'elderly' in audience or 'senior' in audience:
            recs.append('Consider larger text sizes and higher contrast for elderly users')
        if 'children' in audience:
            recs.append('Use bright, engaging colors and clear, simple layouts for children')

    return recs
