"""WCAG contrast matrix and colour-blindness simulation over dominant colours.

Samples a 20px lattice (skipping pixels with alpha <= 128), keeps the ten
most frequent colours and checks every pair for WCAG AA (4.5:1) and AAA
(7:1). Each colour is then pushed through three simplified dichromat
simulations in Lab space:

  protanopia    a * 0.3
  deuteranopia  a * 0.7, b * 0.3
  tritanopia    b * 0.3

A simulated set is safe when every pair stays at least deltaE 10 apart.

Score (max 100): 25 x AA pass rate + 15 x AAA pass rate + 10 per safe
simulation + 10 if mean ratio > 10 (else 5 if > 7).

Any failure returns a fixed result (score 50, no checks, nothing safe).

Example:
    uv run design-tool accessibility screenshot.png --json
    uv run design-tool contrast '#333333' '#ffffff'
"""

from __future__ import annotations

from collections.abc import Callable
from itertools import combinations

from design_checker.core.palette import Color, contrast_ratio, delta_e, lab_to_rgb
from design_checker.core.raster import Raster, iter_grid
from design_checker.core.scoring import round_half_up
from design_checker.core.types import (
    AccessibilityResult,
    AnalysisRequest,
    ColorBlindness,
    ContrastCheck,
    Degraded,
    Ok,
    Report,
    Technique,
    guarded,
)
from design_checker.techniques.colour import count_colours, rank_colours

technique = Technique(
    name='accessibility',
    help='Dominant-colour contrast matrix and colour-blindness simulation.',
)

SAMPLE_STRIDE = 20
DOMINANT_COUNT = 10
MIN_DELTA_E = 10
LOW_CONTRAST = 2

# (a scale, b scale) per deficiency
SIMULATIONS: dict[str, tuple[float, float]] = {
    'protanopia': (0.3, 1.0),
    'deuteranopia': (0.7, 0.3),
    'tritanopia': (1.0, 0.3),
}

DEFICIENCY_ISSUES = {
    'protanopia': 'Design may not be accessible to users with red-green color blindness (protanopia)',
    'deuteranopia': 'Design may not be accessible to users with green-red color blindness (deuteranopia)',
    'tritanopia': 'Design may not be accessible to users with blue-yellow color blindness (tritanopia)',
}

GENERAL_RECOMMENDATIONS = (
    'Test your design with accessibility tools and screen readers',
    'Ensure all interactive elements have sufficient size (minimum 44px touch target)',
    'Use semantic HTML and proper heading hierarchy in implementation',
)


def dominant_colours(raster: Raster, limit: int = DOMINANT_COUNT) -> list[Color]:
    return rank_colours(count_colours(iter_grid(raster, SAMPLE_STRIDE, opaque_only=True)), limit)


def contrast_checks(colours: list[Color]) -> list[ContrastCheck]:
    checks = []
    for (i, fg), (j, bg) in combinations(enumerate(colours), 2):
        checks.append(
            ContrastCheck(
                foreground=fg.hex,
                background=bg.hex,
                ratio=contrast_ratio(fg, bg),
                location=f'Color combination {i + 1}-{j + 1}',
            )
        )
    return checks


def simulate(colour: Color, a_scale: float, b_scale: float) -> Color:
    lightness, a, b = colour.lab()
    return Color.from_rgb(*lab_to_rgb((lightness, a * a_scale, b * b_scale)))


def simulate_protanopia(colour: Color) -> Color:
    return simulate(colour, *SIMULATIONS['protanopia'])


def simulate_deuteranopia(colour: Color) -> Color:
    return simulate(colour, *SIMULATIONS['deuteranopia'])


def simulate_tritanopia(colour: Color) -> Color:
    return simulate(colour, *SIMULATIONS['tritanopia'])


def distinguishable(colours: list[Color]) -> bool:
    """Every pair at least deltaE 10 apart. Fewer than two colours always passes."""
    labs = [c.lab() for c in colours]
    return all(delta_e(l1, l2) >= MIN_DELTA_E for l1, l2 in combinations(labs, 2))


def color_blindness(colours: list[Color]) -> ColorBlindness:
    def safe(fn: Callable[[Color], Color]) -> bool:
        return distinguishable([fn(c) for c in colours])

    return ColorBlindness(
        protanopia_safe=safe(simulate_protanopia),
        deuteranopia_safe=safe(simulate_deuteranopia),
        tritanopia_safe=safe(simulate_tritanopia),
    )


def _mean_ratio(checks: list[ContrastCheck]) -> float:
    return sum(c.ratio for c in checks) / len(checks)


def accessibility_score(checks: list[ContrastCheck], simulation: ColorBlindness) -> int:
    score = 0.0
    if checks:
        score += sum(c.passes_aa for c in checks) / len(checks) * 25
        score += sum(c.passes_aaa for c in checks) / len(checks) * 15

    score += simulation.safe_count / 3 * 30

    if checks:
        mean = _mean_ratio(checks)
        if mean > 10:
            score += 10
        elif mean > 7:
            score += 5

    return round_half_up(min(score, 100))


def identify_issues(checks: list[ContrastCheck], simulation: ColorBlindness) -> list[str]:
    issues = []

    failed_aa = [c for c in checks if not c.passes_aa]
    if failed_aa:
        issues.append(f'{len(failed_aa)} color combinations fail WCAG AA contrast requirements')

    failed_aaa = [c for c in checks if not c.passes_aaa]
    if len(failed_aaa) > len(checks) * 0.5:
        issues.append('Many color combinations fail WCAG AAA contrast requirements')

    if not simulation.protanopia_safe:
        issues.append(DEFICIENCY_ISSUES['protanopia'])
    if not simulation.deuteranopia_safe:
        issues.append(DEFICIENCY_ISSUES['deuteranopia'])
    if not simulation.tritanopia_safe:
        issues.append(DEFICIENCY_ISSUES['tritanopia'])

    if any(c.ratio < LOW_CONTRAST for c in checks):
        issues.append('Some elements may rely too heavily on color alone to convey information')

    return issues


def recommend(checks: list[ContrastCheck], simulation: ColorBlindness) -> list[str]:
    recs = []

    if any(not c.passes_aa for c in checks):
        recs.append(
            'Increase contrast between text and background colors to meet WCAG AA standards (minimum 4.5:1 ratio)'
        )
    if any(c.passes_aa and not c.passes_aaa for c in checks):
        recs.append(
            'Consider increasing contrast further to meet WCAG AAA standards (7:1 ratio) for better accessibility'
        )
    if simulation.safe_count < 3:
        recs.append(
            'Add visual indicators beyond color (icons, patterns, text labels) '
            'to ensure information is accessible to color-blind users'
        )

    recs.extend(GENERAL_RECOMMENDATIONS)

    if checks and _mean_ratio(checks) < 7:
        recs.append('Consider using darker text on light backgrounds or lighter text on dark backgrounds')

    return recs


def check_combination(foreground: str, background: str) -> dict:
    """Single-pair contrast verdict with a one-line recommendation."""
    try:
        fg = Color.parse(foreground)
        bg = Color.parse(background)
    except ValueError:
        return {
            'ratio': 0,
            'passes_aa': False,
            'passes_aaa': False,
            'recommendation': 'Invalid color combination',
        }

    check = ContrastCheck(foreground=fg.hex, background=bg.hex, ratio=contrast_ratio(fg, bg))
    if not check.passes_aa:
        rec = 'Increase contrast significantly - fails WCAG AA standards'
    elif not check.passes_aaa:
        rec = 'Good contrast for AA, consider increasing for AAA standards'
    else:
        rec = 'Excellent contrast - meets all WCAG standards'

    data = check.to_dict()
    data['recommendation'] = rec
    return data


def analyze(raster: Raster) -> AccessibilityResult:
    colours = dominant_colours(raster)
    checks = contrast_checks(colours)
    simulation = color_blindness(colours)
    return AccessibilityResult(
        score=accessibility_score(checks, simulation),
        issues=identify_issues(checks, simulation),
        recommendations=recommend(checks, simulation),
        contrast_checks=checks,
        color_blindness=simulation,
    )


def degraded_result() -> AccessibilityResult:
    return AccessibilityResult(
        score=50,
        issues=['Unable to perform detailed accessibility analysis'],
        recommendations=['Ensure sufficient color contrast and consider accessibility guidelines'],
        contrast_checks=[],
        color_blindness=ColorBlindness(protanopia_safe=False, deuteranopia_safe=False, tritanopia_safe=False),
    )


def evaluate(raster: Raster) -> Ok | Degraded:
    return guarded(analyze, degraded_result, raster)


@technique.run
def run(request: AnalysisRequest, report: Report) -> None:
    report.add_outcome('accessibility', evaluate(request.raster))
