"""Full design critique: run the four analysis modules, combine into one score.

Runs colour, layout, typography and accessibility concurrently on the same
raster (they share nothing mutable) and waits for all four. Then:

  overall = 0.25 colour harmony + 0.30 composition
          + 0.25 typographic hierarchy + 0.20 accessibility

plus threshold-triggered recommendations. A module that fails contributes
its fixed fallback result; the critique itself never fails.

Skips: ocr (run it explicitly, or pass --ocr / --boxes to feed typography).

Example:
    uv run design-tool critique screenshot.png --design-type web --json
    uv run design-tool critique screenshot.png --ocr --audience 'senior citizens'
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor

from design_checker.core.scoring import overall_score, recommendation_triggers
from design_checker.core.types import AnalysisRequest, CritiqueResult, Degraded, Ok, Report, Technique
from design_checker.techniques import accessibility, colour, layout, typography

logger = logging.getLogger(__name__)

technique = Technique(
    name='critique',
    help='Run all four analyses concurrently and combine them into an overall score.',
)


def evaluate_all(request: AnalysisRequest) -> dict[str, Ok | Degraded]:
    """Fan out the four modules and return their outcomes keyed by section name."""
    with ThreadPoolExecutor(max_workers=4) as executor:
        futures = {
            'colour': executor.submit(colour.evaluate, request.raster, request.palette_size, request.seed_palette),
            'layout': executor.submit(layout.evaluate, request.raster, request.design_type),
            'typography': executor.submit(typography.evaluate, request.text_boxes),
            'accessibility': executor.submit(accessibility.evaluate, request.raster),
        }
        outcomes = {name: future.result() for name, future in futures.items()}

    for name, outcome in outcomes.items():
        if isinstance(outcome, Degraded):
            logger.info('%s used its fallback result', name)
    return outcomes


def combine(outcomes: dict[str, Ok | Degraded], request: AnalysisRequest) -> CritiqueResult:
    c = outcomes['colour'].result
    lay = outcomes['layout'].result
    typo = outcomes['typography'].result
    acc = outcomes['accessibility'].result
    return CritiqueResult(
        overall_score=overall_score(c.harmony_score, lay.score, typo.hierarchy_score, acc.score),
        colour=c,
        layout=lay,
        typography=typo,
        accessibility=acc,
        recommendations=recommendation_triggers(c, lay, typo, acc, request.design_type, request.target_audience),
    )


def run_critique(request: AnalysisRequest) -> CritiqueResult:
    return combine(evaluate_all(request), request)


@technique.run
def run(request: AnalysisRequest, report: Report) -> None:
    outcomes = evaluate_all(request)
    for name, outcome in outcomes.items():
        report.add_outcome(name, outcome)
    result = combine(outcomes, request)
    report.overall_score = result.overall_score
    report.recommendations = result.recommendations
