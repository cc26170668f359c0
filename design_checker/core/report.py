"""Report builder — text and JSON output for design-tool results."""

import json
from typing import Any

from design_checker.core.types import Report

# section keys whose value is the module's headline number
_HEADLINES = {
    'colour': ('harmony_type', 'harmony_score'),
    'layout': ('balance', 'score'),
    'typography': ('font_count', 'hierarchy_score'),
    'accessibility': (None, 'score'),
}


def _headline(name: str, data: dict[str, Any]) -> str:
    label_key, score_key = _HEADLINES.get(name, (None, None))
    parts = []
    if label_key and label_key in data:
        parts.append(f'{label_key}={data[label_key]}')
    if score_key and score_key in data:
        parts.append(f'{score_key}={data[score_key]}')
    return '  '.join(parts)


def _format_section(name: str, data: dict[str, Any]) -> list[str]:
    lines = []
    if name == 'colour':
        lines.append(f'  palette: {" ".join(data.get("palette", []))}')
        for issue in data.get('contrast_issues', []):
            lines.append(f'  contrast {issue["foreground"]} on {issue["background"]}: {issue["ratio"]}:1  ✗')
    elif name == 'layout':
        lines.append(f'  grid: {data.get("grid_alignment")}  spacing: {data.get("spacing_consistency")}')
        lines.append(f'  alignment: {data.get("alignment_score")}')
        for note in data.get('visual_hierarchy', []):
            lines.append(f'  - {note}')
    elif name == 'typography':
        lines.append(f'  readability: {data.get("readability_score")}  words: {len(data.get("text_regions", []))}')
        for issue in data.get('issues', []):
            lines.append(f'  ! {issue}')
    elif name == 'accessibility':
        checks = data.get('contrast_checks', [])
        passing = sum(1 for c in checks if c.get('passes_aa'))
        lines.append(f'  contrast pairs: {passing}/{len(checks)} pass AA')
        sim = data.get('color_blindness_simulation', {})
        safe = [k.removesuffix('_safe') for k, v in sim.items() if v]
        lines.append(f'  colour-blind safe: {", ".join(safe) if safe else "none"}')
        for issue in data.get('issues', []):
            lines.append(f'  ! {issue}')
    elif name == 'ocr' and 'texts' in data:
        lines.append(f'  text: {data["texts"]}')
    else:
        # Generic fallback
        for k, v in data.items():
            lines.append(f'  {name}.{k}: {v}')
    return lines


def format_text(report: Report) -> str:
    """Format report as human-readable text."""
    lines = []
    dim = f'{report.image_width}×{report.image_height}'
    header = f'design-tool: {report.image_path} ({dim}, {report.design_type})'
    lines.append(header)
    lines.append('')

    for name, data in report.sections.items():
        headline = _headline(name, data)
        lines.append(f'── {name} {headline}'.rstrip())
        if name in report.degraded:
            lines.append(f'  (fallback result: {report.degraded[name]})')
        lines.extend(_format_section(name, data))
        lines.append('')

    if report.overall_score is not None:
        lines.append(f'OVERALL {report.overall_score}/100')
    if report.recommendations:
        lines.append('')
        lines.append('Recommendations:')
        for rec in report.recommendations:
            lines.append(f'  - {rec}')
    return '\n'.join(lines)


def format_json(report: Report) -> str:
    """Format report as JSON."""
    obj: dict[str, Any] = {
        'image': report.image_path,
        'dimensions': {'width': report.image_width, 'height': report.image_height},
        'design_type': report.design_type,
        'sections': report.sections,
    }
    if report.degraded:
        obj['degraded'] = report.degraded
    if report.overall_score is not None:
        obj['overall_score'] = report.overall_score
        obj['recommendations'] = report.recommendations
    return json.dumps(obj, indent=2)
