"""design-tool — Automated design critique for screenshots and mockups.

Usage: uv run design-tool <technique> <image> [options]

Techniques are auto-discovered from design_checker/techniques/.
Each technique module's docstring is its documentation.
Run `design-tool help <technique>` for full module docs.

Environment variables / .env loading:
  OS environment variables are always used first.
  If a variable is not set, design-tool looks for a .env file starting from
  the current directory and walking up, stopping at the nearest .git boundary.
  Use --env-file to override the .env location explicitly.
"""

import argparse
import importlib
import json
import logging
import os
import sys

from design_checker import registry
from design_checker.core.env import load_env, load_settings
from design_checker.core.raster import Raster, annotate, load_raster
from design_checker.core.report import format_json, format_text
from design_checker.core.types import DESIGN_TYPES, AnalysisRequest, Report, TextBox, filter_text_boxes
from design_checker.techniques.accessibility import check_combination
from design_checker.techniques.ocr import TextDetectionError, detect_text_boxes

logger = logging.getLogger('design_checker')


def _load_technique_module(name: str) -> object:
    """Load the raw module for a technique (for docstring access)."""
    return importlib.import_module(f'design_checker.techniques.{name}')


def _short_doc(name: str, fallback: str) -> str:
    doc = (_load_technique_module(name).__doc__ or '').strip()
    return doc.splitlines()[0] if doc else fallback


def _build_parser() -> argparse.ArgumentParser:
    techniques = registry.all_techniques()

    epilog = (
        'Examples:\n'
        '  design-tool critique screenshot.png\n'
        '  design-tool critique screenshot.png --design-type mobile --json\n'
        '  design-tool critique screenshot.png --ocr --audience "senior citizens"\n'
        '  design-tool colour logo.png --palette-size 5 --seed-palette "#ff0000,#00ffff"\n'
        '  design-tool typography page.png --boxes words.json\n'
        '  design-tool ocr page.png --annotate boxes.png\n'
        '  design-tool contrast "#333333" "#ffffff"\n'
        '  design-tool help layout\n'
        '\n'
        'Settings env vars (set in .env or environment, flags win):\n'
        '  DESIGN_TOOL_DESIGN_TYPE    web | mobile | print | general\n'
        '  DESIGN_TOOL_PALETTE_SIZE   palette length (default 8)\n'
        '  DESIGN_TOOL_MAX_DIMENSION  longest side after decode (default 1920)\n'
        '  TESSERACT_CMD              tesseract binary if not on PATH\n'
    )
    parser = argparse.ArgumentParser(
        prog='design-tool',
        description='Automated design critique for screenshots and mockups.',
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    # Global options before subcommand
    parser.add_argument(
        '--env-file',
        metavar='PATH',
        default=None,
        help='Path to .env file (default: walk up from cwd to .git boundary)',
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging to stderr')
    sub = parser.add_subparsers(dest='technique', help='Technique to run')

    # Auto-register each technique as a subcommand using module docstring
    for name, tech in sorted(techniques.items()):
        p = sub.add_parser(name, help=_short_doc(name, tech.help))
        p.add_argument('image', help='Path to screenshot PNG/JPG')
        p.add_argument(
            '-t',
            '--design-type',
            choices=DESIGN_TYPES,
            default=None,
            help='Design context (default: DESIGN_TOOL_DESIGN_TYPE or web)',
        )
        p.add_argument('-n', '--palette-size', type=int, default=None, metavar='N', help='Palette length')
        p.add_argument('-s', '--seed-palette', default='', metavar='HEXES', help='Comma-separated seed colours')
        p.add_argument('-b', '--boxes', metavar='PATH', help='JSON list of text boxes (x, y, width, height, ...)')
        p.add_argument('-o', '--ocr', action='store_true', help='Detect text boxes with tesseract')
        p.add_argument('-a', '--audience', default=None, help='Target audience (e.g. "children", "senior citizens")')
        p.add_argument('-j', '--json', action='store_true', help='Output JSON instead of text')
        p.add_argument('--annotate', metavar='PATH', help='Save a copy of the image with text boxes outlined')

    # `contrast` subcommand: one colour pair, no image needed
    contrast_parser = sub.add_parser('contrast', help='WCAG contrast verdict for one colour pair')
    contrast_parser.add_argument('foreground', help='Foreground hex colour')
    contrast_parser.add_argument('background', help='Background hex colour')

    # `help` subcommand: prints full module docstring for a technique
    help_parser = sub.add_parser('help', help='Print full docs for a technique')
    help_parser.add_argument('command', nargs='?', help='Technique name')

    return parser


def _print_help(command: str | None) -> None:
    """Print full module docstring for a technique."""
    techniques = registry.all_techniques()

    if command is None:
        print('Available techniques:\n')
        for name, tech in sorted(techniques.items()):
            print(f'  {name:<14} {_short_doc(name, tech.help)}')
        print('\nRun: design-tool help <technique> for full docs.')
        return

    if command not in techniques:
        print(f'Unknown technique: {command}', file=sys.stderr)
        print(f'Available: {", ".join(sorted(techniques))}', file=sys.stderr)
        sys.exit(1)

    mod = _load_technique_module(command)
    doc = (mod.__doc__ or '').strip()
    if not doc:
        print(f'(No module docs for {command!r})')
        return
    print(doc)


def _print_contrast(foreground: str, background: str) -> None:
    result = check_combination(foreground, background)
    print(json.dumps(result, indent=2))
    if result['ratio'] == 0:
        sys.exit(1)


def _load_boxes(path: str) -> list[TextBox]:
    """Read a JSON list of text boxes and drop low-confidence ones."""
    with open(path, encoding='utf-8') as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f'{path}: expected a JSON list of text boxes')
    return filter_text_boxes([TextBox.from_dict(item) for item in data])


def _resolve_text_boxes(args: argparse.Namespace, raster: Raster, tesseract_cmd: str | None) -> list[TextBox] | None:
    """Boxes from --boxes, else --ocr, else None (text detection unavailable).

    The ocr technique runs tesseract itself, so --ocr is ignored for it.
    """
    if args.boxes:
        return _load_boxes(args.boxes)
    if args.ocr and args.technique != 'ocr':
        try:
            return detect_text_boxes(raster, tesseract_cmd)
        except TextDetectionError as e:
            logger.warning('text detection unavailable: %s', e)
    return None


def _annotation_boxes(report: Report, text_boxes: list[TextBox] | None) -> list[TextBox]:
    """Boxes to outline: the request's, else whatever the ocr technique detected."""
    if text_boxes is not None:
        return text_boxes
    detail = report.sections.get('ocr', {}).get('detail', [])
    return [TextBox.from_dict(item) for item in detail]


def _seed_palette(raw: str) -> list[str]:
    return [part.strip() for part in raw.split(',') if part.strip()]


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    # Load .env before anything else: OS env vars always win
    env_path = load_env(env_file=getattr(args, 'env_file', None))
    if env_path:
        print(f'design-tool: loaded {env_path}', file=sys.stderr)
    settings = load_settings()

    if not args.technique:
        parser.print_help()
        sys.exit(1)

    # Handle `help` subcommand
    if args.technique == 'help':
        _print_help(getattr(args, 'command', None))
        return

    # Handle `contrast` subcommand
    if args.technique == 'contrast':
        _print_contrast(args.foreground, args.background)
        return

    # Load image
    if not os.path.isfile(args.image):
        print(f'Error: image not found: {args.image}', file=sys.stderr)
        sys.exit(1)

    try:
        raster = load_raster(args.image, max_dimension=settings.max_dimension)
        text_boxes = _resolve_text_boxes(args, raster, settings.tesseract_cmd)
        request = AnalysisRequest(
            raster=raster,
            design_type=args.design_type or settings.design_type,
            palette_size=args.palette_size if args.palette_size is not None else settings.palette_size,
            seed_palette=_seed_palette(args.seed_palette),
            text_boxes=text_boxes,
            target_audience=args.audience,
        )
    except (OSError, ValueError) as e:
        print(f'Error: {e}', file=sys.stderr)
        sys.exit(1)

    # Build report
    report = Report(
        image_path=args.image,
        image_width=raster.width,
        image_height=raster.height,
        design_type=request.design_type,
    )

    # Run technique
    tech = registry.get(args.technique)
    tech.execute(request, report)

    if args.annotate:
        annotate(raster, [b.region for b in _annotation_boxes(report, text_boxes)]).save(args.annotate)
        print(f'design-tool: wrote {args.annotate}', file=sys.stderr)

    # Output
    if args.json:
        print(format_json(report))
    else:
        print(format_text(report))


if __name__ == '__main__':
    main()
