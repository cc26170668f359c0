"""Word-level text detection with positions and confidence scores.

Runs pytesseract.image_to_data() on the raster. Keeps words with
confidence > 30 and non-empty text. Outputs list of
{text, x, y, width, height, confidence}.

This is the text-detection edge of the engine: typography consumes the
boxes it produces. Requires the system tesseract-ocr package; set
TESSERACT_CMD if the binary is not on PATH. Boxes given with --boxes are
reported as-is instead of running tesseract. If tesseract is missing the
technique reports a clear error without crashing.

Example:
    uv run design-tool ocr screenshot.png
    uv run design-tool typography screenshot.png --ocr
"""

from __future__ import annotations

import logging
import os

from design_checker.core.raster import Raster
from design_checker.core.types import AnalysisRequest, Report, Technique, TextBox, filter_text_boxes

logger = logging.getLogger(__name__)

technique = Technique(
    name='ocr',
    help='Detect words with bounding boxes and confidence scores (tesseract).',
)


class TextDetectionError(RuntimeError):
    """Text detection could not run (pytesseract or tesseract missing, or it failed)."""


def detect_text_boxes(raster: Raster, tesseract_cmd: str | None = None) -> list[TextBox]:
    """Run tesseract over the raster and return confidence-filtered word boxes."""
    try:
        import pytesseract
    except ImportError as e:
        raise TextDetectionError('pytesseract not installed') from e

    tesseract_cmd = tesseract_cmd or os.environ.get('TESSERACT_CMD')
    if tesseract_cmd:
        pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    try:
        data = pytesseract.image_to_data(raster.to_image().convert('RGB'), output_type=pytesseract.Output.DICT)
    except Exception as e:
        raise TextDetectionError(f'tesseract failed: {e}') from e

    boxes = []
    for i in range(len(data['text'])):
        text = str(data['text'][i]).strip()
        try:
            conf = float(data['conf'][i])
        except (TypeError, ValueError):
            conf = -1.0
        if not text:
            continue
        boxes.append(
            TextBox(
                text=text,
                x=int(data['left'][i]),
                y=int(data['top'][i]),
                width=int(data['width'][i]),
                height=int(data['height'][i]),
                confidence=conf,
            )
        )
    kept = filter_text_boxes(boxes)
    logger.debug('tesseract found %d words, kept %d', len(boxes), len(kept))
    return kept


@technique.run
def run(request: AnalysisRequest, report: Report) -> None:
    boxes = request.text_boxes
    if boxes is None:
        try:
            boxes = detect_text_boxes(request.raster)
        except TextDetectionError as e:
            report.add('ocr', {'error': str(e)})
            return
    report.add('ocr', {'texts': [b.text for b in boxes], 'detail': [b.to_dict() for b in boxes]})
