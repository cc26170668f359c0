"""Shared types for design-tool: Technique, Report, AnalysisRequest, results, Outcome."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import asdict, dataclass, field
from typing import Any, Generic, TypeVar

from design_checker.core.palette import WCAG_AA, WCAG_AAA, wcag_level
from design_checker.core.raster import Raster, Region

logger = logging.getLogger(__name__)

T = TypeVar('T')

DESIGN_TYPES = ('web', 'mobile', 'print', 'general')
MIN_TEXT_CONFIDENCE = 30  # boxes at or below this never reach the engine


@dataclass(frozen=True)
class TextBox:
    """One detected word: text, bounding rectangle, OCR confidence 0-100."""

    text: str
    x: int
    y: int
    width: int
    height: int
    confidence: float

    @property
    def region(self) -> Region:
        return Region(self.x, self.y, self.width, self.height)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TextBox:
        """Build from {text, x, y, width|w, height|h, confidence}. Raises ValueError on bad input."""
        if not isinstance(data, dict):
            raise ValueError(f'Text box must be an object, got {type(data).__name__}')
        try:
            return cls(
                text=str(data.get('text', '')),
                x=int(data['x']),
                y=int(data['y']),
                width=int(data.get('width', data.get('w', 0))),
                height=int(data.get('height', data.get('h', 0))),
                confidence=float(data.get('confidence', 0)),
            )
        except KeyError as e:
            raise ValueError(f'Text box is missing {e}: {data!r}') from e
        except (TypeError, ValueError) as e:
            raise ValueError(f'Invalid text box {data!r}: {e}') from e

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def filter_text_boxes(boxes: list[TextBox]) -> list[TextBox]:
    """Drop low-confidence detections (confidence <= 30)."""
    return [b for b in boxes if b.confidence > MIN_TEXT_CONFIDENCE]


@dataclass(frozen=True)
class ContrastCheck:
    """A colour pair with its WCAG contrast ratio and pass flags."""

    foreground: str
    background: str
    ratio: float
    location: str = ''

    @property
    def passes_aa(self) -> bool:
        return self.ratio >= WCAG_AA

    @property
    def passes_aaa(self) -> bool:
        return self.ratio >= WCAG_AAA

    @property
    def level(self) -> str:
        return wcag_level(self.ratio)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            'foreground': self.foreground,
            'background': self.background,
            'ratio': round(self.ratio, 2),
            'passes_aa': self.passes_aa,
            'passes_aaa': self.passes_aaa,
            'level': self.level,
        }
        if self.location:
            data['location'] = self.location
        return data


@dataclass
class ColorResult:
    palette: list[str]
    harmony_type: str
    harmony_score: int
    contrast_issues: list[ContrastCheck] = field(default_factory=list)
    statistics: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            'palette': list(self.palette),
            'harmony_type': self.harmony_type,
            'harmony_score': self.harmony_score,
            'contrast_issues': [c.to_dict() for c in self.contrast_issues],
            'statistics': dict(self.statistics),
        }


@dataclass
class LayoutResult:
    score: int
    grid_alignment: bool
    visual_hierarchy: list[str]
    balance: str  # symmetric | asymmetric | radial
    spacing_consistency: bool
    alignment_score: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class TypographyResult:
    font_count: int
    hierarchy_score: int
    readability_score: int
    issues: list[str] = field(default_factory=list)
    text_regions: list[TextBox] = field(default_factory=list)
    statistics: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            'font_count': self.font_count,
            'hierarchy_score': self.hierarchy_score,
            'readability_score': self.readability_score,
            'issues': list(self.issues),
            'text_regions': [b.to_dict() for b in self.text_regions],
            'statistics': dict(self.statistics),
        }


@dataclass
class ColorBlindness:
    protanopia_safe: bool
    deuteranopia_safe: bool
    tritanopia_safe: bool

    @property
    def safe_count(self) -> int:
        return sum((self.protanopia_safe, self.deuteranopia_safe, self.tritanopia_safe))


@dataclass
class AccessibilityResult:
    score: int
    issues: list[str]
    recommendations: list[str]
    contrast_checks: list[ContrastCheck]
    color_blindness: ColorBlindness

    def to_dict(self) -> dict[str, Any]:
        return {
            'score': self.score,
            'issues': list(self.issues),
            'recommendations': list(self.recommendations),
            'contrast_checks': [c.to_dict() for c in self.contrast_checks],
            'color_blindness_simulation': asdict(self.color_blindness),
        }


@dataclass
class CritiqueResult:
    overall_score: int
    colour: ColorResult
    layout: LayoutResult
    typography: TypographyResult
    accessibility: AccessibilityResult
    recommendations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            'overall_score': self.overall_score,
            'colour': self.colour.to_dict(),
            'layout': self.layout.to_dict(),
            'typography': self.typography.to_dict(),
            'accessibility': self.accessibility.to_dict(),
            'recommendations': list(self.recommendations),
        }


@dataclass(frozen=True)
class Ok(Generic[T]):
    """A module finished normally."""

    result: T
    degraded = False


@dataclass(frozen=True)
class Degraded(Generic[T]):
    """A module failed internally and returned its documented fallback."""

    result: T
    reason: str
    degraded = True


Outcome = Ok | Degraded


def guarded(fn: Callable[..., T], fallback: Callable[[], T], *args: Any, **kwargs: Any) -> Ok[T] | Degraded[T]:
    """Run fn; on any failure return Degraded(fallback()) instead of raising."""
    try:
        return Ok(fn(*args, **kwargs))
    except Exception as e:
        reason = f'{type(e).__name__}: {e}'
        logger.warning('%s degraded: %s', getattr(fn, '__qualname__', repr(fn)), reason)
        return Degraded(fallback(), reason)


@dataclass
class AnalysisRequest:
    """Everything one analysis call needs. Built fresh per call."""

    raster: Raster
    design_type: str = 'web'
    palette_size: int = 8
    seed_palette: list[str] = field(default_factory=list)
    text_boxes: list[TextBox] | None = None  # None: text detection unavailable
    target_audience: str | None = None

    def __post_init__(self) -> None:
        if self.design_type not in DESIGN_TYPES:
            raise ValueError(f'Unknown design type: {self.design_type}. Available: {", ".join(DESIGN_TYPES)}')
        if self.palette_size < 1:
            raise ValueError(f'palette_size must be >= 1, got {self.palette_size}')


class Technique:
    """A self-registering analysis technique.

    Usage in a technique module:

        technique = Technique(name='colour', help='Palette and harmony')

        @technique.run
        def run(request, report):
            ...
    """

    def __init__(self, name: str, help: str = ''):
        self.name = name
        self.help = help
        self._run_fn: Callable | None = None

    def run(self, fn: Callable) -> Callable:
        """Decorator to register the run function."""
        self._run_fn = fn
        return fn

    def execute(self, request: AnalysisRequest, report: Report) -> None:
        """Execute the technique's run function."""
        if self._run_fn is None:
            raise RuntimeError(f'Technique {self.name} has no run function')
        self._run_fn(request, report)


@dataclass
class Report:
    """Accumulates results from techniques for text/JSON output."""

    image_path: str = ''
    image_width: int = 0
    image_height: int = 0
    design_type: str = 'web'
    sections: dict[str, dict[str, Any]] = field(default_factory=dict)
    degraded: dict[str, str] = field(default_factory=dict)
    overall_score: int | None = None
    recommendations: list[str] = field(default_factory=list)

    def add(self, technique_name: str, data: dict[str, Any]) -> None:
        """Add technique results."""
        self.sections[technique_name] = data

    def add_outcome(self, technique_name: str, outcome: Ok | Degraded) -> None:
        """Add a module outcome, remembering why it degraded if it did."""
        self.add(technique_name, outcome.result.to_dict())
        if isinstance(outcome, Degraded):
            self.degraded[technique_name] = outcome.reason
