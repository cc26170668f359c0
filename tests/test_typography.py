"""Tests for design_checker.techniques.typography — font sizes, hierarchy and readability."""

import pytest
from design_checker.core.types import Degraded, Ok, TextBox, filter_text_boxes
from design_checker.techniques.typography import (
    analyze,
    distinct_sizes,
    estimate_font_count,
    evaluate,
    hierarchy_score,
    line_lengths,
    readability_score,
    text_density,
    typography_statistics,
)


def _box(text: str = 'word', x: int = 0, y: int = 0, w: int = 40, h: int = 12, conf: float = 90) -> TextBox:
    return TextBox(text=text, x=x, y=y, width=w, height=h, confidence=conf)


def _paragraph() -> list[TextBox]:
    """Heading plus two body lines of ~40 characters each."""
    boxes = [_box('Welcome', x=0, y=0, w=200, h=32)]
    words = ['lorem', 'ipsum', 'dolor', 'sitamet', 'consect', 'adipisc', 'elitsed']
    for line, y in enumerate((60, 90)):
        for i, word in enumerate(words):
            boxes.append(_box(word, x=i * 60, y=y, w=45, h=14 + line))
    return boxes


class TestFontCount:
    def test_empty(self):
        assert estimate_font_count([]) == 0

    def test_small_text_still_counts_one(self):
        assert estimate_font_count([_box(h=6), _box(h=7)]) == 1

    def test_bins_of_five(self):
        # 12 -> 10, 13 -> 15, 30 -> 30
        assert estimate_font_count([_box(h=12), _box(h=13), _box(h=30)]) == 3

    def test_capped_at_four(self):
        boxes = [_box(h=h) for h in (10, 20, 30, 40, 50, 60)]
        assert estimate_font_count(boxes) == 4


class TestHierarchy:
    def test_empty(self):
        assert hierarchy_score([]) == 0

    def test_heading_and_body(self):
        boxes = [_box(y=0, h=40), _box(y=100, h=12)]
        assert distinct_sizes(boxes) == [40, 12]
        assert hierarchy_score(boxes) >= 50

    def test_sparse_heading_bonus(self):
        boxes = [_box(h=40)] + [_box(y=20 * i, h=12) for i in range(1, 5)]
        # 30 for two sizes, 20 progression, 20 sparse largest
        assert hierarchy_score(boxes) == 70

    def test_single_size(self):
        boxes = [_box(h=12), _box(h=12)]
        # one bin: only the progression bonus applies
        assert hierarchy_score(boxes) == 20

    def test_capped(self):
        boxes = [_box(h=h) for h in (60, 40, 30, 20)] + [_box(h=12)] * 20
        assert hierarchy_score(boxes) == 100


class TestReadability:
    def test_empty(self):
        assert readability_score([]) == 0

    def test_paragraph_scores_well(self):
        assert readability_score(_paragraph()) >= 75

    def test_tiny_low_confidence_text(self):
        boxes = [_box('a', x=0, w=4, h=6, conf=35), _box('b', x=4, w=4, h=6, conf=35)]
        assert readability_score(boxes) == 0

    def test_density(self):
        assert text_density([_box(x=0, y=0, w=10, h=10), _box(x=10, y=10, w=10, h=10)]) == pytest.approx(0.5)

    def test_zero_area_bounds_raise(self):
        with pytest.raises(ZeroDivisionError):
            text_density([_box(w=0, h=0)])

    def test_line_lengths_group_by_rounded_y(self):
        boxes = [_box('abc', y=100), _box('de', y=102), _box('fghij', y=140)]
        assert line_lengths(boxes) == [5, 5]


class TestAnalyze:
    def test_empty_boxes_give_zeros(self):
        result = analyze([])
        assert (result.font_count, result.hierarchy_score, result.readability_score) == (0, 0, 0)
        assert result.text_regions == []
        assert result.statistics['total_words'] == 0

    def test_small_text_issue(self):
        result = analyze([_box(h=6, w=30), _box(y=40, h=30, w=100)])
        assert 'Some text appears too small for comfortable reading' in result.issues

    def test_low_confidence_issue(self):
        boxes = [_box(x=50 * i, conf=35) for i in range(5)]
        assert 'Some text appears unclear or hard to read' in analyze(boxes).issues

    def test_statistics(self):
        stats = typography_statistics([_box('abcd', w=10, h=10), _box('ab', x=10, w=10, h=20)])
        assert stats['total_words'] == 2
        assert stats['average_word_length'] == 3.0
        assert stats['average_text_size'] == 15.0
        assert stats['text_coverage'] == 75.0

    def test_text_regions_serialise(self):
        data = analyze([_box('Title', h=30)]).to_dict()
        assert data['text_regions'][0] == {'text': 'Title', 'x': 0, 'y': 0, 'width': 40, 'height': 30, 'confidence': 90}


class TestEvaluate:
    def test_no_detection_degrades(self):
        outcome = evaluate(None)
        assert isinstance(outcome, Degraded)
        assert (outcome.result.font_count, outcome.result.hierarchy_score, outcome.result.readability_score) == (
            2,
            70,
            75,
        )
        assert outcome.result.issues == ['Unable to perform detailed typography analysis']

    def test_zero_area_degrades(self):
        assert isinstance(evaluate([_box(w=0, h=0)]), Degraded)

    def test_ok(self):
        assert isinstance(evaluate(_paragraph()), Ok)


class TestFilterTextBoxes:
    def test_confidence_threshold(self):
        kept = filter_text_boxes([_box(conf=30), _box(conf=30.5), _box(conf=-1), _box(conf=95)])
        assert [b.confidence for b in kept] == [30.5, 95]

    def test_from_dict_accepts_short_keys(self):
        box = TextBox.from_dict({'text': 'hi', 'x': 1, 'y': 2, 'w': 3, 'h': 4, 'confidence': '88'})
        assert box == TextBox('hi', 1, 2, 3, 4, 88.0)

    @pytest.mark.parametrize(
        'data',
        [
            {'text': 'hi', 'width': 10, 'height': 12, 'confidence': 90},
            {'text': 'hi', 'x': 'left', 'y': 0},
            {'text': 'hi', 'x': None, 'y': 0},
            ['hi', 0, 0, 10, 12, 90],
        ],
    )
    def test_from_dict_rejects_bad_entries(self, data):
        with pytest.raises(ValueError):
            TextBox.from_dict(data)
