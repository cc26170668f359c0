"""Tests for design_checker.techniques.layout — lines, balance, spacing, hierarchy."""

import numpy as np
import pytest
from design_checker.core.raster import Raster
from design_checker.core.types import Degraded, Ok
from design_checker.techniques.layout import (
    alignment_score,
    analyze,
    classify_balance,
    composition_score,
    detect_horizontal_lines,
    detect_vertical_lines,
    evaluate,
    grid_alignment,
    merge_close_lines,
    radial_score,
    spacing_consistency,
    spacing_is_regular,
    visual_hierarchy,
)


def _grid_lines(positions: list[int], size: int = 100) -> np.ndarray:
    """White field with 1px black lines at the given x and y positions."""
    values = np.full((size, size), 255.0)
    for p in positions:
        values[:, p] = 0.0
        values[p, :] = 0.0
    return values


def _stripes(size: int = 100, period: int = 5) -> np.ndarray:
    values = np.zeros((size, size))
    for x in range(0, size, 2 * period):
        values[:, x : x + period] = 255.0
    return values


class TestLines:
    def test_merge_close_lines(self):
        assert merge_close_lines([10, 15, 29, 31, 60]) == [10, 31, 60]

    def test_merge_empty(self):
        assert merge_close_lines([]) == []

    def test_detects_lines_on_both_axes(self):
        values = _grid_lines([20, 50, 80])
        assert detect_vertical_lines(values) == [19, 49, 79]
        assert detect_horizontal_lines(values) == [19, 49, 79]

    def test_uniform_field_has_no_lines(self):
        assert detect_vertical_lines(np.full((50, 50), 128.0)) == []

    def test_tiny_field_has_no_lines(self):
        assert detect_vertical_lines(np.zeros((2, 2))) == []

    def test_regular_spacing(self):
        assert spacing_is_regular([10, 40, 70])
        assert not spacing_is_regular([10, 20, 90])

    def test_fewer_than_three_lines_is_never_a_grid(self):
        assert not spacing_is_regular([])
        assert not spacing_is_regular([10, 40])
        assert not grid_alignment(_grid_lines([30, 70]))

    def test_grid_alignment(self):
        assert grid_alignment(_grid_lines([20, 50, 80]))


class TestBalance:
    def test_uniform_is_symmetric(self):
        assert classify_balance(np.full((60, 80), 200.0)) == 'symmetric'

    @pytest.mark.parametrize('level', [255.0, 200.0, 117.0, 1.0])
    def test_flat_disc_has_no_spread(self, level):
        score, spread = radial_score(np.full((100, 100), level))
        assert score == pytest.approx(1.0)
        assert spread == 0.0
        assert classify_balance(np.full((100, 100), level)) == 'symmetric'

    def test_gentle_variation_is_radial(self):
        values = np.full((60, 80), 100.0)
        values[:, 40:] = 140.0
        assert classify_balance(values) == 'radial'

    def test_mirrored_high_contrast_is_symmetric(self):
        values = np.full((100, 100), 255.0)
        values[:, :25] = 0.0
        values[:, 75:] = 0.0
        assert classify_balance(values) == 'symmetric'

    def test_split_field_is_asymmetric(self):
        values = np.zeros((100, 100))
        values[:, 50:] = 255.0
        assert classify_balance(values) == 'asymmetric'

    def test_single_column_raises(self):
        with pytest.raises(ValueError):
            classify_balance(np.zeros((10, 1)))


class TestSpacing:
    def test_stripes_are_consistent(self):
        assert spacing_consistency(_stripes())

    def test_uniform_is_not(self):
        assert not spacing_consistency(np.full((100, 100), 255.0))
        assert not spacing_consistency(np.zeros((100, 100)))


class TestHierarchy:
    def test_no_contrast_is_balanced(self):
        hierarchy = visual_hierarchy(np.full((90, 90), 255.0), 'web')
        assert hierarchy == [
            'Balanced composition with no dominant focal point',
            'Layout follows web design conventions',
        ]

    def test_focal_point_position(self):
        values = np.full((90, 90), 255.0)
        values[5:15, 5:15] = 0.0
        assert visual_hierarchy(values, 'general')[0] == 'Strong focal point detected in top-left'

    def test_focal_point_bottom_right(self):
        values = np.full((90, 90), 255.0)
        values[70:80, 70:80] = 0.0
        assert visual_hierarchy(values, 'general')[0] == 'Strong focal point detected in bottom-right'

    @pytest.mark.parametrize(
        ('design_type', 'hint'),
        [
            ('mobile', 'Vertical flow optimized for mobile viewing'),
            ('print', 'Traditional print layout hierarchy'),
        ],
    )
    def test_design_hints(self, design_type, hint):
        assert visual_hierarchy(np.full((30, 30), 10.0), design_type)[-1] == hint

    def test_general_has_no_hint(self):
        assert len(visual_hierarchy(np.full((30, 30), 10.0), 'general')) == 1


class TestScores:
    def test_alignment_of_plain_square_is_zero(self):
        assert alignment_score(np.full((100, 100), 255.0)) == 0

    def test_common_aspect_ratio_bonus(self):
        assert alignment_score(np.full((90, 160), 255.0)) == 20

    def test_composition_bounds(self):
        assert composition_score(True, 'symmetric', True, 100) == 100
        assert composition_score(False, 'asymmetric', False, 0) == 20
        assert composition_score(False, 'radial', False, 50) == 36


class TestAnalyze:
    @pytest.mark.parametrize('rgb', [(255, 255, 255), (200, 200, 200), (37, 99, 235), (0, 0, 0)])
    def test_any_solid_colour_is_symmetric(self, rgb):
        result = analyze(Raster.solid(100, 100, rgb))
        assert result.balance == 'symmetric'
        assert result.score == 25

    def test_uniform_raster(self):
        result = analyze(Raster.solid(90, 90, (255, 255, 255)))
        assert result.balance == 'symmetric'
        assert result.grid_alignment is False
        assert result.spacing_consistency is False
        assert result.alignment_score == 0
        assert result.score == 25

    def test_score_range(self):
        arr = np.zeros((120, 160, 3), dtype=np.uint8)
        arr[::7] = 255
        arr[:, ::11] = (255, 0, 0)
        result = analyze(Raster.from_array(arr), 'mobile')
        assert 0 <= result.score <= 100
        assert result.balance in ('symmetric', 'asymmetric', 'radial')

    def test_empty_raster_degrades(self):
        outcome = evaluate(Raster.solid(0, 0, (0, 0, 0)))
        assert isinstance(outcome, Degraded)
        assert outcome.result.score == 50
        assert outcome.result.balance == 'asymmetric'
        assert outcome.result.visual_hierarchy == ['Unable to analyze hierarchy']

    def test_one_pixel_wide_raster_degrades(self):
        assert isinstance(evaluate(Raster.solid(1, 40, (9, 9, 9))), Degraded)

    def test_ok(self):
        assert isinstance(evaluate(Raster.solid(30, 30, (9, 9, 9)), 'print'), Ok)
