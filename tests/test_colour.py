"""Tests for design_checker.techniques.colour — palette extraction and harmony."""

import numpy as np
import pytest
from design_checker.core.palette import Color
from design_checker.core.raster import Raster
from design_checker.core.types import Degraded, Ok
from design_checker.techniques import colour
from design_checker.techniques.colour import (
    FALLBACK_RAMP,
    HARMONY_TYPES,
    analyze,
    classify_harmony,
    color_statistics,
    evaluate,
    extract_palette,
)


def _halves(left: tuple[int, int, int], right: tuple[int, int, int], width: int = 40, height: int = 20) -> Raster:
    arr = np.zeros((height, width, 3), dtype=np.uint8)
    arr[:, : width // 2] = left
    arr[:, width // 2 :] = right
    return Raster.from_array(arr)


class TestClassifyHarmony:
    def test_red_cyan_is_complementary(self):
        harmony = classify_harmony(['#FF0000', '#00FFFF'])
        assert harmony.type == 'complementary'
        assert harmony.score >= 90

    def test_primaries_are_triadic(self):
        assert classify_harmony(['#ff0000', '#00ff00', '#0000ff']) == ('triadic', 85)

    def test_close_hues_are_analogous(self):
        assert classify_harmony(['#ff0000', '#ff8000']) == ('analogous', 80)

    def test_medium_spread_is_split_complementary(self):
        assert classify_harmony(['#ff0000', '#80ff00']) == ('split_complementary', 70)

    def test_wide_spread_is_mixed(self):
        assert classify_harmony(['#ff0000', '#00ff80']) == ('mixed', 60)

    def test_single_colour_is_insufficient(self):
        assert classify_harmony(['#123456']) == ('insufficient_colors', 0)
        assert classify_harmony([]) == ('insufficient_colors', 0)

    def test_complementary_bonus_is_capped(self):
        harmony = classify_harmony(['#ff0000', '#00ffff'] * 4)
        assert harmony.score == 100

    def test_invalid_entries_count_as_black(self):
        # black has hue 0 like red, so this is a zero-range palette
        assert classify_harmony(['#ff0000', 'not-a-colour']) == ('analogous', 80)

    @pytest.mark.parametrize(
        'palette',
        [['#ff0000'], ['#ff0000', '#00ffff'], ['#ff0000', '#00ff00', '#0000ff'], ['#000', '#fff', '#888']],
    )
    def test_result_in_range(self, palette):
        harmony = classify_harmony(palette)
        assert harmony.type in HARMONY_TYPES
        assert 0 <= harmony.score <= 100


class TestExtractPalette:
    def test_most_frequent_first(self):
        arr = np.zeros((10, 40, 3), dtype=np.uint8)
        arr[:, :30] = (0, 0, 255)
        arr[:, 30:] = (255, 255, 0)
        palette = extract_palette(Raster.from_array(arr), count=8)
        assert [c.hex for c in palette] == ['#0000ff', '#ffff00']

    def test_ties_keep_first_seen(self):
        arr = np.zeros((1, 20, 3), dtype=np.uint8)
        arr[0, :10] = (0, 255, 0)
        arr[0, 10:] = (255, 0, 255)
        palette = extract_palette(Raster.from_array(arr))
        assert [c.hex for c in palette] == ['#00ff00', '#ff00ff']

    def test_count_limits_palette(self):
        assert len(extract_palette(_halves((1, 1, 1), (2, 2, 2)), count=1)) == 1

    def test_seed_is_topped_up_without_duplicates(self):
        raster = _halves((255, 0, 0), (0, 0, 255))
        palette = extract_palette(raster, count=3, seed=['#FF0000', 'bogus', '#00ff00', '#f00'])
        assert [c.hex for c in palette] == ['#ff0000', '#00ff00', '#0000ff']

    def test_full_seed_skips_sampling(self):
        palette = extract_palette(Raster.solid(0, 0, (0, 0, 0)), count=2, seed=['#111111', '#222222', '#333333'])
        assert [c.hex for c in palette] == ['#111111', '#222222']

    def test_empty_raster_falls_back_to_ramp(self):
        palette = extract_palette(Raster.solid(0, 0, (0, 0, 0)))
        assert [c.hex for c in palette] == list(FALLBACK_RAMP)

    def test_ramp_respects_count(self):
        assert len(extract_palette(Raster.solid(0, 0, (0, 0, 0)), count=2)) == 2


class TestAnalyze:
    def test_red_cyan_raster(self):
        result = analyze(_halves((255, 0, 0), (0, 255, 255)))
        assert result.palette == ['#ff0000', '#00ffff']
        assert result.harmony_type == 'complementary'
        assert result.harmony_score >= 90

    def test_low_contrast_pairs_are_reported(self):
        # red on cyan is about 3.1:1
        result = analyze(_halves((255, 0, 0), (0, 255, 255)))
        assert len(result.contrast_issues) == 1
        issue = result.contrast_issues[0]
        assert (issue.foreground, issue.background) == ('#ff0000', '#00ffff')
        assert not issue.passes_aa

    def test_black_white_has_no_issues(self):
        assert analyze(_halves((0, 0, 0), (255, 255, 255))).contrast_issues == []

    def test_statistics(self):
        stats = color_statistics([Color('#000000'), Color('#ffffff')])
        assert stats == {'brightness_avg': 0.5, 'saturation_avg': 0.0, 'hue_diversity': 0.0}

    def test_to_dict_shape(self):
        data = analyze(_halves((255, 0, 0), (0, 255, 255))).to_dict()
        assert set(data) == {'palette', 'harmony_type', 'harmony_score', 'contrast_issues', 'statistics'}
        assert data['contrast_issues'][0]['passes_aa'] is False


class TestEvaluate:
    def test_ok(self):
        outcome = evaluate(_halves((0, 0, 0), (255, 255, 255)))
        assert isinstance(outcome, Ok)
        assert not outcome.degraded

    def test_broken_input_degrades_to_ramp(self):
        outcome = evaluate(None)
        assert isinstance(outcome, Degraded)
        assert outcome.degraded
        assert outcome.result.palette == list(FALLBACK_RAMP)
        assert outcome.result.harmony_type in HARMONY_TYPES

    def test_fallback_ramp_is_truncated_to_count(self, monkeypatch: pytest.MonkeyPatch):
        def broken(*args, **kwargs):
            raise RuntimeError('sampler failed')

        monkeypatch.setattr(colour, 'extract_palette', broken)
        outcome = evaluate(_halves((255, 0, 0), (0, 255, 255)), 3)
        assert isinstance(outcome, Degraded)
        assert outcome.result.palette == ['#000000', '#333333', '#666666']
        assert outcome.result.statistics['saturation_avg'] == 0.0
        assert outcome.result.statistics['brightness_avg'] == pytest.approx(0.2, abs=0.001)
