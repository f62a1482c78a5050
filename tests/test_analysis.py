"""Tests for percolation result utilities."""

import math

import pytest
import pandas as pd

from road_resilience.percolation.sweep import PercolationResult, run_percolation_sweep
from road_resilience.percolation.analysis import (
    results_to_frame, frame_to_results, curve, save_results, load_results,
    critical_threshold, combine_sweeps,
)


@pytest.fixture
def chain_results(chain_graph):
    return run_percolation_sweep(chain_graph, [0, 20, 60, 100], 'time')


class TestFrames:
    """Tests for DataFrame conversion."""

    def test_columns_and_nan(self, chain_results):
        df = results_to_frame(chain_results)

        assert list(df.columns) == [
            'threshold', 'giant_component_size', 'component_count', 'mean_distance'
        ]
        assert len(df) == 4
        assert math.isnan(df['mean_distance'].iloc[0])
        assert df['mean_distance'].iloc[2] == pytest.approx(40.0)

    def test_empty(self):
        df = results_to_frame(())

        assert len(df) == 0
        assert 'mean_distance' in df.columns

    def test_back_to_results(self, chain_results):
        """Test NaN turns back into the undefined sentinel."""
        results = frame_to_results(results_to_frame(chain_results))

        assert results[0].mean_distance is None
        assert results[1] == chain_results[1]

    def test_missing_columns(self):
        with pytest.raises(ValueError, match="missing columns"):
            frame_to_results(pd.DataFrame({'threshold': [1]}))


class TestCurves:
    """Tests for plotting series."""

    def test_giant_curve(self, chain_results):
        assert curve(chain_results, 'giant_component_size') == [(0, 1), (20, 2), (60, 3), (100, 4)]

    def test_mean_distance_skips_undefined(self, chain_results):
        pairs = curve(chain_results, 'mean_distance')

        assert [t for t, _ in pairs] == [20, 60, 100]

    def test_unknown_metric(self, chain_results):
        with pytest.raises(ValueError):
            curve(chain_results, 'diameter')


class TestPersistence:
    """Tests for CSV save/load."""

    def test_save_and_load(self, chain_results, tmp_path):
        path = save_results(chain_results, tmp_path / 'out' / 'sweep.csv')

        assert path.exists()
        loaded = load_results(path)
        assert [r.component_count for r in loaded] == [4, 3, 2, 1]
        assert loaded[0].mean_distance is None
        assert loaded[3].mean_distance == pytest.approx(500 / 6)

    def test_load_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_results(tmp_path / 'nope.csv')


class TestCriticalThreshold:
    """Tests for critical threshold detection."""

    def test_largest_jump(self):
        results = [
            PercolationResult(0, 1, 10),
            PercolationResult(1, 2, 9),
            PercolationResult(2, 8, 3),
            PercolationResult(3, 9, 2),
        ]

        assert critical_threshold(results) == 2

    def test_first_of_equal_jumps(self, chain_results):
        assert critical_threshold(chain_results) == 20

    def test_too_short(self, chain_results):
        assert critical_threshold(chain_results[:1]) is None


class TestCombine:
    """Tests for stacking sweeps of several networks."""

    def test_labels(self, chain_results):
        df = combine_sweeps({'full': chain_results, 'south': chain_results[:2]})

        assert list(df.columns)[0] == 'network'
        assert len(df) == 6
        assert df['network'].value_counts()['south'] == 2

    def test_empty(self):
        assert len(combine_sweeps({})) == 0
