"""Tests for the parallel percolation worker."""

import time

import pytest

from road_resilience.percolation.sweep import PercolationSweep
from road_resilience.percolation.worker import (
    chunk_thresholds, process_threshold_chunk, run_parallel_sweep,
)


class FailingSweep(PercolationSweep):
    """Sweep whose evaluation fails at one threshold."""

    fail_at = 60

    def evaluate(self, threshold):
        if threshold == self.fail_at:
            raise ValueError(f"cannot evaluate threshold {threshold}")
        return super().evaluate(threshold)


class SlowSweep(PercolationSweep):
    """Sweep that takes a fixed time per threshold."""

    delay = 2.0

    def evaluate(self, threshold):
        time.sleep(self.delay)
        return super().evaluate(threshold)


class TestChunkThresholds:
    """Tests for threshold chunking."""

    def test_round_robin(self):
        """Test thresholds are dealt across chunks with their positions."""
        chunks = chunk_thresholds([0, 10, 20, 30, 40], 2)

        assert chunks == [[(0, 0), (2, 20), (4, 40)], [(1, 10), (3, 30)]]

    def test_every_position_once(self):
        chunks = chunk_thresholds(list(range(17)), 4)
        positions = sorted(p for chunk in chunks for p, _ in chunk)

        assert positions == list(range(17))

    def test_more_chunks_than_thresholds(self):
        chunks = chunk_thresholds([5, 6], 8)

        assert len(chunks) == 2

    def test_empty(self):
        assert chunk_thresholds([], 4) == []


class TestProcessChunk:
    """Tests for evaluating a single chunk in-process."""

    def test_positions_are_kept(self, chain_graph):
        sweep = PercolationSweep(chain_graph, 'time')
        out = process_threshold_chunk(sweep, [(3, 100), (0, 0)])

        assert [p for p, _ in out] == [3, 0]
        assert out[0][1].component_count == 1
        assert out[1][1].component_count == 4


class TestParallelSweep:
    """Tests for the process pool sweep."""

    def test_matches_serial(self, random_road_graph):
        """Test parallel results equal serial ones, in input order."""
        sweep = PercolationSweep(random_road_graph, 'time', 'length')
        thresholds = list(range(0, 31, 3))

        serial = sweep.run(thresholds)
        parallel = run_parallel_sweep(sweep, thresholds, n_workers=2)

        assert [r.threshold for r in parallel] == thresholds
        for a, b in zip(serial, parallel):
            assert a.component_count == b.component_count
            assert a.giant_component_size == b.giant_component_size
            if a.mean_distance is None:
                assert b.mean_distance is None
            else:
                assert b.mean_distance == pytest.approx(a.mean_distance)

    def test_run_delegates_to_pool(self, chain_graph):
        """Test PercolationSweep.run with several workers and small chunks."""
        results = PercolationSweep(chain_graph, 'time').run(
            [0, 20, 60, 100], n_workers=2, chunk_size=1,
        )

        assert [r.component_count for r in results] == [4, 3, 2, 1]
        assert results[2].mean_distance == pytest.approx(40.0)

    def test_empty(self, chain_graph):
        sweep = PercolationSweep(chain_graph, 'time')

        assert run_parallel_sweep(sweep, [], n_workers=2) == ()

    def test_one_threshold_per_task(self, chain_graph, monkeypatch):
        """Test the default splits the sweep into single-threshold tasks."""
        from road_resilience.percolation import worker

        seen = []

        def spy(thresholds, n_chunks):
            seen.append(n_chunks)
            return chunk_thresholds(thresholds, n_chunks)

        monkeypatch.setattr(worker, 'chunk_thresholds', spy)
        run_parallel_sweep(PercolationSweep(chain_graph, 'time'), [0, 20, 60, 100], n_workers=2)

        assert seen == [4]


class TestParallelAbort:
    """A failure or timeout aborts the whole parallel sweep."""

    def test_failure_propagates(self, chain_graph):
        sweep = FailingSweep(chain_graph, 'time')

        with pytest.raises(ValueError, match="threshold 60"):
            run_parallel_sweep(sweep, [0, 20, 60, 100], n_workers=2)

    def test_failure_through_run(self, chain_graph):
        with pytest.raises(ValueError, match="threshold 60"):
            FailingSweep(chain_graph, 'time').run([0, 60], n_workers=2)

    def test_timeout(self, chain_graph):
        """Test the call returns soon after the timeout, without waiting for the sweep."""
        sweep = SlowSweep(chain_graph, 'time')
        thresholds = [0, 20, 60, 100, 20, 60]

        start = time.monotonic()
        with pytest.raises(TimeoutError):
            run_parallel_sweep(sweep, thresholds, n_workers=2, timeout=0.5)

        # serial completion would take len(thresholds) * delay / n_workers = 6s
        assert time.monotonic() - start < 4.0
