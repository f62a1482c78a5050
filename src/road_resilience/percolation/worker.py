"""
Parallel percolation worker.

Splits a threshold sequence into tasks and evaluates them in a process pool.
By default every threshold is its own task, so cancelling pending tasks on a
failure or timeout stops nearly all remaining work. A task that is already
running is not interrupted; its worker finishes it and then exits.
Every worker receives its own copy of the (read-only) sweep, so no state is
shared between processes. Results are reassembled by input position, never by
completion order.
"""

import math
import time
from concurrent.futures import ProcessPoolExecutor, as_completed
from concurrent.futures import TimeoutError as FuturesTimeoutError
from typing import Any, List, Optional, Sequence, Tuple

from .sweep import PercolationResult, PercolationSweep


def chunk_thresholds(
    thresholds: Sequence,
    n_chunks: int,
) -> List[List[Tuple[int, Any]]]:
    """
    Split thresholds into chunks of (position, threshold) pairs.

    Thresholds are dealt round-robin, so every chunk spans the whole
    threshold range.

    Args:
        thresholds: Threshold values
        n_chunks: Desired number of chunks (capped at len(thresholds))

    Returns:
        List of chunks
    """
    indexed = list(enumerate(thresholds))
    if not indexed:
        return []

    n_chunks = max(1, min(n_chunks, len(indexed)))
    return [indexed[i::n_chunks] for i in range(n_chunks)]


def process_threshold_chunk(
    sweep: PercolationSweep,
    chunk: List[Tuple[int, Any]],
) -> List[Tuple[int, PercolationResult]]:
    """
    Evaluate one chunk of thresholds.

    Args:
        sweep: Validated sweep (pickled into the worker process)
        chunk: (position, threshold) pairs

    Returns:
        (position, result) pairs
    """
    return [(position, sweep.evaluate(threshold)) for position, threshold in chunk]


def run_parallel_sweep(
    sweep: PercolationSweep,
    thresholds: Sequence,
    n_workers: int,
    chunk_size: Optional[int] = None,
    timeout: Optional[float] = None,
    verbose: bool = False,
) -> Tuple[PercolationResult, ...]:
    """
    Run a percolation sweep across a pool of worker processes.

    The whole sweep is aborted on the first failing task or when `timeout`
    expires. Tasks that have not started are cancelled, the call returns
    without waiting for running ones, and no partial result is returned.

    Args:
        sweep: Validated PercolationSweep
        thresholds: Threshold values
        n_workers: Number of worker processes
        chunk_size: Thresholds per task (default: 1)
        timeout: Wall-clock limit in seconds for the whole sweep
        verbose: Print progress

    Returns:
        Tuple of PercolationResult in input order
    """
    thresholds = list(thresholds)
    if not thresholds:
        return ()

    n_chunks = math.ceil(len(thresholds) / (chunk_size or 1))
    chunks = chunk_thresholds(thresholds, n_chunks)

    if verbose:
        print(f"Sweeping {len(thresholds)} thresholds in {len(chunks)} chunks "
              f"on {n_workers} workers...")

    start = time.monotonic()
    results: List[Optional[PercolationResult]] = [None] * len(thresholds)

    executor = ProcessPoolExecutor(max_workers=n_workers)
    try:
        futures = {
            executor.submit(process_threshold_chunk, sweep, chunk): n
            for n, chunk in enumerate(chunks)
        }

        completed = 0
        for future in as_completed(futures, timeout=timeout):
            for position, result in future.result():
                results[position] = result
            completed += 1
            if verbose:
                print(f"  Chunk {futures[future] + 1}/{len(chunks)} done "
                      f"({completed}/{len(chunks)})")

    except FuturesTimeoutError as e:
        executor.shutdown(wait=False, cancel_futures=True)
        raise TimeoutError(f"Percolation sweep exceeded {timeout}s") from e
    except Exception:
        executor.shutdown(wait=False, cancel_futures=True)
        raise

    executor.shutdown()

    if verbose:
        print(f"✓ Swept {len(thresholds)} thresholds in {time.monotonic() - start:.1f}s")

    return tuple(results)
