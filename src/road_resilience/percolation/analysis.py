"""
Percolation result utilities.

Conversion to tables and plotting series, CSV persistence, critical
threshold detection and side-by-side comparison of several sweeps.
"""

import numpy as np
import pandas as pd
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .sweep import PercolationResult

RESULT_COLUMNS = ['threshold', 'giant_component_size', 'component_count', 'mean_distance']
METRICS = RESULT_COLUMNS[1:]


def results_to_frame(results: Sequence[PercolationResult]) -> pd.DataFrame:
    """
    Convert sweep results to a DataFrame, one row per threshold.

    An undefined mean distance becomes NaN.
    """
    if not results:
        return pd.DataFrame(columns=RESULT_COLUMNS)

    df = pd.DataFrame([r.as_dict() for r in results], columns=RESULT_COLUMNS)
    df['mean_distance'] = pd.to_numeric(df['mean_distance'], errors='coerce')
    return df


def frame_to_results(df: pd.DataFrame) -> Tuple[PercolationResult, ...]:
    """Convert a results DataFrame back to PercolationResult records (NaN -> None)."""
    missing = [col for col in RESULT_COLUMNS if col not in df.columns]
    if missing:
        raise ValueError(f"Results table is missing columns: {missing}")

    results = []
    for row in df[RESULT_COLUMNS].itertuples(index=False):
        threshold = row.threshold.item() if isinstance(row.threshold, np.generic) else row.threshold
        results.append(PercolationResult(
            threshold=threshold,
            giant_component_size=int(row.giant_component_size),
            component_count=int(row.component_count),
            mean_distance=None if pd.isna(row.mean_distance) else float(row.mean_distance),
        ))
    return tuple(results)


def curve(results: Sequence[PercolationResult], metric: str) -> List[Tuple[Any, Any]]:
    """
    (threshold, value) pairs for one metric, ready for a line plot.

    Rows with an undefined mean distance are left out of the
    'mean_distance' curve.

    Args:
        results: Sweep results
        metric: 'giant_component_size', 'component_count' or 'mean_distance'

    Returns:
        List of (threshold, value) pairs in sweep order
    """
    if metric not in METRICS:
        raise ValueError(f"Unknown metric '{metric}', expected one of {METRICS}")

    pairs = [(r.threshold, getattr(r, metric)) for r in results]
    return [(t, v) for t, v in pairs if v is not None]


def save_results(results: Sequence[PercolationResult], output_file: Union[str, Path]) -> Path:
    """
    Save sweep results to CSV.

    Args:
        results: Sweep results
        output_file: Output CSV path

    Returns:
        Path to saved file
    """
    output_file = Path(output_file)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    results_to_frame(results).to_csv(output_file, index=False)
    return output_file


def load_results(input_file: Union[str, Path]) -> Tuple[PercolationResult, ...]:
    """Load sweep results saved by save_results()."""
    input_file = Path(input_file)
    if not input_file.exists():
        raise FileNotFoundError(f"Results file not found: {input_file}")
    return frame_to_results(pd.read_csv(input_file))


def critical_threshold(results: Sequence[PercolationResult]) -> Optional[Any]:
    """
    Threshold at which the giant component grows the most.

    The jump is measured between consecutive results; the threshold reported
    is the one where the larger giant component is first seen.

    Returns:
        Threshold value, or None with fewer than two results
    """
    if len(results) < 2:
        return None

    giant = np.array([r.giant_component_size for r in results])
    jumps = np.diff(giant)
    return results[int(np.argmax(jumps)) + 1].threshold


def combine_sweeps(sweeps: Dict[str, Sequence[PercolationResult]]) -> pd.DataFrame:
    """
    Stack several sweeps into one table with a 'network' label column.

    Example:
        combine_sweeps({'africa': full_results, 'south': south_results})
    """
    frames = []
    for label, results in sweeps.items():
        df = results_to_frame(results)
        df.insert(0, 'network', label)
        frames.append(df)

    if not frames:
        return pd.DataFrame(columns=['network'] + RESULT_COLUMNS)

    return pd.concat(frames, ignore_index=True)
