"""
Sweep run configuration.

SweepConfig loads a YAML run definition describing where the node/edge tables
live, which edge attributes drive the sweep, which thresholds to evaluate,
an optional regional subset, and where to write results.
"""

import yaml
import numpy as np
import igraph
from pathlib import Path
from typing import Any, Dict, List, Optional


class SweepConfig:
    """
    Loads and validates a sweep configuration YAML.

    Example:
        config = SweepConfig.from_yaml('config/example_sweep.yaml')
        print(config.name)
        print(config.criterion_attr)
    """

    def __init__(self, data: Dict[str, Any]):
        self._data = data
        self._validate()

    @classmethod
    def from_yaml(cls, path: str) -> 'SweepConfig':
        """Load sweep config from YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Sweep config not found: {path}")

        with open(path, 'r') as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict):
            raise ValueError(f"Sweep config {path} is not a mapping")

        return cls(data)

    def _validate(self):
        """Validate required config sections and values."""
        required_sections = ['name', 'input', 'sweep']
        for section in required_sections:
            if section not in self._data:
                raise ValueError(f"Missing required config section: '{section}'")

        for key in ('nodes', 'edges'):
            if key not in self._data['input']:
                raise ValueError(f"Missing required input entry: 'input.{key}'")

        if 'criterion' not in self._data['sweep']:
            raise ValueError("Missing required sweep entry: 'sweep.criterion'")

        if self.step <= 0:
            raise ValueError(f"sweep.step must be positive, got {self.step}")
        if self.n_workers < 1:
            raise ValueError(f"sweep.n_workers must be at least 1, got {self.n_workers}")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError(f"sweep.timeout must be positive, got {self.timeout}")

        subset = self._data.get('subset')
        if subset is not None and ('attribute' not in subset or 'values' not in subset):
            raise ValueError("'subset' needs both 'attribute' and 'values'")

    # --- Properties ---

    @property
    def name(self) -> str:
        return self._data['name']

    @property
    def description(self) -> str:
        return self._data.get('description', '')

    # --- Input ---

    @property
    def nodes_path(self) -> Path:
        return Path(self._data['input']['nodes'])

    @property
    def edges_path(self) -> Path:
        return Path(self._data['input']['edges'])

    @property
    def id_column(self) -> str:
        return self._data['input'].get('id_column', 'id')

    @property
    def source_column(self) -> str:
        return self._data['input'].get('source_column', 'from')

    @property
    def target_column(self) -> str:
        return self._data['input'].get('target_column', 'to')

    # --- Sweep ---

    @property
    def criterion_attr(self) -> str:
        return self._data['sweep']['criterion']

    @property
    def distance_attr(self) -> str:
        """Distance attribute; falls back to the criterion attribute."""
        return self._data['sweep'].get('distance') or self.criterion_attr

    @property
    def start(self):
        return self._data['sweep'].get('start', 0)

    @property
    def stop(self):
        return self._data['sweep'].get('stop')

    @property
    def step(self):
        return self._data['sweep'].get('step', 1)

    @property
    def n_workers(self) -> int:
        return int(self._data['sweep'].get('n_workers', 1))

    @property
    def timeout(self) -> Optional[float]:
        return self._data['sweep'].get('timeout')

    def thresholds(self, graph: igraph.Graph) -> List:
        """
        Thresholds to evaluate for a graph.

        Resolution order: explicit `sweep.thresholds` list, then
        start..stop (inclusive) by step, then start..floor(max criterion).
        """
        explicit = self._data['sweep'].get('thresholds')
        if explicit is not None:
            return list(explicit)

        if self.stop is None:
            from ..percolation.sweep import integer_thresholds
            return integer_thresholds(graph, self.criterion_attr, start=self.start, step=self.step)

        if all(isinstance(v, int) for v in (self.start, self.stop, self.step)):
            return list(range(self.start, self.stop + 1, self.step))

        return np.arange(self.start, self.stop + self.step / 2, self.step).tolist()

    # --- Subset ---

    @property
    def subset_attr(self) -> Optional[str]:
        subset = self._data.get('subset')
        return subset['attribute'] if subset else None

    @property
    def subset_values(self) -> List:
        subset = self._data.get('subset')
        if not subset:
            return []
        values = subset['values']
        return list(values) if isinstance(values, (list, tuple)) else [values]

    # --- Output ---

    @property
    def base_dir(self) -> Path:
        return Path(self._data.get('output', {}).get('base_dir', '.'))

    @property
    def results_csv(self) -> Optional[Path]:
        output = self._data.get('output', {})
        if 'results_csv' not in output:
            return None
        return self.base_dir / output['results_csv']

    def __repr__(self):
        return f"SweepConfig(name={self.name!r}, criterion={self.criterion_attr!r})"
