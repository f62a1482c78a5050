"""Sweep run definition and config-driven execution."""

from .manifest import SweepConfig
from .orchestrator import run_from_config, load_config_graph

__all__ = ['SweepConfig', 'run_from_config', 'load_config_graph']
