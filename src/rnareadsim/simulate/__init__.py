"""Simulation module for RNA-seq counts and reads."""

from rnareadsim.simulate.reads import run_count_simulation, run_read_simulation

__all__ = [
    "run_count_simulation",
    "run_read_simulation",
]
