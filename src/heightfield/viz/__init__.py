"""Visualization utilities."""

from heightfield.viz.plots import plot_height_field, plot_run_diagnostics

__all__ = [
    "plot_height_field",
    "plot_run_diagnostics",
]
