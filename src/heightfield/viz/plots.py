"""Plotting functions for simulation visualization."""

from collections.abc import Sequence
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.figure import Figure

from heightfield.simulation.coupling import RigidBody
from heightfield.simulation.runner import SimulationResult
from heightfield.simulation.surface import WaterSurface


def plot_height_field(
    surface: WaterSurface,
    bodies: Sequence[RigidBody] | None = None,
    save_path: Path | None = None,
) -> Figure:
    """Plot the water column heights as a map.

    Args:
        surface: Water surface to draw.
        bodies: Optional bodies to outline at their (x, z) position.
        save_path: Optional path to save figure.

    Returns:
        Matplotlib figure.
    """
    fig, ax = plt.subplots(figsize=(8, 7))

    grid = surface.height_grid()
    half_x = (surface.num_x // 2) * surface.spacing
    half_z = (surface.num_z // 2) * surface.spacing
    extent = (
        -half_x,
        (surface.num_x - 1) * surface.spacing - half_x,
        -half_z,
        (surface.num_z - 1) * surface.spacing - half_z,
    )

    # Rows are x, so transpose to put x on the horizontal axis
    im = ax.imshow(
        grid.T,
        origin="lower",
        extent=extent,
        cmap="Blues",
        aspect="equal",
    )
    cbar = plt.colorbar(im, ax=ax)
    cbar.set_label("Water height")

    for body in bodies or []:
        x, _, z = (float(c) for c in body.position)
        ax.add_patch(plt.Circle((x, z), float(body.radius), fill=False, color="r", linewidth=1.5))

    ax.set_xlabel("x")
    ax.set_ylabel("z")
    ax.set_title(
        f"Water Surface\n"
        f"{surface.num_x} x {surface.num_z} cells, "
        f"height {float(np.min(grid)):.3f} - {float(np.max(grid)):.3f}"
    )

    plt.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")

    return fig


def plot_run_diagnostics(
    result: SimulationResult,
    save_path: Path | None = None,
) -> Figure:
    """Plot height range, water volume and buoyancy over a run."""
    fig, axes = plt.subplots(3, 1, figsize=(10, 9), sharex=True)

    t = np.array(result.time)

    ax = axes[0]
    ax.fill_between(t, result.min_height, result.max_height, alpha=0.3, color="b")
    ax.plot(t, result.min_height, "b-", linewidth=1)
    ax.plot(t, result.max_height, "b-", linewidth=1)
    ax.set_ylabel("Height range")
    ax.grid(True, alpha=0.3)

    ax = axes[1]
    ax.plot(t, result.total_volume, "g-", linewidth=1.5)
    ax.set_ylabel("Water volume")
    ax.grid(True, alpha=0.3)

    ax = axes[2]
    ax.plot(t, result.buoyancy, "r-", linewidth=1.5)
    ax.set_ylabel("Buoyancy")
    ax.set_xlabel("Time (s)")
    ax.grid(True, alpha=0.3)

    fig.suptitle(f"Run Diagnostics ({result.n_steps} steps, dt={result.dt:.4g}s)")
    plt.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")

    return fig
