"""Height-field state for the water surface.

The water surface is a regular grid of water columns. Each column stores a
height above the base plane and the vertical rate of change of that height.
Two extra buffers hold the column height occupied by submerged bodies this
tick and the previous tick; the surface responds to the difference.

Buffers are stored as (num_x, num_z) float64 arrays. Their C-order flattening
gives the flat cell index ``id = i * num_z + j`` used by the display mesh.
The grid is centred on the world origin: cell (i, j) sits at
``x = (i - num_x // 2) * spacing``, ``z = (j - num_z // 2) * spacing``.
"""

from __future__ import annotations

import math
import operator
from dataclasses import dataclass
from typing import NamedTuple

import jax
import jax.numpy as jnp
import numpy as np
from jax import Array

from heightfield.core.errors import CellIndexError, InvalidConfigurationError
from heightfield.core.types import FloatArray

# Enable 64-bit precision for accuracy
jax.config.update("jax_enable_x64", True)


class HeightFieldState(NamedTuple):
    """Immutable grid buffers for JIT compilation."""
    heights: Array              # Column heights (num_x, num_z)
    velocities: Array           # Vertical column velocities (num_x, num_z)
    body_heights: Array         # Body-occupied column height, this tick
    prev_body_heights: Array    # Body-occupied column height, last tick

    def swap_body_buffers(self) -> HeightFieldState:
        """Make the current body buffer the previous one and clear the other."""
        return self._replace(
            body_heights=jnp.zeros_like(self.prev_body_heights),
            prev_body_heights=self.body_heights,
        )


@dataclass
class HeightField:
    """Grid geometry plus the current water state."""

    num_x: int
    num_z: int
    spacing: float
    state: HeightFieldState

    @classmethod
    def create(
        cls,
        size_x: float,
        size_z: float,
        depth: float,
        spacing: float,
    ) -> HeightField:
        """Allocate a flat water surface at uniform depth.

        Args:
            size_x, size_z: Domain extents (world units), must be positive.
            depth: Initial water height, must be non-negative.
            spacing: Distance between water columns, must be positive.

        Raises:
            InvalidConfigurationError: If the geometry cannot form a grid.
        """
        for name, value in (
            ("size_x", size_x),
            ("size_z", size_z),
            ("depth", depth),
            ("spacing", spacing),
        ):
            if not math.isfinite(value):
                raise InvalidConfigurationError(f"{name} must be finite, got {value}")

        if spacing <= 0:
            raise InvalidConfigurationError(f"spacing must be positive, got {spacing}")
        if size_x <= 0 or size_z <= 0:
            raise InvalidConfigurationError(
                f"Domain extents must be positive, got {size_x} x {size_z}"
            )
        if depth < 0:
            raise InvalidConfigurationError(f"depth must be non-negative, got {depth}")

        # Columns sit on the vertices of the grid, not between them
        num_x = math.floor(size_x / spacing) + 1
        num_z = math.floor(size_z / spacing) + 1

        shape = (num_x, num_z)
        state = HeightFieldState(
            heights=jnp.full(shape, depth, dtype=jnp.float64),
            velocities=jnp.zeros(shape, dtype=jnp.float64),
            body_heights=jnp.zeros(shape, dtype=jnp.float64),
            prev_body_heights=jnp.zeros(shape, dtype=jnp.float64),
        )
        return cls(num_x=num_x, num_z=num_z, spacing=float(spacing), state=state)

    @property
    def num_cells(self) -> int:
        return self.num_x * self.num_z

    @property
    def center(self) -> tuple[int, int]:
        """Grid coordinates of the cell at the world origin."""
        return self.num_x // 2, self.num_z // 2

    def _check(self, i: int, j: int) -> tuple[int, int]:
        i = operator.index(i)
        j = operator.index(j)
        if not (0 <= i < self.num_x and 0 <= j < self.num_z):
            raise CellIndexError(i, j, self.num_x, self.num_z)
        return i, j

    def index(self, i: int, j: int) -> int:
        """Flat cell index for grid coordinates (i, j)."""
        i, j = self._check(i, j)
        return i * self.num_z + j

    def height_at(self, i: int, j: int) -> float:
        i, j = self._check(i, j)
        return float(self.state.heights[i, j])

    def velocity_at(self, i: int, j: int) -> float:
        i, j = self._check(i, j)
        return float(self.state.velocities[i, j])

    def body_height_at(self, i: int, j: int) -> float:
        i, j = self._check(i, j)
        return float(self.state.body_heights[i, j])

    def set_height(self, i: int, j: int, value: float) -> None:
        """Overwrite a single column height, e.g. to inject a disturbance."""
        i, j = self._check(i, j)
        self.state = self.state._replace(heights=self.state.heights.at[i, j].set(value))

    def cell_position(self, i: int, j: int) -> tuple[float, float]:
        """World (x, z) of a cell centre."""
        i, j = self._check(i, j)
        cx, cz = self.center
        return (i - cx) * self.spacing, (j - cz) * self.spacing

    def cell_x(self) -> Array:
        """World x coordinate of every grid row."""
        return (jnp.arange(self.num_x) - self.num_x // 2) * self.spacing

    def cell_z(self) -> Array:
        """World z coordinate of every grid column."""
        return (jnp.arange(self.num_z) - self.num_z // 2) * self.spacing

    def flat(self, buffer: FloatArray) -> np.ndarray:
        """Read-only flat view of a buffer, indexed by ``i * num_z + j``."""
        return np.asarray(buffer).reshape(-1)

    def vertex_positions(self) -> np.ndarray:
        """Display-mesh vertices (x, height, z), one per cell, in flat order."""
        x, z = np.meshgrid(
            np.asarray(self.cell_x()), np.asarray(self.cell_z()), indexing="ij"
        )
        return np.stack(
            [x.reshape(-1), self.flat(self.state.heights), z.reshape(-1)],
            axis=1,
        )

    def total_volume(self) -> float:
        """Water volume above the base plane."""
        return float(jnp.sum(self.state.heights)) * self.spacing * self.spacing
