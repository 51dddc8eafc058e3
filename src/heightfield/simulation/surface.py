"""Water surface facade.

Owns one height field together with the wave and coupling parameters and
exposes the per-tick entry points used by a fixed-timestep loop:

    surface.apply_coupling(dt, bodies)   # optional
    surface.simulate(dt)
    display.update(surface.heights)
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from heightfield.core.config import Settings
from heightfield.core.constants import (
    DEFAULT_ALPHA,
    DEFAULT_POS_DAMPING,
    DEFAULT_VEL_DAMPING,
    DEFAULT_WAVE_SPEED,
    G,
    RHO_WATER,
)
from heightfield.core.errors import InvalidConfigurationError
from heightfield.core.types import Vector3D
from heightfield.simulation.coupling import BodyCoupling, CouplingReport, RigidBody
from heightfield.simulation.height_field import HeightField
from heightfield.simulation.wave_step import WaveStep


class WaterSurface:
    """Height-field water simulation with optional buoyancy coupling."""

    def __init__(
        self,
        size_x: float,
        size_z: float,
        depth: float,
        spacing: float,
        wave_speed: float = DEFAULT_WAVE_SPEED,
        pos_damping: float = DEFAULT_POS_DAMPING,
        vel_damping: float = DEFAULT_VEL_DAMPING,
        alpha: float = DEFAULT_ALPHA,
        gravity: Vector3D = (0.0, -G, 0.0),
        water_density: float = RHO_WATER,
    ):
        self.field = HeightField.create(size_x, size_z, depth, spacing)
        self.wave = WaveStep(
            wave_speed=wave_speed,
            pos_damping=pos_damping,
            vel_damping=vel_damping,
        )
        self.gravity = tuple(float(g) for g in gravity)
        if len(self.gravity) != 3:
            raise InvalidConfigurationError(f"gravity must have 3 components, got {gravity}")
        self.coupling = BodyCoupling(
            alpha=alpha,
            gravity_y=self.gravity[1],
            water_density=water_density,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> WaterSurface:
        grid = settings.grid
        surface = cls(
            size_x=grid.size_x,
            size_z=grid.size_z,
            depth=grid.depth,
            spacing=grid.spacing,
            gravity=(0.0, settings.coupling.gravity_y, 0.0),
        )
        surface.wave = WaveStep.from_settings(settings.wave)
        surface.coupling = BodyCoupling.from_settings(settings.coupling)
        return surface

    # Grid geometry

    @property
    def num_x(self) -> int:
        return self.field.num_x

    @property
    def num_z(self) -> int:
        return self.field.num_z

    @property
    def num_cells(self) -> int:
        return self.field.num_cells

    @property
    def spacing(self) -> float:
        return self.field.spacing

    # Tunables

    @property
    def wave_speed(self) -> float:
        """Wave speed, after any stability clamping so far."""
        return self.wave.wave_speed

    @wave_speed.setter
    def wave_speed(self, value: float) -> None:
        if value < 0:
            raise InvalidConfigurationError(f"wave_speed must be non-negative, got {value}")
        self.wave.wave_speed = value

    @property
    def alpha(self) -> float:
        return self.coupling.alpha

    @alpha.setter
    def alpha(self, value: float) -> None:
        if not 0.0 <= value <= 1.0:
            raise InvalidConfigurationError(f"alpha must be within [0, 1], got {value}")
        self.coupling.alpha = value

    # Per-tick entry points

    def simulate(self, dt: float) -> None:
        """Advance the waves by dt. Coupling is a separate step."""
        self.wave.advance(self.field, dt)

    def apply_coupling(self, dt: float, bodies: Sequence[RigidBody]) -> CouplingReport:
        """Exchange buoyancy with bodies and feed their displacement into the water."""
        return self.coupling.apply(self.field, dt, bodies)

    # Read access for display and diagnostics

    @property
    def heights(self) -> np.ndarray:
        """Read-only column heights in flat order ``i * num_z + j``."""
        return self.field.flat(self.field.state.heights)

    @property
    def velocities(self) -> np.ndarray:
        return self.field.flat(self.field.state.velocities)

    @property
    def body_heights(self) -> np.ndarray:
        return self.field.flat(self.field.state.body_heights)

    @property
    def prev_body_heights(self) -> np.ndarray:
        return self.field.flat(self.field.state.prev_body_heights)

    def height_at(self, i: int, j: int) -> float:
        return self.field.height_at(i, j)

    def set_height(self, i: int, j: int, value: float) -> None:
        self.field.set_height(i, j, value)

    def height_grid(self) -> np.ndarray:
        """Heights as a (num_x, num_z) array."""
        return np.asarray(self.field.state.heights)

    def vertex_positions(self) -> np.ndarray:
        return self.field.vertex_positions()

    def total_volume(self) -> float:
        return self.field.total_volume()
