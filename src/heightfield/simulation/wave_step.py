"""Wave propagation over the height field.

Solves the 2D linear wave equation on the column heights

∂²h/∂t² = c² ∇²h

with a 5-point stencil and semi-implicit Euler integration:

1. velocities += dt * k * (h_left + h_right + h_down + h_up - 4h),  k = c² / s²
2. heights are pulled toward their neighbourhood average (positional damping)
3. velocities decay (velocity damping) and heights advance by velocities * dt

Off-grid neighbours take the cell's own height, so the gradient across the
domain edge is zero and waves reflect off the walls.

The wave speed is clamped each tick so no wave crosses more than half a cell.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import jax.numpy as jnp
from jax import Array, jit

from heightfield.core.config import WaveSettings
from heightfield.core.constants import (
    CFL_FRACTION,
    DEFAULT_POS_DAMPING,
    DEFAULT_VEL_DAMPING,
    DEFAULT_WAVE_SPEED,
)
from heightfield.core.errors import InvalidConfigurationError
from heightfield.simulation.height_field import HeightField, HeightFieldState

logger = logging.getLogger(__name__)


@jit
def neighbor_sum(h: Array) -> Array:
    """Sum of the 4 axis neighbours, edges substituted by the cell itself."""
    padded = jnp.pad(h, 1, mode="edge")
    return (
        padded[:-2, 1:-1] + padded[2:, 1:-1] +
        padded[1:-1, :-2] + padded[1:-1, 2:]
    )


@jit
def step_wave(
    state: HeightFieldState,
    dt: float,
    k: float,
    pos_damp: float,
    vel_damp: float,
) -> HeightFieldState:
    """Single timestep of the damped wave equation.

    Both updates of the first pass read the heights from before the step.
    """
    h = state.heights
    sum_h = neighbor_sum(h)

    # Pass 1: acceleration from the discrete Laplacian, positional damping
    acc = k * (sum_h - 4.0 * h)
    velocities = state.velocities + dt * acc
    heights = h + (0.25 * sum_h - h) * pos_damp

    # Pass 2: velocity damping, integrate heights
    velocities = velocities * vel_damp
    heights = heights + velocities * dt

    return state._replace(heights=heights, velocities=velocities)


def stable_wave_speed(wave_speed: float, spacing: float, dt: float) -> float:
    """Largest wave speed not exceeding the per-cell stability bound."""
    return min(wave_speed, CFL_FRACTION * spacing / dt)


def damping_factors(pos_damping: float, vel_damping: float, dt: float) -> tuple[float, float]:
    """Per-tick positional and velocity damping factors, both within [0, 1]."""
    pos_damp = min(pos_damping * dt, 1.0)
    vel_damp = max(0.0, 1.0 - vel_damping * dt)
    return pos_damp, vel_damp


@dataclass
class WaveStep:
    """Advances a height field with the damped wave equation.

    The clamped wave speed is kept, so once a large dt lowers it the
    lower value stays in effect.
    """

    wave_speed: float = DEFAULT_WAVE_SPEED
    pos_damping: float = DEFAULT_POS_DAMPING
    vel_damping: float = DEFAULT_VEL_DAMPING

    def __post_init__(self):
        for name in ("wave_speed", "pos_damping", "vel_damping"):
            value = getattr(self, name)
            if not value >= 0:
                raise InvalidConfigurationError(f"{name} must be non-negative, got {value}")

    @classmethod
    def from_settings(cls, settings: WaveSettings) -> WaveStep:
        return cls(
            wave_speed=settings.wave_speed,
            pos_damping=settings.pos_damping,
            vel_damping=settings.vel_damping,
        )

    def advance(self, height_field: HeightField, dt: float) -> float:
        """Advance the field by dt in place.

        Returns:
            The wave speed used for this step.
        """
        if not dt > 0:
            raise InvalidConfigurationError(f"dt must be positive, got {dt}")

        clamped = stable_wave_speed(self.wave_speed, height_field.spacing, dt)
        if clamped < self.wave_speed:
            logger.debug(
                "Clamping wave speed %.4g -> %.4g (spacing=%.4g, dt=%.4g)",
                self.wave_speed, clamped, height_field.spacing, dt,
            )
            self.wave_speed = clamped

        k = self.wave_speed * self.wave_speed / (height_field.spacing * height_field.spacing)
        pos_damp, vel_damp = damping_factors(self.pos_damping, self.vel_damping, dt)

        height_field.state = step_wave(height_field.state, dt, k, pos_damp, vel_damp)
        return self.wave_speed
