"""Floating ball used by the demo runner.

A minimal sphere with explicit Euler integration. It satisfies the
``RigidBody`` protocol, so any other physics engine's bodies can take its
place in the coupling step.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from heightfield.core.constants import G
from heightfield.core.types import Vector3D


@dataclass
class Ball:
    """Sphere floating on the water surface.

    Position and velocity in world units, y up.
    """

    position: np.ndarray
    radius: float = 0.2
    velocity: np.ndarray = field(default_factory=lambda: np.zeros(3))

    # Density relative to the water; below 1 floats
    density: float = 0.5

    # Fraction of vertical speed kept when hitting the floor
    restitution: float = 0.5

    def __post_init__(self):
        self.position = np.asarray(self.position, dtype=np.float64).copy()
        self.velocity = np.asarray(self.velocity, dtype=np.float64).copy()

    @property
    def mass(self) -> float:
        return self.density * 4.0 / 3.0 * math.pi * self.radius**3

    def apply_force(self, force_y: float, dt: float) -> None:
        """Impulse from a vertical force acting for dt."""
        self.velocity[1] += force_y * dt / self.mass

    def integrate(self, dt: float, gravity: Vector3D = (0.0, -G, 0.0)) -> None:
        """Advance under gravity and bounce off the floor at y = 0."""
        self.velocity += np.asarray(gravity, dtype=np.float64) * dt
        self.position += self.velocity * dt

        if self.position[1] < self.radius:
            self.position[1] = self.radius
            self.velocity[1] = -self.restitution * self.velocity[1]
