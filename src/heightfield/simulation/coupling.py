"""Two-way coupling between the water surface and submerged bodies.

Each tick:

1. The body displacement buffers are swapped and the current one cleared.
2. For every body, the cells under its horizontal footprint receive the
   height of water column the body occupies there. The displaced volume
   pushes the body up with buoyancy F = ρ V |g|.
3. The displacement field is box-blurred twice to remove spikes from the
   discretized footprints.
4. The change in displacement since the last tick is fed into the water
   heights: h += α (b - b_prev). A body entering the water raises the
   surface around it, a body leaving lowers it.

Bodies are spheres described by position and radius. They are owned by the
caller and only ever receive forces through ``apply_force``.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from functools import partial
from typing import NamedTuple, Protocol, runtime_checkable

import jax.numpy as jnp
from jax import Array, jit

from heightfield.core.config import CouplingSettings
from heightfield.core.constants import (
    BODY_SMOOTHING_ITERATIONS,
    DEFAULT_ALPHA,
    G,
    RHO_WATER,
)
from heightfield.core.errors import InvalidConfigurationError
from heightfield.core.types import Vector3D
from heightfield.simulation.height_field import HeightField

logger = logging.getLogger(__name__)


@runtime_checkable
class RigidBody(Protocol):
    """A sphere that can be pushed by the water."""

    position: Vector3D
    radius: float

    def apply_force(self, force_y: float, dt: float) -> None:
        """Receive a vertical force acting for dt.

        Called at most once per coupling step with the buoyancy summed over
        every cell the body displaces.
        """
        ...


class Footprint(NamedTuple):
    """Inclusive range of grid cells a body can cover."""
    x0: int
    x1: int
    z0: int
    z1: int

    @property
    def is_empty(self) -> bool:
        return self.x0 > self.x1 or self.z0 > self.z1


@dataclass
class CouplingReport:
    """Per-body outcome of one coupling step, in body order."""

    forces: list[float] = field(default_factory=list)
    submerged_cells: list[int] = field(default_factory=list)

    @property
    def total_force(self) -> float:
        return sum(self.forces)

    @property
    def n_submerged(self) -> int:
        """Number of bodies touching the water."""
        return sum(1 for n in self.submerged_cells if n > 0)


def body_footprint(
    px: float,
    pz: float,
    radius: float,
    num_x: int,
    num_z: int,
    spacing: float,
) -> Footprint:
    """Cells whose centres may lie within radius of (px, pz), clamped to the grid."""
    cx = num_x // 2
    cz = num_z // 2
    return Footprint(
        x0=max(0, cx + math.floor((px - radius) / spacing)),
        x1=min(num_x - 1, cx + math.floor((px + radius) / spacing)),
        z0=max(0, cz + math.floor((pz - radius) / spacing)),
        z1=min(num_z - 1, cz + math.floor((pz + radius) / spacing)),
    )


def submerged_heights(
    water: Array,
    xs: Array,
    zs: Array,
    position: tuple[float, float, float],
    radius: float,
) -> Array:
    """Height of each water column occupied by a sphere.

    Args:
        water: Water heights over the footprint, shape (len(xs), len(zs)).
        xs, zs: World coordinates of the footprint rows and columns.
        position: Sphere centre (x, y, z).
        radius: Sphere radius.

    Returns:
        Submerged height per footprint cell, zero outside the sphere.
    """
    px, py, pz = position
    dx = px - xs[:, None]
    dz = pz - zs[None, :]
    r2 = dx * dx + dz * dz
    inside = r2 < radius * radius

    # Half the height of the sphere's vertical chord through each cell
    half = jnp.sqrt(jnp.where(inside, radius * radius - r2, 0.0))

    body_min = jnp.maximum(py - half, 0.0)
    body_max = jnp.minimum(py + half, water)

    return jnp.where(inside, jnp.maximum(body_max - body_min, 0.0), 0.0)


def accumulate_body_heights(
    height_field: HeightField,
    bodies: Sequence[RigidBody],
    dt: float,
    gravity_y: float = -G,
    water_density: float = RHO_WATER,
    body_heights: Array | None = None,
) -> tuple[Array, CouplingReport]:
    """Sum submerged column heights of all bodies and push the bodies up.

    Water heights are read from the field as they were before coupling.
    Each body receives its buoyancy as one force per call, the sum over all
    cells it displaces.

    Submerged heights are added onto body_heights when given, else onto a
    fresh zero buffer.

    Returns:
        Unsmoothed body heights (num_x, num_z) and the per-body report.
    """
    heights = height_field.state.heights
    if body_heights is None:
        body_heights = jnp.zeros_like(heights)
    report = CouplingReport()

    xs_all = height_field.cell_x()
    zs_all = height_field.cell_z()
    cell_area = height_field.spacing * height_field.spacing
    weight = abs(gravity_y) * water_density

    for body in bodies:
        px, py, pz = (float(c) for c in body.position)
        radius = float(body.radius)

        fp = body_footprint(px, pz, radius, height_field.num_x, height_field.num_z, height_field.spacing)
        if radius <= 0 or fp.is_empty:
            report.forces.append(0.0)
            report.submerged_cells.append(0)
            continue

        rows = slice(fp.x0, fp.x1 + 1)
        cols = slice(fp.z0, fp.z1 + 1)
        sub = submerged_heights(heights[rows, cols], xs_all[rows], zs_all[cols], (px, py, pz), radius)

        volume = float(jnp.sum(sub)) * cell_area
        force = volume * weight
        if volume > 0:
            body.apply_force(force, dt)
            body_heights = body_heights.at[rows, cols].add(sub)

        report.forces.append(force)
        report.submerged_cells.append(int(jnp.count_nonzero(sub)))

    return body_heights, report


def _neighbor_total(a: Array) -> Array:
    """Sum of existing axis neighbours; off-grid neighbours count as zero."""
    padded = jnp.pad(a, 1)
    return (
        padded[:-2, 1:-1] + padded[2:, 1:-1] +
        padded[1:-1, :-2] + padded[1:-1, 2:]
    )


@partial(jit, static_argnums=(1,))
def smooth_body_heights(b: Array, iterations: int = BODY_SMOOTHING_ITERATIONS) -> Array:
    """Replace each cell by the mean of its existing axis neighbours.

    Corner cells average 2 neighbours, edge cells 3, interior cells 4.
    A cell without neighbours (1 x 1 grid) keeps its value.
    """
    count = _neighbor_total(jnp.ones_like(b))
    safe_count = jnp.maximum(count, 1.0)
    for _ in range(iterations):
        b = jnp.where(count > 0, _neighbor_total(b) / safe_count, b)
    return b


@jit
def apply_feedback(heights: Array, body_heights: Array, prev_body_heights: Array, alpha: float) -> Array:
    """h += α (b - b_prev)"""
    return heights + alpha * (body_heights - prev_body_heights)


@dataclass
class BodyCoupling:
    """Buoyancy exchange between the height field and a list of bodies."""

    alpha: float = DEFAULT_ALPHA
    gravity_y: float = -G
    water_density: float = RHO_WATER

    def __post_init__(self):
        if not 0.0 <= self.alpha <= 1.0:
            raise InvalidConfigurationError(f"alpha must be within [0, 1], got {self.alpha}")
        if not self.water_density > 0:
            raise InvalidConfigurationError(
                f"water_density must be positive, got {self.water_density}"
            )

    @classmethod
    def from_settings(cls, settings: CouplingSettings) -> BodyCoupling:
        return cls(
            alpha=settings.alpha,
            gravity_y=settings.gravity_y,
            water_density=settings.water_density,
        )

    def apply(self, height_field: HeightField, dt: float, bodies: Sequence[RigidBody]) -> CouplingReport:
        """Run one coupling step, updating the field in place."""
        if not dt > 0:
            raise InvalidConfigurationError(f"dt must be positive, got {dt}")

        state = height_field.state.swap_body_buffers()

        body_heights, report = accumulate_body_heights(
            height_field, bodies, dt, self.gravity_y, self.water_density,
            body_heights=state.body_heights,
        )
        body_heights = smooth_body_heights(body_heights)

        heights = apply_feedback(state.heights, body_heights, state.prev_body_heights, self.alpha)
        height_field.state = state._replace(heights=heights, body_heights=body_heights)

        if report.n_submerged:
            logger.debug(
                "Coupling: %d/%d bodies submerged, total buoyancy %.4g",
                report.n_submerged, len(bodies), report.total_force,
            )
        return report
