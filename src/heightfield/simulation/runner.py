"""Fixed-timestep simulation loop and result handling."""

import json
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Protocol, runtime_checkable

import numpy as np
from pydantic import BaseModel

from heightfield.core.config import Settings, get_settings
from heightfield.core.types import Vector3D
from heightfield.simulation.coupling import RigidBody
from heightfield.simulation.surface import WaterSurface

# Configure module logger with immediate flushing
logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)


@runtime_checkable
class DynamicBody(RigidBody, Protocol):
    """A body the runner integrates itself after each tick."""

    def integrate(self, dt: float, gravity: Vector3D) -> None:
        ...


class SimulationResult(BaseModel):
    """Results from a simulation run."""

    # Metadata
    n_steps: int
    dt: float
    duration_seconds: float
    coupling_enabled: bool
    wave_speed_used: float

    # Grid
    num_x: int
    num_z: int
    spacing: float

    # Diagnostics recorded every few ticks
    time: list[float]
    total_volume: list[float]
    min_height: list[float]
    max_height: list[float]
    buoyancy: list[float]

    # Final body heights above the base plane, in body order
    body_y: list[float]

    @property
    def volume_drift(self) -> float:
        """Relative change in water volume over the run."""
        if not self.total_volume or self.total_volume[0] == 0:
            return 0.0
        return (self.total_volume[-1] - self.total_volume[0]) / self.total_volume[0]

    def to_dict(self) -> dict:
        """Export to dictionary for JSON serialization."""
        return self.model_dump()

    def save(self, path: Path) -> None:
        """Save results to JSON file."""
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)


@dataclass
class SimulationRunner:
    """Drives a water surface and its bodies with a fixed timestep.

    Per tick: coupling (if enabled), wave step, then integration of any
    bodies that know how to move themselves.
    """

    settings: Settings = field(default_factory=get_settings)
    surface: WaterSurface | None = None
    bodies: list[RigidBody] = field(default_factory=list)
    log_fn: Callable[[str], None] | None = None

    def __post_init__(self):
        if self.surface is None:
            self.surface = WaterSurface.from_settings(self.settings)
        self.log = self.log_fn or logger.info

    def disturb(self, i: int, j: int, amount: float) -> None:
        """Raise one column above its current height."""
        self.surface.set_height(i, j, self.surface.height_at(i, j) + amount)

    def step(self, dt: float, coupling: bool = True) -> float:
        """Run one tick.

        Returns:
            Total buoyancy delivered to the bodies this tick.
        """
        buoyancy = 0.0
        if coupling:
            buoyancy = self.surface.apply_coupling(dt, self.bodies).total_force

        self.surface.simulate(dt)

        for body in self.bodies:
            if isinstance(body, DynamicBody):
                body.integrate(dt, self.surface.gravity)

        return buoyancy

    def run(
        self,
        n_steps: int | None = None,
        dt: float | None = None,
        coupling: bool | None = None,
    ) -> SimulationResult:
        """Run the simulation loop.

        Args:
            n_steps: Number of ticks. Defaults to settings.
            dt: Fixed timestep. Defaults to settings.
            coupling: Enable body coupling. Defaults to settings.

        Returns:
            Simulation results.
        """
        sim = self.settings.simulation
        n_steps = sim.n_steps if n_steps is None else n_steps
        dt = sim.dt if dt is None else dt
        coupling = self.settings.coupling.enabled if coupling is None else coupling
        record_every = sim.record_every

        surface = self.surface
        self.log(
            f"Running {n_steps} steps: grid {surface.num_x} x {surface.num_z}, "
            f"spacing {surface.spacing:g}, dt {dt:.4g}s, "
            f"{len(self.bodies)} bodies, coupling {'on' if coupling else 'off'}"
        )

        time: list[float] = []
        total_volume: list[float] = []
        min_height: list[float] = []
        max_height: list[float] = []
        buoyancy: list[float] = []

        def record(t: float, force: float) -> None:
            heights = surface.heights
            time.append(t)
            total_volume.append(surface.total_volume())
            min_height.append(float(np.min(heights)))
            max_height.append(float(np.max(heights)))
            buoyancy.append(force)

        record(0.0, 0.0)
        for i in range(1, n_steps + 1):
            force = self.step(dt, coupling=coupling)

            if i % record_every == 0 or i == n_steps:
                record(i * dt, force)

            if i % (record_every * 10) == 0:
                self.log(
                    f"  {100 * i / n_steps:.0f}% - t={i * dt:.2f}s, "
                    f"height {min_height[-1]:.3f}..{max_height[-1]:.3f}"
                )

        return SimulationResult(
            n_steps=n_steps,
            dt=dt,
            duration_seconds=n_steps * dt,
            coupling_enabled=coupling,
            wave_speed_used=surface.wave_speed,
            num_x=surface.num_x,
            num_z=surface.num_z,
            spacing=surface.spacing,
            time=time,
            total_volume=total_volume,
            min_height=min_height,
            max_height=max_height,
            buoyancy=buoyancy,
            body_y=[float(body.position[1]) for body in self.bodies],
        )
