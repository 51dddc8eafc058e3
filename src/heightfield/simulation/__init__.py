"""Height-field water simulation engine."""

from heightfield.simulation.bodies import Ball
from heightfield.simulation.coupling import BodyCoupling, CouplingReport, RigidBody
from heightfield.simulation.height_field import HeightField, HeightFieldState
from heightfield.simulation.runner import SimulationResult, SimulationRunner
from heightfield.simulation.surface import WaterSurface
from heightfield.simulation.wave_step import WaveStep

__all__ = [
    "Ball",
    "BodyCoupling",
    "CouplingReport",
    "HeightField",
    "HeightFieldState",
    "RigidBody",
    "SimulationResult",
    "SimulationRunner",
    "WaterSurface",
    "WaveStep",
]
