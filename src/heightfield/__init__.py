"""Height-field water simulator.

A real-time water surface modelled as a grid of water columns, advanced with a
damped linear wave equation and coupled two-way with submerged bodies through
buoyancy.
"""

from heightfield.simulation.surface import WaterSurface

__version__ = "0.1.0"

__all__ = ["WaterSurface", "__version__"]
