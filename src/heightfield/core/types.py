"""Type definitions for the simulation system.

Grid buffers are JAX arrays; NumPy arrays are accepted wherever data crosses
into or out of the package.
"""

from typing import TypeAlias

import numpy as np
from jax import Array

FloatArray: TypeAlias = Array | np.ndarray

# World-space position (x, y, z), y is up
Vector3D: TypeAlias = tuple[float, float, float] | Array | np.ndarray
