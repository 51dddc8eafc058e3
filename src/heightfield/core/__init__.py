"""Core data structures and utilities."""

from heightfield.core.config import Settings
from heightfield.core.errors import (
    CellIndexError,
    HeightFieldError,
    InvalidConfigurationError,
)
from heightfield.core.types import FloatArray, Vector3D

__all__ = [
    "CellIndexError",
    "FloatArray",
    "HeightFieldError",
    "InvalidConfigurationError",
    "Settings",
    "Vector3D",
]
