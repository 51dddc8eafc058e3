"""Exceptions raised by the simulator."""


class HeightFieldError(Exception):
    """Base class for simulator errors."""


class InvalidConfigurationError(HeightFieldError, ValueError):
    """Grid geometry or timestep cannot produce a valid simulation."""


class CellIndexError(HeightFieldError, IndexError):
    """A cell coordinate lies outside the grid."""

    def __init__(self, i: int, j: int, num_x: int, num_z: int):
        self.i = i
        self.j = j
        self.num_x = num_x
        self.num_z = num_z
        super().__init__(
            f"Cell ({i}, {j}) outside grid of {num_x} x {num_z} cells"
        )
