"""Configuration and settings for the simulation system."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from heightfield.core.constants import (
    DEFAULT_ALPHA,
    DEFAULT_DT,
    DEFAULT_POS_DAMPING,
    DEFAULT_VEL_DAMPING,
    DEFAULT_WAVE_SPEED,
    G,
    RHO_WATER,
)


class GridSettings(BaseSettings):
    """Water domain geometry."""

    model_config = SettingsConfigDict(env_prefix="GRID_")

    # Domain extents (world units)
    size_x: float = Field(default=10.0, gt=0)
    size_z: float = Field(default=10.0, gt=0)

    # Initial uniform water height
    depth: float = Field(default=1.0, ge=0)

    # Distance between neighbouring water columns
    spacing: float = Field(default=0.1, gt=0)


class WaveSettings(BaseSettings):
    """Wave propagation configuration."""

    model_config = SettingsConfigDict(env_prefix="WAVE_")

    # Requested wave speed; clamped each tick to the per-cell stability bound
    wave_speed: float = Field(default=DEFAULT_WAVE_SPEED, ge=0)

    # Pull of each column toward its neighbourhood average (1/s)
    pos_damping: float = Field(default=DEFAULT_POS_DAMPING, ge=0)

    # Decay of column velocity (1/s)
    vel_damping: float = Field(default=DEFAULT_VEL_DAMPING, ge=0)


class CouplingSettings(BaseSettings):
    """Body-water interaction configuration."""

    model_config = SettingsConfigDict(env_prefix="COUPLING_")

    # Toggle the coupling step in the runner
    enabled: bool = True

    # Strength of the surface response to displacement changes (0-1)
    alpha: float = Field(default=DEFAULT_ALPHA, ge=0, le=1)

    # Vertical gravity component (negative is down)
    gravity_y: float = -G

    # Water density used for buoyancy
    water_density: float = Field(default=RHO_WATER, gt=0)


class SimulationSettings(BaseSettings):
    """Simulation loop configuration."""

    model_config = SettingsConfigDict(env_prefix="SIM_")

    # Fixed timestep (seconds)
    dt: float = Field(default=DEFAULT_DT, gt=0)

    # Ticks per run
    n_steps: int = Field(default=600, ge=0)

    # Record diagnostics every N ticks
    record_every: int = Field(default=10, ge=1)


class Settings(BaseSettings):
    """Master configuration aggregating all subsystems."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    grid: GridSettings = Field(default_factory=GridSettings)
    wave: WaveSettings = Field(default_factory=WaveSettings)
    coupling: CouplingSettings = Field(default_factory=CouplingSettings)
    simulation: SimulationSettings = Field(default_factory=SimulationSettings)

    # Log clamp and coupling details at DEBUG level
    debug: bool = False


def get_settings() -> Settings:
    """Load settings from environment and .env file."""
    return Settings()
