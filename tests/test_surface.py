"""Tests for the water surface facade."""

import numpy as np
import pytest

from heightfield.core.config import CouplingSettings, GridSettings, Settings, WaveSettings
from heightfield.core.errors import CellIndexError, InvalidConfigurationError
from heightfield.simulation.bodies import Ball
from heightfield.simulation.coupling import BodyCoupling
from heightfield.simulation.surface import WaterSurface
from heightfield.simulation.wave_step import WaveStep


@pytest.fixture
def still_surface():
    """5 x 5 cells, unit spacing, no damping."""
    return WaterSurface(
        size_x=4.0, size_z=4.0, depth=1.0, spacing=1.0,
        wave_speed=2.0, pos_damping=0.0, vel_damping=0.0,
    )


class TestConstruction:
    """Tests for surface creation."""

    def test_defaults(self):
        surface = WaterSurface(size_x=2.0, size_z=3.0, depth=0.5, spacing=0.5)

        assert (surface.num_x, surface.num_z) == (5, 7)
        assert surface.num_cells == 35
        assert surface.wave_speed == 2.0
        assert surface.wave.pos_damping == 1.0
        assert surface.wave.vel_damping == 0.3
        assert surface.alpha == 0.5
        assert surface.coupling.water_density == 1.0
        assert surface.heights.shape == (35,)
        np.testing.assert_allclose(surface.heights, 0.5)

    def test_invalid_spacing(self):
        with pytest.raises(InvalidConfigurationError):
            WaterSurface(size_x=1.0, size_z=1.0, depth=1.0, spacing=0.0)

    def test_invalid_alpha(self):
        with pytest.raises(InvalidConfigurationError):
            WaterSurface(size_x=1.0, size_z=1.0, depth=1.0, spacing=0.1, alpha=2.0)

    def test_invalid_gravity(self):
        with pytest.raises(InvalidConfigurationError):
            WaterSurface(size_x=1.0, size_z=1.0, depth=1.0, spacing=0.1, gravity=(0.0, -9.81))

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"wave_speed": -100.0},
            {"pos_damping": -1.0},
            {"vel_damping": -50.0},
            {"wave_speed": float("nan")},
        ],
    )
    def test_negative_wave_parameters_rejected(self, kwargs):
        """Negative tunables would bypass the stability clamp or amplify waves."""
        with pytest.raises(InvalidConfigurationError):
            WaterSurface(size_x=4.0, size_z=4.0, depth=1.0, spacing=1.0, **kwargs)

    def test_from_settings(self):
        settings = Settings(
            grid=GridSettings(size_x=3.0, size_z=1.0, depth=2.0, spacing=0.5),
            wave=WaveSettings(wave_speed=1.5, pos_damping=0.0, vel_damping=0.1),
            coupling=CouplingSettings(alpha=0.25, gravity_y=-10.0, water_density=2.0),
        )

        surface = WaterSurface.from_settings(settings)

        assert (surface.num_x, surface.num_z) == (7, 3)
        assert surface.wave_speed == 1.5
        assert surface.wave == WaveStep(wave_speed=1.5, pos_damping=0.0, vel_damping=0.1)
        assert surface.alpha == 0.25
        assert surface.gravity == (0.0, -10.0, 0.0)
        assert surface.coupling.gravity_y == -10.0
        assert surface.coupling.water_density == 2.0
        assert surface.coupling == BodyCoupling(alpha=0.25, gravity_y=-10.0, water_density=2.0)


class TestSimulate:
    """Tests for the wave entry point."""

    def test_centre_disturbance(self, still_surface):
        """A raised centre column falls and pushes its neighbours up symmetrically."""
        surface = still_surface
        assert surface.field.index(2, 2) == 12
        surface.set_height(2, 2, 2.0)

        surface.simulate(0.1)

        heights = surface.heights
        velocities = surface.velocities
        assert heights[12] < 2.0

        neighbour_velocities = [velocities[i] for i in (7, 17, 11, 13)]
        assert all(v > 0 for v in neighbour_velocities)
        assert neighbour_velocities == pytest.approx([neighbour_velocities[0]] * 4)

        for corner in (0, 4, 20, 24):
            assert heights[corner] == 1.0

    def test_centre_values(self, still_surface):
        """Hand-computed values for one step with k = 4."""
        still_surface.set_height(2, 2, 2.0)

        still_surface.simulate(0.1)

        # Centre: acc = 4 * (4 - 8) = -16, v = -1.6, h = 2 - 0.16
        assert still_surface.height_at(2, 2) == pytest.approx(1.84)
        # Neighbour: acc = 4 * (5 - 4) = 4, v = 0.4, h = 1 + 0.04
        assert still_surface.height_at(1, 2) == pytest.approx(1.04)

    def test_wave_speed_clamped(self, still_surface):
        still_surface.simulate(1.0)
        assert still_surface.wave_speed <= 0.5 * 1.0 / 1.0

    def test_wave_speed_setter(self, still_surface):
        still_surface.wave_speed = 0.5
        assert still_surface.wave.wave_speed == 0.5
        with pytest.raises(InvalidConfigurationError):
            still_surface.wave_speed = -1.0

    def test_alpha_setter(self, still_surface):
        still_surface.alpha = 1.0
        assert still_surface.coupling.alpha == 1.0
        with pytest.raises(InvalidConfigurationError):
            still_surface.alpha = 1.5


class TestCoupling:
    """Tests for the coupling entry point."""

    def test_ball_displaces_water(self):
        surface = WaterSurface(size_x=4.0, size_z=4.0, depth=1.0, spacing=0.25)
        ball = Ball(position=(0.0, 1.0, 0.0), radius=0.5)
        before = surface.total_volume()

        report = surface.apply_coupling(1 / 60, [ball])

        assert report.forces[0] > 0
        assert ball.velocity[1] > 0
        assert surface.total_volume() > before
        assert surface.body_heights.max() > 0
        np.testing.assert_array_equal(surface.prev_body_heights, 0.0)

    def test_empty_bodies(self, still_surface):
        report = still_surface.apply_coupling(0.1, [])

        assert report.total_force == 0.0
        np.testing.assert_array_equal(still_surface.heights, 1.0)


class TestReadAccess:
    """Tests for the display-facing accessors."""

    def test_height_at(self, still_surface):
        still_surface.set_height(3, 1, 1.7)
        assert still_surface.height_at(3, 1) == pytest.approx(1.7)
        assert still_surface.heights[still_surface.field.index(3, 1)] == pytest.approx(1.7)

    def test_height_at_out_of_range(self, still_surface):
        with pytest.raises(CellIndexError):
            still_surface.height_at(5, 0)

    def test_height_grid(self, still_surface):
        grid = still_surface.height_grid()
        assert grid.shape == (5, 5)
        np.testing.assert_array_equal(grid.reshape(-1), still_surface.heights)

    def test_vertex_positions(self, still_surface):
        vertices = still_surface.vertex_positions()
        assert vertices.shape == (25, 3)
        np.testing.assert_allclose(vertices[:, 1], 1.0)
        assert tuple(vertices[12]) == pytest.approx((0.0, 1.0, 0.0))
