"""Physical and numerical constants."""

# Gravitational acceleration (m/s²), applied along -y
G = 9.81

# Density of the simulated water. The buoyancy model treats water as unit
# density so displaced volume and gravity alone set the force.
RHO_WATER = 1.0

# Wave propagation defaults
DEFAULT_WAVE_SPEED = 2.0
DEFAULT_POS_DAMPING = 1.0
DEFAULT_VEL_DAMPING = 0.3

# Fraction of the body displacement change fed back into the surface per tick
DEFAULT_ALPHA = 0.5

# A wave may travel at most this fraction of a cell per tick
CFL_FRACTION = 0.5

# Box-blur passes over the body displacement field
BODY_SMOOTHING_ITERATIONS = 2

# Fixed timestep of the real-time loop (s)
DEFAULT_DT = 1.0 / 60.0
