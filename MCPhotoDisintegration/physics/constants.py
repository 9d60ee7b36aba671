"""Physical constants and rate table layout."""

# Fundamental constants (SI)
EV = 1.602176487e-19  # Electron volt in J
EEV = 1e18 * EV  # Exa electron volt in J
C_LIGHT = 2.99792458e8  # Speed of light in m/s
C_SQUARED = C_LIGHT * C_LIGHT
MPC = 3.08568025e22  # Megaparsec in m

# Nucleon masses
MASS_PROTON = 1.67262158e-27  # kg
MASS_NEUTRON = 1.67492735e-27  # kg

# Rate table grid: log10 of the Lorentz factor
LG_MIN = 6.0
LG_MAX = 14.0
RATE_SAMPLES = 200  # Samples per rate curve

# Rate table bounds
MAX_CHARGE_NUMBER = 30
MAX_NEUTRON_NUMBER = 56
