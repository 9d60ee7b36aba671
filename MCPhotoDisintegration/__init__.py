"""
Monte Carlo photo-disintegration of ultra-high-energy nuclei

Tabulated photo-disintegration rates of nuclei on the cosmic microwave and
infrared backgrounds, with Monte Carlo selection of the next disintegration
and its execution for use inside a propagation code.
"""

__version__ = "0.1.0"

from .physics.photodisintegration import PhotoDisintegration
from .core.disintegration_simulator import DisintegrationSimulator
from .utils.config import SimulationConfig

__all__ = ['PhotoDisintegration', 'DisintegrationSimulator', 'SimulationConfig']
