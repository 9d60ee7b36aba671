"""Physics modules for photo-disintegration rates and sampling."""

from .photon_field import PhotonField, photon_field_scaling
from .random_source import RandomSource, ThreadLocalRandomSource
from .rate_table import RateTable
from .photodisintegration import PhotoDisintegration

__all__ = [
    'PhotonField',
    'photon_field_scaling',
    'RandomSource',
    'ThreadLocalRandomSource',
    'RateTable',
    'PhotoDisintegration'
]
