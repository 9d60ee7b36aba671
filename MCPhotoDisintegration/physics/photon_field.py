"""Photon background selection and redshift scaling."""

from enum import Enum
from typing import Dict, NamedTuple, Union

import numpy as np

from ..utils.validation import ConfigurationError


class PhotonField(Enum):
    """Photon background providing the target photons."""
    CMB = 'CMB'
    IRB = 'IRB'
    CMB_IRB = 'CMB_IRB'


class PhotonFieldData(NamedTuple):
    """Rate table file and module description for a photon field."""
    file_name: str
    description: str


PHOTON_FIELD_DATA: Dict[PhotonField, PhotonFieldData] = {
    PhotonField.CMB: PhotonFieldData(
        'photodis_CMB.txt', 'PhotoDisintegration: CMB'
    ),
    PhotonField.IRB: PhotonFieldData(
        'photodis_IRB.txt', 'PhotoDisintegration: IRB'
    ),
    PhotonField.CMB_IRB: PhotonFieldData(
        'photodis_CMB_IRB.txt', 'PhotoDisintegration: CMB and IRB'
    ),
}

# Overall redshift evolution of the IRB, Kneiske et al. 2004 (astro-ph/0309141)
KNEISKE_REDSHIFTS = np.array([0.0, 0.2, 0.4, 0.6, 1.0, 2.0, 3.0, 4.0, 5.0])
KNEISKE_SCALING = np.array(
    [1.0, 1.6937, 2.5885, 3.6178, 5.1980, 7.3871, 8.5471, 7.8605, 0.0]
)


def resolve_photon_field(value: Union[PhotonField, str]) -> PhotonField:
    """Convert a member, name or value into a PhotonField.

    Args:
        value: PhotonField member or its name (case-insensitive)

    Returns:
        PhotonField member

    Raises:
        ConfigurationError: If the value names no known photon field
    """
    if isinstance(value, PhotonField):
        return value
    if isinstance(value, str):
        key = value.strip().upper()
        if key in PhotonField.__members__:
            return PhotonField[key]
    raise ConfigurationError(
        f"Unknown photon background: {value!r} "
        f"(expected one of {', '.join(PhotonField.__members__)})"
    )


def photon_field_scaling(photon_field: PhotonField, z: float) -> float:
    """Photon number density at redshift z relative to today.

    The IRB follows the tabulated Kneiske evolution, clamped to its end
    values; every other field scales like the CMB with (1+z)^3.

    Args:
        photon_field: Photon background
        z: Redshift

    Returns:
        Relative photon density
    """
    if photon_field is PhotonField.IRB:
        return float(np.interp(z, KNEISKE_REDSHIFTS, KNEISKE_SCALING))
    return (1.0 + z) ** 3
