"""Photo-disintegration of nuclei on a diffuse photon background."""

import math
from pathlib import Path
from typing import List, Optional, Sequence, Union

import numpy as np
import torch

from ..core.data_models import (
    Candidate,
    DisintegrationChannel,
    ParticleState,
    PendingInteraction,
    charge_number_from_id,
    mass_number_from_id,
    nucleus_id,
    nucleus_mass,
)
from ..physics_data import get_rate_table_path
from ..utils.logging import get_logger
from ..utils.validation import ConfigurationError, InteractionStateError
from .constants import C_SQUARED, LG_MAX, LG_MIN
from .interpolation import interpolate_equidistant
from .photon_field import (
    PHOTON_FIELD_DATA,
    PhotonField,
    photon_field_scaling,
    resolve_photon_field,
)
from .random_source import RandomSource
from .rate_table import RateTable


logger = get_logger()


class PhotoDisintegration:
    """Tabulated photo-disintegration of nuclei.

    Selects the next disintegration of a candidate by racing the
    exponential free paths of all channels of its nuclide, and performs
    a previously selected disintegration by stripping the emitted
    nucleons and light nuclei from the parent.

    Rates are tabulated against lg = log10(Lorentz factor) on (6, 14).
    Outside this range, and for nuclides without channels, no
    interaction is modelled.

    Attributes:
        photon_field: Photon background the rates were computed for
        description: Name under which pending interactions are stored
        rate_table: Channels and rate curves per nuclide
        random_source: Source of uniform draws in (0, 1]
    """

    def __init__(
        self,
        photon_field: Union[PhotonField, str] = PhotonField.CMB,
        data_directory: Optional[Union[str, Path]] = None,
        rate_table: Optional[RateTable] = None,
        random_source: Optional[RandomSource] = None,
        device: str = 'cpu'
    ):
        """Initialize PhotoDisintegration.

        Args:
            photon_field: Photon background (member or name)
            data_directory: Directory holding the rate tables
            rate_table: Already loaded table to share instead of loading
            random_source: Random source (a fresh RandomSource if None)
            device: Device for tensor storage

        Raises:
            ConfigurationError: If the photon field is unknown or its
                rate table cannot be found or opened
        """
        self.photon_field = resolve_photon_field(photon_field)
        field_data = PHOTON_FIELD_DATA[self.photon_field]
        self.description = field_data.description
        self.device = device

        if rate_table is None:
            try:
                table_path = get_rate_table_path(field_data.file_name, data_directory)
            except FileNotFoundError as e:
                raise ConfigurationError(str(e)) from e
            rate_table = RateTable.load(table_path, device=device)
        self.rate_table = rate_table

        if random_source is None:
            random_source = RandomSource(device=device)
        self.random_source = random_source

        logger.info(
            f"{self.description} initialized: "
            f"{len(self.rate_table)} nuclides, {self.rate_table.num_channels} channels"
        )

    def set_next_interaction(self, candidate: Candidate) -> Optional[PendingInteraction]:
        """Sample the distance to and channel of the next disintegration.

        One uniform number is drawn per channel and converted into an
        exponential free path; the channel with the strictly shortest
        path wins (the first one on ties). The path is scaled by the
        photon density at the candidate's redshift and converted to
        comoving distance.

        Args:
            candidate: Propagating nucleus

        Returns:
            The interaction stored on the candidate, or None if no
            disintegration is modelled at this nuclide and energy
        """
        A = candidate.current.mass_number
        Z = candidate.current.charge_number
        N = A - Z

        records = self.rate_table.get_channels(Z, N)
        if not records:
            return None

        # Background photon energies grow with (1+z); boosting the nucleus
        # by the same factor is equivalent for the table lookup
        z = candidate.redshift
        gamma = candidate.current.lorentz_factor * (1 + z)
        if gamma <= 0:
            return None
        lg = math.log10(gamma)
        if lg <= LG_MIN or lg >= LG_MAX:
            return None

        rates = interpolate_equidistant(lg, LG_MIN, LG_MAX, self.rate_table.get_rates(Z, N))
        u = self.random_source.uniform(len(records)).to(rates.device)

        # Channels without rate cannot be selected
        distances = torch.where(
            rates > 0, -torch.log(u) / rates, torch.full_like(rates, math.inf)
        )

        # argmin returns the first index among equal minima
        best = int(torch.argmin(distances))
        distance = float(distances[best])
        if math.isinf(distance):
            return None

        # Interaction length is inversely proportional to photon density
        scaling = photon_field_scaling(self.photon_field, z)
        if scaling <= 0:
            return None
        distance /= scaling

        # Convert to comoving frame
        distance *= 1 + z

        interaction = PendingInteraction(distance=distance, channel=records[best].code)
        candidate.set_interaction_state(self.description, interaction)
        return interaction

    def perform_interaction(self, candidate: Candidate) -> List[ParticleState]:
        """Disintegrate the candidate through its pending channel.

        Energy is shared per nucleon: the remnant and every emitted
        particle keep the parent's energy per nucleon. If no nucleons
        remain the candidate is deactivated.

        Args:
            candidate: Nucleus with a pending interaction from this module

        Returns:
            Secondaries added to the candidate by this interaction

        Raises:
            InteractionStateError: If no interaction is pending
        """
        interaction = candidate.get_interaction_state(self.description)
        if interaction is None:
            raise InteractionStateError(
                f"No pending interaction for {self.description}"
            )
        candidate.clear_interaction_states()

        channel = DisintegrationChannel.from_code(interaction.channel)

        A = candidate.current.mass_number
        Z = candidate.current.charge_number
        energy_per_nucleon = candidate.current.energy / A

        remaining = A - channel.mass_loss
        if remaining > 0:
            candidate.current.set_id(nucleus_id(remaining, Z - channel.charge_loss))
            candidate.current.set_energy(energy_per_nucleon * remaining)
        else:
            candidate.set_active(False)

        secondaries = [
            candidate.add_secondary(nucleus_id(a, z), energy_per_nucleon * a)
            for a, z in channel.products()
        ]

        logger.debug(
            f"Channel {channel}: A={A}, Z={Z} -> A={remaining}, "
            f"{len(secondaries)} secondaries"
        )
        return secondaries

    def energy_loss_length(self, particle_id: int, energy: float) -> float:
        """Mean free path for energy loss through photo-disintegration.

        Each channel's rate is weighted with the fraction of nucleons it
        strips from the nucleus; the loss length is the inverse of the
        summed weighted rates. No random numbers are drawn.

        Args:
            particle_id: Nucleus id
            energy: Total energy in J

        Returns:
            Energy loss length in m (math.inf if no loss is modelled)
        """
        A = mass_number_from_id(particle_id)
        Z = charge_number_from_id(particle_id)
        N = A - Z

        records = self.rate_table.get_channels(Z, N)
        if not records:
            return math.inf

        if energy <= 0:
            return math.inf
        lg = math.log10(energy / (nucleus_mass(particle_id) * C_SQUARED))
        if lg <= LG_MIN or lg >= LG_MAX:
            return math.inf

        rates = interpolate_equidistant(lg, LG_MIN, LG_MAX, self.rate_table.get_rates(Z, N))
        relative_loss = torch.tensor(
            [record.channel.relative_energy_loss(A) for record in records],
            dtype=rates.dtype, device=rates.device
        )
        loss_rate = float(torch.sum(rates * relative_loss))
        if loss_rate <= 0:
            return math.inf
        return 1.0 / loss_rate

    def energy_loss_lengths(self, particle_id: int, energies: Sequence[float]) -> np.ndarray:
        """Tabulate ``energy_loss_length`` over several energies.

        Args:
            particle_id: Nucleus id
            energies: Total energies in J

        Returns:
            Energy loss lengths in m [len(energies)]
        """
        return np.array([self.energy_loss_length(particle_id, E) for E in energies])
