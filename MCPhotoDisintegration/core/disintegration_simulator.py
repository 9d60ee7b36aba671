"""Main photo-disintegration simulator orchestration class."""

from typing import Dict, Sequence

import numpy as np

from .data_models import Candidate, ParticleState, nucleus_id
from ..physics.constants import EEV, MPC
from ..physics.photodisintegration import PhotoDisintegration
from ..physics.random_source import RandomSource
from ..utils.config import SimulationConfig
from ..utils.logging import setup_logger
from ..utils.validation import validate_config


class DisintegrationSimulator:
    """Follows nuclei through successive photo-disintegrations.

    The simulator holds the redshift of a candidate fixed and only
    advances it by the sampled interaction distances, which is enough to
    study disintegration chains and energy loss lengths without a full
    propagation code.

    Attributes:
        config: Simulation configuration
        random_source: Seeded random source shared by all runs
        photodisintegration: Interaction module
        logger: Logger instance
    """

    def __init__(self, config: SimulationConfig):
        """Initialize DisintegrationSimulator.

        Args:
            config: Simulation configuration

        Raises:
            ConfigurationError: If the rate table or device is unavailable
        """
        validate_config(config)
        self.config = config

        self.logger = setup_logger(level=config.log_level, log_file=config.log_file)
        self.logger.info("DisintegrationSimulator initialized")
        self.logger.info(
            f"Configuration: photon_field={config.photon_field}, "
            f"device={config.device}, max_interactions={config.max_interactions}"
        )

        self.random_source = RandomSource(seed=config.random_seed, device=config.device)
        if config.random_seed is not None:
            self.logger.info(f"Random seed set to {config.random_seed}")

        self.photodisintegration = PhotoDisintegration(
            photon_field=config.photon_field,
            data_directory=config.data_directory,
            random_source=self.random_source,
            device=config.device
        )

    @staticmethod
    def create_candidate(
        mass_number: int,
        charge_number: int,
        energy_eev: float,
        redshift: float = 0.0
    ) -> Candidate:
        """Create a candidate nucleus.

        Args:
            mass_number: Mass number A
            charge_number: Charge number Z
            energy_eev: Total energy in EeV
            redshift: Redshift of the candidate

        Returns:
            Candidate instance
        """
        current = ParticleState(
            id=nucleus_id(mass_number, charge_number),
            energy=energy_eev * EEV
        )
        return Candidate(current=current, redshift=redshift)

    def run(self, candidate: Candidate) -> Dict:
        """Disintegrate a candidate until nothing more happens.

        The chain stops when the nucleus is consumed, when no interaction
        is modelled for it, when the next interaction lies beyond
        ``max_distance_mpc`` or after ``max_interactions`` steps.

        Args:
            candidate: Candidate to follow; it is modified in place

        Returns:
            Dictionary with the chain summary
        """
        max_distance = self.config.max_distance_mpc * MPC
        distance = 0.0
        interactions = 0
        stop_reason = 'max_interactions'

        while interactions < self.config.max_interactions:
            if not candidate.active:
                stop_reason = 'consumed'
                break

            interaction = self.photodisintegration.set_next_interaction(candidate)
            if interaction is None:
                stop_reason = 'no_interaction'
                break

            if distance + interaction.distance > max_distance:
                candidate.clear_interaction_states()
                distance = max_distance
                stop_reason = 'max_distance'
                break

            distance += interaction.distance
            self.photodisintegration.perform_interaction(candidate)
            interactions += 1

        self.logger.info(
            f"Chain ended ({stop_reason}) after {interactions} interactions "
            f"and {distance / MPC:.3g} Mpc: A={candidate.current.mass_number}, "
            f"Z={candidate.current.charge_number}, "
            f"{len(candidate.secondaries)} secondaries"
        )

        return {
            'interactions': interactions,
            'distance_mpc': distance / MPC,
            'stop_reason': stop_reason,
            'active': candidate.active,
            'final_mass_number': candidate.current.mass_number,
            'final_charge_number': candidate.current.charge_number,
            'final_energy_eev': candidate.current.energy / EEV,
            'secondaries': list(candidate.secondaries),
        }

    def energy_loss_length_table(
        self,
        mass_number: int,
        charge_number: int,
        energies_eev: Sequence[float]
    ) -> Dict[str, np.ndarray]:
        """Tabulate the energy loss length of a nucleus.

        Args:
            mass_number: Mass number A
            charge_number: Charge number Z
            energies_eev: Total energies in EeV

        Returns:
            Dictionary with 'energy_eev' and 'loss_length_mpc' arrays
        """
        energies_eev = np.asarray(energies_eev, dtype=np.float64)
        lengths = self.photodisintegration.energy_loss_lengths(
            nucleus_id(mass_number, charge_number), energies_eev * EEV
        )
        return {
            'energy_eev': energies_eev,
            'loss_length_mpc': lengths / MPC,
        }
