"""Core data models for nuclei, disintegration channels and interactions."""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

import torch

from ..physics.constants import C_SQUARED, MASS_NEUTRON, MASS_PROTON


def nucleus_id(mass_number: int, charge_number: int) -> int:
    """Encode a nucleus as 1000000000 + 10000*Z + 10*A."""
    return 1000000000 + charge_number * 10000 + mass_number * 10


def mass_number_from_id(id: int) -> int:
    return (id // 10) % 1000


def charge_number_from_id(id: int) -> int:
    return (id // 10000) % 1000


def nucleus_mass(id: int) -> float:
    """Rest mass in kg, summed over nucleons without binding energy."""
    A = mass_number_from_id(id)
    Z = charge_number_from_id(id)
    return Z * MASS_PROTON + (A - Z) * MASS_NEUTRON


@dataclass
class ParticleState:
    """Identity and total energy of a nucleus.

    Attributes:
        id: Nucleus id (see ``nucleus_id``)
        energy: Total energy in J
    """
    id: int
    energy: float

    @property
    def mass_number(self) -> int:
        return mass_number_from_id(self.id)

    @property
    def charge_number(self) -> int:
        return charge_number_from_id(self.id)

    @property
    def mass(self) -> float:
        return nucleus_mass(self.id)

    @property
    def lorentz_factor(self) -> float:
        return self.energy / (self.mass * C_SQUARED)

    def set_id(self, id: int) -> None:
        self.id = id

    def set_energy(self, energy: float) -> None:
        self.energy = energy


@dataclass
class PendingInteraction:
    """Interaction selected for a candidate but not yet performed.

    Attributes:
        distance: Comoving distance to the interaction in m
        channel: Channel code of the selected disintegration
    """
    distance: float
    channel: int


@dataclass
class Candidate:
    """Propagating nucleus as seen by interaction modules.

    Attributes:
        current: Current identity and energy
        redshift: Redshift at the current position
        active: False once the particle has been fully consumed
        secondaries: Particles created by interactions
        interaction_states: Pending interactions keyed by module description
    """
    current: ParticleState
    redshift: float = 0.0
    active: bool = True
    secondaries: List[ParticleState] = field(default_factory=list)
    interaction_states: Dict[str, PendingInteraction] = field(default_factory=dict)

    def set_active(self, active: bool) -> None:
        self.active = active

    def add_secondary(self, id: int, energy: float) -> ParticleState:
        secondary = ParticleState(id=id, energy=energy)
        self.secondaries.append(secondary)
        return secondary

    def set_interaction_state(self, name: str, state: PendingInteraction) -> None:
        self.interaction_states[name] = state

    def get_interaction_state(self, name: str) -> Optional[PendingInteraction]:
        return self.interaction_states.get(name)

    def clear_interaction_states(self) -> None:
        self.interaction_states.clear()


# Emitted species in channel code digit order, most significant first
EMITTED_SPECIES: Tuple[Tuple[str, int, int], ...] = (
    ('neutrons', 1, 0),
    ('protons', 1, 1),
    ('deuterons', 2, 1),
    ('tritons', 3, 1),
    ('helium3', 3, 2),
    ('helium4', 4, 2),
)


@dataclass(frozen=True)
class DisintegrationChannel:
    """Decoded disintegration channel.

    A channel code packs the number of emitted particles into decimal
    digits, from most to least significant: neutrons, protons, deuterons,
    tritons, helium-3, helium-4. Each count is limited to 0-9.

    Attributes:
        code: Channel code as found in the rate table
        neutrons: Emitted neutrons
        protons: Emitted protons
        deuterons: Emitted deuterons (2H)
        tritons: Emitted tritons (3H)
        helium3: Emitted helium-3 nuclei
        helium4: Emitted helium-4 nuclei
    """
    code: int
    neutrons: int
    protons: int
    deuterons: int
    tritons: int
    helium3: int
    helium4: int

    @classmethod
    def from_code(cls, code: int) -> 'DisintegrationChannel':
        """Decode a channel code by place-value division."""
        counts = [
            (code // 10 ** power) % 10 for power in range(5, -1, -1)
        ]
        return cls(code, *counts)

    def counts(self) -> Tuple[int, ...]:
        return tuple(getattr(self, name) for name, _, _ in EMITTED_SPECIES)

    @property
    def mass_loss(self) -> int:
        """Nucleons removed from the parent (-dA)."""
        return sum(
            n * A for n, (_, A, _) in zip(self.counts(), EMITTED_SPECIES)
        )

    @property
    def charge_loss(self) -> int:
        """Protons removed from the parent (-dZ)."""
        return sum(
            n * Z for n, (_, _, Z) in zip(self.counts(), EMITTED_SPECIES)
        )

    def is_possible_for(self, mass_number: int, charge_number: int) -> bool:
        """True if the channel emits something and leaves a valid remnant."""
        remaining_mass = mass_number - self.mass_loss
        remaining_charge = charge_number - self.charge_loss
        return (self.mass_loss > 0
                and remaining_mass >= 0
                and 0 <= remaining_charge <= remaining_mass)

    def relative_energy_loss(self, mass_number: int) -> float:
        """Fraction of the parent's nucleons (and energy) carried away."""
        return self.mass_loss / mass_number

    def products(self) -> Iterator[Tuple[int, int]]:
        """Yield (A, Z) of every emitted particle in species order."""
        for n, (_, A, Z) in zip(self.counts(), EMITTED_SPECIES):
            for _ in range(n):
                yield A, Z

    def __str__(self) -> str:
        return f"{self.code:06d}"


@dataclass(frozen=True, eq=False)
class ChannelRecord:
    """One disintegration channel available to a nuclide.

    Attributes:
        channel: Decoded channel
        rate: Disintegration rate in 1/m on the lg grid [200]
    """
    channel: DisintegrationChannel
    rate: torch.Tensor

    @property
    def code(self) -> int:
        return self.channel.code
