"""Core data models and simulation orchestration."""

from .data_models import (
    Candidate,
    ChannelRecord,
    DisintegrationChannel,
    ParticleState,
    PendingInteraction,
    nucleus_id,
    mass_number_from_id,
    charge_number_from_id,
    nucleus_mass
)

__all__ = [
    'Candidate',
    'ChannelRecord',
    'DisintegrationChannel',
    'ParticleState',
    'PendingInteraction',
    'nucleus_id',
    'mass_number_from_id',
    'charge_number_from_id',
    'nucleus_mass'
]
