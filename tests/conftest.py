"""Shared fixtures for photo-disintegration tests."""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

import pytest
import torch

from MCPhotoDisintegration.core.data_models import Candidate, ParticleState, nucleus_id
from MCPhotoDisintegration.physics.constants import RATE_SAMPLES
from MCPhotoDisintegration.physics.rate_table import RateTable
from MCPhotoDisintegration.physics_data_preparation import RateTableGenerator


class FixedRandomSource:
    """Replays a fixed sequence of uniform draws and records each request."""

    def __init__(self, values: Sequence[float]):
        self.values = list(values)
        self.requests: List[int] = []

    def uniform(self, n: int) -> torch.Tensor:
        self.requests.append(n)
        drawn, self.values = self.values[:n], self.values[n:]
        assert len(drawn) == n, "ran out of fixed draws"
        return torch.tensor(drawn, dtype=torch.float64)


@dataclass
class FixedGammaState(ParticleState):
    """Particle state with a prescribed Lorentz factor."""
    gamma: float = 1e10

    @property
    def lorentz_factor(self) -> float:
        return self.gamma


def make_candidate(A: int, Z: int, gamma: float, redshift: float = 0.0,
                   energy: float = 1.0) -> Candidate:
    state = FixedGammaState(id=nucleus_id(A, Z), energy=energy, gamma=gamma)
    return Candidate(current=state, redshift=redshift)


def constant_table(channels: Dict[Tuple[int, int], List[Tuple[int, float]]]) -> RateTable:
    """Build a table of constant rate curves, rates given in 1/m."""
    records = {
        key: [(code, torch.full((RATE_SAMPLES,), rate, dtype=torch.float64))
              for code, rate in entries]
        for key, entries in channels.items()
    }
    return RateTable(records, source='memory')


def write_table(path: Path, records: List[Tuple[int, int, int, Sequence[float]]],
                header: str = '# Z A channel rates') -> Path:
    """Write records (Z, A, code, rates in 1/Mpc) in the text table format."""
    lines = [header]
    for Z, A, code, rates in records:
        lines.append(f"{Z} {A} {code} " + ' '.join(repr(float(r)) for r in rates))
    path.write_text('\n'.join(lines) + '\n')
    return path


@pytest.fixture
def table_dir(tmp_path) -> Path:
    """Directory holding placeholder tables for all photon fields."""
    generator = RateTableGenerator()
    generator.define_default_channels()
    generator.export_default_tables(str(tmp_path))
    return tmp_path
