"""Photo-disintegration rate table generator."""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

import numpy as np

from ..core.data_models import DisintegrationChannel
from ..physics.constants import LG_MAX, LG_MIN, RATE_SAMPLES
from ..physics.photon_field import PHOTON_FIELD_DATA, resolve_photon_field
from ..physics.rate_table import RateTable, in_bounds


logger = logging.getLogger(__name__)


# (A, Z, channel code, peak rate in 1/Mpc)
DEFAULT_CHANNELS: List[Tuple[int, int, int, float]] = [
    (4, 2, 100010, 0.02),   # 4He -> n + 3He
    (4, 2, 111000, 0.01),   # 4He -> n + p + 2H
    (12, 6, 1, 0.05),       # 12C -> 8Be + 4He
    (12, 6, 10000, 0.08),   # 12C -> 11B + p
    (16, 8, 1, 0.06),       # 16O -> 12C + 4He
    (16, 8, 100000, 0.07),  # 16O -> 15O + n
    (28, 14, 10000, 0.10),
    (28, 14, 1, 0.04),
    (56, 26, 100000, 0.15),  # 56Fe -> 55Fe + n
    (56, 26, 10000, 0.12),   # 56Fe -> 55Mn + p
    (56, 26, 200000, 0.03),
    (56, 26, 1, 0.02),
]


class RateTableGenerator:
    """Generates placeholder photo-disintegration rate tables.

    Rates follow a Lorentzian in lg = log10(Lorentz factor), the shape a
    giant dipole resonance takes after folding with a thermal photon
    spectrum. The tables exercise the loader and sampling code; they are
    not a substitute for rates computed from measured cross-sections.

    Attributes:
        photon_field: Photon background the table is labelled for
        channels: Defined channels as (A, Z, code, peak rate, peak lg, width)
        lg_grid: Grid of lg values [200]
    """

    def __init__(self, photon_field: str = 'CMB'):
        """Initialize RateTableGenerator.

        Args:
            photon_field: Photon background name
        """
        self.photon_field = resolve_photon_field(photon_field)
        self.channels: List[Tuple[int, int, int, float, float, float]] = []
        self.lg_grid = np.linspace(LG_MIN, LG_MAX, RATE_SAMPLES)

        logger.info(f"RateTableGenerator initialized for {self.photon_field.name}")

    def define_channel(
        self,
        mass_number: int,
        charge_number: int,
        channel_code: int,
        peak_rate: float,
        peak_lg: float = 10.0,
        width: float = 0.5
    ) -> None:
        """Define a disintegration channel for a nuclide.

        Args:
            mass_number: Mass number A of the parent
            charge_number: Charge number Z of the parent
            channel_code: Channel code of the emitted particles
            peak_rate: Rate at the resonance peak in 1/Mpc
            peak_lg: lg of the resonance peak
            width: Half width of the resonance in lg

        Raises:
            ValueError: If the channel cannot occur for this nuclide
        """
        if not in_bounds(charge_number, mass_number - charge_number):
            raise ValueError(f"Nuclide out of table bounds: A={mass_number}, Z={charge_number}")

        channel = DisintegrationChannel.from_code(channel_code)
        if channel_code < 0 or not channel.is_possible_for(mass_number, charge_number):
            raise ValueError(
                f"Channel {channel_code} is not possible for A={mass_number}, Z={charge_number}"
            )
        if peak_rate < 0 or width <= 0:
            raise ValueError("peak_rate must be non-negative and width positive")

        self.channels.append(
            (mass_number, charge_number, channel_code, peak_rate, peak_lg, width)
        )

    def define_default_channels(self) -> None:
        """Define a small set of channels for He, C, O, Si and Fe."""
        for A, Z, code, peak_rate in DEFAULT_CHANNELS:
            self.define_channel(A, Z, code, peak_rate)

    def calculate_rates(self, peak_rate: float, peak_lg: float, width: float) -> np.ndarray:
        """Evaluate the placeholder rate curve on the lg grid.

        Returns:
            Rates in 1/Mpc [200]
        """
        return peak_rate / (1.0 + ((self.lg_grid - peak_lg) / width) ** 2)

    def export_table(self, output_path: str, photon_field: Optional[str] = None) -> None:
        """Export the defined channels in the text table format.

        Args:
            output_path: Path to output text file
            photon_field: Photon field named in the header (default: own)
        """
        label = resolve_photon_field(photon_field or self.photon_field).name
        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)

        with open(output_file, 'w') as f:
            f.write(f"# Placeholder photo-disintegration rates: {label}\n")
            f.write(f"# Z A channel rates[1/Mpc] for lg(gamma) = {LG_MIN:g} ... {LG_MAX:g} "
                    f"({RATE_SAMPLES} points)\n")
            for A, Z, code, peak_rate, peak_lg, width in self.channels:
                rates = self.calculate_rates(peak_rate, peak_lg, width)
                values = ' '.join(f'{r:.6e}' for r in rates)
                f.write(f"{Z} {A} {code} {values}\n")

        logger.info(f"Exported {len(self.channels)} channels: {output_path}")

    def export_default_tables(self, output_dir: str) -> List[Path]:
        """Write one table per photon field into output_dir.

        Returns:
            Paths of the written tables
        """
        paths = []
        for photon_field, field_data in PHOTON_FIELD_DATA.items():
            path = Path(output_dir) / field_data.file_name
            self.export_table(str(path), photon_field)
            paths.append(path)
        return paths

    @staticmethod
    def validate_table(table_path: str) -> bool:
        """Load a table and check all its channels are physical.

        Args:
            table_path: Path to the table

        Returns:
            True if the table loads and every channel is physical
        """
        table = RateTable.load(table_path)
        invalid = table.validate_table()
        if invalid:
            logger.warning(f"{len(invalid)} unphysical channels in {table_path}")
        return not invalid
