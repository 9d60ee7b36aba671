"""Rate table loader for photo-disintegration channels."""

from collections import defaultdict
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import h5py
import numpy as np
import torch

from ..core.data_models import ChannelRecord, DisintegrationChannel
from ..utils.logging import get_logger
from ..utils.validation import ConfigurationError, RateTableFormatError
from .constants import (
    LG_MAX,
    LG_MIN,
    MAX_CHARGE_NUMBER,
    MAX_NEUTRON_NUMBER,
    MPC,
    RATE_SAMPLES,
)


logger = get_logger()

NuclideKey = Tuple[int, int]

HDF5_SUFFIXES = ('.h5', '.hdf5')


class RateTable:
    """Disintegration channels and rate curves per nuclide.

    Keys are (Z, N) pairs with 0 <= Z <= 30 and 0 <= N <= 56. Channels
    keep the order in which they were read. A nuclide without channels,
    including any (Z, N) outside the bounds, has no disintegration
    modelled. The table is not modified after construction and can be
    shared between threads.

    Attributes:
        source: Path the table was loaded from (None if built in memory)
        device: Device of the rate tensors
    """

    def __init__(
        self,
        records: Optional[Dict[NuclideKey, List[Tuple[int, torch.Tensor]]]] = None,
        source: Optional[str] = None,
        device: str = 'cpu'
    ):
        """Initialize RateTable.

        Args:
            records: Mapping (Z, N) -> list of (channel code, rate [200] in 1/m)
            source: Description of the data source
            device: Device for tensor storage ('cpu' or 'cuda')
        """
        self.source = source
        self.device = device
        self._channels: Dict[NuclideKey, Tuple[ChannelRecord, ...]] = {}
        self._rates: Dict[NuclideKey, torch.Tensor] = {}

        for (Z, N), entries in (records or {}).items():
            if not entries:
                continue
            if not in_bounds(Z, N):
                raise ValueError(f"Nuclide out of table bounds: Z={Z}, N={N}")

            channel_records = []
            for code, rate in entries:
                rate = torch.as_tensor(rate, dtype=torch.float64).to(device)
                if rate.shape != (RATE_SAMPLES,):
                    raise ValueError(
                        f"Rate curve for Z={Z}, N={N}, channel {code} has "
                        f"shape {tuple(rate.shape)}, expected ({RATE_SAMPLES},)"
                    )
                channel_records.append(
                    ChannelRecord(DisintegrationChannel.from_code(int(code)), rate)
                )

            self._channels[(Z, N)] = tuple(channel_records)
            self._rates[(Z, N)] = torch.stack([r.rate for r in channel_records])

    @classmethod
    def load(cls, path: Union[str, Path], device: str = 'cpu') -> 'RateTable':
        """Load a table from text or HDF5, chosen by file suffix."""
        if Path(path).suffix in HDF5_SUFFIXES:
            return cls.from_hdf5(path, device=device)
        return cls.from_text(path, device=device)

    @classmethod
    def from_text(cls, path: Union[str, Path], device: str = 'cpu') -> 'RateTable':
        """Load a table from the whitespace separated text format.

        Every non-comment line holds ``Z A channel r1 ... r200`` with the
        rates in 1/Mpc. The file is parsed completely before the table is
        built, so a malformed line leaves no partial table behind.

        Args:
            path: Path to the text table
            device: Device for tensor storage

        Returns:
            RateTable instance

        Raises:
            ConfigurationError: If the file cannot be opened
            RateTableFormatError: If a record cannot be parsed or the file
                is not UTF-8 text
        """
        path = Path(path)
        logger.info(f"Loading photo-disintegration rates from {path}")

        records: Dict[NuclideKey, List[Tuple[int, torch.Tensor]]] = defaultdict(list)
        line_number = 0
        try:
            with open(path, 'r', encoding='utf-8') as f:
                for line_number, line in enumerate(f, start=1):
                    stripped = line.strip()
                    if not stripped or stripped.startswith('#'):
                        continue
                    Z, N, code, rate = _parse_record(stripped, str(path), line_number)
                    records[(Z, N)].append((code, rate))
        except OSError as e:
            raise ConfigurationError(f"Could not open rate table {path}: {e}") from e
        except UnicodeDecodeError as e:
            raise RateTableFormatError(
                str(path), line_number + 1, f"not valid UTF-8 text ({e.reason})"
            ) from e

        table = cls(records, source=str(path), device=device)
        logger.info(
            f"Loaded {table.num_channels} channels for {len(table)} nuclides"
        )
        return table

    @classmethod
    def from_hdf5(cls, path: Union[str, Path], device: str = 'cpu') -> 'RateTable':
        """Load a table written by ``export_hdf5``.

        Args:
            path: Path to the HDF5 file
            device: Device for tensor storage

        Returns:
            RateTable instance

        Raises:
            ConfigurationError: If the file cannot be opened
        """
        path = Path(path)
        logger.info(f"Loading photo-disintegration rates from {path}")

        records: Dict[NuclideKey, List[Tuple[int, torch.Tensor]]] = {}
        try:
            with h5py.File(path, 'r') as f:
                for group in f.values():
                    key = (int(group.attrs['Z']), int(group.attrs['N']))
                    codes = np.array(group['channels'])
                    rates = torch.from_numpy(np.array(group['rates'], dtype=np.float64))
                    records[key] = list(zip(codes.tolist(), rates))
        except OSError as e:
            raise ConfigurationError(f"Could not open rate table {path}: {e}") from e

        table = cls(records, source=str(path), device=device)
        logger.info(
            f"Loaded {table.num_channels} channels for {len(table)} nuclides"
        )
        return table

    def export_hdf5(self, output_path: Union[str, Path]) -> None:
        """Export the table to HDF5, one group per nuclide.

        Args:
            output_path: Path to output HDF5 file
        """
        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)

        with h5py.File(output_file, 'w') as f:
            f.attrs['lg_min'] = LG_MIN
            f.attrs['lg_max'] = LG_MAX
            f.attrs['rate_units'] = '1/m'

            for (Z, N), records in self._channels.items():
                group = f.create_group(f'Z{Z}_N{N}')
                group.attrs['Z'] = Z
                group.attrs['N'] = N
                group.create_dataset(
                    'channels', data=np.array([r.code for r in records], dtype=np.int64)
                )
                group.create_dataset('rates', data=self._rates[(Z, N)].cpu().numpy())

        logger.info(f"Exported rate table: {output_path}")

    def get_channels(self, Z: int, N: int) -> Tuple[ChannelRecord, ...]:
        """Get the channels of a nuclide in file order.

        Args:
            Z: Charge number
            N: Neutron number

        Returns:
            Tuple of ChannelRecords, empty if nothing is modelled
        """
        return self._channels.get((Z, N), ())

    def get_rates(self, Z: int, N: int) -> Optional[torch.Tensor]:
        """Get the stacked rate curves [n_channels, 200] of a nuclide."""
        return self._rates.get((Z, N))

    def has_nuclide(self, Z: int, N: int) -> bool:
        return (Z, N) in self._channels

    def list_nuclides(self) -> List[NuclideKey]:
        """Get list of all (Z, N) with at least one channel."""
        return sorted(self._channels)

    @property
    def num_channels(self) -> int:
        return sum(len(records) for records in self._channels.values())

    def __len__(self) -> int:
        return len(self._channels)

    def validate_table(self) -> List[Tuple[int, int, int]]:
        """Check every channel against the nucleon content of its nuclide.

        Channels are not rejected; the data source is trusted at run time.

        Returns:
            List of (Z, N, channel code) that emit nothing or leave no
            valid remnant
        """
        logger.debug("Validating rate table...")

        invalid = []
        for (Z, N), records in self._channels.items():
            A = Z + N
            for record in records:
                channel = record.channel
                if not channel.is_possible_for(A, Z):
                    logger.warning(
                        f"Unphysical channel {channel} for Z={Z}, N={N}: "
                        f"removes {channel.mass_loss} nucleons and "
                        f"{channel.charge_loss} protons"
                    )
                    invalid.append((Z, N, channel.code))

        logger.debug("Rate table validation complete")
        return invalid


def in_bounds(Z: int, N: int) -> bool:
    return 0 <= Z <= MAX_CHARGE_NUMBER and 0 <= N <= MAX_NEUTRON_NUMBER


def _parse_record(
    line: str,
    path: str,
    line_number: int
) -> Tuple[int, int, int, torch.Tensor]:
    """Parse one ``Z A channel r1 ... r200`` record.

    Returns:
        (Z, N, channel code, rate [200] in 1/m)
    """
    fields = line.split()
    if len(fields) != 3 + RATE_SAMPLES:
        raise RateTableFormatError(
            path, line_number,
            f"expected {3 + RATE_SAMPLES} fields, got {len(fields)}"
        )

    try:
        Z, A, code = (int(value) for value in fields[:3])
    except ValueError as e:
        raise RateTableFormatError(path, line_number, f"invalid integer field: {e}")

    try:
        rate = np.array(fields[3:], dtype=np.float64)
    except ValueError as e:
        raise RateTableFormatError(path, line_number, f"invalid rate value: {e}")

    N = A - Z
    if not in_bounds(Z, N):
        raise RateTableFormatError(
            path, line_number, f"nuclide out of table bounds: Z={Z}, A={A}"
        )
    if code < 0:
        raise RateTableFormatError(path, line_number, f"negative channel code {code}")
    if not np.all(np.isfinite(rate)) or np.any(rate < 0):
        raise RateTableFormatError(
            path, line_number, "rates must be finite and non-negative"
        )

    # 1/Mpc -> 1/m
    return Z, N, code, torch.from_numpy(rate / MPC)
