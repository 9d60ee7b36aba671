#!/usr/bin/env python3
"""Validate photo-disintegration rate tables."""

import argparse
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from MCPhotoDisintegration.physics.photon_field import PHOTON_FIELD_DATA
from MCPhotoDisintegration.physics.rate_table import RateTable
from MCPhotoDisintegration.physics_data import get_rate_table_path
from MCPhotoDisintegration.utils.validation import ValidationError


def validate_rate_table(file_name: str, data_directory: str = None) -> bool:
    """Validate one rate table."""
    print("=" * 60)
    print(f"Validating {file_name}")
    print("=" * 60)

    try:
        path = get_rate_table_path(file_name, data_directory)
        table = RateTable.load(path)
    except (FileNotFoundError, ValidationError) as e:
        print(f"✗ Could not load table: {e}")
        return False

    print(f"✓ Loaded {table.num_channels} channels for {len(table)} nuclides")

    invalid = table.validate_table()
    for Z, N, code in invalid:
        print(f"    ✗ Z={Z}, N={N}: channel {code:06d} leaves no valid remnant")

    if invalid:
        print(f"\n✗ {len(invalid)} unphysical channels")
        return False

    print("\n✓ All channels conserve nucleon number and charge")
    return True


def main():
    """Validate the tables of all photon fields."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument('--data-directory', default=None, help='Directory holding the tables')
    args = parser.parse_args()

    results = [
        validate_rate_table(field_data.file_name, args.data_directory)
        for field_data in PHOTON_FIELD_DATA.values()
    ]

    sys.exit(0 if all(results) else 1)


if __name__ == '__main__':
    main()
