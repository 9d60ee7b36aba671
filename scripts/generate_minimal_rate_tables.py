"""Generate minimal photo-disintegration rate tables for testing."""

import argparse
from pathlib import Path
import sys

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from MCPhotoDisintegration.physics.rate_table import RateTable
from MCPhotoDisintegration.physics_data import get_physics_data_dir
from MCPhotoDisintegration.physics_data_preparation import RateTableGenerator


def generate_rate_tables(output_dir: str, hdf5: bool):
    """Generate placeholder tables for every photon field."""
    print("Generating minimal rate tables...")

    generator = RateTableGenerator()
    generator.define_default_channels()
    paths = generator.export_default_tables(output_dir)

    for path in paths:
        if generator.validate_table(str(path)):
            print(f"✓ Rate table generated: {path}")
        else:
            print(f"✗ Rate table validation failed: {path}")

        if hdf5:
            h5_path = path.with_suffix('.h5')
            RateTable.from_text(path).export_hdf5(h5_path)
            print(f"✓ HDF5 copy written: {h5_path}")

    return paths


def main():
    """Generate all minimal rate tables."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        '--output-dir',
        default=str(get_physics_data_dir() / 'rate_tables'),
        help='Directory to write the tables to'
    )
    parser.add_argument('--hdf5', action='store_true', help='Also write HDF5 copies')
    args = parser.parse_args()

    print("=" * 60)
    print("Generating Minimal Rate Tables")
    print("=" * 60)

    generate_rate_tables(args.output_dir, args.hdf5)

    print("\nThese tables use placeholder resonance shapes and are meant")
    print("for testing and development. For production use, install rate")
    print("tables computed from measured photo-nuclear cross-sections.")


if __name__ == '__main__':
    main()
