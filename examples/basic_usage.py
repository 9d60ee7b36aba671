"""
Basic usage example for photo-disintegration sampling.

This example demonstrates how to:
1. Generate placeholder rate tables
2. Tabulate the energy loss length of iron
3. Follow an iron nucleus through a disintegration chain
"""

from pathlib import Path

import numpy as np

from MCPhotoDisintegration import DisintegrationSimulator, SimulationConfig
from MCPhotoDisintegration.physics_data_preparation import RateTableGenerator


def create_rate_tables(output_dir: str = './rate_tables') -> str:
    """Write placeholder tables for all photon fields.

    Args:
        output_dir: Directory to save the tables

    Returns:
        Directory holding the tables
    """
    generator = RateTableGenerator()
    generator.define_default_channels()
    generator.export_default_tables(output_dir)
    return str(Path(output_dir))


def main():
    data_directory = create_rate_tables()

    config = SimulationConfig(
        photon_field='CMB',
        data_directory=data_directory,
        random_seed=42,
        max_distance_mpc=500.0
    )
    simulator = DisintegrationSimulator(config)

    # Energy loss length of 56Fe
    energies = np.logspace(1, 3, 9)  # EeV
    table = simulator.energy_loss_length_table(56, 26, energies)
    print("\nEnergy loss length of 56Fe:")
    for energy, length in zip(table['energy_eev'], table['loss_length_mpc']):
        print(f"  E = {energy:8.1f} EeV: {length:10.3g} Mpc")

    # One disintegration chain
    candidate = simulator.create_candidate(56, 26, energy_eev=500.0)
    result = simulator.run(candidate)
    print(f"\nChain stopped ({result['stop_reason']}) after "
          f"{result['interactions']} interactions over {result['distance_mpc']:.2f} Mpc")
    print(f"  Remnant: A={result['final_mass_number']}, Z={result['final_charge_number']}, "
          f"E={result['final_energy_eev']:.1f} EeV")
    print(f"  Secondaries: {len(result['secondaries'])}")


if __name__ == '__main__':
    main()
