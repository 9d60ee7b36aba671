"""Configuration management for photo-disintegration simulations."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from .validation import ConfigurationError


@dataclass
class SimulationConfig:
    """Configuration for a photo-disintegration simulation.

    Attributes:
        photon_field: Photon background ('CMB', 'IRB' or 'CMB_IRB')
        data_directory: Directory holding the rate tables (None for default)
        random_seed: Random seed for reproducibility (None for random)
        device: Computation device ('cpu' or 'cuda')
        log_file: Optional path to a log file
        log_level: Console logging level name ('DEBUG', 'INFO', ...)
        max_interactions: Maximum disintegrations followed per candidate
        max_distance_mpc: Maximum comoving distance followed per candidate in Mpc
    """
    photon_field: str = 'CMB'
    data_directory: Optional[str] = None
    random_seed: Optional[int] = None
    device: str = 'cpu'
    log_file: Optional[str] = None
    log_level: str = 'INFO'
    max_interactions: int = 1000
    max_distance_mpc: float = 1000.0

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Validate configuration parameters."""
        import torch
        from ..physics.photon_field import resolve_photon_field
        from .logging import get_logger
        logger = get_logger()

        # Normalise to the enum name; raises for unknown fields
        self.photon_field = resolve_photon_field(self.photon_field).name

        if self.device not in ['cpu', 'cuda']:
            raise ConfigurationError(f"device must be 'cuda' or 'cpu', got {self.device}")

        if self.device == 'cuda' and not torch.cuda.is_available():
            logger.warning("CUDA requested but not available, falling back to CPU")
            self.device = 'cpu'

        self.log_level = self.log_level.upper()
        if self.log_level not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ConfigurationError(f"Unknown log_level: {self.log_level}")

        if self.max_interactions <= 0:
            raise ConfigurationError(
                f"max_interactions must be positive, got {self.max_interactions}"
            )

        if self.max_distance_mpc <= 0:
            raise ConfigurationError(
                f"max_distance_mpc must be positive, got {self.max_distance_mpc}"
            )

        if self.random_seed is not None and self.random_seed < 0:
            raise ConfigurationError(
                f"random_seed must be non-negative, got {self.random_seed}"
            )

    @classmethod
    def from_yaml(cls, yaml_path: str) -> 'SimulationConfig':
        """Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            SimulationConfig instance
        """
        try:
            with open(yaml_path, 'r') as f:
                config_dict = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigurationError(f"Could not read configuration {yaml_path}: {e}") from e

        unknown = set(config_dict) - set(cls.__dataclass_fields__)
        if unknown:
            raise ConfigurationError(
                f"Unknown configuration keys: {', '.join(sorted(unknown))}"
            )

        return cls(**config_dict)

    def to_yaml(self, yaml_path: str) -> None:
        """Save configuration to YAML file.

        Args:
            yaml_path: Path to save YAML configuration
        """
        config_dict = {
            'photon_field': self.photon_field,
            'data_directory': self.data_directory,
            'random_seed': self.random_seed,
            'device': self.device,
            'log_file': self.log_file,
            'log_level': self.log_level,
            'max_interactions': self.max_interactions,
            'max_distance_mpc': self.max_distance_mpc,
        }

        Path(yaml_path).parent.mkdir(parents=True, exist_ok=True)
        with open(yaml_path, 'w') as f:
            yaml.dump(config_dict, f, default_flow_style=False)

    @staticmethod
    def get_default_config() -> 'SimulationConfig':
        """Get a default configuration for testing.

        Returns:
            SimulationConfig with default values
        """
        return SimulationConfig(
            photon_field='CMB',
            random_seed=42,
            device='cpu'
        )
