"""Exceptions and validation utilities for configuration and data tables."""

from typing import TYPE_CHECKING

from .logging import get_logger

if TYPE_CHECKING:
    from .config import SimulationConfig


logger = get_logger()


class ValidationError(Exception):
    """Base exception for validation errors."""
    pass


class ConfigurationError(ValidationError):
    """Raised for an unknown photon field or an unreadable rate table."""
    pass


class RateTableFormatError(ValidationError):
    """Raised when a rate table record cannot be parsed."""

    def __init__(self, path: str, line_number: int, reason: str):
        self.path = path
        self.line_number = line_number
        self.reason = reason
        super().__init__(f"{path}:{line_number}: {reason}")


class InteractionStateError(ValidationError):
    """Raised when an interaction is performed without a pending selection."""
    pass


def validate_config(config: 'SimulationConfig') -> None:
    """Validate runtime requirements of a simulation configuration.

    Field-level checks happen in ``SimulationConfig.__post_init__``; this
    checks the environment: the rate table must exist and the requested
    device must be available.

    Args:
        config: Simulation configuration

    Raises:
        ConfigurationError: If the table is missing or the device unusable
    """
    import torch
    from ..physics.photon_field import PHOTON_FIELD_DATA, resolve_photon_field
    from ..physics_data import get_rate_table_path

    photon_field = resolve_photon_field(config.photon_field)
    file_name = PHOTON_FIELD_DATA[photon_field].file_name

    try:
        get_rate_table_path(file_name, config.data_directory)
    except FileNotFoundError as e:
        raise ConfigurationError(str(e)) from e

    if config.device.startswith('cuda') and not torch.cuda.is_available():
        raise ConfigurationError(
            "CUDA device requested but CUDA is not available. "
            "Set device='cpu' or install CUDA support."
        )

    logger.debug("Configuration validation passed")
