"""Utility modules for configuration, logging, and validation."""

from .logging import setup_logger, get_logger
from .validation import (
    ValidationError,
    ConfigurationError,
    RateTableFormatError,
    InteractionStateError,
    validate_config
)
from .config import SimulationConfig

__all__ = [
    'SimulationConfig',
    'setup_logger',
    'get_logger',
    'ValidationError',
    'ConfigurationError',
    'RateTableFormatError',
    'InteractionStateError',
    'validate_config'
]
