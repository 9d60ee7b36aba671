"""Data preparation tools for photo-disintegration rate tables."""

from .rate_table_generator import RateTableGenerator

__all__ = ['RateTableGenerator']
