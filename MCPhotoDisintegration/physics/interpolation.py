"""Linear interpolation on equidistant grids."""

import math

import torch


def interpolate_equidistant(
    x: float,
    lo: float,
    hi: float,
    samples: torch.Tensor
) -> torch.Tensor:
    """Interpolate samples given on an equidistant grid spanning [lo, hi].

    The grid runs along the last axis of ``samples``, so a stack of curves
    [n_curves, n_points] is evaluated at ``x`` in one call.

    Args:
        x: Query point
        lo: First grid point
        hi: Last grid point
        samples: Sample values [..., n_points]

    Returns:
        Interpolated values [...], zero where x lies outside [lo, hi]
    """
    if x < lo or x > hi:
        return torch.zeros(
            samples.shape[:-1], dtype=samples.dtype, device=samples.device
        )

    n_points = samples.shape[-1]
    dx = (hi - lo) / (n_points - 1)
    p = (x - lo) / dx

    # The last point has no upper neighbour; use the final interval
    i = min(int(math.floor(p)), n_points - 2)

    y0 = samples[..., i]
    y1 = samples[..., i + 1]
    return y0 + (p - i) * (y1 - y0)
