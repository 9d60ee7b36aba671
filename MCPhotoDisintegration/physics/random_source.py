"""Random number sources for interaction sampling."""

import itertools
import threading
from typing import Optional

import torch

from ..utils.logging import get_logger


logger = get_logger()


class RandomSource:
    """Uniform random numbers from a private torch generator.

    Each instance owns its generator, so instances confined to one worker
    thread never share state.

    Attributes:
        seed: Seed of the generator (None for a non-deterministic seed)
        device: Device of the generator
        generator: Underlying torch.Generator
    """

    def __init__(self, seed: Optional[int] = None, device: str = 'cpu'):
        """Initialize RandomSource.

        Args:
            seed: Random seed for reproducibility (None for random)
            device: Device for the generator ('cpu' or 'cuda')
        """
        self.device = device
        self.generator = torch.Generator(device=device)
        if seed is None:
            self.seed = self.generator.seed()
        else:
            self.seed = seed
            self.generator.manual_seed(seed)

    def uniform(self, n: int) -> torch.Tensor:
        """Draw n uniform numbers in (0, 1].

        The interval excludes zero so that -log(u) is always finite.

        Args:
            n: Number of draws

        Returns:
            Float64 tensor [n]
        """
        u = torch.rand(
            n, generator=self.generator, dtype=torch.float64, device=self.device
        )
        return 1.0 - u


class ThreadLocalRandomSource:
    """One RandomSource per thread behind a single shared object.

    The k-th thread to draw gets a source seeded with ``seed + k``. With
    no seed every thread is seeded non-deterministically.
    """

    def __init__(self, seed: Optional[int] = None, device: str = 'cpu'):
        self.seed = seed
        self.device = device
        self._local = threading.local()
        self._counter = itertools.count()
        self._lock = threading.Lock()

    def _source(self) -> RandomSource:
        source = getattr(self._local, 'source', None)
        if source is None:
            with self._lock:
                index = next(self._counter)
            seed = None if self.seed is None else self.seed + index
            source = RandomSource(seed=seed, device=self.device)
            self._local.source = source
            logger.debug(
                f"Created random source #{index} for thread "
                f"{threading.current_thread().name} (seed={source.seed})"
            )
        return source

    def uniform(self, n: int) -> torch.Tensor:
        return self._source().uniform(n)
