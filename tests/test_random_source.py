"""Random sources for interaction sampling."""

import threading

import torch

from MCPhotoDisintegration.physics.random_source import RandomSource, ThreadLocalRandomSource


def test_uniform_draws_exclude_zero():
    u = RandomSource(seed=1).uniform(10000)
    assert u.dtype == torch.float64
    assert u.shape == (10000,)
    assert torch.all(u > 0)
    assert torch.all(u <= 1)


def test_seeded_sources_reproduce():
    assert torch.equal(RandomSource(seed=5).uniform(8), RandomSource(seed=5).uniform(8))
    assert not torch.equal(RandomSource(seed=5).uniform(8), RandomSource(seed=6).uniform(8))


def test_thread_local_sources_are_independent():
    shared = ThreadLocalRandomSource(seed=100)
    main_draws = shared.uniform(4)
    assert torch.equal(main_draws, RandomSource(seed=100).uniform(4))

    worker_draws = {}

    def worker():
        worker_draws['first'] = shared.uniform(4)

    thread = threading.Thread(target=worker)
    thread.start()
    thread.join()

    assert torch.equal(worker_draws['first'], RandomSource(seed=101).uniform(4))
    # The main thread keeps its own stream
    source = RandomSource(seed=100)
    source.uniform(4)
    assert torch.equal(shared.uniform(4), source.uniform(4))
