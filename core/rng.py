"""Swappable randomness for share splitting and preprocessing.

Default (no seed) draws from the operating system CSPRNG via `secrets`.
Use set_seed(n) at test start for reproducibility; a seeded source is the
fast non-cryptographic generator the experiments were written against and
must not be used for real deployments.
"""

import random as _random
import secrets


class RandomSource:
    """Base class for random sources."""

    cryptographic = False

    def randbelow(self, n: int) -> int:
        raise NotImplementedError

    def randbits(self, k: int) -> int:
        return self.randbelow(1 << k)


class SystemRandom(RandomSource):
    """OS-level cryptographic randomness."""

    cryptographic = True

    def randbelow(self, n: int) -> int:
        return secrets.randbelow(n)

    def randbits(self, k: int) -> int:
        return secrets.randbits(k)


class SeededRandom(RandomSource):
    """Seeded Mersenne Twister. Reproducible, not secure."""

    def __init__(self, seed):
        self.seed = seed
        self._rng = _random.Random(seed)

    def randbelow(self, n: int) -> int:
        return self._rng.randrange(n)

    def randbits(self, k: int) -> int:
        return self._rng.getrandbits(k)


# Global instance
_global_rng: RandomSource = SystemRandom()


def set_seed(seed: int | None):
    """Set global seed for reproducibility. None = cryptographic randomness."""
    global _global_rng
    _global_rng = SystemRandom() if seed is None else SeededRandom(seed)


def set_source(source: RandomSource):
    """Install an arbitrary random source as the global one."""
    global _global_rng
    _global_rng = source


def get_source() -> RandomSource:
    return _global_rng


def randbelow(n: int) -> int:
    return _global_rng.randbelow(n)


def randbits(k: int) -> int:
    return _global_rng.randbits(k)
