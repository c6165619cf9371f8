"""Engine configuration: modulus, wire radix, exchange timeout, reuse policy."""

from dataclasses import dataclass
from enum import Enum

from core import rng
from core.field import PrimeField

DEFAULT_PRIME = (1 << 127) - 1  # 2^127 - 1
DEFAULT_RADIX = 36


class ReusePolicy(Enum):
    """How a party's supply hands out triples and random tuples.

    STRICT: one fresh unit per elementary multiplication / per compared
    element; exhaustion and re-presenting a spent unit are errors.
    REUSE: the first unit drawn is handed out for every request. Arithmetic
    stays correct but the masks leak across multiplications; kept to measure
    communication cost the way the experiments did.
    """
    STRICT = "strict"
    REUSE = "reuse"


@dataclass
class EngineConfig:
    modulus: int = DEFAULT_PRIME
    policy: ReusePolicy = ReusePolicy.STRICT
    exchange_timeout: float | None = None  # seconds; None blocks forever
    radix: int = DEFAULT_RADIX
    seed: int | None = None

    def __post_init__(self):
        if isinstance(self.policy, str):
            self.policy = ReusePolicy(self.policy)
        if not 2 <= self.radix <= 36:
            raise ValueError(f"Radix must be in [2, 36], got {self.radix}")

    def field(self) -> PrimeField:
        return PrimeField(self.modulus)

    def apply_seed(self):
        """Install the configured random source globally."""
        rng.set_seed(self.seed)
