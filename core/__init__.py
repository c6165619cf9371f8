"""Core primitives: field arithmetic, additive sharing, RNG, errors, config."""

from core.field import PrimeField
from core.sharing import PartyID, split_share, share_constant, reconstruct
from core.errors import MPCError, ChannelError, ProtocolMisuseError, RangeViolation
from core.config import EngineConfig, ReusePolicy, DEFAULT_PRIME, DEFAULT_RADIX
from core import rng
