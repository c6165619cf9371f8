"""Exception hierarchy for the two-party engine."""


class MPCError(Exception):
    """Base class for all engine errors."""


class ChannelError(MPCError):
    """I/O failure, short read, malformed line or timeout on the channel."""


class ProtocolMisuseError(MPCError):
    """The parties or the caller broke a protocol precondition.

    Raised for vector length mismatches between parties, a bit length too
    small for the modulus, exhausted or already spent correlated randomness,
    and malformed inputs to batched operations.
    """


class RangeViolation(MPCError, ValueError):
    """Comparison/equality input outside [0, p/2)."""
