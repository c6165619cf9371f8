"""Two-party additive secret sharing: x = x_1 + x_2 (mod p)."""

from enum import Enum

from core.field import PrimeField


class PartyID(Enum):
    """The two roles. Multiplication and comparison formulas differ per role."""
    C1 = 1
    C2 = 2

    @property
    def peer(self) -> 'PartyID':
        return PartyID.C2 if self is PartyID.C1 else PartyID.C1


def split_share(x: int, field: PrimeField) -> tuple[int, int]:
    """Split x into (x_1, x_2): x_1 uniform in [0, p), x_2 = x - x_1 mod p."""
    x1 = field.random()
    x2 = field.sub(x, x1)
    return x1, x2


def share_constant(party: PartyID, k: int) -> int:
    """Sharing of a public constant: C1 holds k, C2 holds 0."""
    return k if party is PartyID.C1 else 0


def reconstruct(share_1: int, share_2: int, field: PrimeField) -> int:
    return field.add(share_1, share_2)
