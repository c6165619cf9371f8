"""Prime field arithmetic on plain integers.

Shares are ints in [0, p). The field object carries the public modulus and
its bit length L, which is also the length of every bit decomposition the
comparison and equality circuits use.
"""

from core import rng
from core.errors import ProtocolMisuseError, RangeViolation


class PrimeField:
    """Arithmetic modulo a public prime p."""

    __slots__ = ('modulus', 'bit_length', 'half')

    def __init__(self, modulus: int):
        if modulus < 3:
            raise ValueError(f"Modulus must be an odd prime, got {modulus}")
        self.modulus = modulus
        self.bit_length = modulus.bit_length()
        self.half = modulus // 2

    def __repr__(self):
        return f"PrimeField(p={self.modulus}, L={self.bit_length})"

    def __eq__(self, other):
        if isinstance(other, PrimeField):
            return self.modulus == other.modulus
        return NotImplemented

    def __hash__(self):
        return hash(self.modulus)

    def reduce(self, x: int) -> int:
        return x % self.modulus

    def add(self, x: int, y: int) -> int:
        return (x + y) % self.modulus

    def sub(self, x: int, y: int) -> int:
        return (x - y) % self.modulus

    def mul(self, x: int, y: int) -> int:
        return (x * y) % self.modulus

    def neg(self, x: int) -> int:
        return (-x) % self.modulus

    def inverse(self, x: int) -> int:
        """Multiplicative inverse via Fermat's little theorem: x^{p-2} mod p."""
        if x % self.modulus == 0:
            raise ZeroDivisionError("Cannot invert zero")
        return pow(x, self.modulus - 2, self.modulus)

    def random(self) -> int:
        """Uniform element of [0, p) from the global random source."""
        return rng.randbelow(self.modulus)

    def to_bits(self, x: int, bit_length: int | None = None) -> list[int]:
        """LSB-first binary expansion of x, truncated/zero-padded to bit_length."""
        if bit_length is None:
            bit_length = self.bit_length
        return [(x >> i) & 1 for i in range(bit_length)]

    def check_comparable(self, x: int):
        """Comparison and equality need plaintexts in [0, p/2)."""
        if not 0 <= 2 * x < self.modulus:
            raise RangeViolation(
                f"Value {x} outside comparable range [0, p/2) for {self!r}")

    def check_headroom(self, value_bits: int):
        """p's bit length must exceed the value bit length by at least 2."""
        if self.bit_length < value_bits + 2:
            raise ProtocolMisuseError(
                f"Modulus bit length {self.bit_length} too small for "
                f"{value_bits}-bit values (need >= {value_bits + 2})")

    def check_bit_length(self, bit_length: int):
        if bit_length < self.bit_length:
            raise ProtocolMisuseError(
                f"Bit length {bit_length} cannot represent elements of {self!r}")
