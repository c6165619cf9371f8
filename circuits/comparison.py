"""Comparison circuit: less-than on secret-shared field elements.

For 0 <= a, b < p/2, a < b exactly when c = a - b (mod p) lies in the upper
half of the field. Whether c < p/2 is read off the LSB of 2c: doubling an
element of the lower half stays even, doubling one of the upper half wraps
past odd p and becomes odd. The LSB is extracted by masking 2c with a random
r whose bits are shared, opening, and correcting for a wrap of 2c + r with a
bitwise comparison of the opened value against r.
"""

from protocols.mpc_arithmetic import MPCArithmetic
from protocols.preprocessing import RandomNumberTuple
from core.errors import ProtocolMisuseError


class ComparisonCircuit:
    """Secure less-than and derived comparisons for a single party."""

    def __init__(self, mpc: MPCArithmetic):
        self.mpc = mpc
        self.field = mpc.field

    async def less_than(self, share_a: int, share_b: int,
                        rtuple: RandomNumberTuple | None = None) -> int:
        """[a < b] for shared a, b in [0, p/2)."""
        tuples = None if rtuple is None else [rtuple]
        return (await self.less_than_many([share_a], [share_b], tuples))[0]

    async def less_than_many(self, shares_a: list[int], shares_b: list[int],
                             tuples: list[RandomNumberTuple] | None = None
                             ) -> list[int]:
        """Element-wise [a_j < b_j]; rounds do not depend on the length.

        [a < b] = 1 - [a - b < p/2]
        """
        n = len(shares_a)
        if len(shares_b) != n:
            raise ProtocolMisuseError(
                f"less_than_many got {n} and {len(shares_b)} operands")
        if n == 0:
            return []
        diffs = [self.mpc.sub(a, b) for a, b in zip(shares_a, shares_b)]
        lower = await self.below_half_many(diffs, tuples)
        return [self.mpc.constant_sub(1, t) for t in lower]

    async def greater_than(self, share_a: int, share_b: int) -> int:
        return await self.less_than(share_b, share_a)

    async def less_equal(self, share_a: int, share_b: int) -> int:
        return self.mpc.constant_sub(1, await self.less_than(share_b, share_a))

    async def greater_equal(self, share_a: int, share_b: int) -> int:
        return self.mpc.constant_sub(1, await self.less_than(share_a, share_b))

    async def below_half_many(self, shares: list[int],
                              tuples: list[RandomNumberTuple] | None = None
                              ) -> list[int]:
        """[c < p/2] for each shared c.

        1. x = 2c, open c' = x + r
        2. alpha = [c'_0 XOR r_0] (local, c'_0 is public)
        3. beta = [c' < r] via the bitwise comparison
        4. x_0 = alpha XOR beta = alpha + beta - 2*alpha*beta (1 round)
        5. [c < p/2] = 1 - x_0
        """
        mpc = self.mpc
        tuples = mpc.random_tuples(len(shares), tuples)

        masked = [mpc.add(mpc.scalar_mul(2, c), t.r)
                  for c, t in zip(shares, tuples)]
        opened = await mpc.recover_many(masked)

        alphas = [t.bits[0] if c % 2 == 0 else mpc.constant_sub(1, t.bits[0])
                  for c, t in zip(opened, tuples)]
        betas = await self.public_less_than_many(
            opened, [t.bits for t in tuples])

        cross = await mpc.multiply_many(alphas, betas)
        result = []
        for alpha, beta, ab in zip(alphas, betas, cross):
            x0 = mpc.sub(mpc.add(alpha, beta), mpc.scalar_mul(2, ab))
            result.append(mpc.constant_sub(1, x0))
        return result

    async def public_less_than(self, public: int, bits: list[int]) -> int:
        """[public < s] for a public int and the shared LSB-first bits of s."""
        return (await self.public_less_than_many([public], [bits]))[0]

    async def public_less_than_many(self, publics: list[int],
                                    bit_arrays: list[list[int]]) -> list[int]:
        """Bitwise comparison of public values against shared bit arrays.

        Per bit: c_i = pub_i XOR s_i (local since pub_i is public).
        Suffix OR from the MSB: d_{L-1} = c_{L-1},
        d_i = d_{i+1} + c_i - d_{i+1}*c_i, one round per bit, every element
        in the same round. e_i = d_i - d_{i+1} is 1 only at the highest
        differing position, so sum(e_i * s_i) = [s > pub].
        """
        mpc = self.mpc
        n = len(publics)
        if len(bit_arrays) != n:
            raise ProtocolMisuseError(
                f"public_less_than_many got {n} publics and {len(bit_arrays)} bit arrays")
        if n == 0:
            return []
        length = len(bit_arrays[0])
        if length == 0 or any(len(bits) != length for bits in bit_arrays):
            raise ProtocolMisuseError("Bit arrays must be non-empty and of equal length")

        c = []
        for pub, bits in zip(publics, bit_arrays):
            pub_bits = self.field.to_bits(pub, length)
            c.append([s if pb == 0 else mpc.constant_sub(1, s)
                      for pb, s in zip(pub_bits, bits)])

        d = [[0] * length for _ in range(n)]
        e = [[0] * length for _ in range(n)]
        for j in range(n):
            d[j][length - 1] = c[j][length - 1]
            e[j][length - 1] = d[j][length - 1]

        for i in range(length - 2, -1, -1):
            prods = await mpc.multiply_many([d[j][i + 1] for j in range(n)],
                                            [c[j][i] for j in range(n)])
            for j in range(n):
                d[j][i] = mpc.sub(mpc.add(d[j][i + 1], c[j][i]), prods[j])
                e[j][i] = mpc.sub(d[j][i], d[j][i + 1])

        flat_e, flat_s = [], []
        for j in range(n):
            flat_e.extend(e[j])
            flat_s.extend(bit_arrays[j])
        terms = await mpc.multiply_many(flat_e, flat_s)

        result = []
        for j in range(n):
            total = 0
            for t in terms[j * length:(j + 1) * length]:
                total = mpc.add(total, t)
            result.append(total)
        return result
