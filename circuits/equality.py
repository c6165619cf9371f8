"""Equality circuit: [a == b] on secret-shared field elements.

Open c = a - b + r. Then a == b exactly when c == r, i.e. when every bit of
the public c matches the corresponding shared bit of r. Each match is a
local XNOR against a public bit; the AND of all L matches costs
ceil(log2 L) rounds through the tree product.
"""

from protocols.mpc_arithmetic import MPCArithmetic
from protocols.preprocessing import RandomNumberTuple
from core.errors import ProtocolMisuseError


class EqualityCircuit:
    """Secure equality test for a single party."""

    def __init__(self, mpc: MPCArithmetic):
        self.mpc = mpc
        self.field = mpc.field

    async def equal(self, share_a: int, share_b: int,
                    rtuple: RandomNumberTuple | None = None) -> int:
        tuples = None if rtuple is None else [rtuple]
        return (await self.equal_many([share_a], [share_b], tuples))[0]

    async def not_equal(self, share_a: int, share_b: int) -> int:
        return self.mpc.constant_sub(1, await self.equal(share_a, share_b))

    async def equal_many(self, shares_a: list[int], shares_b: list[int],
                         tuples: list[RandomNumberTuple] | None = None
                         ) -> list[int]:
        """Element-wise [a_j == b_j] with one opening round and one shared
        tree product over every element's bit matches."""
        mpc = self.mpc
        n = len(shares_a)
        if len(shares_b) != n:
            raise ProtocolMisuseError(
                f"equal_many got {n} and {len(shares_b)} operands")
        if n == 0:
            return []
        tuples = mpc.random_tuples(n, tuples)

        masked = [mpc.add(mpc.sub(a, b), t.r)
                  for a, b, t in zip(shares_a, shares_b, tuples)]
        opened = await mpc.recover_many(masked)

        matches = []
        for c, t in zip(opened, tuples):
            c_bits = self.field.to_bits(c, t.bit_length)
            matches.append([r if cb == 1 else mpc.constant_sub(1, r)
                            for cb, r in zip(c_bits, t.bits)])

        if n == 1:
            return [await mpc.secure_product(matches[0])]
        return await mpc.secure_product_many(matches)
