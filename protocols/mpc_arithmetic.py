"""MPC arithmetic: local linear operations and Beaver-triple multiplication.

Every share is an int in [0, p). Addition, subtraction and multiplication
by a public constant are local. Opening and multiplication cost exactly one
exchange round each; the *_many variants batch any number of them into a
single round.
"""

from core.errors import ProtocolMisuseError
from core.sharing import PartyID
from protocols.context import PartyContext
from protocols.preprocessing import MultiplicationTriple, RandomNumberTuple


class MPCArithmetic:
    """Arithmetic operations on secret-shared values for a single party."""

    def __init__(self, ctx: PartyContext):
        self.ctx = ctx
        self.field = ctx.field
        self.channel = ctx.channel

    def add(self, share_a: int, share_b: int) -> int:
        """Add two secret-shared values (local, no communication)."""
        return self.field.add(share_a, share_b)

    def sub(self, share_a: int, share_b: int) -> int:
        """Subtract two secret-shared values (local)."""
        return self.field.sub(share_a, share_b)

    def scalar_mul(self, constant: int, share: int) -> int:
        """Multiply a share by a public constant (local)."""
        return self.field.mul(constant, share)

    def add_constant(self, share: int, k: int) -> int:
        return self.field.add(share, self.ctx.constant(k))

    def constant_sub(self, k: int, share: int) -> int:
        """[k - x] for public k, e.g. NOT of a shared bit with k = 1."""
        return self.field.sub(self.ctx.constant(k), share)

    def random_tuples(self, n: int,
                      tuples: list[RandomNumberTuple] | None = None
                      ) -> list[RandomNumberTuple]:
        """n masking tuples from the supply, or the caller's own, checked
        to decompose every element of the field."""
        supply = self.ctx.supply
        if tuples is None:
            tuples = supply.take_tuples(n)
        else:
            if len(tuples) != n:
                raise ProtocolMisuseError(
                    f"Got {len(tuples)} random tuples for {n} elements")
            tuples = supply.claim_tuples(tuples)
        for t in tuples:
            self.field.check_bit_length(t.bit_length)
        return tuples

    async def recover(self, share: int) -> int:
        """Open a shared value: swap shares with the peer and add."""
        return (await self.recover_many([share]))[0]

    async def recover_many(self, shares: list[int]) -> list[int]:
        """Open a vector of shared values in one round."""
        shares = list(shares)
        peer = await self.channel.exchange(shares)
        return [self.field.add(mine, theirs) for mine, theirs in zip(shares, peer)]

    async def multiply(self, share_a: int, share_b: int,
                       triple: MultiplicationTriple | None = None) -> int:
        """Multiply two secret-shared values with a Beaver triple.

        1. Mask: e_i = x_i - a_i, f_i = y_i - b_i
        2. Exchange (e_i, f_i) and reconstruct the public e, f
        3. C1: z_1 = f*a_1 + e*b_1 + c_1
           C2: z_2 = e*f + f*a_2 + e*b_2 + c_2
        """
        triples = None if triple is None else [triple]
        return (await self.multiply_many([share_a], [share_b], triples))[0]

    async def multiply_many(self, shares_a: list[int], shares_b: list[int],
                            triples: list[MultiplicationTriple] | None = None
                            ) -> list[int]:
        """Element-wise products, all 2n masked differences in one round.

        Wire layout: the n e-values followed by the n f-values.
        """
        n = len(shares_a)
        if len(shares_b) != n:
            raise ProtocolMisuseError(
                f"multiply_many got {n} and {len(shares_b)} operands")
        if n == 0:
            return []

        supply = self.ctx.supply
        if triples is None:
            triples = supply.take_triples(n)
        else:
            if len(triples) != n:
                raise ProtocolMisuseError(
                    f"multiply_many got {len(triples)} triples for {n} products")
            triples = supply.claim_triples(triples)

        p = self.field.modulus
        masked = [(x - t.a) % p for x, t in zip(shares_a, triples)]
        masked.extend((y - t.b) % p for y, t in zip(shares_b, triples))

        peer = await self.channel.exchange(masked)

        is_c2 = self.ctx.party is PartyID.C2
        result = []
        for i, t in enumerate(triples):
            e = (masked[i] + peer[i]) % p
            f = (masked[n + i] + peer[n + i]) % p
            z = f * t.a + e * t.b + t.c
            if is_c2:
                z += e * f
            result.append(z % p)
        return result

    async def secure_product(self, shares: list[int]) -> int:
        """Product of all elements by binary-tree reduction.

        Each round multiplies the front half by the back half in one batched
        multiplication; an odd tail is carried into the next round. Rounds:
        ceil(log2 n).
        """
        if not shares:
            raise ProtocolMisuseError("secure_product of an empty sequence")
        current = list(shares)
        while len(current) > 1:
            half = len(current) // 2
            products = await self.multiply_many(current[:half],
                                                current[half:2 * half])
            if len(current) % 2:
                products.append(current[-1])
            current = products
        return current[0]

    async def secure_product_many(self, arrays: list[list[int]]) -> list[int]:
        """secure_product over several equal-length arrays at once.

        All arrays' front halves go into one buffer and all back halves into
        another, so each round is a single multiply_many whatever the number
        of arrays.
        """
        if not arrays:
            return []
        length = len(arrays[0])
        if length == 0:
            raise ProtocolMisuseError("secure_product_many of empty arrays")
        if any(len(a) != length for a in arrays):
            raise ProtocolMisuseError(
                "secure_product_many needs arrays of equal length")

        current = [list(a) for a in arrays]
        while length > 1:
            half = length // 2
            fronts, backs = [], []
            for arr in current:
                fronts.extend(arr[:half])
                backs.extend(arr[half:2 * half])
            products = await self.multiply_many(fronts, backs)
            nxt = []
            for k, arr in enumerate(current):
                row = products[k * half:(k + 1) * half]
                if length % 2:
                    row.append(arr[-1])
                nxt.append(row)
            current = nxt
            length = len(current[0])
        return [arr[0] for arr in current]
