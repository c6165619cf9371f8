"""Tests for the secure comparison circuit."""

import asyncio

import pytest

from core import rng
from core.config import ReusePolicy
from core.errors import ProtocolMisuseError
from core.sharing import PartyID
from protocols.preprocessing import generate_random_tuple
from sim.network import run_parties
from tests.utils import (SMALL_PRIME, MERSENNE_61, MERSENNE_127, make_sharing,
                         reconstruct, setup_parties, close_parties, run_two_party)


def _less_than(a, b, modulus=SMALL_PRIME, policy=ReusePolicy.STRICT):
    async def prog(party, s):
        z = await party.comparison.less_than(s["a"][0], s["b"][0])
        return z, party.channel.metrics.rounds
    (z1, rounds), (z2, _), p1 = asyncio.run(
        run_two_party(prog, {"a": [a], "b": [b]}, modulus=modulus, policy=policy))
    return reconstruct(p1.field, z1, z2), rounds


def test_comparison_5_lt_9():
    assert _less_than(5, 9)[0] == 1


def test_comparison_9_not_lt_5():
    assert _less_than(9, 5)[0] == 0


def test_comparison_equal_is_not_lt():
    assert _less_than(7, 7)[0] == 0


def test_comparison_edges_small_prime():
    top = SMALL_PRIME // 2  # largest comparable value
    assert _less_than(0, top)[0] == 1
    assert _less_than(top, 0)[0] == 0
    assert _less_than(0, 0)[0] == 0
    assert _less_than(top - 1, top)[0] == 1


def test_comparison_rounds():
    # open + (L - 1) suffix steps + weighted sum + final XOR product
    _, rounds = _less_than(5, 9)
    assert rounds == 17 + 2


def test_comparison_mersenne_61():
    assert _less_than(123456789, 987654321, modulus=MERSENNE_61)[0] == 1
    assert _less_than(987654321, 123456789, modulus=MERSENNE_61)[0] == 0


def test_comparison_mersenne_127():
    a, b = 2 ** 120 + 5, 2 ** 120 + 4
    assert _less_than(a, b, modulus=MERSENNE_127)[0] == 0
    assert _less_than(b, a, modulus=MERSENNE_127)[0] == 1


def test_comparison_reuse_policy():
    assert _less_than(5, 9, policy=ReusePolicy.REUSE)[0] == 1
    assert _less_than(9, 5, policy=ReusePolicy.REUSE)[0] == 0


def test_less_than_many_matches_plaintext():
    rng.set_seed(11)
    xs = [rng.randbelow(SMALL_PRIME // 2) for _ in range(12)] + [3, 3, 0]
    ys = [rng.randbelow(SMALL_PRIME // 2) for _ in range(12)] + [3, 4, 0]

    async def prog(party, s):
        z = await party.comparison.less_than_many(s["a"], s["b"])
        return z, party.channel.metrics.rounds, party.supply.tuples_used
    (z1, rounds, tuples), (z2, _, _), p1 = asyncio.run(
        run_two_party(prog, {"a": xs, "b": ys}))
    assert reconstruct(p1.field, z1, z2) == [int(x < y) for x, y in zip(xs, ys)]
    assert rounds == 17 + 2
    assert tuples == len(xs)


def test_less_than_many_reuse_policy():
    xs, ys = [1, 50, 20, 8], [2, 40, 20, 9]

    async def prog(party, s):
        return await party.comparison.less_than_many(s["a"], s["b"])
    z1, z2, p1 = asyncio.run(run_two_party(
        prog, {"a": xs, "b": ys}, modulus=MERSENNE_61, policy=ReusePolicy.REUSE))
    assert reconstruct(p1.field, z1, z2) == [1, 0, 0, 1]


def test_derived_comparisons():
    async def prog(party, s):
        a, b = s["a"][0], s["b"][0]
        c = party.comparison
        return [await c.greater_than(a, b), await c.less_equal(a, b),
                await c.greater_equal(a, b), await c.less_equal(a, a),
                await c.greater_equal(b, a)]
    z1, z2, p1 = asyncio.run(run_two_party(prog, {"a": [10], "b": [3]}))
    assert reconstruct(p1.field, z1, z2) == [1, 0, 1, 1, 0]


def test_public_less_than():
    rng.set_seed(12)

    async def prog(party, s):
        bits = s["bits"]
        return [await party.comparison.public_less_than(pub, bits)
                for pub in (4, 5, 6, 0, 31)]
    # s = 5 as 5 LSB-first bits
    z1, z2, p1 = asyncio.run(run_two_party(prog, {"bits": [1, 0, 1, 0, 0]}))
    assert reconstruct(p1.field, z1, z2) == [1, 0, 0, 1, 0]


def test_short_tuple_rejected():
    async def _test():
        p1, p2, _ = await setup_parties()
        short, _ = generate_random_tuple(8, p1.field)
        s = make_sharing(p1.field, [1, 2])
        with pytest.raises(ProtocolMisuseError):
            await p1.comparison.less_than(s[PartyID.C1][0], s[PartyID.C1][1], short)
        await close_parties(p1, p2)
    asyncio.run(_test())


def test_less_than_many_length_mismatch():
    async def _test():
        p1, p2, _ = await setup_parties()
        with pytest.raises(ProtocolMisuseError):
            await p1.comparison.less_than_many([1, 2], [1])
        assert await p1.comparison.less_than_many([], []) == []
        await close_parties(p1, p2)
    asyncio.run(_test())


def test_explicit_tuple_then_supply_tuple():
    async def _test():
        p1, p2, _ = await setup_parties()
        s = make_sharing(p1.field, [5, 9])
        t1, t2 = generate_random_tuple(p1.field.bit_length, p1.field)
        z1, z2 = await run_parties(
            p1.comparison.less_than(s[PartyID.C1][0], s[PartyID.C1][1], t1),
            p2.comparison.less_than(s[PartyID.C2][0], s[PartyID.C2][1], t2))
        assert reconstruct(p1.field, z1, z2) == 1
        z1, z2 = await run_parties(
            p1.comparison.less_than(s[PartyID.C1][1], s[PartyID.C1][0]),
            p2.comparison.less_than(s[PartyID.C2][1], s[PartyID.C2][0]))
        assert reconstruct(p1.field, z1, z2) == 0
        assert p1.supply.tuples_used == 2
        await close_parties(p1, p2)
    asyncio.run(_test())
