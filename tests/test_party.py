"""Tests for Party wiring: input sharing, configuration, provisioned dealer."""

import asyncio

import pytest

from core.config import EngineConfig, ReusePolicy
from core.errors import ProtocolMisuseError, RangeViolation
from core.field import PrimeField
from core.sharing import PartyID
from party import Party
from protocols.preprocessing import ProvisionedSource
from sim.dealer import SimulationDealer
from sim.network import open_local_pair, run_parties
from tests.utils import SMALL_PRIME, setup_parties, close_parties
import main


def test_share_input_and_reveal():
    async def _test():
        p1, p2, _ = await setup_parties()

        async def c1():
            own = await p1.share_input([5, 9])
            theirs = await p1.receive_input(1)
            return await p1.reveal(own + theirs)

        async def c2():
            theirs = await p2.receive_input(2)
            own = await p2.share_input([7])
            return await p2.reveal(theirs + own)

        r1, r2 = await run_parties(c1(), c2())
        assert r1 == r2 == [5, 9, 7]
        await close_parties(p1, p2)
    asyncio.run(_test())


def test_share_input_range_checked():
    async def _test():
        p1, p2, _ = await setup_parties()
        with pytest.raises(RangeViolation):
            await p1.share_input([40000], comparable=True)
        with pytest.raises(ProtocolMisuseError):
            await p1.share_input([32768], comparable=True)
        assert p1.channel.metrics.messages_sent == 0
        await close_parties(p1, p2)
    asyncio.run(_test())


def test_from_config():
    async def _test():
        config = EngineConfig(modulus=SMALL_PRIME, radix=16, exchange_timeout=5.0,
                              policy="reuse", seed=3)
        config.apply_seed()
        dealer = SimulationDealer(config.field())
        c1, c2 = await open_local_pair()
        p1 = Party.from_config(PartyID.C1, config, c1, dealer.source(PartyID.C1))
        p2 = Party.from_config(PartyID.C2, config, c2, dealer.source(PartyID.C2))
        assert p1.channel.radix == 16 and p1.channel.timeout == 5.0
        assert p1.supply.policy is ReusePolicy.REUSE

        async def play(party, x):
            return await party.mpc.recover(
                await party.mpc.multiply(x, party.ctx.constant(1)))
        # shares of 6 as (6, 0); times public 1
        r1, r2 = await run_parties(play(p1, 6), play(p2, 0))
        assert r1 == r2 == 6
    asyncio.run(_test())


def test_config_rejects_bad_radix():
    with pytest.raises(ValueError):
        EngineConfig(radix=40)


def test_provisioned_parties_run_comparison_and_equality():
    async def _test():
        field = PrimeField(SMALL_PRIME)
        dealer = SimulationDealer(field)
        # comparison: (L - 1) + L + 1 triples; equality: L - 1 triples
        L = field.bit_length
        lines_1, lines_2 = dealer.provision(triples=3 * L - 1, tuples=2)
        sources = {PartyID.C1: ProvisionedSource(lines_1),
                   PartyID.C2: ProvisionedSource(lines_2)}
        p1, p2, _ = await setup_parties(sources=sources)

        async def play(party, own):
            if party.party_id is PartyID.C1:
                a = await party.share_input(own, comparable=True)
                b = await party.receive_input(1)
            else:
                a = await party.receive_input(1)
                b = await party.share_input(own, comparable=True)
            lt = await party.comparison.less_than(a[0], b[0])
            eq = await party.equality.equal(a[0], b[0])
            return await party.reveal([lt, eq])

        r1, r2 = await run_parties(play(p1, [41]), play(p2, [42]))
        assert r1 == r2 == [1, 0]
        assert p1.supply.triples_used == 3 * L - 1
        await close_parties(p1, p2)
    asyncio.run(_test())


def test_demo_scenario(capsys):
    asyncio.run(main.run_scenario(EngineConfig(modulus=SMALL_PRIME, seed=1),
                                  [(5, 9), (7, 7)]))
    out = capsys.readouterr().out
    assert "5 < 9      -> 1" in out
    assert "7 == 7      -> 1" in out
    assert "Elapsed: " in out
