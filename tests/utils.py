"""Test utilities: two-party setup, sharing and reconstruction helpers."""

from core import rng
from core.config import ReusePolicy
from core.field import PrimeField
from core.sharing import PartyID, split_share
from protocols.preprocessing import CorrelatedSupply
from sim.dealer import SimulationDealer
from sim.network import open_local_pair, run_parties
from party import Party

SMALL_PRIME = 65537            # L = 17
MERSENNE_61 = (1 << 61) - 1    # L = 61
MERSENNE_127 = (1 << 127) - 1  # L = 127


def make_sharing(field, values):
    """Split plaintext values; returns {PartyID: [shares]}."""
    shares = {PartyID.C1: [], PartyID.C2: []}
    for v in values:
        s1, s2 = split_share(v, field)
        shares[PartyID.C1].append(s1)
        shares[PartyID.C2].append(s2)
    return shares


def reconstruct(field, shares_1, shares_2):
    if isinstance(shares_1, int):
        return field.add(shares_1, shares_2)
    return [field.add(a, b) for a, b in zip(shares_1, shares_2)]


async def setup_parties(modulus=SMALL_PRIME, policy=ReusePolicy.STRICT,
                        seed=42, timeout=None, sources=None):
    """Both parties over a local socket pair with a simulated dealer.

    `sources` overrides the dealer with {PartyID: CorrelatedSource}.
    """
    rng.set_seed(seed)
    field = PrimeField(modulus)
    dealer = SimulationDealer(field)
    chan_1, chan_2 = await open_local_pair(timeout=timeout)
    if sources is None:
        sources = {pid: dealer.source(pid) for pid in PartyID}
    p1 = Party(PartyID.C1, field, chan_1,
               CorrelatedSupply(sources[PartyID.C1], policy))
    p2 = Party(PartyID.C2, field, chan_2,
               CorrelatedSupply(sources[PartyID.C2], policy))
    return p1, p2, dealer


async def close_parties(p1, p2):
    await p1.channel.close()
    await p2.channel.close()


async def run_two_party(program, values=None, **kwargs):
    """Run program(party, shares) on both parties; returns (out_1, out_2, p1).

    `values` maps an argument name to plaintext lists; each party receives
    its own shares of them as a dict.
    """
    p1, p2, _ = await setup_parties(**kwargs)
    shared = {name: make_sharing(p1.field, vals)
              for name, vals in (values or {}).items()}

    def mine(party):
        return {name: s[party.party_id] for name, s in shared.items()}

    try:
        out_1, out_2 = await run_parties(program(p1, mine(p1)),
                                         program(p2, mine(p2)))
    finally:
        await close_parties(p1, p2)
    return out_1, out_2, p1
