"""Two-party secure comparison and equality: demo entry point.

Runs both parties in one process over a local socket pair with a simulated
dealer, on the small prime 65537 and on 2^127 - 1.
Usage: python main.py [seed] [-v]
"""

import asyncio
import logging
import sys

from core.config import EngineConfig, ReusePolicy
from core.sharing import PartyID
from party import Party
from sim.dealer import SimulationDealer
from sim.network import open_local_pair, run_parties


async def run_scenario(config: EngineConfig, pairs: list[tuple[int, int]]):
    """Compare each (a, b) for a < b and a == b; C1 inputs a, C2 inputs b."""
    config.apply_seed()
    field = config.field()
    dealer = SimulationDealer(field)
    chan_1, chan_2 = await open_local_pair(config.radix, config.exchange_timeout)
    p1 = Party.from_config(PartyID.C1, config, chan_1, dealer.source(PartyID.C1))
    p2 = Party.from_config(PartyID.C2, config, chan_2, dealer.source(PartyID.C2))

    xs = [a for a, _ in pairs]
    ys = [b for _, b in pairs]

    async def play(party: Party, own: list[int]):
        if party.party_id is PartyID.C1:
            a = await party.share_input(own, comparable=True)
            b = await party.receive_input(len(pairs))
        else:
            a = await party.receive_input(len(pairs))
            b = await party.share_input(own, comparable=True)
        lt = await party.comparison.less_than_many(a, b)
        eq = await party.equality.equal_many(a, b)
        return await party.reveal(lt), await party.reveal(eq)

    print(f"=== p = {field.modulus} (L = {field.bit_length}), "
          f"policy = {config.policy.value} ===")
    chan_1.metrics.start()
    (lt, eq), _ = await run_parties(play(p1, xs), play(p2, ys))
    for (a, b), is_lt, is_eq in zip(pairs, lt, eq):
        print(f"  {a:>6} < {b:<6} -> {is_lt}    {a:>6} == {b:<6} -> {is_eq}")

    print("\n--- Metrics (C1) ---")
    print(f"  Rounds: {chan_1.metrics.rounds}")
    print(f"  Values sent: {chan_1.metrics.values_sent}")
    print(f"  Triples used: {p1.supply.triples_used}")
    print(f"  Tuples used: {p1.supply.tuples_used}")
    print(f"  Elapsed: {chan_1.metrics.elapsed:.3f}s")
    print()

    await chan_1.close()
    await chan_2.close()


async def main():
    args = [a for a in sys.argv[1:] if a != "-v"]
    if "-v" in sys.argv[1:]:
        logging.basicConfig(level=logging.DEBUG)
    seed = int(args[0]) if args else 42

    pairs = [(5, 9), (9, 5), (7, 7), (42, 42), (42, 43), (0, 16383)]

    print("=" * 50)
    print("SCENARIO 1: small prime, single-use randomness")
    print("=" * 50)
    await run_scenario(EngineConfig(modulus=65537, seed=seed), pairs)

    print("=" * 50)
    print("SCENARIO 2: Mersenne prime, reused randomness")
    print("=" * 50)
    await run_scenario(EngineConfig(policy=ReusePolicy.REUSE, seed=seed), pairs)


if __name__ == "__main__":
    asyncio.run(main())
