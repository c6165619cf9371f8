"""Simulated trusted dealer: generates both parties' correlated randomness.

Both parties draw from the same dealer in one process. Units are generated
lazily and indexed by position, so C1's k-th triple and C2's k-th triple are
always the two halves of the same (a, b, c) as long as both parties run the
same protocol calls in the same order.
"""

import logging
import threading

from core.field import PrimeField
from core.sharing import PartyID, split_share
from protocols.preprocessing import (
    CorrelatedSource, MultiplicationTriple, RandomNumberTuple,
    generate_triple, generate_random_tuple,
)

logger = logging.getLogger(__name__)


class SimulationDealer:
    """Ideal preprocessing functionality for two in-process parties."""

    def __init__(self, field: PrimeField, bit_length: int | None = None):
        self.field = field
        self.bit_length = bit_length if bit_length is not None else field.bit_length
        field.check_bit_length(self.bit_length)
        self._triples: list[tuple[MultiplicationTriple, MultiplicationTriple]] = []
        self._tuples: list[tuple[RandomNumberTuple, RandomNumberTuple]] = []
        self._lock = threading.Lock()

    @property
    def triples_generated(self) -> int:
        return len(self._triples)

    @property
    def tuples_generated(self) -> int:
        return len(self._tuples)

    def triple(self, index: int, party: PartyID) -> MultiplicationTriple:
        with self._lock:
            while len(self._triples) <= index:
                self._triples.append(
                    generate_triple(self.field, uid=len(self._triples)))
            return self._triples[index][party.value - 1]

    def random_tuple(self, index: int, party: PartyID) -> RandomNumberTuple:
        with self._lock:
            while len(self._tuples) <= index:
                self._tuples.append(generate_random_tuple(
                    self.bit_length, self.field, uid=len(self._tuples)))
            return self._tuples[index][party.value - 1]

    def source(self, party: PartyID) -> 'DealerSource':
        return DealerSource(self, party)

    def split_inputs(self, values: list[int], comparable: bool = False
                     ) -> tuple[list[int], list[int]]:
        """Share plaintext inputs, range-checking them for comparison."""
        shares_1, shares_2 = [], []
        for v in values:
            if comparable:
                self.field.check_comparable(v)
                self.field.check_headroom(v.bit_length())
            s1, s2 = split_share(v, self.field)
            shares_1.append(s1)
            shares_2.append(s2)
        return shares_1, shares_2

    def provision(self, triples: int, tuples: int) -> tuple[list[str], list[str]]:
        """Generate fresh units and render each party's half as JSON lines,
        for parties that load them through a ProvisionedSource."""
        lines_1, lines_2 = [], []
        for uid in range(triples):
            t1, t2 = generate_triple(self.field, uid=uid)
            lines_1.append(t1.to_json())
            lines_2.append(t2.to_json())
        for uid in range(tuples):
            r1, r2 = generate_random_tuple(self.bit_length, self.field, uid=uid)
            lines_1.append(r1.to_json())
            lines_2.append(r2.to_json())
        logger.info("Provisioned %d triples and %d tuples (L=%d) per party",
                    triples, tuples, self.bit_length)
        return lines_1, lines_2


class DealerSource(CorrelatedSource):
    """One party's sequential view of a SimulationDealer."""

    def __init__(self, dealer: SimulationDealer, party: PartyID):
        self.dealer = dealer
        self.party = party
        self._next_triple = 0
        self._next_tuple = 0

    def next_triple(self) -> MultiplicationTriple:
        unit = self.dealer.triple(self._next_triple, self.party)
        self._next_triple += 1
        return unit

    def next_tuple(self) -> RandomNumberTuple:
        unit = self.dealer.random_tuple(self._next_tuple, self.party)
        self._next_tuple += 1
        return unit
