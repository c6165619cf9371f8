"""Correlated randomness: Beaver triples and masked random-bit tuples.

The offline phase (a trusted dealer) produces both parties' shares; each
party only ever sees its own half. Online, a CorrelatedSupply hands the
units out to the arithmetic engine under an explicit ReusePolicy.
"""

import json
import logging
from collections import deque
from dataclasses import dataclass

from core.config import ReusePolicy
from core.errors import ProtocolMisuseError
from core.field import PrimeField
from core.sharing import split_share

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MultiplicationTriple:
    """One party's shares [a]_i, [b]_i, [c]_i of a Beaver triple c = a*b."""
    a: int
    b: int
    c: int
    uid: int = 0

    def to_json(self) -> str:
        return json.dumps({"kind": "triple", "uid": self.uid,
                           "a": self.a, "b": self.b, "c": self.c})

    @classmethod
    def from_dict(cls, d: dict) -> 'MultiplicationTriple':
        return cls(int(d["a"]), int(d["b"]), int(d["c"]), int(d.get("uid", 0)))

    @classmethod
    def from_json(cls, s: str) -> 'MultiplicationTriple':
        return cls.from_dict(json.loads(s))


@dataclass(frozen=True)
class RandomNumberTuple:
    """One party's shares of a random r and of its LSB-first bits."""
    r: int
    bit_length: int
    bits: tuple[int, ...]
    uid: int = 0

    def __post_init__(self):
        if len(self.bits) != self.bit_length:
            raise ProtocolMisuseError(
                f"Tuple carries {len(self.bits)} bit shares, "
                f"expected {self.bit_length}")

    def to_json(self) -> str:
        return json.dumps({"kind": "tuple", "uid": self.uid, "r": self.r,
                           "bit_length": self.bit_length,
                           "bits": list(self.bits)})

    @classmethod
    def from_dict(cls, d: dict) -> 'RandomNumberTuple':
        return cls(int(d["r"]), int(d["bit_length"]),
                   tuple(int(b) for b in d["bits"]), int(d.get("uid", 0)))

    @classmethod
    def from_json(cls, s: str) -> 'RandomNumberTuple':
        return cls.from_dict(json.loads(s))


def generate_triple(field: PrimeField, uid: int = 0
                    ) -> tuple[MultiplicationTriple, MultiplicationTriple]:
    """Dealer: draw a, b, set c = a*b, split each. Returns (C1's, C2's)."""
    a = field.random()
    b = field.random()
    c = field.mul(a, b)
    a1, a2 = split_share(a, field)
    b1, b2 = split_share(b, field)
    c1, c2 = split_share(c, field)
    return (MultiplicationTriple(a1, b1, c1, uid),
            MultiplicationTriple(a2, b2, c2, uid))


def generate_random_tuple(bit_length: int, field: PrimeField, uid: int = 0
                          ) -> tuple[RandomNumberTuple, RandomNumberTuple]:
    """Dealer: draw r, expand to bit_length LSB-first bits, share r and every bit."""
    r = field.random()
    r1, r2 = split_share(r, field)
    bits_1, bits_2 = [], []
    for bit in field.to_bits(r, bit_length):
        s1, s2 = split_share(bit, field)
        bits_1.append(s1)
        bits_2.append(s2)
    return (RandomNumberTuple(r1, bit_length, tuple(bits_1), uid),
            RandomNumberTuple(r2, bit_length, tuple(bits_2), uid))


class CorrelatedSource:
    """Where one party's triples and tuples come from."""

    def next_triple(self) -> MultiplicationTriple:
        raise NotImplementedError

    def next_tuple(self) -> RandomNumberTuple:
        raise NotImplementedError


class ProvisionedSource(CorrelatedSource):
    """This party's shares, read from an external provisioning stream.

    `lines` is any iterable of JSON lines (an open file, a list, a socket
    reader's lines). Triples and tuples may be interleaved; each is consumed
    in stream order.
    """

    def __init__(self, lines):
        self._lines = iter(lines)
        self._pending = {"triple": deque(), "tuple": deque()}

    def _next(self, kind: str):
        queue = self._pending[kind]
        while not queue:
            try:
                line = next(self._lines)
            except StopIteration:
                raise ProtocolMisuseError(
                    f"Provisioned {kind}s exhausted") from None
            line = line.strip()
            if not line:
                continue
            record = json.loads(line)
            other = record.get("kind")
            if other == "triple":
                self._pending["triple"].append(MultiplicationTriple.from_dict(record))
            elif other == "tuple":
                self._pending["tuple"].append(RandomNumberTuple.from_dict(record))
            else:
                raise ProtocolMisuseError(f"Unknown provisioning record kind {other!r}")
        return queue.popleft()

    def next_triple(self) -> MultiplicationTriple:
        return self._next("triple")

    def next_tuple(self) -> RandomNumberTuple:
        return self._next("tuple")


class CorrelatedSupply:
    """Hands out triples and tuples to one party under a ReusePolicy."""

    def __init__(self, source: CorrelatedSource,
                 policy: ReusePolicy = ReusePolicy.STRICT):
        self.source = source
        self.policy = policy
        self.triples_used = 0
        self.tuples_used = 0

        self._spent_triples: set[MultiplicationTriple] = set()
        self._spent_tuples: set[RandomNumberTuple] = set()
        self._reused_triple: MultiplicationTriple | None = None
        self._reused_tuple: RandomNumberTuple | None = None
        self._handed_out = {"triple": 0, "tuple": 0}
        self._warned: set[str] = set()

    def take_triple(self) -> MultiplicationTriple:
        return self.take_triples(1)[0]

    def take_triples(self, n: int) -> list[MultiplicationTriple]:
        self.triples_used += n
        if self.policy is ReusePolicy.REUSE:
            if self._reused_triple is None:
                self._reused_triple = self.source.next_triple()
            self._reuse_handed_out("triple", n)
            return [self._reused_triple] * n
        return [self._mark(self.source.next_triple(), self._spent_triples, "triple")
                for _ in range(n)]

    def take_tuple(self) -> RandomNumberTuple:
        return self.take_tuples(1)[0]

    def take_tuples(self, n: int) -> list[RandomNumberTuple]:
        self.tuples_used += n
        if self.policy is ReusePolicy.REUSE:
            if self._reused_tuple is None:
                self._reused_tuple = self.source.next_tuple()
            self._reuse_handed_out("tuple", n)
            return [self._reused_tuple] * n
        return [self._mark(self.source.next_tuple(), self._spent_tuples, "tuple")
                for _ in range(n)]

    def claim_triples(self, triples: list[MultiplicationTriple]) -> list[MultiplicationTriple]:
        """Accept caller-supplied triples, rejecting spent ones under STRICT."""
        self.triples_used += len(triples)
        if self.policy is ReusePolicy.STRICT:
            for t in triples:
                self._mark(t, self._spent_triples, "triple")
        return list(triples)

    def claim_tuples(self, tuples: list[RandomNumberTuple]) -> list[RandomNumberTuple]:
        self.tuples_used += len(tuples)
        if self.policy is ReusePolicy.STRICT:
            for t in tuples:
                self._mark(t, self._spent_tuples, "tuple")
        return list(tuples)

    @staticmethod
    def _mark(unit, spent: set, kind: str):
        if unit in spent:
            raise ProtocolMisuseError(
                f"{kind} {unit.uid} already spent; correlated randomness is single-use")
        spent.add(unit)
        return unit

    def _reuse_handed_out(self, kind: str, n: int):
        self._handed_out[kind] += n
        if self._handed_out[kind] > 1 and kind not in self._warned:
            logger.warning("Handing out the same %s %d times (policy=reuse); "
                           "masks are not single-use", kind, self._handed_out[kind])
            self._warned.add(kind)
