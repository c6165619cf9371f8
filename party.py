"""Party: a single participant wiring context, arithmetic and circuits together."""

from core.config import EngineConfig
from core.field import PrimeField
from core.sharing import PartyID, split_share
from protocols.channel import SecureChannel
from protocols.context import PartyContext
from protocols.preprocessing import CorrelatedSource, CorrelatedSupply
from protocols.mpc_arithmetic import MPCArithmetic
from circuits.comparison import ComparisonCircuit
from circuits.equality import EqualityCircuit


class Party:
    """One of the two parties C1, C2."""

    def __init__(self, party_id: PartyID, field: PrimeField,
                 channel: SecureChannel, supply: CorrelatedSupply):
        self.party_id = party_id
        self.field = field
        self.channel = channel
        self.supply = supply

        self.ctx = PartyContext(party_id, field, channel, supply)
        self.mpc = MPCArithmetic(self.ctx)
        self.comparison = ComparisonCircuit(self.mpc)
        self.equality = EqualityCircuit(self.mpc)

    @classmethod
    def from_config(cls, party_id: PartyID, config: EngineConfig,
                    channel: SecureChannel, source: CorrelatedSource) -> 'Party':
        channel.radix = config.radix
        channel.timeout = config.exchange_timeout
        return cls(party_id, config.field(), channel,
                   CorrelatedSupply(source, config.policy))

    async def share_input(self, values: list[int], comparable: bool = False) -> list[int]:
        """Secret-share our own plaintext inputs: keep x_1, send x_2 to the peer.

        With comparable=True every value is first checked against [0, p/2)
        and for two bits of headroom below p.
        """
        mine, theirs = [], []
        for v in values:
            if comparable:
                self.field.check_comparable(v)
                self.field.check_headroom(v.bit_length())
            x1, x2 = split_share(v, self.field)
            mine.append(x1)
            theirs.append(x2)
        await self.channel.send(theirs)
        return mine

    async def receive_input(self, count: int) -> list[int]:
        """Receive our shares of `count` values input by the peer."""
        return await self.channel.receive(count)

    async def reveal(self, shares: list[int]) -> list[int]:
        return await self.mpc.recover_many(shares)
