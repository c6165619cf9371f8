"""Per-party execution context threaded through every protocol call."""

from dataclasses import dataclass

from core.field import PrimeField
from core.sharing import PartyID, share_constant
from protocols.channel import SecureChannel
from protocols.preprocessing import CorrelatedSupply


@dataclass
class PartyContext:
    """Role, field, channel to the peer and correlated-randomness supply."""
    party: PartyID
    field: PrimeField
    channel: SecureChannel
    supply: CorrelatedSupply

    @property
    def is_c1(self) -> bool:
        return self.party is PartyID.C1

    def constant(self, k: int) -> int:
        """This party's share of the public constant k."""
        return share_constant(self.party, k % self.field.modulus)
