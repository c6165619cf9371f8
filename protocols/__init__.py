"""Protocol modules: channel, preprocessing supply, party context, MPC arithmetic."""

from protocols.channel import SecureChannel, ChannelMetrics
from protocols.preprocessing import (
    MultiplicationTriple, RandomNumberTuple, CorrelatedSource,
    ProvisionedSource, CorrelatedSupply, generate_triple, generate_random_tuple,
)
from protocols.context import PartyContext
from protocols.mpc_arithmetic import MPCArithmetic
