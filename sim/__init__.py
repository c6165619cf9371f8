"""Simulation infrastructure: in-process network and trusted dealer."""

from sim.network import open_local_pair, run_parties
from sim.dealer import SimulationDealer, DealerSource
