"""Circuits built from MPC arithmetic: comparison and equality."""

from circuits.comparison import ComparisonCircuit
from circuits.equality import EqualityCircuit
