"""Clifford+T synthesis of single-qubit SU(2) unitaries, with exact rings, lattice tools and an SDP solver."""

__version__ = "0.1.0"