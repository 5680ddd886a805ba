"""Simulation core: state, forces, integrators and the driver thread."""
