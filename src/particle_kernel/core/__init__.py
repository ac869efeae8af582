"""Simulation kernel: state, integration, collisions and drivers."""
