"""Adaptive cruise control controller, vehicle models and closed-loop simulations."""

__version__ = "0.1.0"
__all__ = ["block", "cli", "controller", "dynamics", "params", "simulation"]