"""Command line entry point for running the cruise control simulations."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass, fields, replace
from os import PathLike
from typing import Sequence

from .params import load_parameters
from .simulation import Simulation

_KMH_TO_MS = 0.27778
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@dataclass
class SimulationSettings:
    """Scenario settings; speeds in km/h, times in seconds, distance in metres."""

    v_target: float = 35.0
    v_initial: float = 15.0
    dt: float = 0.1
    T: float = 500.0
    v2_initial: float = 10.0
    distance: float = 100.0
    sin_amplitude: float = 0.0
    sin_freq: float = 0.0


def load_simulation_parameters(path: str | PathLike[str] = "sim_parameters.csv") -> SimulationSettings:
    """Return the default settings overridden by any found in ``path``."""
    names = {f.name for f in fields(SimulationSettings)}
    loaded = load_parameters(path)
    return replace(
        SimulationSettings(), **{key: value for key, value in loaded.items() if key in names}
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Run the simulation chosen by the first argument (1, 2 or 3)."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print("Usage: accsim <choice>", file=sys.stderr)
        return 1
    match = _LEADING_INT.match(args[0])
    if match is None:
        print(f"Invalid choice: {args[0]!r}", file=sys.stderr)
        return 1
    choice = int(match.group(1))

    settings = load_simulation_parameters()
    v_target = settings.v_target * _KMH_TO_MS
    v_initial = settings.v_initial * _KMH_TO_MS
    v2_initial = settings.v2_initial * _KMH_TO_MS
    dt, total = settings.dt, settings.T

    sim = Simulation(dt, total)
    if choice == 1:
        print("Running simulation with one vehicle...")
        sim.run_simulation(v_target, v_initial, dt, total)
    elif choice == 2:
        print("Running simulation with two vehicles...")
        sim.run_simulation_with_two_vehicles(
            v_target, v_initial, dt, total, v2_initial,
            settings.distance, settings.sin_amplitude, settings.sin_freq,
        )
    elif choice == 3:
        print("Running simulation with checks...")
        sim.run_simulation_with_checks(
            v_target, v_initial, dt, total, v2_initial,
            settings.distance, settings.sin_amplitude, settings.sin_freq,
        )
    else:
        print("Invalid choice. Exiting...", file=sys.stderr)
        return 1

    print("Simulation completed!")
    return 0


if __name__ == "__main__":
    sys.exit(main())