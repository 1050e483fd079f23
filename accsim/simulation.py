"""Closed-loop simulations of the cruise controller on a longitudinal vehicle model."""

from __future__ import annotations

import csv
import math
from dataclasses import dataclass, fields, replace
from os import PathLike
from pathlib import Path
from typing import Callable, TypeVar

from .controller import ACCController
from .dynamics import VehicleDynamics
from .params import load_parameters

SINGLE_LOG_NAME = "simulation_log.csv"
ACC_LOG_NAME = "simulation_log_ACC.csv"

_SINGLE_HEADER = ("Time", "Error", "Actual Speed", "Torque", "Target Speed")
_ACC_HEADER = (
    "Time",
    "Error",
    "EgoSpeed",
    "Torque",
    "ACCTargetSpeed",
    "LeadSpeed",
    "DriverSetSpeed",
    "Gap(m)",
    "TrueTimeGap",
    "TargetTimeGap",
    "SafeDistance",
)

_MS_TO_KMH = 3.6


@dataclass
class VehicleParameters:
    """Physical constants of the simulated vehicle."""

    m: float = 1450.0
    r: float = 0.3
    rho: float = 1.225
    cd: float = 0.32
    area: float = 2.2
    cr: float = 0.015
    g: float = 9.81
    tau_max: float = 400.0
    max_torque_rate: float = 50.0


@dataclass
class ControllerParameters:
    """Tuning of the cruise controller used by the simulations."""

    kp: float = 100.0
    ki: float = 0.82
    kd: float = 0.0
    d_kp: float = 0.3
    d_ki: float = 0.01
    d_kd: float = 0.0
    time_gap: float = 1.5
    time_gap_tolerance: float = 0.1
    pid_speed_control: float = 0.0
    minimum_distance: float = 10.0


_VEHICLE_KEYS = {
    "m": "m",
    "r": "r",
    "rho": "rho",
    "Cd": "cd",
    "A": "area",
    "Cr": "cr",
    "g": "g",
    "tau_max": "tau_max",
    "max_torque_rate": "max_torque_rate",
}

_CONTROLLER_KEYS = {
    "Kp": "kp",
    "Ki": "ki",
    "Kd": "kd",
    "d_Kp": "d_kp",
    "d_Ki": "d_ki",
    "d_Kd": "d_kd",
    "time_gap": "time_gap",
    "time_gap_tolerance": "time_gap_tolerance",
    "pid_speed_control": "pid_speed_control",
    "minimum_distance": "minimum_distance",
}

_P = TypeVar("_P", VehicleParameters, ControllerParameters)


def _load_overrides(defaults: _P, path: str | PathLike[str], keys: dict[str, str]) -> _P:
    loaded = load_parameters(path)
    valid = {f.name for f in fields(defaults)}
    changes = {
        keys[key]: value for key, value in loaded.items() if key in keys and keys[key] in valid
    }
    return replace(defaults, **changes)


def _step_count(T: float, dt: float) -> int:
    return int(T / dt) + 1


def _limit_rate(torque: float, prev_torque: float, max_rate: float, dt: float) -> float:
    torque_rate = (torque - prev_torque) / dt
    if abs(torque_rate) > max_rate:
        return prev_torque + math.copysign(max_rate * dt, torque_rate)
    return torque


def _fmt(value: float) -> str:
    return f"{value:g}"


def sin_target(
    initial_value: float, amplitude: float, frequency: float, dt: float, T: float
) -> list[float]:
    """Sinusoidal speed profile sampled every ``dt`` seconds up to ``T``."""
    return [
        initial_value + amplitude * math.sin(2 * frequency * (i * dt))
        for i in range(_step_count(T, dt))
    ]


_ControlStep = Callable[[float, float, float, bool, float], "tuple[float, float]"]


class Simulation:
    """Runs the controller against the vehicle model and logs each step to CSV."""

    def __init__(
        self,
        dt: float,
        T: float,
        *,
        vehicle: VehicleParameters | None = None,
        gains: ControllerParameters | None = None,
        gains_path: str | PathLike[str] = "gains.csv",
        dynamics_path: str | PathLike[str] = "dynamics_parameters.csv",
        log_dir: str | PathLike[str] = ".",
    ) -> None:
        self.dt = dt
        self.total_time = T
        self.gains_path = gains_path
        self.log_dir = Path(log_dir)
        if gains is None:
            gains = _load_overrides(ControllerParameters(), gains_path, _CONTROLLER_KEYS)
        if vehicle is None:
            vehicle = _load_overrides(VehicleParameters(), dynamics_path, _VEHICLE_KEYS)
        self.gains = gains
        self.vehicle = vehicle

    def _dynamics(self) -> VehicleDynamics:
        v = self.vehicle
        return VehicleDynamics(v.r, v.rho, v.cd, v.area, v.cr, v.m, v.g)

    def _controller(self) -> ACCController:
        p = self.gains
        return ACCController(
            p.time_gap,
            p.time_gap_tolerance,
            p.pid_speed_control,
            p.kp,
            p.ki,
            p.kd,
            p.d_kp,
            p.d_ki,
            p.d_kd,
        )

    def run_simulation(
        self, v_target: float, v_initial: float, dt: float, T: float
    ) -> list[float]:
        """Track a constant target speed with no lead vehicle; return speeds in km/h."""
        acc = self._controller()
        dynamics = self._dynamics()
        tau_max = self.vehicle.tau_max
        v_actual = v_initial
        prev_torque = 0.0
        actual_speed: list[float] = []
        torque_output: list[float] = []
        error_output: list[float] = []

        with open(self.log_dir / SINGLE_LOG_NAME, "w", newline="", encoding="utf-8") as log:
            writer = csv.writer(log, lineterminator="\n")
            writer.writerow(_SINGLE_HEADER)
            for i in range(_step_count(T, dt)):
                time = i * dt
                torque = acc.calculate_torque(v_target, v_actual, tau_max, dt)
                torque = _limit_rate(torque, prev_torque, self.vehicle.max_torque_rate, dt)
                prev_torque = torque
                v_actual = dynamics.update(torque, v_actual, dt)

                speed = v_actual * _MS_TO_KMH
                error = v_target * _MS_TO_KMH - v_actual * _MS_TO_KMH
                actual_speed.append(speed)
                torque_output.append(torque)
                error_output.append(error)
                writer.writerow(
                    [_fmt(time), _fmt(error), _fmt(speed), _fmt(torque), _fmt(v_target * _MS_TO_KMH)]
                )

        self.display_results(actual_speed, torque_output, error_output, v_target, dt)
        return actual_speed

    def run_simulation_with_two_vehicles(
        self,
        v_target: float,
        v_initial: float,
        dt: float,
        T: float,
        v2_initial: float,
        distance: float,
        sin_amplitude: float,
        sin_freq: float,
    ) -> list[float]:
        """Follow a lead vehicle using target-speed selection and the speed PID."""
        acc = self._controller()
        tau_max = self.vehicle.tau_max
        minimum_distance = self.gains.minimum_distance

        def step(
            v_actual: float, v_lead: float, gap: float, present: bool, set_speed: float
        ) -> tuple[float, float]:
            target = acc.calculate_target_speed(
                gap, minimum_distance, v_actual, v_lead, set_speed, present, dt
            )
            return acc.calculate_torque(target, v_actual, tau_max, dt), target

        return self._run_with_lead(
            acc, step, v_target, v_initial, dt, T, v2_initial, distance, sin_amplitude, sin_freq
        )

    def run_simulation_with_checks(
        self,
        v_target: float,
        v_initial: float,
        dt: float,
        T: float,
        v2_initial: float,
        distance: float,
        sin_amplitude: float,
        sin_freq: float,
    ) -> list[float]:
        """Follow a lead vehicle through the full cycle with its enable checks."""
        acc = ACCController.from_gains_file(self.gains_path)
        tau_max = self.vehicle.tau_max

        def step(
            v_actual: float, v_lead: float, gap: float, present: bool, set_speed: float
        ) -> tuple[float, float]:
            torque = acc.run_acc(
                v_actual, set_speed, 0, True, 0, 0, 0, dt, v_lead, gap, tau_max, 0
            )
            return torque, acc.target_speed

        return self._run_with_lead(
            acc, step, v_target, v_initial, dt, T, v2_initial, distance, sin_amplitude, sin_freq
        )

    def _run_with_lead(
        self,
        acc: ACCController,
        control: _ControlStep,
        v_target: float,
        v_initial: float,
        dt: float,
        T: float,
        v2_initial: float,
        distance: float,
        sin_amplitude: float,
        sin_freq: float,
    ) -> list[float]:
        steps = _step_count(T, dt)
        tau_max = self.vehicle.tau_max
        target_time_gap = self.gains.time_gap
        dynamics = self._dynamics()

        if sin_amplitude > 0 and sin_freq > 0:
            lead_speeds = sin_target(v2_initial, sin_amplitude, sin_freq, dt, T)
        else:
            lead_speeds = [v2_initial] * steps

        v_actual = v_initial
        prev_torque = 0.0
        driver_set_speed = v_target
        gap = distance
        actual_speed: list[float] = []
        torque_output: list[float] = []
        error_output: list[float] = []

        with open(self.log_dir / ACC_LOG_NAME, "w", newline="", encoding="utf-8") as log:
            writer = csv.writer(log, lineterminator="\n")
            writer.writerow(_ACC_HEADER)
            for i, v_lead in enumerate(lead_speeds):
                time = i * dt
                distance_to_lead = gap
                present = distance_to_lead >= 0
                torque, step_target = control(
                    v_actual, v_lead, distance_to_lead, present, driver_set_speed
                )

                torque = max(-tau_max, min(tau_max, torque))
                torque = _limit_rate(torque, prev_torque, self.vehicle.max_torque_rate, dt)
                prev_torque = torque
                v_actual = dynamics.update(torque, v_actual, dt)

                if i > 0:
                    gap = gap + (v_lead - v_actual) * dt

                if v_actual > 0:
                    true_time_gap = -1.0 if v_actual < 1 else (gap - 10) / v_actual
                else:
                    true_time_gap = 0.0

                speed = v_actual * _MS_TO_KMH
                error = step_target * _MS_TO_KMH - v_actual * _MS_TO_KMH
                actual_speed.append(speed)
                torque_output.append(torque)
                error_output.append(error)
                writer.writerow(
                    [
                        _fmt(time),
                        _fmt(error),
                        _fmt(speed),
                        _fmt(torque),
                        _fmt(step_target * _MS_TO_KMH),
                        _fmt(v_lead * _MS_TO_KMH),
                        _fmt(driver_set_speed * _MS_TO_KMH),
                        _fmt(gap),
                        _fmt(true_time_gap),
                        _fmt(target_time_gap),
                        _fmt(acc.safe_distance),
                    ]
                )

        self.display_results(actual_speed, torque_output, error_output, v_target, dt)
        return actual_speed

    def display_results(
        self,
        actual_speed: list[float],
        torque_output: list[float],
        error_output: list[float],
        v_target: float,
        dt: float,
    ) -> float:
        """Print and return the speed overshoot in percent of ``v_target`` (m/s)."""
        excess = max(actual_speed) * 0.2778 - v_target
        if v_target == 0:
            overshoot = math.nan if excess == 0 else math.copysign(math.inf, excess)
        else:
            overshoot = excess / v_target * 100.0
        print(f"Overshoot: {overshoot:g}%")
        return overshoot