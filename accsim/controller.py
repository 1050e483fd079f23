"""Adaptive cruise control: target-speed selection and PID torque control."""

from __future__ import annotations

import math
from enum import Enum, auto
from os import PathLike

from .params import load_parameters


class VehicleState(Enum):
    """Operating mode of the cruise controller."""

    CRUISE = auto()
    FOLLOW = auto()
    STOP = auto()
    STANDBY = auto()
    OFF = auto()


_GAIN_KEYS = {
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


class ACCController:
    """Adaptive cruise controller with a speed PID and an optional gap PID."""

    def __init__(
        self,
        time_gap: float,
        time_gap_tolerance: float,
        pid_speed_control: float,
        kp: float,
        ki: float,
        kd: float,
        d_kp: float,
        d_ki: float,
        d_kd: float,
        *,
        minimum_distance: float = 0.0,
        state: VehicleState = VehicleState.OFF,
        report: bool = True,
    ) -> None:
        self.time_gap = time_gap
        self.time_gap_tolerance = time_gap_tolerance
        self.pid_speed_control = pid_speed_control
        self.kp = kp
        self.ki = ki
        self.kd = kd
        self.d_kp = d_kp
        self.d_ki = d_ki
        self.d_kd = d_kd
        self.minimum_distance = minimum_distance
        self.state = state
        self.integral_error = 0.0
        self.prev_error = 0.0
        self.distance_integral_error = 0.0
        self.driver_set_speed = 0.0
        self.safe_distance = 0.0
        self.target_speed = 0.0
        self.target_torque = 0.0
        self.gear_ratio = 11.8
        if report:
            print(self._parameter_report())

    def _parameter_report(self) -> str:
        """Return a multi-line summary of the loaded parameters."""
        lines = [
            "Loaded ACC Controller Parameters: ",
            f"Time Gap: {self.time_gap:g}",
            f"Time Gap Tolerance: {self.time_gap_tolerance:g}",
            f"Kp: {self.kp:g}",
            f"Ki: {self.ki:g}",
            f"Kd: {self.kd:g}",
            f"d_Kp: {self.d_kp:g}",
            f"d_Ki: {self.d_ki:g}",
            f"d_Kd: {self.d_kd:g}",
            f"PID Speed Control: {self.pid_speed_control:g}",
        ]
        return "\n".join(lines)

    @classmethod
    def from_gains_file(cls, path: str | PathLike[str] = "gains.csv") -> ACCController:
        """Build a controller in CRUISE mode from defaults overridden by a gains file."""
        settings = {
            "time_gap": 1.5,
            "time_gap_tolerance": 0.1,
            "pid_speed_control": 0.0,
            "kp": 100.0,
            "ki": 0.82,
            "kd": 0.0,
            "d_kp": 0.3,
            "d_ki": 0.01,
            "d_kd": 0.0,
            "minimum_distance": 0.0,
        }
        for key, value in load_parameters(path).items():
            name = _GAIN_KEYS.get(key)
            if name is not None:
                settings[name] = value
        minimum_distance = settings.pop("minimum_distance")
        return cls(
            **settings,
            minimum_distance=minimum_distance,
            state=VehicleState.CRUISE,
            report=False,
        )

    def run_acc(
        self,
        v_ego: float,
        driver_set_speed: float,
        driver_intended_axle_torque: float,
        acc_enable: bool,
        brake_pedal_percent: float,
        throttle_pedal_percent: float,
        ress_position: int,
        dt: float,
        v_lead: float,
        distance_to_lead: float,
        tau_max: float,
        max_deceleration: float,
    ) -> float:
        """Run one control cycle; return the torque request, or -1 when inactive."""
        if not self.feature_enable_precheck(
            v_ego,
            driver_set_speed,
            driver_intended_axle_torque,
            acc_enable,
            brake_pedal_percent,
            throttle_pedal_percent,
        ):
            return -1.0
        if ress_position != 0:
            driver_set_speed = self.process_ress_button(ress_position)
        lead_vehicle_present = distance_to_lead >= 0
        self.target_speed = self.calculate_target_speed(
            distance_to_lead,
            self.minimum_distance,
            v_ego,
            v_lead,
            driver_set_speed,
            lead_vehicle_present,
            dt,
        )
        self.target_torque = self.calculate_torque(self.target_speed, v_ego, tau_max, dt)
        return self.target_torque

    def process_ress_button(self, ress_position: int) -> float:
        """Return the set speed adjusted by the resume/set switch position.

        Positions 1 and -1 change the stored set speed by one; positions 2
        and -2 return a value five away without storing it.
        """
        if ress_position == 1:
            self.driver_set_speed += 1
            return self.driver_set_speed
        if ress_position == -1:
            self.driver_set_speed -= 1
            return self.driver_set_speed
        if ress_position == 2:
            return self.driver_set_speed + 5
        if ress_position == -2:
            return self.driver_set_speed - 5
        return self.driver_set_speed

    def feature_enable_precheck(
        self,
        v_ego: float,
        driver_set_speed: float,
        driver_intended_axle_torque: float,
        acc_enable: bool,
        brake_pedal_percent: float,
        throttle_pedal_percent: float,
    ) -> bool:
        """Return whether the controller may act this cycle."""
        if not acc_enable:
            return False
        if brake_pedal_percent > 5:
            return False
        if (
            throttle_pedal_percent > 5
            and driver_intended_axle_torque > self.target_torque * self.gear_ratio
        ):
            return False
        if v_ego < 8.8 and self.state is VehicleState.OFF:
            return False
        return True

    def calculate_target_speed(
        self,
        distance: float,
        minimum_distance: float,
        v_ego: float,
        lead_vehicle_speed: float,
        driver_set_speed: float,
        lead_vehicle_present: bool,
        dt: float,
    ) -> float:
        """Choose the speed to track given the gap to the lead vehicle."""
        if not lead_vehicle_present:
            return driver_set_speed
        relative_speed = lead_vehicle_speed - v_ego

        if distance < minimum_distance:
            return 0.0

        stop_time = (0.5 * v_ego * v_ego / 1.1) / v_ego if v_ego != 0 else math.nan
        time_gap = self.time_gap
        if time_gap < stop_time:
            print(f"Stop Time: {stop_time:g}")
            time_gap = stop_time

        safe_distance = minimum_distance + v_ego * time_gap
        self.safe_distance = safe_distance
        tolerance_distance = v_ego * self.time_gap_tolerance

        if distance > safe_distance and self.state is not VehicleState.FOLLOW:
            self.state = VehicleState.CRUISE
        elif distance > safe_distance + tolerance_distance:
            self.state = VehicleState.CRUISE
        elif (
            distance <= safe_distance + tolerance_distance
            or distance >= safe_distance - tolerance_distance
        ):
            self.state = VehicleState.FOLLOW
        else:
            self.state = VehicleState.STOP

        target_speed = driver_set_speed
        if self.state is VehicleState.FOLLOW:
            target_speed = lead_vehicle_speed
            if self.pid_speed_control >= 1:
                distance_error = distance - safe_distance
                derivative_error = relative_speed * dt
                self.distance_integral_error += distance_error * dt
                gain = (
                    distance_error * self.d_kp
                    + self.distance_integral_error * self.d_ki
                    + derivative_error * self.d_kd
                )
                target_speed = lead_vehicle_speed + gain
                if target_speed < lead_vehicle_speed:
                    target_speed = max(lead_vehicle_speed * 0.9, target_speed)
            if target_speed > driver_set_speed:
                target_speed = driver_set_speed
        elif self.state is VehicleState.STOP:
            target_speed = 0.0
        return target_speed

    def calculate_torque(self, target: float, actual: float, tau_max: float, dt: float) -> float:
        """PID torque toward ``target`` speed, clipped to ``[-tau_max, tau_max]``."""
        error = target - actual
        self.integral_error += error * dt
        derivative_error = (error - self.prev_error) / dt
        output = self.kp * error + self.ki * self.integral_error + self.kd * derivative_error
        output = max(-tau_max, output)
        output = min(tau_max, output)
        self.prev_error = error
        return output

    def calculate_torque_with_lead(
        self,
        target: float,
        actual: float,
        tau_max: float,
        dt: float,
        v_lead: float,
        distance_to_lead: float,
        minimum_distance: float,
        driver_set_speed: float,
        lead_vehicle_present: bool,
    ) -> float:
        """Pick the target speed from the lead vehicle, then compute the torque.

        The ``target`` argument is not used; the target speed is recomputed.
        """
        v_target = self.calculate_target_speed(
            distance_to_lead,
            minimum_distance,
            actual,
            v_lead,
            driver_set_speed,
            lead_vehicle_present,
            dt,
        )
        return self.calculate_torque(v_target, actual, tau_max, dt)