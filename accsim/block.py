"""Stateful block that turns sensor samples into an engine torque request."""

from __future__ import annotations

from dataclasses import dataclass, field

from .controller import ACCController


@dataclass
class ACCBlock:
    """Adaptive cruise control step function with persistent controller state.

    The controller is built once from the tuning values and keeps its PID
    state between calls to :meth:`output`.
    """

    kp: float
    kd: float
    ki: float
    pid_speed_control: float
    d_kp: float
    d_ki: float
    d_kd: float
    time_gap: float
    time_gap_tolerance: float
    minimum_distance: float
    dt: float
    controller: ACCController = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.controller = ACCController(
            self.time_gap,
            self.time_gap_tolerance,
            self.pid_speed_control,
            self.kp,
            self.ki,
            self.kd,
            self.d_kp,
            self.d_ki,
            self.d_kd,
        )

    def output(
        self,
        v_ego: float,
        driver_set_speed: float,
        v_lead: float,
        distance_to_lead: float,
        max_torque: float,
    ) -> float:
        """Return the engine torque request for one sample.

        A negative ``distance_to_lead`` means no lead vehicle is present.
        """
        lead_vehicle_present = distance_to_lead >= 0
        v_target = self.controller.calculate_target_speed(
            distance_to_lead,
            self.minimum_distance,
            v_ego,
            v_lead,
            driver_set_speed,
            lead_vehicle_present,
            self.dt,
        )
        return self.controller.calculate_torque(v_target, v_ego, max_torque, self.dt)