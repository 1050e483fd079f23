"""Longitudinal and planar vehicle models."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass
class VehicleDynamics:
    """Point-mass longitudinal model with aerodynamic drag and rolling resistance."""

    r: float
    rho: float
    cd: float
    area: float
    cr: float
    m: float
    g: float

    def update(self, torque: float, v_actual: float, dt: float) -> float:
        """Return the speed after applying ``torque`` for ``dt`` seconds."""
        f_drive = torque / self.r
        f_drag = 0.5 * self.rho * self.cd * self.area * v_actual * v_actual
        f_rolling = self.cr * self.m * self.g
        a = (f_drive - f_drag - f_rolling) / self.m
        return v_actual + a * dt


@dataclass(frozen=True)
class VehicleState2D:
    """Position, heading and speed of a planar vehicle."""

    x: float = 0.0
    y: float = 0.0
    theta: float = 0.0
    v: float = 0.0


class VehicleModel:
    """Kinematic bicycle model integrated with a fixed time step."""

    def __init__(self, mass: float, wheelbase: float, dt: float) -> None:
        self.mass = mass
        self.wheelbase = wheelbase
        self.dt = dt
        self.x = 0.0
        self.y = 0.0
        self.theta = 0.0
        self.v = 0.0
        self.w = 0.0

    def update(self, force: float, delta: float) -> None:
        """Advance one step under longitudinal ``force`` and steering angle ``delta``."""
        a = force / self.mass
        self.v += a * self.dt
        yaw_rate = (self.v / self.wheelbase) * math.tan(delta)
        self.theta += yaw_rate * self.dt
        self.x += self.v * math.cos(self.theta) * self.dt
        self.y += self.v * math.sin(self.theta) * self.dt
        self.w = yaw_rate

    @property
    def state(self) -> VehicleState2D:
        """Current position, heading and speed."""
        return VehicleState2D(self.x, self.y, self.theta, self.v)

    def reset_state(self) -> None:
        """Put position, heading and speed back to zero."""
        self.x = 0.0
        self.y = 0.0
        self.theta = 0.0
        self.v = 0.0

    def set_state(self, x: float, y: float, theta: float, v: float) -> None:
        """Overwrite position, heading and speed."""
        self.x = x
        self.y = y
        self.theta = theta
        self.v = v