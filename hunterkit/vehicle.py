"""Geometry of the Hunter platform and its rear-wheel bicycle model.

The bicycle kinematics are

    dx/dt     = v * cos(theta)
    dy/dt     = v * sin(theta)
    dtheta/dt = v / L * tan(delta)

with state ``(x, y, theta)`` and control input ``(v, delta)``: the velocity
and the steering angle of the front wheel.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Final, List, MutableSequence, Optional, Sequence

from hunterkit.integrators import RK4

__all__ = [
    "HunterParams",
    "ControlInput",
    "BicycleKinematics",
    "SystemPropagator",
]


class HunterParams:
    """Physical parameters of the Hunter robot (lengths in metres, angles in radians)."""

    track: Final[float] = 0.576  # distance between left and right wheels
    wheelbase: Final[float] = 0.648  # distance between front and rear wheels
    wheel_radius: Final[float] = 0.165
    transmission_reduction_rate: Final[float] = 30.0  # 1:30

    max_steer_angle: Final[float] = 0.582  # 0.75 for the inner wheel
    max_steer_angle_central: Final[float] = 0.576
    max_linear_speed: Final[float] = 1.5  # m/s


@dataclass(frozen=True)
class ControlInput:
    """Velocity ``v`` and front-wheel steering angle ``delta``."""

    v: float = 0.0
    delta: float = 0.0


class BicycleKinematics:
    """Derivative function of the bicycle model under a fixed control input."""

    L: Final[float] = HunterParams.wheelbase

    def __init__(self, u: ControlInput = ControlInput()) -> None:
        self.u = u

    def __call__(
        self, x: Sequence[float], xd: MutableSequence[float], t: float
    ) -> None:
        v, delta = self.u.v, self.u.delta
        xd[0] = v * math.cos(x[2])
        xd[1] = v * math.sin(x[2])
        xd[2] = v / self.L * math.tan(delta)


class SystemPropagator:
    """Integrates a system model under a constant control input with RK4."""

    def __init__(
        self,
        model: Callable[[ControlInput], Callable[..., None]] = BicycleKinematics,
    ) -> None:
        self.model = model
        self._integrator = RK4()

    def propagate(
        self,
        init_state: Sequence[float],
        u: ControlInput,
        t0: float,
        tf: float,
        dt: float,
    ) -> List[float]:
        """Step from ``t0`` while the time has not passed ``tf``; return the state.

        Raises ValueError when ``dt`` cannot advance time towards ``tf``.
        """
        if dt <= 0.0 and t0 <= tf:
            raise ValueError("time step must be positive")
        system = self.model(u)
        x = list(init_state)
        t = t0
        while t <= tf:
            t = self._integrator.step(system, x, t, dt)
        return x


def _optional_float(value: Optional[float], default: float) -> float:
    return default if value is None else value