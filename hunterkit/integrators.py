"""Fixed-step and adaptive ODE integrators over plain lists of floats.

A system is any callable ``system(x, xd, t)`` that writes the derivative of
the state ``x`` at time ``t`` into the preallocated list ``xd``.  Every
integrator updates the state list in place and returns the new time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, MutableSequence, Sequence, Tuple

State = MutableSequence[float]
SystemFunc = Callable[[Sequence[float], State, float], None]

__all__ = [
    "AdaptiveSettings",
    "System",
    "RK2",
    "RK4",
    "Midpoint",
    "RTAM4",
    "DOPRI45",
]


def _grow(buffer: List[float], n: int) -> None:
    """Pad ``buffer`` with zeros until it holds at least ``n`` values."""
    if len(buffer) < n:
        buffer.extend([0.0] * (n - len(buffer)))


@dataclass
class AdaptiveSettings:
    """Tolerances for adaptive stepping."""

    abs_tol: float = 1.0
    rel_tol: float = 1.0
    safety_factor: float = 0.9


@dataclass
class System:
    """A system built from several derivative functions, called in order."""

    functions: List[SystemFunc] = field(default_factory=list)

    def add(self, func: SystemFunc) -> None:
        self.functions.append(func)

    def __call__(self, x: Sequence[float], xd: State, t: float) -> None:
        for func in self.functions:
            func(x, xd, t)


class RK2:
    """Second order, two pass Runge-Kutta integrator."""

    def __init__(self) -> None:
        self.xd: List[float] = []
        self._x0: List[float] = []

    def step(self, system: SystemFunc, x: State, t: float, dt: float) -> float:
        t0 = t
        dt_2 = 0.5 * dt
        n = len(x)
        _grow(self.xd, n)
        xd = self.xd

        x0 = self._x0 = list(x)
        system(x0, xd, t)
        x[:] = [dt_2 * d + a for d, a in zip(xd, x0)]
        t += dt_2

        system(x, xd, t)
        x[:] = [dt * d + a for d, a in zip(xd, x0)]
        return t0 + dt


class RK4:
    """Fourth order, four pass Runge-Kutta integrator."""

    def __init__(self) -> None:
        self.xd: List[float] = []
        self._x0: List[float] = []
        self._xd_temp: List[float] = []

    def step(self, system: SystemFunc, x: State, t: float, dt: float) -> float:
        t0 = t
        dt_2 = 0.5 * dt
        dt_6 = dt / 6.0
        n = len(x)
        _grow(self.xd, n)
        _grow(self._xd_temp, n)
        xd, xd_temp = self.xd, self._xd_temp

        x0 = self._x0 = list(x)
        system(x0, xd, t)
        x[:] = [dt_2 * d + a for d, a in zip(xd, x0)]
        t += dt_2

        system(x, xd_temp, t)
        xd[:n] = [d + 2.0 * e for d, e in zip(xd[:n], xd_temp)]
        x[:] = [dt_2 * e + a for e, a in zip(xd_temp, x0)]

        system(x, xd_temp, t)
        xd[:n] = [d + 2.0 * e for d, e in zip(xd[:n], xd_temp)]
        x[:] = [dt * e + a for e, a in zip(xd_temp, x0)]
        t = t0 + dt

        system(x, xd_temp, t)
        x[:] = [dt_6 * (d + e) + a for d, e, a in zip(xd, xd_temp, x0)]
        return t


class Midpoint:
    """Modified Euler integrator averaging the new and the previous derivative."""

    def __init__(self) -> None:
        self._xd: List[float] = []
        self._xd_new: List[float] = []

    def step(self, system: SystemFunc, x: State, t: float, dt: float) -> float:
        n = len(x)
        _grow(self._xd, n)
        _grow(self._xd_new, n)

        system(x, self._xd_new, t)
        x[:] = [a + 0.5 * dt * (dn + dp) for a, dn, dp in zip(x, self._xd_new, self._xd)]
        self._xd = list(self._xd_new)
        return t + dt


class RTAM4:
    """Fourth order real-time Adams-Moulton predictor-corrector integrator."""

    _C0 = 297.0 / 384.0
    _C1 = -187.0 / 384.0
    _C2 = 107.0 / 384.0
    _C3 = -25.0 / 384.0

    _C4 = 36.0 / 30.0
    _C5 = -10.0 / 30.0
    _C6 = 5.0 / 30.0
    _C7 = -1.0 / 30.0

    def __init__(self) -> None:
        self._initialized = False
        self._initializer = RK4()
        self._x0: List[float] = []
        self._xd: List[float] = []
        self._xd0: List[float] = []
        self._xd_1: List[float] = []
        self._xd_2: List[float] = []
        self._xd_3: List[float] = []

    def step(self, system: SystemFunc, x: State, t: float, dt: float) -> float:
        # The start-up flag is never raised, so the RK4 pass runs on every step.
        if not self._initialized:
            t = self._initializer.step(system, x, t, dt)

        t0 = t
        n = len(x)
        for buffer in (self._xd, self._xd0, self._xd_1, self._xd_2, self._xd_3):
            _grow(buffer, n)
        xd = self._xd

        x0 = self._x0 = list(x)
        system(x0, xd, t)
        self._xd0 = list(xd)
        x[:] = [
            a + dt * (self._C0 * d + self._C1 * d1 + self._C2 * d2 + self._C3 * d3)
            for a, d, d1, d2, d3 in zip(x0, xd, self._xd_1, self._xd_2, self._xd_3)
        ]
        t += 0.5 * dt

        system(x, xd, t)
        x[:] = [
            a + dt * (self._C4 * d + self._C5 * d0 + self._C6 * d1 + self._C7 * d2)
            for a, d, d0, d1, d2 in zip(x0, xd, self._xd0, self._xd_1, self._xd_2)
        ]
        t = t0 + dt

        self._xd_3 = self._xd_2
        self._xd_2 = self._xd_1
        self._xd_1 = list(self._xd0)
        return t


class DOPRI45:
    """Dormand-Prince 4(5) Runge-Kutta integrator with optional adaptive stepping."""

    _C10 = 3.0 / 40.0
    _C11 = 9.0 / 40.0

    _C20 = 44.0 / 45.0
    _C21 = -56.0 / 15.0
    _C22 = 32.0 / 9.0

    _C30 = 19372.0 / 6561.0
    _C31 = -25360.0 / 2187.0
    _C32 = 64448.0 / 6561.0
    _C33 = -212.0 / 729.0

    _C40 = 9017.0 / 3168.0
    _C41 = -355.0 / 33.0
    _C42 = 46732.0 / 5247.0
    _C43 = 49.0 / 176.0
    _C44 = -5103.0 / 18656.0

    _C50 = 35.0 / 384.0
    _C52 = 500.0 / 1113.0
    _C53 = 125.0 / 192.0
    _C54 = -2187.0 / 6784.0
    _C55 = 11.0 / 84.0

    _E0 = 5179.0 / 57600.0
    _E2 = 7571.0 / 16695.0
    _E3 = 393.0 / 640.0
    _E4 = -92097.0 / 339200.0
    _E5 = 187.0 / 2100.0
    _E6 = 1.0 / 40.0

    def __init__(self) -> None:
        self._fsal_computed = False
        self._x0: List[float] = []
        self._xd0: List[float] = []
        self._xd_temp: List[float] = []
        self._xd2: List[float] = []
        self._xd3: List[float] = []
        self._xd4: List[float] = []
        self._xd6: List[float] = []

    def step(self, system: SystemFunc, x: State, t: float, dt: float) -> float:
        t0 = t
        dt_5 = 0.2 * dt
        n = len(x)
        for buffer in (self._xd0, self._xd_temp, self._xd2, self._xd3, self._xd4):
            _grow(buffer, n)
        xd0, xd1, xd2, xd3, xd4 = (
            self._xd0,
            self._xd_temp,
            self._xd2,
            self._xd3,
            self._xd4,
        )

        x0 = self._x0 = list(x)

        # Once an adaptive step has stored the last derivative, it is reused here.
        if not self._fsal_computed:
            system(x0, xd0, t)

        x[:] = [a + dt_5 * d0 for a, d0 in zip(x0, xd0)]
        t += dt_5

        system(x, xd1, t)
        x[:] = [
            a + dt * (self._C10 * d0 + self._C11 * d1)
            for a, d0, d1 in zip(x0, xd0, xd1)
        ]
        t = t0 + 0.3 * dt

        system(x, xd2, t)
        x[:] = [
            a + dt * (self._C20 * d0 + self._C21 * d1 + self._C22 * d2)
            for a, d0, d1, d2 in zip(x0, xd0, xd1, xd2)
        ]
        t = t0 + 0.8 * dt

        system(x, xd3, t)
        x[:] = [
            a + dt * (self._C30 * d0 + self._C31 * d1 + self._C32 * d2 + self._C33 * d3)
            for a, d0, d1, d2, d3 in zip(x0, xd0, xd1, xd2, xd3)
        ]
        t = t0 + (8.0 / 9.0) * dt

        system(x, xd4, t)
        x[:] = [
            a
            + dt
            * (
                self._C40 * d0
                + self._C41 * d1
                + self._C42 * d2
                + self._C43 * d3
                + self._C44 * d4
            )
            for a, d0, d1, d2, d3, d4 in zip(x0, xd0, xd1, xd2, xd3, xd4)
        ]
        t = t0 + dt

        # The fifth-stage derivative goes into the scratch buffer used for stage one.
        system(x, xd1, t)
        x[:] = [
            a
            + dt
            * (
                self._C50 * d0
                + self._C52 * d2
                + self._C53 * d3
                + self._C54 * d4
                + self._C55 * d5
            )
            for a, d0, d2, d3, d4, d5 in zip(x0, xd0, xd2, xd3, xd4, xd1)
        ]
        return t

    def step_adaptive(
        self,
        system: SystemFunc,
        x: State,
        t: float,
        dt: float,
        settings: AdaptiveSettings,
    ) -> Tuple[float, float]:
        """Take one accepted step; return the new time and the next time step."""
        abs_tol = settings.abs_tol
        rel_tol = settings.rel_tol
        t0 = t
        n = len(x)
        _grow(self._xd6, n)

        while True:
            t = self.step(system, x, t, dt)
            system(x, self._xd6, t)

            e_max = 0.0
            for a, xn, d0, d2, d3, d4, d5, d6 in zip(
                self._x0,
                x,
                self._xd0,
                self._xd2,
                self._xd3,
                self._xd4,
                self._xd_temp,
                self._xd6,
            ):
                error = abs(
                    a
                    + dt
                    * (
                        self._E0 * d0
                        + self._E2 * d2
                        + self._E3 * d3
                        + self._E4 * d4
                        + self._E5 * d5
                        + self._E6 * d6
                    )
                    - xn
                )
                e = error / (abs_tol + rel_tol * (abs(a) + 0.01 * abs(d0)))
                if e > e_max:
                    e_max = e

            if e_max > 1.0:
                dt *= max(0.9 * e_max ** (-1.0 / 3.0), 0.2)
                t = t0
                x[:] = self._x0
                continue
            break

        if e_max < 0.5:
            e_max = max(3.2e-4, e_max)
            dt *= 0.9 * e_max ** -0.2

        self._xd0 = list(self._xd6)
        self._fsal_computed = True
        return t, dt