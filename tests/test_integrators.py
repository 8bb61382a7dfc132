import math

import pytest

from hunterkit.integrators import (
    DOPRI45,
    RK2,
    RK4,
    RTAM4,
    AdaptiveSettings,
    Midpoint,
    System,
)


def growth(x, xd, t):
    xd[0] = x[0]


def constant_rate(rate):
    def func(x, xd, t):
        xd[0] = rate

    return func


def cubic_rate(x, xd, t):
    xd[0] = 3.0 * t * t


def rotation(x, xd, t):
    xd[0] = -x[1]
    xd[1] = x[0]


def zero(x, xd, t):
    for i in range(len(x)):
        xd[i] = 0.0


def integrate(integrator, system, x, t_end, steps):
    dt = t_end / steps
    t = 0.0
    for _ in range(steps):
        t = integrator.step(system, x, t, dt)
    return t


def final_value(integrator, system, start, t_end, steps):
    dt = t_end / steps
    x = [start]
    t = 0.0
    for _ in range(steps):
        t = integrator.step(system, x, t, dt)
    return x[0]


def test_system_calls_functions_in_order():
    system = System()
    system.add(lambda x, xd, t: xd.__setitem__(0, x[0]))
    system.add(lambda x, xd, t: xd.__setitem__(0, xd[0] * 2.0))
    xd = [0.0]
    system([3.0], xd, 0.0)
    assert xd == [6.0]
    assert len(system.functions) == 2


def test_rk2_constant_derivative_is_exact():
    x = [1.0]
    t = integrate(RK2(), constant_rate(2.0), x, 1.0, 10)
    assert t == pytest.approx(1.0)
    assert x[0] == pytest.approx(1.0 + 2.0 * 1.0)


def test_rk2_is_second_order():
    coarse = final_value(RK2(), growth, 1.0, 1.0, 20)
    fine = final_value(RK2(), growth, 1.0, 1.0, 40)
    assert 3.0 < abs(coarse - math.e) / abs(fine - math.e) < 5.0


def test_rk4_cubic_is_exact():
    x = [0.0]
    t = integrate(RK4(), cubic_rate, x, 1.0, 4)
    assert x[0] == pytest.approx(t**3, abs=1e-12)


def test_rk4_exponential():
    x = [1.0]
    t = integrate(RK4(), growth, x, 1.0, 100)
    assert t == pytest.approx(1.0)
    assert x[0] == pytest.approx(math.exp(t), rel=1e-8)


def test_rk4_is_fourth_order():
    coarse = final_value(RK4(), growth, 1.0, 1.0, 10)
    fine = final_value(RK4(), growth, 1.0, 1.0, 20)
    assert abs(coarse - math.e) / abs(fine - math.e) > 12.0


def test_rk4_handles_growing_state():
    integrator = RK4()
    small = [1.0]
    integrator.step(growth, small, 0.0, 0.1)
    big = [1.0, 0.0]
    t = 0.0
    for _ in range(100):
        t = integrator.step(rotation, big, t, 0.01)
    assert big[0] == pytest.approx(math.cos(t), abs=1e-9)
    assert big[1] == pytest.approx(math.sin(t), abs=1e-9)
    assert small[0] == pytest.approx(math.exp(0.1), rel=1e-6)


def test_midpoint_averages_with_previous_derivative():
    rate, dt = 2.0, 0.1
    integrator = Midpoint()
    x = [0.0]
    t = integrator.step(constant_rate(rate), x, 0.0, dt)
    assert x[0] == pytest.approx(0.5 * rate * dt)
    t = integrator.step(constant_rate(rate), x, t, dt)
    assert x[0] == pytest.approx(1.5 * rate * dt)
    assert t == pytest.approx(2 * dt)


def test_rtam4_zero_system_keeps_state():
    integrator = RTAM4()
    x = [1.5, -2.5]
    t = integrator.step(zero, x, 0.0, 0.1)
    assert x == [1.5, -2.5]
    # the start-up RK4 pass advances time before the predictor-corrector pass
    assert t == pytest.approx(2 * 0.1)


def test_rtam4_grows_with_positive_rate():
    integrator = RTAM4()
    x = [0.0]
    t = 0.0
    values = []
    for _ in range(5):
        t = integrator.step(constant_rate(1.0), x, t, 0.1)
        values.append(x[0])
    assert all(b > a for a, b in zip(values, values[1:]))
    assert values[0] > 0.0


def test_dopri45_single_step_accuracy():
    x = [1.0]
    t = DOPRI45().step(growth, x, 0.0, 0.1)
    assert t == pytest.approx(0.1)
    assert x[0] == pytest.approx(math.exp(0.1), rel=1e-8)


def test_dopri45_fixed_steps_rotation_preserves_radius():
    x = [1.0, 0.0]
    integrator = DOPRI45()
    t = integrate(integrator, rotation, x, 2.0, 50)
    assert math.hypot(x[0], x[1]) == pytest.approx(1.0, abs=1e-9)
    assert x[0] == pytest.approx(math.cos(t), abs=1e-9)


def test_dopri45_adaptive_shrinks_step_under_tight_tolerance():
    x = [1.0]
    settings = AdaptiveSettings(abs_tol=1e-10, rel_tol=1e-10)
    t, dt = DOPRI45().step_adaptive(growth, x, 0.0, 1.0, settings)
    assert dt < 1.0
    assert 0.0 < t < 1.0
    assert x[0] == pytest.approx(math.exp(t), rel=1e-8)


def test_dopri45_adaptive_grows_step_with_default_tolerance():
    x = [1.0]
    t, dt = DOPRI45().step_adaptive(growth, x, 0.0, 0.001, AdaptiveSettings())
    assert t == pytest.approx(0.001)
    assert dt == pytest.approx(0.001 * 0.9 * 3.2e-4**-0.2)


def test_dopri45_adaptive_run_tracks_solution():
    x = [1.0]
    integrator = DOPRI45()
    settings = AdaptiveSettings(abs_tol=1e-8, rel_tol=1e-8)
    t, dt = 0.0, 0.01
    while t < 2.0:
        t, dt = integrator.step_adaptive(growth, x, t, dt, settings)
    assert x[0] == pytest.approx(math.exp(t), rel=1e-6)