import math

import pytest

from hunterkit.derivative import DerivativeVector3, derivative, derivative_vector


def test_too_few_samples_gives_zero():
    assert derivative([1.0], [5.0]) == 0.0
    assert derivative([], []) == 0.0
    assert derivative([0.0, 1.0, 2.0], [3.0], 1.0) == 0.0


def test_two_samples_gives_slope():
    assert derivative([1.0, 3.0], [2.0, 8.0]) == pytest.approx(3.0)


def test_two_y_samples_with_longer_x_uses_endpoints_of_x():
    # slope uses x.front and x.back, y.front and y.back
    result = derivative([0.0, 1.0, 4.0], [2.0, 10.0])
    assert result == pytest.approx((10.0 - 2.0) / (4.0 - 0.0))


@pytest.mark.parametrize("slope,offset", [(2.5, 1.0), (-1.5, 4.0), (0.0, 7.0)])
def test_linear_data_exact(slope, offset):
    xs = [0.0, 0.4, 1.3, 2.0]
    ys = [slope * x + offset for x in xs]
    assert derivative(xs, ys) == pytest.approx(slope)
    assert derivative(xs, ys, 0.7) == pytest.approx(slope)


@pytest.mark.parametrize("xest", [0.5, 1.7, 3.0])
def test_quadratic_data_exact_on_unequal_spacing(xest):
    xs = [0.0, 1.0, 3.0]
    ys = [x * x for x in xs]
    assert derivative(xs, ys, xest) == pytest.approx(2.0 * xest)


def test_default_evaluation_point_is_last_x():
    xs = [0.0, 0.5, 2.0, 2.5]
    ys = [math.sin(x) for x in xs]
    assert derivative(xs, ys) == pytest.approx(derivative(xs, ys, xs[-1]))


def test_only_last_three_points_are_used():
    xs = [0.0, 1.0, 2.0, 3.0]
    ys = [100.0, 1.0, 4.0, 9.0]
    assert derivative(xs, ys) == pytest.approx(derivative(xs[1:], ys[1:]))


def test_coincident_x_raises():
    with pytest.raises(ZeroDivisionError):
        derivative([1.0, 1.0], [0.0, 2.0])


def test_vector_single_sample_is_zero_of_right_size():
    assert derivative_vector([0.0], [[1.0, 2.0, 3.0]]) == [0.0, 0.0, 0.0]


def test_vector_empty_raises():
    with pytest.raises(ValueError):
        derivative_vector([0.0, 1.0], [])


def test_vector_two_samples():
    result = derivative_vector([0.0, 2.0], [[1.0, 0.0], [5.0, -4.0]])
    assert result == pytest.approx([2.0, -2.0])


def test_vector_linear_motion():
    velocity = [1.5, -0.5, 3.0]
    ts = [0.0, 0.3, 1.1, 1.6]
    vs = [[vel * t for vel in velocity] for t in ts]
    assert derivative_vector(ts, vs) == pytest.approx(velocity)


def test_vector_matches_scalar_per_component():
    ts = [0.0, 0.2, 0.9]
    vs = [[t * t, math.exp(t)] for t in ts]
    result = derivative_vector(ts, vs)
    assert result[0] == pytest.approx(derivative(ts, [v[0] for v in vs]))
    assert result[1] == pytest.approx(derivative(ts, [v[1] for v in vs]))


def test_vector3_short_history():
    d = DerivativeVector3()
    assert d([0.0], [[1.0, 2.0]]) == [0.0, 0.0]
    assert d([], []) == []
    assert d([0.0, 0.5], [[1.0, 1.0], [2.0, 0.0]]) == pytest.approx([2.0, -2.0])


def test_vector3_quadratic_and_history_kept():
    d = DerivativeVector3()
    ts = [0.0, 1.0, 3.0]
    vs = [[t * t, 2.0 * t] for t in ts]
    result = d(ts, vs)
    assert result == pytest.approx([2.0 * ts[-1], 2.0])
    assert d.dimensional_history == [[0.0, 1.0, 9.0], [0.0, 2.0, 6.0]]


def test_vector3_agrees_with_derivative_vector():
    ts = [0.0, 0.4, 0.7, 1.5]
    vs = [[math.cos(t), math.sin(t), t] for t in ts]
    assert DerivativeVector3()(ts, vs) == pytest.approx(derivative_vector(ts, vs))