"""Numerical derivatives of sampled data over unequally spaced points.

The derivative is estimated from the last two or three samples, which makes
it suited to histories recorded during a simulation.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

__all__ = [
    "derivative",
    "derivative_vector",
    "DerivativeVector3",
]


def derivative(
    x: Sequence[float], y: Sequence[float], xest: Optional[float] = None
) -> float:
    """Estimate dy/dx at ``xest`` from the last samples of ``x`` and ``y``.

    With fewer than two samples in either sequence the result is 0.0.  With
    exactly two samples in either, the slope between the first and last
    points is returned.  Otherwise the derivative of the parabola through the
    last three points of each sequence is evaluated at ``xest``, which
    defaults to the last value of ``x``.  The sequences need not have the
    same length.
    """
    nx = len(x)
    ny = len(y)
    if nx < 2 or ny < 2:
        return 0.0
    if nx == 2 or ny == 2:
        return (y[-1] - y[0]) / (x[-1] - x[0])

    if xest is None:
        xest = x[-1]

    x0, x1, x2 = x[-3], x[-2], x[-1]
    y0, y1, y2 = y[-3], y[-2], y[-1]

    return (
        y0 * (2.0 * xest - x1 - x2) / ((x0 - x1) * (x0 - x2))
        + y1 * (2.0 * xest - x0 - x2) / ((x1 - x0) * (x1 - x2))
        + y2 * (2.0 * xest - x0 - x1) / ((x2 - x0) * (x2 - x1))
    )


def _dimensions(v: Sequence[Sequence[float]]) -> int:
    if not v:
        raise ValueError("no vectors to take the derivative of")
    return len(v[0])


def _three_point_history(
    v: Sequence[Sequence[float]], n: int, dimensions: int
) -> List[List[float]]:
    """Per dimension, the values of the three vectors ending at index ``n - 1``."""
    recent = v[n - 3 : n]
    return [[vec[i] for vec in recent] for i in range(dimensions)]


def derivative_vector(
    t: Sequence[float], v: Sequence[Sequence[float]]
) -> List[float]:
    """Estimate the time derivative of each component of a vector history.

    ``t`` holds the sample times and ``v`` the vectors, oldest first.  Only
    the first ``min(len(t), len(v))`` entries of ``v`` are considered.
    """
    n = min(len(t), len(v))
    dimensions = _dimensions(v)
    if n < 2:
        return [0.0] * dimensions
    if n == 2:
        span = t[1] - t[0]
        return [(b - a) / span for a, b in zip(v[0][:dimensions], v[1][:dimensions])]

    history = _three_point_history(v, n, dimensions)
    return [derivative(t, column) for column in history]


class DerivativeVector3:
    """Three-point derivative of a vector history, keeping its work buffer."""

    def __init__(self) -> None:
        self.dimensional_history: List[List[float]] = []

    def __call__(
        self, t: Sequence[float], v: Sequence[Sequence[float]]
    ) -> List[float]:
        """Return the derivative of each component over the latest samples."""
        n = min(len(t), len(v))
        if n < 2:
            return [0.0] * (len(v[0]) if v else 0)
        if n == 2:
            span = t[1] - t[0]
            return [(b - a) / span for a, b in zip(v[0], v[1])]

        dimensions = len(v[0])
        self.dimensional_history = _three_point_history(v, n, dimensions)
        return [derivative(t, column) for column in self.dimensional_history]