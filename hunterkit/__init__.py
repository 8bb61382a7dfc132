"""ODE integrators, finite-difference derivatives and bicycle-model odometry for a car-like base."""

__version__ = "0.1.0"
__all__ = [
    "derivative",
    "integrators",
    "messenger",
    "vehicle",
]