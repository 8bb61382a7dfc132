[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hunterkit"
version = "0.1.0"
description = "ODE integrators, finite-difference derivatives and bicycle-model odometry for a car-like mobile base"
requires-python = ">=3.10"
dependencies = []
keywords = ["ode", "runge-kutta", "dormand-prince", "integration", "odometry", "bicycle-model", "robotics"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["hunterkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
