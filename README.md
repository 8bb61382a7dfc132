# hunterkit

Numerical integration and odometry tools for a car-like (Ackermann-steered)
mobile base. Pure Python, no dependencies.

## Modules

- `hunterkit.integrators`: fixed-step `RK2`, `RK4`, `Midpoint` and `RTAM4`,
  and the Dormand–Prince `DOPRI45` with an adaptive step driven by
  `AdaptiveSettings` (`abs_tol`, `rel_tol`, `safety_factor`). A system is
  any callable `system(x, xd, t)` that writes the derivative of state `x`
  into the list `xd`. `System` chains several such callables; add them with
  `System.add`.
- `hunterkit.derivative`: `derivative(x, y, xest=None)` estimates dy/dx from
  the last two or three samples of unequally spaced data;
  `derivative_vector(t, v)` and `DerivativeVector3` do the same for each
  component of a history of vectors.
- `hunterkit.vehicle`: `HunterParams` (track, wheelbase, wheel radius,
  transmission reduction, steering and speed limits), the rear-axle
  `BicycleKinematics` model with its `ControlInput` (`v`, `delta`), and
  `SystemPropagator`, which integrates a model with `RK4` under a constant
  control input.
- `hunterkit.messenger`: `HunterMessenger`, which turns robot state into
  `HunterStatus`, `Odometry` and `TransformStamped` records, integrates the
  pose with the bicycle model, converts between the inner-wheel and the
  central steering angle, and handles velocity commands.
  `quaternion_from_yaw` gives the `(x, y, z, w)` rotation about the z axis.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Integrating an ODE

```python
import math
from hunterkit.integrators import RK4

def decay(x, xd, t):
    xd[0] = -x[0]

x = [1.0]
t = 0.0
rk4 = RK4()
while t < 1.0 - 1e-12:
    t = rk4.step(decay, x, t, 0.01)

print(x[0], math.exp(-1.0))
```

`step` advances the state list in place and returns the new time.
`DOPRI45.step_adaptive(system, x, t, dt, settings)` repeats the step with a
smaller `dt` until the error estimate is within tolerance, and returns the
new time together with the step size to use next.

## Propagating the bicycle model

```python
from hunterkit.vehicle import ControlInput, SystemPropagator

propagator = SystemPropagator()
x, y, theta = propagator.propagate([0.0, 0.0, 0.0], ControlInput(1.0, 0.2), 0.0, 1.0, 0.01)
```

`propagate` steps while the time has not passed the end time, and raises
`ValueError` when the time step is not positive.

## Odometry

```python
from hunterkit.messenger import HunterMessenger

messenger = HunterMessenger(simulated_robot=True, on_odometry=print)
messenger.on_twist(0.5, 0.3)
linear, angular = messenger.current_motion_cmd_for_sim()
messenger.publish_sim_state(linear, angular, now=0.0)
print(messenger.pose)
```

Records are handed to the optional `on_status`, `on_odometry` and
`on_transform` callables; the transform is only emitted when `publish_tf`
is true. `publish_sim_state` integrates over `1 / sim_control_rate`
seconds. `publish_state` reads a robot's state and integrates over the time
since the previous call; its first call only records the time and returns
`None`. `on_reset_odometry(True)` or `reset_odometry()` puts the pose back
at the origin.

For a real robot, pass an object with `get_hunter_state()` returning a
`HunterState` and `set_motion_command(linear, angular, inner_angle)`. When
`simulated_robot` is false, `on_twist` forwards the command with the inner
wheel angle; without a robot it raises `RuntimeError`, as does
`publish_state`.

## What it does not do

hunterkit does not talk to the robot itself: there is no bus connection,
no message transport and no command-line program or control loop. Reading
the robot's state, sending commands and delivering the published records
are left to the objects and callables you give `HunterMessenger`.