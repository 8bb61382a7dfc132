"""State publishing and command handling for the Hunter robot.

The messenger turns raw robot state into status and odometry messages,
integrates the pose with the bicycle model, and turns velocity commands into
steering commands.  Messages are handed to optional sink callables.
"""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol, Tuple

from hunterkit.vehicle import ControlInput, HunterParams, SystemPropagator

__all__ = [
    "MotorState",
    "DriverState",
    "HunterState",
    "HunterStatus",
    "Pose2D",
    "Odometry",
    "TransformStamped",
    "HunterMessenger",
    "quaternion_from_yaw",
]

Quaternion = Tuple[float, float, float, float]

_COVARIANCE: Tuple[float, ...] = (
    0.001, 0.0, 0.0, 0.0, 0.0, 0.0,
    0.0, 0.001, 0.0, 0.0, 0.0, 0.0,
    0.0, 0.0, 1000000.0, 0.0, 0.0, 0.0,
    0.0, 0.0, 0.0, 1000000.0, 0.0, 0.0,
    0.0, 0.0, 0.0, 0.0, 1000000.0, 0.0,
    0.0, 0.0, 0.0, 0.0, 0.0, 1000.0,
)  # fmt: skip


def quaternion_from_yaw(yaw: float) -> Quaternion:
    """Return the ``(x, y, z, w)`` quaternion of a rotation about the z axis."""
    half = 0.5 * yaw
    return (0.0, 0.0, math.sin(half), math.cos(half))


@dataclass
class MotorState:
    current: float = 0.0
    rpm: float = 0.0
    motor_pose: float = 0.0
    temperature: float = 0.0


@dataclass
class DriverState:
    driver_state: int = 0
    driver_voltage: float = 0.0
    driver_temperature: float = 0.0


def _three_motors() -> List[MotorState]:
    return [MotorState() for _ in range(3)]


def _three_drivers() -> List[DriverState]:
    return [DriverState() for _ in range(3)]


@dataclass
class HunterState:
    """State reported by the robot."""

    base_state: int = 0
    control_mode: int = 0
    park_mode: int = 0
    fault_code: int = 0
    battery_voltage: float = 0.0
    linear_velocity: float = 0.0
    steering_angle: float = 0.0
    motors: List[MotorState] = field(default_factory=_three_motors)
    drivers: List[DriverState] = field(default_factory=_three_drivers)


@dataclass
class HunterStatus:
    """Status message published for the robot."""

    stamp: float = 0.0
    linear_velocity: float = 0.0
    steering_angle: float = 0.0
    base_state: int = 0
    control_mode: int = 0
    park_mode: int = 0
    fault_code: int = 0
    battery_voltage: float = 0.0
    motor_states: List[MotorState] = field(default_factory=_three_motors)
    driver_states: List[DriverState] = field(default_factory=_three_drivers)


@dataclass(frozen=True)
class Pose2D:
    x: float = 0.0
    y: float = 0.0
    theta: float = 0.0


@dataclass(frozen=True)
class Odometry:
    stamp: float
    frame_id: str
    child_frame_id: str
    pose: Pose2D
    orientation: Quaternion
    linear_x: float
    linear_y: float
    angular_z: float
    pose_covariance: Tuple[float, ...] = _COVARIANCE
    twist_covariance: Tuple[float, ...] = _COVARIANCE


@dataclass(frozen=True)
class TransformStamped:
    stamp: float
    frame_id: str
    child_frame_id: str
    translation: Tuple[float, float, float]
    rotation: Quaternion


class Robot(Protocol):
    def get_hunter_state(self) -> HunterState: ...

    def set_motion_command(self, linear: float, angular: float, inner_angle: float) -> None: ...


class HunterMessenger:
    """Bridges the robot with status, odometry and transform consumers."""

    l: float = HunterParams.wheelbase
    w: float = HunterParams.track
    steer_angle_tolerance: float = 0.005  # about 0.287 degrees

    def __init__(
        self,
        robot: Optional[Robot] = None,
        *,
        odom_frame: str = "odom",
        base_frame: str = "base_link",
        simulated_robot: bool = False,
        sim_control_rate: int = 50,
        publish_tf: bool = True,
        on_status: Optional[Callable[[HunterStatus], None]] = None,
        on_odometry: Optional[Callable[[Odometry], None]] = None,
        on_transform: Optional[Callable[[TransformStamped], None]] = None,
    ) -> None:
        self.robot = robot
        self.odom_frame = odom_frame
        self.base_frame = base_frame
        self.simulated_robot = simulated_robot
        self.sim_control_rate = sim_control_rate
        self.publish_tf = publish_tf
        self.on_status = on_status
        self.on_odometry = on_odometry
        self.on_transform = on_transform

        self._twist_lock = threading.Lock()
        self._twist: Tuple[float, float] = (0.0, 0.0)

        self.linear_speed = 0.0
        self.steering_angle = 0.0
        self._x = 0.0
        self._y = 0.0
        self._theta = 0.0
        self._model = SystemPropagator()

        self._first_run = True
        self._last_time = 0.0
        self._current_time = 0.0

    @property
    def pose(self) -> Pose2D:
        return Pose2D(self._x, self._y, self._theta)

    def convert_inner_angle_to_central(self, angle: float) -> float:
        """Map the inner wheel's steering angle to the central steering angle."""
        if angle > self.steer_angle_tolerance:
            r = self.l / math.tan(angle) + self.w / 2
            return math.atan(self.l / r)
        if angle < -self.steer_angle_tolerance:
            r = self.l / math.tan(-angle) + self.w / 2
            return -math.atan(self.l / r)
        return 0.0

    def convert_central_angle_to_inner(self, angle: float) -> float:
        """Map the central steering angle to the inner wheel's steering angle."""
        if abs(angle) <= self.steer_angle_tolerance:
            return 0.0
        phi = abs(angle)
        phi_i = math.atan(
            2 * self.l * math.sin(phi)
            / (2 * self.l * math.cos(phi) - self.w * math.sin(phi))
        )
        return phi_i if angle > 0 else -phi_i

    def on_twist(self, linear: float, angular: float) -> None:
        """Handle a velocity command: forward it to the robot or keep it for simulation."""
        if not self.simulated_robot:
            if self.robot is None:
                raise RuntimeError("no robot to send the command to")
            inner = self.convert_central_angle_to_inner(angular)
            self.robot.set_motion_command(linear, angular, inner)
        else:
            with self._twist_lock:
                self._twist = (linear, angular)

    def on_reset_odometry(self, flag: bool) -> None:
        if flag:
            self.reset_odometry()

    def current_motion_cmd_for_sim(self) -> Tuple[float, float]:
        """Return the last ``(linear, angular)`` command kept for simulation."""
        with self._twist_lock:
            return self._twist

    def reset_odometry(self) -> None:
        self._x = 0.0
        self._y = 0.0
        self._theta = 0.0

    def publish_state(self, now: Optional[float] = None) -> Optional[HunterStatus]:
        """Publish the robot's status and odometry.

        The first call only records the time and returns None.
        """
        self._current_time = time.time() if now is None else now
        dt = self._current_time - self._last_time

        if self._first_run:
            self._last_time = self._current_time
            self._first_run = False
            return None

        if self.robot is None:
            raise RuntimeError("no robot to read the state from")
        state = self.robot.get_hunter_state()

        scale = 2 * math.pi / 60.0 / HunterParams.transmission_reduction_rate
        scale *= HunterParams.wheel_radius
        left_vel = -state.motors[2].rpm * scale
        right_vel = state.motors[1].rpm * scale

        status = HunterStatus(
            stamp=self._current_time,
            linear_velocity=(left_vel + right_vel) / 2.0,
            steering_angle=self.convert_inner_angle_to_central(state.steering_angle),
            base_state=state.base_state,
            control_mode=state.control_mode,
            park_mode=state.park_mode,
            fault_code=state.fault_code,
            battery_voltage=state.battery_voltage,
            motor_states=[
                MotorState(m.current, m.rpm, m.motor_pose, m.temperature)
                for m in state.motors[:3]
            ],
            driver_states=[
                DriverState(d.driver_state, d.driver_voltage, d.driver_temperature)
                for d in state.drivers[:3]
            ],
        )
        if self.on_status is not None:
            self.on_status(status)

        self.publish_odometry(state.linear_velocity, status.steering_angle, dt)
        self._last_time = self._current_time
        return status

    def publish_sim_state(
        self, linear: float, angular: float, now: Optional[float] = None
    ) -> HunterStatus:
        """Publish a simulated status and integrate the commanded motion."""
        self._current_time = time.time() if now is None else now
        dt = 1.0 / self.sim_control_rate

        status = HunterStatus(
            stamp=self._current_time,
            linear_velocity=linear,
            steering_angle=angular,
            base_state=0x00,
            control_mode=0x01,
            fault_code=0x00,
            battery_voltage=29.5,
        )
        if self.on_status is not None:
            self.on_status(status)

        self.publish_odometry(linear, angular, dt)
        return status

    def publish_odometry(
        self, linear: float, angular: float, dt: float, now: Optional[float] = None
    ) -> Odometry:
        """Integrate the pose over ``dt`` and publish odometry and the transform."""
        if now is not None:
            self._current_time = now
        self.linear_speed = linear
        self.steering_angle = angular

        self._x, self._y, self._theta = self._model.propagate(
            [self._x, self._y, self._theta],
            ControlInput(linear, angular),
            0.0,
            dt,
            dt / 100,
        )
        quat = quaternion_from_yaw(self._theta)

        if self.publish_tf and self.on_transform is not None:
            self.on_transform(
                TransformStamped(
                    stamp=self._current_time,
                    frame_id=self.odom_frame,
                    child_frame_id=self.base_frame,
                    translation=(self._x, self._y, 0.0),
                    rotation=quat,
                )
            )

        odom = Odometry(
            stamp=self._current_time,
            frame_id=self.odom_frame,
            child_frame_id=self.base_frame,
            pose=self.pose,
            orientation=quat,
            linear_x=linear,
            linear_y=0.0,
            angular_z=linear / self.l * math.tan(angular),
        )
        if self.on_odometry is not None:
            self.on_odometry(odom)
        return odom