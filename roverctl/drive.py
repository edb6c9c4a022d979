"""Differential-drive control: navigation state machine, gamepad driving,
acceleration limiting and per-wheel speed loops."""

from __future__ import annotations

import enum
import math
from collections.abc import Sequence

from roverctl.gamepad import GamepadState
from roverctl.pid import PidController

WHEELS = 4
PID_SAMPLE_TIME = 0.02
PULSES_PER_ROUND = 1040.0
MAX_MOTOR_RPM = 300.0
MAX_ACCEL_RPM_PS = 600.0
MAX_PWM = 1000.0
MIN_TURN_RPM = 45.0
PULSES_PER_MM = 6.897
DEG_PER_RAD = 57.29578
STOP_TOLERANCE_PULSES = 50
SPEED_FILTER_ALPHA = 0.3
STICK_CENTRE = 127.0
STICK_DEADBAND = (118, 138)


class NavState(enum.Enum):
    """Stages of a point-to-point navigation run."""

    IDLE = 0
    INIT = 1
    TURN = 2
    STRAIGHT = 3
    STOP = 4


def _clamp(value: float, limit: float) -> float:
    if value > limit:
        return limit
    if value < -limit:
        return -limit
    return value


def _effective_dt(dt: float) -> float:
    return dt if dt > 0.005 else PID_SAMPLE_TIME


def wrap_angle(angle: float) -> float:
    """Bring an angle in degrees into the range -180..180."""
    if not math.isfinite(angle):
        raise ValueError("angle must be finite")
    while angle > 180.0:
        angle -= 360.0
    while angle < -180.0:
        angle += 360.0
    return angle


def mix(forward: float, turn: float) -> tuple[float, float]:
    """Combine forward and turn speeds into clamped (left, right) wheel RPM."""
    left = _clamp(forward - turn, MAX_MOTOR_RPM)
    right = _clamp(forward + turn, MAX_MOTOR_RPM)
    return left, right


def gamepad_command(right_x: int, right_y: int) -> tuple[float, float]:
    """Map the right stick to (forward, turn) RPM, with a dead band round centre."""
    low, high = STICK_DEADBAND
    forward = 0.0
    turn = 0.0
    if right_y < low or right_y > high:
        forward = (STICK_CENTRE - right_y) / STICK_CENTRE * MAX_MOTOR_RPM
    if right_x < low or right_x > high:
        turn = (STICK_CENTRE - right_x) / STICK_CENTRE * MAX_MOTOR_RPM
    return forward, turn


class SlewLimiter:
    """Moves each channel toward its target by at most ``max_accel * dt`` per step."""

    def __init__(self, channels: int, max_accel: float) -> None:
        if channels <= 0:
            raise ValueError("channels must be positive")
        self.max_accel = max_accel
        self.current = [0.0] * channels

    def step(self, desired: Sequence[float], dt: float) -> list[float]:
        """Advance toward ``desired`` and return the new values."""
        if len(desired) != len(self.current):
            raise ValueError(
                f"expected {len(self.current)} values, got {len(desired)}"
            )
        max_step = self.max_accel * _effective_dt(dt)
        updated = []
        for value, target in zip(self.current, desired):
            if value < target:
                value = min(value + max_step, target)
            elif value > target:
                value = max(value - max_step, target)
            updated.append(value)
        self.current = updated
        return list(updated)


class WheelSpeedLoop:
    """Speed loop for one wheel: filtered encoder speed, feed-forward plus PID."""

    def __init__(self, kp: float, ki: float, kd: float) -> None:
        self.pid = PidController(kp, ki, kd, MAX_PWM, 500.0)
        self.filtered_rpm = 0.0
        self.total_pulses = 0

    @property
    def rps(self) -> float:
        return self.filtered_rpm / 60.0

    def update(self, target_rpm: float, delta_pulses: int, dt: float) -> int:
        """Take the latest encoder delta and return the PWM duty to apply."""
        dt = _effective_dt(dt)
        self.total_pulses += delta_pulses
        raw_rpm = delta_pulses / PULSES_PER_ROUND / dt * 60.0
        self.filtered_rpm = (
            SPEED_FILTER_ALPHA * raw_rpm + (1.0 - SPEED_FILTER_ALPHA) * self.filtered_rpm
        )
        feed_forward = target_rpm / MAX_MOTOR_RPM * MAX_PWM
        correction = self.pid.calc(target_rpm, self.filtered_rpm)
        return int(_clamp(feed_forward + correction, MAX_PWM))


class DriveController:
    """Chooses wheel speeds from the navigation state machine or the gamepad."""

    def __init__(self) -> None:
        self.state = NavState.IDLE
        self.yaw_pid = PidController(3.0, 0.02, 0.5, 150.0, 50.0)
        self.dist_pid = PidController(0.5, 0.0, 0.1, 200.0, 50.0)
        self.target_x = 0.0
        self.target_y = 0.0
        self.target_yaw = 0.0
        self.target_distance_pulses = 0
        self.start_totals = [0] * WHEELS
        self.start_requested = False

    def request_navigation(self, x: float, y: float) -> None:
        """Ask to drive to (x, y) cm, x to the right and y ahead; starts once idle."""
        self.target_x = x
        self.target_y = y
        self.start_requested = True

    def step(
        self,
        yaw: float,
        yaw_rate: float,
        encoder_totals: Sequence[int],
        gamepad: GamepadState | None = None,
    ) -> tuple[float, float, float, float]:
        """Run one control cycle and return desired RPM for the four wheels."""
        totals = list(encoder_totals)
        if len(totals) != WHEELS:
            raise ValueError(f"expected {WHEELS} encoder totals")

        if self.start_requested and self.state is NavState.IDLE:
            self.state = NavState.INIT
            self.start_requested = False

        forward = 0.0
        turn = 0.0
        if self.state is NavState.INIT:
            self._plan(yaw)
        elif self.state is NavState.TURN:
            turn = self._turn(yaw, yaw_rate, totals)
        elif self.state is NavState.STRAIGHT:
            forward, turn = self._straight(yaw, totals)
        elif self.state is NavState.STOP:
            self.state = NavState.IDLE
        elif gamepad is not None and gamepad.connected:
            forward, turn = gamepad_command(gamepad.right_x, gamepad.right_y)

        left, right = mix(forward, turn)
        return left, left, right, right

    def _plan(self, yaw: float) -> None:
        angle = math.atan2(self.target_x, self.target_y) * DEG_PER_RAD
        self.target_yaw = yaw - angle
        distance_mm = math.hypot(self.target_x, self.target_y) * 10.0
        self.target_distance_pulses = int(distance_mm * PULSES_PER_MM)
        self.state = NavState.TURN

    def _turn(self, yaw: float, yaw_rate: float, totals: list[int]) -> float:
        error = wrap_angle(self.target_yaw - yaw)
        turn = self.yaw_pid.calc(error, 0.0)
        if abs(error) > 2.0:
            if 0.0 < turn < MIN_TURN_RPM:
                turn = MIN_TURN_RPM
            elif -MIN_TURN_RPM < turn < 0.0:
                turn = -MIN_TURN_RPM
        if abs(error) < 2.5 and abs(yaw_rate) < 5.0:
            self.start_totals = list(totals)
            self.state = NavState.STRAIGHT
        return turn

    def _straight(self, yaw: float, totals: list[int]) -> tuple[float, float]:
        travelled = sum(abs(now - start) for now, start in zip(totals, self.start_totals))
        average = travelled // WHEELS
        remaining = self.target_distance_pulses - average
        forward = self.dist_pid.calc(float(self.target_distance_pulses), float(average))
        turn = self.yaw_pid.calc(wrap_angle(self.target_yaw - yaw), 0.0)
        if remaining < STOP_TOLERANCE_PULSES:
            self.state = NavState.STOP
        return forward, turn