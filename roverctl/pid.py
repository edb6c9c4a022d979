"""Positional PID controller with integral and output limits."""

from __future__ import annotations


def _clamp(value: float, limit: float) -> float:
    if value > limit:
        return limit
    if value < -limit:
        return -limit
    return value


class PidController:
    """PID controller whose integral and output are each clamped to a symmetric limit.

    A target of exactly zero clears the integral before the update, so a
    stopped wheel does not keep pushing against an accumulated error.
    """

    def __init__(
        self,
        kp: float,
        ki: float,
        kd: float,
        max_output: float,
        max_integral: float,
    ) -> None:
        self.kp = kp
        self.ki = ki
        self.kd = kd
        self.max_output = max_output
        self.max_integral = max_integral
        self.error = 0.0
        self.last_error = 0.0
        self.integral = 0.0

    def calc(self, target: float, current: float) -> float:
        """Advance the controller one step and return the clamped output."""
        if target == 0.0:
            self.integral = 0.0
        self.error = target - current
        self.integral = _clamp(self.integral + self.error, self.max_integral)
        derivative = self.error - self.last_error
        self.last_error = self.error
        output = self.kp * self.error + self.ki * self.integral + self.kd * derivative
        return _clamp(output, self.max_output)

    def reset(self) -> None:
        """Forget the error history and the integral."""
        self.error = 0.0
        self.last_error = 0.0
        self.integral = 0.0