"""Rover control logic: PID and drive loops, navigation, gamepad decoding, Wi-Fi commands, telemetry and screen text."""

__version__ = "0.1.0"