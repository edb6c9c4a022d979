"""Text shown on the monitor screens, with colour tags for a recolouring label."""

from __future__ import annotations

from collections.abc import Sequence

from roverctl.gamepad import GamepadState, button_names
from roverctl.wifi import WifiStatus

_MOTOR_TAGS = (
    "#FF0000 M1(FL):#",
    "#00FF00 M2(FR):#",
    "#0000FF M3(RL):#",
    "#FF00FF M4(RR):#",
)

_WIFI_TEXT = {
    WifiStatus.DISCONNECTED: "Status: Disconnected",
    WifiStatus.CONNECTING: "Status: Connecting...",
    WifiStatus.CONNECTED: "Status: Connected (Echo)",
    WifiStatus.ERROR: "Status: Error!",
}

GAMEPAD_DISCONNECTED = "#808080 [PS2 Gamepad Disconnected]#\nWaiting for USB..."


def _triple(values: Sequence[float], name: str) -> tuple[float, float, float]:
    if len(values) != 3:
        raise ValueError(f"{name} needs exactly three values")
    return values[0], values[1], values[2]


def format_attitude(roll: float, pitch: float, yaw: float) -> str:
    """Flight-controller attitude panel."""
    return "#FF0000 [FC Att]#\nRoll:  %.2f\nPitch: %.2f\nYaw:   %.2f" % (roll, pitch, yaw)


def format_flow(dx: int, dy: int, quality: int) -> str:
    """Optical-flow panel."""
    return "#0000FF [OptFlow]#\nDX: %d\nDY: %d\nQual: %u" % (dx, dy, quality)


def format_lidar(x: float, y: float, z: float) -> str:
    """Lidar panel: height first, then position."""
    return "#008000 [Lidar]#\nHeight: %.2f\nPos X:  %.2f\nPos Y:  %.2f" % (z, x, y)


def format_imu(
    euler: Sequence[float], accel: Sequence[float], gyro: Sequence[float]
) -> tuple[str, str, str]:
    """The three IMU panels: Euler angles, accelerometer and gyroscope."""
    e = _triple(euler, "euler")
    a = _triple(accel, "accel")
    g = _triple(gyro, "gyro")
    return (
        "#FF0000 [Euler Angles]#\nRoll:  %6.2f\nPitch: %6.2f\nYaw:   %6.2f" % e,
        "#00FF00 [Accelerometer (g)]#\nX: %6.3f\nY: %6.3f\nZ: %6.3f" % a,
        "#0000FF [Gyroscope (dps)]#\nX: %6.1f\nY: %6.1f\nZ: %6.1f" % g,
    )


def format_motors(rpm: Sequence[float], pulses: Sequence[int]) -> str:
    """One line per wheel with its speed and encoder total."""
    if len(rpm) != len(_MOTOR_TAGS) or len(pulses) != len(_MOTOR_TAGS):
        raise ValueError(f"need {len(_MOTOR_TAGS)} speeds and pulse counts")
    return "\n".join(
        "%s %6.1f RPS | Pulse: %d" % (tag, speed, count)
        for tag, speed, count in zip(_MOTOR_TAGS, rpm, pulses)
    )


def format_gamepad(state: GamepadState) -> str:
    """Gamepad panel: stick positions and pressed buttons, or a waiting notice."""
    if not state.connected:
        return GAMEPAD_DISCONNECTED
    names = button_names(int(state.buttons))
    pressed = "".join(f"{name} " for name in names) if int(state.buttons) else "None"
    return (
        "#00FFFF [PS2 Gamepad Connected]#\n"
        "L_Joy: X=%3d, Y=%3d\n"
        "R_Joy: X=%3d, Y=%3d\n"
        "#FFA500 Btn: %s#"
        % (state.left_x, state.left_y, state.right_x, state.right_y, pressed)
    )


def format_wifi_status(status: WifiStatus) -> str:
    """Status line of the WiFi page."""
    return _WIFI_TEXT[WifiStatus(status)]


def format_gain(value: float) -> str:
    """A PID gain with one decimal place."""
    return "%.1f" % value