"""Gamepad state and decoding of the USB HID report the receiver sends."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


class Button(enum.IntFlag):
    """Bits of the 16-bit button mask."""

    SELECT = 1 << 0
    MODE = 1 << 1
    R3 = 1 << 2
    START = 1 << 3
    UP = 1 << 4
    RIGHT = 1 << 5
    DOWN = 1 << 6
    LEFT = 1 << 7
    L2 = 1 << 8
    R2 = 1 << 9
    L1 = 1 << 10
    R1 = 1 << 11
    Y = 1 << 12
    B = 1 << 13
    A = 1 << 14
    X = 1 << 15


class UsbEvent(enum.Enum):
    """USB host events that matter to the gamepad link."""

    CONFIGURED = "configured"
    DETACH = "detach"
    READ_COMPLETE = "read_complete"


# (report byte, mask, button)
_BYTE_MAP = (
    (0, 0x10, Button.L1),
    (0, 0x20, Button.R1),
    (0, 0x40, Button.L2),
    (0, 0x80, Button.R2),
    (0, 0x01, Button.Y),
    (0, 0x02, Button.B),
    (0, 0x04, Button.A),
    (0, 0x08, Button.X),
    (1, 0x01, Button.SELECT),
    (1, 0x02, Button.START),
    (1, 0x10, Button.MODE),
)

_HAT = (
    Button.UP,
    Button.UP | Button.RIGHT,
    Button.RIGHT,
    Button.DOWN | Button.RIGHT,
    Button.DOWN,
    Button.DOWN | Button.LEFT,
    Button.LEFT,
    Button.UP | Button.LEFT,
)

# Order in which pressed buttons are listed for display.
_DISPLAY_ORDER = (
    Button.UP, Button.DOWN, Button.LEFT, Button.RIGHT,
    Button.Y, Button.A, Button.X, Button.B,
    Button.L1, Button.L2, Button.R1, Button.R2,
    Button.SELECT, Button.START, Button.MODE, Button.R3,
)

_REPORT_MIN = 7


def decode_buttons(report: bytes | bytearray) -> Button:
    """Decode the button mask from the first three bytes of a HID report."""
    if len(report) < 3:
        raise ValueError("report too short to hold button data")
    buttons = Button(0)
    for index, mask, button in _BYTE_MAP:
        if report[index] & mask:
            buttons |= button
    hat = report[2] & 0x0F
    if hat < len(_HAT):
        buttons |= _HAT[hat]
    return buttons


def button_names(buttons: int) -> list[str]:
    """Names of the pressed buttons, in display order."""
    mask = Button(buttons & 0xFFFF)
    return [button.name for button in _DISPLAY_ORDER if button in mask]


@dataclass
class GamepadState:
    """Stick positions (0..255, centre about 128), buttons and connection."""

    left_x: int = 128
    left_y: int = 128
    right_x: int = 128
    right_y: int = 128
    buttons: Button = field(default=Button(0))
    connected: bool = False


class GamepadLink:
    """Tracks the receiver's USB state and applies incoming reports."""

    def __init__(self) -> None:
        self.state = GamepadState()
        self.read_pending = False

    def handle_event(self, event: UsbEvent) -> None:
        """Update connection state from a USB host event."""
        if event is UsbEvent.CONFIGURED:
            self.state.connected = True
        elif event is UsbEvent.DETACH:
            self.state.connected = False
            self.read_pending = False
        elif event is UsbEvent.READ_COMPLETE:
            self.read_pending = True

    def apply_report(self, report: bytes | bytearray) -> GamepadState:
        """Decode a HID report into the state; ignored while disconnected."""
        if not self.state.connected:
            return self.state
        if len(report) < _REPORT_MIN:
            raise ValueError(f"report must hold at least {_REPORT_MIN} bytes")
        self.state.left_x = report[3]
        self.state.left_y = report[4]
        self.state.right_x = report[5]
        self.state.right_y = report[6]
        self.state.buttons = decode_buttons(report)
        self.read_pending = False
        return self.state