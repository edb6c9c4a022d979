"""WiFi link: connection status, socket report parsing and the navigation command."""

from __future__ import annotations

import enum
import math
import re
import struct
from dataclasses import dataclass

HEADER = b"+SKTRPT="
MAX_PAYLOAD = 1023
_HEADER_WINDOW = 250
_ACK_LIMIT = 63
_MASK32 = 0xFFFFFFFF


class WifiStatus(enum.IntEnum):
    """Connection state shared between the GUI and the WiFi task."""

    DISCONNECTED = 0
    CONNECTING = 1
    CONNECTED = 2
    ERROR = 3


@dataclass(frozen=True)
class Packet:
    """One block of data received on a socket."""

    socket: int
    payload: bytes


@dataclass(frozen=True)
class Reply:
    """What to send back for a payload, and the navigation target it carried."""

    data: bytes
    target: tuple[float, float] | None = None


_SPACE = r"[ \t\n\v\f\r]*"
_FLOAT = (
    r"[+-]?(?:\d+\.?\d*(?:[eE][+-]?\d+)?"
    r"|\.\d+(?:[eE][+-]?\d+)?"
    r"|(?i:inf(?:inity)?|nan))"
)
_NAV = re.compile(rf"NAV:{_SPACE}({_FLOAT}),{_SPACE}({_FLOAT})")


def _as_float32(value: float) -> float:
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def parse_nav_command(payload: bytes) -> tuple[float, float] | None:
    """Read an ``NAV:x,y`` command; return (x, y) or None if it is not one."""
    text = bytes(payload).split(b"\0", 1)[0].decode("latin-1")
    match = _NAV.match(text)
    if match is None:
        return None
    return _as_float32(float(match.group(1))), _as_float32(float(match.group(2)))


def handle_payload(payload: bytes) -> Reply:
    """Acknowledge a navigation command, or echo anything else back."""
    target = parse_nav_command(payload)
    if target is None:
        return Reply(bytes(payload))
    x, y = target
    ack = f"ACK_NAV:{x:.1f},{y:.1f}\r\n".encode("ascii")
    return Reply(ack[:_ACK_LIMIT], target)


def _digits(buffer: bytearray) -> int:
    digits = bytes(b for b in buffer if 0x30 <= b <= 0x39)
    return int(digits) & _MASK32 if digits else 0


class _Stage(enum.Enum):
    HEADER = 0
    SOCKET = 1
    LENGTH = 2
    SEPARATOR = 3
    PAYLOAD = 4


class SocketReportParser:
    """Byte-wise parser for ``+SKTRPT=<socket>,<len>,...\\n...\\n<data>`` reports."""

    def __init__(self) -> None:
        self._stage = _Stage.HEADER
        self._buffer = bytearray()
        self._socket = 0
        self._length = 0
        self._newlines = 0
        self._payload = bytearray()

    def _restart(self) -> None:
        self._stage = _Stage.HEADER
        self._buffer.clear()
        self._socket = 0
        self._length = 0

    def feed(self, byte: int) -> Packet | None:
        """Consume one byte; return a Packet when one is complete."""
        if not 0 <= byte <= 0xFF:
            raise ValueError("byte must be in 0..255")

        if self._stage is _Stage.HEADER:
            self._buffer.append(byte)
            if HEADER in self._buffer.split(b"\0", 1)[0]:
                self._stage = _Stage.SOCKET
                self._buffer.clear()
            elif len(self._buffer) >= _HEADER_WINDOW:
                self._buffer.clear()
        elif self._stage is _Stage.SOCKET:
            if byte == ord(","):
                self._socket = _digits(self._buffer)
                self._buffer.clear()
                self._stage = _Stage.LENGTH
            else:
                self._buffer.append(byte)
        elif self._stage is _Stage.LENGTH:
            if byte == ord(","):
                self._length = min(_digits(self._buffer), MAX_PAYLOAD)
                self._buffer.clear()
                self._newlines = 0
                self._stage = _Stage.SEPARATOR
            else:
                self._buffer.append(byte)
        elif self._stage is _Stage.SEPARATOR:
            if byte == ord("\n"):
                self._newlines += 1
            if self._newlines >= 2:
                self._payload.clear()
                self._stage = _Stage.PAYLOAD
        else:
            if len(self._payload) < self._length:
                self._payload.append(byte)
            if len(self._payload) >= self._length:
                packet = Packet(self._socket, bytes(self._payload))
                self._restart()
                return packet
        return None

    def feed_bytes(self, data: bytes) -> list[Packet]:
        """Consume a run of bytes and return every packet completed by it."""
        return [packet for packet in map(self.feed, bytes(data)) if packet is not None]