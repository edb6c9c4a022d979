"""Screen logic behind the touch GUI: page navigation, log paging,
navigation targets, PID tuning sliders and the WiFi console."""

from __future__ import annotations

import enum
from collections import deque
from collections.abc import Callable

from roverctl.views import format_gain, format_wifi_status
from roverctl.wifi import WifiStatus

LOG_PAGE_SIZE = 512
LOG_PAGE_STEP = LOG_PAGE_SIZE - 1
LOG_TOP_TEXT = "--- TOP OF LOG ---\nNo older logs available."
LOG_EMPTY_TEXT = "Log is empty."

NAV_X_RANGE = (-200, 200)
NAV_Y_RANGE = (0, 500)
NAV_IDLE_TEXT = "#00FF00 Status: IDLE#"
NAV_RUNNING_TEXT = "#FF0000 Status: NAVIGATING...#"

WIFI_READY_TEXT = "Status: Ready"
WIFI_LOG_START = "Log started...\n"
WIFI_CHARS_PER_TICK = 20

# Slider range in tenths of a unit for each gain.
GAIN_SLIDER_RANGES = {
    "kp": (0, 100),
    "ki": (0, 10),
    "kd": (0, 50),
}


def _clamp(value: int, bounds: tuple[int, int]) -> int:
    low, high = bounds
    return max(low, min(high, value))


class Page(enum.Enum):
    """Screens of the GUI."""

    MAIN = "main"
    MONITOR = "monitor"
    WIFI = "wifi"
    LOG = "log"
    MOTOR = "motor"
    IMU = "imu"
    NAV = "nav"


class Navigator:
    """Tracks the active screen; every sub-page returns to the main page."""

    def __init__(self) -> None:
        self.current = Page.MAIN

    def go(self, page: Page) -> Page:
        """Load ``page`` and return it."""
        self.current = Page(page)
        return self.current

    def back(self) -> Page:
        """Return to the main page."""
        self.current = Page.MAIN
        return self.current


class LogPager:
    """Pages backwards through the saved flight log.

    ``read_page(size, offset)`` returns up to ``size`` characters of log
    text, ``offset`` characters back from the newest end; an empty result
    means nothing is there.
    """

    def __init__(self, read_page: Callable[[int, int], str]) -> None:
        self._read_page = read_page
        self.offset = 0
        self.text = ""

    def enter(self) -> str:
        """Open the log at its newest page."""
        self.offset = 0
        return self.show()

    def older(self) -> str:
        """Step one page back in time."""
        self.offset += LOG_PAGE_STEP
        return self.show()

    def newer(self) -> str:
        """Step one page forward in time, stopping at the newest page."""
        self.offset = max(self.offset - LOG_PAGE_STEP, 0)
        return self.show()

    def show(self) -> str:
        """Read the page at the current offset and return the text to display."""
        page = self._read_page(LOG_PAGE_SIZE, self.offset) or ""
        page = page[:LOG_PAGE_SIZE - 1]
        if page:
            self.text = page
        elif self.offset > 0:
            self.text = LOG_TOP_TEXT
        else:
            self.text = LOG_EMPTY_TEXT
        return self.text


class NavPanel:
    """Target sliders and start button of the navigation page (centimetres)."""

    def __init__(self) -> None:
        self.target_x = 0.0
        self.target_y = 0.0
        self.start_requested = False
        self.x_label = "X: 0 cm"
        self.y_label = "Y: 0 cm"
        self.status = NAV_IDLE_TEXT

    def set_x(self, value: int) -> str:
        """Move the X slider; return its label."""
        position = _clamp(int(value), NAV_X_RANGE)
        self.target_x = float(position)
        self.x_label = f"X: {position} cm"
        return self.x_label

    def set_y(self, value: int) -> str:
        """Move the Y slider; return its label."""
        position = _clamp(int(value), NAV_Y_RANGE)
        self.target_y = float(position)
        self.y_label = f"Y: {position} cm"
        return self.y_label

    def start(self) -> tuple[float, float]:
        """Request a navigation run to the current target and return it."""
        self.start_requested = True
        self.status = NAV_RUNNING_TEXT
        return self.target_x, self.target_y


class PidTuner:
    """Sliders for the wheel-speed PID gains, each in steps of 0.1."""

    def __init__(self, kp: float, ki: float, kd: float) -> None:
        self.gains = {"kp": float(kp), "ki": float(ki), "kd": float(kd)}
        self.labels = {name: format_gain(value) for name, value in self.gains.items()}

    @property
    def kp(self) -> float:
        return self.gains["kp"]

    @property
    def ki(self) -> float:
        return self.gains["ki"]

    @property
    def kd(self) -> float:
        return self.gains["kd"]

    def set_slider(self, name: str, value: int) -> str:
        """Move the slider for gain ``name``; return the gain's label."""
        if name not in GAIN_SLIDER_RANGES:
            raise KeyError(f"unknown gain {name!r}")
        position = _clamp(int(value), GAIN_SLIDER_RANGES[name])
        self.gains[name] = position / 10.0
        self.labels[name] = format_gain(self.gains[name])
        return self.labels[name]

    def slider_positions(self) -> dict[str, int]:
        """Slider positions that show the current gains."""
        return {
            name: _clamp(int(self.gains[name] * 10), bounds)
            for name, bounds in GAIN_SLIDER_RANGES.items()
        }


class WifiConsole:
    """WiFi page: connect button, status line and a log fed one byte at a time."""

    def __init__(self) -> None:
        self.status = WifiStatus.DISCONNECTED
        self.status_text = WIFI_READY_TEXT
        self.log = WIFI_LOG_START
        self.connect_requested = False
        self._pending: deque[int] = deque()

    def connect_pressed(self, status: WifiStatus) -> bool:
        """Handle the connect button; return True if a connection was requested."""
        self.status = WifiStatus(status)
        if self.status in (WifiStatus.DISCONNECTED, WifiStatus.ERROR):
            self.log = ""
            self.connect_requested = True
            return True
        return False

    def push(self, data: bytes | bytearray | str) -> None:
        """Queue received bytes for display."""
        if isinstance(data, str):
            data = data.encode("latin-1")
        self._pending.extend(bytes(data))

    @property
    def pending(self) -> int:
        return len(self._pending)

    def tick(self) -> str:
        """Refresh the status line and move a few queued bytes into the log.

        Returns the text appended to the log on this refresh.
        """
        self.status_text = format_wifi_status(self.status)
        added = []
        for _ in range(WIFI_CHARS_PER_TICK):
            if not self._pending:
                break
            byte = self._pending.popleft()
            if byte:
                added.append(chr(byte))
        text = "".join(added)
        self.log += text
        return text