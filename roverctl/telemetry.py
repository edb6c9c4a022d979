"""Sensor telemetry: change-driven, rate-limited log records and the log save queue."""

from __future__ import annotations

from collections import deque
from collections.abc import Callable
from dataclasses import dataclass

IMU_CHANGE_THRESHOLD = 0.1
LIDAR_CHANGE_THRESHOLD = 0.02
VALID_EPSILON = 0.001
LOG_QUEUE_LEN = 10
LOG_STR_MAX_SIZE = 128
DEFAULT_INTERVAL_TICKS = 100
_TICK_MASK = 0xFFFFFFFF
_RECORD_FORMAT = "[%u] IMU:%.1f,%.1f,%.1f OF:%d,%d,%u LID:%.1f,%.1f,%.1f\n"


def _fit(text: str) -> str:
    return text[: LOG_STR_MAX_SIZE - 1]


@dataclass(frozen=True)
class Sample:
    """One snapshot of attitude (degrees), optical flow and lidar position."""

    roll: float = 0.0
    pitch: float = 0.0
    yaw: float = 0.0
    of_dx: int = 0
    of_dy: int = 0
    of_quality: int = 0
    lidar_x: float = 0.0
    lidar_y: float = 0.0
    lidar_z: float = 0.0

    @property
    def is_valid(self) -> bool:
        """False when every reading is still at its power-on zero."""
        return not (
            abs(self.roll) < VALID_EPSILON
            and abs(self.pitch) < VALID_EPSILON
            and abs(self.yaw) < VALID_EPSILON
            and abs(self.lidar_z) < VALID_EPSILON
            and self.of_quality == 0
        )

    def differs_from(self, other: Sample) -> bool:
        """True when any reading moved past its change threshold."""
        return (
            abs(self.roll - other.roll) > IMU_CHANGE_THRESHOLD
            or abs(self.pitch - other.pitch) > IMU_CHANGE_THRESHOLD
            or abs(self.yaw - other.yaw) > IMU_CHANGE_THRESHOLD
            or abs(self.lidar_x - other.lidar_x) > LIDAR_CHANGE_THRESHOLD
            or abs(self.lidar_y - other.lidar_y) > LIDAR_CHANGE_THRESHOLD
            or abs(self.lidar_z - other.lidar_z) > LIDAR_CHANGE_THRESHOLD
            or self.of_dx != other.of_dx
            or self.of_dy != other.of_dy
            or self.of_quality != other.of_quality
        )


def format_record(tick: int, sample: Sample) -> str:
    """Render one log line, cut to the size of a log slot."""
    text = _RECORD_FORMAT % (
        tick & _TICK_MASK,
        sample.roll,
        sample.pitch,
        sample.yaw,
        sample.of_dx,
        sample.of_dy,
        sample.of_quality,
        sample.lidar_x,
        sample.lidar_y,
        sample.lidar_z,
    )
    return _fit(text)


class ChangeLogger:
    """Emits a record only for valid samples that changed, at most once per interval."""

    def __init__(self, interval_ticks: int = DEFAULT_INTERVAL_TICKS) -> None:
        if interval_ticks < 0:
            raise ValueError("interval_ticks must not be negative")
        self.interval_ticks = interval_ticks
        self.last_sample = Sample()
        self.last_tick = 0

    def offer(self, sample: Sample, tick: int) -> str | None:
        """Consider a sample taken at ``tick``; return its record if it is to be logged."""
        if not sample.is_valid:
            return None
        if not sample.differs_from(self.last_sample):
            return None
        if (tick - self.last_tick) & _TICK_MASK < self.interval_ticks:
            return None
        self.last_tick = tick & _TICK_MASK
        self.last_sample = sample
        return format_record(self.last_tick, sample)


class LogQueue:
    """Bounded FIFO of log lines; a full queue drops new lines instead of blocking."""

    def __init__(self, maxlen: int = LOG_QUEUE_LEN) -> None:
        if maxlen <= 0:
            raise ValueError("maxlen must be positive")
        self.maxlen = maxlen
        self._items: deque[str] = deque()

    def put(self, text: str) -> bool:
        """Queue a line (cut to slot size); return False if it was dropped."""
        if len(self._items) >= self.maxlen:
            return False
        self._items.append(_fit(text))
        return True

    def get(self) -> str:
        """Remove and return the oldest line."""
        if not self._items:
            raise IndexError("log queue is empty")
        return self._items.popleft()

    def __len__(self) -> int:
        return len(self._items)

    def save_pending(self, save_line: Callable[[str], object]) -> int:
        """Hand every queued line to ``save_line`` in order; return how many."""
        count = 0
        while self._items:
            save_line(self._items.popleft())
            count += 1
        return count