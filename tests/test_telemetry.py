import re

import pytest
from hypothesis import given
from hypothesis import strategies as st

from roverctl.telemetry import (
    LOG_STR_MAX_SIZE,
    ChangeLogger,
    LogQueue,
    Sample,
    format_record,
)

RECORD = re.compile(
    r"^\[(\d+)\] IMU:(-?[\d.]+),(-?[\d.]+),(-?[\d.]+) "
    r"OF:(-?\d+),(-?\d+),(\d+) LID:(-?[\d.]+),(-?[\d.]+),(-?[\d.]+)\n$"
)

VALID = Sample(roll=10.0, pitch=-5.0, yaw=90.0, of_dx=3, of_dy=-4, of_quality=200,
               lidar_x=1.5, lidar_y=2.5, lidar_z=0.8)

floats = st.floats(min_value=-1000, max_value=1000, allow_nan=False)


def test_record_starts_with_tick_and_ends_with_newline():
    text = format_record(1234, VALID)
    assert text.startswith("[1234] IMU:")
    assert text.endswith("\n")


@given(
    tick=st.integers(min_value=0, max_value=2**32 - 1),
    roll=floats, pitch=floats, yaw=floats,
    dx=st.integers(-32768, 32767), dy=st.integers(-32768, 32767),
    qual=st.integers(0, 255),
    lx=floats, ly=floats, lz=floats,
)
def test_record_round_trip(tick, roll, pitch, yaw, dx, dy, qual, lx, ly, lz):
    sample = Sample(roll, pitch, yaw, dx, dy, qual, lx, ly, lz)
    match = RECORD.match(format_record(tick, sample))
    assert match is not None
    assert int(match.group(1)) == tick
    parsed = [float(match.group(i)) for i in (2, 3, 4, 8, 9, 10)]
    for got, want in zip(parsed, (roll, pitch, yaw, lx, ly, lz)):
        assert abs(got - want) <= 0.051
    assert (int(match.group(5)), int(match.group(6)), int(match.group(7))) == (dx, dy, qual)


def test_record_is_cut_to_slot_size():
    huge = Sample(1e30, 1e30, 1e30, 1, 1, 1, 1e30, 1e30, 1e30)
    text = format_record(1, huge)
    assert len(text) == LOG_STR_MAX_SIZE - 1
    assert not text.endswith("\n")


def test_tick_wraps_to_32_bits():
    assert format_record(2**32 + 7, VALID).startswith("[7] ")


def test_all_zero_sample_is_invalid():
    assert Sample().is_valid is False
    assert ChangeLogger(100).offer(Sample(), 500) is None


def test_quality_alone_makes_sample_valid():
    assert Sample(of_quality=1).is_valid is True


def test_logs_valid_changed_sample_after_interval():
    logger = ChangeLogger(100)
    assert logger.offer(VALID, 100) == format_record(100, VALID)
    assert logger.last_tick == 100
    assert logger.last_sample == VALID


def test_waits_for_interval():
    logger = ChangeLogger(100)
    assert logger.offer(VALID, 50) is None
    assert logger.offer(VALID, 150) == format_record(150, VALID)
    moved = Sample(roll=20.0, of_quality=5)
    assert logger.offer(moved, 249) is None
    assert logger.offer(moved, 250) == format_record(250, moved)


def test_unchanged_sample_is_not_logged_again():
    logger = ChangeLogger(100)
    logger.offer(VALID, 100)
    assert logger.offer(VALID, 1000) is None


def test_small_change_below_threshold_is_ignored():
    logger = ChangeLogger(100)
    logger.offer(VALID, 100)
    nudged = Sample(roll=VALID.roll + 0.05, pitch=VALID.pitch, yaw=VALID.yaw,
                    of_dx=VALID.of_dx, of_dy=VALID.of_dy, of_quality=VALID.of_quality,
                    lidar_x=VALID.lidar_x + 0.01, lidar_y=VALID.lidar_y,
                    lidar_z=VALID.lidar_z)
    assert logger.offer(nudged, 1000) is None


def test_flow_change_is_always_a_change():
    other = Sample(roll=VALID.roll, pitch=VALID.pitch, yaw=VALID.yaw,
                   of_dx=VALID.of_dx + 1, of_dy=VALID.of_dy, of_quality=VALID.of_quality,
                   lidar_x=VALID.lidar_x, lidar_y=VALID.lidar_y, lidar_z=VALID.lidar_z)
    assert other.differs_from(VALID) is True
    assert VALID.differs_from(VALID) is False


def test_interval_survives_tick_wrap():
    logger = ChangeLogger(100)
    logger.offer(VALID, 2**32 - 10)
    moved = Sample(yaw=45.0, of_quality=9)
    assert logger.offer(moved, 50) is None
    assert logger.offer(moved, 90) == format_record(90, moved)


def test_negative_interval_rejected():
    with pytest.raises(ValueError):
        ChangeLogger(-1)


def test_queue_is_fifo_and_drops_when_full():
    queue = LogQueue(3)
    assert [queue.put(t) for t in ("a", "b", "c", "d")] == [True, True, True, False]
    assert len(queue) == 3
    assert [queue.get() for _ in range(3)] == ["a", "b", "c"]
    assert len(queue) == 0


def test_empty_queue_get_raises():
    with pytest.raises(IndexError):
        LogQueue(2).get()


def test_queue_truncates_lines():
    queue = LogQueue(1)
    queue.put("x" * 500)
    assert queue.get() == "x" * (LOG_STR_MAX_SIZE - 1)


def test_save_pending_drains_in_order():
    queue = LogQueue()
    lines = [format_record(t, VALID) for t in (100, 200, 300)]
    for line in lines:
        queue.put(line)
    saved = []
    assert queue.save_pending(saved.append) == 3
    assert saved == lines
    assert len(queue) == 0
    assert queue.save_pending(saved.append) == 0


def test_default_queue_depth():
    queue = LogQueue()
    accepted = sum(queue.put("line") for _ in range(20))
    assert accepted == queue.maxlen == 10


def test_invalid_queue_size():
    with pytest.raises(ValueError):
        LogQueue(0)