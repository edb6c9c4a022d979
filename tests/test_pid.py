import pytest
from hypothesis import given, strategies as st

from roverctl.pid import PidController

finite = st.floats(min_value=-1e6, max_value=1e6, allow_nan=False, allow_infinity=False)


def test_proportional_only():
    pid = PidController(2.0, 0.0, 0.0, 100.0, 100.0)
    assert pid.calc(10.0, 4.0) == 12.0


def test_output_is_clamped_both_ways():
    pid = PidController(10.0, 0.0, 0.0, 50.0, 100.0)
    assert pid.calc(100.0, 0.0) == 50.0
    assert pid.calc(-100.0, 0.0) == -50.0


def test_integral_is_clamped():
    pid = PidController(0.0, 1.0, 0.0, 1000.0, 5.0)
    for _ in range(10):
        out = pid.calc(3.0, 0.0)
    assert pid.integral == 5.0
    assert out == 5.0


def test_zero_target_clears_integral_each_step():
    pid = PidController(0.0, 1.0, 0.0, 1000.0, 1000.0)
    first = pid.calc(0.0, -3.0)
    second = pid.calc(0.0, -3.0)
    assert first == second == pytest.approx(3.0)


def test_nonzero_target_accumulates():
    pid = PidController(0.0, 1.0, 0.0, 1000.0, 1000.0)
    first = pid.calc(1.0, -2.0)
    second = pid.calc(1.0, -2.0)
    assert second > first


def test_derivative_responds_only_to_change():
    pid = PidController(0.0, 0.0, 1.0, 1000.0, 1000.0)
    assert pid.calc(5.0, 0.0) == 5.0
    assert pid.calc(5.0, 0.0) == 0.0


def test_reset_matches_fresh_controller():
    used = PidController(1.5, 0.1, 0.3, 1000.0, 500.0)
    for value in (10.0, -4.0, 7.0):
        used.calc(value, 1.0)
    used.reset()
    fresh = PidController(1.5, 0.1, 0.3, 1000.0, 500.0)
    assert used.calc(6.0, 2.0) == fresh.calc(6.0, 2.0)
    assert used.integral == fresh.integral


@given(st.lists(st.tuples(finite, finite), min_size=1, max_size=20))
def test_limits_always_hold(steps):
    pid = PidController(1.5, 0.1, 0.5, 200.0, 50.0)
    for target, current in steps:
        out = pid.calc(target, current)
        assert -200.0 <= out <= 200.0
        assert -50.0 <= pid.integral <= 50.0