import threading

import pytest

from priority_gate_service.limiter.window import MIN_WAIT_S, WindowCounter


def test_window_rolls_once_period_has_elapsed() -> None:
    t = {"now": 100.0}
    window = WindowCounter(window_s=1.0, clock=lambda: t["now"])
    window.record_admission()
    window.record_admission()

    t["now"] = 100.5
    assert window.check_and_roll(t["now"]) is False
    assert window.admitted == 2

    t["now"] = 101.0
    assert window.check_and_roll(t["now"]) is True
    assert window.admitted == 0
    assert window.window_start == 101.0

    # Same instant again: nothing left to roll
    assert window.check_and_roll(t["now"]) is False


def test_time_to_roll_is_floored_at_one_millisecond() -> None:
    t = {"now": 0.0}
    window = WindowCounter(window_s=1.0, clock=lambda: t["now"])

    assert window.time_to_roll(0.25) == pytest.approx(0.75)
    assert window.time_to_roll(0.9999999) == MIN_WAIT_S
    assert window.time_to_roll(5.0) == MIN_WAIT_S


def test_remaining_capacity_goes_negative_when_throughput_lowered() -> None:
    window = WindowCounter(clock=lambda: 0.0)
    for _ in range(3):
        window.record_admission()

    assert window.remaining_capacity(5) == 2
    assert window.remaining_capacity(2) == -1


def test_concurrent_roll_is_applied_once() -> None:
    t = {"now": 0.0}
    window = WindowCounter(window_s=1.0, clock=lambda: t["now"])
    for _ in range(3):
        window.record_admission()
    t["now"] = 1.5

    lock = threading.Lock()
    barrier = threading.Barrier(8)
    rolled: list[bool] = []

    def worker() -> None:
        barrier.wait()
        with lock:
            rolled.append(window.check_and_roll(t["now"]))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for th in threads:
        th.start()
    for th in threads:
        th.join(timeout=2)

    assert rolled.count(True) == 1
    assert rolled.count(False) == 7
    assert window.admitted == 0


def test_window_length_must_be_positive() -> None:
    with pytest.raises(ValueError):
        WindowCounter(window_s=0)
