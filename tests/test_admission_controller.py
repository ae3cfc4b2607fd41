from priority_gate_service.limiter.admission import AdmissionController
from priority_gate_service.limiter.registry import PriorityRegistry
from priority_gate_service.limiter.window import WindowCounter

BASELINE = 1


def _controller() -> tuple[WindowCounter, PriorityRegistry, AdmissionController]:
    window = WindowCounter(window_s=1.0, clock=lambda: 0.0)
    registry = PriorityRegistry()
    return window, registry, AdmissionController(window, registry, BASELINE)


def test_higher_priority_takes_the_last_slot() -> None:
    window, registry, controller = _controller()
    window.record_admission()  # 1 of 2 used

    low = registry.insert(BASELINE)
    high = registry.insert(5)

    assert controller.try_admit(low, 2) is False
    assert controller.try_admit(high, 2) is True
    assert controller.try_admit(low, 2) is False

    assert window.admitted == 2
    assert registry.priorities() == [BASELINE]


def test_baseline_callers_admitted_in_arrival_order() -> None:
    window, registry, controller = _controller()
    tickets = [registry.insert(BASELINE) for _ in range(4)]

    # Fourth in line is outside the three free slots
    assert controller.try_admit(tickets[3], 3) is False

    assert controller.try_admit(tickets[2], 3) is True
    assert controller.try_admit(tickets[0], 3) is True
    assert controller.try_admit(tickets[3], 3) is False
    assert controller.try_admit(tickets[1], 3) is True

    assert window.admitted == 3
    assert controller.try_admit(tickets[3], 3) is False
    assert tickets[3] in registry


def test_denial_leaves_state_untouched() -> None:
    window, registry, controller = _controller()
    for _ in range(3):
        window.record_admission()
    ticket = registry.insert(9)

    # Throughput lowered below the admitted count
    assert controller.try_admit(ticket, 2) is False
    assert window.admitted == 3
    assert ticket in registry


def test_zero_throughput_admits_nothing() -> None:
    window, registry, controller = _controller()
    ticket = registry.insert(BASELINE)

    assert controller.try_admit(ticket, 0) is False
    assert window.admitted == 0


def test_duplicate_priority_admits_earliest_arrival_and_removes_its_own_entry() -> None:
    window, registry, controller = _controller()
    first = registry.insert(5)
    second = registry.insert(5)

    assert controller.try_admit(second, 1) is False
    assert controller.try_admit(first, 1) is True

    assert first not in registry
    assert second in registry
    assert window.admitted == 1


def test_low_priority_waits_while_higher_ones_fill_the_window() -> None:
    window, registry, controller = _controller()
    low = registry.insert(BASELINE)
    mid = registry.insert(3)
    high = registry.insert(7)

    assert controller.try_admit(low, 2) is False
    assert controller.try_admit(mid, 2) is True
    assert controller.try_admit(low, 2) is False
    assert controller.try_admit(high, 2) is True
    assert window.admitted == 2
    assert registry.priorities() == [BASELINE]
