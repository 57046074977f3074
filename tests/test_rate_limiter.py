from __future__ import annotations

from zigdex.domain.services.rate_limiter import MinIntervalGate


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


def test_gate_suppresses_within_interval_per_key():
    clock = FakeClock()
    gate = MinIntervalGate(min_interval_seconds=1.0, clock=clock)

    assert gate.try_acquire("1") is True
    assert gate.try_acquire("1") is False
    assert gate.try_acquire("2") is True

    clock.now += 0.5
    assert gate.try_acquire("1") is False

    clock.now += 0.6
    assert gate.try_acquire("1") is True


def test_gate_evicts_idle_keys():
    clock = FakeClock()
    gate = MinIntervalGate(min_interval_seconds=1.0, evict_after_intervals=5, clock=clock)
    gate.try_acquire("1")
    gate.try_acquire("2")

    clock.now += 10
    gate.try_acquire("3")

    assert len(gate) == 1


def test_gate_caps_tracked_keys():
    gate = MinIntervalGate(min_interval_seconds=60.0, max_keys=3, clock=FakeClock())
    for key in ("a", "b", "c", "d"):
        gate.try_acquire(key)

    assert len(gate) == 3
    assert gate.try_acquire("a") is True
    assert gate.try_acquire("d") is False
