# tests/sim/test_kernel.py
from dataclasses import dataclass

import pytest

from campus_nav.sim.event import BaseEvent
from campus_nav.sim.hooks import NoopHooks
from campus_nav.sim.kernel import Kernel


# ---- demo domain events ----
@dataclass(order=True)
class Ping(BaseEvent):
    n: int = 0


@dataclass(order=True)
class Pong(BaseEvent):
    n: int = 0


# ---- demo handlers ----
def handle_ping(ev: Ping):
    out: list[BaseEvent] = [Pong(t=ev.t, n=ev.n)]
    if ev.n > 0:
        out.append(Ping(t=ev.t + 1.0, n=ev.n - 1))
    return out


# --- test hook that records dispatch order, times & late inputs ---
class TraceHooks(NoopHooks):
    def __init__(self):
        self.trace = []
        self.late = []

    def dispatch_start(self, ev, *, seq, qsize, handlers):
        self.trace.append((ev.t, type(ev).__name__))

    def late_input(self, ev, *, now, lag_s):
        self.late.append((type(ev).__name__, lag_s))


def test_fan_out_order():
    hooks = TraceHooks()
    k = Kernel(hooks=hooks)
    k.on(Ping, handle_ping)
    k.on(Pong, lambda ev: None)
    k.schedule(Ping(t=0.0, n=2))
    assert k.run(until=3.0) == 6
    assert [name for _, name in hooks.trace] == ["Ping", "Pong"] * 3
    assert [t for t, _ in hooks.trace] == [0.0, 0.0, 1.0, 1.0, 2.0, 2.0]


def test_fifo_tie_break():
    k = Kernel()
    seen: list[str] = []
    k.on(Ping, lambda ev: seen.append(f"A{ev.n}"))
    k.on(Ping, lambda ev: seen.append(f"B{ev.n}"))
    k.schedule(Ping(t=5.0, n=1))
    k.schedule(Ping(t=5.0, n=2))
    k.run()
    assert seen == ["A1", "B1", "A2", "B2"]


def test_max_events_gate():
    k = Kernel()
    k.on(Ping, handle_ping)
    k.schedule(Ping(t=0.0, n=10))
    assert k.run(max_events=1) == 1
    assert k.now == 0.0
    assert k.pending == 2


def test_late_input_runs_now_in_delivery_order():
    hooks = TraceHooks()
    k = Kernel(hooks=hooks)
    got = []
    k.on(Ping, lambda ev: got.append(ev.n))
    k.post(Ping(t=10.0, n=1))
    k.run()
    k.post(Ping(t=4.0, n=2))
    k.post(Ping(t=10.0, n=3))
    k.run()
    assert got == [1, 2, 3]
    assert k.now == 10.0
    assert hooks.late == [("Ping", 6.0)]


def test_follow_up_before_trigger_raises():
    k = Kernel()
    k.on(Ping, lambda ev: [Ping(t=ev.t - 1.0, n=0)])
    k.schedule(Ping(t=1.0, n=0))
    with pytest.raises(RuntimeError):
        k.run()
