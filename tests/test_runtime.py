from __future__ import annotations

import threading

from observe.runtime import run_initializer_loop
from workload import Workload


def _workload(name: str) -> Workload:
    return Workload.from_manifest({"metadata": {"name": name, "namespace": "shop"}})


class _ListSource:
    def __init__(self, names):
        self.names = names
        self.streams = 0

    def stream(self, stop_event):
        self.streams += 1
        for n in self.names:
            yield _workload(n)
        # stream ends only on shutdown
        stop_event.set()


def test_loop_handles_events_in_order_until_stream_ends() -> None:
    stop = threading.Event()
    source = _ListSource(["a", "b", "c"])
    seen: list[str] = []

    run_initializer_loop(stop, source, lambda w: seen.append(w.name))

    assert seen == ["a", "b", "c"]
    assert source.streams == 1


def test_loop_stops_accepting_events_after_stop() -> None:
    stop = threading.Event()
    seen: list[str] = []

    def handle(w: Workload) -> None:
        seen.append(w.name)
        if w.name == "b":
            stop.set()

    run_initializer_loop(stop, _ListSource(["a", "b", "c"]), handle)

    assert seen == ["a", "b"]


def test_loop_does_not_start_when_already_stopped() -> None:
    stop = threading.Event()
    stop.set()
    source = _ListSource(["a"])

    run_initializer_loop(stop, source, lambda w: None)

    assert source.streams == 0
