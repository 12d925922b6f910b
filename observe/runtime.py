# observe/runtime.py
from __future__ import annotations

import threading
from typing import Callable

from workload import Workload


def run_initializer_loop(
    stop_event: threading.Event,
    source,
    handle: Callable[[Workload], object],
) -> None:
    """
    Background loop that feeds gated Deployments to `handle`, strictly one at a time.
    `source.stream(stop_event)` yields Workloads; `handle` must not raise.
    """
    print("[initializer] starting event loop")

    while not stop_event.is_set():
        try:
            for workload in source.stream(stop_event):
                if stop_event.is_set():
                    break
                handle(workload)
        except Exception as e:
            print(f"[source] error: {e}")
            stop_event.wait(2)

    print("[initializer] event loop stopped")
