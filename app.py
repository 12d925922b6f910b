# app.py
from __future__ import annotations

import signal
import threading

from config import ControllerConfig, load_config
from failure import FailurePolicy, build_failure_policy
from initializer import initialize
from k8s import DeploymentStore, load_kube
from observe.deployments import DeploymentSource
from observe.runtime import run_initializer_loop
from policies.lxcfs import LXCFS_POLICY
from workload import Workload

SHUTDOWN_GRACE_SECONDS = 10


def make_handler(cfg: ControllerConfig, store, failure_policy: FailurePolicy):
    """Bind config, store and failure policy into a per-event callable."""

    def handle(workload: Workload) -> bool:
        return failure_policy.run(workload, lambda: initialize(workload, cfg, store, LXCFS_POLICY))

    return handle


# ─────────────────────────────────────────────
# Main
# ─────────────────────────────────────────────
def main() -> int:
    try:
        cfg = load_config()
        failure_policy = build_failure_policy(cfg)
    except ValueError as e:
        print(f"[initializer] invalid configuration: {e}")
        return 1

    print("[initializer] starting the Kubernetes initializer...")
    print(f"[initializer] initializer name set to: {cfg.gate_name}")
    print(
        f"[initializer] annotation={cfg.annotation} require_annotation={cfg.require_annotation} "
        f"namespace={cfg.namespace or '<all>'} failure_policy={failure_policy.name}"
    )

    try:
        source_kind = load_kube()
        store = DeploymentStore()
    except Exception as e:
        print(f"[initializer] cannot build a client to the control plane: {e}")
        return 1
    print(f"[initializer] using {source_kind} config")

    source = DeploymentSource(store, namespace=cfg.namespace, resync_seconds=cfg.resync_seconds)
    handle = make_handler(cfg, store, failure_policy)

    stop_event = threading.Event()

    def _on_signal(signum, _frame) -> None:
        print(f"[initializer] shutdown signal received ({signal.Signals(signum).name}), exiting...")
        stop_event.set()

    signal.signal(signal.SIGINT, _on_signal)
    signal.signal(signal.SIGTERM, _on_signal)

    worker = threading.Thread(
        target=run_initializer_loop,
        args=(stop_event, source, handle),
        daemon=True,
    )
    worker.start()

    while not stop_event.wait(1.0):
        pass

    # Let an in-flight event finish; an idle watch is abandoned with the daemon thread.
    worker.join(timeout=SHUTDOWN_GRACE_SECONDS)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
