#!/usr/bin/env python3
"""Plan-only runner: prints what the initializer would write without applying changes.

Usage:
  NAMESPACE=default INITIALIZER_NAME=lxcfs.initializer.kubernetes.io python3 tools/plan.py

Notes:
- Uses your local kubeconfig (same behavior as app.py).
- Does not patch/update any objects.
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure project root is on sys.path when running as a script
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config import load_config  # noqa: E402
from initializer import plan_initialization  # noqa: E402
from patch import encode_patch  # noqa: E402
from policies.lxcfs import LXCFS_POLICY  # noqa: E402
from k8s import DeploymentStore, load_kube  # noqa: E402
from observe.deployments import DeploymentSource  # noqa: E402


def main() -> int:
    cfg = load_config()
    print(f"[plan] using {load_kube()} config")

    source = DeploymentSource(DeploymentStore(), namespace=cfg.namespace)
    workloads, _ = source.list_gated()

    counts = {"skip": 0, "degate": 0, "mutate": 0}
    for workload in workloads:
        result = plan_initialization(workload, cfg)
        counts[result.action] += 1
        print(f"[plan] {workload}: {result.action} ({result.reason})")
        if result.action == "mutate":
            before = len(workload.volumes)
            print(f"  volumes: {before} -> {before + len(LXCFS_POLICY)}")
            print(f"  patch: {encode_patch(result.patch).decode()}")
        if result.action != "skip":
            print(f"  pending after write: {result.remaining or '<none>'}")

    print(f"[plan] skip={counts['skip']} degate={counts['degate']} mutate={counts['mutate']}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
