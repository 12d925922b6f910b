#!/usr/bin/env python3
"""tools/render.py

Render the volumeMounts and volumes the initializer injects, as YAML.

Usage:
  python3 tools/render.py > /tmp/lxcfs.yaml
  python3 tools/render.py | head

Notes:
- This does NOT touch the cluster.
"""

from __future__ import annotations

import os
import sys

import yaml

# Allow executing from tools/ without installing as a package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from policies.lxcfs import LXCFS_POLICY, policy_mounts, policy_volumes  # noqa: E402


def render(policy=LXCFS_POLICY) -> str:
    doc = {
        "volumeMounts": policy_mounts(policy),
        "volumes": policy_volumes(policy),
    }
    return yaml.safe_dump(doc, sort_keys=False)


def main() -> int:
    try:
        sys.stdout.write(render())
    except BrokenPipeError:
        # Common when piping to `head`; exit cleanly
        return 0
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
