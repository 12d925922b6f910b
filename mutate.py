# mutate.py
from __future__ import annotations

from typing import Tuple

from policies.lxcfs import LXCFS_POLICY, PolicyEntry, policy_mounts, policy_volumes
from workload import Workload


def apply_policy(workload: Workload, policy: Tuple[PolicyEntry, ...] = LXCFS_POLICY) -> Workload:
    """Append the policy mounts to every container and the policy volumes to the pod template.

    Existing mounts/volumes are left exactly where they are. Same-named entries are
    not deduplicated.
    """
    out = workload.copy()
    spec = out.body.setdefault("spec", {})
    template = spec.setdefault("template", {})
    pod_spec = template.setdefault("spec", {})

    for container in pod_spec.get("containers", []) or []:
        mounts = list(container.get("volumeMounts", []) or [])
        mounts.extend(policy_mounts(policy))
        container["volumeMounts"] = mounts

    volumes = list(pod_spec.get("volumes", []) or [])
    volumes.extend(policy_volumes(policy))
    pod_spec["volumes"] = volumes
    return out
