# initializer.py
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Tuple

from annotation import should_mutate
from config import ControllerConfig
from gate import check_gate, remove_head_gate
from mutate import apply_policy
from patch import create_two_way_merge_patch, encode_patch
from policies.lxcfs import LXCFS_POLICY, PolicyEntry
from workload import Workload

Action = Literal["skip", "degate", "mutate"]


@dataclass
class InitResult:
    """What the initializer decided for one Deployment.

    skip   -> nothing is written
    degate -> `body` (full object, own gate removed) goes through store.update
    mutate -> `patch` (strategic merge patch) goes through store.patch

    `remaining` lists the initializers still pending after ours is removed.
    """

    action: Action
    reason: str
    patch: Optional[Dict[str, Any]] = None
    body: Optional[Dict[str, Any]] = None
    remaining: List[str] = field(default_factory=list)


def plan_initialization(
    workload: Workload,
    cfg: ControllerConfig,
    policy: Tuple[PolicyEntry, ...] = LXCFS_POLICY,
) -> InitResult:
    """Compute what initialize() *would* write, without touching the cluster."""
    gate = check_gate(workload, cfg.gate_name)
    if not gate.ok:
        return InitResult(action="skip", reason=gate.reason)

    # The gate is satisfied as soon as we see it, whether or not we mutate.
    degated = remove_head_gate(workload)

    if not should_mutate(degated, cfg.require_annotation, cfg.annotation):
        return InitResult(
            action="degate",
            reason=f"required '{cfg.annotation}' annotation missing; skipping lxcfs injection",
            body=degated.body,
            remaining=gate.remaining,
        )

    mutated = apply_policy(degated, policy)
    patch = create_two_way_merge_patch(workload.body, mutated.body)
    return InitResult(
        action="mutate",
        reason=f"injecting lxcfs mounts into {len(workload.containers)} container(s)",
        patch=patch,
        remaining=gate.remaining,
    )


def initialize(
    workload: Workload,
    cfg: ControllerConfig,
    store,
    policy: Tuple[PolicyEntry, ...] = LXCFS_POLICY,
) -> InitResult:
    """Run the gate/annotation/mutation/patch pipeline and submit the result once.

    `store` needs patch(namespace, name, patch) and update(namespace, name, body).
    Errors from planning or from the store propagate unchanged.
    """
    result = plan_initialization(workload, cfg, policy)

    if result.action == "skip":
        if os.environ.get("INITIALIZER_DEBUG", "0") == "1":
            print(f"[initializer] skip {workload}: {result.reason}")
        return result

    print(f"[initializer] initializing deployment: {workload}")
    if result.action == "degate":
        print(f"[initializer] {result.reason}")
        print(f"[initializer] updating {workload} at resourceVersion {workload.resource_version}")
        store.update(workload.namespace, workload.name, result.body)
    else:
        # fails with PatchError before anything is sent if the patch cannot be serialized
        size = len(encode_patch(result.patch))
        print(f"[initializer] {result.reason}; patch is {size} bytes")
        store.patch(workload.namespace, workload.name, result.patch)
    return result
