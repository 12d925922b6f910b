# gate.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from workload import Workload


@dataclass
class GateResult:
    ok: bool
    reason: str
    remaining: List[str] = field(default_factory=list)


def check_gate(workload: Workload, gate_name: str) -> GateResult:
    """Decide whether `gate_name` is the next pending initializer on `workload`.

    Only the head of the queue may act; anything behind it waits for the
    controllers ahead of it to finish.
    """
    pending = workload.pending_gates
    if not pending:
        return GateResult(ok=False, reason="no pending initializers")

    head = pending[0]
    if head != gate_name:
        return GateResult(ok=False, reason=f"waiting on {head}")

    return GateResult(ok=True, reason="own gate at head", remaining=pending[1:])


def remove_head_gate(workload: Workload) -> Workload:
    """Return a copy with the first pending initializer removed.

    When nothing is left the whole `metadata.initializers` attribute is dropped:
    an absent attribute means initialization is complete, an empty list does not.
    """
    out = workload.copy()
    meta = out.body.setdefault("metadata", {})
    initializers = meta.get("initializers") or {}
    pending = list(initializers.get("pending", []) or [])

    if len(pending) <= 1:
        meta.pop("initializers", None)
        return out

    initializers = dict(initializers)
    initializers["pending"] = pending[1:]
    meta["initializers"] = initializers
    return out
