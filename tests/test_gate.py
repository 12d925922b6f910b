from __future__ import annotations

from gate import check_gate, remove_head_gate
from workload import Workload

SELF = "lxcfs.initializer.kubernetes.io"


def _deployment(pending=None) -> Workload:
    meta = {"name": "web", "namespace": "default"}
    if pending is not None:
        meta["initializers"] = {"pending": [{"name": n} for n in pending]}
    return Workload.from_manifest({"metadata": meta, "spec": {}})


def test_gate_skips_when_initializers_absent() -> None:
    res = check_gate(_deployment(), SELF)
    assert res.ok is False
    assert res.reason == "no pending initializers"


def test_gate_skips_when_pending_list_empty() -> None:
    res = check_gate(_deployment([]), SELF)
    assert res.ok is False


def test_gate_skips_when_other_initializer_is_head() -> None:
    res = check_gate(_deployment(["other.example.com", SELF]), SELF)
    assert res.ok is False
    assert "other.example.com" in res.reason


def test_gate_passes_when_own_name_is_head() -> None:
    res = check_gate(_deployment([SELF, "b", "c"]), SELF)
    assert res.ok is True
    assert res.remaining == ["b", "c"]


def test_remove_head_preserves_order_of_remainder() -> None:
    original = _deployment([SELF, "b", "c"])
    degated = remove_head_gate(original)

    assert degated.pending_gates == ["b", "c"]
    # the input is untouched
    assert original.pending_gates == [SELF, "b", "c"]


def test_remove_last_gate_clears_attribute() -> None:
    degated = remove_head_gate(_deployment([SELF]))

    assert "initializers" not in degated.body["metadata"]
    assert degated.pending_gates is None
