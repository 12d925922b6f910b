# workload.py
from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass
class Workload:
    """A Deployment as served by the API server (camelCase manifest).

    `body` is the full object; the properties below are the only fields the
    initializer reads. Use `copy()` before changing anything.
    """

    namespace: str
    name: str
    body: Dict[str, Any]

    @classmethod
    def from_manifest(cls, raw: Any) -> "Workload":
        if not isinstance(raw, dict):
            raise ValueError(f"expected a manifest mapping, got {type(raw).__name__}")
        meta = raw.get("metadata") or {}
        if not isinstance(meta, dict) or not meta.get("name"):
            raise ValueError("manifest has no metadata.name")
        return cls(namespace=meta.get("namespace") or "default", name=meta["name"], body=raw)

    @property
    def metadata(self) -> Dict[str, Any]:
        return self.body.get("metadata", {}) or {}

    @property
    def pending_gates(self) -> Optional[List[str]]:
        """Pending initializer names in order, or None when the attribute is absent."""
        initializers = self.metadata.get("initializers")
        if initializers is None:
            return None
        return [str((p or {}).get("name", "")) for p in initializers.get("pending", []) or []]

    @property
    def annotations(self) -> Dict[str, str]:
        return self.metadata.get("annotations", {}) or {}

    @property
    def resource_version(self) -> Optional[str]:
        return self.metadata.get("resourceVersion")

    @property
    def pod_spec(self) -> Dict[str, Any]:
        return ((self.body.get("spec", {}) or {}).get("template", {}) or {}).get("spec", {}) or {}

    @property
    def containers(self) -> List[Dict[str, Any]]:
        return self.pod_spec.get("containers", []) or []

    @property
    def volumes(self) -> List[Dict[str, Any]]:
        return self.pod_spec.get("volumes", []) or []

    def copy(self) -> "Workload":
        return Workload(namespace=self.namespace, name=self.name, body=copy.deepcopy(self.body))

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"
