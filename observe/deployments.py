# observe/deployments.py
from __future__ import annotations

import os
import threading
from typing import Iterable, Iterator, List, Optional, Tuple

from kubernetes import watch
from kubernetes.client.exceptions import ApiException

from workload import Workload

HTTP_GONE = 410


def gated_workloads(items: Iterable[dict]) -> Iterator[Workload]:
    """Decode raw manifests and keep only those still carrying a pending initializer."""
    for raw in items:
        try:
            workload = Workload.from_manifest(raw)
        except ValueError as e:
            print(f"[source] skipping undecodable object: {e}")
            continue
        if workload.pending_gates:
            yield workload


class DeploymentSource:
    """Initial listing plus a watch of Deployment creations, one event at a time.

    Only ADDED events are consumed. The watch is re-opened every `resync_seconds`
    from the last seen resourceVersion; an expired version (410 Gone) triggers a
    fresh listing.
    """

    def __init__(self, store, namespace: Optional[str] = None, resync_seconds: int = 30):
        self.store = store
        self.namespace = namespace
        self.resync_seconds = resync_seconds
        self.debug = os.environ.get("INITIALIZER_DEBUG", "0") == "1"

    def list_gated(self) -> Tuple[List[Workload], Optional[str]]:
        res = self.store.list(self.namespace)
        items = res.get("items", []) or []
        rv = (res.get("metadata", {}) or {}).get("resourceVersion")
        workloads = list(gated_workloads(items))
        print(f"[source] listed {len(items)} deployments, {len(workloads)} pending initialization")
        return workloads, rv

    def _watch(self, w: watch.Watch, resource_version: Optional[str]):
        kwargs = {
            "namespace": self.namespace,
            "serialize": False,
            "include_uninitialized": True,
            "timeout_seconds": self.resync_seconds,
        }
        if resource_version:
            kwargs["resource_version"] = resource_version
        return w.stream(self.store.deployments.get, **kwargs)

    def stream(self, stop_event: threading.Event) -> Iterator[Workload]:
        workloads, rv = self.list_gated()
        for workload in workloads:
            if stop_event.is_set():
                return
            yield workload

        while not stop_event.is_set():
            w = watch.Watch()
            try:
                for event in self._watch(w, rv):
                    if stop_event.is_set():
                        w.stop()
                        return
                    raw = event.get("raw_object") or event.get("object") or {}
                    if event.get("type") == "ERROR":
                        if raw.get("code") == HTTP_GONE:
                            raise ApiException(status=HTTP_GONE, reason="resourceVersion expired")
                        print(f"[source] watch error: {raw.get('message', raw)}")
                        continue
                    rv = (raw.get("metadata", {}) or {}).get("resourceVersion") or rv
                    if event.get("type") != "ADDED":
                        continue
                    for workload in gated_workloads([raw]):
                        yield workload
                if self.debug:
                    print("[source] watch window closed, re-opening")
            except ApiException as e:
                if e.status != HTTP_GONE:
                    raise
                print("[source] resourceVersion expired; relisting")
                workloads, rv = self.list_gated()
                for workload in workloads:
                    if stop_event.is_set():
                        return
                    yield workload
