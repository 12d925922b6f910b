# k8s.py
from __future__ import annotations

from kubernetes import client, config, dynamic

from patch import STRATEGIC_MERGE_PATCH


def load_kube() -> str:
    """Load in-cluster config, falling back to the local kubeconfig.

    Raises kubernetes.config.ConfigException when neither is available.
    """
    try:
        config.load_incluster_config()
        return "in-cluster"
    except config.ConfigException:
        config.load_kube_config()
        return "kubeconfig"


class DeploymentStore:
    """apps/v1 Deployments, read and written as raw camelCase manifests.

    The dynamic client is used instead of AppsV1Api so fields the typed models
    do not know about (metadata.initializers) survive the round trip.
    """

    def __init__(self, api_client: client.ApiClient | None = None):
        self.client = dynamic.DynamicClient(api_client or client.ApiClient())
        self.deployments = self.client.resources.get(api_version="apps/v1", kind="Deployment")

    def list(self, namespace: str | None = None) -> dict:
        res = self.deployments.get(namespace=namespace, include_uninitialized=True)
        return res.to_dict()

    def patch(self, namespace: str, name: str, patch: dict) -> dict:
        res = self.deployments.patch(
            namespace=namespace,
            name=name,
            body=patch,
            content_type=STRATEGIC_MERGE_PATCH,
        )
        print(f"[store] patched deployment {namespace}/{name}")
        return res.to_dict()

    def update(self, namespace: str, name: str, body: dict) -> dict:
        # body carries metadata.resourceVersion; a stale one comes back as 409 Conflict
        res = self.deployments.replace(namespace=namespace, name=name, body=body)
        print(f"[store] updated deployment {namespace}/{name}")
        return res.to_dict()
