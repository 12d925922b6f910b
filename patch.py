# patch.py
from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Optional, Tuple

Path = Tuple[str, ...]

STRATEGIC_MERGE_PATCH = "application/strategic-merge-patch+json"

# patchMergeKey for the apps/v1 Deployment lists the initializer can touch.
# Paths skip list indices: elements of a keyed list share the list's path.
DEPLOYMENT_MERGE_KEYS: Dict[Path, str] = {
    ("metadata", "initializers", "pending"): "name",
    ("metadata", "ownerReferences"): "uid",
    ("spec", "template", "metadata", "ownerReferences"): "uid",
    ("spec", "template", "spec", "containers"): "name",
    ("spec", "template", "spec", "initContainers"): "name",
    ("spec", "template", "spec", "containers", "volumeMounts"): "mountPath",
    ("spec", "template", "spec", "initContainers", "volumeMounts"): "mountPath",
    ("spec", "template", "spec", "containers", "env"): "name",
    ("spec", "template", "spec", "initContainers", "env"): "name",
    ("spec", "template", "spec", "containers", "ports"): "containerPort",
    ("spec", "template", "spec", "initContainers", "ports"): "containerPort",
    ("spec", "template", "spec", "volumes"): "name",
    ("spec", "template", "spec", "imagePullSecrets"): "name",
}


class PatchError(Exception):
    """Raised when a body cannot be serialized or diffed."""


def _canonical(obj: Any, what: str) -> Any:
    try:
        return json.loads(json.dumps(obj, sort_keys=True))
    except (TypeError, ValueError) as e:
        raise PatchError(f"cannot serialize {what} object: {e}") from e


def _diff_maps(original: Mapping, modified: Mapping, path: Path, merge_keys: Mapping[Path, str]) -> Dict[str, Any]:
    patch: Dict[str, Any] = {}

    for key in original:
        if key not in modified:
            patch[key] = None

    for key, new in modified.items():
        if key not in original:
            if new is not None:
                patch[key] = new
            continue

        old = original[key]
        if old == new:
            continue

        sub_path = path + (key,)
        if isinstance(old, dict) and isinstance(new, dict):
            sub = _diff_maps(old, new, sub_path, merge_keys)
            if sub:
                patch[key] = sub
        elif isinstance(old, list) and isinstance(new, list) and sub_path in merge_keys:
            sub_list = _diff_keyed_lists(old, new, sub_path, merge_keys)
            if sub_list is None:
                patch[key] = new
            elif sub_list:
                patch[key] = sub_list
        else:
            patch[key] = new

    return patch


def _diff_keyed_lists(
    original: List[Any],
    modified: List[Any],
    path: Path,
    merge_keys: Mapping[Path, str],
) -> Optional[List[Any]]:
    """Element-wise diff of a list merged by key. None means "replace the whole list"."""
    merge_key = merge_keys[path]

    def _keyed(items: List[Any]) -> bool:
        return all(isinstance(i, dict) and merge_key in i for i in items)

    if not _keyed(original) or not _keyed(modified):
        return None

    originals: Dict[Any, dict] = {}
    for item in original:
        originals.setdefault(item[merge_key], item)

    out: List[Any] = []
    matched: set = set()
    for item in modified:
        k = item[merge_key]
        if k in originals and k not in matched:
            matched.add(k)
            sub = _diff_maps(originals[k], item, path, merge_keys)
            if sub:
                out.append({merge_key: k, **sub})
        else:
            out.append(item)

    for k in originals:
        if k not in matched:
            out.append({merge_key: k, "$patch": "delete"})

    return out


def create_two_way_merge_patch(
    original: Mapping[str, Any],
    modified: Mapping[str, Any],
    merge_keys: Mapping[Path, str] = DEPLOYMENT_MERGE_KEYS,
) -> Dict[str, Any]:
    """Compute a strategic merge patch that turns `original` into `modified`.

    Only changed fields are present. Keyed lists (see DEPLOYMENT_MERGE_KEYS)
    carry just their new or changed elements plus `$patch: delete` markers for
    removed ones; new elements land after the existing ones on the server.
    Returns {} when nothing changed.
    """
    old = _canonical(original, "original")
    new = _canonical(modified, "modified")
    if not isinstance(old, dict) or not isinstance(new, dict):
        raise PatchError("both objects must serialize to JSON objects")
    return _diff_maps(old, new, (), merge_keys)


def encode_patch(patch: Mapping[str, Any]) -> bytes:
    try:
        return json.dumps(patch, sort_keys=True, separators=(",", ":")).encode()
    except (TypeError, ValueError) as e:
        raise PatchError(f"cannot encode patch: {e}") from e
