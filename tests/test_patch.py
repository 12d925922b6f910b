from __future__ import annotations

import pytest

from patch import PatchError, create_two_way_merge_patch, encode_patch


def _pod_spec(containers, volumes=None) -> dict:
    spec = {"containers": containers}
    if volumes is not None:
        spec["volumes"] = volumes
    return {"metadata": {"name": "web"}, "spec": {"template": {"spec": spec}}}


def test_identical_objects_produce_empty_patch() -> None:
    obj = _pod_spec([{"name": "app", "image": "nginx"}])
    assert create_two_way_merge_patch(obj, obj) == {}


def test_scalar_change_and_removed_key() -> None:
    original = {"metadata": {"name": "web", "labels": {"a": "1", "b": "2"}}, "spec": {"replicas": 1}}
    modified = {"metadata": {"name": "web", "labels": {"a": "1"}}, "spec": {"replicas": 3}}

    assert create_two_way_merge_patch(original, modified) == {
        "metadata": {"labels": {"b": None}},
        "spec": {"replicas": 3},
    }


def test_keyed_list_append_only_carries_new_elements() -> None:
    original = _pod_spec(
        [{"name": "app", "image": "nginx", "volumeMounts": [{"name": "data", "mountPath": "/data"}]}],
        volumes=[{"name": "data", "emptyDir": {}}],
    )
    modified = _pod_spec(
        [
            {
                "name": "app",
                "image": "nginx",
                "volumeMounts": [
                    {"name": "data", "mountPath": "/data"},
                    {"name": "extra", "mountPath": "/extra"},
                ],
            }
        ],
        volumes=[{"name": "data", "emptyDir": {}}, {"name": "extra", "hostPath": {"path": "/srv"}}],
    )

    assert create_two_way_merge_patch(original, modified) == {
        "spec": {
            "template": {
                "spec": {
                    "containers": [{"name": "app", "volumeMounts": [{"name": "extra", "mountPath": "/extra"}]}],
                    "volumes": [{"name": "extra", "hostPath": {"path": "/srv"}}],
                }
            }
        }
    }


def test_removed_pending_initializer_becomes_delete_directive() -> None:
    original = {"metadata": {"initializers": {"pending": [{"name": "a"}, {"name": "b"}, {"name": "c"}]}}}
    modified = {"metadata": {"initializers": {"pending": [{"name": "b"}, {"name": "c"}]}}}

    assert create_two_way_merge_patch(original, modified) == {
        "metadata": {"initializers": {"pending": [{"name": "a", "$patch": "delete"}]}}
    }


def test_cleared_initializers_become_null() -> None:
    original = {"metadata": {"name": "web", "initializers": {"pending": [{"name": "a"}]}}}
    modified = {"metadata": {"name": "web"}}

    assert create_two_way_merge_patch(original, modified) == {"metadata": {"initializers": None}}


def test_unkeyed_list_is_replaced_whole() -> None:
    original = {"spec": {"template": {"spec": {"containers": [{"name": "app", "args": ["a", "b"]}]}}}}
    modified = {"spec": {"template": {"spec": {"containers": [{"name": "app", "args": ["a", "c"]}]}}}}

    assert create_two_way_merge_patch(original, modified) == {
        "spec": {"template": {"spec": {"containers": [{"name": "app", "args": ["a", "c"]}]}}}
    }


def test_unserializable_object_raises_patch_error() -> None:
    with pytest.raises(PatchError):
        create_two_way_merge_patch({"metadata": {}}, {"metadata": {"bad": object()}})


def test_encode_patch_is_canonical() -> None:
    assert encode_patch({"b": 1, "a": {"d": None, "c": [1]}}) == b'{"a":{"c":[1],"d":null},"b":1}'


def test_tolerations_have_no_merge_key_and_are_replaced_whole() -> None:
    original = {"spec": {"template": {"spec": {"tolerations": [
        {"key": "dedicated", "operator": "Exists"},
        {"key": "gpu", "operator": "Exists"},
    ]}}}}
    modified = {"spec": {"template": {"spec": {"tolerations": [
        {"key": "dedicated", "operator": "Exists"},
        {"key": "gpu", "operator": "Equal", "value": "a100"},
    ]}}}}

    assert create_two_way_merge_patch(original, modified) == modified
