from __future__ import annotations

import pytest

from config import DEFAULT_ANNOTATION, DEFAULT_INITIALIZER_NAME, load_config


def test_defaults() -> None:
    cfg = load_config({})
    assert cfg.gate_name == DEFAULT_INITIALIZER_NAME == "lxcfs.initializer.kubernetes.io"
    assert cfg.annotation == DEFAULT_ANNOTATION == "initializer.kubernetes.io/lxcfs"
    assert cfg.require_annotation is True
    assert cfg.namespace is None
    assert cfg.resync_seconds == 30
    assert cfg.failure_policy == "drop"


def test_overrides() -> None:
    cfg = load_config(
        {
            "INITIALIZER_NAME": "mine.example.com",
            "ANNOTATION": "example.com/inject",
            "REQUIRE_ANNOTATION": "false",
            "NAMESPACE": "shop",
            "RESYNC_SECONDS": "10",
            "FAILURE_POLICY": "Retry",
            "RETRY_ATTEMPTS": "5",
        }
    )
    assert cfg.gate_name == "mine.example.com"
    assert cfg.annotation == "example.com/inject"
    assert cfg.require_annotation is False
    assert cfg.namespace == "shop"
    assert cfg.resync_seconds == 10
    assert cfg.failure_policy == "retry"
    assert cfg.retry_attempts == 5


def test_config_is_immutable() -> None:
    cfg = load_config({})
    with pytest.raises(AttributeError):
        cfg.gate_name = "other"  # type: ignore[misc]


@pytest.mark.parametrize(
    "env",
    [
        {"REQUIRE_ANNOTATION": "maybe"},
        {"RESYNC_SECONDS": "soon"},
        {"RESYNC_SECONDS": "0"},
        {"FAILURE_POLICY": "panic"},
    ],
)
def test_invalid_values_raise(env) -> None:
    with pytest.raises(ValueError):
        load_config(env)
