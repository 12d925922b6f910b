# config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal, Mapping, Optional

FailurePolicyName = Literal["drop", "retry", "dead-letter"]

DEFAULT_INITIALIZER_NAME = "lxcfs.initializer.kubernetes.io"
DEFAULT_ANNOTATION = "initializer.kubernetes.io/lxcfs"
DEFAULT_DEAD_LETTER_PATH = "deadletter/initializer.deadletter.json"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class ControllerConfig:
    """Read-only settings shared by every core call for the process lifetime."""

    gate_name: str = DEFAULT_INITIALIZER_NAME
    annotation: str = DEFAULT_ANNOTATION
    require_annotation: bool = True
    namespace: Optional[str] = None  # None -> all namespaces
    resync_seconds: int = 30
    failure_policy: FailurePolicyName = "drop"
    retry_attempts: int = 3
    dead_letter_path: str = DEFAULT_DEAD_LETTER_PATH


def _flag(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = (env.get(name) or "").strip().lower()
    if not raw:
        return default
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean (1/0, true/false), got {raw!r}")


def _positive_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be > 0, got {value}")
    return value


def load_config(environ: Optional[Mapping[str, str]] = None) -> ControllerConfig:
    """
    Build the controller configuration from environment variables.
    Called once at startup; any ValueError here is fatal.
    """
    env = os.environ if environ is None else environ

    gate_name = (env.get("INITIALIZER_NAME") or "").strip() or DEFAULT_INITIALIZER_NAME
    annotation = (env.get("ANNOTATION") or "").strip() or DEFAULT_ANNOTATION

    failure_policy = (env.get("FAILURE_POLICY") or "drop").strip().lower()
    if failure_policy not in ("drop", "retry", "dead-letter"):
        raise ValueError(f"FAILURE_POLICY must be drop, retry or dead-letter, got {failure_policy!r}")

    return ControllerConfig(
        gate_name=gate_name,
        annotation=annotation,
        require_annotation=_flag(env, "REQUIRE_ANNOTATION", True),
        namespace=(env.get("NAMESPACE") or "").strip() or None,
        resync_seconds=_positive_int(env, "RESYNC_SECONDS", 30),
        failure_policy=failure_policy,  # type: ignore[arg-type]
        retry_attempts=_positive_int(env, "RETRY_ATTEMPTS", 3),
        dead_letter_path=(env.get("DEAD_LETTER_PATH") or "").strip() or DEFAULT_DEAD_LETTER_PATH,
    )
