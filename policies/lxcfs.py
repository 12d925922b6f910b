# policies/lxcfs.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple

LXCFS_ROOT = "/var/lib/lxcfs"


@dataclass(frozen=True)
class MountSpec:
    name: str
    mount_path: str

    def to_manifest(self) -> Dict[str, Any]:
        return {"name": self.name, "mountPath": self.mount_path}


@dataclass(frozen=True)
class VolumeSpec:
    name: str
    host_path: str

    def to_manifest(self) -> Dict[str, Any]:
        return {"name": self.name, "hostPath": {"path": self.host_path}}


@dataclass(frozen=True)
class PolicyEntry:
    mount: MountSpec
    volume: VolumeSpec


def _entry(proc_file: str) -> PolicyEntry:
    name = f"lxcfs-proc-{proc_file}"
    return PolicyEntry(
        mount=MountSpec(name=name, mount_path=f"/proc/{proc_file}"),
        volume=VolumeSpec(name=name, host_path=f"{LXCFS_ROOT}/proc/{proc_file}"),
    )


# Equivalent to running the container with:
#   -v /var/lib/lxcfs/proc/<file>:/proc/<file>:rw
# for each of cpuinfo, diskstats, meminfo, stat, swaps, uptime.
LXCFS_POLICY: Tuple[PolicyEntry, ...] = tuple(
    _entry(f) for f in ("cpuinfo", "meminfo", "diskstats", "stat", "swaps", "uptime")
)


def policy_mounts(policy: Tuple[PolicyEntry, ...] = LXCFS_POLICY) -> list[dict]:
    """Container volumeMounts to append, in policy order."""
    return [e.mount.to_manifest() for e in policy]


def policy_volumes(policy: Tuple[PolicyEntry, ...] = LXCFS_POLICY) -> list[dict]:
    """Pod template volumes to append, in policy order."""
    return [e.volume.to_manifest() for e in policy]
