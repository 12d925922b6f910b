# failure.py
"""What happens when initializing one Deployment fails.

The initializer itself never retries. The lifecycle manager wraps every event in
one of these policies:

  LogAndDrop       - single attempt, log the error, move on (default)
  RetryWithBackoff - a few attempts with exponential backoff, then drop
  DeadLetter       - single attempt, record the failure on disk, move on

A dropped event leaves the Deployment gated until someone resolves it by hand.
"""

from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Callable, Dict, List, Optional

from config import ControllerConfig
from workload import Workload

Attempt = Callable[[], object]


class FailurePolicy:
    name = "base"

    def run(self, workload: Workload, attempt: Attempt) -> bool:
        """Run `attempt` for `workload`; return True if it eventually succeeded."""
        raise NotImplementedError


class LogAndDrop(FailurePolicy):
    name = "drop"

    def run(self, workload: Workload, attempt: Attempt) -> bool:
        try:
            attempt()
            return True
        except Exception as e:
            print(f"[failure] {workload}: {e} (dropped)")
            return False


class RetryWithBackoff(FailurePolicy):
    name = "retry"

    def __init__(
        self,
        attempts: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if attempts < 1:
            raise ValueError("attempts must be >= 1")
        self.attempts = attempts
        self.base_delay = base_delay
        self.max_delay = max_delay
        self._sleep = sleep

    def run(self, workload: Workload, attempt: Attempt) -> bool:
        backoff = self.base_delay
        for n in range(1, self.attempts + 1):
            try:
                attempt()
                return True
            except Exception as e:
                if n == self.attempts:
                    print(f"[failure] {workload}: {e} (giving up after {n} attempts)")
                    return False
                print(f"[failure] {workload}: {e} (attempt {n}/{self.attempts}, retrying in {backoff:.1f}s)")
                self._sleep(backoff)
                backoff = min(backoff * 2, self.max_delay)
        return False


class DeadLetter(FailurePolicy):
    name = "dead-letter"

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def _load(self) -> Dict:
        if not self.path.exists():
            return {"failures": []}
        try:
            return json.loads(self.path.read_text())
        except json.JSONDecodeError:
            # Corrupted file; start over rather than lose the new entry
            return {"failures": []}

    def _save(self, data: Dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2, sort_keys=True))

    def record(self, workload: Workload, error: Exception) -> None:
        data = self._load()
        failures: List = data.get("failures", []) or []
        failures.append(
            {
                "namespace": workload.namespace,
                "name": workload.name,
                "error": f"{type(error).__name__}: {error}",
                "failed_at": int(time.time()),
            }
        )
        data["failures"] = failures
        self._save(data)

    def run(self, workload: Workload, attempt: Attempt) -> bool:
        try:
            attempt()
            return True
        except Exception as e:
            print(f"[failure] {workload}: {e} (dead-lettered to {self.path})")
            self.record(workload, e)
            return False


def build_failure_policy(cfg: ControllerConfig, sleep: Optional[Callable[[float], None]] = None) -> FailurePolicy:
    if cfg.failure_policy == "drop":
        return LogAndDrop()
    if cfg.failure_policy == "retry":
        return RetryWithBackoff(attempts=cfg.retry_attempts, sleep=sleep or time.sleep)
    if cfg.failure_policy == "dead-letter":
        return DeadLetter(cfg.dead_letter_path)
    raise ValueError(f"unknown failure policy: {cfg.failure_policy!r}")
