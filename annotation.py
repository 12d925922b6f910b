# annotation.py
from workload import Workload


def should_mutate(workload: Workload, require_annotation: bool, annotation_key: str) -> bool:
    """
    Decide whether the LXCFS mounts are injected.
    Priority:
      1) require_annotation disabled -> always mutate
      2) annotation_key present (any value, even "") -> mutate
      3) otherwise pass through unmutated
    """
    if not require_annotation:
        return True
    return annotation_key in workload.annotations
