"""Status conditions of a cluster and the rules for updating them."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime, timezone

WORKLOAD_READY = "Ready"
# Added when one of the workloads is not up to date.
WORKLOAD_NOT_UP_TO_DATE = "WorkloadNotUpToDate"
# Added when one of the metad pods is unhealthy.
METAD_UNHEALTHY = "MetadUnhealthy"
# Added when one of the storaged pods is unhealthy.
STORAGED_UNHEALTHY = "StoragedUnhealthy"
# Added when one of the graphd pods is unhealthy.
GRAPHD_UNHEALTHY = "GraphdUnhealthy"


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Condition:
    """One observed condition of a cluster."""

    type: str
    status: str
    reason: str = ""
    message: str = ""
    last_update_time: datetime = field(default_factory=_now)
    last_transition_time: datetime = field(default_factory=_now)


@dataclass
class ClusterStatus:
    """The part of a cluster's status that holds its conditions."""

    conditions: list[Condition] = field(default_factory=list)


def new_condition(cond_type: str, status: str, reason: str, message: str) -> Condition:
    """Create a condition stamped with the current time."""
    now = _now()
    return Condition(
        type=cond_type,
        status=status,
        reason=reason,
        message=message,
        last_update_time=now,
        last_transition_time=now,
    )


def get_condition(status: ClusterStatus, cond_type: str) -> Condition | None:
    """Return a copy of the condition of ``cond_type``, or None if absent."""
    for condition in status.conditions:
        if condition.type == cond_type:
            return dataclasses.replace(condition)
    return None


def set_condition(status: ClusterStatus, condition: Condition) -> None:
    """Put ``condition`` into ``status``, replacing one of the same type.

    Nothing changes when the existing condition has the same status and
    reason. When only the reason differs, the transition time is kept.
    """
    current = get_condition(status, condition.type)
    if current is not None and current.status == condition.status:
        if current.reason == condition.reason:
            return
        condition.last_transition_time = current.last_transition_time
    status.conditions = [
        existing for existing in status.conditions if existing.type != condition.type
    ]
    status.conditions.append(dataclasses.replace(condition))