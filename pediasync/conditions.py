"""Status conditions: lookup, update and the derived readiness condition."""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Iterable, List, Optional


class ConditionStatus(str, enum.Enum):
    TRUE = "True"
    FALSE = "False"
    UNKNOWN = "Unknown"


@dataclass
class Condition:
    """One observation of an aspect of an object's state."""

    type: str
    status: ConditionStatus
    reason: str = ""
    message: str = ""
    last_transition_time: Optional[datetime] = None
    observed_generation: int = 0


def _now() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


def find_status_condition(conditions: Iterable[Condition], condition_type: str) -> Optional[Condition]:
    """Return the condition of the given type, or None."""
    return next((cond for cond in conditions if cond.type == condition_type), None)


def set_status_condition(conditions: List[Condition], condition: Condition) -> None:
    """Add ``condition`` to ``conditions`` or update the one of the same type in place.

    The transition time only moves when the status changes; a missing time is
    filled with the current time.
    """
    existing = find_status_condition(conditions, condition.type)
    if existing is None:
        added = replace(condition)
        if added.last_transition_time is None:
            added.last_transition_time = _now()
        conditions.append(added)
        return

    if existing.status != condition.status:
        existing.status = condition.status
        existing.last_transition_time = condition.last_transition_time or _now()
    existing.reason = condition.reason
    existing.message = condition.message
    existing.observed_generation = condition.observed_generation


def remove_status_condition(conditions: List[Condition], condition_type: str) -> bool:
    """Remove the condition of the given type; report whether one was removed."""
    kept = [cond for cond in conditions if cond.type != condition_type]
    removed = len(kept) != len(conditions)
    conditions[:] = kept
    return removed


def ready_condition(
    conditions: Iterable[Condition],
    required_types: Iterable[str],
    ready_type: str,
    ready_reason: str,
    not_ready_reason: str,
) -> Condition:
    """Build the readiness condition: true only if every required condition is true.

    The first required condition that is missing or not true decides the
    reason and message.
    """
    conditions = list(conditions)
    ready = Condition(type=ready_type, status=ConditionStatus.TRUE, reason=ready_reason, message="")
    for condition_type in required_types:
        cond = find_status_condition(conditions, condition_type)
        if cond is not None and cond.status == ConditionStatus.TRUE:
            continue

        ready.status = ConditionStatus.FALSE
        ready.reason = not_ready_reason
        if cond is None:
            ready.message = f"{condition_type} condition is not found"
        else:
            status = ConditionStatus(cond.status).value
            ready.message = f"{condition_type} condition is {status}, reason is {cond.reason}"
        break
    return ready