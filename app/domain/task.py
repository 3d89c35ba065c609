"""Task domain rules - statuses, priorities, listing order"""
from typing import Dict, FrozenSet

# Task statuses
TASK_STATUS_TODO = "todo"
TASK_STATUS_IN_PROGRESS = "in_progress"
TASK_STATUS_DONE = "done"
TASK_STATUS_BLOCKED = "blocked"

TASK_STATUSES = [
    TASK_STATUS_TODO,
    TASK_STATUS_IN_PROGRESS,
    TASK_STATUS_DONE,
    TASK_STATUS_BLOCKED,
]

# Statuses that carry-forward copies to the next day
UNFINISHED_STATUSES = [TASK_STATUS_TODO, TASK_STATUS_IN_PROGRESS]

# Priorities
PRIORITY_LOW = "low"
PRIORITY_MEDIUM = "medium"
PRIORITY_HIGH = "high"

PRIORITIES = [PRIORITY_LOW, PRIORITY_MEDIUM, PRIORITY_HIGH]

# Sort rank: lower comes first, missing priority goes last
PRIORITY_RANK = {
    PRIORITY_HIGH: 0,
    PRIORITY_MEDIUM: 1,
    PRIORITY_LOW: 2,
}
NO_PRIORITY_RANK = 3

# Allowed next states. Every transition is currently open; tighten here.
TASK_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    status: frozenset(TASK_STATUSES) for status in TASK_STATUSES
}

# Fields a caller may change on an existing task
UPDATABLE_FIELDS = ("title", "description", "notes", "status", "priority", "pinned", "date")


def can_transition(current: str, new: str) -> bool:
    """True if a task in `current` status may move to `new`."""
    return new in TASK_TRANSITIONS.get(current, frozenset())
