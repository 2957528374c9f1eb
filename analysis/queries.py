"""
Side-effect-free filtering, sorting and searching over worker and task lists.

Every function returns a new list and leaves its input untouched.
"""
from typing import List, Optional, Sequence

from exceptions.custom_errors import ValidationError
from models import Priority, Task, Worker

TASK_STATUSES = ("all", "active", "completed", "assigned", "unassigned")
SORT_OPTIONS = ("none", "priority", "deadline", "created")


def available_workers(workers: Sequence[Worker]) -> List[Worker]:
    """Workers open for new assignments; fully booked workers still count."""
    return [w for w in workers if w.availability]


def remaining_capacity(worker: Worker, daily_hours: float = 8.0) -> float:
    return worker.remaining_hours(daily_hours)


def sort_tasks_by_priority(tasks: Sequence[Task]) -> List[Task]:
    """High first, then medium, then low; equal priorities keep their order."""
    return sorted(tasks, key=lambda t: Priority.RANK.get(t.priority, len(Priority.RANK)))


def sort_tasks_by_deadline(tasks: Sequence[Task]) -> List[Task]:
    return sorted(tasks, key=lambda t: t.deadline)


def sort_tasks_by_created(tasks: Sequence[Task]) -> List[Task]:
    """Newest first."""
    return sorted(tasks, key=lambda t: t.created_at, reverse=True)


def search_tasks(tasks: Sequence[Task], query: Optional[str]) -> List[Task]:
    """
    Case-insensitive substring search over description, id and assigned worker.

    Args:
        tasks: Tasks to search
        query: Text to look for; blank matches everything

    Returns:
        List[Task]: Matches in their original order
    """
    needle = (query or "").strip().lower()
    if not needle:
        return list(tasks)
    return [
        t
        for t in tasks
        if needle in t.description.lower()
        or needle in t.id.lower()
        or needle in (t.assigned_to or "").lower()
    ]


def filter_tasks_by_status(tasks: Sequence[Task], status: str) -> List[Task]:
    if status == "all":
        return list(tasks)
    if status == "active":
        return [t for t in tasks if not t.completed]
    if status == "completed":
        return [t for t in tasks if t.completed]
    if status == "assigned":
        return [t for t in tasks if t.assigned_to is not None]
    if status == "unassigned":
        return [t for t in tasks if t.assigned_to is None]
    raise ValidationError(
        f"Unknown status filter {status!r}: expected one of {', '.join(TASK_STATUSES)}"
    )


def filter_tasks_by_priority(tasks: Sequence[Task], priority: str) -> List[Task]:
    if priority == "all":
        return list(tasks)
    if priority not in Priority.ALL:
        raise ValidationError(f"Unknown priority filter {priority!r}")
    return [t for t in tasks if t.priority == priority]


def sort_tasks(tasks: Sequence[Task], sort_by: str = "none") -> List[Task]:
    if sort_by == "none":
        return list(tasks)
    if sort_by == "priority":
        return sort_tasks_by_priority(tasks)
    if sort_by == "deadline":
        return sort_tasks_by_deadline(tasks)
    if sort_by == "created":
        return sort_tasks_by_created(tasks)
    raise ValidationError(
        f"Unknown sort option {sort_by!r}: expected one of {', '.join(SORT_OPTIONS)}"
    )


def apply_task_view(
    tasks: Sequence[Task],
    query: Optional[str] = None,
    status: str = "all",
    priority: str = "all",
    sort_by: str = "none",
) -> List[Task]:
    """Task board pipeline: search, then status and priority filters, then sort."""
    result = search_tasks(tasks, query)
    result = filter_tasks_by_status(result, status)
    result = filter_tasks_by_priority(result, priority)
    return sort_tasks(result, sort_by)
