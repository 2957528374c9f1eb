# Directory: utils/validators.py
"""
Validation utilities for workers, tasks and stored snapshots.
"""
import math
from datetime import date, datetime
from numbers import Real
from typing import Any, Dict, List, Union

from exceptions.custom_errors import ValidationError
from models import Priority, Task, Worker, WorkforceSnapshot
from store.ids import ID_PREFIXES, parse_id_number


def validate_date(value: Union[str, date, None]) -> bool:
    """
    Check whether a value is a real calendar date.

    Accepts ``date`` objects and strings of the form ``YYYY-MM-DD`` whose
    parts name an existing day (``2025-02-30`` is rejected). Past dates are
    fine; a minimum deadline is a hint for the date picker, not a rule.
    """
    if isinstance(value, datetime):
        return False
    if isinstance(value, date):
        return True
    if not isinstance(value, str):
        return False
    text = value.strip()
    if len(text) != 10:
        return False
    try:
        parsed = datetime.strptime(text, "%Y-%m-%d").date()
    except ValueError:
        return False
    return parsed.isoformat() == text


def parse_deadline(value: Union[str, date]) -> date:
    if not validate_date(value):
        raise ValidationError(f"Invalid deadline {value!r}: expected a date as YYYY-MM-DD")
    if isinstance(value, date):
        return value
    return date.fromisoformat(value.strip())


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def require_text(value: Any, field_name: str) -> str:
    """Return the trimmed text, with line breaks as ``\\n``, or raise if it is empty."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return normalize_newlines(value.strip())


def require_priority(value: Any) -> str:
    priority = value.strip().lower() if isinstance(value, str) else value
    if priority not in Priority.ALL:
        raise ValidationError(
            f"Invalid priority {value!r}: expected one of {', '.join(Priority.ALL)}"
        )
    return priority


def require_time_estimate(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (Real, str)):
        raise ValidationError("Time estimate must be a number of hours")
    try:
        hours = float(value)
    except ValueError:
        raise ValidationError(f"Time estimate must be a number of hours, got {value!r}") from None
    if math.isnan(hours) or math.isinf(hours) or hours <= 0:
        raise ValidationError("Time estimate must be greater than 0")
    return hours


def expected_hours_by_worker(workers: List[Worker], tasks: List[Task]) -> Dict[str, float]:
    """Sum of open (assigned, not completed) task hours per worker."""
    hours = {w.id: 0.0 for w in workers}
    for task in tasks:
        if task.assigned_to in hours and not task.completed:
            hours[task.assigned_to] = round(hours[task.assigned_to] + task.time_estimate, 6)
    return hours


def find_snapshot_issues(snapshot: WorkforceSnapshot, daily_hours: float = 8.0) -> List[str]:
    """
    List every broken store invariant in a snapshot.

    Checks:
    1. Worker and task ids are unique
    2. Every assignment references an existing worker
    3. Worker hours equal the sum of their open tasks and stay within capacity
    4. Id counters are ahead of every stored id
    """
    issues = []

    worker_ids = [w.id for w in snapshot.workers]
    task_ids = [t.id for t in snapshot.tasks]
    if len(set(worker_ids)) != len(worker_ids):
        issues.append("Duplicate worker ids")
    if len(set(task_ids)) != len(task_ids):
        issues.append("Duplicate task ids")

    known = set(worker_ids)
    for task in snapshot.tasks:
        if task.assigned_to is not None and task.assigned_to not in known:
            issues.append(f"Task {task.id} is assigned to unknown worker {task.assigned_to}")

    expected = expected_hours_by_worker(snapshot.workers, snapshot.tasks)
    for worker in snapshot.workers:
        if not math.isclose(worker.total_assigned_hours, expected[worker.id], abs_tol=1e-6):
            issues.append(
                f"Worker {worker.id} has {worker.total_assigned_hours}h booked "
                f"but open tasks add up to {expected[worker.id]}h"
            )
        if expected[worker.id] > daily_hours + 1e-6:
            issues.append(
                f"Worker {worker.id} is over capacity: {expected[worker.id]}h of {daily_hours}h"
            )

    max_worker = max((parse_id_number(i, ID_PREFIXES["worker"]) or 0 for i in worker_ids), default=0)
    max_task = max((parse_id_number(i, ID_PREFIXES["task"]) or 0 for i in task_ids), default=0)
    if snapshot.next_worker_id <= max_worker:
        issues.append(f"nextWorkerId {snapshot.next_worker_id} does not exceed W{max_worker}")
    if snapshot.next_task_id <= max_task:
        issues.append(f"nextTaskId {snapshot.next_task_id} does not exceed T{max_task}")

    return issues

