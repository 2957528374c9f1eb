# Directory: models.py
"""
Core data models for the workforce manager.
"""
import math
from dataclasses import dataclass, field, replace
from typing import List, Optional, Dict, Any
from datetime import date, datetime, timezone


class Priority:
    """Task priority levels, most urgent first."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    ALL = (HIGH, MEDIUM, LOW)
    RANK = {HIGH: 0, MEDIUM: 1, LOW: 2}


def format_timestamp(value: datetime) -> str:
    """Render a timestamp as ISO-8601 UTC with millisecond precision, e.g. ``2025-01-01T09:30:00.000Z``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _stored_bool(data: Dict[str, Any], key: str, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ValueError(f"{key} must be true or false, got {value!r}")
    return value


def format_hours(value: float) -> str:
    """Render hours without a trailing ``.0`` for whole numbers."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return f"{value:g}"


@dataclass
class Worker:
    """A crew member who can be assigned cleaning tasks up to the daily capacity."""

    id: str
    name: str
    availability: bool = True
    total_assigned_hours: float = 0.0

    def __repr__(self) -> str:
        return (
            f"Worker({self.id}, name={self.name}, available={self.availability}, "
            f"hours={format_hours(self.total_assigned_hours)})"
        )

    def copy(self) -> "Worker":
        return replace(self)

    def remaining_hours(self, daily_hours: float = 8.0) -> float:
        """Hours still free today, never negative."""
        return max(0.0, round(daily_hours - self.total_assigned_hours, 6))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "availability": self.availability,
            "totalAssignedHours": self.total_assigned_hours,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Worker":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            availability=_stored_bool(data, "availability", True),
            total_assigned_hours=float(data.get("totalAssignedHours", 0) or 0),
        )


@dataclass
class Task:
    """A cleaning job waiting to be assigned, in progress, or completed."""

    id: str
    description: str
    priority: str
    time_estimate: float
    deadline: date
    created_at: datetime
    assigned_to: Optional[str] = None
    completed: bool = False

    def __repr__(self) -> str:
        return (
            f"Task({self.id}, description={self.description!r}, priority={self.priority}, "
            f"hours={format_hours(self.time_estimate)}, deadline={self.deadline.isoformat()}, "
            f"assigned_to={self.assigned_to}, completed={self.completed})"
        )

    @property
    def is_assigned(self) -> bool:
        return self.assigned_to is not None

    @property
    def status(self) -> str:
        """``completed``, ``assigned`` or ``unassigned``."""
        if self.completed:
            return "completed"
        return "assigned" if self.is_assigned else "unassigned"

    def copy(self) -> "Task":
        return replace(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "priority": self.priority,
            "timeEstimate": self.time_estimate,
            "deadline": self.deadline.isoformat(),
            "assignedTo": self.assigned_to,
            "createdAt": format_timestamp(self.created_at),
            "completed": self.completed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        priority = str(data["priority"])
        if priority not in Priority.ALL:
            raise ValueError(f"Unknown priority {priority!r}")
        time_estimate = float(data["timeEstimate"])
        if not math.isfinite(time_estimate) or time_estimate <= 0:
            raise ValueError(f"Time estimate must be positive, got {time_estimate!r}")

        assigned_to = data.get("assignedTo")
        return cls(
            id=str(data["id"]),
            description=str(data["description"]),
            priority=priority,
            time_estimate=time_estimate,
            deadline=date.fromisoformat(str(data["deadline"])),
            created_at=parse_timestamp(str(data["createdAt"])),
            assigned_to=str(assigned_to) if assigned_to else None,
            completed=_stored_bool(data, "completed", False),
        )


@dataclass
class WorkforceSnapshot:
    """Everything needed to rebuild the store: both collections plus the id counters."""

    workers: List[Worker] = field(default_factory=list)
    tasks: List[Task] = field(default_factory=list)
    next_worker_id: int = 1
    next_task_id: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "workers": [w.to_dict() for w in self.workers],
            "tasks": [t.to_dict() for t in self.tasks],
            "nextWorkerId": self.next_worker_id,
            "nextTaskId": self.next_task_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WorkforceSnapshot":
        return cls(
            workers=[Worker.from_dict(w) for w in data.get("workers", [])],
            tasks=[Task.from_dict(t) for t in data.get("tasks", [])],
            next_worker_id=int(data.get("nextWorkerId", 1)),
            next_task_id=int(data.get("nextTaskId", 1)),
        )


@dataclass
class AssignmentResult:
    """Copies of the task and worker touched by an assignment-engine call."""

    task: Task
    worker: Optional[Worker] = None
