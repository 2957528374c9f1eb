"""
Load-on-start and default seeding for the entity store.
"""
import math
from collections import Counter
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Optional

from config import SeedConfig
from exceptions.custom_errors import PersistenceError, ValidationError
from models import Task, Worker, WorkforceSnapshot
from store.entity_store import EntityStore
from store.ids import ID_PREFIXES, parse_id_number
from utils.logger import logger
from utils.validators import (
    expected_hours_by_worker,
    find_snapshot_issues,
    parse_deadline,
    require_priority,
    require_text,
    require_time_estimate,
)


def snapshot_from_payload(payload: Dict[str, Any]) -> WorkforceSnapshot:
    """Parse a stored payload, turning any shape problem into a PersistenceError."""
    try:
        return WorkforceSnapshot.from_dict(payload)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise PersistenceError(f"Stored snapshot is malformed: {e!r}") from e


def repair_snapshot(snapshot: WorkforceSnapshot, daily_hours: float = 8.0) -> bool:
    """
    Bring a loaded snapshot back in line with the store invariants.

    Counters that lag behind stored ids are moved past them and worker hours
    are recomputed from their open tasks. Duplicate ids, dangling assignments
    and workers booked past ``daily_hours`` cannot be repaired and raise.

    Returns:
        bool: True if anything was changed
    """
    stored_ids = {
        "worker": [w.id for w in snapshot.workers],
        "task": [t.id for t in snapshot.tasks],
    }
    for kind, ids in stored_ids.items():
        duplicates = sorted(i for i, n in Counter(ids).items() if n > 1)
        if duplicates:
            raise PersistenceError(f"Duplicate {kind} ids: {', '.join(duplicates)}")

    worker_ids = set(stored_ids["worker"])
    for task in snapshot.tasks:
        if task.assigned_to is not None and task.assigned_to not in worker_ids:
            raise PersistenceError(
                f"Task {task.id} is assigned to unknown worker {task.assigned_to}"
            )

    changed = False

    max_worker = max(
        (parse_id_number(i, ID_PREFIXES["worker"]) or 0 for i in stored_ids["worker"]), default=0
    )
    if snapshot.next_worker_id <= max_worker:
        logger.warning(
            f"nextWorkerId {snapshot.next_worker_id} lags behind stored ids, moving to {max_worker + 1}"
        )
        snapshot.next_worker_id = max_worker + 1
        changed = True

    max_task = max(
        (parse_id_number(i, ID_PREFIXES["task"]) or 0 for i in stored_ids["task"]), default=0
    )
    if snapshot.next_task_id <= max_task:
        logger.warning(
            f"nextTaskId {snapshot.next_task_id} lags behind stored ids, moving to {max_task + 1}"
        )
        snapshot.next_task_id = max_task + 1
        changed = True

    expected = expected_hours_by_worker(snapshot.workers, snapshot.tasks)
    for worker in snapshot.workers:
        if not math.isclose(worker.total_assigned_hours, expected[worker.id], abs_tol=1e-6):
            logger.warning(
                f"Worker {worker.id} had {worker.total_assigned_hours}h booked, "
                f"recomputed to {expected[worker.id]}h"
            )
            worker.total_assigned_hours = expected[worker.id]
            changed = True

    issues = find_snapshot_issues(snapshot, daily_hours)
    for issue in issues:
        logger.error(issue)
    if issues:
        raise PersistenceError(f"Stored snapshot is inconsistent: {'; '.join(issues)}")

    return changed


def seed_defaults(
    store: EntityStore, seed: SeedConfig, today: date, now: datetime
) -> None:
    """Write the default crew and starter tasks into an empty store."""
    with store.transaction():
        for name in seed.workers:
            worker = Worker(id=store.mint_id("worker"), name=require_text(name, "Worker name"))
            store.append_worker(worker)

        for entry in seed.tasks:
            try:
                deadline = entry.get("deadline") or (
                    today + timedelta(days=int(entry.get("days_until_deadline", 1)))
                ).isoformat()
                task = Task(
                    id=store.mint_id("task"),
                    description=require_text(entry.get("description"), "Task description"),
                    priority=require_priority(entry.get("priority", "medium")),
                    time_estimate=require_time_estimate(entry.get("time_estimate", 1)),
                    deadline=parse_deadline(deadline),
                    created_at=now,
                )
            except ValidationError as e:
                raise ValidationError(f"Invalid seed task {entry!r}: {e}") from e
            store.append_task(task)

        store.initialized = True

    logger.info(
        f"Seeded {len(seed.workers)} default workers and {len(seed.tasks)} default tasks"
    )


def initialize_data(
    store: EntityStore,
    seed: Optional[SeedConfig] = None,
    now: Optional[datetime] = None,
    daily_hours: float = 8.0,
) -> bool:
    """
    Load the stored snapshot into the store, seeding defaults if none exists.

    Calling this on an initialized store does nothing, so it is safe to run
    on every page load.

    Returns:
        bool: True if the store was (re)loaded or seeded by this call
    """
    if store.initialized:
        return False

    now = now or datetime.now(timezone.utc)
    payload = store.backend.load(store.key)

    if payload is None:
        logger.info(f"No snapshot under {store.key!r}, seeding defaults")
        seed_defaults(store, seed or SeedConfig(), now.date(), now)
        return True

    snapshot = snapshot_from_payload(payload)
    repaired = repair_snapshot(snapshot, daily_hours)
    store.restore(snapshot)
    if repaired:
        store.persist()

    logger.info(
        f"Loaded {len(snapshot.workers)} workers and {len(snapshot.tasks)} tasks from {store.key!r}"
    )
    return True
