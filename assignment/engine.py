# Directory: assignment/engine.py
"""
Capacity-checked task assignment and task state transitions.
"""
from datetime import date, datetime, timezone
from typing import Callable, Optional, Union

from exceptions.custom_errors import (
    CapacityError,
    NotFoundError,
    StateError,
    WorkforceError,
)
from models import AssignmentResult, Task, Worker
from store.entity_store import EntityStore
from utils.logger import logger
from utils.validators import (
    parse_deadline,
    require_priority,
    require_text,
    require_time_estimate,
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AssignmentEngine:
    """
    Entry points that change workers and tasks.

    Every operation validates against the current store state first and then
    applies its change inside a store transaction, so a failing call leaves
    both collections exactly as they were.

    Task lifecycle: unassigned -> assigned -> completed, with assigned ->
    unassigned as the only way back. Completing a task releases its hours
    from the worker but keeps ``assigned_to`` as a record of who did it.
    """

    def __init__(
        self,
        store: EntityStore,
        daily_hours: float = 8.0,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the engine.

        Args:
            store: Store that owns the entities
            daily_hours: Capacity ceiling per worker
            clock: Returns the current time; defaults to UTC now
        """
        self.store = store
        self.daily_hours = daily_hours
        self.clock = clock or _utc_now

    def _fail(self, error: WorkforceError) -> WorkforceError:
        logger.warning(f"{type(error).__name__}: {error}")
        return error

    def _get_worker(self, worker_id: str) -> Worker:
        worker = self.store.worker_ref(worker_id)
        if worker is None:
            raise self._fail(NotFoundError(f"Worker {worker_id} not found"))
        return worker

    def _get_task(self, task_id: str) -> Task:
        task = self.store.task_ref(task_id)
        if task is None:
            raise self._fail(NotFoundError(f"Task {task_id} not found"))
        return task

    def _release_hours(self, worker: Worker, hours: float) -> None:
        worker.total_assigned_hours = max(0.0, round(worker.total_assigned_hours - hours, 6))

    def add_worker(self, name: str) -> Worker:
        try:
            name = require_text(name, "Worker name")
        except WorkforceError as e:
            raise self._fail(e)

        with self.store.transaction():
            worker = Worker(id=self.store.mint_id("worker"), name=name)
            self.store.append_worker(worker)

        logger.info(f"Added worker {worker.id} ({worker.name})")
        return worker.copy()

    def add_task(
        self,
        description: str,
        priority: str,
        time_estimate: float,
        deadline: Union[str, date],
    ) -> Task:
        try:
            description = require_text(description, "Task description")
            priority = require_priority(priority)
            time_estimate = require_time_estimate(time_estimate)
            deadline = parse_deadline(deadline)
        except WorkforceError as e:
            raise self._fail(e)

        with self.store.transaction():
            task = Task(
                id=self.store.mint_id("task"),
                description=description,
                priority=priority,
                time_estimate=time_estimate,
                deadline=deadline,
                created_at=self.clock(),
            )
            self.store.append_task(task)

        logger.info(
            f"Added task {task.id} ({task.priority}, {task.time_estimate}h, due {task.deadline})"
        )
        return task.copy()

    def assign_task_to_worker(self, task_id: str, worker_id: str) -> AssignmentResult:
        task = self._get_task(task_id)
        worker = self._get_worker(worker_id)

        if task.completed:
            raise self._fail(StateError(f"Task {task_id} is already completed"))
        if task.assigned_to is not None:
            raise self._fail(
                StateError(
                    f"Task {task_id} is already assigned to {task.assigned_to}; unassign it first"
                )
            )
        if not worker.availability:
            raise self._fail(CapacityError(f"Worker {worker.name} is not available"))

        new_total = round(worker.total_assigned_hours + task.time_estimate, 6)
        if new_total > self.daily_hours:
            free = worker.remaining_hours(self.daily_hours)
            raise self._fail(
                CapacityError(
                    f"Worker {worker.name} has only {free:g}h free; "
                    f"task {task_id} needs {task.time_estimate:g}h"
                )
            )

        with self.store.transaction():
            task.assigned_to = worker.id
            worker.total_assigned_hours = new_total

        logger.info(f"Assigned task {task.id} to {worker.id} ({worker.total_assigned_hours:g}h booked)")
        return AssignmentResult(task=task.copy(), worker=worker.copy())

    def unassign_task(self, task_id: str) -> AssignmentResult:
        task = self._get_task(task_id)

        if task.completed:
            raise self._fail(StateError(f"Task {task_id} is completed and cannot be unassigned"))
        if task.assigned_to is None:
            raise self._fail(StateError(f"Task {task_id} is not assigned"))

        worker = self.store.worker_ref(task.assigned_to)

        with self.store.transaction():
            if worker is not None:
                self._release_hours(worker, task.time_estimate)
            task.assigned_to = None

        logger.info(f"Unassigned task {task.id}")
        return AssignmentResult(task=task.copy(), worker=worker.copy() if worker else None)

    def complete_task(self, task_id: str) -> AssignmentResult:
        task = self._get_task(task_id)

        if task.completed:
            raise self._fail(StateError(f"Task {task_id} is already completed"))
        if task.assigned_to is None:
            raise self._fail(
                StateError(f"Task {task_id} must be assigned before it can be completed")
            )

        worker = self.store.worker_ref(task.assigned_to)

        with self.store.transaction():
            task.completed = True
            if worker is not None:
                self._release_hours(worker, task.time_estimate)

        logger.info(f"Completed task {task.id}")
        return AssignmentResult(task=task.copy(), worker=worker.copy() if worker else None)

    def update_worker_availability(self, worker_id: str, availability: bool) -> Worker:
        worker = self._get_worker(worker_id)

        with self.store.transaction():
            worker.availability = bool(availability)

        logger.info(
            f"Worker {worker.id} marked {'available' if worker.availability else 'unavailable'}"
        )
        return worker.copy()
