"""
Canonical in-memory collections of workers and tasks.
"""
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from exceptions.custom_errors import PersistenceError
from models import Task, Worker, WorkforceSnapshot
from store.ids import format_id, prefix_for
from store.interfaces import StorageBackend
from utils.logger import logger


class EntityStore:
    """
    Single owner of the worker and task collections and the id counters.

    Reads hand out copies. Live entities are only reachable through
    ``worker_ref``/``task_ref`` and are meant to be changed inside
    ``transaction()``, which writes the new snapshot through to storage and
    restores the previous state if anything raises.
    """

    def __init__(
        self,
        backend: StorageBackend,
        key: str = "worker_management_data",
        id_width: int = 3,
    ):
        self.backend = backend
        self.key = key
        self.id_width = id_width
        self.initialized = False
        self._workers: List[Worker] = []
        self._tasks: List[Task] = []
        self._next_ids: Dict[str, int] = {"worker": 1, "task": 1}

    @property
    def next_worker_id(self) -> int:
        return self._next_ids["worker"]

    @property
    def next_task_id(self) -> int:
        return self._next_ids["task"]

    def mint_id(self, kind: str) -> str:
        """Return a fresh id for ``kind`` ("worker" or "task") and advance its counter."""
        prefix = prefix_for(kind)
        counter = self._next_ids[kind]
        self._next_ids[kind] = counter + 1
        return format_id(prefix, counter, self.id_width)

    def workers(self) -> List[Worker]:
        return [w.copy() for w in self._workers]

    def tasks(self) -> List[Task]:
        return [t.copy() for t in self._tasks]

    def worker_ref(self, worker_id: str) -> Optional[Worker]:
        return next((w for w in self._workers if w.id == worker_id), None)

    def task_ref(self, task_id: str) -> Optional[Task]:
        return next((t for t in self._tasks if t.id == task_id), None)

    def append_worker(self, worker: Worker) -> None:
        self._workers.append(worker)

    def append_task(self, task: Task) -> None:
        self._tasks.append(task)

    def snapshot(self) -> WorkforceSnapshot:
        return WorkforceSnapshot(
            workers=self.workers(),
            tasks=self.tasks(),
            next_worker_id=self._next_ids["worker"],
            next_task_id=self._next_ids["task"],
        )

    def restore(self, snapshot: WorkforceSnapshot) -> None:
        """Replace the whole state with copies taken from ``snapshot``."""
        self._workers = [w.copy() for w in snapshot.workers]
        self._tasks = [t.copy() for t in snapshot.tasks]
        self._next_ids = {
            "worker": snapshot.next_worker_id,
            "task": snapshot.next_task_id,
        }
        self.initialized = True

    def persist(self) -> None:
        self.backend.save(self.key, self.snapshot().to_dict())

    @contextmanager
    def transaction(self) -> Iterator["EntityStore"]:
        """Apply a group of changes all-or-nothing and write them through."""
        backup = self.snapshot()
        was_initialized = self.initialized
        try:
            yield self
        except Exception:
            self._rollback(backup, was_initialized)
            raise

        try:
            self.persist()
        except PersistenceError:
            self._rollback(backup, was_initialized)
            raise
        except Exception as e:
            self._rollback(backup, was_initialized)
            raise PersistenceError(f"Could not save changes: {e}") from e

    def _rollback(self, backup: WorkforceSnapshot, was_initialized: bool) -> None:
        logger.debug("Rolling back store changes")
        self.restore(backup)
        self.initialized = was_initialized
