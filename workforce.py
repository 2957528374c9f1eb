"""
Public entry points used by the Streamlit pages and the CLI.
"""
import threading
from datetime import date, datetime, timezone
from typing import Callable, Dict, List, Optional, Sequence, Union

from analysis import queries
from analysis.export import export_to_csv
from analysis.metrics import compute_dashboard_metrics
from assignment.engine import AssignmentEngine
from config import AppConfig
from exceptions.custom_errors import NotFoundError
from models import AssignmentResult, Task, Worker
from store.backends import create_storage
from store.entity_store import EntityStore
from store.interfaces import StorageBackend
from store.persistence import initialize_data
from utils.validators import validate_date as _validate_date


class WorkforceManager:
    """
    Owns one entity store and exposes every operation the UI needs.

    Mutations return the entities they changed, so callers do not have to
    re-read the collections; the read methods still return full snapshots.
    Mutations and loading hold one lock, so a manager can be shared by the
    threads of a web server.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        backend: Optional[StorageBackend] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the manager.

        Args:
            config: Application configuration; defaults are used if omitted
            backend: Storage collaborator; built from ``config.storage`` if omitted
            clock: Returns the current time, used for ``created_at`` and metrics
        """
        self.config = config or AppConfig()
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self._lock = threading.RLock()
        self.store = EntityStore(
            backend or create_storage(self.config.storage),
            key=self.config.storage.key,
            id_width=self.config.id_width,
        )
        self.engine = AssignmentEngine(
            self.store,
            daily_hours=self.config.capacity.daily_hours,
            clock=self.clock,
        )

    @property
    def daily_hours(self) -> float:
        return self.config.capacity.daily_hours

    # Persistence boundary

    def initialize_data(self) -> bool:
        with self._lock:
            return initialize_data(
                self.store, self.config.seed_data, now=self.clock(), daily_hours=self.daily_hours
            )

    # Mutations

    def add_worker(self, name: str) -> Worker:
        with self._lock:
            return self.engine.add_worker(name)

    def add_task(
        self,
        description: str,
        priority: str,
        time_estimate: float,
        deadline: Union[str, date],
    ) -> Task:
        with self._lock:
            return self.engine.add_task(description, priority, time_estimate, deadline)

    def assign_task_to_worker(self, task_id: str, worker_id: str) -> AssignmentResult:
        with self._lock:
            return self.engine.assign_task_to_worker(task_id, worker_id)

    def unassign_task(self, task_id: str) -> AssignmentResult:
        with self._lock:
            return self.engine.unassign_task(task_id)

    def complete_task(self, task_id: str) -> AssignmentResult:
        with self._lock:
            return self.engine.complete_task(task_id)

    def update_worker_availability(self, worker_id: str, availability: bool) -> Worker:
        with self._lock:
            return self.engine.update_worker_availability(worker_id, availability)

    # Reads

    def get_workers(self) -> List[Worker]:
        return self.store.workers()

    def get_tasks(self) -> List[Task]:
        return self.store.tasks()

    def get_worker(self, worker_id: str) -> Worker:
        worker = self.store.worker_ref(worker_id)
        if worker is None:
            raise NotFoundError(f"Worker {worker_id} not found")
        return worker.copy()

    def get_task(self, task_id: str) -> Task:
        task = self.store.task_ref(task_id)
        if task is None:
            raise NotFoundError(f"Task {task_id} not found")
        return task.copy()

    def get_available_workers(self) -> List[Worker]:
        return queries.available_workers(self.store.workers())

    def sort_tasks_by_priority(self, tasks: Optional[Sequence[Task]] = None) -> List[Task]:
        return queries.sort_tasks_by_priority(self.get_tasks() if tasks is None else tasks)

    def sort_tasks_by_deadline(self, tasks: Optional[Sequence[Task]] = None) -> List[Task]:
        return queries.sort_tasks_by_deadline(self.get_tasks() if tasks is None else tasks)

    def search_tasks(self, query: str) -> List[Task]:
        return queries.search_tasks(self.store.tasks(), query)

    def get_task_view(
        self,
        query: Optional[str] = None,
        status: str = "all",
        priority: str = "all",
        sort_by: str = "none",
    ) -> List[Task]:
        return queries.apply_task_view(self.store.tasks(), query, status, priority, sort_by)

    def get_metrics(self) -> Dict[str, float]:
        return compute_dashboard_metrics(
            self.store.workers(), self.store.tasks(), self.clock(), self.daily_hours
        )

    # Export

    def export_to_csv(self) -> str:
        return export_to_csv(self.store.tasks())

    def export_to_excel(self, filename: str) -> bool:
        # matplotlib/openpyxl are only needed for reports
        from visualization import export_to_excel

        return export_to_excel(filename, self.store.workers(), self.store.tasks(), self.daily_hours)

    @staticmethod
    def validate_date(value: Union[str, date, None]) -> bool:
        return _validate_date(value)
