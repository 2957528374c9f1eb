"""
Utility functions for generating demo workers and tasks.
"""
import random
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Tuple

from faker import Faker

from models import Priority, Task, Worker
from utils.logger import logger

CLEANING_JOBS = [
    "Deep clean {place}",
    "Vacuum {place}",
    "Mop floors in {place}",
    "Sanitize restrooms at {place}",
    "Wipe windows in {place}",
    "Empty bins and restock {place}",
    "Dust shelves in {place}",
]

PLACES = [
    "the lobby",
    "the office kitchen",
    "conference room B",
    "the gym",
    "the reception area",
    "the stairwells",
    "the storage room",
]


class DataGenerator:
    """Generator for demo data: crew members and cleaning tasks."""

    def __init__(self, seed: int = 42, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the generator with a specific seed and optional configuration.

        Args:
            seed: Random seed for reproducibility
            config: Optional configuration settings
        """
        self.seed = seed
        self.fake = Faker()
        self.fake.seed_instance(seed)
        self.random = random.Random(seed)

        self.config = config or {
            "task_hours_choices": [0.5, 1, 1.5, 2, 3, 4],
            "priority_weights": {Priority.HIGH: 0.25, Priority.MEDIUM: 0.5, Priority.LOW: 0.25},
            "deadline_min_days": 0,
            "deadline_max_days": 7,
            "assign_ratio": 0.5,
        }

    def worker_names(self, num_workers: int) -> List[str]:
        return [self.fake.name() for _ in range(num_workers)]

    def task_requests(self, num_tasks: int, today: date) -> List[Dict[str, Any]]:
        """
        Build arguments for ``add_task`` calls.

        Args:
            num_tasks: Number of tasks to describe
            today: Deadlines are drawn relative to this day

        Returns:
            List of dicts with description, priority, time_estimate and deadline
        """
        priorities = list(self.config["priority_weights"].keys())
        weights = list(self.config["priority_weights"].values())
        requests = []
        for _ in range(num_tasks):
            job = self.random.choice(CLEANING_JOBS).format(place=self.random.choice(PLACES))
            deadline = today + timedelta(
                days=self.random.randint(
                    self.config["deadline_min_days"], self.config["deadline_max_days"]
                )
            )
            requests.append({
                "description": f"{job} ({self.fake.company()})",
                "priority": self.random.choices(priorities, weights=weights)[0],
                "time_estimate": self.random.choice(self.config["task_hours_choices"]),
                "deadline": deadline.isoformat(),
            })
        return requests

    @staticmethod
    def pick_worker(task: Task, workers: List[Worker], daily_hours: float) -> Optional[Worker]:
        """Least-loaded available worker with room for the task, if any."""
        candidates = [
            w
            for w in workers
            if w.availability and w.total_assigned_hours + task.time_estimate <= daily_hours
        ]
        if not candidates:
            return None
        return min(candidates, key=lambda w: w.total_assigned_hours)

    def generate_scenario(
        self, manager, num_workers: int, num_tasks: int, today: date
    ) -> Tuple[List[Worker], List[Task]]:
        """
        Populate a workforce manager with fake workers and tasks.

        Part of the tasks (``assign_ratio``) is handed to the least-loaded
        worker that still has room, going through the normal engine checks.

        Args:
            manager: WorkforceManager to fill
            num_workers: Number of workers to add
            num_tasks: Number of tasks to add
            today: Reference day for deadlines

        Returns:
            Tuple[List[Worker], List[Task]]: The entities that were added
        """
        workers = [manager.add_worker(name) for name in self.worker_names(num_workers)]
        tasks = [manager.add_task(**request) for request in self.task_requests(num_tasks, today)]

        assigned = 0
        for task in tasks:
            if self.random.random() >= self.config["assign_ratio"]:
                continue
            worker = self.pick_worker(task, manager.get_workers(), manager.daily_hours)
            if worker is None:
                logger.debug(f"No capacity left for task {task.id}")
                continue
            manager.assign_task_to_worker(task.id, worker.id)
            assigned += 1

        logger.info(
            f"Generated {len(workers)} workers and {len(tasks)} tasks, {assigned} assigned."
        )
        return (
            [manager.get_worker(w.id) for w in workers],
            [manager.get_task(t.id) for t in tasks],
        )
