"""Tests for the assignment engine through the public manager."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from exceptions.custom_errors import (
    CapacityError,
    NotFoundError,
    PersistenceError,
    StateError,
    ValidationError,
)
from store.backends import MemoryStorage
from utils.validators import find_snapshot_issues
from workforce import WorkforceManager


def assert_consistent(manager):
    assert find_snapshot_issues(manager.store.snapshot(), manager.daily_hours) == []


class TestAddWorker:
    def test_creates_available_worker_with_no_hours(self, manager):
        worker = manager.add_worker("Ana")
        assert worker.id == "W001"
        assert worker.name == "Ana"
        assert worker.availability is True
        assert worker.total_assigned_hours == 0

    def test_name_is_trimmed(self, manager):
        assert manager.add_worker("  Ben  ").name == "Ben"

    def test_ids_are_sequential(self, manager):
        ids = [manager.add_worker(name).id for name in ["A", "B", "C"]]
        assert ids == ["W001", "W002", "W003"]

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_rejects_blank_name(self, manager, name):
        with pytest.raises(ValidationError):
            manager.add_worker(name)
        assert manager.get_workers() == []
        assert manager.store.next_worker_id == 1

    def test_returns_copy(self, manager):
        worker = manager.add_worker("Ana")
        worker.name = "Changed"
        assert manager.get_worker("W001").name == "Ana"


class TestAddTask:
    def test_creates_unassigned_task(self, manager, clock):
        task = manager.add_task("Clean lobby", "high", 5, "2025-01-01")
        assert task.id == "T001"
        assert task.assigned_to is None
        assert task.completed is False
        assert task.created_at == clock()
        assert task.deadline.isoformat() == "2025-01-01"

    def test_priority_is_normalized(self, manager):
        assert manager.add_task("Mop", "HIGH", 1, "2025-01-01").priority == "high"

    def test_accepts_fractional_hours(self, manager):
        assert manager.add_task("Dust", "low", 0.5, "2025-01-01").time_estimate == 0.5

    @pytest.mark.parametrize(
        "description,priority,hours,deadline",
        [
            ("", "high", 1, "2025-01-01"),
            ("   ", "high", 1, "2025-01-01"),
            ("Mop", "urgent", 1, "2025-01-01"),
            ("Mop", "high", 0, "2025-01-01"),
            ("Mop", "high", -2, "2025-01-01"),
            ("Mop", "high", "lots", "2025-01-01"),
            ("Mop", "high", 1, "2025-02-30"),
            ("Mop", "high", 1, "01/02/2025"),
            ("Mop", "high", 1, ""),
        ],
    )
    def test_rejects_invalid_input(self, manager, description, priority, hours, deadline):
        with pytest.raises(ValidationError):
            manager.add_task(description, priority, hours, deadline)
        assert manager.get_tasks() == []
        assert manager.store.next_task_id == 1

    def test_past_deadline_is_allowed(self, manager):
        assert manager.add_task("Mop", "low", 1, "2001-01-01").deadline.year == 2001


class TestCapacityScenario:
    def test_ana_cleans_the_lobby(self, manager, ana):
        task = manager.add_task("Clean lobby", "high", 5, "2025-01-01")

        result = manager.assign_task_to_worker(task.id, ana.id)
        assert result.task.assigned_to == ana.id
        assert result.worker.total_assigned_hours == 5
        assert manager.get_worker(ana.id).total_assigned_hours == 5

        second = manager.add_task("Wipe windows", "medium", 4, "2025-01-02")
        with pytest.raises(CapacityError):
            manager.assign_task_to_worker(second.id, ana.id)
        assert manager.get_task(second.id).assigned_to is None
        assert manager.get_worker(ana.id).total_assigned_hours == 5

        done = manager.complete_task(task.id)
        assert done.task.completed is True
        assert done.task.assigned_to == ana.id
        assert manager.get_worker(ana.id).total_assigned_hours == 0
        assert_consistent(manager)

    def test_missing_task_id(self, manager, ana):
        with pytest.raises(NotFoundError):
            manager.assign_task_to_worker("T999", "W001")

    def test_missing_worker_id(self, manager):
        task = manager.add_task("Mop", "low", 1, "2025-01-01")
        with pytest.raises(NotFoundError):
            manager.assign_task_to_worker(task.id, "W042")

    def test_exactly_full_day_is_allowed(self, manager, ana):
        first = manager.add_task("A", "high", 5, "2025-01-01")
        second = manager.add_task("B", "high", 3, "2025-01-01")
        manager.assign_task_to_worker(first.id, ana.id)
        result = manager.assign_task_to_worker(second.id, ana.id)
        assert result.worker.total_assigned_hours == 8

    def test_half_hours_add_up_to_full_day(self, manager, ana):
        for i in range(16):
            task = manager.add_task(f"Spot clean {i}", "low", 0.5, "2025-01-01")
            manager.assign_task_to_worker(task.id, ana.id)
        assert manager.get_worker(ana.id).total_assigned_hours == 8
        extra = manager.add_task("One more", "low", 0.5, "2025-01-01")
        with pytest.raises(CapacityError):
            manager.assign_task_to_worker(extra.id, ana.id)

    def test_oversized_task_never_fits(self, manager, ana):
        task = manager.add_task("Whole building", "high", 9, "2025-01-01")
        with pytest.raises(CapacityError):
            manager.assign_task_to_worker(task.id, ana.id)

    def test_unavailable_worker_is_rejected(self, manager, ana):
        manager.update_worker_availability(ana.id, False)
        task = manager.add_task("Mop", "low", 1, "2025-01-01")
        with pytest.raises(CapacityError):
            manager.assign_task_to_worker(task.id, ana.id)
        assert manager.get_worker(ana.id).total_assigned_hours == 0


class TestStateTransitions:
    def test_direct_reassignment_is_rejected(self, manager, ana):
        ben = manager.add_worker("Ben")
        task = manager.add_task("Mop", "low", 2, "2025-01-01")
        manager.assign_task_to_worker(task.id, ana.id)
        with pytest.raises(StateError):
            manager.assign_task_to_worker(task.id, ben.id)
        assert manager.get_task(task.id).assigned_to == ana.id
        assert manager.get_worker(ben.id).total_assigned_hours == 0

    def test_two_step_reassignment(self, manager, ana):
        ben = manager.add_worker("Ben")
        task = manager.add_task("Mop", "low", 2, "2025-01-01")
        manager.assign_task_to_worker(task.id, ana.id)
        manager.unassign_task(task.id)
        manager.assign_task_to_worker(task.id, ben.id)
        assert manager.get_worker(ana.id).total_assigned_hours == 0
        assert manager.get_worker(ben.id).total_assigned_hours == 2
        assert_consistent(manager)

    def test_unassign_then_assign_restores_hours(self, manager, ana):
        first = manager.add_task("A", "high", 3, "2025-01-01")
        second = manager.add_task("B", "high", 2.5, "2025-01-01")
        manager.assign_task_to_worker(first.id, ana.id)
        manager.assign_task_to_worker(second.id, ana.id)
        before = manager.get_worker(ana.id).total_assigned_hours

        result = manager.unassign_task(second.id)
        assert result.task.assigned_to is None
        assert result.worker.total_assigned_hours == 3

        manager.assign_task_to_worker(second.id, ana.id)
        assert manager.get_worker(ana.id).total_assigned_hours == before

    def test_unassign_unassigned_task(self, manager):
        task = manager.add_task("Mop", "low", 1, "2025-01-01")
        with pytest.raises(StateError):
            manager.unassign_task(task.id)

    def test_unassign_missing_task(self, manager):
        with pytest.raises(NotFoundError):
            manager.unassign_task("T404")

    def test_unassign_completed_task(self, manager, ana):
        task = manager.add_task("Mop", "low", 1, "2025-01-01")
        manager.assign_task_to_worker(task.id, ana.id)
        manager.complete_task(task.id)
        with pytest.raises(StateError):
            manager.unassign_task(task.id)

    def test_complete_twice(self, manager, ana):
        task = manager.add_task("Mop", "low", 1, "2025-01-01")
        manager.assign_task_to_worker(task.id, ana.id)
        manager.complete_task(task.id)
        with pytest.raises(StateError):
            manager.complete_task(task.id)

    def test_complete_unassigned_task_is_rejected(self, manager):
        task = manager.add_task("Mop", "low", 1, "2025-01-01")
        with pytest.raises(StateError):
            manager.complete_task(task.id)
        assert manager.get_task(task.id).completed is False

    def test_complete_missing_task(self, manager):
        with pytest.raises(NotFoundError):
            manager.complete_task("T001")

    def test_assign_completed_task(self, manager, ana):
        ben = manager.add_worker("Ben")
        task = manager.add_task("Mop", "low", 1, "2025-01-01")
        manager.assign_task_to_worker(task.id, ana.id)
        manager.complete_task(task.id)
        with pytest.raises(StateError):
            manager.assign_task_to_worker(task.id, ben.id)


class TestAvailability:
    def test_toggle(self, manager, ana):
        assert manager.update_worker_availability(ana.id, False).availability is False
        assert manager.get_available_workers() == []
        assert manager.update_worker_availability(ana.id, True).availability is True

    def test_unavailable_keeps_existing_tasks(self, manager, ana):
        task = manager.add_task("Mop", "low", 3, "2025-01-01")
        manager.assign_task_to_worker(task.id, ana.id)
        manager.update_worker_availability(ana.id, False)
        assert manager.get_task(task.id).assigned_to == ana.id
        assert manager.get_worker(ana.id).total_assigned_hours == 3
        manager.complete_task(task.id)
        assert manager.get_worker(ana.id).total_assigned_hours == 0

    def test_missing_worker(self, manager):
        with pytest.raises(NotFoundError):
            manager.update_worker_availability("W123", False)


class FailingStorage(MemoryStorage):
    def __init__(self, error):
        super().__init__()
        self.error = error
        self.failing = False

    def save(self, key, payload):
        if self.failing:
            raise self.error
        super().save(key, payload)


class TestWriteThrough:
    def test_every_mutation_is_saved(self, manager, storage):
        worker = manager.add_worker("Ana")
        task = manager.add_task("Mop", "low", 1, "2025-01-01")
        manager.assign_task_to_worker(task.id, worker.id)
        manager.complete_task(task.id)
        manager.update_worker_availability(worker.id, False)
        assert storage.save_count == 5

        saved = storage.load(manager.config.storage.key)
        assert saved["nextWorkerId"] == 2
        assert saved["nextTaskId"] == 2
        assert saved["tasks"][0]["completed"] is True
        assert saved["workers"][0]["availability"] is False

    def test_failed_validation_is_not_saved(self, manager, storage):
        with pytest.raises(ValidationError):
            manager.add_worker("")
        assert storage.save_count == 0

    @pytest.mark.parametrize(
        "error",
        [PersistenceError("disk full"), OSError("disk full"), RuntimeError("connection reset")],
    )
    def test_save_failure_rolls_back(self, config, clock, error):
        storage = FailingStorage(error)
        manager = WorkforceManager(config, backend=storage, clock=clock)
        ana = manager.add_worker("Ana")
        task = manager.add_task("Mop", "low", 2, "2025-01-01")

        storage.failing = True
        with pytest.raises(PersistenceError):
            manager.assign_task_to_worker(task.id, ana.id)
        with pytest.raises(PersistenceError):
            manager.add_worker("Ben")

        assert manager.get_worker(ana.id).total_assigned_hours == 0
        assert manager.get_task(task.id).assigned_to is None
        assert [w.id for w in manager.get_workers()] == ["W001"]
        assert manager.store.next_worker_id == 2
        saved = storage.load(manager.config.storage.key)
        assert saved["tasks"][0]["assignedTo"] is None
        assert saved["workers"][0]["totalAssignedHours"] == 0

        storage.failing = False
        assert manager.add_worker("Ben").id == "W002"


class TestSnapshots:
    def test_reads_do_not_expose_internal_state(self, manager, ana):
        workers = manager.get_workers()
        workers[0].total_assigned_hours = 7
        workers.clear()
        assert manager.get_worker(ana.id).total_assigned_hours == 0
        assert len(manager.get_workers()) == 1

    def test_ids_unique_across_many_creations(self, manager):
        for i in range(30):
            manager.add_worker(f"Worker {i}")
            manager.add_task(f"Task {i}", "low", 1, "2025-01-01")
        worker_ids = [w.id for w in manager.get_workers()]
        task_ids = [t.id for t in manager.get_tasks()]
        assert len(set(worker_ids)) == 30
        assert len(set(task_ids)) == 30
        assert worker_ids[-1] == "W030"


class TestSharedManager:
    def test_concurrent_assignments_respect_capacity(self, manager, ana):
        tasks = [manager.add_task(f"Job {i}", "low", 1, "2025-01-01") for i in range(20)]

        def assign(task_id):
            try:
                manager.assign_task_to_worker(task_id, ana.id)
                return True
            except CapacityError:
                return False

        with ThreadPoolExecutor(max_workers=8) as pool:
            outcomes = list(pool.map(assign, [t.id for t in tasks]))

        assert outcomes.count(True) == 8
        assert manager.get_worker(ana.id).total_assigned_hours == 8
        assert_consistent(manager)

    def test_concurrent_adds_get_unique_ids(self, manager, storage):
        with ThreadPoolExecutor(max_workers=8) as pool:
            workers = list(pool.map(manager.add_worker, [f"Crew {i}" for i in range(40)]))

        assert len({w.id for w in workers}) == 40
        assert manager.store.next_worker_id == 41
        assert len(storage.load(manager.config.storage.key)["workers"]) == 40
