"""Tests for input validation and snapshot invariant checks."""

from datetime import date, datetime

import pytest

from exceptions.custom_errors import ValidationError
from models import Task, Worker, WorkforceSnapshot
from utils.validators import (
    find_snapshot_issues,
    parse_deadline,
    require_priority,
    require_text,
    require_time_estimate,
    validate_date,
)
from workforce import WorkforceManager


@pytest.mark.parametrize(
    "value,expected",
    [
        ("2025-01-15", True),
        ("2024-02-29", True),
        ("2025-02-30", False),
        ("2025-13-01", False),
        ("2025-1-5", False),
        ("15/01/2025", False),
        ("", False),
        (None, False),
        (20250115, False),
        (date(2025, 1, 15), True),
        (datetime(2025, 1, 15, 8, 0), False),
    ],
)
def test_validate_date(value, expected):
    assert validate_date(value) is expected


def test_manager_exposes_validate_date():
    assert WorkforceManager.validate_date("2030-06-01")
    assert not WorkforceManager.validate_date("tomorrow")


def test_parse_deadline():
    assert parse_deadline(" 2025-01-15 ") == date(2025, 1, 15)
    assert parse_deadline(date(2020, 5, 1)) == date(2020, 5, 1)
    with pytest.raises(ValidationError):
        parse_deadline("2025-02-30")


def test_require_text():
    assert require_text("  Mop  ", "Description") == "Mop"
    for bad in ("", "   ", None, 5):
        with pytest.raises(ValidationError, match="Description is required"):
            require_text(bad, "Description")


def test_require_text_normalizes_line_breaks():
    assert require_text("a\r\nb\rc\n", "Description") == "a\nb\nc"


def test_require_priority():
    assert require_priority("HIGH") == "high"
    assert require_priority("low") == "low"
    with pytest.raises(ValidationError):
        require_priority("urgent")
    with pytest.raises(ValidationError):
        require_priority(None)


@pytest.mark.parametrize("value,expected", [(1, 1.0), (0.5, 0.5), ("2.5", 2.5)])
def test_time_estimate_accepts_positive_numbers(value, expected):
    assert require_time_estimate(value) == expected


@pytest.mark.parametrize("value", [0, -1, float("nan"), float("inf"), "abc", None, True])
def test_time_estimate_rejects(value):
    with pytest.raises(ValidationError):
        require_time_estimate(value)


class TestSnapshotIssues:
    def snapshot(self, hours=3.0, next_worker_id=2, next_task_id=2, assigned_to="W001"):
        worker = Worker("W001", "Ana", True, hours)
        task = Task(
            "T001", "Mop", "low", 3.0, date(2025, 1, 2),
            datetime(2025, 1, 1), assigned_to=assigned_to,
        )
        return WorkforceSnapshot([worker], [task], next_worker_id, next_task_id)

    def test_clean_snapshot(self):
        assert find_snapshot_issues(self.snapshot()) == []

    def test_hours_mismatch(self):
        issues = find_snapshot_issues(self.snapshot(hours=1.0))
        assert len(issues) == 1
        assert "W001" in issues[0]

    def test_dangling_reference_and_lagging_counters(self):
        issues = find_snapshot_issues(
            self.snapshot(hours=0.0, next_worker_id=1, next_task_id=1, assigned_to="W009")
        )
        assert any("W009" in issue for issue in issues)
        assert any("nextWorkerId" in issue for issue in issues)
        assert any("nextTaskId" in issue for issue in issues)

    def test_over_capacity(self):
        assert find_snapshot_issues(self.snapshot(), daily_hours=2.0)

    def test_duplicate_ids(self):
        snapshot = self.snapshot()
        snapshot.workers.append(Worker("W001", "Ben", True, 0.0))
        snapshot.tasks.append(snapshot.tasks[0].copy())
        issues = find_snapshot_issues(snapshot)
        assert "Duplicate worker ids" in issues
        assert "Duplicate task ids" in issues
