# Directory: analysis/metrics.py
"""
Metrics calculation for the dashboard and task board.
"""
import numpy as np
import pandas as pd
from datetime import datetime, time, timedelta, timezone
from typing import Dict, Optional, Sequence

from models import Priority, Task, Worker
from utils.logger import logger


def compute_dashboard_metrics(
    workers: Sequence[Worker],
    tasks: Sequence[Task],
    now: Optional[datetime] = None,
    daily_hours: float = 8.0,
) -> Dict[str, float]:
    """
    Compute the summary numbers shown on the dashboard.

    Args:
        workers: Worker snapshot
        tasks: Task snapshot
        now: Reference time for the 48-hour deadline window
        daily_hours: Capacity per worker

    Returns:
        Dict of metric names to metric values
    """
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    active = [t for t in tasks if not t.completed]
    window_end = now + timedelta(hours=48)

    # Deadlines are whole days, taken as midnight UTC like a bare ISO date
    due_soon = [
        t
        for t in tasks
        if datetime.combine(t.deadline, time.min, tzinfo=timezone.utc) < window_end
    ]

    # 1. Capacity utilization (percent of total crew capacity booked)
    total_capacity = daily_hours * len(workers)
    booked = sum(w.total_assigned_hours for w in workers)
    capacity_utilization = (booked / total_capacity * 100) if total_capacity else 0.0

    # 2. Workload balance ratio (lower is better): std / mean of booked hours
    hours = np.array([w.total_assigned_hours for w in workers], dtype=float)
    mean_hours = hours.mean() if hours.size else 0.0
    workload_balance_ratio = float(hours.std() / mean_hours) if mean_hours else 0.0

    metrics = {
        "total_workers": len(workers),
        "available_workers": sum(1 for w in workers if w.availability),
        "total_tasks": len(tasks),
        "active_tasks": len(active),
        "completed_tasks": len(tasks) - len(active),
        "unassigned_tasks": sum(1 for t in active if t.assigned_to is None),
        "assigned_tasks": sum(1 for t in tasks if t.assigned_to is not None),
        "high_priority_tasks": sum(1 for t in tasks if t.priority == Priority.HIGH),
        "due_within_48h": len(due_soon),
        "capacity_utilization": round(capacity_utilization, 2),
        "workload_balance_ratio": round(workload_balance_ratio, 4),
    }
    logger.debug(f"Dashboard metrics: {metrics}")
    return metrics


def worker_load_table(workers: Sequence[Worker], daily_hours: float = 8.0) -> pd.DataFrame:
    """Per-worker booked and free hours, for tables and charts."""
    return pd.DataFrame(
        [
            {
                "ID": w.id,
                "Name": w.name,
                "Available": w.availability,
                "Booked (h)": w.total_assigned_hours,
                "Free (h)": w.remaining_hours(daily_hours),
                "Load %": round(w.total_assigned_hours / daily_hours * 100, 1)
                if daily_hours
                else 0.0,
            }
            for w in workers
        ],
        columns=["ID", "Name", "Available", "Booked (h)", "Free (h)", "Load %"],
    )


def task_table(tasks: Sequence[Task], workers: Sequence[Worker]) -> pd.DataFrame:
    """Tasks with the assigned worker's name resolved, for display."""
    names = {w.id: w.name for w in workers}
    return pd.DataFrame(
        [
            {
                "ID": t.id,
                "Description": t.description,
                "Priority": t.priority,
                "Hours": t.time_estimate,
                "Deadline": t.deadline.isoformat(),
                "Assigned To": f"{names.get(t.assigned_to, t.assigned_to)} ({t.assigned_to})"
                if t.assigned_to
                else "",
                "Status": t.status,
            }
            for t in tasks
        ],
        columns=["ID", "Description", "Priority", "Hours", "Deadline", "Assigned To", "Status"],
    )
