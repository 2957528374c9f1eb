"""
Plain-text tables and summaries for the command-line interface.
"""
from typing import Dict, Sequence

import pandas as pd

from analysis.metrics import task_table, worker_load_table
from models import Task, Worker

METRIC_LABELS = {
    "total_workers": "Total workers",
    "available_workers": "Available workers",
    "total_tasks": "Total tasks",
    "active_tasks": "Active tasks",
    "completed_tasks": "Completed tasks",
    "unassigned_tasks": "Unassigned (open)",
    "assigned_tasks": "Assigned",
    "high_priority_tasks": "High priority",
    "due_within_48h": "Due in 48h",
    "capacity_utilization": "Capacity utilization %",
    "workload_balance_ratio": "Workload balance (std/mean)",
}


def render_frame(frame: pd.DataFrame, empty_message: str) -> str:
    if frame.empty:
        return empty_message
    return frame.to_string(index=False)


def render_workers(workers: Sequence[Worker], daily_hours: float = 8.0) -> str:
    """Roster with booked and free hours per worker."""
    frame = worker_load_table(workers, daily_hours)
    frame["Available"] = frame["Available"].map({True: "yes", False: "no"})
    return render_frame(frame, "No workers found. Add some workers to get started.")


def render_tasks(tasks: Sequence[Task], workers: Sequence[Worker]) -> str:
    return render_frame(task_table(tasks, workers), "No tasks match your current filters.")


def render_metrics(metrics: Dict[str, float]) -> str:
    width = max(len(label) for label in METRIC_LABELS.values())
    lines = []
    for key, label in METRIC_LABELS.items():
        if key in metrics:
            lines.append(f"{label:<{width}}  {metrics[key]}")
    return "\n".join(lines)
