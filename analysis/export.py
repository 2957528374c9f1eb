"""
Tabular export of the task collection.
"""
from datetime import date
from typing import Sequence

import pandas as pd

from models import Task, format_hours, format_timestamp

CSV_COLUMNS = [
    "id",
    "description",
    "priority",
    "timeEstimate",
    "deadline",
    "assignedTo",
    "createdAt",
    "completed",
]


def tasks_to_frame(tasks: Sequence[Task]) -> pd.DataFrame:
    """One string-valued row per task, columns in export order."""
    rows = [
        {
            "id": t.id,
            "description": t.description,
            "priority": t.priority,
            "timeEstimate": format_hours(t.time_estimate),
            "deadline": t.deadline.isoformat(),
            "assignedTo": t.assigned_to or "",
            "createdAt": format_timestamp(t.created_at),
            "completed": "true" if t.completed else "false",
        }
        for t in tasks
    ]
    return pd.DataFrame(rows, columns=CSV_COLUMNS, dtype=str)


def export_to_csv(tasks: Sequence[Task]) -> str:
    """
    Render tasks as CSV text with a header row.

    Values containing commas, quotes or line breaks are quoted and embedded
    quotes are doubled. Carriage returns are written as ``\\n``. Unassigned
    tasks get an empty ``assignedTo``.
    """
    frame = tasks_to_frame(tasks).replace(r"\r\n?", "\n", regex=True)
    return frame.to_csv(index=False, lineterminator="\n")


def export_filename(today: date) -> str:
    return f"tasks_{today.isoformat()}.csv"
