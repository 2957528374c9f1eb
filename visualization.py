"""
Charts and spreadsheet reports for the crew workload and task queue.
"""
import os
from typing import IO, Optional, Sequence, Union

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from models import Priority, Task, Worker, format_timestamp
from utils.logger import logger


def _save_figure(fig: plt.Figure, filename: Optional[str], label: str) -> None:
    if not filename:
        return
    directory = os.path.dirname(filename)
    if directory:
        os.makedirs(directory, exist_ok=True)
    fig.savefig(filename, dpi=150, bbox_inches="tight")
    logger.info(f"{label} saved as {filename}")


def plot_worker_load(
    workers: Sequence[Worker],
    daily_hours: float = 8.0,
    filename: Optional[str] = None,
) -> plt.Figure:
    """
    Horizontal bar chart of booked hours per worker against the daily capacity.

    Args:
        workers: Workers to plot
        daily_hours: Capacity line position
        filename: File to save the plot (None to skip saving)

    Returns:
        plt.Figure: The chart, for ``st.pyplot`` or further styling
    """
    fig, ax = plt.subplots(figsize=(10, max(2.5, 0.6 * len(workers) + 1)))

    if not workers:
        ax.text(0.5, 0.5, "No workers yet", ha="center", va="center", transform=ax.transAxes)
        ax.set_axis_off()
        return fig

    labels = [f"{w.name} ({w.id})" for w in workers]
    booked = np.array([w.total_assigned_hours for w in workers], dtype=float)
    colors = plt.cm.viridis(np.linspace(0.2, 0.8, len(workers)))
    # Unavailable workers are drawn faded
    alphas = [0.9 if w.availability else 0.35 for w in workers]

    for i, (value, color, alpha) in enumerate(zip(booked, colors, alphas)):
        ax.barh(i, value, color=color, alpha=alpha, edgecolor="black", height=0.6)
        ax.text(value + 0.1, i, f"{value:g}h", va="center", ha="left", fontsize=9)

    ax.axvline(x=daily_hours, color="red", linestyle="--", linewidth=1.5, label="Daily capacity")
    ax.set_yticks(range(len(workers)))
    ax.set_yticklabels(labels)
    ax.invert_yaxis()
    ax.set_xlim(0, daily_hours + 1)
    ax.set_xlabel("Booked hours")
    ax.set_title("Crew Workload")
    ax.legend(loc="lower right")
    ax.grid(axis="x", linestyle="--", alpha=0.3)
    fig.tight_layout()

    _save_figure(fig, filename, "Workload chart")
    return fig


def plot_priority_breakdown(
    tasks: Sequence[Task], filename: Optional[str] = None
) -> plt.Figure:
    """Count of tasks per priority, split by status."""
    sns.set_theme(style="whitegrid")
    fig, ax = plt.subplots(figsize=(8, 4))

    frame = pd.DataFrame(
        [{"Priority": t.priority, "Status": t.status} for t in tasks],
        columns=["Priority", "Status"],
    )
    if frame.empty:
        ax.text(0.5, 0.5, "No tasks yet", ha="center", va="center", transform=ax.transAxes)
        ax.set_axis_off()
        return fig

    sns.countplot(
        data=frame,
        x="Priority",
        hue="Status",
        order=list(Priority.ALL),
        hue_order=["unassigned", "assigned", "completed"],
        palette="viridis",
        ax=ax,
    )
    ax.set_title("Tasks by Priority")
    ax.set_xlabel("Priority")
    ax.set_ylabel("Tasks")
    fig.tight_layout()

    _save_figure(fig, filename, "Priority chart")
    return fig


def export_to_excel(
    filename: Union[str, IO[bytes]],
    workers: Sequence[Worker],
    tasks: Sequence[Task],
    daily_hours: float = 8.0,
) -> bool:
    """
    Export the roster, task queue and workload summary to an Excel workbook.

    Args:
        filename: Path or binary file object to write the workbook to
        workers: Worker snapshot
        tasks: Task snapshot
        daily_hours: Capacity per worker

    Returns:
        bool: True if export successful
    """
    wb = Workbook()

    header_fill = PatternFill(start_color="D0D0D0", end_color="D0D0D0", fill_type="solid")
    header_font = Font(bold=True)
    center_align = Alignment(horizontal="center")

    def style_header(sheet) -> None:
        for cell in sheet[1]:
            cell.fill = header_fill
            cell.font = header_font
            cell.alignment = center_align

    # Workers sheet
    ws1 = wb.active
    ws1.title = "Workers"
    ws1.append(["Worker ID", "Name", "Available", "Booked Hrs", "Free Hrs"])
    style_header(ws1)

    for w in workers:
        ws1.append([
            w.id,
            w.name,
            "Yes" if w.availability else "No",
            w.total_assigned_hours,
            w.remaining_hours(daily_hours),
        ])

    # Tasks sheet
    ws2 = wb.create_sheet("Tasks")
    ws2.append(["TaskID", "Description", "Priority", "EstHrs", "Deadline", "AssignedTo", "Created", "Status"])
    style_header(ws2)

    for t in tasks:
        ws2.append([
            t.id,
            t.description,
            t.priority,
            t.time_estimate,
            t.deadline.strftime("%Y-%m-%d"),
            t.assigned_to or "",
            format_timestamp(t.created_at),
            t.status,
        ])

    # Workload sheet
    ws3 = wb.create_sheet("Workload")
    ws3.append(["WorkerID", "Open Tasks", "Completed Tasks", "Booked Hrs", "Capacity", "Utilization %"])
    style_header(ws3)

    for w in workers:
        open_tasks = sum(1 for t in tasks if t.assigned_to == w.id and not t.completed)
        done_tasks = sum(1 for t in tasks if t.assigned_to == w.id and t.completed)
        utilization_pct = round(w.total_assigned_hours / daily_hours * 100, 1) if daily_hours else 0
        ws3.append([
            w.id,
            open_tasks,
            done_tasks,
            w.total_assigned_hours,
            daily_hours,
            f"{utilization_pct}%",
        ])

    total_booked = sum(w.total_assigned_hours for w in workers)
    total_capacity = daily_hours * len(workers)
    ws3.append([
        "TOTAL",
        sum(1 for t in tasks if t.assigned_to and not t.completed),
        sum(1 for t in tasks if t.assigned_to and t.completed),
        total_booked,
        total_capacity,
        f"{round(total_booked / total_capacity * 100, 1) if total_capacity else 0}%",
    ])

    for cell in ws3[len(workers) + 2]:
        cell.font = Font(bold=True)

    # Adjust column widths for better readability
    for sheet in wb.worksheets:
        for col in sheet.columns:
            max_len = 0
            col_letter = get_column_letter(col[0].column)
            for cell in col:
                val = cell.value
                if val is not None:
                    max_len = max(max_len, len(str(val)))
            sheet.column_dimensions[col_letter].width = max_len + 2

    if isinstance(filename, str):
        directory = os.path.dirname(filename)
        if directory:
            os.makedirs(directory, exist_ok=True)

    try:
        wb.save(filename)
    except OSError as e:
        logger.error(f"Error saving Excel report: {e}")
        return False

    if isinstance(filename, str):
        logger.info(f"Excel report saved as '{filename}'")
    return True
