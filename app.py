import io
import logging
import os
from datetime import date, datetime, timedelta, timezone
from typing import Optional

import streamlit as st

from analysis.export import export_filename
from analysis.metrics import task_table, worker_load_table
from analysis.queries import SORT_OPTIONS, TASK_STATUSES
from exceptions.custom_errors import WorkforceError, error_title
from main import load_config
from models import Priority
from utils.logger import setup_logger
from visualization import export_to_excel, plot_priority_breakdown, plot_worker_load
from workforce import WorkforceManager

# Set page config
st.set_page_config(
    page_title="Cleaning Business HQ",
    page_icon="🧽",
    layout="wide",
    initial_sidebar_state="expanded",
)

logger = setup_logger(level=logging.INFO)


@st.cache_resource
def get_manager(config_path: Optional[str] = None) -> WorkforceManager:
    """One manager per server process, shared by every browser session."""
    manager = WorkforceManager(load_config(config_path))
    manager.initialize_data()
    return manager


def flash(kind: str, message: str) -> None:
    st.session_state["flash"] = (kind, message)


def show_flash() -> None:
    kind, message = st.session_state.pop("flash", (None, None))
    if kind == "success":
        st.success(message)
    elif kind == "error":
        st.error(message)


def run_action(action, success_message: str) -> None:
    """Run an engine call, store the outcome as a flash message and redraw."""
    try:
        action()
        flash("success", success_message)
    except WorkforceError as e:
        flash("error", f"{error_title(e)}: {e}")
    st.rerun()


def render_task_actions(manager: WorkforceManager, tasks, key_prefix: str) -> None:
    available = manager.get_available_workers()
    workers = {w.id: w for w in manager.get_workers()}

    for task in tasks:
        cols = st.columns([1, 4, 1, 1, 1, 3, 1])
        cols[0].markdown(f"**{task.id}**")
        cols[1].write(task.description)
        cols[2].write(task.priority.upper())
        cols[3].write(f"{task.time_estimate:g}h")
        cols[4].write(task.deadline.isoformat())

        if task.completed:
            owner = workers.get(task.assigned_to)
            cols[5].write(f"Completed by {owner.name if owner else task.assigned_to}")
            continue

        if task.assigned_to:
            owner = workers.get(task.assigned_to)
            cols[5].write(f"Assigned to {owner.name if owner else task.assigned_to}")
            with cols[6]:
                if st.button("Unassign", key=f"{key_prefix}-unassign-{task.id}"):
                    run_action(lambda t=task.id: manager.unassign_task(t), "Task unassigned successfully")
                if st.button("Complete", key=f"{key_prefix}-complete-{task.id}"):
                    run_action(lambda t=task.id: manager.complete_task(t), "Task completed successfully")
        else:
            options = {
                f"{w.name} ({w.remaining_hours(manager.daily_hours):g}h free)": w.id
                for w in available
            }
            with cols[5]:
                choice = st.selectbox(
                    "Assign to",
                    ["Select worker..."] + list(options.keys()),
                    key=f"{key_prefix}-select-{task.id}",
                    label_visibility="collapsed",
                )
            with cols[6]:
                if st.button("Assign", key=f"{key_prefix}-assign-{task.id}", disabled=choice not in options):
                    worker_id = options[choice]
                    run_action(
                        lambda t=task.id, w=worker_id: manager.assign_task_to_worker(t, w),
                        "Task assigned successfully",
                    )


def dashboard_tab(manager: WorkforceManager) -> None:
    st.header("Dashboard")
    st.caption("Overview of your cleaning business operations")

    metrics = manager.get_metrics()
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Total Workers", metrics["total_workers"])
    col2.metric("Available Workers", metrics["available_workers"])
    col3.metric("Active Tasks", metrics["active_tasks"])
    col4.metric("Completed Tasks", metrics["completed_tasks"])

    st.subheader("Workers")
    workers = manager.get_workers()
    if not workers:
        st.info("No workers found. Add some workers to get started.")
    for worker in workers:
        cols = st.columns([1, 3, 2, 2, 2])
        cols[0].markdown(f"**{worker.id}**")
        cols[1].write(worker.name)
        cols[2].write("🟢 Available" if worker.availability else "🔴 Unavailable")
        cols[3].write(f"{worker.total_assigned_hours:g}h / {manager.daily_hours:g}h")
        label = "Mark Unavailable" if worker.availability else "Mark Available"
        if cols[4].button(label, key=f"toggle-{worker.id}"):
            run_action(
                lambda w=worker: manager.update_worker_availability(w.id, not w.availability),
                f"{worker.name} updated",
            )

    st.pyplot(plot_worker_load(workers, manager.daily_hours))

    st.subheader("Active Tasks")
    active = manager.get_task_view(status="active")
    if not active:
        st.info("No active tasks.")
    render_task_actions(manager, active, "dash")


def assign_tab(manager: WorkforceManager) -> None:
    st.header("Assignment Studio")
    available = manager.get_available_workers()
    workers = manager.get_workers()

    st.metric("Available Crew", len(available))
    st.progress(len(available) / max(len(workers), 1))

    col1, col2 = st.columns(2)

    with col1:
        with st.form("add-worker", clear_on_submit=True):
            st.subheader("Add New Worker")
            name = st.text_input("Worker name", placeholder="e.g. Naomi Adeyemi")
            if st.form_submit_button("Add Worker"):
                try:
                    worker = manager.add_worker(name)
                    flash("success", f"Crew member {worker.name} added (ID {worker.id})")
                except WorkforceError as e:
                    flash("error", f"{error_title(e)}: {e}")
                st.rerun()

    with col2:
        with st.form("add-task", clear_on_submit=True):
            st.subheader("Create Task")
            description = st.text_area(
                "Task description",
                placeholder="Describe the cleaning scope, access notes, standards...",
            )
            priority = st.selectbox("Priority", list(Priority.ALL), index=1)
            hours = st.number_input("Time estimate (hours)", min_value=0.5, step=0.5, value=1.0)
            deadline = st.date_input("Deadline", min_value=date.today())
            options = {"Do not assign yet": None}
            options.update({
                f"{w.name} - {w.remaining_hours(manager.daily_hours):g}h free": w.id
                for w in available
            })
            owner = st.selectbox("Assign to worker (optional)", list(options.keys()))
            if not available:
                st.caption("No capacity available. Add workers or free up hours.")

            if st.form_submit_button("Publish Task"):
                try:
                    task = manager.add_task(description, priority, hours, deadline)
                    worker_id = options[owner]
                    if worker_id:
                        manager.assign_task_to_worker(task.id, worker_id)
                        flash("success", f"Task “{task.description}” created and assigned to {worker_id}")
                    else:
                        flash("success", f"Task “{task.description}” created")
                except WorkforceError as e:
                    flash("error", f"{error_title(e)}: {e}")
                st.rerun()

    st.subheader(f"Current Workers ({len(workers)})")
    if workers:
        st.dataframe(worker_load_table(workers, manager.daily_hours), hide_index=True, use_container_width=True)
    else:
        st.info("Add your first worker to kick off scheduling.")


def tasks_tab(manager: WorkforceManager) -> None:
    st.header("Operational Workbench")

    col1, col2, col3, col4 = st.columns(4)
    query = col1.text_input("Search", placeholder="Search by task, ID, or worker...")
    sort_by = col2.selectbox("Sort", list(SORT_OPTIONS))
    status = col3.selectbox("Status", list(TASK_STATUSES))
    priority = col4.selectbox("Priority", ["all"] + list(Priority.ALL))

    tasks = manager.get_task_view(query, status, priority, sort_by)
    all_tasks = manager.get_tasks()
    metrics = manager.get_metrics()

    now = manager.clock()
    due_soon = [
        t
        for t in tasks
        if datetime.combine(t.deadline, datetime.min.time(), tzinfo=timezone.utc) - now
        < timedelta(hours=48)
    ]

    s1, s2, s3, s4, s5 = st.columns(5)
    s1.metric("Matching", len(tasks))
    s2.metric("Total Tasks", metrics["total_tasks"])
    s3.metric("Completed", metrics["completed_tasks"])
    s4.metric("Unassigned", metrics["unassigned_tasks"])
    s5.metric("Due in 48h", len(due_soon))

    today = now.date()
    d1, d2 = st.columns(2)
    d1.download_button(
        "Export CSV",
        data=manager.export_to_csv(),
        file_name=export_filename(today),
        mime="text/csv",
    )
    buffer = io.BytesIO()
    if export_to_excel(buffer, manager.get_workers(), all_tasks, manager.daily_hours):
        d2.download_button(
            "Export Excel",
            data=buffer.getvalue(),
            file_name=f"tasks_{today.isoformat()}.xlsx",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )

    if not tasks:
        if not all_tasks:
            st.info("No tasks found. Create assignments to populate the queue.")
        else:
            st.info("No tasks match your current filters.")
        return

    st.dataframe(task_table(tasks, manager.get_workers()), hide_index=True, use_container_width=True)
    with st.expander("Actions"):
        render_task_actions(manager, tasks, "board")
    st.pyplot(plot_priority_breakdown(tasks))


def main():
    st.title("Cleaning Business HQ")
    show_flash()

    try:
        manager = get_manager(os.environ.get("WORKFORCE_CONFIG"))
    except WorkforceError as e:
        st.error(f"{error_title(e)}: {e}")
        return

    tab1, tab2, tab3 = st.tabs(["Dashboard", "Assign Tasks", "View Tasks"])
    with tab1:
        dashboard_tab(manager)
    with tab2:
        assign_tab(manager)
    with tab3:
        tasks_tab(manager)

    st.sidebar.markdown("---")
    st.sidebar.header("About")
    st.sidebar.info(f"""
    Track the crew roster and the cleaning queue. Each worker can take up to
    {manager.daily_hours:g} hours of open tasks per day; completing a task frees its hours.
    """)


if __name__ == "__main__":
    main()
