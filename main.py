# Directory: main.py
"""
Command-line entry point for the workforce manager.
"""
import argparse
import json
import os
import sys
from datetime import datetime, timezone
from typing import List, Optional

from analysis.export import export_filename
from analysis.queries import SORT_OPTIONS, TASK_STATUSES
from config import AppConfig
from exceptions.custom_errors import WorkforceError, error_title
from models import Priority
from text_viz import render_metrics, render_tasks, render_workers
from utils.generators import DataGenerator
from utils.logger import logger, setup_logger
from workforce import WorkforceManager


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """
    Load configuration from file or use defaults.

    Args:
        config_path: Path to configuration file

    Returns:
        AppConfig: Application configuration
    """
    if config_path and os.path.exists(config_path):
        try:
            with open(config_path, "r") as f:
                config_dict = json.load(f)
            return AppConfig.from_dict(config_dict)
        except (OSError, ValueError, TypeError) as e:
            logger.error(f"Error loading config from {config_path}: {e}")
            logger.info("Using default configuration.")
            return AppConfig()
    else:
        return AppConfig()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Cleaning crew workforce manager"
    )
    parser.add_argument("--config", help="Path to configuration file")
    parser.add_argument("--data-dir", help="Directory holding the JSON snapshot")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Set the logging level",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("workers", help="List workers and their load")

    tasks = commands.add_parser("tasks", help="List tasks")
    tasks.add_argument("--search", help="Match description, task id or worker id")
    tasks.add_argument("--status", choices=TASK_STATUSES, default="all")
    tasks.add_argument("--priority", choices=("all",) + Priority.ALL, default="all")
    tasks.add_argument("--sort", choices=SORT_OPTIONS, default="none")

    add_worker = commands.add_parser("add-worker", help="Add a crew member")
    add_worker.add_argument("name")

    add_task = commands.add_parser("add-task", help="Create a task")
    add_task.add_argument("description")
    add_task.add_argument("--priority", choices=Priority.ALL, default=Priority.MEDIUM)
    add_task.add_argument("--hours", type=float, default=1.0, help="Time estimate in hours")
    add_task.add_argument("--deadline", required=True, help="Deadline as YYYY-MM-DD")
    add_task.add_argument("--assign", metavar="WORKER_ID", help="Assign right after creating")

    assign = commands.add_parser("assign", help="Assign a task to a worker")
    assign.add_argument("task_id")
    assign.add_argument("worker_id")

    unassign = commands.add_parser("unassign", help="Take a task away from its worker")
    unassign.add_argument("task_id")

    complete = commands.add_parser("complete", help="Mark a task completed")
    complete.add_argument("task_id")

    availability = commands.add_parser("availability", help="Mark a worker available or not")
    availability.add_argument("worker_id")
    availability.add_argument("state", choices=("on", "off"))

    export = commands.add_parser("export", help="Export tasks")
    export.add_argument("--format", choices=("csv", "xlsx"), default="csv")
    export.add_argument("--output", help="Output file (CSV goes to stdout if omitted)")

    commands.add_parser("stats", help="Show dashboard metrics")

    demo = commands.add_parser("demo", help="Add generated demo workers and tasks")
    demo.add_argument("--workers", type=int, default=5)
    demo.add_argument("--tasks", type=int, default=12)

    return parser


def run_command(args: argparse.Namespace, manager: WorkforceManager) -> None:
    """Dispatch one parsed command against an initialized manager."""
    if args.command == "workers":
        print(render_workers(manager.get_workers(), manager.daily_hours))

    elif args.command == "tasks":
        tasks = manager.get_task_view(args.search, args.status, args.priority, args.sort)
        print(render_tasks(tasks, manager.get_workers()))

    elif args.command == "add-worker":
        worker = manager.add_worker(args.name)
        print(f"Crew member {worker.name} added (ID {worker.id})")

    elif args.command == "add-task":
        task = manager.add_task(args.description, args.priority, args.hours, args.deadline)
        if args.assign:
            manager.assign_task_to_worker(task.id, args.assign)
            print(f"Task {task.id} created and assigned to {args.assign}")
        else:
            print(f"Task {task.id} created")

    elif args.command == "assign":
        result = manager.assign_task_to_worker(args.task_id, args.worker_id)
        print(
            f"Task {result.task.id} assigned to {result.worker.name} "
            f"({result.worker.total_assigned_hours:g}h / {manager.daily_hours:g}h booked)"
        )

    elif args.command == "unassign":
        result = manager.unassign_task(args.task_id)
        print(f"Task {result.task.id} unassigned")

    elif args.command == "complete":
        result = manager.complete_task(args.task_id)
        print(f"Task {result.task.id} completed")

    elif args.command == "availability":
        worker = manager.update_worker_availability(args.worker_id, args.state == "on")
        print(f"{worker.name} is now {'available' if worker.availability else 'unavailable'}")

    elif args.command == "export":
        today = manager.clock().date()
        if args.format == "xlsx":
            output = args.output or os.path.join("output", f"tasks_{today.isoformat()}.xlsx")
            if not manager.export_to_excel(output):
                raise WorkforceError(f"Could not write {output}")
            print(f"Excel report saved to {output}")
        elif args.output:
            with open(args.output, "w", encoding="utf-8", newline="") as f:
                f.write(manager.export_to_csv())
            print(f"Tasks exported to {args.output}")
        else:
            sys.stdout.write(manager.export_to_csv())
            logger.debug(f"Suggested file name: {export_filename(today)}")

    elif args.command == "stats":
        print(render_metrics(manager.get_metrics()))

    elif args.command == "demo":
        generator = DataGenerator(seed=manager.config.seed)
        workers, tasks = generator.generate_scenario(
            manager, args.workers, args.tasks, manager.clock().date()
        )
        print(f"Added {len(workers)} workers and {len(tasks)} tasks")


def main(argv: Optional[List[str]] = None) -> int:
    """Main application entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config)
    if args.data_dir:
        config.storage.data_dir = args.data_dir

    # stdout is reserved for command output such as CSV
    setup_logger(level=args.log_level or config.log_level, stream=sys.stderr)

    manager = WorkforceManager(config, clock=lambda: datetime.now(timezone.utc))

    try:
        manager.initialize_data()
        run_command(args, manager)
    except WorkforceError as e:
        print(f"{error_title(e)}: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
