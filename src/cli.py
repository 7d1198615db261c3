"""Command-line interface for the task manager.

Every invocation runs exactly one command: load the store, apply the
command, save (only when something changed), print the result. Errors
raised anywhere below are turned into a message and an exit status by
TaskGroup.invoke.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple

import click
import structlog

from config import resolve_store_path
from errors import TaskManagerError, TaskNotFoundError
from log_config import configure_logging
from manager import TaskManager
from models import Task, TaskStatus
from storage import Storage
from theme import color, status_label, BOLD, ERROR_COLOR, HEADER_COLOR, ID_COLOR

__version__ = "0.1.0"

log = structlog.get_logger(__name__)

LIST_RULE = '-' * 80
DETAIL_RULE = '-' * 50

STATUS_CHOICES = {s.value.lower(): s for s in TaskStatus}


@dataclass
class AppContext:
    storage: Storage

    def load(self) -> TaskManager:
        return self.storage.load()

    def save(self, manager: TaskManager) -> None:
        self.storage.save(manager)


class TaskGroup(click.Group):
    """click group that maps TaskManagerError to stderr + exit status."""

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except TaskManagerError as exc:
            log.info("command.failed", error=type(exc).__name__, **exc.details)
            click.echo(color(f"Error: {exc}", ERROR_COLOR), err=True)
            ctx.exit(exc.exit_code)


def _join(words: Tuple[str, ...]) -> str:
    return ' '.join(words).strip()


def _print_help_summary() -> None:
    click.echo(color("Task Manager", HEADER_COLOR, BOLD))
    click.echo("Use 'taskmanager --help' to see every available option")
    click.echo("\nMain commands:")
    click.echo("  add <description>      Add a new task")
    click.echo("  list                   List all tasks")
    click.echo("  complete <id>          Mark a task as completed")
    click.echo("  pending <id>           Mark a task as pending again")
    click.echo("  cancel <id>            Cancel a task")
    click.echo("  remove <id>            Remove a task permanently")
    click.echo("  show <id>              Show the details of a task")
    click.echo("  update <id> <desc>     Replace the description of a task")


def _task_line(task: Task) -> str:
    return f"{color(f'ID: {task.id}', ID_COLOR)} | {status_label(task.status)} | {task.description}"


@click.group(cls=TaskGroup, invoke_without_command=True, context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-f", "--file", "store_file", metavar="PATH",
              help="Task store file (default: $TASKMANAGER_FILE or ./tasks.json).")
@click.option("-v", "--verbose", is_flag=True, help="Log debug events to stderr.")
@click.version_option(__version__, "-V", "--version", prog_name="taskmanager")
@click.pass_context
def cli(ctx: click.Context, store_file: Optional[str], verbose: bool) -> None:
    """A command-line task manager backed by a JSON file."""
    configure_logging(verbose=verbose)
    ctx.obj = AppContext(Storage(resolve_store_path(store_file)))
    if ctx.invoked_subcommand is None:
        _print_help_summary()


@cli.command()
@click.argument("description", nargs=-1, required=True)
@click.pass_obj
def add(app: AppContext, description: Tuple[str, ...]) -> None:
    """Add a new task."""
    text = _join(description)
    manager = app.load()
    tid = manager.add(text)
    app.save(manager)
    click.echo(f"Task added with ID: {tid}")
    click.echo(f"   Description: {text}")


@cli.command(name="list")
@click.option("-s", "--status", "status_name", type=click.Choice(sorted(STATUS_CHOICES), case_sensitive=False),
              help="Only list tasks with this status.")
@click.pass_obj
def list_tasks(app: AppContext, status_name: Optional[str]) -> None:
    """List all tasks with a summary of their statuses."""
    manager = app.load()
    tasks = manager.list()
    if not tasks:
        click.echo("No tasks recorded")
        return
    if status_name:
        tasks = manager.list_by_status(STATUS_CHOICES[status_name.lower()])
    click.echo(color("Task list:", HEADER_COLOR))
    click.echo(LIST_RULE)
    for task in tasks:
        click.echo(_task_line(task))
    click.echo(LIST_RULE)
    counts = manager.summary()
    click.echo(f"Summary: {counts[TaskStatus.PENDING]} pending | "
               f"{counts[TaskStatus.COMPLETED]} completed | "
               f"{counts[TaskStatus.CANCELED]} canceled")


def _status_command(name: str, status: TaskStatus, confirmation: str, help_text: str) -> None:
    @cli.command(name=name, help=help_text)
    @click.argument("task_id", metavar="ID", type=int)
    @click.pass_obj
    def command(app: AppContext, task_id: int) -> None:
        manager = app.load()
        task = manager.set_status(task_id, status)
        app.save(manager)
        click.echo(confirmation.format(id=task_id))
        click.echo(f"   Description: {task.description}")


_status_command("complete", TaskStatus.COMPLETED, "Task {id} marked as completed", "Mark a task as completed.")
_status_command("pending", TaskStatus.PENDING, "Task {id} marked as pending", "Mark a task as pending.")
_status_command("cancel", TaskStatus.CANCELED, "Task {id} canceled", "Cancel a task.")


@cli.command()
@click.argument("task_id", metavar="ID", type=int)
@click.pass_obj
def remove(app: AppContext, task_id: int) -> None:
    """Remove a task permanently."""
    manager = app.load()
    task = manager.remove(task_id)
    if task is None:
        raise TaskNotFoundError(task_id)
    app.save(manager)
    click.echo(f"Task {task_id} permanently removed")
    click.echo(f"   Description: {task.description}")


@cli.command()
@click.argument("task_id", metavar="ID", type=int)
@click.pass_obj
def show(app: AppContext, task_id: int) -> None:
    """Show the details of a task."""
    manager = app.load()
    task = manager.get(task_id)
    if task is None:
        raise TaskNotFoundError(task_id)
    click.echo(color(f"Details of task {task_id}:", HEADER_COLOR))
    click.echo(DETAIL_RULE)
    click.echo(f"ID:          {task.id}")
    click.echo(f"Description: {task.description}")
    click.echo(f"Status:      {status_label(task.status)}")
    click.echo(f"Created:     {task.created_at}")
    click.echo(f"Updated:     {task.updated_at}")
    click.echo(DETAIL_RULE)


@cli.command()
@click.argument("task_id", metavar="ID", type=int)
@click.argument("description", nargs=-1, required=True)
@click.pass_obj
def update(app: AppContext, task_id: int, description: Tuple[str, ...]) -> None:
    """Replace the description of a task."""
    text = _join(description)
    manager = app.load()
    _, old_description = manager.update_description(task_id, text)
    app.save(manager)
    click.echo(f"Task {task_id} updated")
    click.echo(f"   Previous description: {old_description}")
    click.echo(f"   New description: {text}")
