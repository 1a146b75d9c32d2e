"""Task and task deposit commands."""

import click

from vicebank.cli.date_filters import period_flags, period_options, resolve_cli_date_range
from vicebank.cli.error_handling import handle_domain_error
from vicebank.cli.runner import format_tokens, page_options, run
from vicebank.domain.entities import Task
from vicebank.domain.frequency import Frequency, frequency_from_string
from vicebank.utils.date_parser import format_zoned_datetime, parse_entry_datetime


@click.group()
def task_group():
    """Manage recurring tasks."""
    pass


@task_group.command("add")
@click.argument("vb_user_id", metavar="VB_USER_ID")
@click.argument("name")
@click.option(
    "--frequency",
    default=Frequency.DAILY.value,
    show_default=True,
    help="How often the task can earn tokens (daily, weekly, monthly)",
)
@click.option("--tokens-per", type=float, default=1, show_default=True, help="Tokens earned per period")
@click.pass_context
def add_task(ctx, vb_user_id: str, name: str, frequency: str, tokens_per: float):
    """Add a recurring task.

    Only the first completion in each period earns tokens.

    Examples:
        vicebank task add <vb-user-id> "Make bed" --frequency daily --tokens-per 0.5
    """
    service = ctx.obj["service"]

    try:
        task = Task(
            id="",
            vb_user_id=vb_user_id,
            name=name,
            frequency=frequency_from_string(frequency),
            tokens_per=tokens_per,
        )
        task = run(service.add_task(task))
        click.echo(f"Created {task.frequency.value} task '{task.name}' (ID: {task.id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@task_group.command("list")
@click.argument("vb_user_id", metavar="VB_USER_ID")
@page_options
@click.pass_context
def list_tasks(ctx, vb_user_id: str, page: int, pagination: int):
    """List a vice bank user's tasks."""
    service = ctx.obj["service"]

    tasks = run(service.list_tasks(vb_user_id, page, pagination))
    if not tasks:
        click.echo("No tasks found.")
        return

    click.echo("\nTasks:")
    click.echo("-" * 60)
    for task in tasks:
        click.echo(
            f"ID: {task.id} | {task.name:20s} | {task.frequency.value:8s} | "
            f"Tokens: {format_tokens(task.tokens_per)}"
        )


@click.group()
def task_deposit_group():
    """Log task completions."""
    pass


@task_deposit_group.command("add")
@click.argument("task_id", metavar="TASK_ID")
@click.option("--date", help="Completion date (ISO-8601, or 'now', 'today', 'yesterday'); defaults to now")
@click.pass_context
def add_task_deposit(ctx, task_id: str, date: str | None):
    """Record that a task was completed."""
    service = ctx.obj["service"]

    try:
        deposit_date = parse_entry_datetime(date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        task_deposit = run(service.deposit_for_task(task_id, deposit_date))
        result = run(service.add_task_deposit(task_deposit))
        click.echo(f"Completed '{task_deposit.task_name}' (ID: {result.entry.id})")
        if result.tokens_added == 0:
            click.echo(f"Already completed this {task_deposit.frequency.value} period, no tokens earned")
        click.echo(
            f"Earned {format_tokens(result.tokens_added)} tokens, "
            f"balance {format_tokens(result.user.current_tokens)}"
        )
    except ValueError as e:
        handle_domain_error(ctx, e)


@task_deposit_group.command("list")
@click.argument("vb_user_id", metavar="VB_USER_ID")
@click.option("--task", "task_id", help="Only show completions of this task ID")
@period_options
@page_options
@click.pass_context
def list_task_deposits(
    ctx,
    vb_user_id: str,
    task_id: str | None,
    start_date: str | None,
    end_date: str | None,
    this_week: bool,
    this_month: bool,
    last_week: bool,
    last_month: bool,
    page: int,
    pagination: int,
):
    """List a vice bank user's task completions, oldest first."""
    service = ctx.obj["service"]

    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=period_flags(
            this_week=this_week,
            this_month=this_month,
            last_week=last_week,
            last_month=last_month,
        ),
    )

    task_deposits = run(
        service.list_task_deposits(vb_user_id, page, pagination, start, end, task_id)
    )
    if not task_deposits:
        click.echo("No task deposits found.")
        return

    click.echo("\nTask deposits:")
    click.echo("-" * 80)
    for task_deposit in task_deposits:
        click.echo(
            f"{format_zoned_datetime(task_deposit.date)} | {task_deposit.task_name:20s} | "
            f"Tokens: {format_tokens(task_deposit.tokens_earned)} | ID: {task_deposit.id}"
        )


def register_commands(cli):
    """Register task commands with CLI."""
    cli.add_command(task_group, name="task")
    cli.add_command(task_deposit_group, name="task-deposit")
