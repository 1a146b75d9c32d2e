"""Deposit commands."""

import click

from vicebank.cli.date_filters import period_flags, period_options, resolve_cli_date_range
from vicebank.cli.error_handling import handle_domain_error
from vicebank.cli.runner import format_tokens, page_options, run
from vicebank.utils.date_parser import format_zoned_datetime, parse_entry_datetime


@click.group()
def deposit_group():
    """Log deposits against actions."""
    pass


@deposit_group.command("add")
@click.argument("action_id", metavar="ACTION_ID")
@click.argument("quantity", type=float)
@click.option("--date", help="Deposit date (ISO-8601, or 'now', 'today', 'yesterday'); defaults to now")
@click.pass_context
def add_deposit(ctx, action_id: str, quantity: float, date: str | None):
    """Deposit QUANTITY units against an action.

    The action's current conversion rate is stored with the deposit.

    Examples:
        vicebank deposit add <action-id> 30
        vicebank deposit add <action-id> 45 --date 2024-01-15T07:30:00
    """
    service = ctx.obj["service"]

    try:
        deposit_date = parse_entry_datetime(date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        deposit = run(service.deposit_for_action(action_id, quantity, deposit_date))
        result = run(service.add_deposit(deposit))
        click.echo(
            f"Deposited {format_tokens(quantity)} {deposit.conversion_unit} of "
            f"'{deposit.action_name}' (ID: {result.entry.id})"
        )
        click.echo(
            f"Earned {format_tokens(result.tokens_added)} tokens, "
            f"balance {format_tokens(result.user.current_tokens)}"
        )
    except ValueError as e:
        handle_domain_error(ctx, e)


@deposit_group.command("list")
@click.argument("vb_user_id", metavar="VB_USER_ID")
@click.option("--action", "action_id", help="Only show deposits for this action ID")
@period_options
@page_options
@click.pass_context
def list_deposits(
    ctx,
    vb_user_id: str,
    action_id: str | None,
    start_date: str | None,
    end_date: str | None,
    this_week: bool,
    this_month: bool,
    last_week: bool,
    last_month: bool,
    page: int,
    pagination: int,
):
    """List a vice bank user's deposits, oldest first."""
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

    deposits = run(
        service.list_deposits(vb_user_id, page, pagination, start, end, action_id)
    )
    if not deposits:
        click.echo("No deposits found.")
        return

    click.echo("\nDeposits:")
    click.echo("-" * 80)
    for deposit in deposits:
        click.echo(
            f"{format_zoned_datetime(deposit.date)} | {deposit.action_name:20s} | "
            f"{format_tokens(deposit.deposit_quantity)} {deposit.conversion_unit} | "
            f"Tokens: {format_tokens(deposit.tokens_earned)} | ID: {deposit.id}"
        )


@deposit_group.command("delete")
@click.argument("deposit_id", metavar="DEPOSIT_ID")
@click.pass_context
def delete_deposit(ctx, deposit_id: str):
    """Delete a deposit and remove its tokens from the balance."""
    service = ctx.obj["service"]

    try:
        result = run(service.delete_deposit(deposit_id))
        click.echo(f"Deleted deposit {deposit_id}")
        click.echo(
            f"Removed {format_tokens(-result.tokens_added)} tokens, "
            f"balance {format_tokens(result.user.current_tokens)}"
        )
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register deposit commands with CLI."""
    cli.add_command(deposit_group, name="deposit")
