"""Action commands."""

import click

from vicebank.cli.error_handling import handle_domain_error
from vicebank.cli.runner import format_tokens, page_options, run
from vicebank.domain.entities import Action


@click.group()
def action_group():
    """Manage actions that convert deposits into tokens."""
    pass


@action_group.command("add")
@click.argument("vb_user_id", metavar="VB_USER_ID")
@click.argument("name")
@click.option("--unit", "conversion_unit", required=True, help="Unit deposits are logged in (e.g. 'minutes')")
@click.option("--deposits-per", type=float, default=1, show_default=True, help="Units per conversion")
@click.option("--tokens-per", type=float, default=1, show_default=True, help="Tokens earned per conversion")
@click.option("--min-deposit", type=float, default=0, show_default=True, help="Smallest quantity per deposit")
@click.option("--max-deposit", type=float, help="Largest quantity per deposit")
@click.pass_context
def add_action(
    ctx,
    vb_user_id: str,
    name: str,
    conversion_unit: str,
    deposits_per: float,
    tokens_per: float,
    min_deposit: float,
    max_deposit: float | None,
):
    """Add an action.

    Every DEPOSITS_PER units deposited earn TOKENS_PER tokens.

    Examples:
        vicebank action add <vb-user-id> "Walk" --unit minutes --deposits-per 15 --tokens-per 0.25
    """
    service = ctx.obj["service"]

    if deposits_per <= 0:
        click.echo("Error: --deposits-per must be greater than zero", err=True)
        ctx.exit(1)

    action = Action(
        id="",
        vb_user_id=vb_user_id,
        name=name,
        conversion_unit=conversion_unit,
        deposits_per=deposits_per,
        tokens_per=tokens_per,
        min_deposit=min_deposit,
        max_deposit=max_deposit,
    )

    try:
        action = run(service.add_action(action))
        click.echo(f"Created action '{action.name}' (ID: {action.id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@action_group.command("list")
@click.argument("vb_user_id", metavar="VB_USER_ID")
@page_options
@click.pass_context
def list_actions(ctx, vb_user_id: str, page: int, pagination: int):
    """List a vice bank user's actions."""
    service = ctx.obj["service"]

    actions = run(service.list_actions(vb_user_id, page, pagination))
    if not actions:
        click.echo("No actions found.")
        return

    click.echo("\nActions:")
    click.echo("-" * 60)
    for action in actions:
        click.echo(
            f"ID: {action.id} | {action.name:20s} | "
            f"{format_tokens(action.deposits_per)} {action.conversion_unit} = "
            f"{format_tokens(action.tokens_per)} tokens"
        )


@action_group.command("delete")
@click.argument("action_id", metavar="ACTION_ID")
@click.pass_context
def delete_action(ctx, action_id: str):
    """Delete an action.

    Deposits already made against it are kept.
    """
    service = ctx.obj["service"]

    try:
        action = run(service.delete_action(action_id))
        click.echo(f"Deleted action '{action.name}'")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register action commands with CLI."""
    cli.add_command(action_group, name="action")
