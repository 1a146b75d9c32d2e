"""Vice bank user commands."""

import click

from vicebank.cli.error_handling import handle_domain_error
from vicebank.cli.runner import format_tokens, page_options, run


@click.group()
def user_group():
    """Manage vice bank users."""
    pass


@user_group.command("create")
@click.argument("owner", metavar="OWNER_ID")
@click.argument("name")
@click.option("--tokens", type=float, default=0, help="Starting token balance")
@click.pass_context
def create_user(ctx, owner: str, name: str, tokens: float):
    """Create a vice bank user for an account.

    Examples:
        vicebank user create acct-1 "Alice"
        vicebank user create acct-1 "Bob" --tokens 5
    """
    service = ctx.obj["service"]

    try:
        vb_user = run(service.create_user(owner, name, tokens))
        click.echo(f"Created vice bank user '{vb_user.name}' (ID: {vb_user.id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@user_group.command("list")
@click.argument("owner", metavar="OWNER_ID")
@page_options
@click.pass_context
def list_users(ctx, owner: str, page: int, pagination: int):
    """List an account's vice bank users."""
    service = ctx.obj["service"]

    users = run(service.list_users(owner, page, pagination))
    if not users:
        click.echo("No vice bank users found.")
        return

    click.echo("\nVice bank users:")
    click.echo("-" * 60)
    for vb_user in users:
        click.echo(
            f"ID: {vb_user.id} | {vb_user.name:20s} | Tokens: {format_tokens(vb_user.current_tokens)}"
        )


@user_group.command("show")
@click.argument("vb_user_id", metavar="VB_USER_ID")
@click.pass_context
def show_user(ctx, vb_user_id: str):
    """Show a vice bank user and their token balance."""
    service = ctx.obj["service"]

    try:
        vb_user = run(service.get_user(vb_user_id))
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Name: {vb_user.name}")
    click.echo(f"Owner: {vb_user.user_id}")
    click.echo(f"Tokens: {format_tokens(vb_user.current_tokens)}")


def register_commands(cli):
    """Register user commands with CLI."""
    cli.add_command(user_group, name="user")
