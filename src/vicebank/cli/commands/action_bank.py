"""Action bank commands."""

import click

from vicebank.cli.error_handling import handle_domain_error
from vicebank.cli.runner import format_tokens, page_options, run
from vicebank.domain.action_bank import ActionBankService
from vicebank.domain.entities import (
    ActionBankPurchasePrice,
    DepositConversion,
)
from vicebank.storage.factories import create_action_bank_stores
from vicebank.utils.date_parser import format_zoned_datetime, parse_entry_datetime


@click.group()
@click.pass_context
def action_bank_group(ctx):
    """Manage the action bank.

    Stored according to ACTION_BANK_SERVER_TYPE and ACTION_BANK_FILE_PATH.
    """
    ctx.ensure_object(dict)
    if ctx.invoked_subcommand is not None:
        stores = run(create_action_bank_stores())
        ctx.obj["action_bank"] = ActionBankService(stores)


@action_bank_group.command("user-create")
@click.argument("name")
@click.option("--tokens", type=float, default=0, help="Starting token balance")
@click.pass_context
def create_user(ctx, name: str, tokens: float):
    """Create an action bank user."""
    service = ctx.obj["action_bank"]

    try:
        user = run(service.create_user(name, tokens))
        click.echo(f"Created action bank user '{user.name}' (ID: {user.id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@action_bank_group.command("user-list")
@page_options
@click.pass_context
def list_users(ctx, page: int, pagination: int):
    """List action bank users."""
    service = ctx.obj["action_bank"]

    users = run(service.list_users(page, pagination))
    if not users:
        click.echo("No action bank users found.")
        return

    click.echo("\nAction bank users:")
    click.echo("-" * 60)
    for user in users:
        click.echo(
            f"ID: {user.id} | {user.name:20s} | Tokens: {format_tokens(user.current_tokens)}"
        )


@action_bank_group.command("conversion-add")
@click.argument("user_id", metavar="USER_ID")
@click.argument("name")
@click.option("--rate-name", required=True, help="Unit of the rate (e.g. 'minutes')")
@click.option("--deposits-per", type=float, default=1, show_default=True, help="Units per conversion")
@click.option("--tokens-per", type=float, default=1, show_default=True, help="Tokens earned per conversion")
@click.option("--min-deposit", type=float, default=0, show_default=True, help="Smallest quantity per deposit")
@click.option("--max-deposit", type=float, required=True, help="Largest quantity per deposit")
@click.pass_context
def add_conversion(
    ctx,
    user_id: str,
    name: str,
    rate_name: str,
    deposits_per: float,
    tokens_per: float,
    min_deposit: float,
    max_deposit: float,
):
    """Add a deposit conversion for an action bank user."""
    service = ctx.obj["action_bank"]

    if deposits_per <= 0:
        click.echo("Error: --deposits-per must be greater than zero", err=True)
        ctx.exit(1)

    conversion = DepositConversion(
        id="",
        user_id=user_id,
        name=name,
        rate_name=rate_name,
        deposits_per=deposits_per,
        tokens_per=tokens_per,
        min_deposit=min_deposit,
        max_deposit=max_deposit,
    )

    try:
        conversion = run(service.create_conversion(conversion))
        click.echo(f"Created deposit conversion '{conversion.name}' (ID: {conversion.id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@action_bank_group.command("conversion-list")
@click.argument("user_id", metavar="USER_ID")
@page_options
@click.pass_context
def list_conversions(ctx, user_id: str, page: int, pagination: int):
    """List a user's deposit conversions."""
    service = ctx.obj["action_bank"]

    conversions = run(service.list_conversions(user_id, page, pagination))
    if not conversions:
        click.echo("No deposit conversions found.")
        return

    click.echo("\nDeposit conversions:")
    click.echo("-" * 60)
    for conversion in conversions:
        click.echo(
            f"ID: {conversion.id} | {conversion.name:20s} | "
            f"{format_tokens(conversion.deposits_per)} {conversion.rate_name} = "
            f"{format_tokens(conversion.tokens_per)} tokens"
        )


@action_bank_group.command("conversion-delete")
@click.argument("conversion_id", metavar="CONVERSION_ID")
@click.pass_context
def delete_conversion(ctx, conversion_id: str):
    """Delete a deposit conversion."""
    service = ctx.obj["action_bank"]

    try:
        conversion = run(service.delete_conversion(conversion_id))
        click.echo(f"Deleted deposit conversion '{conversion.name}'")
    except ValueError as e:
        handle_domain_error(ctx, e)


@action_bank_group.command("deposit")
@click.argument("conversion_id", metavar="CONVERSION_ID")
@click.argument("quantity", type=float)
@click.option("--date", help="Deposit date (ISO-8601, or 'now', 'today', 'yesterday'); defaults to now")
@click.pass_context
def add_deposit(ctx, conversion_id: str, quantity: float, date: str | None):
    """Deposit QUANTITY units against a deposit conversion."""
    service = ctx.obj["action_bank"]

    try:
        deposit_date = parse_entry_datetime(date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        deposit = run(service.deposit_for_conversion(conversion_id, quantity, deposit_date))
        result = run(service.add_deposit(deposit))
        click.echo(
            f"Deposited {format_tokens(quantity)} to '{deposit.deposit_conversion_name}' "
            f"(ID: {result.entry.id})"
        )
        click.echo(
            f"Earned {format_tokens(result.tokens_added)} tokens, "
            f"balance {format_tokens(result.user.current_tokens)}"
        )
    except ValueError as e:
        handle_domain_error(ctx, e)


@action_bank_group.command("deposit-list")
@click.argument("user_id", metavar="USER_ID")
@click.option("--conversion", "conversion_id", help="Only show deposits for this conversion ID")
@page_options
@click.pass_context
def list_deposits(ctx, user_id: str, conversion_id: str | None, page: int, pagination: int):
    """List a user's action bank deposits, oldest first."""
    service = ctx.obj["action_bank"]

    deposits = run(
        service.list_deposits(user_id, page, pagination, conversion_id=conversion_id)
    )
    if not deposits:
        click.echo("No deposits found.")
        return

    click.echo(f"\n{'Date':<25} {'Conversion':<20} {'Quantity':>10} {'Tokens':>10}")
    click.echo("-" * 70)
    for deposit in deposits:
        click.echo(
            f"{format_zoned_datetime(deposit.date):<25} "
            f"{deposit.deposit_conversion_name[:20]:<20} "
            f"{format_tokens(deposit.deposit_quantity):>10} "
            f"{format_tokens(deposit.tokens_earned):>10}"
        )


@action_bank_group.command("price-add")
@click.argument("user_id", metavar="USER_ID")
@click.argument("name")
@click.argument("price", type=float)
@click.pass_context
def add_purchase_price(ctx, user_id: str, name: str, price: float):
    """Add something an action bank user can spend tokens on."""
    service = ctx.obj["action_bank"]

    if price <= 0:
        click.echo("Error: Price must be greater than zero", err=True)
        ctx.exit(1)

    try:
        purchase_price = run(
            service.add_purchase_price(
                ActionBankPurchasePrice(id="", user_id=user_id, name=name, price=price)
            )
        )
        click.echo(f"Created purchase price '{purchase_price.name}' (ID: {purchase_price.id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@action_bank_group.command("purchase")
@click.argument("price_id", metavar="PRICE_ID")
@click.option("--quantity", type=float, help="Tokens to spend; defaults to the listed price")
@click.option("--date", help="Purchase date (ISO-8601, or 'now', 'today', 'yesterday'); defaults to now")
@click.pass_context
def add_purchase(ctx, price_id: str, quantity: float | None, date: str | None):
    """Spend tokens at a purchase price. Fails if the balance cannot cover it."""
    service = ctx.obj["action_bank"]

    try:
        purchase_date = parse_entry_datetime(date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        price = run(service.get_purchase_price(price_id))
        purchase = run(service.purchase_for_price(price_id, purchase_date, quantity))
        result = run(service.add_purchase(purchase))
        click.echo(f"Purchased '{price.name}' (ID: {result.entry.id})")
        click.echo(
            f"Spent {format_tokens(purchase.purchased_quantity)} tokens, "
            f"balance {format_tokens(result.user.current_tokens)}"
        )
    except ValueError as e:
        handle_domain_error(ctx, e)


@action_bank_group.command("backup")
@click.pass_context
def backup(ctx):
    """Write timestamped copies of every action bank data file."""
    service = ctx.obj["action_bank"]

    count = run(service.stores.backup())
    if count == 0:
        click.echo("Nothing to back up: data is kept in memory.")
        return
    click.echo(f"Backed up {count} data files.")


def register_commands(cli):
    """Register action bank commands with CLI."""
    cli.add_command(action_bank_group, name="action-bank")
