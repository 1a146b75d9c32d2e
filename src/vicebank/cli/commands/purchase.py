"""Purchase price and purchase commands."""

import click

from vicebank.cli.date_filters import period_flags, period_options, resolve_cli_date_range
from vicebank.cli.error_handling import handle_domain_error
from vicebank.cli.runner import format_tokens, page_options, run
from vicebank.domain.entities import PurchasePrice
from vicebank.utils.date_parser import format_zoned_datetime, parse_entry_datetime


@click.group()
def purchase_price_group():
    """Manage things tokens can be spent on."""
    pass


@purchase_price_group.command("add")
@click.argument("vb_user_id", metavar="VB_USER_ID")
@click.argument("name")
@click.argument("price", type=float)
@click.pass_context
def add_purchase_price(ctx, vb_user_id: str, name: str, price: float):
    """Add a purchase price.

    Examples:
        vicebank purchase-price add <vb-user-id> "Dessert" 3
    """
    service = ctx.obj["service"]

    if price <= 0:
        click.echo("Error: Price must be greater than zero", err=True)
        ctx.exit(1)

    try:
        purchase_price = run(
            service.add_purchase_price(
                PurchasePrice(id="", vb_user_id=vb_user_id, name=name, price=price)
            )
        )
        click.echo(f"Created purchase price '{purchase_price.name}' (ID: {purchase_price.id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@purchase_price_group.command("list")
@click.argument("vb_user_id", metavar="VB_USER_ID")
@page_options
@click.pass_context
def list_purchase_prices(ctx, vb_user_id: str, page: int, pagination: int):
    """List a vice bank user's purchase prices."""
    service = ctx.obj["service"]

    prices = run(service.list_purchase_prices(vb_user_id, page, pagination))
    if not prices:
        click.echo("No purchase prices found.")
        return

    click.echo("\nPurchase prices:")
    click.echo("-" * 60)
    for purchase_price in prices:
        click.echo(
            f"ID: {purchase_price.id} | {purchase_price.name:20s} | "
            f"Price: {format_tokens(purchase_price.price)}"
        )


@click.group()
def purchase_group():
    """Spend tokens."""
    pass


@purchase_group.command("add")
@click.argument("price_id", metavar="PRICE_ID")
@click.option("--quantity", type=float, help="Tokens to spend; defaults to the listed price")
@click.option("--date", help="Purchase date (ISO-8601, or 'now', 'today', 'yesterday'); defaults to now")
@click.pass_context
def add_purchase(ctx, price_id: str, quantity: float | None, date: str | None):
    """Buy something at a purchase price.

    Fails if the balance cannot cover it.
    """
    service = ctx.obj["service"]

    try:
        purchase_date = parse_entry_datetime(date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        purchase = run(service.purchase_for_price(price_id, purchase_date, quantity))
        result = run(service.add_purchase(purchase))
        click.echo(f"Purchased '{purchase.purchased_name}' (ID: {result.entry.id})")
        click.echo(
            f"Spent {format_tokens(purchase.purchased_quantity)} tokens, "
            f"balance {format_tokens(result.user.current_tokens)}"
        )
    except ValueError as e:
        handle_domain_error(ctx, e)


@purchase_group.command("list")
@click.argument("vb_user_id", metavar="VB_USER_ID")
@click.option("--price", "price_id", help="Only show purchases at this purchase price ID")
@period_options
@page_options
@click.pass_context
def list_purchases(
    ctx,
    vb_user_id: str,
    price_id: str | None,
    start_date: str | None,
    end_date: str | None,
    this_week: bool,
    this_month: bool,
    last_week: bool,
    last_month: bool,
    page: int,
    pagination: int,
):
    """List a vice bank user's purchases, oldest first."""
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

    purchases = run(
        service.list_purchases(vb_user_id, page, pagination, start, end, price_id)
    )
    if not purchases:
        click.echo("No purchases found.")
        return

    click.echo("\nPurchases:")
    click.echo("-" * 80)
    for purchase in purchases:
        click.echo(
            f"{format_zoned_datetime(purchase.date)} | {purchase.purchased_name:20s} | "
            f"Spent: {format_tokens(purchase.purchased_quantity)} | ID: {purchase.id}"
        )


def register_commands(cli):
    """Register purchase commands with CLI."""
    cli.add_command(purchase_price_group, name="purchase-price")
    cli.add_command(purchase_group, name="purchase")
