"""Backup command."""

import click

from vicebank.cli.runner import run


@click.command("backup")
@click.pass_context
def backup(ctx):
    """Write timestamped copies of every data file to <data-path>/backup."""
    stores = ctx.obj["stores"]

    count = run(stores.backup())
    if count == 0:
        click.echo("Nothing to back up: data is kept in memory.")
        return
    click.echo(f"Backed up {count} data files.")


def register_commands(cli):
    """Register backup command with main CLI."""
    cli.add_command(backup)
