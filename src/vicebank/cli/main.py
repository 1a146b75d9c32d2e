"""Main CLI entry point."""

import logging

import click

from vicebank.config import FILE_STORAGE, MEMORY_STORAGE, StorageConfiguration, log_configuration
from vicebank.domain.vice_bank import ViceBankService
from vicebank.logging import setup_logging
from vicebank.storage.factories import create_vice_bank_stores
from vicebank.cli.runner import run

# Import and register all commands at module level
from vicebank.cli.commands import (
    user,
    action,
    deposit,
    task,
    purchase,
    backup,
    action_bank,
)

logger = logging.getLogger(__name__)


@click.group()
@click.option(
    "--storage",
    type=click.Choice([FILE_STORAGE, MEMORY_STORAGE], case_sensitive=False),
    default=MEMORY_STORAGE,
    show_default=True,
    help="Where to keep vice bank data (overrides VICE_BANK_SERVER_TYPE)",
    envvar="VICE_BANK_SERVER_TYPE",
)
@click.option(
    "--data-path",
    type=click.Path(file_okay=False),
    help="Directory for vice bank data files (overrides VICE_BANK_FILE_PATH)",
    envvar="VICE_BANK_FILE_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx, storage: str, data_path: str | None, verbose: bool):
    """Vice bank - Token ledger for habits and rewards.

    Log deposits against actions and tasks to earn tokens, then spend them
    on purchases. Data is kept in memory unless --storage file and
    --data-path are given.
    """
    ctx.ensure_object(dict)

    log_config = log_configuration()
    if verbose:
        setup_logging(logging.DEBUG)
    elif log_config.console:
        setup_logging(log_config.level)

    # Load stores only when actually running a command (not when showing help)
    if ctx.invoked_subcommand is not None:
        configuration = StorageConfiguration(storage_type=storage.lower(), file_path=data_path)
        if configuration.storage_type == FILE_STORAGE and not configuration.is_file:
            logger.warning("File storage requested without a data path, using memory")

        stores = run(create_vice_bank_stores(configuration))
        ctx.obj["stores"] = stores
        ctx.obj["service"] = ViceBankService(stores)


# Register all commands
user.register_commands(cli)
action.register_commands(cli)
deposit.register_commands(cli)
task.register_commands(cli)
purchase.register_commands(cli)
backup.register_commands(cli)
action_bank.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
