"""Helpers shared by the command modules."""

import asyncio
from typing import Any, Awaitable, Callable, TypeVar

import click

from vicebank.domain.queries import DEFAULT_PAGE, DEFAULT_PAGINATION

T = TypeVar("T")


def run(coroutine: Awaitable[T]) -> T:
    """Run a store or service coroutine from a synchronous click command."""
    return asyncio.run(coroutine)


def page_options(command: Callable[..., Any]) -> Callable[..., Any]:
    """Add --page and --pagination options to a list command."""
    command = click.option(
        "--pagination",
        type=click.IntRange(min=1),
        default=DEFAULT_PAGINATION,
        show_default=True,
        help="Items per page",
    )(command)
    command = click.option(
        "--page",
        type=click.IntRange(min=1),
        default=DEFAULT_PAGE,
        show_default=True,
        help="Page number, starting at 1",
    )(command)
    return command


def format_tokens(tokens: float) -> str:
    return f"{tokens:g}"
