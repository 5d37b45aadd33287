"""Subcommand modules for metamint.

Provides register_commands() which uses deferred imports to keep
``metamint --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group."""
    # --- Groups ---
    from metamint.commands.schema import schema
    from metamint.commands.token import token

    cli.add_command(schema)
    cli.add_command(token)

    # --- Standalone commands ---
    from metamint.commands.account import account
    from metamint.commands.record import get, save, show

    cli.add_command(show)
    cli.add_command(get)
    cli.add_command(save)
    cli.add_command(account)
