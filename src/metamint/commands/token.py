"""Command group: ledger token information."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from metamint.commands._base import MintGroup
from metamint.services.publication import PublicationService

if TYPE_CHECKING:
    from metamint.commands._context import AppContext


@click.group(
    cls=MintGroup,
    examples="""\
  metamint token info
  metamint --account 0xAbC... --json token info""",
)
def token() -> None:
    """Inspect the bound token contracts."""


@token.command()
@click.pass_obj
def info(app: AppContext) -> None:
    """Show token name, symbol, addresses, and the account's balance."""
    app.emit(PublicationService(app.session).token_info())
