"""Command: show the default signer account."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from metamint.commands._base import MintCommand
from metamint.services.publication import PublicationService

if TYPE_CHECKING:
    from metamint.commands._context import AppContext


@click.command(cls=MintCommand)
@click.pass_obj
def account(app: AppContext) -> None:
    """Show the account mint transactions are sent from."""
    app.emit(PublicationService(app.session).account())
