"""Command group: schema inspection and replacement."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

import click

from metamint.commands._base import MintGroup
from metamint.services.publication import PublicationService

if TYPE_CHECKING:
    from metamint.commands._context import AppContext


@click.group(
    cls=MintGroup,
    examples="""\
  metamint schema fields
  metamint schema load policy-schema.json""",
)
def schema() -> None:
    """Inspect or replace the field schema."""


@schema.command()
@click.pass_obj
def fields(app: AppContext) -> None:
    """List field names, widget types, and descriptions."""
    app.emit(PublicationService(app.session).fields())


@schema.command(
    examples="""\
  metamint schema load policy-schema.json"""
)
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
def load(app: AppContext, path: Path) -> None:
    """Replace the schema from a JSON file and cache it as a draft."""
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except ValueError as exc:
        raise click.BadParameter(f"{path} is not valid JSON: {exc}", param_hint="PATH") from exc

    svc = PublicationService(app.session)
    result = svc.set_schema(raw)
    if not result.ok:
        app.emit(result)
        return
    app.emit(svc.save({}))
