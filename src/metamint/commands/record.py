"""Commands on the published record: show, get, save."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from metamint.commands._base import MintCommand
from metamint.domain.status import PolicyStatus
from metamint.services.publication import PublicationService

if TYPE_CHECKING:
    from metamint.commands._context import AppContext


def parse_assignments(
    _ctx: click.Context | None, _param: click.Parameter | None, value: tuple[str, ...]
) -> dict[str, str]:
    """Turn repeated ``field=value`` options into an ordered mapping."""
    values: dict[str, str] = {}
    for item in value:
        name, sep, field_value = item.partition("=")
        if not sep or not name.strip():
            raise click.BadParameter(f"{item!r} is not in field=value form")
        values[name.strip()] = field_value
    return values


@click.command(
    cls=MintCommand,
    examples="""\
  metamint show
  metamint --json show""",
)
@click.pass_obj
def show(app: AppContext) -> None:
    """Show the working descriptor (cached snapshot or the default schema)."""
    app.emit(PublicationService(app.session).current())


@click.command(
    cls=MintCommand,
    examples="""\
  metamint get
  metamint --json get""",
)
@click.pass_obj
def get(app: AppContext) -> None:
    """Show the cached snapshot."""
    app.emit(PublicationService(app.session).get())


@click.command(
    cls=MintCommand,
    examples="""\
  metamint save -s name=PolicyA -s carrier="Acme Re"
  metamint save -s status=Underwritten
  metamint save -s name=PolicyA --publish
  metamint --account 0xAbC... save -s status=Published""",
)
@click.option(
    "-s",
    "--set",
    "assignments",
    multiple=True,
    callback=parse_assignments,
    help="Field assignment field=value (repeatable).",
)
@click.option(
    "--publish",
    is_flag=True,
    help="Shorthand for -s status=Published: store content and mint a token.",
)
@click.option("--wait", is_flag=True, help="Wait for an in-flight publish instead of failing.")
@click.pass_obj
def save(app: AppContext, assignments: dict[str, str], publish: bool, wait: bool) -> None:
    """Save field values; publishes when status becomes Published."""
    if publish:
        assignments["status"] = PolicyStatus.PUBLISHED.value
    if not assignments:
        raise click.UsageError("Nothing to save: pass -s field=value or --publish.")
    app.emit(PublicationService(app.session).publish(assignments, wait=wait))
