"""Root CLI group for metamint with global flags and command registration."""

from __future__ import annotations

import click

from metamint import __version__
from metamint.commands import register_commands
from metamint.commands._context import AppContext
from metamint.config.settings import MetamintSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="metamint")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option("--account", default=None, help="Signer account for mint transactions.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    account: str | None,
) -> None:
    """metamint — publish policy metadata and mint ledger tokens for it."""
    ctx.ensure_object(dict)
    settings = MetamintSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
        account=account,
    )
    app = AppContext(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
