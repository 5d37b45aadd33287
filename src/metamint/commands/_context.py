"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides lazy session initialization and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from metamint.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from metamint.config.settings import MetamintSettings
    from metamint.infrastructure.session import IssuerSession
    from metamint.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The session is created on first use so ``--help`` and ``--version``
    never open the cache or contact a node.
    """

    def __init__(self, settings: MetamintSettings) -> None:
        self.settings = settings
        self._session: IssuerSession | None = None

        from metamint.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from metamint.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def session(self) -> IssuerSession:
        """The issuer session (created lazily on first access)."""
        if self._session is None:
            from metamint.infrastructure.session import IssuerSession

            self._session = IssuerSession(self.settings)
        return self._session

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout. Warnings go to stderr so they don't
          pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
