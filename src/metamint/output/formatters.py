"""Rich/JSON output helpers.

The CLI renders ServiceResult for humans (Rich tables) or machines
(--json). Descriptors get a field table; everything else is rendered
as indented key-value pairs.
"""

from __future__ import annotations

import json as _json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from rich.markup import escape
from rich.table import Table

from metamint.output.console import create_console, get_output, style_for_status

if TYPE_CHECKING:
    from rich.console import Console

    from metamint.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    """Output switches derived from global CLI flags."""

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    no_color: bool = False


def _render_descriptor(console: Console, descriptor: dict[str, Any]) -> None:
    table = Table(title=descriptor.get("title"), show_header=True, header_style="bold")
    table.add_column("field", style="mint.key")
    table.add_column("type")
    table.add_column("value")
    for name, spec in descriptor.get("properties", {}).items():
        value = spec.get("value")
        style = style_for_status(value) if name == "status" else ""
        table.add_row(
            escape(name),
            spec.get("fieldType", ""),
            escape(value or ""),
            style=style or None,
        )
    console.print(table)
    address = descriptor.get("contentAddress")
    console.print(f"  contentAddress: [mint.address]{escape(address or '-')}[/]")


def _render_data(console: Console, data: dict[str, Any]) -> None:
    for key, value in data.items():
        if key == "descriptor" and isinstance(value, dict):
            _render_descriptor(console, value)
        elif isinstance(value, (dict, list)):
            compact = _json.dumps(value, separators=(",", ":"))
            console.print(f"  [mint.key]{key}:[/] {escape(compact)}")
        else:
            console.print(f"  [mint.key]{key}:[/] {escape(str(value))}")


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display."""
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)

    console = create_console(no_color=settings.no_color)
    if result.ok:
        console.print(f"[mint.ok]OK[/]: [mint.op]{result.op}[/]")
        if result.data and not settings.quiet:
            _render_data(console, result.data)
        if settings.verbose and result.meta:
            console.print(f"  [mint.key]meta:[/] {escape(_json.dumps(result.meta, default=str))}")
    else:
        message = result.error.message if result.error else "Unknown error"
        code = result.error.code if result.error else "ERROR"
        console.print(
            f"[mint.error]ERROR[/]: [mint.op]{result.op}[/] - {escape(code)}: {escape(message)}"
        )
        if result.error and result.error.detail and not settings.quiet:
            for key, value in result.error.detail.items():
                console.print(f"  [mint.key]{key}:[/] {escape(str(value))}")
    return get_output(console).rstrip("\n")
