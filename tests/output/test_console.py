"""Tests for the Rich console factory."""

from metamint.output.console import create_console, get_output, style_for_status


def test_console_renders_to_buffer() -> None:
    console = create_console()
    console.print("[mint.ok]OK[/]")
    assert get_output(console) == "OK\n"


def test_style_for_known_status() -> None:
    assert style_for_status("Published") == "mint.status.Published"
    assert style_for_status("Draft") == "mint.status.Draft"


def test_style_for_other_status() -> None:
    assert style_for_status("Claimed") == ""
    assert style_for_status(None) == ""
