"""Typer CLI entrypoint."""

from __future__ import annotations

import typer

from ctrlattr.core.display_devices import (
    count_number_of_bits,
    display_device_mask_to_name,
    display_device_name_to_mask,
    expand_display_device_mask_wildcards,
)
from ctrlattr.core.errors import CtrlAttrError
from ctrlattr.core.model import INVALID_DISPLAY_DEVICE_MASK, ParsedAttribute, ParserMode, ValueType
from ctrlattr.core.service import AttributeService
from ctrlattr.core.token_pairs import split_token_value_pairs

app = typer.Typer(help="Parse and inspect display control attribute strings")


def _build_service(display: str | None = None) -> AttributeService:
    service = AttributeService(default_display=display)
    for warning in getattr(service, "load_warnings", ()):
        typer.echo(f"Warning: {warning}", err=True)
    return service


def _format_value(record: ParsedAttribute) -> str:
    if record.value is None or record.attr_entry is None:
        return "<none>"
    value = record.value.scaled(record.attr_entry.int_flags)
    if record.value.type is ValueType.FLOAT_RANGE:
        low, high = value
        return f"{low:g}-{high:g}"
    if record.value.type is ValueType.SDI_CSC:
        return ", ".join(f"{item:g}" for item in value)
    if record.attr_entry.int_flags.is_display_mask:
        return f"0x{value:08x} ({display_device_mask_to_name(value) or 'none'})"
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


def _echo_record(text: str, record: ParsedAttribute) -> None:
    entry = record.attr_entry
    if entry is None:
        return
    typer.echo(f"{text.strip()}: {entry.name} (id {entry.attr}, {entry.type.value})")
    if record.has_x_display:
        typer.echo(f"  display: {record.display}")
    if record.target_specification is not None:
        typer.echo(f"  target: {record.target_specification}")
    elif record.has_target and record.target_type is not None:
        typer.echo(f"  target: {record.target_type.name.lower()}:{record.target_id}")
    if record.has_display_device:
        if record.display_device_mask == INVALID_DISPLAY_DEVICE_MASK:
            typer.echo(f"  display devices: {record.display_device_specification}")
        else:
            typer.echo(
                f"  display devices: {display_device_mask_to_name(record.display_device_mask)} "
                f"(0x{record.display_device_mask:08x})"
            )
    if record.has_value:
        typer.echo(f"  value: {_format_value(record)}")


def _run_parse(strings: list[str], mode: ParserMode, display: str | None) -> None:
    try:
        service = _build_service(display)
        for text in strings:
            try:
                record = service.parse(text, mode)
            except CtrlAttrError as exc:
                typer.echo(f"Error: '{text}': {exc}", err=True)
                raise typer.Exit(code=1) from None
            _echo_record(text, record)
    except CtrlAttrError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("query")
def query(
    strings: list[str] = typer.Argument(..., help="Attribute strings without a value"),
    display: str | None = typer.Option(None, "--display", help="Default X display"),
) -> None:
    """Parse attribute strings in query mode."""
    _run_parse(strings, ParserMode.QUERY, display)


@app.command("assign")
def assign(
    strings: list[str] = typer.Argument(..., help="Attribute strings of the form name=value"),
    display: str | None = typer.Option(None, "--display", help="Default X display"),
) -> None:
    """Parse attribute strings in assignment mode."""
    _run_parse(strings, ParserMode.ASSIGNMENT, display)


@app.command("attributes")
def list_attributes(
    value_type: str | None = typer.Option(None, "--type", help="integer, float, float_range, string or sdi_csc"),
) -> None:
    """List the attribute catalog."""
    try:
        selected = ValueType(value_type) if value_type else None
    except ValueError:
        typer.echo(f"Error: Unknown value type '{value_type}'", err=True)
        raise typer.Exit(code=1) from None

    try:
        service = _build_service()
        entries = service.list_attributes(selected)
        if not entries:
            typer.echo("No attributes found")
            raise typer.Exit(code=1)
        for entry in entries:
            typer.echo(f"{entry.name} ({entry.type.value}): {entry.desc}")
    except CtrlAttrError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("mask")
def mask(names: str = typer.Argument(..., help="Display devices, e.g. CRT-0,DFP")) -> None:
    """Convert display device names to a display device mask."""
    value = display_device_name_to_mask(names)
    if value == INVALID_DISPLAY_DEVICE_MASK:
        typer.echo(f"Error: Malformed display device identification '{names}'", err=True)
        raise typer.Exit(code=1)
    expanded = expand_display_device_mask_wildcards(value)
    typer.echo(f"mask: 0x{value:08x}")
    typer.echo(f"expanded: 0x{expanded:08x}")
    typer.echo(f"name: {display_device_mask_to_name(value)}")
    typer.echo(f"devices: {count_number_of_bits(expanded)}")


@app.command("tokens")
def tokens(
    text: str,
    separator: str = typer.Option(",", "--separator", help="Pair separator character"),
) -> None:
    """Split a token=value list and print one pair per line."""
    try:
        for token, value in split_token_value_pairs(text, separator):
            typer.echo(f"{token}={value}")
    except CtrlAttrError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


def run() -> None:
    app()


if __name__ == "__main__":
    run()
