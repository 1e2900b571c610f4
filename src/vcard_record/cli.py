from __future__ import annotations

import json
import logging
import tomllib
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .address_book import AddressBook
from .config import ensure_workspace
from .errors import VCardError
from .fields import SIMPLE_FIELD_NAMES
from .phones import format_phone_numbers
from .record import Record

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="vcard-record: build and re-emit single vCards.",
)
console = Console()
err_console = Console(stderr=True)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# ── Helpers ────────────────────────────────────────────────────────────────────

def _read_structured(source: Path) -> dict[str, Any]:
    text = source.read_text(encoding="utf-8")
    if source.suffix.lower() == ".toml":
        return tomllib.loads(text)
    return json.loads(text)


def _emit(record: Record, output: Path | None, region: str) -> None:
    if region:
        n = format_phone_numbers(record, region)
        if n:
            err_console.print(f"[dim]Reformatted {n} phone number(s) (region {region})[/dim]")
    try:
        if output is None:
            typer.echo(record.as_string(), nl=False)
            return
        record.as_file(output)
    except VCardError as exc:
        err_console.print(f"[bold red]{escape(str(exc))}[/bold red]")
        raise typer.Exit(code=1)
    err_console.print(f"[bold green]✓ Wrote {output}[/bold green]")


def _settings(prefer_v: str | None, region: str | None) -> tuple[str, str, str]:
    _, settings = ensure_workspace()
    return (
        prefer_v or settings.version,
        settings.prodid,
        settings.default_region if region is None else region,
    )


# ── Commands ───────────────────────────────────────────────────────────────────

@app.command()
def build(
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON or TOML contact data"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write to this .vcf instead of stdout"),
    prefer_v: str | None = typer.Option(None, help="Target vCard version (3.0 or 4.0)"),
    region: str | None = typer.Option(None, "--region", "-r", help="Reformat phones for this ISO-2 region"),
) -> None:
    """Build one vCard from structured contact data."""
    version, prodid, effective_region = _settings(prefer_v, region)
    try:
        record = Record(version=version, prodid=prodid).load_hashref(_read_structured(source))
    except VCardError as exc:
        err_console.print(f"[bold red]{escape(str(exc))}[/bold red]")
        raise typer.Exit(code=1)
    _emit(record, output, effective_region)


@app.command()
def normalize(
    card: Path = typer.Argument(..., exists=True, dir_okay=False, help=".vcf file (first card is used)"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write to this .vcf instead of stdout"),
    prefer_v: str | None = typer.Option(None, help="Target vCard version (3.0 or 4.0)"),
    region: str | None = typer.Option(None, "--region", "-r", help="Reformat phones for this ISO-2 region"),
) -> None:
    """Re-emit the first card of a .vcf file in canonical field order."""
    version, prodid, effective_region = _settings(prefer_v, region)
    record = Record(version=version, prodid=prodid).load_file(card)
    if record is None:
        err_console.print(f"[bold red]No vCard found in {card}[/bold red]")
        raise typer.Exit(code=2)
    _emit(record, output, effective_region)


@app.command()
def show(
    card: Path = typer.Argument(..., exists=True, dir_okay=False, help=".vcf file"),
) -> None:
    """Print the fields of the first card in a .vcf file."""
    book = AddressBook().load_file(card)
    if not book.vcards:
        err_console.print(f"[bold red]No vCard found in {card}[/bold red]")
        raise typer.Exit(code=2)
    if len(book) > 1:
        console.print(Panel(
            f"{card.name} holds [bold]{len(book)}[/bold] cards; only the first is shown.",
            border_style="yellow",
        ))

    record = book.vcards[0]
    t = Table(title=record.fullname or "Unnamed", show_lines=True)
    t.add_column("Field", style="cyan", no_wrap=True)
    t.add_column("Type", style="dim")
    t.add_column("Value", style="bold")
    for name in SIMPLE_FIELD_NAMES:
        value = record.get(name)
        if value:
            t.add_row(name, "", value)
    for phone in record.phones or []:
        t.add_row("phone", _tag_label(phone.types, phone.preferred), phone.number or "")
    for adr in record.addresses or []:
        t.add_row("address", _tag_label(adr.types, adr.preferred), ", ".join(p for p in adr.components() if p))
    for email in record.email_addresses or []:
        t.add_row("email", _tag_label(email.types, email.preferred), email.address or "")
    console.print(t)


def _tag_label(types: list[str], preferred: bool | None) -> str:
    label = ", ".join(types)
    if preferred:
        label = f"{label} ★" if label else "★"
    return label


if __name__ == "__main__":
    app()
