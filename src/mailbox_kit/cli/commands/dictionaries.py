"""Spellcheck dictionary CLI commands."""

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from ...core.errors import UnknownDictionaryError
from ...spellcheck import DictionaryLoad
from ...utils import settings

console = Console()

app = typer.Typer(help="Spellcheck dictionaries")


@app.command("list")
def list_dictionaries() -> None:
    """List installed dictionaries."""
    installed = DictionaryLoad().get_installed_dictionaries()
    preinstalled = set(settings.preinstalled_dictionaries)

    table = Table(title="📚 Installed Dictionaries")
    table.add_column("Language", style="cyan")
    table.add_column("Source", style="green")
    for language in installed:
        table.add_row(language, "preinstalled" if language in preinstalled else "user")

    console.print(table)


@app.command()
def check(language: str = typer.Argument(..., help="Language code, e.g. en_US")) -> None:
    """Check that a dictionary loads."""
    try:
        dictionary = asyncio.run(DictionaryLoad().load(language))
    except UnknownDictionaryError as e:
        console.print(f"[red]{language}: {e}[/red]")
        raise typer.Exit(1)

    console.print(
        f"[green]✅ {language}[/green] aff {len(dictionary.aff):,} bytes, dic {len(dictionary.dic):,} bytes"
    )
