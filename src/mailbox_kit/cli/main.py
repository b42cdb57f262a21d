"""Main CLI application entry point."""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from ..spellcheck import DictionaryLoad
from ..utils import settings, get_logger, setup_logging
from .commands import atom, auth, dictionaries, gmail

logger = get_logger(__name__)
console = Console()

app = typer.Typer(
    name="mailbox-kit",
    help="Mailbox Kit - Gmail sync, Atom feed and spellcheck helpers",
    rich_markup_mode="rich",
)

app.add_typer(auth.app, name="auth", help="Google OAuth helpers")
app.add_typer(gmail.app, name="gmail", help="Gmail API calls")
app.add_typer(atom.app, name="atom", help="Gmail Atom feed")
app.add_typer(dictionaries.app, name="dictionaries", help="Spellcheck dictionaries")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug mode"),
) -> None:
    """Mailbox Kit - Gmail sync, Atom feed and spellcheck helpers"""
    if debug:
        setup_logging(level="DEBUG", log_file=Path.home() / ".mailbox_kit" / "debug.log")
    elif verbose:
        setup_logging(level="DEBUG")
    else:
        setup_logging(level=settings.log_level)


@app.command()
def status() -> None:
    """Show configuration status."""
    console.print("\n[bold blue]Mailbox Kit Status[/bold blue]\n")

    installed = DictionaryLoad().get_installed_dictionaries()
    config_items = [
        ("Google client id", "✅ Configured" if settings.google_client_id else "❌ Missing"),
        ("Google client secret", "✅ Configured" if settings.google_client_secret else "❌ Missing"),
        ("Watch topic", settings.gmail_watch_topic),
        ("Atom feed", settings.gmail_atom_url),
        ("Dictionaries directory", str(settings.user_dictionaries_path)),
        ("Installed dictionaries", ", ".join(installed) or "none"),
        ("Debug Mode", "✅ Enabled" if settings.debug else "❌ Disabled"),
        ("Log Level", settings.log_level),
    ]

    table = Table(title="Configuration Status", show_header=True)
    table.add_column("Component", style="cyan")
    table.add_column("Status", style="green")
    for item, value in config_items:
        table.add_row(item, value)

    console.print(table)


if __name__ == "__main__":
    app()
