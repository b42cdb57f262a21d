"""Google OAuth CLI commands."""

import asyncio
import json

import httpx
import typer
from rich.console import Console

from ...core.google_auth import build_authorization_url, upgrade_auth_code_to_permanent
from ...utils import settings, get_logger

logger = get_logger(__name__)
console = Console()

app = typer.Typer(help="Google OAuth helpers")


@app.command()
def url(
    redirect_uri: str = typer.Option(settings.google_redirect_uri, "--redirect-uri", help="OAuth redirect uri"),
) -> None:
    """Print the consent URL to obtain an auth code."""
    if not settings.google_client_id:
        console.print("[red]GOOGLE_CLIENT_ID is not configured.[/red]")
        raise typer.Exit(1)

    consent_url, _state = build_authorization_url(redirect_uri)
    console.print("\n[bold blue]Open this URL to authorize:[/bold blue]\n")
    console.print(consent_url, soft_wrap=True)


@app.command()
def upgrade(
    code: str = typer.Argument(..., help="Temporary auth code returned by Google"),
    redirect_uri: str = typer.Option(settings.google_redirect_uri, "--redirect-uri", help="Redirect uri used to get the code"),
) -> None:
    """Exchange a temporary auth code for permanent tokens."""
    try:
        tokens = asyncio.run(upgrade_auth_code_to_permanent(code, redirect_uri))
    except httpx.HTTPError as e:
        console.print(f"\n[red]Token exchange failed: {e}[/red]")
        logger.error(f"Auth code upgrade failed: {e}")
        raise typer.Exit(1)

    console.print("\n[bold green]✅ Auth code upgraded[/bold green]")
    console.print_json(json.dumps(tokens))
