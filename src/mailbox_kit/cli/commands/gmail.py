"""Gmail API CLI commands."""

import asyncio
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from ...core.errors import MailboxKitError
from ...core.google_auth import generate_auth
from ...core.google_http import GoogleHTTP
from ...utils import get_logger

logger = get_logger(__name__)
console = Console()

app = typer.Typer(help="Gmail API calls")

AccessToken = typer.Option(..., "--access-token", envvar="MAILBOX_KIT_ACCESS_TOKEN", help="OAuth access token")
RefreshToken = typer.Option(None, "--refresh-token", envvar="MAILBOX_KIT_REFRESH_TOKEN", help="OAuth refresh token")
Expiry = typer.Option(None, "--expiry", help="Access token expiry in epoch milliseconds")


def _header(message: dict, name: str) -> str:
    for header in message.get("payload", {}).get("headers", []):
        if header.get("name", "").lower() == name.lower():
            return header.get("value", "")
    return ""


@app.command()
def profile(
    access_token: str = AccessToken,
    refresh_token: Optional[str] = RefreshToken,
    expiry: Optional[int] = Expiry,
) -> None:
    """Show the Gmail profile for the account."""
    auth = generate_auth(access_token, refresh_token, expiry)
    try:
        data = asyncio.run(GoogleHTTP().fetch_gmail_profile(auth))
    except MailboxKitError as e:
        console.print(f"\n[red]Could not fetch profile: {e}[/red]")
        logger.error(f"Gmail profile failed: {e}")
        raise typer.Exit(1)

    console.print(f"📧 Email: {data.get('emailAddress', 'Unknown')}")
    console.print(f"📊 Total messages: {data.get('messagesTotal', 0):,}")
    console.print(f"🧵 Total threads: {data.get('threadsTotal', 0):,}")
    console.print(f"🕓 History id: {data.get('historyId', '')}")


@app.command()
def threads(
    access_token: str = AccessToken,
    refresh_token: Optional[str] = RefreshToken,
    expiry: Optional[int] = Expiry,
    query: Optional[str] = typer.Option(None, "--query", "-q", help="Gmail search query"),
    label: List[str] = typer.Option(["INBOX", "UNREAD"], "--label", "-l", help="Label ids to match"),
    limit: int = typer.Option(10, "--limit", "-n", help="Maximum threads to resolve"),
) -> None:
    """List and fully resolve the latest threads."""
    auth = generate_auth(access_token, refresh_token, expiry)
    google = GoogleHTTP()

    async def _resolve():
        headers = await google.fetch_gmail_thread_headers_list(auth, query, label, limit)
        return await google.fully_resolve_gmail_thread_headers(auth, {}, headers.get("threads", []))

    try:
        with console.status("[bold green]Resolving threads..."):
            resolved = asyncio.run(_resolve())
    except MailboxKitError as e:
        console.print(f"\n[red]Could not resolve threads: {e}[/red]")
        logger.error(f"Thread resolution failed: {e}")
        raise typer.Exit(1)

    table = Table(title=f"🧵 Threads ({len(resolved)})")
    table.add_column("Thread", style="cyan")
    table.add_column("From", style="green")
    table.add_column("Subject", style="yellow")
    for thread in resolved:
        messages = thread.get("messages") or [{}]
        latest = messages[-1]
        table.add_row(thread["id"], _header(latest, "From"), _header(latest, "Subject"))

    console.print(table)
