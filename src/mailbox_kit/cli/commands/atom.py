"""Gmail Atom feed CLI commands."""

import asyncio
from datetime import datetime, timezone
from typing import List, Optional

import httpx
import typer
from rich.console import Console
from rich.table import Table

from ...core.atom_feed import fetch_gmail_atom_messages, fetch_gmail_atom_unread_count
from ...core.errors import AtomParseError
from ...core.fetch_service import FetchService
from ...utils import get_logger

logger = get_logger(__name__)
console = Console()

app = typer.Typer(help="Gmail Atom feed")

PARTITION = "cli"

CookieOption = typer.Option([], "--cookie", "-c", help="Session cookie as NAME=VALUE, repeatable")
UrlOption = typer.Option(None, "--url", help="Feed url, defaults to the configured Atom feed")


def _fetch_service(cookies: List[str]) -> FetchService:
    fetch_service = FetchService()
    pairs = {}
    for cookie in cookies:
        name, _, value = cookie.partition("=")
        pairs[name.strip()] = value.strip()
    fetch_service.set_partition_cookies(PARTITION, pairs, domain=".google.com")
    return fetch_service


def _format_ms(timestamp: Optional[int]) -> str:
    if not timestamp:
        return ""
    return datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc).strftime("%Y-%m-%d %H:%M")


@app.command()
def count(cookie: List[str] = CookieOption, url: Optional[str] = UrlOption) -> None:
    """Show the unread count from the Atom feed."""

    async def _count():
        fetch_service = _fetch_service(cookie)
        try:
            return await fetch_gmail_atom_unread_count(fetch_service, PARTITION, url)
        finally:
            await fetch_service.aclose()

    try:
        unread = asyncio.run(_count())
    except (httpx.HTTPError, AtomParseError) as e:
        console.print(f"\n[red]Could not read unread count: {e}[/red]")
        logger.error(f"Atom count failed: {e}")
        raise typer.Exit(1)

    console.print(f"📬 Unread: {unread:,}")


@app.command()
def messages(cookie: List[str] = CookieOption, url: Optional[str] = UrlOption) -> None:
    """Show the message previews from the Atom feed."""

    async def _messages():
        fetch_service = _fetch_service(cookie)
        try:
            return await fetch_gmail_atom_messages(fetch_service, PARTITION, url)
        finally:
            await fetch_service.aclose()

    try:
        feed = asyncio.run(_messages())
    except httpx.HTTPError as e:
        console.print(f"\n[red]Could not read Atom feed: {e}[/red]")
        logger.error(f"Atom messages failed: {e}")
        raise typer.Exit(1)

    table = Table(title=f"📬 Unread {feed.count:,} (updated {_format_ms(feed.timestamp) or 'unknown'})")
    table.add_column("Issued", style="cyan")
    table.add_column("From", style="green")
    table.add_column("Title", style="yellow")
    for message in feed.messages:
        table.add_row(
            _format_ms(message.issued),
            message.from_name or message.from_email or "",
            message.title or "",
        )

    console.print(table)
