"""Gmail Atom feed fetching and parsing.

The Atom feed is a cheap alternative to the API for unread counts and message
previews. It is authenticated with the partition's session cookies rather than
OAuth credentials.
"""

import re
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional, Union
from urllib.parse import parse_qs, urlparse

import dateparser
from bs4 import BeautifulSoup, Tag

from .errors import AtomParseError
from .fetch_service import FetchService
from ..utils.config import settings
from ..utils.logger import get_logger

logger = get_logger(__name__)

_INT_PATTERN = re.compile(r"^\s*([+-]?\d+)")

# Only explicit dates; relative phrases such as "yesterday" are not timestamps
_DATE_SETTINGS = {
    "PARSERS": ["absolute-time"],
    "STRICT_PARSING": True,
    "RETURN_AS_TIMEZONE_AWARE": True,
    "TO_TIMEZONE": "UTC",
}


@dataclass
class AtomMessage:
    """A message summary taken from an Atom feed entry.

    Any field whose source element is missing or unparsable is None.
    """

    title: Optional[str] = None
    summary: Optional[str] = None
    issued: Optional[int] = None
    modified: Optional[int] = None
    from_name: Optional[str] = None
    from_email: Optional[str] = None
    id: Optional[str] = None
    version: int = 2

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class AtomFeed:
    count: int = 0
    timestamp: int = 0
    messages: List[AtomMessage] = field(default_factory=list)


def browser_headers() -> Dict[str, str]:
    """Headers that make the feed request look like a regular page load."""
    languages = settings.atom_accept_languages or ["en-US"]
    if len(languages) > 1:
        accept_language = f"{languages[0]};q=0.9,{languages[-1]};q=0.8"
    else:
        accept_language = languages[0]

    return {
        "accept": (
            "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,"
            "image/apng,*/*;q=0.8,application/signed-exchange;v=b3"
        ),
        "accept-encoding": "gzip, deflate, br",
        "accept-language": accept_language,
        "upgrade-insecure-requests": "1",
        "user-agent": settings.atom_user_agent,
    }


def _parse_int(text: Optional[str]) -> Optional[int]:
    if text is None:
        return None
    match = _INT_PATTERN.match(text)
    return int(match.group(1)) if match else None


def _parse_timestamp(text: Optional[str]) -> Optional[int]:
    """Parse a date string into epoch milliseconds."""
    if not text:
        return None
    parsed = dateparser.parse(text.strip(), settings=_DATE_SETTINGS)
    if parsed is None:
        return None
    return int(parsed.timestamp() * 1000)


def _text(element: Optional[Tag]) -> Optional[str]:
    return element.get_text() if element is not None else None


def parse_atom(xml: Union[str, bytes]) -> BeautifulSoup:
    return BeautifulSoup(xml, "xml")


def get_count_from_atom(document: BeautifulSoup) -> int:
    """Read <fullcount>, defaulting to 0 when absent or invalid."""
    count = _parse_int(_text(document.find("fullcount")))
    return count if count is not None else 0


def get_modified_from_atom(document: BeautifulSoup) -> int:
    """Read the first <modified> as epoch ms, defaulting to 0."""
    timestamp = _parse_timestamp(_text(document.find("modified")))
    return timestamp if timestamp is not None else 0


def _message_id_from_link(link: Optional[Tag]) -> Optional[str]:
    if link is None:
        return None
    href = link.get("href")
    if not href:
        return None
    parsed = urlparse(href)
    if not parsed.scheme or not parsed.netloc:
        return None
    values = parse_qs(parsed.query).get("message_id")
    return values[0] if values else None


def convert_atom_message_entry(entry: Tag) -> AtomMessage:
    """Convert an <entry> element into an AtomMessage."""
    author = entry.find("author")
    from_name = None
    from_email = None
    if author is not None:
        from_name = _text(author.find("name", recursive=False))
        from_email = _text(author.find("email", recursive=False))

    return AtomMessage(
        title=_text(entry.find("title")),
        summary=_text(entry.find("summary")),
        issued=_parse_timestamp(_text(entry.find("issued"))),
        modified=_parse_timestamp(_text(entry.find("modified"))),
        from_name=from_name,
        from_email=from_email,
        id=_message_id_from_link(entry.find("link")),
    )


def get_messages_from_atom(document: BeautifulSoup) -> List[AtomMessage]:
    return [convert_atom_message_entry(entry) for entry in document.find_all("entry")]


async def fetch_gmail_atom_unread_count(
    fetch_service: FetchService,
    partition_id: str,
    url: Optional[str] = None,
) -> int:
    """Fetch the unread count from the Atom feed.

    Raises:
        httpx.HTTPStatusError: if the feed request fails
        AtomParseError: if <fullcount> is missing or not a number
    """
    response = await fetch_service.request(url or settings.gmail_atom_url, partition_id)
    document = parse_atom(response.content)

    element = document.find("fullcount")
    if element is None:
        raise AtomParseError("<fullcount> element not found")

    count = _parse_int(element.get_text())
    if count is None:
        raise AtomParseError("Count is not a valid number")

    logger.debug(f"Atom unread count for {partition_id}: {count}")
    return count


async def fetch_gmail_atom_messages(
    fetch_service: FetchService,
    partition_id: str,
    url: Optional[str] = None,
) -> AtomFeed:
    """Fetch the count, modified time and message previews from the Atom feed."""
    response = await fetch_service.request(
        url or settings.gmail_atom_url,
        partition_id,
        headers=browser_headers(),
    )
    document = parse_atom(response.content)

    feed = AtomFeed(
        count=get_count_from_atom(document),
        timestamp=get_modified_from_atom(document),
        messages=get_messages_from_atom(document),
    )
    logger.debug(f"Atom feed for {partition_id}: {feed.count} unread, {len(feed.messages)} entries")
    return feed


async def fetch_gmail_basic_html(
    fetch_service: FetchService,
    partition_id: str,
    url: Optional[str] = None,
) -> str:
    """Fetch the basic HTML Gmail page for a partition."""
    response = await fetch_service.request(
        url or settings.gmail_basic_html_url,
        partition_id,
        headers=browser_headers(),
    )
    return response.text
