"""Pytest configuration and fixtures."""

import os
from unittest.mock import Mock

import httpx
import pytest

# Set up test environment
os.environ["DEBUG"] = "true"
os.environ["GOOGLE_CLIENT_ID"] = "test-client-id"
os.environ["GOOGLE_CLIENT_SECRET"] = "test-client-secret"

from mailbox_kit.core.fetch_service import FetchService  # noqa: E402


SAMPLE_ATOM_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<feed version="0.3" xmlns="http://purl.org/atom/ns#">
<title>Gmail - Inbox for test@example.com</title>
<tagline>New messages in your Gmail Inbox</tagline>
<fullcount>2</fullcount>
<link rel="alternate" href="https://mail.google.com/mail/u/0" type="text/html" />
<modified>2023-11-15T10:30:00Z</modified>
<entry>
<title>Lunch tomorrow?</title>
<summary>Are you free for lunch tomorrow at noon</summary>
<link rel="alternate" href="https://mail.google.com/mail/u/0?account_id=test@example.com&amp;message_id=18bd1c2f3a4b5c6d&amp;view=conv&amp;extsrc=atom" type="text/html" />
<modified>2023-11-15T10:00:00Z</modified>
<issued>2023-11-15T09:59:00Z</issued>
<id>tag:gmail.google.com,2004:1782845678901234567</id>
<author>
<name>John Doe</name>
<email>john@example.com</email>
</author>
</entry>
<entry>
<title>No author here</title>
</entry>
</feed>
"""


@pytest.fixture
def auth():
    """Stand-in for google.oauth2 credentials."""
    return Mock(name="credentials")


@pytest.fixture
def mock_gmail_service():
    """Mock Gmail API service."""
    service = Mock()

    service.users.return_value = Mock()
    service.users().getProfile.return_value.execute.return_value = {
        "emailAddress": "test@example.com",
        "messagesTotal": 1000,
        "threadsTotal": 800,
        "historyId": "4242",
    }

    service.users().threads.return_value = Mock()
    service.users().threads().list.return_value.execute.return_value = {
        "threads": [
            {"id": "thread1", "historyId": "1"},
            {"id": "thread2", "historyId": "2"},
        ]
    }

    service.users().labels.return_value = Mock()
    service.users().labels().get.return_value.execute.return_value = {
        "id": "INBOX",
        "name": "INBOX",
        "threadsUnread": 3,
    }

    return service


@pytest.fixture
def sample_atom_feed():
    return SAMPLE_ATOM_FEED


@pytest.fixture
def atom_requests():
    """Requests seen by the mock Atom transport."""
    return []


@pytest.fixture
def atom_fetch_service(sample_atom_feed, atom_requests):
    """FetchService answering every request with the sample Atom feed."""

    def handler(request: httpx.Request) -> httpx.Response:
        atom_requests.append(request)
        return httpx.Response(
            200,
            content=sample_atom_feed.encode("utf-8"),
            headers={"content-type": "application/atom+xml"},
        )

    return FetchService(transport=httpx.MockTransport(handler))
