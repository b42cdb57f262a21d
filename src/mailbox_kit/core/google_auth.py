"""Google OAuth2 credential construction and auth code exchange."""

import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

import httpx
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow

from ..utils.config import settings
from ..utils.logger import get_logger

logger = get_logger(__name__)

GOOGLE_AUTH_URI = "https://accounts.google.com/o/oauth2/auth"

SCOPES = [
    "https://www.googleapis.com/auth/userinfo.email",
    "https://www.googleapis.com/auth/userinfo.profile",
    "https://www.googleapis.com/auth/gmail.readonly",
]


def _now_ms() -> int:
    return int(time.time() * 1000)


def generate_auth(
    access_token: str,
    refresh_token: Optional[str] = None,
    expiry_time: Optional[int] = None,
) -> Credentials:
    """Generate the credentials object used with the Google API client.

    Args:
        access_token: the access token from the mailbox
        refresh_token: the refresh token from the mailbox
        expiry_time: the expiry time from the mailbox, in epoch milliseconds

    No network call is made.
    """
    expiry = None
    if expiry_time is not None:
        # google-auth compares expiry against naive UTC datetimes
        expiry = datetime.fromtimestamp(expiry_time / 1000, tz=timezone.utc).replace(tzinfo=None)

    return Credentials(
        token=access_token,
        refresh_token=refresh_token,
        token_uri=settings.google_token_uri,
        client_id=settings.google_client_id,
        client_secret=settings.google_client_secret,
        expiry=expiry,
    )


def generate_auth_from_raw(raw_auth: Dict[str, Any]) -> Credentials:
    """Generate credentials from a raw token payload returned by Google."""
    expiry_time = None
    if raw_auth.get("expires_in") is not None:
        expiry_time = _now_ms() + int(raw_auth["expires_in"]) * 1000
    return generate_auth(
        raw_auth["access_token"],
        raw_auth.get("refresh_token"),
        expiry_time,
    )


def build_authorization_url(redirect_uri: Optional[str] = None) -> Tuple[str, str]:
    """Build the consent URL the user visits to obtain a temporary auth code.

    Returns:
        (url, state)
    """
    client_config = {
        "installed": {
            "client_id": settings.google_client_id,
            "client_secret": settings.google_client_secret,
            "auth_uri": GOOGLE_AUTH_URI,
            "token_uri": settings.google_token_uri,
        }
    }
    flow = Flow.from_client_config(
        client_config,
        scopes=SCOPES,
        redirect_uri=redirect_uri or settings.google_redirect_uri,
    )
    url, state = flow.authorization_url(access_type="offline", prompt="consent")
    logger.debug("Built authorization url")
    return url, state


async def upgrade_auth_code_to_permanent(
    auth_code: str,
    code_redirect_uri: str,
    client: Optional[httpx.AsyncClient] = None,
) -> Dict[str, Any]:
    """Upgrade the temporary access code to a permanent token set.

    Args:
        auth_code: the temporary auth code
        code_redirect_uri: the redirect uri that was used when getting the code
        client: optional http client to send the request with

    Returns:
        the token payload from Google, stamped with ``date`` (epoch ms) of receipt

    Raises:
        httpx.HTTPStatusError: if the token endpoint rejects the code
    """
    data = {
        "code": auth_code,
        "client_id": settings.google_client_id,
        "client_secret": settings.google_client_secret,
        "grant_type": "authorization_code",
        "redirect_uri": code_redirect_uri,
    }
    headers = {
        "Accept": "application/json",
        "Content-Type": "application/x-www-form-urlencoded",
    }

    owns_client = client is None
    client = client or httpx.AsyncClient()
    try:
        response = await client.post(settings.google_token_uri, data=data, headers=headers)
        response.raise_for_status()
        payload = response.json()
    finally:
        if owns_client:
            await client.aclose()

    logger.info("Upgraded auth code to permanent credentials")
    return {"date": _now_ms(), **payload}
