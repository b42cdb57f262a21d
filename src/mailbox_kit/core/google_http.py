"""Authenticated Gmail and OAuth2 API calls."""

import asyncio
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from .errors import DuplicateWatchError, InvalidStatusError, MissingAuthenticationError
from .google_auth import generate_auth_from_raw
from ..utils.config import settings
from ..utils.logger import get_logger

logger = get_logger(__name__)

DUPLICATE_WATCH_MESSAGE = "Only one user push notification client allowed per developer"

Thread = Dict[str, Any]
PostProcessThread = Callable[[Thread], Thread]


def translate_http_error(error: HttpError) -> InvalidStatusError:
    """Convert a Google client HttpError into an InvalidStatusError variant."""
    status = error.resp.status
    reason = error.reason or ""
    if reason.startswith(DUPLICATE_WATCH_MESSAGE):
        return DuplicateWatchError(status, reason)
    return InvalidStatusError(status, reason)


class GoogleHTTP:
    """Thin async wrapper over the Gmail v1 and OAuth2 v2 APIs.

    Every call takes the credentials to use. Calls without credentials fail
    with MissingAuthenticationError before any network access, non 200
    responses fail with InvalidStatusError and transport failures propagate
    as raised by the underlying client.
    """

    def __init__(self, watch_topic: Optional[str] = None) -> None:
        self.watch_topic = watch_topic or settings.gmail_watch_topic

    async def _call(
        self,
        auth,
        make_request: Callable[[Any], Any],
        api: str = "gmail",
        version: str = "v1",
    ) -> Dict[str, Any]:
        """Build the service, issue the request and normalize its result."""
        if not auth:
            raise MissingAuthenticationError()

        def run() -> Dict[str, Any]:
            service = build(api, version, credentials=auth, cache_discovery=False)
            request = make_request(service)
            postproc = request.postproc

            def check_status(resp, content):
                data = postproc(resp, content)
                if resp.status != 200:
                    raise InvalidStatusError(resp.status)
                return data

            request.postproc = check_status
            return request.execute()

        try:
            return await asyncio.to_thread(run)
        except HttpError as error:
            raise translate_http_error(error) from error

    # Watch

    async def watch_account(self, auth) -> Dict[str, Any]:
        """Watch an account for changes through the configured Pub/Sub topic."""
        try:
            return await self._call(
                auth,
                lambda service: service.users().watch(
                    userId="me", body={"topicName": self.watch_topic}
                ),
            )
        except DuplicateWatchError:
            # Another client is connected for this account
            logger.info("Watch already registered elsewhere, treating as success")
            return {}

    # Profile

    async def fetch_account_profile(self, auth) -> Dict[str, Any]:
        """Fetch the Google account profile (userinfo) for a mailbox."""
        return await self._call(
            auth,
            lambda service: service.userinfo().get(),
            api="oauth2",
            version="v2",
        )

    async def fetch_account_profile_with_raw_auth(self, raw_auth: Dict[str, Any]) -> Dict[str, Any]:
        """Fetch the account profile using the raw token payload from Google."""
        return await self.fetch_account_profile(generate_auth_from_raw(raw_auth))

    # Gmail

    async def fetch_gmail_profile(self, auth) -> Dict[str, Any]:
        return await self._call(auth, lambda service: service.users().getProfile(userId="me"))

    async def fetch_gmail_history_list(self, auth, from_history_id: str) -> Dict[str, Any]:
        """Fetch the list of changes since ``from_history_id``."""
        return await self._call(
            auth,
            lambda service: service.users().history().list(
                userId="me", startHistoryId=from_history_id
            ),
        )

    async def fetch_gmail_label(self, auth, label_id: str) -> Dict[str, Any]:
        """Fetch a single label.

        The label is a cheap call which can be used to decide if the mailbox
        has changed.
        """
        return await self._call(
            auth,
            lambda service: service.users().labels().get(userId="me", id=label_id),
        )

    # Gmail: Threads

    async def fetch_gmail_thread_headers_list(
        self,
        auth,
        query: Optional[str] = None,
        label_ids: Iterable[str] = (),
        limit: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Fetch thread headers (id and historyId) matching a query and labels."""
        max_results = limit if limit is not None else settings.gmail_thread_list_limit
        return await self._call(
            auth,
            lambda service: service.users().threads().list(
                userId="me",
                labelIds=list(label_ids),
                q=query,
                maxResults=max_results,
            ),
        )

    async def fetch_gmail_thread(self, auth, thread_id: str) -> Thread:
        return await self._call(
            auth,
            lambda service: service.users().threads().get(userId="me", id=thread_id),
        )

    async def fetch_multiple_gmail_threads(self, auth, thread_ids: Sequence[str]) -> List[Thread]:
        """Fetch several threads concurrently.

        Returns the threads in the order of ``thread_ids``. If any fetch fails
        the first failure is raised and no partial batch is returned.
        """
        if not auth:
            raise MissingAuthenticationError()
        logger.debug(f"Fetching {len(thread_ids)} threads")
        return list(await asyncio.gather(
            *(self.fetch_gmail_thread(auth, thread_id) for thread_id in thread_ids)
        ))

    async def fully_resolve_gmail_thread_headers(
        self,
        auth,
        known_threads: Mapping[str, Thread],
        thread_headers: Sequence[Thread],
        post_process_thread: Optional[PostProcessThread] = None,
    ) -> List[Thread]:
        """Resolve thread headers into full threads, fetching only what changed.

        Args:
            auth: the credentials to use
            known_threads: previously resolved threads keyed by id
            thread_headers: the latest thread headers, each with id and historyId
            post_process_thread: optional function applied to each fetched
                thread. It must leave ``id`` and ``historyId`` intact.

        Returns:
            the full threads in the order of ``thread_headers``. Headers that
            were neither fetched nor known are dropped.
        """
        if not auth:
            raise MissingAuthenticationError()

        changed_ids = []
        for header in thread_headers:
            known = known_threads.get(header["id"])
            if known is None or known.get("historyId") != header.get("historyId"):
                changed_ids.append(header["id"])
        changed_ids = list(dict.fromkeys(changed_ids))

        fetched = await self.fetch_multiple_gmail_threads(auth, changed_ids)

        updated: Dict[str, Thread] = {}
        for thread in fetched:
            if post_process_thread:
                processed = post_process_thread(thread)
                if (processed.get("id"), processed.get("historyId")) != (thread.get("id"), thread.get("historyId")):
                    raise ValueError(
                        f"post_process_thread changed id or historyId of thread {thread.get('id')}"
                    )
                thread = processed
            updated[thread["id"]] = thread

        logger.debug(
            f"Resolved {len(thread_headers)} thread headers, fetched {len(updated)} changed threads"
        )

        resolved = []
        for header in thread_headers:
            thread = updated.get(header["id"])
            if thread is None:
                thread = known_threads.get(header["id"])
            if thread is not None:
                resolved.append(thread)
        return resolved
