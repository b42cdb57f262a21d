"""HTTP requests made with the cookies of a browsing session partition."""

from typing import Dict, Mapping, Optional

import httpx

from ..utils.logger import get_logger

logger = get_logger(__name__)


class FetchService:
    """Issues HTTP requests on behalf of a partition.

    Each partition gets its own ``httpx.AsyncClient`` so its cookie jar stays
    isolated, the same way partitions isolate cookies in the browser.
    """

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self._transport = transport
        self._clients: Dict[str, httpx.AsyncClient] = {}

    def _client(self, partition_id: str) -> httpx.AsyncClient:
        client = self._clients.get(partition_id)
        if client is None:
            client = httpx.AsyncClient(transport=self._transport, follow_redirects=True)
            self._clients[partition_id] = client
            logger.debug(f"Created http client for partition {partition_id}")
        return client

    def set_partition_cookies(self, partition_id: str, cookies: Mapping[str, str], domain: str = "") -> None:
        """Add cookies to the jar of a partition."""
        client = self._client(partition_id)
        for name, value in cookies.items():
            client.cookies.set(name, value, domain=domain)

    async def request(
        self,
        url: str,
        partition_id: str,
        headers: Optional[Mapping[str, str]] = None,
        method: str = "GET",
    ) -> httpx.Response:
        """Send a request with the partition's cookies included.

        Raises:
            httpx.HTTPStatusError: if the response is not a success
        """
        response = await self._client(partition_id).request(method, url, headers=headers)
        response.raise_for_status()
        return response

    async def aclose(self) -> None:
        for client in self._clients.values():
            await client.aclose()
        self._clients.clear()
