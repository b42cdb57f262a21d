"""Protocol handler registration for hosted extensions, per session partition."""

from abc import ABC, abstractmethod
from functools import partial
from typing import Any, Callable, Iterable, Set

from ..utils.logger import get_logger

logger = get_logger(__name__)

ProtocolHandler = Callable[[Any, Callable[..., None]], None]


class SessionProtocol(ABC):
    """The protocol registry of a browsing session."""

    @abstractmethod
    def register_file_protocol(self, scheme: str, handler: ProtocolHandler) -> None:
        pass

    @abstractmethod
    def register_string_protocol(self, scheme: str, handler: ProtocolHandler) -> None:
        pass


class BrowserSession(ABC):
    """A browsing session bound to a partition."""

    @property
    @abstractmethod
    def protocol(self) -> SessionProtocol:
        pass


class HostedExtensionProvider(ABC):
    """Serves files for hosted extensions."""

    supported_protocols: Iterable[str] = ()

    @abstractmethod
    def handle_file_protocol_request(self, partition: str, request: Any, responder: Callable[..., None]) -> None:
        pass


class ContentExtensions(ABC):
    """Serves string responses for content extensions."""

    supported_protocols: Iterable[str] = ()

    @abstractmethod
    def handle_string_protocol_request(self, request: Any, responder: Callable[..., None]) -> None:
        pass


class HostedExtensionSessionManager:
    """Registers extension protocol handlers into session partitions.

    The set of managed partitions lives as long as the manager; partitions are
    never unregistered. Create one manager per process.
    """

    def __init__(
        self,
        session_from_partition: Callable[[str], BrowserSession],
        hosted_provider: HostedExtensionProvider,
        content_extensions: ContentExtensions,
    ) -> None:
        self._session_from_partition = session_from_partition
        self._hosted_provider = hosted_provider
        self._content_extensions = content_extensions
        self._managed: Set[str] = set()

    def is_managing(self, partition: str) -> bool:
        return partition in self._managed

    def start_managing_session(self, partition: str) -> None:
        """Start managing a session partition.

        Calling this again for a managed partition does nothing. Errors raised
        by the session while registering propagate to the caller.
        """
        if partition in self._managed:
            return

        session = self._session_from_partition(partition)
        for scheme in self._hosted_provider.supported_protocols:
            session.protocol.register_file_protocol(
                scheme,
                partial(self._hosted_provider.handle_file_protocol_request, partition),
            )
        for scheme in self._content_extensions.supported_protocols:
            session.protocol.register_string_protocol(
                scheme,
                self._content_extensions.handle_string_protocol_request,
            )

        self._managed.add(partition)
        logger.debug(f"Managing extension protocols for partition {partition}")
