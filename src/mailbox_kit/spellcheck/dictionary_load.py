"""Spellcheck dictionary loading."""

import asyncio
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Awaitable, Callable, Dict, Iterable, List, Optional

from ..core.errors import UnknownDictionaryError
from ..utils.config import settings
from ..utils.logger import get_logger

logger = get_logger(__name__)

BUNDLED_DICTIONARIES_PACKAGE = "mailbox_kit.spellcheck.dictionaries"


@dataclass
class Dictionary:
    """Hunspell style dictionary data."""

    aff: bytes
    dic: bytes


InbuiltLoader = Callable[[], Awaitable[Dictionary]]


async def _read_pair(directory: Path, language: str) -> Dictionary:
    """Read ``<language>.aff`` and ``<language>.dic`` from a directory."""
    aff, dic = await asyncio.gather(
        asyncio.to_thread((directory / f"{language}.aff").read_bytes),
        asyncio.to_thread((directory / f"{language}.dic").read_bytes),
    )
    return Dictionary(aff=aff, dic=dic)


def _read_bundled_pair(language: str) -> Dictionary:
    bundle = resources.files(BUNDLED_DICTIONARIES_PACKAGE)
    return Dictionary(
        aff=(bundle / f"{language}.aff").read_bytes(),
        dic=(bundle / f"{language}.dic").read_bytes(),
    )


async def load_bundled_en_us() -> Dictionary:
    """Load the en_US dictionary shipped with the application.

    ``settings.bundled_dictionaries_path`` replaces the packaged data when set.
    """
    if settings.bundled_dictionaries_path is not None:
        return await _read_pair(Path(settings.bundled_dictionaries_path), "en_US")
    return await asyncio.to_thread(_read_bundled_pair, "en_US")


class DictionaryLoad:
    """Resolves language codes to dictionaries.

    Inbuilt dictionaries are tried first, then dictionaries the user installed
    into the user dictionaries directory. The installed list is computed once
    per instance and is not refreshed.
    """

    def __init__(
        self,
        user_dictionaries_path: Optional[Path] = None,
        preinstalled_dictionaries: Optional[Iterable[str]] = None,
        inbuilt_loaders: Optional[Dict[str, InbuiltLoader]] = None,
    ) -> None:
        self.user_dictionaries_path = Path(user_dictionaries_path or settings.user_dictionaries_path)
        self.preinstalled_dictionaries = list(
            settings.preinstalled_dictionaries
            if preinstalled_dictionaries is None
            else preinstalled_dictionaries
        )
        self.inbuilt_loaders = (
            inbuilt_loaders if inbuilt_loaders is not None else {"en_US": load_bundled_en_us}
        )
        self._installed_dictionaries: Optional[List[str]] = None

    async def _load_inbuilt_dictionary(self, language: str) -> Dictionary:
        loader = self.inbuilt_loaders.get(language)
        if loader is None:
            raise UnknownDictionaryError()
        return await loader()

    async def _load_custom_dictionary(self, language: str) -> Dictionary:
        return await _read_pair(self.user_dictionaries_path, language)

    async def load(self, language: str) -> Dictionary:
        """Load the dictionary for a language.

        Raises:
            UnknownDictionaryError: if neither an inbuilt nor a user installed
                dictionary could be loaded
        """
        try:
            return await self._load_inbuilt_dictionary(language)
        except (UnknownDictionaryError, OSError):
            pass

        try:
            dictionary = await self._load_custom_dictionary(language)
        except OSError as error:
            logger.debug(f"No custom dictionary for {language}: {error}")
            raise UnknownDictionaryError() from None

        logger.debug(f"Loaded custom dictionary for {language}")
        return dictionary

    def get_installed_dictionaries(self) -> List[str]:
        """Get the codes of the installed dictionaries.

        Codes of user dictionaries with both an ``.aff`` and a ``.dic`` file
        come first, followed by the preinstalled codes.
        """
        if self._installed_dictionaries is None:
            try:
                files = [path.name for path in self.user_dictionaries_path.iterdir()]
            except OSError:
                files = []

            extensions: Dict[str, set] = {}
            for filename in files:
                path = Path(filename)
                extensions.setdefault(path.stem, set()).add(path.suffix.lstrip("."))

            custom = sorted(
                language for language, found in extensions.items()
                if {"aff", "dic"} <= found
            )
            self._installed_dictionaries = custom + [
                language for language in self.preinstalled_dictionaries
                if language not in custom
            ]

        return self._installed_dictionaries
