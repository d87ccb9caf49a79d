"""API key provisioning for the generative service."""

from __future__ import annotations

from abc import ABC, abstractmethod

from shared.config import ServiceConfig, config as service_config
from shared.logging_utils import setup_logging

logger = setup_logging("credentials")


class CredentialProvider(ABC):
    """Host capability that owns the API key used for Gemini calls."""

    @abstractmethod
    def has_selected_api_key(self) -> bool:
        """Return True when a usable key is selected."""

    @abstractmethod
    def open_select_key(self) -> None:
        """Let the host (re)select a key."""

    @abstractmethod
    def invalidate(self) -> None:
        """Mark the current key as rejected until a new one is selected."""

    @property
    @abstractmethod
    def api_key(self) -> str | None:
        """The selected key, or None."""


class EnvironmentCredentialProvider(CredentialProvider):
    """Read the key from ``GEMINI_API_KEY`` / ``GOOGLE_API_KEY`` (or ``.env``)."""

    def __init__(self, config: ServiceConfig | None = None) -> None:
        self.config = config or service_config
        self._invalidated = False

    @property
    def api_key(self) -> str | None:
        if self._invalidated:
            return None
        return self.config.get("gemini_api_key") or None

    def has_selected_api_key(self) -> bool:
        return self.api_key is not None

    def open_select_key(self) -> None:
        self.config.reload()
        self._invalidated = False
        if self.api_key:
            logger.info("API key selected")
        else:
            logger.warning("No API key found after reloading configuration")

    def invalidate(self) -> None:
        if not self._invalidated:
            logger.warning("API key invalidated; a new key must be selected")
        self._invalidated = True


class StaticCredentialProvider(CredentialProvider):
    """Key supplied directly by the embedding application."""

    def __init__(self, api_key: str | None) -> None:
        self._api_key = api_key
        self._invalidated = False

    @property
    def api_key(self) -> str | None:
        return None if self._invalidated else self._api_key

    def has_selected_api_key(self) -> bool:
        return bool(self.api_key)

    def open_select_key(self) -> None:
        self._invalidated = False

    def invalidate(self) -> None:
        self._invalidated = True
