"""
Client for the optional LLM assistant proxy.

The proxy exposes one endpoint, ``POST /api/chat``, that takes
``{"message": str}`` and answers ``{"reply": str}`` on success or
``{"error": str}`` with a non-2xx status on failure. The chat session uses
this client as a fallback when the rule-based engine has no specific
answer.

The proxy base URL is resolved in this order:

1. ``base_url`` constructor parameter
2. ``POWERPREDICT_ASSISTANT_URL`` environment variable
3. ``http://localhost:5000``
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Any

import aiohttp

from .config import (
    ASSISTANT_CHAT_PATH,
    ASSISTANT_TIMEOUT,
    ASSISTANT_URL_ENV,
    DEFAULT_ASSISTANT_URL,
)
from .exceptions import AssistantUnavailableError

__author__ = "PowerPredict Developers"
__copyright__ = "PowerPredict Developers"
__license__ = "MIT"

_logger = logging.getLogger(__name__)

__all__ = [
    "AssistantClient",
]


class AssistantClient:
    """Async client for the assistant proxy.

    Every failure (network error, timeout, non-2xx status or malformed
    body) surfaces as :class:`AssistantUnavailableError`.

    Example:
        >>> async with AssistantClient() as assistant:
        ...     reply = await assistant.ask("Is a heat pump worth it?")
    """

    def __init__(
        self,
        base_url: str | None = None,
        session: aiohttp.ClientSession | None = None,
        *,
        timeout: float = ASSISTANT_TIMEOUT,
    ) -> None:
        self._base_url = (
            base_url
            or os.environ.get(ASSISTANT_URL_ENV)
            or DEFAULT_ASSISTANT_URL
        ).rstrip("/")
        self._session = session
        self._owned_session = False
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    @property
    def url(self) -> str:
        return f"{self._base_url}{ASSISTANT_CHAT_PATH}"

    async def __aenter__(self) -> AssistantClient:
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
            self._owned_session = True
        return self

    async def __aexit__(self, *args: Any) -> None:
        if self._owned_session and self._session:
            await self._session.close()
            self._session = None
            self._owned_session = False

    async def ask(self, message: str) -> str:
        """Send a message to the assistant and return its reply.

        Args:
            message: User text to forward

        Returns:
            The assistant's reply text

        Raises:
            AssistantUnavailableError: If the proxy cannot produce a reply
            RuntimeError: If the client is used outside ``async with``
        """
        if self._session is None:
            raise RuntimeError(
                "Session not initialized. Use 'async with AssistantClient()' "
                "or call __aenter__() first."
            )

        _logger.debug("Forwarding %d chars to assistant", len(message))
        try:
            async with self._session.post(
                self.url, json={"message": message}, timeout=self._timeout
            ) as resp:
                resp.raise_for_status()
                data: Any = await resp.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            _logger.warning("Assistant request failed: %s", e)
            raise AssistantUnavailableError(
                f"Assistant request failed: {e}"
            ) from e
        except ValueError as e:
            _logger.warning("Assistant returned invalid JSON: %s", e)
            raise AssistantUnavailableError(
                "Assistant returned an invalid response"
            ) from e

        reply = data.get("reply") if isinstance(data, dict) else None
        if not isinstance(reply, str) or not reply.strip():
            _logger.warning("Assistant response missing 'reply': %r", data)
            raise AssistantUnavailableError(
                "Assistant returned an invalid response"
            )

        _logger.info("Assistant replied with %d chars", len(reply))
        return reply
