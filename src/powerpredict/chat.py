"""
Chat session controller.

Sequences user and bot turns for the energy assistant widget. A session
starts closed; opening it posts a greeting after a short delay. Each
accepted user message is answered by exactly one bot message after a
simulated typing delay.

At most one turn is in flight at a time. Input submitted while the bot is
typing, while the session is closed, or that is blank is ignored.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable, Sequence
from enum import Enum
from typing import TYPE_CHECKING

from .advisor import QUICK_SUGGESTIONS, get_greeting, respond
from .config import (
    GREETING_DELAY,
    SUGGESTION_DELAY,
    TYPING_DELAY_MIN,
    TYPING_DELAY_SPREAD,
)
from .enums import ResponseSource
from .exceptions import AssistantUnavailableError
from .models import AdvisoryResponse, Appliance, BillCalculation, ChatMessage

if TYPE_CHECKING:
    from .assistant import AssistantClient
    from .registry import ApplianceRegistry

__author__ = "PowerPredict Developers"
__copyright__ = "PowerPredict Developers"
__license__ = "MIT"

_logger = logging.getLogger(__name__)

__all__ = [
    "ASSISTANT_UNAVAILABLE_TEXT",
    "ChatSession",
    "SessionState",
]

GREETING_SUGGESTION_COUNT = 3

ASSISTANT_UNAVAILABLE_TEXT = (
    "Sorry, the assistant is unavailable right now. Please try again in a "
    "moment, or pick one of the topics below."
)

SleepFunc = Callable[[float], Awaitable[object]]


class SessionState(Enum):
    """Visible state of the chat widget."""

    CLOSED = "closed"
    OPEN_EMPTY = "open_empty"
    OPEN_ACTIVE = "open_active"


class ChatSession:
    """One user's conversation with the energy assistant.

    Args:
        registry: Source of the current bill and appliances. Without one,
            every turn is answered as if no appliances were entered.
        assistant: Optional LLM fallback, consulted only when the rule-based
            engine falls through to its default answer
        rng: Random source for greetings, response variants and typing
            delays
        sleep: Coroutine used for delays; tests pass a no-op

    Example:
        >>> session = ChatSession(registry)
        >>> await session.open()
        >>> reply = await session.submit("Best AC temperature?")
    """

    def __init__(
        self,
        registry: ApplianceRegistry | None = None,
        *,
        assistant: AssistantClient | None = None,
        rng: random.Random | None = None,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        self._registry = registry
        self._assistant = assistant
        self._rng = rng or random.Random()
        self._sleep = sleep
        self._messages: list[ChatMessage] = []
        self._is_open = False
        self._is_typing = False

    @property
    def messages(self) -> list[ChatMessage]:
        """Transcript in conversation order (a copy)."""
        return list(self._messages)

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def is_typing(self) -> bool:
        return self._is_typing

    @property
    def state(self) -> SessionState:
        if not self._is_open:
            return SessionState.CLOSED
        if not self._messages:
            return SessionState.OPEN_EMPTY
        return SessionState.OPEN_ACTIVE

    def _append(
        self,
        text: str,
        *,
        is_bot: bool,
        suggestions: Sequence[str] | None = None,
    ) -> ChatMessage:
        message = ChatMessage(
            text=text,
            is_bot=is_bot,
            suggestions=list(suggestions) if suggestions is not None else None,
        )
        self._messages.append(message)
        return message

    def _context(self) -> tuple[BillCalculation | None, list[Appliance]]:
        if self._registry is None:
            return None, []
        return self._registry.bill, self._registry.appliances

    async def open(self) -> ChatMessage | None:
        """Open the widget, greeting the user if the transcript is empty.

        Returns:
            The greeting message, or ``None`` if no greeting was posted
        """
        if self._is_open:
            return None
        self._is_open = True
        if self._messages:
            return None

        await self._sleep(GREETING_DELAY)
        # The user may have closed the widget or typed during the delay
        if not self._is_open or self._messages:
            return None
        return self._append(
            get_greeting(self._rng),
            is_bot=True,
            suggestions=QUICK_SUGGESTIONS[:GREETING_SUGGESTION_COUNT],
        )

    def close(self) -> None:
        """Hide the widget. The transcript is kept for the next open."""
        self._is_open = False

    def clear(self) -> None:
        """Drop the transcript."""
        self._messages = []

    def _accepts(self, text: str) -> bool:
        if not self._is_open:
            _logger.debug("Ignoring input: session closed")
            return False
        if self._is_typing:
            _logger.debug("Ignoring input: a reply is in progress")
            return False
        if not text or not text.strip():
            return False
        return True

    async def submit(self, text: str) -> ChatMessage | None:
        """Handle a typed message.

        Returns:
            The bot's reply, or ``None`` if the input was ignored
        """
        return await self._turn(text, typed=True)

    async def choose_suggestion(self, suggestion: str) -> ChatMessage | None:
        """Handle a click on a suggestion chip.

        Returns:
            The bot's reply, or ``None`` if the input was ignored
        """
        return await self._turn(suggestion, typed=False)

    async def _turn(self, text: str, *, typed: bool) -> ChatMessage | None:
        if not self._accepts(text):
            return None

        self._append(text, is_bot=False)
        self._is_typing = True
        try:
            delay = SUGGESTION_DELAY
            if typed:
                spread = self._rng.random() * TYPING_DELAY_SPREAD
                delay = TYPING_DELAY_MIN + spread
            await self._sleep(delay)
            response = await self._answer(text)
            return self._append(
                response.text, is_bot=True, suggestions=response.suggestions
            )
        finally:
            self._is_typing = False

    async def _answer(self, text: str) -> AdvisoryResponse:
        bill, appliances = self._context()
        response = respond(text, bill, appliances, rng=self._rng)
        if (
            response.source is not ResponseSource.DEFAULT
            or self._assistant is None
        ):
            return response

        try:
            reply = await self._assistant.ask(text)
        except AssistantUnavailableError as e:
            _logger.warning("Assistant fallback failed: %s", e)
            reply = ASSISTANT_UNAVAILABLE_TEXT
        except Exception as e:
            # Every accepted message still gets exactly one reply
            _logger.error(
                "Unexpected assistant error: %s", e, exc_info=True
            )
            reply = ASSISTANT_UNAVAILABLE_TEXT
        return AdvisoryResponse(
            text=reply,
            suggestions=response.suggestions,
            source=ResponseSource.DEFAULT,
        )
