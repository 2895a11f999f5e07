"""Tests for the chat session controller."""

import asyncio
import logging
import random
from unittest.mock import AsyncMock, MagicMock

import pytest

from powerpredict.advisor import (
    DEFAULT_SUGGESTIONS,
    GREETINGS,
    QUICK_SUGGESTIONS,
)
from powerpredict.assistant import AssistantClient
from powerpredict.chat import (
    ASSISTANT_UNAVAILABLE_TEXT,
    ChatSession,
    SessionState,
)
from powerpredict.config import (
    GREETING_DELAY,
    SUGGESTION_DELAY,
    TYPING_DELAY_MIN,
    TYPING_DELAY_SPREAD,
)
from powerpredict.exceptions import AssistantUnavailableError
from powerpredict.registry import ApplianceRegistry


@pytest.fixture
def session(fake_sleep):
    return ChatSession(rng=random.Random(3), sleep=fake_sleep)


def _mock_assistant(**kwargs) -> MagicMock:
    assistant = MagicMock()
    assistant.ask = AsyncMock(**kwargs)
    return assistant


@pytest.mark.asyncio
async def test_starts_closed(session):
    assert session.state is SessionState.CLOSED
    assert session.messages == []
    assert await session.submit("hello") is None


@pytest.mark.asyncio
async def test_open_greets_after_delay(session, fake_sleep):
    greeting = await session.open()

    assert fake_sleep.delays == [GREETING_DELAY]
    assert greeting is not None
    assert greeting.is_bot
    assert greeting.text in GREETINGS
    assert greeting.suggestions == list(QUICK_SUGGESTIONS[:3])
    assert session.messages == [greeting]
    assert session.state is SessionState.OPEN_ACTIVE


@pytest.mark.asyncio
async def test_open_is_idempotent(session):
    await session.open()
    assert await session.open() is None
    assert len(session.messages) == 1


@pytest.mark.asyncio
async def test_reopen_keeps_transcript_without_new_greeting(session):
    await session.open()
    session.close()
    assert session.state is SessionState.CLOSED

    assert await session.open() is None
    assert len(session.messages) == 1


@pytest.mark.asyncio
async def test_reopen_after_clear_greets_again(session):
    await session.open()
    session.close()
    session.clear()
    assert await session.open() is not None


@pytest.mark.asyncio
async def test_close_during_greeting_delay(session, fake_sleep):
    fake_sleep.gate.clear()
    opening = asyncio.create_task(session.open())
    await asyncio.sleep(0)
    assert session.state is SessionState.OPEN_EMPTY

    session.close()
    fake_sleep.gate.set()

    assert await opening is None
    assert session.messages == []


@pytest.mark.asyncio
async def test_user_message_during_greeting_delay(session, fake_sleep):
    fake_sleep.gate.clear()
    opening = asyncio.create_task(session.open())
    await asyncio.sleep(0)
    turn = asyncio.create_task(session.submit("Best AC temperature?"))
    await asyncio.sleep(0)
    fake_sleep.gate.set()

    assert await opening is None
    reply = await turn
    assert [m.is_bot for m in session.messages] == [False, True]
    assert session.messages[1] == reply


@pytest.mark.asyncio
async def test_submit_appends_user_then_bot(session, fake_sleep):
    await session.open()
    reply = await session.submit("Best AC temperature?")

    user, bot = session.messages[1:]
    assert not user.is_bot
    assert user.text == "Best AC temperature?"
    assert bot == reply
    assert bot.is_bot
    assert len(bot.suggestions) == 3

    delay = fake_sleep.delays[-1]
    assert TYPING_DELAY_MIN <= delay < TYPING_DELAY_MIN + TYPING_DELAY_SPREAD


@pytest.mark.asyncio
async def test_suggestion_uses_fixed_delay(session, fake_sleep):
    await session.open()
    reply = await session.choose_suggestion("Solar panel benefits")

    assert fake_sleep.delays[-1] == SUGGESTION_DELAY
    assert reply is not None
    assert session.messages[-2].text == "Solar panel benefits"


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["", "   "])
async def test_blank_input_ignored(session, text):
    await session.open()
    assert await session.submit(text) is None
    assert len(session.messages) == 1


@pytest.mark.asyncio
async def test_input_ignored_while_typing(session, fake_sleep):
    await session.open()
    fake_sleep.gate.clear()
    turn = asyncio.create_task(session.submit("Best AC temperature?"))
    await asyncio.sleep(0)
    assert session.is_typing

    assert await session.submit("Are you there?") is None
    assert await session.choose_suggestion("Solar panel benefits") is None

    fake_sleep.gate.set()
    assert await turn is not None
    assert not session.is_typing
    assert [m.text for m in session.messages[1:2]] == ["Best AC temperature?"]
    assert len(session.messages) == 3


@pytest.mark.asyncio
async def test_bill_aware_reply(household, fake_sleep):
    session = ChatSession(ApplianceRegistry(household), sleep=fake_sleep)
    await session.open()
    reply = await session.submit("How to reduce my bill?")
    assert reply.text.startswith("Your monthly bill is $")
    assert "Central AC" in reply.text


@pytest.mark.asyncio
async def test_assistant_used_for_default_answers(fake_sleep):
    assistant = _mock_assistant(return_value="Try a heat pump dryer.")
    session = ChatSession(assistant=assistant, sleep=fake_sleep)
    await session.open()

    reply = await session.submit("xyz123")

    assistant.ask.assert_awaited_once_with("xyz123")
    assert reply.text == "Try a heat pump dryer."
    assert reply.suggestions == list(DEFAULT_SUGGESTIONS)


@pytest.mark.asyncio
async def test_assistant_not_used_for_topics(fake_sleep):
    assistant = _mock_assistant(return_value="unused")
    session = ChatSession(assistant=assistant, sleep=fake_sleep)
    await session.open()

    await session.submit("Best AC temperature?")

    assistant.ask.assert_not_awaited()


@pytest.mark.asyncio
async def test_assistant_failure_gives_apology(fake_sleep):
    assistant = _mock_assistant(
        side_effect=AssistantUnavailableError("timed out")
    )
    session = ChatSession(assistant=assistant, sleep=fake_sleep)
    await session.open()

    reply = await session.submit("xyz123")

    assert reply.text == ASSISTANT_UNAVAILABLE_TEXT
    assert reply.suggestions == list(DEFAULT_SUGGESTIONS)
    assert not session.is_typing


@pytest.mark.asyncio
async def test_unexpected_assistant_error_still_replies(fake_sleep, caplog):
    assistant = _mock_assistant(side_effect=RuntimeError("boom"))
    session = ChatSession(assistant=assistant, sleep=fake_sleep)
    await session.open()

    with caplog.at_level(logging.ERROR, logger="powerpredict.chat"):
        reply = await session.submit("xyz123")

    assert reply.text == ASSISTANT_UNAVAILABLE_TEXT
    assert [m.is_bot for m in session.messages] == [True, False, True]
    assert session.messages[-1] == reply
    assert not session.is_typing
    assert "boom" in caplog.text
    assert await session.submit("Best AC temperature?") is not None


@pytest.mark.asyncio
async def test_unentered_assistant_client_still_replies(fake_sleep):
    session = ChatSession(
        assistant=AssistantClient("http://localhost:1"), sleep=fake_sleep
    )
    await session.open()

    reply = await session.submit("xyz123")

    assert reply.text == ASSISTANT_UNAVAILABLE_TEXT
    assert session.messages[-1].is_bot
    assert session.messages[-2].text == "xyz123"
