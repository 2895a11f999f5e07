"""Command handlers for CLI operations."""

import asyncio
import json
import logging
import os
import threading
from contextlib import AsyncExitStack
from pathlib import Path
from typing import Any

from powerpredict.advisor import respond
from powerpredict.assistant import AssistantClient
from powerpredict.chat import ChatSession
from powerpredict.config import ASSISTANT_URL_ENV
from powerpredict.exceptions import ValidationError
from powerpredict.knowledge_base import TOPICS
from powerpredict.models import Appliance, ChatMessage, parse_appliances
from powerpredict.proxy import ProxyConfig, run_proxy
from powerpredict.registry import ApplianceRegistry

from .output_formatters import bill_to_json
from .rich_output import get_formatter

_logger = logging.getLogger(__name__)
_formatter = get_formatter()

_EXIT_WORDS = {"quit", "exit", "bye"}


def load_appliances(path: str | Path | None) -> list[Appliance]:
    """Load appliances from a JSON file.

    The file holds either a list of appliance objects or an object with an
    ``"appliances"`` list. Keys may be camelCase or snake_case.

    Raises:
        ValidationError: If the file cannot be read or is not valid JSON
        InvalidApplianceError: If an appliance fails validation
    """
    if path is None:
        return []
    try:
        with open(path, encoding="utf-8") as f:
            data: Any = json.load(f)
    except OSError as e:
        raise ValidationError(f"Cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ValidationError(f"{path} is not valid JSON: {e}") from e

    if isinstance(data, dict):
        data = data.get("appliances", [])
    if not isinstance(data, list):
        raise ValidationError(
            f"{path} must contain a list of appliances, "
            f"got {type(data).__name__}"
        )
    appliances = parse_appliances(data)
    _logger.info("Loaded %d appliances from %s", len(appliances), path)
    return appliances


def handle_estimate(registry: ApplianceRegistry, as_json: bool) -> None:
    """Print the bill for the loaded appliances."""
    bill = registry.require_bill()
    if as_json:
        _formatter.print_json(bill_to_json(bill))
    else:
        _formatter.print_bill(bill, registry.settings)


def handle_ask(registry: ApplianceRegistry, query: str) -> None:
    """Answer a single query without opening a chat session."""
    response = respond(query, registry.bill, registry.appliances)
    _formatter.print_chat_message(
        ChatMessage(
            text=response.text, is_bot=True, suggestions=response.suggestions
        )
    )


def handle_topics() -> None:
    _formatter.print_topics(TOPICS)


def _resolve_choice(text: str, last: ChatMessage | None) -> str | None:
    """Map a bare number to the matching suggestion of the last bot reply."""
    if last is None or not last.suggestions or not text.isdecimal():
        return None
    index = int(text) - 1
    if 0 <= index < len(last.suggestions):
        return last.suggestions[index]
    return None


async def _read_line(prompt: str) -> str:
    """Read one line from stdin without blocking the event loop.

    The read runs on a daemon thread so a pending prompt never keeps the
    process alive after Ctrl-C.
    """
    loop = asyncio.get_running_loop()
    future: asyncio.Future[str] = loop.create_future()

    def _deliver(result: str | None, error: Exception | None) -> None:
        if future.done():
            return
        if error is not None:
            future.set_exception(error)
        else:
            future.set_result(result or "")

    def _reader() -> None:
        try:
            line = input(prompt)
        except Exception as e:
            loop.call_soon_threadsafe(_deliver, None, e)
        else:
            loop.call_soon_threadsafe(_deliver, line, None)

    threading.Thread(target=_reader, name="chat-input", daemon=True).start()
    return await future


def resolve_assistant_url(assistant_url: str | None) -> str | None:
    """Assistant proxy URL from the command line, else the environment.

    Returns ``None`` when neither is set, which disables the LLM fallback.
    """
    return assistant_url or os.environ.get(ASSISTANT_URL_ENV) or None


async def _run_turn(
    session: ChatSession, text: str, last: ChatMessage | None
) -> ChatMessage | None:
    choice = _resolve_choice(text, last)
    if choice is not None:
        _formatter.print_chat_message(ChatMessage(text=choice, is_bot=False))
        awaitable = session.choose_suggestion(choice)
    else:
        awaitable = session.submit(text)

    if _formatter.use_rich and _formatter.console is not None:
        with _formatter.console.status("Assistant is typing..."):
            return await awaitable
    return await awaitable


async def handle_chat(
    registry: ApplianceRegistry, assistant_url: str | None = None
) -> None:
    """Run an interactive chat session until the user quits.

    Typing a number picks the matching suggestion from the last reply.
    """
    assistant_url = resolve_assistant_url(assistant_url)
    async with AsyncExitStack() as stack:
        assistant = None
        if assistant_url:
            assistant = await stack.enter_async_context(
                AssistantClient(assistant_url)
            )
        session = ChatSession(registry, assistant=assistant)

        last = await session.open()
        if last is not None:
            _formatter.print_chat_message(last)
        _formatter.print_info(
            "Type a question, a suggestion number, or 'quit' to leave."
        )

        while True:
            try:
                text = (await _read_line("> ")).strip()
            except (EOFError, KeyboardInterrupt):
                break
            if text.lower() in _EXIT_WORDS:
                break
            if not text:
                continue

            reply = await _run_turn(session, text, last)
            if reply is not None:
                _formatter.print_chat_message(reply)
                last = reply

        session.close()


def handle_serve(host: str, port: int) -> None:
    run_proxy(host, port, ProxyConfig.from_env())
