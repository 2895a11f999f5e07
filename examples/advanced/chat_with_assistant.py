#!/usr/bin/env python3
"""
Example: Scripted chat session with the optional LLM fallback.

Start the proxy first so questions without a canned answer are forwarded
to the LLM:

    OPENAI_API_KEY=sk-... powerpredict serve

Without a running proxy the session still works; fallback questions get
an apology instead.
"""

import asyncio
import os
from pathlib import Path

from powerpredict import ApplianceRegistry, AssistantClient, ChatSession
from powerpredict.cli.commands import load_appliances

APPLIANCES = Path(__file__).parent.parent / "appliances.json"

QUESTIONS = [
    "How to reduce my bill?",
    "Best AC temperature?",
    "Should I switch my utility plan for an electric vehicle?",
]


async def main() -> None:
    registry = ApplianceRegistry(load_appliances(APPLIANCES))
    url = os.getenv("POWERPREDICT_ASSISTANT_URL", "http://localhost:5000")

    async with AssistantClient(url) as assistant:
        session = ChatSession(registry, assistant=assistant)
        greeting = await session.open()
        if greeting:
            print(f"Assistant: {greeting.text}\n")

        for question in QUESTIONS:
            print(f"You: {question}")
            reply = await session.submit(question)
            if reply is None:
                continue
            print(f"Assistant: {reply.text}")
            for suggestion in reply.suggestions or []:
                print(f"  • {suggestion}")
            print()

        # Follow the first chip of the last reply
        last = session.messages[-1]
        if last.suggestions:
            print(f"You: {last.suggestions[0]}")
            reply = await session.choose_suggestion(last.suggestions[0])
            if reply:
                print(f"Assistant: {reply.text}")


if __name__ == "__main__":
    asyncio.run(main())
