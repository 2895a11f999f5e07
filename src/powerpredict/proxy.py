"""
One-route HTTP proxy between the chat front end and an LLM API.

``POST /api/chat`` accepts ``{"message": str}``, forwards it to an
OpenAI-compatible chat-completions endpoint and answers with
``{"reply": str}``. Upstream failures never leak details to the client;
they answer 500 with a generic ``{"error": str}`` body.

The upstream API key is resolved in this order:

1. ``api_key`` argument to :meth:`ProxyConfig.from_env`
2. ``OPENAI_API_KEY`` environment variable
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import aiohttp
from aiohttp import web

from .config import (
    ASSISTANT_CHAT_PATH,
    ASSISTANT_MODEL_ENV,
    DEFAULT_ASSISTANT_MODEL,
    DEFAULT_UPSTREAM_URL,
    OPENAI_API_KEY_ENV,
    UPSTREAM_TIMEOUT,
    UPSTREAM_URL_ENV,
)

__author__ = "PowerPredict Developers"
__copyright__ = "PowerPredict Developers"
__license__ = "MIT"

_logger = logging.getLogger(__name__)

__all__ = [
    "ProxyConfig",
    "create_app",
    "handle_chat",
    "request_completion",
    "run_proxy",
]

UPSTREAM_ERROR = "Failed to get response from assistant"
MISSING_MESSAGE_ERROR = "message is required"


@dataclass(frozen=True)
class ProxyConfig:
    """Upstream LLM settings for the proxy."""

    api_key: str | None
    model: str = DEFAULT_ASSISTANT_MODEL
    upstream_url: str = DEFAULT_UPSTREAM_URL
    timeout: float = UPSTREAM_TIMEOUT

    @classmethod
    def from_env(cls, api_key: str | None = None) -> ProxyConfig:
        return cls(
            api_key=api_key or os.environ.get(OPENAI_API_KEY_ENV),
            model=os.environ.get(ASSISTANT_MODEL_ENV, DEFAULT_ASSISTANT_MODEL),
            upstream_url=os.environ.get(UPSTREAM_URL_ENV, DEFAULT_UPSTREAM_URL),
        )

    def ensure_api_key(self) -> str:
        if not self.api_key:
            raise ValueError(
                "Upstream API key required. Set OPENAI_API_KEY environment "
                "variable or pass api_key to ProxyConfig.from_env()."
            )
        return self.api_key


CONFIG_KEY = web.AppKey("proxy_config", ProxyConfig)
SESSION_KEY = web.AppKey("upstream_session", aiohttp.ClientSession)


async def request_completion(
    session: aiohttp.ClientSession, config: ProxyConfig, message: str
) -> str:
    """Send one user message upstream and return the completion text.

    Raises:
        ValueError: If no API key is configured or the body is malformed
        aiohttp.ClientError: If the upstream request fails
        asyncio.TimeoutError: If the upstream does not answer in time
    """
    api_key = config.ensure_api_key()
    payload = {
        "model": config.model,
        "messages": [{"role": "user", "content": message}],
    }
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }
    async with session.post(
        config.upstream_url,
        json=payload,
        headers=headers,
        timeout=aiohttp.ClientTimeout(total=config.timeout),
    ) as resp:
        resp.raise_for_status()
        data: Any = await resp.json()

    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        raise ValueError(f"Malformed upstream response: {e}") from e
    if not isinstance(content, str):
        raise ValueError("Malformed upstream response: content is not text")
    return content


async def handle_chat(request: web.Request) -> web.Response:
    """``POST /api/chat`` handler."""
    try:
        body = await request.json()
    except ValueError:
        return web.json_response({"error": MISSING_MESSAGE_ERROR}, status=400)

    message = body.get("message") if isinstance(body, dict) else None
    if not isinstance(message, str) or not message.strip():
        return web.json_response({"error": MISSING_MESSAGE_ERROR}, status=400)

    config = request.app[CONFIG_KEY]
    session = request.app[SESSION_KEY]
    try:
        reply = await request_completion(session, config, message)
    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
        _logger.error("Upstream assistant request failed: %s", e)
        return web.json_response({"error": UPSTREAM_ERROR}, status=500)

    _logger.info("Proxied chat message (%d chars reply)", len(reply))
    return web.json_response({"reply": reply})


@web.middleware
async def cors_middleware(
    request: web.Request,
    handler: Callable[[web.Request], Awaitable[web.StreamResponse]],
) -> web.StreamResponse:
    """Allow the browser front end to call the proxy from any origin."""
    if request.method == "OPTIONS":
        response: web.StreamResponse = web.Response(status=204)
    else:
        response = await handler(request)
    response.headers["Access-Control-Allow-Origin"] = "*"
    response.headers["Access-Control-Allow-Methods"] = "POST, OPTIONS"
    response.headers["Access-Control-Allow-Headers"] = "Content-Type"
    return response


def create_app(
    config: ProxyConfig | None = None,
    session: aiohttp.ClientSession | None = None,
) -> web.Application:
    """Build the proxy application.

    Args:
        config: Upstream settings; defaults to :meth:`ProxyConfig.from_env`
        session: Shared upstream session. When omitted, one is created on
            startup and closed on cleanup.
    """
    app = web.Application(middlewares=[cors_middleware])
    app[CONFIG_KEY] = config or ProxyConfig.from_env()

    if session is not None:
        app[SESSION_KEY] = session
    else:

        async def upstream_session(app: web.Application) -> AsyncIterator[None]:
            app[SESSION_KEY] = upstream = aiohttp.ClientSession()
            yield
            await upstream.close()

        app.cleanup_ctx.append(upstream_session)

    app.router.add_post(ASSISTANT_CHAT_PATH, handle_chat)
    app.router.add_route("OPTIONS", ASSISTANT_CHAT_PATH, handle_chat)
    return app


def run_proxy(
    host: str, port: int, config: ProxyConfig | None = None
) -> None:
    """Serve the proxy until interrupted."""
    config = config or ProxyConfig.from_env()
    if not config.api_key:
        _logger.warning(
            "No upstream API key configured; every chat request will fail"
        )
    _logger.info("Assistant proxy listening on http://%s:%d", host, port)
    web.run_app(create_app(config), host=host, port=port, print=None)
