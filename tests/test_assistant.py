"""Tests for the assistant proxy client."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from powerpredict.assistant import AssistantClient
from powerpredict.exceptions import AssistantUnavailableError


def _make_mock_response(payload=None, json_error=None) -> MagicMock:
    """Create a mock aiohttp response."""
    mock_resp = MagicMock()
    mock_resp.raise_for_status = MagicMock()
    if json_error is not None:
        mock_resp.json = AsyncMock(side_effect=json_error)
    else:
        mock_resp.json = AsyncMock(return_value=payload)
    mock_resp.__aenter__ = AsyncMock(return_value=mock_resp)
    mock_resp.__aexit__ = AsyncMock(return_value=False)
    return mock_resp


def _make_mock_session(mock_resp: MagicMock) -> MagicMock:
    mock_session = MagicMock()
    mock_session.post = MagicMock(return_value=mock_resp)
    mock_session.close = AsyncMock()
    return mock_session


@pytest.mark.asyncio
async def test_ask_returns_reply() -> None:
    mock_session = _make_mock_session(
        _make_mock_response({"reply": "Set the thermostat to 78°F."})
    )

    client = AssistantClient("http://proxy:5000/", session=mock_session)
    async with client:
        reply = await client.ask("Best AC temperature?")

    assert reply == "Set the thermostat to 78°F."
    args, kwargs = mock_session.post.call_args
    assert args[0] == "http://proxy:5000/api/chat"
    assert kwargs["json"] == {"message": "Best AC temperature?"}
    mock_session.close.assert_not_awaited()


@pytest.mark.asyncio
async def test_http_error_is_unavailable() -> None:
    mock_resp = _make_mock_response({"error": "boom"})
    mock_resp.raise_for_status.side_effect = aiohttp.ClientResponseError(
        request_info=MagicMock(), history=(), status=500
    )
    client = AssistantClient(session=_make_mock_session(mock_resp))

    async with client:
        with pytest.raises(AssistantUnavailableError):
            await client.ask("hello")


@pytest.mark.asyncio
async def test_timeout_is_unavailable() -> None:
    mock_session = MagicMock()
    mock_session.post = MagicMock(side_effect=asyncio.TimeoutError())
    client = AssistantClient(session=mock_session)

    async with client:
        with pytest.raises(AssistantUnavailableError):
            await client.ask("hello")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload", [{}, {"reply": ""}, {"reply": 42}, ["reply"], None]
)
async def test_malformed_body_is_unavailable(payload) -> None:
    client = AssistantClient(
        session=_make_mock_session(_make_mock_response(payload))
    )
    async with client:
        with pytest.raises(AssistantUnavailableError, match="invalid"):
            await client.ask("hello")


@pytest.mark.asyncio
async def test_invalid_json_is_unavailable() -> None:
    mock_resp = _make_mock_response(json_error=ValueError("not json"))
    client = AssistantClient(session=_make_mock_session(mock_resp))
    async with client:
        with pytest.raises(AssistantUnavailableError):
            await client.ask("hello")


@pytest.mark.asyncio
async def test_ask_requires_session() -> None:
    client = AssistantClient()
    with pytest.raises(RuntimeError, match="Session not initialized"):
        await client.ask("hello")


def test_url_from_env() -> None:
    with patch.dict(
        "os.environ", {"POWERPREDICT_ASSISTANT_URL": "http://env:8080"}
    ):
        assert AssistantClient().url == "http://env:8080/api/chat"
        assert (
            AssistantClient("http://arg").url == "http://arg/api/chat"
        )


def test_default_url() -> None:
    with patch.dict("os.environ", {}, clear=True):
        assert AssistantClient().url == "http://localhost:5000/api/chat"


@pytest.mark.asyncio
async def test_owned_session_closed() -> None:
    mock_session = MagicMock()
    mock_session.close = AsyncMock()
    with patch(
        "powerpredict.assistant.aiohttp.ClientSession",
        return_value=mock_session,
    ):
        async with AssistantClient() as client:
            assert client._session is mock_session

    mock_session.close.assert_awaited_once()
    assert client._session is None
