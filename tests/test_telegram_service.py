"""
Tests for TelegramService against a mocked Bot API.
"""

import json

import httpx
import pytest

from jamoneria.exceptions import NotificationError
from jamoneria.services.telegram_service import TelegramService


def telegram_with(handler) -> TelegramService:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return TelegramService(bot_token="123:abc", chat_id="-1001", client=client)


@pytest.mark.asyncio
async def test_send_message_posts_html_to_admin_chat():
    requests = []
    
    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"ok": True, "result": {"message_id": 42}})
    
    message_id = await telegram_with(handler).send_message("<b>Hola</b>")
    
    assert message_id == 42
    assert len(requests) == 1
    assert requests[0].url.path == "/bot123:abc/sendMessage"
    body = json.loads(requests[0].content)
    assert body["chat_id"] == "-1001"
    assert body["text"] == "<b>Hola</b>"
    assert body["parse_mode"] == "HTML"


@pytest.mark.asyncio
async def test_send_message_rejected_by_telegram():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"ok": False, "description": "Bad Request: chat not found"})
    
    with pytest.raises(NotificationError):
        await telegram_with(handler).send_message("hola")


@pytest.mark.asyncio
async def test_notify_swallows_transport_errors():
    calls = []
    
    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        raise httpx.ConnectError("unreachable", request=request)
    
    assert await telegram_with(handler).notify("hola") is False
    # Single attempt, no retry
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_notify_without_credentials_sends_nothing():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")
    
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    service = TelegramService(bot_token="", chat_id="", client=client)
    
    assert service.is_configured is False
    assert await service.notify("hola") is False


@pytest.mark.asyncio
async def test_notify_success():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"ok": True, "result": {"message_id": 7}})
    
    assert await telegram_with(handler).notify("hola") is True


@pytest.mark.asyncio
async def test_non_object_reply_is_a_notification_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=["ok"])
    
    service = telegram_with(handler)
    
    with pytest.raises(NotificationError):
        await service.send_message("hola")
    assert await service.notify("hola") is False


@pytest.mark.asyncio
async def test_reply_without_message_object():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"ok": True, "result": True})
    
    assert await telegram_with(handler).send_message("hola") is None
