import json

import httpx
import pytest

from app.core.exceptions import MessagingError
from app.services.whatsapp_service import WhatsAppService


def make_service(handler) -> WhatsAppService:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return WhatsAppService(access_token="test-access-token", client=client)


@pytest.mark.asyncio
async def test_send_message_posts_to_graph_api():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["headers"] = request.headers
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"messages": [{"id": "wamid.out"}]})

    service = make_service(handler)
    result = await service.send_message("123456789", "987654321", "Echo: Test message")

    assert seen["url"] == "https://graph.facebook.com/v22.0/123456789/messages"
    assert seen["body"] == {
        "messaging_product": "whatsapp",
        "to": "987654321",
        "text": {"body": "Echo: Test message"},
    }
    assert seen["headers"]["authorization"] == "Bearer test-access-token"
    assert seen["headers"]["content-type"] == "application/json"
    assert result == {"messages": [{"id": "wamid.out"}]}
    await service.close()


@pytest.mark.asyncio
async def test_error_status_raises_messaging_error():
    service = make_service(lambda request: httpx.Response(401, json={"error": {"message": "bad token"}}))

    with pytest.raises(MessagingError) as exc_info:
        await service.send_message("123456789", "987654321", "hi")

    assert "401" in exc_info.value.message
    await service.close()


@pytest.mark.asyncio
async def test_transport_error_raises_messaging_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    service = make_service(handler)

    with pytest.raises(MessagingError):
        await service.send_message("123456789", "987654321", "hi")
    await service.close()


@pytest.mark.asyncio
async def test_timeout_raises_messaging_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    service = make_service(handler)

    with pytest.raises(MessagingError) as exc_info:
        await service.send_message("123456789", "987654321", "hi")

    assert exc_info.value.message == "Graph API timeout"
    await service.close()


def test_custom_base_url_and_version():
    service = WhatsAppService(
        access_token="t",
        base_url="http://graph.local/",
        api_version="v19.0",
        client=httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
    )

    assert service.messages_url("42") == "http://graph.local/v19.0/42/messages"


def test_format_echo_message():
    assert WhatsAppService.format_echo_message("hello") == "Echo: hello"
    assert WhatsAppService.format_echo_message("") == "Echo: "


def test_is_configured():
    assert WhatsAppService(access_token="t").is_configured() is True
    assert WhatsAppService(access_token="").is_configured() is False
