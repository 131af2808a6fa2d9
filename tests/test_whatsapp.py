import pytest
import requests

from rose_assistant import settings
from rose_assistant.errors import OutboundMessageError
from rose_assistant.whatsapp import WhatsAppClient, parse_inbound_message, verify_subscription


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload if payload is not None else {}
        self.text = "raw body"

    def json(self):
        return self._payload


class FakeSession:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.posts = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.posts.append({"url": url, "json": json, "headers": headers})
        if self.exc:
            raise self.exc
        return self.response


def _payload(message):
    return {"object": "whatsapp_business_account",
            "entry": [{"changes": [{"value": {"messages": [message]}}]}]}


def _client(session):
    return WhatsAppClient(access_token="token", phone_number_id="12345", api_version="v17.0", session=session)


def test_parse_inbound_text_message():
    payload = _payload({"from": "919876543210", "type": "text", "text": {"body": "hi"}})
    assert parse_inbound_message(payload) == ("919876543210", "hi")


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"object": "whatsapp_business_account", "entry": [{"changes": [{"value": {"statuses": []}}]}]},
        _payload({"from": "91", "type": "image", "image": {"id": "m1"}}),
        _payload({"from": "91", "text": {"body": ""}}),
        _payload("garbage"),
        None,
    ],
)
def test_parse_inbound_ignores_non_text(payload):
    assert parse_inbound_message(payload) is None


def test_send_message_posts_text():
    session = FakeSession(FakeResponse(payload={"messages": [{"id": "wamid.1"}]}))
    result = _client(session).send_message("919876543210", "hello")
    assert result["messages"][0]["id"] == "wamid.1"
    sent = session.posts[0]
    assert sent["url"] == "https://graph.facebook.com/v17.0/12345/messages"
    assert sent["json"] == {"messaging_product": "whatsapp", "to": "919876543210", "text": {"body": "hello"}}
    assert sent["headers"]["Authorization"] == "Bearer token"


def test_send_message_rejected():
    session = FakeSession(FakeResponse(status_code=401, payload={"error": {"message": "bad token"}}))
    with pytest.raises(OutboundMessageError) as exc:
        _client(session).send_message("91", "hello")
    assert exc.value.status_code == 401
    assert exc.value.details["error"]["message"] == "bad token"


def test_send_message_network_error():
    session = FakeSession(exc=requests.ConnectionError("down"))
    with pytest.raises(OutboundMessageError):
        _client(session).send_message("91", "hello")


def test_send_message_without_credentials(monkeypatch):
    monkeypatch.setattr(settings, "WHATSAPP_ACCESS_TOKEN", None)
    monkeypatch.setattr(settings, "WHATSAPP_PHONE_NUMBER_ID", None)
    session = FakeSession(FakeResponse())
    with pytest.raises(OutboundMessageError):
        WhatsAppClient(session=session).send_message("91", "hello")
    assert session.posts == []


def test_verify_subscription(monkeypatch):
    monkeypatch.setattr(settings, "WHATSAPP_VERIFY_TOKEN", "secret")
    assert verify_subscription("subscribe", "secret", "12345") == "12345"
    assert verify_subscription("subscribe", "wrong", "12345") is None
    assert verify_subscription("unsubscribe", "secret", "12345") is None
