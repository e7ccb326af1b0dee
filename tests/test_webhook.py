from app.core.config import settings
from app.core.exceptions import MessagingError
from app.flow.states import ConversationState
from utils.constants import PERMISSION_PROMPT_MESSAGE

from conftest import PHONE_NUMBER_ID, SENDER, VERIFY_TOKEN


class TestWebhookVerification:
    """GET /webhook/whatsapp"""

    def test_returns_challenge_when_verification_succeeds(self, client):
        response = client.get("/webhook/whatsapp", params={
            "hub.mode": "subscribe",
            "hub.verify_token": VERIFY_TOKEN,
            "hub.challenge": "123456",
        })

        assert response.status_code == 200
        assert response.text == "123456"

    def test_challenge_is_echoed_verbatim(self, client):
        challenge = "Ab-_ 9~x"
        response = client.get("/webhook/whatsapp", params={
            "hub.mode": "subscribe",
            "hub.verify_token": VERIFY_TOKEN,
            "hub.challenge": challenge,
        })

        assert response.status_code == 200
        assert response.text == challenge

    def test_returns_403_when_token_is_incorrect(self, client):
        response = client.get("/webhook/whatsapp", params={
            "hub.mode": "subscribe",
            "hub.verify_token": "wrong-token",
            "hub.challenge": "123456",
        })

        assert response.status_code == 403

    def test_returns_403_when_mode_is_not_subscribe(self, client):
        response = client.get("/webhook/whatsapp", params={
            "hub.mode": "unsubscribe",
            "hub.verify_token": VERIFY_TOKEN,
            "hub.challenge": "123456",
        })

        assert response.status_code == 403

    def test_returns_400_when_mode_or_token_is_missing(self, client):
        response = client.get("/webhook/whatsapp", params={"hub.challenge": "123456"})
        assert response.status_code == 400

        response = client.get("/webhook/whatsapp", params={"hub.mode": "subscribe"})
        assert response.status_code == 400

        response = client.get("/webhook/whatsapp", params={"hub.verify_token": VERIFY_TOKEN})
        assert response.status_code == 400


class TestWebhookEvents:
    """POST /webhook/whatsapp"""

    def test_echo_mode_sends_echo_reply(self, client, messenger, make_payload, monkeypatch):
        monkeypatch.setattr(settings, "ECHO_MODE", True)

        response = client.post("/webhook/whatsapp", json=make_payload("Test message"))

        assert response.status_code == 200
        assert response.text == "EVENT_RECEIVED"
        messenger.send_message.assert_awaited_once_with(PHONE_NUMBER_ID, SENDER, "Echo: Test message")

    def test_first_message_sends_permission_prompt(self, client, messenger, session_store, make_payload):
        response = client.post("/webhook/whatsapp", json=make_payload("hello"))

        assert response.status_code == 200
        assert response.text == "EVENT_RECEIVED"
        messenger.send_message.assert_awaited_once_with(PHONE_NUMBER_ID, SENDER, PERMISSION_PROMPT_MESSAGE)
        assert session_store._sessions[SENDER].state == ConversationState.WAITING_FOR_PERMISSION

    def test_responds_200_when_no_messages_in_payload(self, client, messenger):
        payload = {
            "object": "whatsapp_business_account",
            "entry": [{
                "id": "123456789",
                "changes": [{
                    "value": {"metadata": {"phone_number_id": PHONE_NUMBER_ID}},
                    "field": "messages",
                }],
            }],
        }

        response = client.post("/webhook/whatsapp", json=payload)

        assert response.status_code == 200
        assert response.text == "EVENT_RECEIVED"
        messenger.send_message.assert_not_awaited()

    def test_responds_200_when_entry_is_empty(self, client, messenger):
        response = client.post("/webhook/whatsapp", json={"object": "whatsapp_business_account", "entry": []})

        assert response.status_code == 200
        messenger.send_message.assert_not_awaited()

    def test_responds_404_when_object_is_not_recognized(self, client, messenger):
        response = client.post("/webhook/whatsapp", json={"object": "unknown_object", "entry": []})

        assert response.status_code == 404
        messenger.send_message.assert_not_awaited()

    def test_responds_404_for_non_json_body(self, client, messenger):
        response = client.post(
            "/webhook/whatsapp",
            content=b"not json",
            headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 404
        messenger.send_message.assert_not_awaited()

    def test_send_failure_is_still_acknowledged(self, client, messenger, make_payload, monkeypatch):
        monkeypatch.setattr(settings, "ECHO_MODE", True)
        messenger.send_message.side_effect = MessagingError("API Error")

        response = client.post("/webhook/whatsapp", json=make_payload("Test message"))

        assert response.status_code == 200
        assert response.text == "EVENT_RECEIVED"
        messenger.send_message.assert_awaited_once()

    def test_send_failure_in_flow_is_still_acknowledged(self, client, messenger, session_store, make_payload):
        messenger.send_message.side_effect = RuntimeError("network down")

        response = client.post("/webhook/whatsapp", json=make_payload("hello"))

        assert response.status_code == 200
        assert response.text == "EVENT_RECEIVED"
        # The prompt never went out, so the user is still idle
        assert session_store._sessions[SENDER].state == ConversationState.IDLE

    def test_conversation_over_webhook(self, client, messenger, connector, session_store, make_payload):
        for text in ("hi", "yes", "done"):
            response = client.post("/webhook/whatsapp", json=make_payload(text))
            assert response.status_code == 200

        assert messenger.send_message.await_count == 3
        assert connector.pairing_calls == [SENDER]
        last_reply = messenger.send_message.await_args.args[2]
        assert last_reply == "You are a member of 2 WhatsApp groups."
        assert session_store._sessions[SENDER].state == ConversationState.CONNECTED

    def test_jid_sender_is_keyed_by_phone_number(self, client, messenger, session_store, make_payload):
        client.post("/webhook/whatsapp", json=make_payload("hi", sender="972501234567@c.us"))

        assert "972501234567" in session_store._sessions
        messenger.send_message.assert_awaited_once_with(PHONE_NUMBER_ID, "972501234567@c.us", PERMISSION_PROMPT_MESSAGE)
