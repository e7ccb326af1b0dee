from app.schemas.webhook import is_business_account_event, parse_cloud_api_message
from utils.validation_utils import (
    matches_keyword,
    normalize_sender_id,
    sanitize_input,
    validate_phone_number
)


def test_parse_text_message(make_payload):
    message = parse_cloud_api_message(make_payload("hello"))

    assert message.phone == "987654321"
    assert message.sender == "987654321"
    assert message.phone_number_id == "123456789"
    assert message.text == "hello"
    assert message.message_id == "wamid.test"


def test_parse_non_text_message_has_empty_text(make_payload):
    message = parse_cloud_api_message(make_payload(text=None))

    assert message is not None
    assert message.text == ""


def test_parse_jid_sender(make_payload):
    message = parse_cloud_api_message(make_payload("hi", sender="972501234567@c.us"))

    assert message.phone == "972501234567"
    assert message.sender == "972501234567@c.us"


def test_parse_status_update_returns_none(make_payload):
    payload = make_payload()
    value = payload["entry"][0]["changes"][0]["value"]
    del value["messages"]
    value["statuses"] = [{"id": "wamid.out", "status": "delivered"}]

    assert parse_cloud_api_message(payload) is None


def test_parse_missing_phone_number_id_returns_none(make_payload):
    payload = make_payload()
    payload["entry"][0]["changes"][0]["value"]["metadata"] = {}

    assert parse_cloud_api_message(payload) is None


def test_parse_malformed_shapes_return_none():
    assert parse_cloud_api_message({"object": "whatsapp_business_account"}) is None
    assert parse_cloud_api_message({"entry": []}) is None
    assert parse_cloud_api_message({"entry": [{"changes": "nope"}]}) is None
    assert parse_cloud_api_message({"entry": [{"changes": [{"value": None}]}]}) is None


def test_business_account_discriminator(make_payload):
    assert is_business_account_event(make_payload()) is True
    assert is_business_account_event({"object": "page"}) is False
    assert is_business_account_event(["whatsapp_business_account"]) is False


def test_validate_phone_number():
    assert validate_phone_number("972501234567") is True
    assert validate_phone_number("+972501234567") is False
    assert validate_phone_number("(050) 123-4567") is False
    assert validate_phone_number("") is False


def test_normalize_sender_id():
    assert normalize_sender_id("972501234567@s.whatsapp.net") == "972501234567"
    assert normalize_sender_id("972501234567") == "972501234567"


def test_matches_keyword():
    assert matches_keyword(" YES ", ("yes", "כן")) is True
    assert matches_keyword("כן", ("yes", "כן")) is True
    assert matches_keyword("yes please", ("yes",)) is False
    assert matches_keyword("", ("yes",)) is False


def test_sanitize_input():
    assert sanitize_input("  hello \n  world ") == "hello world"
    assert sanitize_input("abcdef", max_length=3) == "abc"
    assert sanitize_input(None) == ""
