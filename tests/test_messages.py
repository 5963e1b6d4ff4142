import json

from conftest import FakeOpenAIClient
from eid_greeting.errors import VendorError
from eid_greeting.openai_api import OpenAIClient
from eid_greeting.prompts.card_prompts import default_messages
from eid_greeting.services.messages import generate_messages, parse_messages


def test_parse_messages_accepts_object_and_array():
    assert parse_messages(json.dumps({"messages": ["Eid Mubarak!", " Happy Eid "]})) == [
        "Eid Mubarak!",
        "Happy Eid",
    ]
    assert parse_messages(json.dumps(["Eid Mubarak!"])) == ["Eid Mubarak!"]


def test_parse_messages_rejects_malformed_content():
    assert parse_messages("not json") == []
    assert parse_messages(json.dumps({"greetings": ["Eid Mubarak!"]})) == []
    assert parse_messages(json.dumps({"messages": ["ok", 3]})) == []
    assert parse_messages(json.dumps({"messages": []})) == []
    assert parse_messages(None) == []


def test_generate_messages_returns_model_output():
    client = FakeOpenAIClient(chat_content=json.dumps({"messages": ["Eid Mubarak, Amina!"]}))

    assert generate_messages(client, "Amina") == ["Eid Mubarak, Amina!"]
    assert "for Amina" in client.chat_calls[0]
    assert "5 warm" in client.chat_calls[0]


def test_vendor_failure_returns_five_defaults():
    client = FakeOpenAIClient(chat_error=VendorError("Rate limit reached"))

    messages = generate_messages(client)

    assert messages == default_messages()
    assert len(messages) == 5


def test_malformed_output_returns_defaults():
    client = FakeOpenAIClient(chat_content="Eid Mubarak! Eid Mubarak!")
    assert generate_messages(client, "Yusuf") == default_messages("Yusuf")


def test_missing_key_returns_defaults():
    assert len(generate_messages(OpenAIClient(api_key=None))) == 5


def test_default_messages_are_personalised():
    messages = default_messages("Sara")
    assert messages[0].startswith("Eid Mubarak for Sara!")
    assert default_messages()[0].startswith("Eid Mubarak!")
    assert all(messages)
