import json
import logging

from eid_greeting.config import MESSAGE_COUNT
from eid_greeting.errors import GreetingError
from eid_greeting.openai_api import OpenAIClient
from eid_greeting.prompts.card_prompts import create_messages_prompt, default_messages

logger = logging.getLogger(__name__)


def parse_messages(content: str) -> list[str]:
    """
    Extract the greeting strings from the chat model output.

    Accepts {"messages": [...]} or a bare JSON array. Returns an empty list
    when the content does not hold a non-empty list of strings.
    """
    try:
        parsed = json.loads(content)
    except (TypeError, ValueError) as e:
        logger.error("Error parsing AI-generated messages: %s", e)
        return []

    if isinstance(parsed, dict):
        parsed = parsed.get("messages")
    if not isinstance(parsed, list):
        return []

    messages = [m.strip() for m in parsed if isinstance(m, str) and m.strip()]
    return messages if len(messages) == len(parsed) else []


def generate_messages(
    client: OpenAIClient, name: str | None = None, count: int = MESSAGE_COUNT
) -> list[str]:
    """Ask the chat model for greetings, falling back to the fixed list."""
    try:
        content = client.complete_json(create_messages_prompt(name, count))
    except GreetingError as e:
        logger.error("Error generating messages: %s", e)
        return default_messages(name)

    messages = parse_messages(content)
    if not messages:
        logger.warning("Chat model returned no usable messages, using defaults")
        return default_messages(name)
    return messages
