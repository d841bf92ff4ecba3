from typing import Sequence

from chat_core.memory.state import Message, Role, Summary

CHARS_PER_TOKEN = 4
SUMMARY_TOPIC_LIMIT = 3
SUMMARY_TOPIC_MAX_CHARS = 50


def estimate_tokens(text: str) -> int:
    """Heuristic token count: one token for every four characters."""
    return len(text or "") // CHARS_PER_TOKEN


def truncate_content(content: str, max_length: int = SUMMARY_TOPIC_MAX_CHARS) -> str:
    if not content:
        return ""
    if len(content) <= max_length:
        return content
    return content[:max_length] + "..."


def summarize_messages(messages: Sequence[Message]) -> Summary:
    """
    Builds a deterministic, lossy digest of the given messages.

    The digest names the first few user topics, counts the rest, and notes
    whether the assistant took part. The original wording cannot be
    reconstructed from it.

    Args:
        messages: The evicted prefix of the conversation, oldest first.

    Returns:
        The Summary to append to the conversation's summary sequence.
    """
    user_messages = [m for m in messages if m.role == Role.USER]
    has_assistant = any(m.role == Role.ASSISTANT for m in messages)

    topics = ", ".join(
        truncate_content(m.content) for m in user_messages[:SUMMARY_TOPIC_LIMIT]
    )
    text = f"User discussed: {topics}"

    remaining = len(user_messages) - SUMMARY_TOPIC_LIMIT
    if remaining > 0:
        text += f" and {remaining} other topics"

    if has_assistant:
        text += ". Assistant provided guidance on these topics."

    return Summary(text=text, approximate_tokens=estimate_tokens(text))
