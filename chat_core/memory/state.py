from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict


class Role(str, Enum):
    """The author of a message in the conversation."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """A single, immutable entry in the conversation history."""
    model_config = ConfigDict(frozen=True)

    role: Role
    content: str
    position: int = 0


class Summary(BaseModel):
    """A lossy digest of conversation turns that were evicted from the history."""
    model_config = ConfigDict(frozen=True)

    text: str
    approximate_tokens: int


class ConversationState(BaseModel):
    """
    Represents the complete, canonical state of a conversation.
    This is the "source of truth" managed by the ConversationStore.
    Summaries always cover turns older than every retained message.
    """
    messages: List[Message] = []
    summaries: List[Summary] = []
