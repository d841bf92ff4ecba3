from unittest.mock import AsyncMock, MagicMock

import pytest

from chat_core.commands import CommandInterpreter
from chat_core.guard import InputGuard
from chat_core.llm import ChatCompletionProvider
from chat_core.memory import ConversationStore
from chat_core.models.chat_models import ChatCompletion, ChatSettings, TokenUsage


@pytest.fixture
def store():
    """Provide an empty ConversationStore."""
    return ConversationStore()


@pytest.fixture
def guard():
    """Provide an InputGuard with the default rules."""
    return InputGuard()


@pytest.fixture
def interpreter():
    return CommandInterpreter()


@pytest.fixture
def settings():
    """Provide chat settings with safety features on."""
    return ChatSettings(context_window_tokens=4000, primary_provider="stub")


@pytest.fixture
def completion():
    return ChatCompletion(
        content="Hi there!",
        model_id="stub-model",
        finish_reason="stop",
        usage=TokenUsage(input_tokens=12, output_tokens=4),
    )


@pytest.fixture
def provider(completion):
    """Provide a provider double whose `complete` coroutine returns a fixed reply."""
    provider = MagicMock(spec=ChatCompletionProvider)
    provider.name = "stub"
    provider.model_name = "stub-model"
    provider.complete = AsyncMock(return_value=completion)
    return provider
