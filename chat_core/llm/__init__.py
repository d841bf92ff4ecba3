from .llm_factory import LLMFactory
from .prompt_manager import PromptManager
from .provider import (
    ChatCompletionProvider,
    LangChainChatProvider,
    ProviderError,
    ProviderUnavailableError,
)
from .failover import connect_provider

__all__ = [
    "LLMFactory",
    "PromptManager",
    "ChatCompletionProvider",
    "LangChainChatProvider",
    "ProviderError",
    "ProviderUnavailableError",
    "connect_provider",
]
