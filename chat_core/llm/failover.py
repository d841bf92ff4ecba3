import logging
from typing import List, Optional

from chat_core.llm.llm_factory import LLMFactory
from chat_core.llm.provider import (
    ChatCompletionProvider,
    LangChainChatProvider,
    ProviderUnavailableError,
)
from chat_core.memory.state import Message, Role
from chat_core.models.chat_models import ChatSettings

logger = logging.getLogger(__name__)

PROBE_MESSAGE = "Hello"


def provider_candidates(settings: ChatSettings) -> List[str]:
    """The provider keys to try, primary first. A duplicate fallback is skipped."""
    candidates = [settings.primary_provider]
    fallback = settings.fallback_provider
    if fallback and fallback.lower() != settings.primary_provider.lower():
        candidates.append(fallback)
    return candidates


async def try_provider(llm_factory: LLMFactory, provider_key: str) -> Optional[ChatCompletionProvider]:
    """
    Creates the provider and probes it with a one-message request.

    Returns:
        The connected provider, or None if it could not be created or reached.
    """
    try:
        llm_client = llm_factory.create_llm_client(provider_key)
        provider = LangChainChatProvider(
            llm_client, name=provider_key, model_name=llm_factory.get_model_name(provider_key)
        )
        await provider.complete([Message(role=Role.USER, content=PROBE_MESSAGE)])
    except Exception as e:
        # SDKs report missing keys and unreachable endpoints with their own exception types.
        logger.warning(f"Failed to connect to provider '{provider_key}': {e}")
        return None

    logger.info(f"Successfully connected to provider '{provider_key}'.")
    return provider


async def connect_provider(llm_factory: LLMFactory, settings: ChatSettings) -> ChatCompletionProvider:
    """
    Connects to the primary provider, falling back to the secondary one.

    Raises:
        ProviderUnavailableError: If none of the configured providers respond.
    """
    candidates = provider_candidates(settings)
    for index, provider_key in enumerate(candidates):
        if index > 0:
            logger.info(f"Primary provider failed, trying fallback: {provider_key}")
        provider = await try_provider(llm_factory, provider_key)
        if provider is not None:
            return provider

    raise ProviderUnavailableError(
        f"All providers failed ({', '.join(candidates)}). "
        "Please check your API keys and configuration."
    )
