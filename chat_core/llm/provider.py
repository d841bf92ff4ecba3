import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from chat_core.memory.state import Message, Role
from chat_core.models.chat_models import ChatCompletion, RequestOptions, TokenUsage

logger = logging.getLogger(__name__)


class ProviderError(RuntimeError):
    """Raised when a chat completion request fails."""


class ProviderUnavailableError(RuntimeError):
    """Raised when no configured provider can be reached at startup."""


class ChatCompletionProvider(ABC):
    """The capability of turning a list of role-tagged messages into a reply."""

    name: str = "provider"
    model_name: str = ""

    @abstractmethod
    async def complete(
        self, messages: Sequence[Message], options: Optional[RequestOptions] = None
    ) -> ChatCompletion:
        """
        Sends the messages to the model and waits for its reply.

        Raises:
            ProviderError: If the request could not be completed.
        """


_MESSAGE_TYPES = {
    Role.SYSTEM: SystemMessage,
    Role.USER: HumanMessage,
    Role.ASSISTANT: AIMessage,
}


class LangChainChatProvider(ChatCompletionProvider):
    """
    A chat completion provider backed by any LangChain chat model.
    """

    def __init__(self, llm_client: BaseChatModel, name: str = "default", model_name: str = ""):
        self.llm_client = llm_client
        self.name = name
        self.model_name = model_name

    def _build_messages(self, messages: Sequence[Message]) -> List[BaseMessage]:
        return [_MESSAGE_TYPES[message.role](content=message.content) for message in messages]

    async def complete(
        self, messages: Sequence[Message], options: Optional[RequestOptions] = None
    ) -> ChatCompletion:
        lc_messages = self._build_messages(messages)
        invoke_kwargs = options.to_kwargs() if options else {}
        client = self.llm_client.bind(**invoke_kwargs) if invoke_kwargs else self.llm_client

        try:
            response = await client.ainvoke(lc_messages)
        except Exception as e:
            raise ProviderError(f"Provider '{self.name}' failed to respond: {e}") from e

        if not hasattr(response, "content"):
            response_type = type(response).__name__
            raise ProviderError(
                f"The response from provider '{self.name}' (type: {response_type}) "
                "does not have a 'content' attribute."
            )

        usage_metadata = getattr(response, "usage_metadata", None) or {}
        response_metadata = getattr(response, "response_metadata", None) or {}

        return ChatCompletion(
            content=str(response.content),
            model_id=response_metadata.get("model_name") or self.model_name,
            finish_reason=str(response_metadata.get("finish_reason") or ""),
            usage=TokenUsage(
                input_tokens=usage_metadata.get("input_tokens", 0),
                output_tokens=usage_metadata.get("output_tokens", 0),
            ),
        )
