"""Tests for the LangChain provider adapter and startup failover."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from chat_core.llm import LangChainChatProvider, ProviderError, ProviderUnavailableError, connect_provider
from chat_core.llm.failover import PROBE_MESSAGE, provider_candidates
from chat_core.memory import Message, Role
from chat_core.models.chat_models import ChatSettings, RequestOptions


def _mock_client(response=None, error=None):
    client = MagicMock()
    client.ainvoke = AsyncMock(return_value=response, side_effect=error)
    return client


def _ai_message(content="ok"):
    return AIMessage(
        content=content,
        usage_metadata={"input_tokens": 5, "output_tokens": 2, "total_tokens": 7},
        response_metadata={"model_name": "gpt-test", "finish_reason": "stop"},
    )


class TestLangChainChatProvider:
    """Test suite for LangChainChatProvider."""

    @pytest.mark.asyncio
    async def test_completes_with_a_langchain_model(self):
        provider = LangChainChatProvider(
            FakeListChatModel(responses=["Hello from the fake model"]), name="fake"
        )

        completion = await provider.complete([Message(role=Role.USER, content="Hi")])

        assert completion.content == "Hello from the fake model"
        assert completion.usage.input_tokens == 0
        assert completion.usage.output_tokens == 0

    def test_roles_map_to_langchain_messages(self):
        provider = LangChainChatProvider(MagicMock())
        messages = provider._build_messages([
            Message(role=Role.SYSTEM, content="s"),
            Message(role=Role.USER, content="u"),
            Message(role=Role.ASSISTANT, content="a"),
        ])

        assert [type(m) for m in messages] == [SystemMessage, HumanMessage, AIMessage]
        assert [m.content for m in messages] == ["s", "u", "a"]

    @pytest.mark.asyncio
    async def test_reads_usage_and_metadata(self):
        provider = LangChainChatProvider(_mock_client(_ai_message()), model_name="configured")

        completion = await provider.complete([Message(role=Role.USER, content="Hi")])

        assert completion.model_id == "gpt-test"
        assert completion.finish_reason == "stop"
        assert completion.usage.input_tokens == 5
        assert completion.usage.output_tokens == 2

    @pytest.mark.asyncio
    async def test_falls_back_to_configured_model_name(self):
        client = _mock_client(AIMessage(content="ok"))
        provider = LangChainChatProvider(client, model_name="configured")

        completion = await provider.complete([Message(role=Role.USER, content="Hi")])

        assert completion.model_id == "configured"
        assert completion.finish_reason == ""

    @pytest.mark.asyncio
    async def test_request_options_are_bound_to_the_client(self):
        bound = _mock_client(_ai_message())
        client = MagicMock()
        client.bind = MagicMock(return_value=bound)
        provider = LangChainChatProvider(client)

        await provider.complete(
            [Message(role=Role.USER, content="Hi")], RequestOptions(temperature=0.2)
        )

        client.bind.assert_called_once_with(temperature=0.2)
        bound.ainvoke.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_client_errors_become_provider_errors(self):
        cause = RuntimeError("rate limited")
        provider = LangChainChatProvider(_mock_client(error=cause), name="primary")

        with pytest.raises(ProviderError, match="rate limited") as exc_info:
            await provider.complete([Message(role=Role.USER, content="Hi")])

        assert exc_info.value.__cause__ is cause


class TestFailover:
    """Test suite for connecting to the primary or fallback provider."""

    @pytest.fixture
    def settings(self):
        return ChatSettings(primary_provider="primary", fallback_provider="fallback")

    def _factory(self, clients):
        factory = MagicMock()
        factory.get_model_name = MagicMock(return_value="model-x")

        def create(provider_key):
            client = clients[provider_key]
            if isinstance(client, Exception):
                raise client
            return client

        factory.create_llm_client = MagicMock(side_effect=create)
        return factory

    def test_candidates_skip_a_duplicate_fallback(self):
        settings = ChatSettings(primary_provider="OpenAI", fallback_provider="openai")
        assert provider_candidates(settings) == ["OpenAI"]

    def test_candidates_without_fallback(self):
        assert provider_candidates(ChatSettings(primary_provider="only")) == ["only"]

    @pytest.mark.asyncio
    async def test_primary_provider_is_used_when_it_answers(self, settings):
        primary = _mock_client(_ai_message())
        factory = self._factory({"primary": primary, "fallback": _mock_client(_ai_message())})

        provider = await connect_provider(factory, settings)

        assert provider.name == "primary"
        assert provider.model_name == "model-x"
        probe = primary.ainvoke.await_args.args[0]
        assert [m.content for m in probe] == [PROBE_MESSAGE]
        factory.create_llm_client.assert_called_once_with("primary")

    @pytest.mark.asyncio
    async def test_fallback_is_used_when_primary_fails(self, settings):
        factory = self._factory({
            "primary": _mock_client(error=RuntimeError("down")),
            "fallback": _mock_client(_ai_message()),
        })

        provider = await connect_provider(factory, settings)

        assert provider.name == "fallback"

    @pytest.mark.asyncio
    async def test_misconfigured_primary_falls_back(self, settings):
        factory = self._factory({
            "primary": ValueError("Provider 'primary' not found in the configuration."),
            "fallback": _mock_client(_ai_message()),
        })

        provider = await connect_provider(factory, settings)

        assert provider.name == "fallback"

    @pytest.mark.asyncio
    async def test_no_reachable_provider_raises(self, settings):
        factory = self._factory({
            "primary": _mock_client(error=RuntimeError("down")),
            "fallback": _mock_client(error=RuntimeError("also down")),
        })

        with pytest.raises(ProviderUnavailableError, match="primary, fallback"):
            await connect_provider(factory, settings)
