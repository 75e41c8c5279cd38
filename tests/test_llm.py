"""Tests for the LangChain-backed model invocation boundary."""

from unittest.mock import AsyncMock, Mock

import pytest
from langchain_core.messages import AIMessage

from huxley.conversation.llm import ChatModelInvoker, ModelRef, parse_model_ref


class TestParseModelRef:
    """Tests for provider/model parsing."""

    def test_valid(self):
        assert parse_model_ref("anthropic/claude-haiku-4-5") == ModelRef("anthropic", "claude-haiku-4-5")

    def test_model_may_contain_slash(self):
        ref = parse_model_ref("openrouter/meta-llama/llama-3-70b")
        assert ref == ModelRef("openrouter", "meta-llama/llama-3-70b")

    @pytest.mark.parametrize("value", [None, "", "gpt-4o", "/model", "provider/"])
    def test_invalid(self, value):
        assert parse_model_ref(value) is None

    def test_string_forms(self):
        ref = ModelRef("ollama", "kimi-k2.5:cloud")
        assert ref.qualified_name == "ollama/kimi-k2.5:cloud"
        assert ref.langchain_name == "ollama:kimi-k2.5:cloud"


def fake_factory(response) -> Mock:
    model = Mock()
    if isinstance(response, Exception):
        model.ainvoke = AsyncMock(side_effect=response)
    else:
        model.ainvoke = AsyncMock(return_value=response)
    return Mock(return_value=model)


class TestChatModelInvoker:
    """Tests for ChatModelInvoker."""

    @pytest.mark.asyncio
    async def test_returns_message_text(self):
        factory = fake_factory(AIMessage(content="  Intent: correction  "))
        invoker = ChatModelInvoker(model_factory=factory)

        text = await invoker.invoke("prompt", ModelRef("anthropic", "claude-haiku-4-5"))

        assert text == "Intent: correction"
        factory.assert_called_once_with("anthropic:claude-haiku-4-5", temperature=0.0)

    @pytest.mark.asyncio
    async def test_content_blocks_flattened(self):
        content = ["Intent: ", {"type": "text", "text": "ambiguous"}]
        invoker = ChatModelInvoker(model_factory=fake_factory(AIMessage(content=content)))
        assert await invoker.invoke("p", ModelRef("a", "b")) == "Intent: ambiguous"

    @pytest.mark.asyncio
    async def test_model_cached_per_ref(self):
        factory = fake_factory(AIMessage(content="ok"))
        invoker = ChatModelInvoker(model_factory=factory)
        await invoker.invoke("p1", ModelRef("a", "b"))
        await invoker.invoke("p2", ModelRef("a", "b"))
        assert factory.call_count == 1

    @pytest.mark.asyncio
    async def test_failure_returns_none(self):
        invoker = ChatModelInvoker(model_factory=fake_factory(RuntimeError("rate limited")))
        assert await invoker.invoke("p", ModelRef("a", "b")) is None

    @pytest.mark.asyncio
    async def test_factory_failure_returns_none(self):
        invoker = ChatModelInvoker(model_factory=Mock(side_effect=ValueError("unknown provider")))
        assert await invoker.invoke("p", ModelRef("nope", "x")) is None

    @pytest.mark.asyncio
    async def test_empty_reply_is_none(self):
        invoker = ChatModelInvoker(model_factory=fake_factory(AIMessage(content="   ")))
        assert await invoker.invoke("p", ModelRef("a", "b")) is None
