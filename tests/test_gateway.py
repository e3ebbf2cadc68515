"""ModelGateway: history bookkeeping, retry policy and reply parsing."""

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from todo_assistant.agent.conversation import Conversation
from todo_assistant.agent.gateway import ModelGateway
from todo_assistant.domain.exceptions import ContractViolation, ModelServiceError, ServiceUnavailable
from todo_assistant.domain.models import ActionMessage, OutputMessage
from tests.helpers import OverloadedError, ScriptedChatModel, action, output


def _gateway(replies, sleep, **kwargs):
    model = ScriptedChatModel(replies)
    gateway = ModelGateway(llm=model, conversation=Conversation("SYSTEM"), sleep=sleep, **kwargs)
    return gateway, model


class TestConverse:
    @pytest.mark.asyncio
    async def test_sends_whole_history_and_records_reply(self, sleep):
        gateway, model = _gateway([output("hi"), action("getAllTodos")], sleep)

        first = await gateway.converse("hello")
        second = await gateway.converse("what's on my list?")

        assert first == OutputMessage(output="hi")
        assert second == ActionMessage(function="getAllTodos", input="")
        assert [type(m) for m in model.calls[0]] == [SystemMessage, HumanMessage]
        assert [type(m) for m in model.calls[1]] == [SystemMessage, HumanMessage, AIMessage, HumanMessage]
        assert [t.role for t in gateway.conversation.turns] == ["system", "user", "model", "user", "model"]
        assert gateway.conversation.turns[2].content == output("hi")

    @pytest.mark.asyncio
    async def test_list_content_is_joined(self, sleep):
        reply = AIMessage(content=[{"type": "text", "text": '{"type": "output", '}, '"output": "hi"}'])
        gateway, _ = _gateway([reply], sleep)

        assert await gateway.converse("hello") == OutputMessage(output="hi")


class TestRetryPolicy:
    @pytest.mark.asyncio
    async def test_persistent_overload_becomes_service_unavailable(self, sleep):
        gateway, model = _gateway([OverloadedError() for _ in range(4)], sleep)

        with pytest.raises(ServiceUnavailable) as excinfo:
            await gateway.converse("add buy milk")

        assert excinfo.value.attempts == 4
        assert len(model.calls) == 4
        assert sleep.delays == [1.0, 2.0, 4.0]
        # The user turn stays; no model turn was recorded.
        assert [t.role for t in gateway.conversation.turns] == ["system", "user"]

    @pytest.mark.asyncio
    async def test_recovers_within_the_retry_budget(self, sleep):
        gateway, model = _gateway([OverloadedError(), OverloadedError(), output("ok")], sleep)

        assert await gateway.converse("hello") == OutputMessage(output="ok")
        assert len(model.calls) == 3
        assert sleep.delays == [1.0, 2.0]
        assert [t.role for t in gateway.conversation.turns] == ["system", "user", "model"]

    @pytest.mark.asyncio
    async def test_custom_delays_bound_the_attempts(self, sleep):
        gateway, model = _gateway([OverloadedError(), OverloadedError()], sleep, retry_delays=(0.5,))

        with pytest.raises(ServiceUnavailable):
            await gateway.converse("hello")

        assert gateway.max_attempts == 2
        assert len(model.calls) == 2
        assert sleep.delays == [0.5]

    @pytest.mark.asyncio
    async def test_non_transient_error_is_not_retried(self, sleep):
        gateway, model = _gateway([ValueError("invalid api key")], sleep)

        with pytest.raises(ModelServiceError):
            await gateway.converse("hello")

        assert len(model.calls) == 1
        assert sleep.delays == []


class TestMalformedReplies:
    @pytest.mark.asyncio
    async def test_non_json_reply_is_recorded_then_rejected(self, sleep):
        gateway, model = _gateway(["Sure! I added it."], sleep)

        with pytest.raises(ContractViolation) as excinfo:
            await gateway.converse("add buy milk")

        assert excinfo.value.raw == "Sure! I added it."
        assert len(model.calls) == 1
        assert sleep.delays == []
        assert gateway.conversation.turns[-1].role == "model"
        assert gateway.conversation.turns[-1].content == "Sure! I added it."
