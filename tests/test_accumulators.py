"""Tests for folding stream events into responses."""
from typing import Any, Dict, List, Optional

import pytest

from llmwire.core.errors import StreamError
from llmwire.providers.anthropic.accumulator import AnthropicAccumulator
from llmwire.providers.anthropic.models import AnthropicStreamEvent
from llmwire.providers.models import Role
from llmwire.providers.openai.accumulator import OpenAIAccumulator
from llmwire.providers.openai.models import ChatCompletionChunk


def chunk(
    delta: Optional[Dict[str, Any]] = None,
    index: int = 0,
    finish_reason: Optional[str] = None,
    **fields: Any,
) -> ChatCompletionChunk:
    data: Dict[str, Any] = {"id": "chatcmpl-1", "model": "gpt-4o", **fields}
    if delta is not None or finish_reason is not None:
        data["choices"] = [
            {"index": index, "delta": delta or {}, "finish_reason": finish_reason}
        ]
    return ChatCompletionChunk.model_validate(data)


def event(data: Dict[str, Any]) -> AnthropicStreamEvent:
    return AnthropicStreamEvent.model_validate(data)


def text_delta(text: str, index: int = 0) -> AnthropicStreamEvent:
    return event(
        {
            "type": "content_block_delta",
            "index": index,
            "delta": {"type": "text_delta", "text": text},
        }
    )


MESSAGE_START = event(
    {
        "type": "message_start",
        "message": {
            "id": "msg_1",
            "type": "message",
            "role": "assistant",
            "model": "claude-3-5-sonnet-20241022",
            "content": [],
            "usage": {"input_tokens": 10, "output_tokens": 1},
        },
    }
)


def fold_openai(chunks: List[ChatCompletionChunk]) -> OpenAIAccumulator:
    accumulator = OpenAIAccumulator()
    for item in chunks:
        accumulator.add(item)
    return accumulator


def fold_anthropic(events: List[AnthropicStreamEvent]) -> AnthropicAccumulator:
    accumulator = AnthropicAccumulator()
    for item in events:
        accumulator.add(item)
    return accumulator


# =============================================================================
# Chat completions chunks
# =============================================================================


def test_openai_text_is_concatenated_in_order() -> None:
    accumulator = fold_openai(
        [
            chunk({"role": "assistant", "content": ""}),
            chunk({"content": "Hi"}),
            chunk({"content": " there"}),
            chunk({"content": "!"}),
            chunk({}, finish_reason="stop"),
        ]
    )
    response = accumulator.finalize()
    assert response.id == "chatcmpl-1"
    assert response.model == "gpt-4o"
    assert response.choices[0].message.role == Role.ASSISTANT
    assert response.text == "Hi there!"
    assert response.choices[0].finish_reason == "stop"


@pytest.mark.parametrize(
    "pieces",
    [
        ["H", "e", "l", "l", "o", ",", " ", "w", "o", "r", "l", "d"],
        ["Hel", "lo, w", "orld"],
        ["Hello, world"],
    ],
)
def test_openai_batching_does_not_change_text(pieces: List[str]) -> None:
    response = fold_openai([chunk({"content": piece}) for piece in pieces]).finalize()
    assert response.text == "Hello, world"


def test_openai_tool_call_arguments_are_concatenated() -> None:
    response = fold_openai(
        [
            chunk(
                {
                    "role": "assistant",
                    "tool_calls": [
                        {
                            "index": 0,
                            "id": "call_1",
                            "type": "function",
                            "function": {"name": "lookup", "arguments": ""},
                        }
                    ],
                }
            ),
            chunk({"tool_calls": [{"index": 0, "function": {"arguments": '{"a":'}}]}),
            chunk({"tool_calls": [{"index": 0, "function": {"arguments": "1}"}}]}),
            chunk({}, finish_reason="tool_calls"),
        ]
    ).finalize()

    tool_call = response.choices[0].message.tool_calls[0]
    assert tool_call.id == "call_1"
    assert tool_call.function.name == "lookup"
    assert tool_call.function.arguments == '{"a":1}'
    assert response.choices[0].finish_reason == "tool_calls"


def test_openai_reordered_fragments_change_the_arguments() -> None:
    in_order = fold_openai(
        [
            chunk({"tool_calls": [{"index": 0, "function": {"arguments": '{"a":'}}]}),
            chunk({"tool_calls": [{"index": 0, "function": {"arguments": "1}"}}]}),
        ]
    ).finalize()
    swapped = fold_openai(
        [
            chunk({"tool_calls": [{"index": 0, "function": {"arguments": "1}"}}]}),
            chunk({"tool_calls": [{"index": 0, "function": {"arguments": '{"a":'}}]}),
        ]
    ).finalize()
    assert in_order.choices[0].message.tool_calls[0].function.arguments == '{"a":1}'
    assert swapped.choices[0].message.tool_calls[0].function.arguments != '{"a":1}'


def test_openai_tool_call_id_and_name_first_value_wins() -> None:
    response = fold_openai(
        [
            chunk({"tool_calls": [{"index": 0, "id": "call_1", "function": {"name": "a"}}]}),
            chunk({"tool_calls": [{"index": 0, "id": "call_2", "function": {"name": "b"}}]}),
        ]
    ).finalize()
    tool_call = response.choices[0].message.tool_calls[0]
    assert tool_call.id == "call_1"
    assert tool_call.function.name == "a"


def test_openai_parallel_tool_calls_are_kept_apart() -> None:
    response = fold_openai(
        [
            chunk({"tool_calls": [{"index": 1, "id": "call_b", "function": {"name": "b", "arguments": "{}"}}]}),
            chunk({"tool_calls": [{"index": 0, "id": "call_a", "function": {"name": "a", "arguments": "{"}}]}),
            chunk({"tool_calls": [{"index": 0, "function": {"arguments": "}"}}]}),
        ]
    ).finalize()
    calls = response.choices[0].message.tool_calls
    assert [call.id for call in calls] == ["call_a", "call_b"]
    assert calls[0].function.arguments == "{}"


def test_openai_role_and_name_first_non_null_wins() -> None:
    response = fold_openai(
        [
            chunk({"role": "assistant", "name": "bot"}),
            chunk({"role": None, "name": None, "content": "x"}),
            chunk({"role": "user", "name": "other"}),
        ]
    ).finalize()
    message = response.choices[0].message
    assert message.role == Role.ASSISTANT
    assert message.name == "bot"


def test_openai_legacy_function_call_is_accumulated() -> None:
    response = fold_openai(
        [
            chunk({"function_call": {"name": "lookup", "arguments": '{"w'}}),
            chunk({"function_call": {"arguments": 'ord":"hi"}'}}),
        ]
    ).finalize()
    function_call = response.choices[0].message.function_call
    assert function_call is not None
    assert function_call.name == "lookup"
    assert function_call.arguments == '{"word":"hi"}'


def test_openai_choices_accumulate_independently() -> None:
    response = fold_openai(
        [
            chunk({"content": "a"}, index=1),
            chunk({"content": "x"}, index=0),
            chunk({"content": "b"}, index=1),
        ]
    ).finalize()
    assert [choice.index for choice in response.choices] == [0, 1]
    assert response.choices[0].message.content == "x"
    assert response.choices[1].message.content == "ab"


def test_openai_usage_is_overwritten() -> None:
    response = fold_openai(
        [
            chunk({"content": "x"}),
            chunk(usage={"prompt_tokens": 1, "completion_tokens": 1, "total_tokens": 2}),
            chunk(usage={"prompt_tokens": 9, "completion_tokens": 3, "total_tokens": 12}),
        ]
    ).finalize()
    assert response.usage is not None
    assert response.usage.total_tokens == 12


def test_openai_empty_stream_cannot_finalize() -> None:
    with pytest.raises(StreamError):
        OpenAIAccumulator().finalize()


# =============================================================================
# Messages events
# =============================================================================


def test_anthropic_text_deltas_fold_into_block() -> None:
    response = fold_anthropic(
        [
            MESSAGE_START,
            event(
                {
                    "type": "content_block_start",
                    "index": 0,
                    "content_block": {"type": "text", "text": ""},
                }
            ),
            event({"type": "ping"}),
            text_delta("Hi"),
            text_delta(" there"),
            text_delta("!"),
            event({"type": "content_block_stop", "index": 0}),
            event(
                {
                    "type": "message_delta",
                    "delta": {"stop_reason": "end_turn", "stop_sequence": None},
                    "usage": {"output_tokens": 5},
                }
            ),
            event({"type": "message_stop"}),
        ]
    ).finalize()

    assert response.id == "msg_1"
    assert response.role == "assistant"
    assert response.model == "claude-3-5-sonnet-20241022"
    assert len(response.content) == 1
    assert response.content[0].type == "text"
    assert response.content[0].text == "Hi there!"
    assert response.stop_reason == "end_turn"
    assert response.usage is not None
    assert response.usage.input_tokens == 10
    assert response.usage.output_tokens == 5


@pytest.mark.parametrize(
    "pieces",
    [["a", "b", "c", "d", "e", "f"], ["abc", "def"], ["abcdef"]],
)
def test_anthropic_batching_does_not_change_text(pieces: List[str]) -> None:
    response = fold_anthropic(
        [MESSAGE_START] + [text_delta(piece) for piece in pieces]
    ).finalize()
    assert response.text == "abcdef"


def test_anthropic_blocks_accumulate_by_index() -> None:
    response = fold_anthropic(
        [
            MESSAGE_START,
            text_delta("zero-", index=0),
            text_delta("one-", index=1),
            text_delta("a", index=0),
            text_delta("b", index=1),
        ]
    ).finalize()
    assert [block.text for block in response.content] == ["zero-a", "one-b"]


def test_anthropic_tool_use_input_is_assembled() -> None:
    response = fold_anthropic(
        [
            MESSAGE_START,
            event(
                {
                    "type": "content_block_start",
                    "index": 0,
                    "content_block": {
                        "type": "tool_use",
                        "id": "toolu_1",
                        "name": "lookup",
                        "input": {},
                    },
                }
            ),
            event(
                {
                    "type": "content_block_delta",
                    "index": 0,
                    "delta": {"type": "input_json_delta", "partial_json": '{"a":'},
                }
            ),
            event(
                {
                    "type": "content_block_delta",
                    "index": 0,
                    "delta": {"type": "input_json_delta", "partial_json": "1}"},
                }
            ),
        ]
    ).finalize()
    block = response.content[0]
    assert block.type == "tool_use"
    assert block.id == "toolu_1"
    assert block.name == "lookup"
    assert block.input == {"a": 1}


def test_anthropic_broken_tool_input_fails_finalize() -> None:
    accumulator = fold_anthropic(
        [
            MESSAGE_START,
            event(
                {
                    "type": "content_block_delta",
                    "index": 0,
                    "delta": {"type": "input_json_delta", "partial_json": "1}"},
                }
            ),
        ]
    )
    with pytest.raises(StreamError):
        accumulator.finalize()


def test_anthropic_message_identity_first_value_wins() -> None:
    second_start = event(
        {
            "type": "message_start",
            "message": {"id": "msg_2", "role": "user", "model": "other"},
        }
    )
    response = fold_anthropic([MESSAGE_START, second_start]).finalize()
    assert response.id == "msg_1"
    assert response.role == "assistant"
    assert response.model == "claude-3-5-sonnet-20241022"


def test_anthropic_usage_counters_are_reported_verbatim() -> None:
    response = fold_anthropic(
        [
            event(
                {
                    "type": "message_start",
                    "message": {
                        "id": "msg_1",
                        "model": "claude",
                        "usage": {
                            "input_tokens": 100,
                            "output_tokens": 1,
                            "cache_creation_input_tokens": 40,
                            "cache_read_input_tokens": 60,
                        },
                    },
                }
            ),
            event({"type": "message_delta", "delta": {}, "usage": {"output_tokens": 7}}),
        ]
    ).finalize()
    assert response.usage is not None
    assert response.usage.model_dump() == {
        "input_tokens": 100,
        "output_tokens": 7,
        "cache_creation_input_tokens": 40,
        "cache_read_input_tokens": 60,
    }


def test_anthropic_events_folded_counts_every_event() -> None:
    accumulator = fold_anthropic([MESSAGE_START, event({"type": "ping"}), text_delta("x")])
    assert accumulator.events_folded == 3
