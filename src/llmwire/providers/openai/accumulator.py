"""Folds OpenAI-compatible stream chunks into a chat completion."""
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from llmwire.core.errors import StreamError
from ..accumulator import StreamAccumulator, first_non_empty
from ..models import FunctionCall, Message, Role, ToolCall
from .models import (
    ChatCompletion,
    ChatCompletionChoice,
    ChatCompletionChunk,
    ChunkChoice,
    Usage,
)


@dataclass
class _ToolCallBuilder:
    id: Optional[str] = None
    name: Optional[str] = None
    arguments: List[str] = field(default_factory=list)

    def build(self) -> ToolCall:
        return ToolCall(
            id=self.id or "",
            function=FunctionCall(
                name=self.name or "", arguments="".join(self.arguments)
            ),
        )


@dataclass
class _ChoiceBuilder:
    role: Optional[Role] = None
    name: Optional[str] = None
    content: List[str] = field(default_factory=list)
    function_name: Optional[str] = None
    function_arguments: Optional[List[str]] = None
    tool_calls: Dict[int, _ToolCallBuilder] = field(default_factory=dict)
    finish_reason: Optional[str] = None

    def fold(self, choice: ChunkChoice) -> None:
        delta = choice.delta
        if self.role is None:
            self.role = delta.role
        self.name = first_non_empty(self.name, delta.name)
        if delta.content:
            self.content.append(delta.content)

        if delta.function_call is not None:
            self.function_name = first_non_empty(
                self.function_name, delta.function_call.name
            )
            if self.function_arguments is None:
                self.function_arguments = []
            if delta.function_call.arguments:
                self.function_arguments.append(delta.function_call.arguments)

        for tool_call in delta.tool_calls:
            builder = self.tool_calls.setdefault(tool_call.index, _ToolCallBuilder())
            builder.id = first_non_empty(builder.id, tool_call.id)
            if tool_call.function is None:
                continue
            builder.name = first_non_empty(builder.name, tool_call.function.name)
            if tool_call.function.arguments:
                builder.arguments.append(tool_call.function.arguments)

        if choice.finish_reason is not None:
            self.finish_reason = choice.finish_reason

    def build(self, index: int) -> ChatCompletionChoice:
        function_call = None
        if self.function_arguments is not None or self.function_name:
            function_call = FunctionCall(
                name=self.function_name or "",
                arguments="".join(self.function_arguments or []),
            )
        message = Message(
            role=self.role or Role.ASSISTANT,
            content="".join(self.content) if self.content else None,
            name=self.name,
            function_call=function_call,
            tool_calls=[
                self.tool_calls[i].build() for i in sorted(self.tool_calls)
            ],
        )
        return ChatCompletionChoice(
            index=index, message=message, finish_reason=self.finish_reason
        )


class OpenAIAccumulator(StreamAccumulator[ChatCompletionChunk, ChatCompletion]):
    """Accumulator for ``chat.completion.chunk`` streams.

    Each choice index is built independently. Tool calls are keyed by their
    ``index``; a call's id and name come from the first chunk that carries
    them and its argument fragments are concatenated.
    """

    def __init__(self) -> None:
        super().__init__()
        self.id: Optional[str] = None
        self.model: Optional[str] = None
        self.created: Optional[int] = None
        self.usage: Optional[Usage] = None
        self.choices: Dict[int, _ChoiceBuilder] = {}

    def fold(self, event: ChatCompletionChunk) -> None:
        self.id = first_non_empty(self.id, event.id)
        self.model = first_non_empty(self.model, event.model)
        if self.created is None:
            self.created = event.created
        for choice in event.choices:
            self.choices.setdefault(choice.index, _ChoiceBuilder()).fold(choice)
        if event.usage is not None:
            self.usage = event.usage

    def finalize(self) -> ChatCompletion:
        if not self.events_folded:
            raise StreamError("Stream ended before any chunk was received")
        return ChatCompletion(
            id=self.id or "",
            created=self.created or 0,
            model=self.model or "",
            choices=[self.choices[i].build(i) for i in sorted(self.choices)],
            usage=self.usage,
        )
