"""Models for function and tool calling."""
from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, Field


class FunctionDefinition(BaseModel):
    """Function the model may call."""

    name: str = Field(
        pattern=r"^[a-zA-Z0-9_-]+$",
        max_length=64,
        description=(
            "The name of the function to be called. Must be a-z, A-Z, 0-9, "
            "or contain underscores and dashes, with a maximum length of 64"
        ),
    )
    description: Optional[str] = Field(
        None,
        description=(
            "A description of what the function does, used by the model to choose "
            "when and how to call the function"
        ),
    )
    parameters: Optional[Dict[str, Any]] = Field(
        None,
        description=(
            "The parameters the functions accepts, described as a JSON Schema object. "
            "Omitting parameters defines a function with an empty parameter list"
        ),
    )


class Tool(BaseModel):
    """Tool model for function calling."""

    type: Literal["function"] = Field(
        "function",
        description="The type of the tool. Currently, only function is supported",
    )
    function: FunctionDefinition = Field(description="The function to be called")


class ToolChoiceFunction(BaseModel):
    """Function specification for tool choice."""

    name: str = Field(description="The name of the function to call")


class ToolChoiceObject(BaseModel):
    """Object specification for tool choice."""

    type: Literal["function"] = Field(
        "function",
        description="The type of the tool. Currently, only function is supported",
    )
    function: ToolChoiceFunction = Field(description="Function specification")


ToolChoiceType = Literal["none", "auto", "required"]

ToolChoice = Union[ToolChoiceType, ToolChoiceObject]


class ResponseFormat(BaseModel):
    """Requested output format."""

    type: Literal["text", "json_object", "json_schema"] = Field(
        "text", description="Output format the model must produce"
    )
    json_schema: Optional[Dict[str, Any]] = Field(
        None, description="Schema definition when type is json_schema"
    )


class FunctionCall(BaseModel):
    """Function call made by the model."""

    name: str = Field(description="The name of the function to call")
    arguments: str = Field(
        "", description="The arguments to pass to the function, as JSON text"
    )


class ToolCall(BaseModel):
    """Tool call requested by the assistant."""

    id: str = Field(description="ID of this tool call")
    type: Literal["function"] = Field(
        "function",
        description="The type of the tool. Currently, only function is supported",
    )
    function: FunctionCall = Field(description="The function that was called")


class FunctionCallDelta(BaseModel):
    """Partial function call received while streaming."""

    name: Optional[str] = Field(None, description="The name of the function")
    arguments: Optional[str] = Field(
        None, description="Fragment of the argument text"
    )


class ToolCallDelta(BaseModel):
    """Partial tool call received while streaming."""

    index: int = Field(0, description="Index of this tool call in the message")
    id: Optional[str] = Field(None, description="ID of this tool call")
    type: Optional[Literal["function"]] = Field(
        None,
        description="The type of the tool. Currently, only function is supported",
    )
    function: Optional[FunctionCallDelta] = Field(
        None, description="Partial function call"
    )
