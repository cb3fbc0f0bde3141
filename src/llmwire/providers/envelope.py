"""Success-or-error response envelope."""
import json
from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from llmwire.core.errors import DecodeError
from .models import ErrorPayload

T = TypeVar("T", bound=BaseModel)

RawBody = Union[str, bytes, Dict[str, Any]]


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Decoded success payload."""

    value: T

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    """Decoded error payload."""

    error: ErrorPayload
    status_code: Optional[int] = None

    def unwrap(self) -> Any:
        """Raise the provider error this envelope carries.

        Raises:
            ProviderError: Always
        """
        raise self.error.to_exception(self.status_code)


Envelope = Union[Ok[T], Err]


def _body_text(raw: RawBody) -> str:
    if isinstance(raw, bytes):
        return raw.decode("utf-8", errors="replace")
    if isinstance(raw, str):
        return raw
    return json.dumps(raw)


def decode_envelope(
    raw: RawBody, model: Type[T], status_code: Optional[int] = None
) -> Envelope[T]:
    """Decode a body that is either an error envelope or a success payload.

    The body is parsed once. An object carrying an ``error`` key that
    matches the error shape is an ``Err``; anything else must match model
    and becomes an ``Ok``.

    Args:
        raw: Response body, as text, bytes or an already parsed object
        model: Success payload model
        status_code: HTTP status of the response, when known

    Returns:
        Ok or Err envelope

    Raises:
        DecodeError: If the body is not JSON or matches neither shape
    """
    if isinstance(raw, dict):
        data: Any = raw
    else:
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecodeError(str(e), body=_body_text(raw), status_code=status_code)

    if isinstance(data, dict) and "error" in data:
        try:
            return Err(
                error=ErrorPayload.model_validate(data["error"]),
                status_code=status_code,
            )
        except ValidationError:
            # Not the error shape, the success shape may still own this key
            pass

    try:
        return Ok(value=model.model_validate(data))
    except ValidationError as e:
        raise DecodeError(str(e), body=_body_text(raw), status_code=status_code)
