"""Envelope de resultado y taxonomía de fallos.

Ningún fallo operativo cruza la superficie pública del cliente como
excepción: todo termina en un `ResultEnvelope` con `success=False` y al menos
un mensaje legible.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field, model_validator

T = TypeVar("T")

EMPTY_RESPONSE = "empty response"
PARSE_FAILED = "failed to parse response"
REMOTE_FAILED = "request was not successful"


class FailureKind(str, Enum):
    """Por qué falló una operación."""

    TRANSPORT = "transport"
    EXHAUSTED = "exhausted"
    PARSE = "parse"
    REMOTE = "remote"


def exhausted_message(operation: str) -> str:
    return f"all endpoints failed for {operation}"


def flatten_messages(raw: Any) -> list[str]:
    """Aplana `[{text: [...]}, ...]` (o variantes) en una lista de strings.

    Acepta también strings sueltos y listas de strings, que algunos endpoints
    devuelven en lugar de la forma agrupada.
    """

    if raw is None:
        return []
    if isinstance(raw, str):
        return [raw] if raw.strip() else []
    if isinstance(raw, dict):
        for key, value in raw.items():
            if isinstance(key, str) and key.lower() == "text":
                return flatten_messages(value)
        return []
    if isinstance(raw, list):
        out: list[str] = []
        for item in raw:
            out.extend(flatten_messages(item))
        return out
    return [str(raw)]


class ResultEnvelope(BaseModel, Generic[T]):
    """`{success, data, messages}` tipado.

    Invariantes:
    - `success=False` implica `data is None`.
    - En fallo, `messages` nunca está vacío.
    """

    success: bool = False
    data: T | None = None
    messages: list[str] = Field(default_factory=list)
    failure: FailureKind | None = None

    @model_validator(mode="before")
    @classmethod
    def _normalize_wire_shape(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        out: dict[str, Any] = {}
        raw_messages: list[Any] = []
        for key, value in data.items():
            if not isinstance(key, str):
                continue
            lowered = key.lower()
            if lowered in ("message", "messages"):
                raw_messages.append(value)
            elif lowered in ("success", "data", "failure"):
                out[lowered] = value
        out["messages"] = flatten_messages(raw_messages)
        return out

    @model_validator(mode="after")
    def _enforce_failure_invariant(self) -> "ResultEnvelope[T]":
        if not self.success:
            self.data = None
            if self.failure is None:
                self.failure = FailureKind.REMOTE
            if not self.messages:
                self.messages = [REMOTE_FAILED]
        else:
            self.failure = None
        return self

    @classmethod
    def ok(cls, data: T, messages: list[str] | None = None) -> "ResultEnvelope[T]":
        return cls(success=True, data=data, messages=list(messages or []))

    @classmethod
    def fail(cls, message: str, kind: FailureKind) -> "ResultEnvelope[T]":
        return cls(success=False, messages=[message], failure=kind)

    @property
    def first_message(self) -> str | None:
        return self.messages[0] if self.messages else None
