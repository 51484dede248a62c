from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from ..schema import BuiltRequest

RequestT = TypeVar("RequestT", bound=BaseModel)


class RequestBuilder(ABC, Generic[RequestT]):
    """Abstract base for request builders.

    A builder validates one tool request and turns it into the exact JSON body
    for a Krea endpoint. Builders are pure: no I/O, no clocks, no randomness,
    so the same request always yields the same payload.
    """

    @abstractmethod
    def build(self, req: RequestT) -> BuiltRequest:
        """Validate ``req`` and return the endpoint and payload to send.

        Raises:
            ValidationError: If the request violates model or mode requirements.
        """
        raise NotImplementedError

    @staticmethod
    def wire_value(value: Any) -> Any:
        """Plain JSON value for payloads (enums collapse to their value)."""
        if isinstance(value, Enum):
            return value.value
        return value


__all__ = ["RequestBuilder"]
