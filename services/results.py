from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Literal, Optional, TypeVar

T = TypeVar("T")

ErrorCode = Literal["forbidden", "invalid", "not_found", "backend"]


@dataclass(frozen=True)
class StoreError:
    code: ErrorCode
    message: str


@dataclass(frozen=True)
class MutationResult(Generic[T]):
    """Outcome of a store mutation: either `data` or `error` is set."""
    data: Optional[T] = None
    error: Optional[StoreError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, data: T) -> "MutationResult[T]":
        return cls(data=data)

    @classmethod
    def failure(cls, code: ErrorCode, message: str) -> "MutationResult[T]":
        return cls(error=StoreError(code=code, message=message))
