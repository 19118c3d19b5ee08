"""Explicit success/failure value for a single awaited operation."""
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Optional, TypeVar

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Either a value or the exception that prevented one."""
    value: Optional[T] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: Exception) -> "Outcome[T]":
        return cls(error=error)

    @classmethod
    async def capture(cls, awaitable: Awaitable[T]) -> "Outcome[T]":
        """Await ``awaitable`` and record its result or exception.

        Cancellation is not captured.
        """
        try:
            return cls.success(await awaitable)
        except Exception as e:
            return cls.failure(e)

    def fold(self, on_success: Callable[[T], R], on_failure: Callable[[Exception], R]) -> R:
        if self.error is not None:
            return on_failure(self.error)
        return on_success(self.value)
