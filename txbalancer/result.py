"""Success/failure values returned by balancing operations.

Balancing never raises for an expected failure. It returns :class:`Err` carrying one of the
:class:`~txbalancer.exception.BalancingException` kinds, so the outcome shows in every signature. Callers
that would rather handle exceptions call :meth:`unwrap`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar, Union

__all__ = ["Ok", "Err", "Result"]

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E", bound=Exception)


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def map(self, fn: Callable[[T], U]) -> Ok[U]:
        return Ok(fn(self.value))

    def and_then(self, fn: Callable[[T], Result[U, E]]) -> Result[U, E]:
        return fn(self.value)


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self):
        """Raise the carried error."""
        raise self.error

    def unwrap_or(self, default: T) -> T:
        return default

    def map(self, fn: Callable) -> Err[E]:
        return self

    def and_then(self, fn: Callable) -> Err[E]:
        return self


Result = Union[Ok[T], Err[E]]
