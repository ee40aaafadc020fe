from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

from .errors import KeysetError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Error-as-value return type used by the try_* constructors:
      - Ok(value)
      - Err(error)
    """
    ok: bool
    value: Optional[T] = None
    error: Optional[KeysetError] = None

    @staticmethod
    def Ok(v: T) -> "Result[T]":
        return Result(ok=True, value=v, error=None)

    @staticmethod
    def Err(e: KeysetError) -> "Result[T]":
        return Result(ok=False, value=None, error=e)

    @staticmethod
    def capture(fn: Callable[[], T]) -> "Result[T]":
        # Only validation errors become values; anything else is a bug and propagates.
        try:
            return Result.Ok(fn())
        except KeysetError as e:
            return Result.Err(e)

    def unwrap(self) -> T:
        if not self.ok:
            raise self.error if self.error is not None else RuntimeError("unwrap() on Err")
        return self.value

    def unwrap_err(self) -> KeysetError:
        if self.ok:
            raise RuntimeError("unwrap_err() on Ok")
        return self.error
