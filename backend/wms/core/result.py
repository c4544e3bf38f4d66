"""
Result type for operations that can fail without raising.

A Result is either a success carrying an optional value or a failure
carrying an error message and an optional error code.
"""

from typing import Any, Callable, Generic, Iterable, List, Optional, TypeVar

T = TypeVar("T")
U = TypeVar("U")


class ResultError(Exception):
    """Raised when a Result is misused."""


class Result(Generic[T]):
    __slots__ = ("_success", "_value", "error", "error_code")

    def __init__(
        self,
        success: bool,
        value: Optional[T] = None,
        error: Optional[str] = None,
        error_code: Optional[str] = None,
    ):
        if success and error:
            raise ResultError("A successful result cannot contain an error")
        if not success and not error:
            raise ResultError("A failed result must contain an error")
        self._success = success
        self._value = value
        self.error = error
        self.error_code = error_code

    @classmethod
    def ok(cls, value: Optional[T] = None) -> "Result[T]":
        return cls(True, value=value)

    @classmethod
    def fail(cls, error: str, error_code: Optional[str] = None) -> "Result[Any]":
        return cls(False, error=error, error_code=error_code)

    @property
    def is_success(self) -> bool:
        return self._success

    @property
    def is_failure(self) -> bool:
        return not self._success

    @property
    def value(self) -> T:
        if not self._success:
            raise ResultError(f"Cannot get value from failed result: {self.error}")
        if self._value is None:
            raise ResultError("Successful result has no value")
        return self._value

    def value_or(self, default: T) -> T:
        if self._success and self._value is not None:
            return self._value
        return default

    def map(self, fn: Callable[[T], U]) -> "Result[U]":
        if self.is_failure:
            return Result.fail(self.error, self.error_code)
        try:
            return Result.ok(fn(self._value))
        except Exception as e:
            return Result.fail(str(e) or e.__class__.__name__)

    def flat_map(self, fn: Callable[[T], "Result[U]"]) -> "Result[U]":
        if self.is_failure:
            return Result.fail(self.error, self.error_code)
        try:
            return fn(self._value)
        except Exception as e:
            return Result.fail(str(e) or e.__class__.__name__)

    def on_success(self, fn: Callable[[T], Any]) -> "Result[T]":
        if self._success:
            fn(self._value)
        return self

    def on_failure(self, fn: Callable[[str, Optional[str]], Any]) -> "Result[T]":
        if not self._success:
            fn(self.error, self.error_code)
        return self

    @staticmethod
    def combine(results: Iterable["Result[Any]"]) -> "Result[None]":
        """First failure wins; otherwise an empty success."""
        for result in results:
            if result.is_failure:
                return Result.fail(result.error, result.error_code)
        return Result.ok()

    @staticmethod
    def combine_errors(results: Iterable["Result[Any]"]) -> "Result[None]":
        """Collapse every failure into a single error message."""
        errors: List[str] = [r.error for r in results if r.is_failure]
        if errors:
            return Result.fail(f"Multiple errors occurred: {', '.join(errors)}")
        return Result.ok()

    def __repr__(self) -> str:
        if self._success:
            return f"Result.ok({self._value!r})"
        return f"Result.fail({self.error!r})"
