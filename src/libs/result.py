"""
Result type shared by use cases.

A use case returns Result[T]: either a value (Return.ok) or an Error
(Return.err). The API layer inspects is_err() and maps error codes to
HTTP responses.
"""

from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class Error:
    """Business error carried by a failed Result"""

    def __init__(self, code: str, message: str, reason: Optional[str] = None):
        self.code = code
        self.message = message
        self.reason = reason

    def __repr__(self) -> str:
        return f"Error(code={self.code!r}, message={self.message!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Error):
            return NotImplemented
        return (self.code, self.message, self.reason) == (
            other.code,
            other.message,
            other.reason,
        )


class Result(Generic[T]):
    def __init__(self, value: Optional[T] = None, error: Optional[Error] = None):
        self.value = value
        self.error = error

    def is_ok(self) -> bool:
        return self.error is None

    def is_err(self) -> bool:
        return self.error is not None


class Return:
    @staticmethod
    def ok(value: Optional[T] = None) -> Result[T]:
        return Result(value=value)

    @staticmethod
    def err(error: Error) -> Result:
        return Result(error=error)
