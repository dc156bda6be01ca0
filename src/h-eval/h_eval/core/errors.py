"""Base exception class for all h-eval-specific errors."""


class HEvalError(Exception):
    """Base class for all h-eval errors."""

    def __init__(self, message: str, retriable: bool = False) -> None:
        super().__init__(message)
        self.retriable = retriable


class ValidationError(HEvalError):
    """Raised for malformed or out-of-range input the caller must fix and resubmit.

    Never retriable: resubmitting the same payload fails the same way.
    """

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"Failed to validate '{field}': {reason}", retriable=False)


class NotFoundError(HEvalError):
    """Raised when a referenced prompt, response or model cannot be resolved."""

    def __init__(self, kind: str, key: str) -> None:
        self.kind = kind
        self.key = key
        super().__init__(f"Failed to resolve {kind}: '{key}' not found")


class DependencyTimeoutError(HEvalError):
    """Raised when an external lookup exceeds its time bound."""

    def __init__(self, dependency: str, timeout_seconds: float) -> None:
        self.dependency = dependency
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"Failed to query {dependency}: timed out after {timeout_seconds}s",
            retriable=True,
        )
