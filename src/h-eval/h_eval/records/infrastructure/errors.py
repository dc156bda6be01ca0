"""Error types raised by record ingestion and storage."""

from h_eval.core.errors import HEvalError, ValidationError


class RecordValidationError(ValidationError):
    """Raised when an evaluation payload is malformed; names the offending field."""


class RecordConflictError(HEvalError):
    """Raised when a record with the same (prompt, evaluator, submitted_at) exists."""

    def __init__(self, prompt_id: str, evaluator_id: str, submitted_at: str) -> None:
        super().__init__(
            f"Failed to store record: evaluator '{evaluator_id}' already submitted"
            f" for prompt '{prompt_id}' at {submitted_at}"
        )


class RecordStoreLoadError(HEvalError):
    """Raised when a persisted record file cannot be replayed."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to load record store: {reason}")
