"""Error types raised by catalog infrastructure."""

from h_eval.core.errors import HEvalError


class CatalogLoadError(HEvalError):
    """Raised when a JSONL response catalog cannot be loaded or is malformed."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to load catalog: {reason}")
