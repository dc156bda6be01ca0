"""Error types raised by config infrastructure."""

from pathlib import Path

from h_eval.core.errors import HEvalError


class MissingEnvVarsError(HEvalError):
    """Raised when one or more required environment variables are not set."""

    def __init__(self, missing: dict[str, list[str]]) -> None:
        self.missing_vars = list(missing)
        self.key_paths = missing
        details = ", ".join(
            f"{name} ({', '.join(missing[name])})" for name in sorted(missing)
        )
        super().__init__(
            f"Failed to load config: missing environment variables: {details}"
        )


class ConfigValidationError(HEvalError):
    """Raised when the loaded config fails schema validation."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to validate config: {reason}")


class ConfigLoadError(HEvalError):
    """Raised when the config file cannot be opened or parsed."""

    def __init__(self, path: Path, reason: str = "file not found") -> None:
        super().__init__(f"Failed to load config: {reason}: {path}")
