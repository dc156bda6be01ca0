"""Tests verifying the HEvalError type hierarchy."""

from pathlib import Path

from h_eval.catalog.infrastructure.errors import CatalogLoadError
from h_eval.config.infrastructure.errors import (
    ConfigLoadError,
    ConfigValidationError,
    MissingEnvVarsError,
)
from h_eval.core.errors import (
    DependencyTimeoutError,
    HEvalError,
    NotFoundError,
    ValidationError,
)
from h_eval.records.infrastructure.errors import (
    RecordConflictError,
    RecordStoreLoadError,
    RecordValidationError,
)


class TestHEvalErrorHierarchy:
    """All h-eval-specific exceptions inherit from HEvalError."""

    def test_missing_env_vars_error_is_h_eval_error(self) -> None:
        assert isinstance(MissingEnvVarsError(missing={"MY_VAR": ["store.path"]}), HEvalError)

    def test_config_errors_are_h_eval_errors(self) -> None:
        assert isinstance(ConfigValidationError(reason="bad value"), HEvalError)
        assert isinstance(ConfigLoadError(path=Path("/some/config.yaml")), HEvalError)

    def test_catalog_load_error_is_h_eval_error(self) -> None:
        assert isinstance(CatalogLoadError(reason="file not found"), HEvalError)

    def test_record_errors_are_h_eval_errors(self) -> None:
        assert isinstance(
            RecordConflictError(prompt_id="p", evaluator_id="e", submitted_at="t"),
            HEvalError,
        )
        assert isinstance(RecordStoreLoadError(reason="bad line"), HEvalError)

    def test_record_validation_error_is_validation_error(self) -> None:
        error = RecordValidationError(field="ranked_order", reason="mismatch")
        assert isinstance(error, ValidationError)
        assert isinstance(error, HEvalError)


class TestValidationError:
    """ValidationError names the field and is never retriable."""

    def test_carries_field_and_reason(self) -> None:
        error = ValidationError(field="prompt_id", reason="must not be blank")
        assert error.field == "prompt_id"
        assert error.reason == "must not be blank"

    def test_message_names_field(self) -> None:
        error = ValidationError(field="ranked_order", reason="mismatch")
        assert "ranked_order" in str(error)
        assert str(error).startswith("Failed to ")

    def test_is_not_retriable(self) -> None:
        assert ValidationError(field="x", reason="y").retriable is False


class TestNotFoundError:
    def test_message_includes_kind_and_key(self) -> None:
        error = NotFoundError(kind="prompt", key="p-404")
        assert "prompt" in str(error)
        assert "p-404" in str(error)
        assert error.retriable is False


class TestDependencyTimeoutError:
    def test_is_retriable(self) -> None:
        error = DependencyTimeoutError(dependency="response metadata", timeout_seconds=0.5)
        assert error.retriable is True
        assert error.timeout_seconds == 0.5
        assert "response metadata" in str(error)
