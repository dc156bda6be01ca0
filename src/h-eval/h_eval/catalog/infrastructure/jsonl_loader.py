"""JSONL catalog loader — reads prompt/response rows and builds an in-memory catalog."""

import json
from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError

from h_eval.catalog.domain.observer import CatalogObserver
from h_eval.catalog.domain.response import ResponseMetadata, ResponseRef
from h_eval.catalog.infrastructure.errors import CatalogLoadError
from h_eval.catalog.infrastructure.memory import InMemoryResponseCatalog

type Row = tuple[ResponseRef, ResponseMetadata]


@dataclass(frozen=True)
class _PromptOnly:
    prompt_id: str


class JsonlCatalogLoader:
    """Loads a JSONL export of the response store into an InMemoryResponseCatalog.

    Each line describes one response::

        {"prompt_id": "p1", "response_id": "r1", "model_name": "gpt-x",
         "latency_ms": 812.0, "response_text": "..."}

    ``length`` may be given directly instead of ``response_text``. A line with
    only ``prompt_id`` registers a prompt that has no responses yet.
    """

    def __init__(self, observer: CatalogObserver) -> None:
        self._observer = observer

    def load(self, path: Path) -> InMemoryResponseCatalog:
        """
        Load every line of the file, collecting ALL per-line errors before raising.

        Raises:
            CatalogLoadError: if the file is missing, a line is invalid JSON, a
                line fails validation, or a response id appears twice.
        """
        path_str = str(path)
        self._observer.catalog_loading_started(path=path_str)

        try:
            with open(path, encoding="utf-8") as fh:
                lines = [line for line in fh if line.strip()]
        except FileNotFoundError:
            reason = f"file not found: {path_str}"
            self._observer.catalog_loading_failed(path=path_str, reason=reason)
            raise CatalogLoadError(reason=reason)

        responses: list[ResponseRef] = []
        metadata: list[ResponseMetadata] = []
        prompt_ids: list[str] = []
        seen: set[str] = set()
        errors: list[str] = []

        for index, line in enumerate(lines):
            result = _parse_line(line=line, index=index)
            if isinstance(result, str):
                errors.append(result)
                continue
            if isinstance(result, _PromptOnly):
                prompt_ids.append(result.prompt_id)
                continue
            ref, meta = result
            if ref.response_id in seen:
                errors.append(f"line {index}: duplicate response id '{ref.response_id}'")
                continue
            seen.add(ref.response_id)
            responses.append(ref)
            metadata.append(meta)

        if errors:
            reason = "; ".join(errors)
            self._observer.catalog_loading_failed(path=path_str, reason=reason)
            raise CatalogLoadError(reason=reason)

        catalog = InMemoryResponseCatalog(
            responses=responses, metadata=metadata, prompt_ids=prompt_ids
        )
        self._observer.catalog_loading_completed(
            path=path_str,
            total_prompts=catalog.prompt_count,
            total_responses=catalog.response_count,
        )
        return catalog


def _parse_line(line: str, index: int) -> Row | _PromptOnly | str:
    """
    Parse one JSONL line.

    Returns a (ref, metadata) pair, a _PromptOnly for prompt-only lines, or an
    error string describing the problem.
    """
    try:
        data = json.loads(line)
    except json.JSONDecodeError as exc:
        return f"line {index}: invalid JSON: {exc}"
    if not isinstance(data, dict):
        return f"line {index}: expected a JSON object"

    if "response_id" not in data:
        prompt_id = data.get("prompt_id")
        if not isinstance(prompt_id, str) or not prompt_id:
            return f"line {index}: missing key(s) 'prompt_id'"
        return _PromptOnly(prompt_id=prompt_id)

    length = data.get("length")
    text = data.get("response_text")
    if length is None and isinstance(text, str):
        length = len(text)

    try:
        ref = ResponseRef(
            response_id=data["response_id"],
            prompt_id=data.get("prompt_id", ""),
            model_name=data.get("model_name", ""),
        )
        meta = ResponseMetadata(
            response_id=data["response_id"],
            latency_ms=data.get("latency_ms"),
            length=length,
        )
    except ValidationError as exc:
        fields = ", ".join(
            f"'{'.'.join(str(p) for p in err['loc'])}'" for err in exc.errors()
        )
        return f"line {index}: invalid field(s) {fields}"
    return ref, meta
