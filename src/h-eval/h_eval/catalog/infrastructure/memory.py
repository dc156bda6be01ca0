"""InMemoryResponseCatalog — dict-backed ResponseCatalog implementation."""

from h_eval.catalog.domain.response import ResponseMetadata, ResponseRef


class InMemoryResponseCatalog:
    """Holds prompt and response identity plus metadata in memory.

    Satisfies the ResponseCatalog protocol structurally.
    """

    def __init__(
        self,
        responses: list[ResponseRef],
        metadata: list[ResponseMetadata] | None = None,
        prompt_ids: list[str] | None = None,
    ) -> None:
        self._responses = {r.response_id: r for r in responses}
        self._metadata = {m.response_id: m for m in metadata or []}
        # Prompts may exist before any response is recorded for them.
        self._prompt_ids = {r.prompt_id for r in responses} | set(prompt_ids or [])

    @property
    def prompt_count(self) -> int:
        return len(self._prompt_ids)

    @property
    def response_count(self) -> int:
        return len(self._responses)

    def prompt_exists(self, prompt_id: str) -> bool:
        return prompt_id in self._prompt_ids

    def get_response(self, response_id: str) -> ResponseRef | None:
        return self._responses.get(response_id)

    def responses_for_model(self, model_name: str) -> list[ResponseRef]:
        return [r for r in self._responses.values() if r.model_name == model_name]

    async def fetch_metadata(
        self, response_ids: list[str]
    ) -> dict[str, ResponseMetadata]:
        return {rid: self._metadata[rid] for rid in response_ids if rid in self._metadata}
