"""ResponseCatalog Protocol — lookup-by-id contract for the external response store."""

from typing import Protocol

from h_eval.catalog.domain.response import ResponseMetadata, ResponseRef


class ResponseCatalog(Protocol):
    """Read-only view of prompts and responses owned by another system.

    Identity lookups are expected to be local and fast. fetch_metadata may hit a
    remote service and is awaited under a timeout by callers.
    """

    def prompt_exists(self, prompt_id: str) -> bool: ...

    def get_response(self, response_id: str) -> ResponseRef | None: ...

    def responses_for_model(self, model_name: str) -> list[ResponseRef]: ...

    async def fetch_metadata(
        self, response_ids: list[str]
    ) -> dict[str, ResponseMetadata]: ...
