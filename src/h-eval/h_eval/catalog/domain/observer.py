"""Observer port for the catalog domain — defines events in domain language."""

from typing import Protocol


class CatalogObserver(Protocol):
    def catalog_loading_started(self, path: str) -> None: ...

    def catalog_loading_completed(
        self, path: str, total_prompts: int, total_responses: int
    ) -> None: ...

    def catalog_loading_failed(self, path: str, reason: str) -> None: ...
