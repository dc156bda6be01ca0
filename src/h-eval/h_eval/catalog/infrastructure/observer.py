"""Structlog implementation of the CatalogObserver port."""

import structlog


class StructlogCatalogObserver:
    """Delegates catalog domain events to structlog.

    Satisfies the CatalogObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def catalog_loading_started(self, path: str) -> None:
        self._log.info("catalog.loading_started", path=path)

    def catalog_loading_completed(
        self, path: str, total_prompts: int, total_responses: int
    ) -> None:
        self._log.info(
            "catalog.loading_completed",
            path=path,
            total_prompts=total_prompts,
            total_responses=total_responses,
        )

    def catalog_loading_failed(self, path: str, reason: str) -> None:
        self._log.error("catalog.loading_failed", path=path, reason=reason)
