"""Fake CatalogObserver for use in tests — records events without mocking."""


class FakeCatalogObserver:
    def __init__(self) -> None:
        self.loading_started: list[str] = []
        self.loading_completed: list[dict[str, object]] = []
        self.loading_failed: list[dict[str, str]] = []

    def catalog_loading_started(self, path: str) -> None:
        self.loading_started.append(path)

    def catalog_loading_completed(
        self, path: str, total_prompts: int, total_responses: int
    ) -> None:
        self.loading_completed.append(
            {
                "path": path,
                "total_prompts": total_prompts,
                "total_responses": total_responses,
            }
        )

    def catalog_loading_failed(self, path: str, reason: str) -> None:
        self.loading_failed.append({"path": path, "reason": reason})
