"""Top-level HEvalConfig aggregate — the root configuration object."""

from pydantic import BaseModel, Field

from h_eval.config.domain.aggregation import AggregationConfig
from h_eval.config.domain.export import ExportConfig
from h_eval.config.domain.sources import CatalogConfig, StoreConfig


class HEvalConfig(BaseModel, frozen=True):
    """Root configuration aggregate for an h-eval deployment."""

    name: str = Field(min_length=1)
    version: str = Field(min_length=1)
    catalog: CatalogConfig
    store: StoreConfig
    aggregation: AggregationConfig
    export: ExportConfig = Field(default_factory=ExportConfig)
