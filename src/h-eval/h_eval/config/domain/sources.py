"""Catalog and store location models."""

from pathlib import Path

from pydantic import BaseModel


class CatalogConfig(BaseModel, frozen=True):
    path: Path


class StoreConfig(BaseModel, frozen=True):
    path: Path
