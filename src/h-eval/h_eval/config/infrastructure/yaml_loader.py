"""YAML config loader — parses, interpolates env vars, validates, and emits observer events."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from h_eval.config.domain.config import HEvalConfig
from h_eval.config.domain.observer import ConfigObserver
from h_eval.config.infrastructure.env_interpolation import (
    collect_missing_vars,
    interpolate,
)
from h_eval.config.infrastructure.errors import (
    ConfigLoadError,
    ConfigValidationError,
    MissingEnvVarsError,
)


class YamlConfigLoader:
    """Loads, interpolates, validates, and returns an HEvalConfig from a YAML file."""

    def __init__(self, observer: ConfigObserver) -> None:
        self._observer = observer

    def load(self, path: Path) -> HEvalConfig:
        """
        Load, interpolate, validate, and return an HEvalConfig.

        Relative catalog and store paths are resolved against the config file's
        directory.

        Raises:
            ConfigLoadError: if the file is missing or is not valid YAML.
            MissingEnvVarsError: if any ${ENV_VAR} references are unset (all collected first).
            ConfigValidationError: if the schema is violated.
        """
        raw = _parse_yaml(path=path)
        _check_missing_env_vars(raw=raw)
        cfg = _build_config(resolved=interpolate(raw))
        cfg = _resolve_paths(cfg=cfg, base_dir=path.parent)
        _emit_warnings(cfg=cfg, observer=self._observer)
        self._observer.config_loaded(name=cfg.name, version=cfg.version)
        return cfg


def _parse_yaml(path: Path) -> Any:
    try:
        with path.open("r", encoding="utf-8") as fh:
            return yaml.safe_load(fh)
    except FileNotFoundError as exc:
        raise ConfigLoadError(path=path) from exc
    except yaml.YAMLError as exc:
        raise ConfigLoadError(path=path, reason="invalid YAML") from exc


def _check_missing_env_vars(raw: Any) -> None:
    """Raise MissingEnvVarsError naming every unset ${ENV_VAR} and the keys using it."""
    missing = collect_missing_vars(raw)
    if missing:
        raise MissingEnvVarsError(missing)


def _build_config(resolved: Any) -> HEvalConfig:
    try:
        return HEvalConfig.model_validate(resolved)
    except ValidationError as exc:
        raise ConfigValidationError(str(exc)) from exc


def _resolve_paths(cfg: HEvalConfig, base_dir: Path) -> HEvalConfig:
    def resolve(p: Path) -> Path:
        return p if p.is_absolute() else base_dir / p

    return cfg.model_copy(
        update={
            "catalog": cfg.catalog.model_copy(update={"path": resolve(cfg.catalog.path)}),
            "store": cfg.store.model_copy(update={"path": resolve(cfg.store.path)}),
        }
    )


def _emit_warnings(cfg: HEvalConfig, observer: ConfigObserver) -> None:
    if cfg.aggregation.max_staleness_seconds == 0:
        observer.config_cache_disabled_warning()
