"""${ENV_VAR} interpolation over raw (pre-validation) config data."""

import os
import re
from collections.abc import Iterator

_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")

type RawValue = (
    str | int | float | bool | None | list["RawValue"] | dict[str, "RawValue"]
)
type KeyPath = str  # dotted, list items by index: "store.path", "tags.0"


def collect_missing_vars(data: RawValue) -> dict[str, list[KeyPath]]:
    """
    Map every referenced env var that is not set to the config keys that
    reference it. Variables and their keys are both in first-seen order.
    """
    missing: dict[str, list[KeyPath]] = {}
    for key_path, text in _string_leaves(data=data, path=()):
        for match in _ENV_VAR_PATTERN.finditer(text):
            name = match.group(1)
            if name in os.environ:
                continue
            paths = missing.setdefault(name, [])
            if key_path not in paths:
                paths.append(key_path)
    return missing


def interpolate(data: RawValue) -> RawValue:
    """
    Return a copy of data with every ${ENV_VAR} replaced by its value.

    Call `collect_missing_vars` first; a missing variable here raises KeyError.
    """
    if isinstance(data, str):
        return _ENV_VAR_PATTERN.sub(_lookup, data)
    if isinstance(data, list):
        return [interpolate(item) for item in data]
    if isinstance(data, dict):
        return {key: interpolate(value) for key, value in data.items()}
    return data


def _lookup(match: re.Match[str]) -> str:
    return os.environ[match.group(1)]


def _string_leaves(
    data: RawValue, path: tuple[str, ...]
) -> Iterator[tuple[KeyPath, str]]:
    if isinstance(data, str):
        yield ".".join(path) or "<root>", data
    elif isinstance(data, list):
        for index, item in enumerate(data):
            yield from _string_leaves(data=item, path=(*path, str(index)))
    elif isinstance(data, dict):
        for key, value in data.items():
            yield from _string_leaves(data=value, path=(*path, str(key)))
