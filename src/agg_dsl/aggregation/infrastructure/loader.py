"""YAML loader for persisted aggregation configs — parses, assigns ids, validates."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import TypeAdapter, ValidationError

from agg_dsl.aggregation.domain.agg_config import AggConfig
from agg_dsl.aggregation.domain.observer import AggConfigLoaderObserver
from agg_dsl.aggregation.domain.persisted import PersistedAggConfig
from agg_dsl.aggregation.infrastructure.errors import (
    AggConfigLoadError,
    AggConfigValidationError,
)

_PERSISTED_LIST = TypeAdapter(list[PersistedAggConfig])


class YamlAggConfigLoader:
    """Loads persisted aggregation configs from a YAML (or JSON) file.

    The document is either a list of configs or a mapping with an ``aggs``
    list. Entries without an id get one before validation.
    """

    def __init__(self, observer: AggConfigLoaderObserver) -> None:
        self._observer = observer

    def load(self, path: Path) -> list[PersistedAggConfig]:
        """
        Load, assign ids to, and validate the configs stored at ``path``.

        Raises:
            AggConfigLoadError: if the file is missing, unreadable, not UTF-8
                or not valid YAML.
            AggConfigValidationError: if the document does not hold a list of
                persisted configs.
        """
        raw = _parse_yaml(path=path)
        entries = _extract_entries(raw=raw)
        assigned_ids = sum(1 for entry in entries if not entry.get("id"))
        AggConfig.ensure_ids(entries)
        configs = _validate(entries=entries)
        self._observer.agg_configs_loaded(
            path=str(path), count=len(configs), assigned_ids=assigned_ids
        )
        return configs


def _parse_yaml(path: Path) -> Any:
    if not path.is_file():
        raise AggConfigLoadError(path=path)
    try:
        with path.open("r", encoding="utf-8") as fh:
            return yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise AggConfigLoadError(path=path, reason="invalid YAML") from exc
    except UnicodeDecodeError as exc:
        raise AggConfigLoadError(path=path, reason="not valid UTF-8") from exc
    except OSError as exc:
        raise AggConfigLoadError(
            path=path, reason=f"cannot read file ({exc.strerror})"
        ) from exc


def _extract_entries(raw: Any) -> list[dict[str, Any]]:
    """Return the list of raw config mappings held by the document."""
    if raw is None:
        return []
    if isinstance(raw, dict):
        if "aggs" not in raw:
            raise AggConfigValidationError("document mapping has no 'aggs' key")
        raw = raw["aggs"] or []
    if not isinstance(raw, list):
        raise AggConfigValidationError(
            f"expected a list of aggregation configs, got {type(raw).__name__}"
        )

    invalid = [str(idx) for idx, entry in enumerate(raw) if not isinstance(entry, dict)]
    if invalid:
        raise AggConfigValidationError(
            f"entries at positions {', '.join(invalid)} are not mappings"
        )
    return raw


def _validate(entries: list[dict[str, Any]]) -> list[PersistedAggConfig]:
    try:
        configs = _PERSISTED_LIST.validate_python(entries)
    except ValidationError as exc:
        raise AggConfigValidationError(str(exc)) from exc

    seen: set[str] = set()
    duplicates: list[str] = []
    for config in configs:
        if config.id in seen and config.id not in duplicates:
            duplicates.append(config.id)
        seen.add(config.id)
    if duplicates:
        raise AggConfigValidationError(f"duplicate ids: {', '.join(duplicates)}")
    return configs
