"""Builds AggConfig instances from persisted configs and serializes them back."""

from collections.abc import Iterable

from agg_dsl.aggregation.domain.agg_config import AggConfig
from agg_dsl.aggregation.domain.definitions import AggTypeDefinition
from agg_dsl.aggregation.domain.observer import AggConfigObserver
from agg_dsl.aggregation.domain.owner import AggConfigOwner
from agg_dsl.aggregation.domain.persisted import PersistedAggConfig
from agg_dsl.aggregation.domain.resolver import DefinitionResolver


def build_agg_configs(
    owner: AggConfigOwner,
    persisted: Iterable[PersistedAggConfig],
    agg_types: DefinitionResolver[AggTypeDefinition],
    observer: AggConfigObserver | None = None,
) -> list[AggConfig]:
    """Create one AggConfig per persisted config, in order.

    The owner's collection is not modified; adding the returned configs to it
    is the caller's job.
    """
    return [
        AggConfig(owner, config.to_spec(), agg_types=agg_types, observer=observer)
        for config in persisted
    ]


def serialize_agg_configs(configs: Iterable[AggConfig]) -> list[PersistedAggConfig]:
    """Persistable form of each config, validated against PersistedAggConfig."""
    return [PersistedAggConfig.model_validate(config.to_json()) for config in configs]
