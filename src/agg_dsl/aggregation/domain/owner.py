"""AggConfigOwner port — the collection (visualization) an AggConfig belongs to."""

from collections.abc import Sequence
from typing import Any, Protocol

from agg_dsl.aggregation.domain.definitions import SchemaDefinition
from agg_dsl.aggregation.domain.field import FieldFormatService
from agg_dsl.aggregation.domain.resolver import DefinitionResolver


class AggConfigOwner(Protocol):
    """Back-reference held by every AggConfig.

    ``aggs`` seeds id assignment, ``schemas`` resolves schema names for the
    owner's visualization type, and ``field_formats`` supplies the numeric
    formatter used by metric aggregations.
    """

    @property
    def aggs(self) -> Sequence[Any]: ...

    @property
    def schemas(self) -> DefinitionResolver[SchemaDefinition]: ...

    @property
    def field_formats(self) -> FieldFormatService: ...
