"""AggConfig — one parameterized step of a hierarchical aggregation query."""

import copy
import math
from collections.abc import Callable, Mapping, MutableMapping, Sequence
from types import MappingProxyType
from typing import Any

from agg_dsl.aggregation.domain.definitions import (
    AggTypeDefinition,
    ParamDef,
    SchemaDefinition,
    WriteOutput,
)
from agg_dsl.aggregation.domain.errors import (
    FieldNotFilterableError,
    FilterNotSupportedError,
    SubAggCycleError,
)
from agg_dsl.aggregation.domain.field import IndexField
from agg_dsl.aggregation.domain.observer import AggConfigObserver
from agg_dsl.aggregation.domain.owner import AggConfigOwner
from agg_dsl.aggregation.domain.resolver import DefinitionResolver

type RawSpec = Mapping[str, Any]

_PRIMITIVES = (str, bytes, int, float, bool)
_RESET_PRESERVED_PARAMS = ("row", "field")
_METRICS_GROUP = "metrics"


def _get_id(item: Any) -> Any:
    if isinstance(item, Mapping):
        return item.get("id")
    return getattr(item, "id", None)


def _set_id(item: Any, value: str) -> None:
    if isinstance(item, MutableMapping):
        item["id"] = value
    else:
        setattr(item, "id", value)


def _numeric_id(value: Any) -> int:
    """Numeric value of an id floored to an integer, or 0 when it has none."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    try:
        number = float(str(value))
    except ValueError:
        return 0
    if not math.isfinite(number):
        return 0
    return math.floor(number)


class AggConfig:
    """A single aggregation step bound to a type and a schema.

    ``params`` is rebuilt from the declared params of the bound type and schema
    on every ``fill_defaults`` pass. Values without a custom deserializer are
    deep-copied on the way in, and every value is deep-copied on the way out of
    ``to_json``, so an AggConfig never shares mutable state with its callers.

    Types are resolved through ``agg_types``; schemas through the owner's
    schema resolver. Unknown names leave the config unbound.
    """

    def __init__(
        self,
        owner: AggConfigOwner,
        spec: RawSpec,
        *,
        agg_types: DefinitionResolver[AggTypeDefinition],
        observer: AggConfigObserver | None = None,
    ) -> None:
        self.id = str(spec.get("id") or AggConfig.next_id(owner.aggs))
        self.owner = owner
        self._agg_types = agg_types
        self._observer = observer
        self._type: AggTypeDefinition | None = None
        self._schema: SchemaDefinition | None = None
        self._params: dict[str, Any] = {}

        self.bind_type(spec.get("type"))
        self.bind_schema(spec.get("schema"))
        self.fill_defaults(spec.get("params"))

    # ------------------------------------------------------------------
    # Identifier assignment
    # ------------------------------------------------------------------

    @staticmethod
    def ensure_ids[T](items: list[T]) -> list[T]:
        """Assign string ids to every item lacking one, in place.

        Items may be mappings with an ``"id"`` key or objects with an ``id``
        attribute. Existing ids are never changed; fresh ids continue from
        the highest numeric id already present.
        """
        have = [item for item in items if _get_id(item)]
        have_not = [item for item in items if not _get_id(item)]

        next_id = AggConfig.next_id(have)
        for item in have_not:
            _set_id(item, str(next_id))
            next_id += 1

        return items

    @staticmethod
    def next_id(items: Sequence[Any]) -> int:
        """Return one more than the highest numeric id in ``items``."""
        highest = max((_numeric_id(_get_id(item)) for item in items), default=0)
        return 1 + max(highest, 0)

    # ------------------------------------------------------------------
    # Binding
    # ------------------------------------------------------------------

    @property
    def type(self) -> AggTypeDefinition | None:
        return self._type

    @property
    def schema(self) -> SchemaDefinition | None:
        return self._schema

    @property
    def params(self) -> Mapping[str, Any]:
        """Read-only view of the resolved params."""
        return MappingProxyType(self._params)

    def bind_type(self, agg_type: AggTypeDefinition | str | None) -> "AggConfig":
        """Bind an aggregation type given by name or by reference.

        The type's ``decorate_agg_config`` hook, when present, runs against
        this config before the type is stored. Params are not re-resolved;
        call ``fill_defaults`` or ``reset_params`` afterwards.
        """
        if isinstance(agg_type, str):
            name = agg_type
            agg_type = self._agg_types.resolve(name)
            if agg_type is None and self._observer is not None:
                self._observer.agg_type_unresolved(agg_id=self.id, type_name=name)

        decorated = False
        if agg_type is not None and callable(agg_type.decorate_agg_config):
            agg_type.decorate_agg_config(self)
            decorated = True

        self._type = agg_type
        if agg_type is not None and self._observer is not None:
            self._observer.agg_type_bound(
                agg_id=self.id, type_name=agg_type.name, decorated=decorated
            )
        return self

    def bind_schema(self, schema: SchemaDefinition | str | None) -> "AggConfig":
        """Bind a schema given by name (resolved through the owner) or by reference."""
        if isinstance(schema, str):
            name = schema
            schema = self.owner.schemas.resolve(name)
            if schema is None and self._observer is not None:
                self._observer.agg_schema_unresolved(agg_id=self.id, schema_name=name)

        self._schema = schema
        return self

    # ------------------------------------------------------------------
    # Params
    # ------------------------------------------------------------------

    def get_agg_params(self) -> list[ParamDef]:
        """Declared params: the type's first, then the schema's."""
        type_params = self._type.params.raw if self._type is not None else []
        schema_params = self._schema.params.raw if self._schema is not None else []
        return [*type_params, *schema_params]

    def fill_defaults(self, source: Mapping[str, Any] | None = None) -> None:
        """Rebuild ``params`` from ``source``, filling in declared defaults.

        Without a ``source`` the current params are used as the seed, which
        makes repeated calls idempotent. Only None counts as missing; a param
        with no value and no default is left out entirely.
        """
        if source is None:
            source = self._params
        resolved: dict[str, Any] = {}

        for param in self.get_agg_params():
            val = source.get(param.name)

            if val is None:
                if param.default is None:
                    continue
                if callable(param.default):
                    val = param.default(self)
                    if val is None:
                        continue
                else:
                    val = param.default

            if param.deserialize is not None:
                if not _is_deserialized(param, val):
                    val = param.deserialize(val, self)
                resolved[param.name] = val
                continue

            resolved[param.name] = copy.deepcopy(val)

        self._params = resolved
        if self._observer is not None:
            self._observer.agg_params_filled(
                agg_id=self.id, param_names=list(resolved)
            )

    def reset_params(self) -> None:
        """Revert every param to its default except ``row`` and ``field``."""
        preserved = {
            name: self._params[name]
            for name in _RESET_PRESERVED_PARAMS
            if name in self._params
        }
        self.fill_defaults(preserved)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def write(self) -> WriteOutput | None:
        """Run the bound type's DSL writer; None when no type is bound."""
        if self._type is None:
            return None
        return self._type.params.write(self)

    def to_dsl(self) -> dict[str, Any] | None:
        """Convert this config to its query DSL node.

        Returns None when no type is bound or the type has no DSL form.
        Ad hoc sub-aggregations returned by the type's writer are nested
        under ``"aggs"``, keyed by their ids.

        Raises:
            SubAggCycleError: if a sub-aggregation nests back into an ancestor.
        """
        return self._to_dsl(ancestors=[])

    def _to_dsl(self, ancestors: list["AggConfig"]) -> dict[str, Any] | None:
        agg_type = self._type
        if agg_type is None or agg_type.has_no_dsl:
            return None

        if any(ancestor is self for ancestor in ancestors):
            raise SubAggCycleError(chain=[*(a.id for a in ancestors), self.id])

        for param in agg_type.params.raw:
            if param.on_request is not None:
                param.on_request(self)

        output = agg_type.params.write(self)
        config_dsl: dict[str, Any] = {agg_type.name: output.params}

        sub_agg_ids: list[str] = []
        if output.sub_aggs is not None:
            sub_dsl = config_dsl.setdefault("aggs", {})
            for sub_agg in output.sub_aggs:
                sub_dsl[sub_agg.id] = sub_agg._to_dsl(ancestors=[*ancestors, self])
                sub_agg_ids.append(sub_agg.id)

        if self._observer is not None:
            self._observer.agg_dsl_written(
                agg_id=self.id, type_name=agg_type.name, sub_agg_ids=sub_agg_ids
            )
        return config_dsl

    def to_json(self) -> dict[str, Any]:
        """Return the persistable form: id, type name, schema name and params.

        None values are left out of ``params``, including values a param's
        serializer turned into None.
        """
        out_params: dict[str, Any] = {}
        for param in self.get_agg_params():
            val = self._params.get(param.name)
            if val is None:
                continue
            if param.serialize is not None:
                val = param.serialize(val, self)
            if val is None:
                continue
            out_params[param.name] = copy.deepcopy(val)

        return {
            "id": self.id,
            "type": self._type.name if self._type is not None else None,
            "schema": self._schema.name if self._schema is not None else None,
            "params": out_params,
        }

    # ------------------------------------------------------------------
    # Filters and result helpers
    # ------------------------------------------------------------------

    def create_filter(self, key: Any) -> Any:
        """Build a query filter for the bucket identified by ``key``.

        Raises:
            FilterNotSupportedError: if the bound type cannot build filters.
            FieldNotFilterableError: if the config's field is not filterable.
        """
        agg_type = self._type
        if agg_type is None or not callable(agg_type.create_filter):
            error = FilterNotSupportedError(
                title=agg_type.title if agg_type is not None else None
            )
            self._filter_rejected(reason=str(error))
            raise error

        field = self.field()
        if field is not None and not field.filterable:
            error = FieldNotFilterableError(
                field_label=self.field_display_name(), scripted=field.scripted
            )
            self._filter_rejected(reason=str(error))
            raise error

        return agg_type.create_filter(self, key)

    def _filter_rejected(self, reason: str) -> None:
        if self._observer is not None:
            self._observer.agg_filter_rejected(agg_id=self.id, reason=reason)

    def get_response_aggs(self) -> list["AggConfig"] | None:
        """Configs that appear in a result set for this one; None when unbound."""
        if self._type is None:
            return None
        if self._type.get_response_aggs is not None:
            response_aggs = self._type.get_response_aggs(self)
            if response_aggs is not None:
                return response_aggs
        return [self]

    def get_value(self, bucket: Mapping[str, Any]) -> Any:
        if self._type is None or self._type.get_value is None:
            return None
        return self._type.get_value(self, bucket)

    def make_label(self) -> str:
        if self._type is None:
            return ""
        if self._type.make_label is None:
            return self._type.title
        return self._type.make_label(self)

    # ------------------------------------------------------------------
    # Field helpers
    # ------------------------------------------------------------------

    def field(self) -> IndexField | None:
        return self._params.get("field")

    def field_name(self) -> str:
        field = self.field()
        return field.name if field is not None else ""

    def field_display_name(self) -> str:
        field = self.field()
        if field is None:
            return ""
        return field.display_name or self.field_name()

    def field_formatter(self) -> Callable[[Any], str]:
        """Formatter for values of this config.

        Metric aggregations always render numbers, whatever their field's own
        format says.
        """
        if self._schema is not None and self._schema.group == _METRICS_GROUP:
            return self.owner.field_formats.default_format("number").convert

        field = self.field()
        return field.format.convert if field is not None else str

    def __repr__(self) -> str:
        type_name = self._type.name if self._type is not None else None
        schema_name = self._schema.name if self._schema is not None else None
        return f"AggConfig(id={self.id!r}, type={type_name!r}, schema={schema_name!r})"


def _is_deserialized(param: ParamDef, val: Any) -> bool:
    """Whether ``val`` already has the shape ``param.deserialize`` produces.

    With a declared ``value_type`` this is an isinstance check; without one,
    any structured (non-primitive) value counts as deserialized.
    """
    if param.value_type is not None:
        return isinstance(val, param.value_type)
    return not isinstance(val, _PRIMITIVES)
