"""Aggregation type and schema definitions — capability bundles bound to an AggConfig.

Definitions are owned by external registries. They are immutable value objects
whose behaviour lives in plain callables, so a registry can build one without
subclassing anything.
"""

import copy
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from agg_dsl.aggregation.domain.agg_config import AggConfig


@dataclass(frozen=True)
class WriteOutput:
    """Result of a type's ``write`` step.

    ``sub_aggs`` holds ad hoc AggConfig instances the type wants nested under
    its own DSL node; they are unrelated to schema-declared children.
    """

    params: dict[str, Any]
    sub_aggs: list["AggConfig"] | None = None


class ParamDef(BaseModel):
    """Declaration of one parameter accepted by a type or schema.

    ``default`` is either a static value or a callable taking the AggConfig.
    ``value_type`` is the class a deserialized value is an instance of; it is
    consulted to decide whether ``deserialize`` still has to run.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = Field(min_length=1)
    default: Any = None
    deserialize: Callable[..., Any] | None = None
    serialize: Callable[..., Any] | None = None
    value_type: type | None = None
    on_request: Callable[..., Any] | None = None


def _write_params_only(config: "AggConfig") -> WriteOutput:
    return WriteOutput(params=copy.deepcopy(dict(config.params)))


class AggTypeParams(BaseModel):
    """Declared params of an aggregation type plus its DSL writer."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    raw: list[ParamDef] = Field(default_factory=list)
    write: Callable[..., WriteOutput] = _write_params_only


class AggTypeDefinition(BaseModel):
    """Capability bundle describing one kind of aggregation (terms, avg, ...)."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = Field(min_length=1)
    title: str = Field(min_length=1)
    params: AggTypeParams = Field(default_factory=AggTypeParams)
    has_no_dsl: bool = False
    decorate_agg_config: Callable[..., Any] | None = None
    create_filter: Callable[..., Any] | None = None
    get_response_aggs: Callable[..., Any] | None = None
    get_value: Callable[..., Any] | None = None
    make_label: Callable[..., str] | None = None


class SchemaParams(BaseModel):
    """Declared params of a schema."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    raw: list[ParamDef] = Field(default_factory=list)


class SchemaDefinition(BaseModel):
    """Role of an aggregation within a visualization, e.g. a metric or a segment."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = Field(min_length=1)
    group: str = Field(min_length=1)
    params: SchemaParams = Field(default_factory=SchemaParams)
