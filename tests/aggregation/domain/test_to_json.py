"""Tests for AggConfig.to_json and the persisted round trip."""

from typing import Any

from agg_dsl.aggregation.domain.agg_config import AggConfig
from agg_dsl.aggregation.domain.definitions import (
    AggTypeDefinition,
    AggTypeParams,
    ParamDef,
)
from agg_dsl.aggregation.infrastructure.registry import DictDefinitionResolver
from tests.aggregation.fake_definitions import INDEX_FIELDS, make_agg_config, make_owner


def _config_with(params: list[ParamDef], spec_params: dict[str, Any]) -> AggConfig:
    agg_type = AggTypeDefinition(
        name="custom", title="Custom", params=AggTypeParams(raw=params)
    )
    return AggConfig(
        make_owner(),
        {"id": "1", "type": "custom", "params": spec_params},
        agg_types=DictDefinitionResolver([agg_type]),
    )


class TestToJson:
    """to_json returns a sparse, detached, persistable mapping."""

    def test_shape(self) -> None:
        config = make_agg_config(
            {
                "id": "7",
                "type": "terms",
                "schema": "segment",
                "params": {"field": "status", "size": 3},
            }
        )

        assert config.to_json() == {
            "id": "7",
            "type": "terms",
            "schema": "segment",
            "params": {"field": "status", "size": 3, "row": True},
        }

    def test_unbound_type_and_schema_are_none(self) -> None:
        config = make_agg_config({"id": "1", "type": "nope", "schema": "nope"})

        assert config.to_json() == {
            "id": "1",
            "type": None,
            "schema": None,
            "params": {},
        }

    def test_serializer_is_applied(self) -> None:
        config = make_agg_config(
            {"type": "avg", "schema": "metric", "params": {"field": "bytes"}}
        )

        assert config.to_json()["params"] == {"field": "bytes"}

    def test_serializer_returning_none_suppresses_param(self) -> None:
        config = _config_with(
            [ParamDef(name="secret", serialize=lambda val, config: None)],
            {"secret": "hunter2"},
        )

        assert config.to_json()["params"] == {}

    def test_falsy_values_are_kept(self) -> None:
        config = _config_with(
            [ParamDef(name="zero"), ParamDef(name="off"), ParamDef(name="blank")],
            {"zero": 0, "off": False, "blank": ""},
        )

        assert config.to_json()["params"] == {"zero": 0, "off": False, "blank": ""}

    def test_output_does_not_alias_params(self) -> None:
        config = _config_with([ParamDef(name="ranges")], {"ranges": [{"from": 0}]})

        output = config.to_json()
        output["params"]["ranges"].append({"from": 10})
        output["params"]["ranges"][0]["from"] = -1

        assert config.params["ranges"] == [{"from": 0}]

    def test_serialized_value_is_copied(self) -> None:
        shared = {"nested": [1, 2]}
        config = _config_with(
            [ParamDef(name="thing", serialize=lambda val, config: shared)],
            {"thing": "x"},
        )

        output = config.to_json()
        output["params"]["thing"]["nested"].append(3)

        assert shared == {"nested": [1, 2]}

    def test_nested_order_agg_is_serialized(self) -> None:
        config = make_agg_config(
            {
                "id": "2",
                "type": "terms",
                "schema": "segment",
                "params": {
                    "field": "status",
                    "order_agg": {"type": "avg", "params": {"field": "bytes"}},
                },
            }
        )

        assert config.to_json()["params"]["order_agg"] == {
            "id": "2-orderAgg",
            "type": "avg",
            "schema": "orderAgg",
            "params": {"field": "bytes"},
        }


class TestRoundTrip:
    """Persisted params re-enter through fill_defaults unchanged."""

    def test_plain_params_round_trip(self) -> None:
        config = _config_with(
            [ParamDef(name="size", default=5), ParamDef(name="ranges")],
            {"size": 12, "ranges": [{"from": 0, "to": 5}]},
        )
        before = dict(config.params)

        config.fill_defaults(config.to_json()["params"])

        assert dict(config.params) == before

    def test_round_trip_through_new_instance(self) -> None:
        owner = make_owner()
        original = make_agg_config(
            {
                "type": "terms",
                "schema": "segment",
                "params": {
                    "field": "bytes",
                    "size": 8,
                    "order_agg": {"type": "avg", "params": {"field": "status"}},
                },
            },
            owner=owner,
        )

        restored = make_agg_config(original.to_json(), owner=owner)

        assert restored.to_json() == original.to_json()
        assert restored.to_dsl() == original.to_dsl()
        assert restored.params["field"] is INDEX_FIELDS["bytes"]
