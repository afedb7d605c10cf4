"""Tests for DictDefinitionResolver."""

from agg_dsl.aggregation.domain.definitions import AggTypeDefinition, SchemaDefinition
from agg_dsl.aggregation.infrastructure.registry import DictDefinitionResolver


class TestDictDefinitionResolver:
    """Definitions resolve by name; unknown names resolve to None."""

    def test_resolves_registered_definition(self) -> None:
        terms = AggTypeDefinition(name="terms", title="Terms")
        resolver = DictDefinitionResolver([terms])

        assert resolver.resolve("terms") is terms

    def test_unknown_name_resolves_to_none(self) -> None:
        avg = AggTypeDefinition(name="avg", title="Average")
        resolver = DictDefinitionResolver([avg])

        assert resolver.resolve("median") is None

    def test_register_returns_definition(self) -> None:
        resolver: DictDefinitionResolver[SchemaDefinition] = DictDefinitionResolver()
        metric = SchemaDefinition(name="metric", group="metrics")

        assert resolver.register(metric) is metric
        assert resolver.resolve("metric") is metric

    def test_later_registration_replaces_earlier(self) -> None:
        first = SchemaDefinition(name="metric", group="metrics")
        second = SchemaDefinition(name="metric", group="buckets")
        resolver = DictDefinitionResolver([first, second])

        assert resolver.resolve("metric") is second

    def test_names_in_registration_order(self) -> None:
        resolver = DictDefinitionResolver(
            [
                AggTypeDefinition(name="terms", title="Terms"),
                AggTypeDefinition(name="avg", title="Average"),
            ]
        )

        assert resolver.names() == ["terms", "avg"]
