"""Tests verifying the AggDslError type hierarchy."""

from pathlib import Path

from agg_dsl.aggregation.domain.errors import (
    FieldNotFilterableError,
    FilterNotSupportedError,
    SubAggCycleError,
)
from agg_dsl.aggregation.infrastructure.errors import (
    AggConfigLoadError,
    AggConfigValidationError,
)
from agg_dsl.core.errors import AggDslError


class TestAggDslErrorHierarchy:
    """All agg-dsl-specific exceptions inherit from AggDslError."""

    def test_filter_not_supported_error_is_agg_dsl_error(self) -> None:
        assert isinstance(FilterNotSupportedError(title="Average"), AggDslError)

    def test_field_not_filterable_error_is_agg_dsl_error(self) -> None:
        assert isinstance(FieldNotFilterableError(field_label="bytes"), AggDslError)

    def test_sub_agg_cycle_error_is_agg_dsl_error(self) -> None:
        assert isinstance(SubAggCycleError(chain=["1", "1"]), AggDslError)

    def test_load_error_is_agg_dsl_error(self) -> None:
        assert isinstance(AggConfigLoadError(path=Path("/aggs.yaml")), AggDslError)

    def test_validation_error_is_agg_dsl_error(self) -> None:
        assert isinstance(AggConfigValidationError(reason="bad"), AggDslError)

    def test_agg_dsl_error_is_exception(self) -> None:
        assert isinstance(AggDslError("test"), Exception)

    def test_errors_are_not_retriable_by_default(self) -> None:
        assert AggDslError("test").retriable is False


class TestMessages:
    """Messages start with "Failed to " and name what went wrong."""

    def test_filter_not_supported_names_title(self) -> None:
        error = FilterNotSupportedError(title="Average")

        assert str(error) == (
            'Failed to create filter: the "Average" aggregation does not support'
            " filtering"
        )

    def test_field_not_filterable_messages_differ_for_scripted(self) -> None:
        plain = FieldNotFilterableError(field_label="bytes")
        scripted = FieldNotFilterableError(field_label="bytes", scripted=True)

        assert str(plain) != str(scripted)
        assert "scripted" in str(scripted)
        assert str(plain).startswith("Failed to ")

    def test_cycle_error_shows_chain(self) -> None:
        error = SubAggCycleError(chain=["1", "2", "1"])

        assert "1 -> 2 -> 1" in str(error)

    def test_load_error_includes_path(self) -> None:
        error = AggConfigLoadError(path=Path("/tmp/aggs.yaml"))

        assert "/tmp/aggs.yaml" in str(error)
