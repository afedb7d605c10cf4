"""Observer port for the aggregation domain — defines events in domain language."""

from typing import Protocol


class AggConfigObserver(Protocol):
    """Observer port for AggConfig events.

    Implementations may log to structlog or record for tests.
    """

    def agg_type_unresolved(self, agg_id: str, type_name: str) -> None: ...

    def agg_schema_unresolved(self, agg_id: str, schema_name: str) -> None: ...

    def agg_type_bound(self, agg_id: str, type_name: str, decorated: bool) -> None: ...

    def agg_params_filled(self, agg_id: str, param_names: list[str]) -> None: ...

    def agg_dsl_written(
        self, agg_id: str, type_name: str, sub_agg_ids: list[str]
    ) -> None: ...

    def agg_filter_rejected(self, agg_id: str, reason: str) -> None: ...


class AggConfigLoaderObserver(Protocol):
    def agg_configs_loaded(self, path: str, count: int, assigned_ids: int) -> None: ...
