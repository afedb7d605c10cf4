"""Structlog implementation of the AggConfigObserver port."""

import structlog


class StructlogAggConfigObserver:
    """Delegates AggConfig domain events to structlog.

    Satisfies the AggConfigObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def agg_type_unresolved(self, agg_id: str, type_name: str) -> None:
        self._log.warning("agg.type_unresolved", agg_id=agg_id, type_name=type_name)

    def agg_schema_unresolved(self, agg_id: str, schema_name: str) -> None:
        self._log.warning(
            "agg.schema_unresolved", agg_id=agg_id, schema_name=schema_name
        )

    def agg_type_bound(self, agg_id: str, type_name: str, decorated: bool) -> None:
        self._log.debug(
            "agg.type_bound", agg_id=agg_id, type_name=type_name, decorated=decorated
        )

    def agg_params_filled(self, agg_id: str, param_names: list[str]) -> None:
        self._log.debug("agg.params_filled", agg_id=agg_id, param_names=param_names)

    def agg_dsl_written(
        self, agg_id: str, type_name: str, sub_agg_ids: list[str]
    ) -> None:
        self._log.debug(
            "agg.dsl_written",
            agg_id=agg_id,
            type_name=type_name,
            sub_agg_ids=sub_agg_ids,
        )

    def agg_filter_rejected(self, agg_id: str, reason: str) -> None:
        self._log.error("agg.filter_rejected", agg_id=agg_id, reason=reason)


class StructlogAggConfigLoaderObserver:
    """Delegates loader events to structlog.

    Satisfies the AggConfigLoaderObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def agg_configs_loaded(self, path: str, count: int, assigned_ids: int) -> None:
        self._log.info(
            "agg.configs_loaded", path=path, count=count, assigned_ids=assigned_ids
        )
