"""Error types raised by AggConfig operations."""

from agg_dsl.core.errors import AggDslError


class FilterNotSupportedError(AggDslError):
    """Raised when the bound aggregation type cannot build filters."""

    def __init__(self, title: str | None) -> None:
        self.title = title
        if title is None:
            message = "Failed to create filter: no aggregation type is bound"
        else:
            message = (
                f'Failed to create filter: the "{title}" aggregation does not'
                f" support filtering"
            )
        super().__init__(message)


class FieldNotFilterableError(AggDslError):
    """Raised when the aggregation's field is marked as non-filterable."""

    def __init__(self, field_label: str, scripted: bool = False) -> None:
        self.field_label = field_label
        self.scripted = scripted
        if scripted:
            message = (
                f'Failed to create filter: the "{field_label}" field is scripted'
                f" and can not be used for filtering"
            )
        else:
            message = (
                f'Failed to create filter: the "{field_label}" field can not be'
                f" used for filtering"
            )
        super().__init__(message)


class SubAggCycleError(AggDslError):
    """Raised when sub-aggregations nest back into one of their ancestors."""

    def __init__(self, chain: list[str]) -> None:
        self.chain = chain
        path = " -> ".join(chain)
        super().__init__(f"Failed to write DSL: sub-aggregation cycle detected: {path}")
