"""Base exception class for all agg-dsl-specific errors."""


class AggDslError(Exception):
    """Base class for all agg-dsl errors."""

    def __init__(self, message: str, retriable: bool = False) -> None:
        super().__init__(message)
        self.retriable = retriable
