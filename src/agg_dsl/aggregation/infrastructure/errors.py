"""Error types raised by aggregation infrastructure."""

from pathlib import Path

from agg_dsl.core.errors import AggDslError


class AggConfigLoadError(AggDslError):
    """Raised when a persisted aggregation file cannot be opened or parsed."""

    def __init__(self, path: Path, reason: str = "file not found") -> None:
        self.path = path
        super().__init__(f"Failed to load aggregation configs: {reason}: {path}")


class AggConfigValidationError(AggDslError):
    """Raised when persisted aggregation configs do not have the expected shape."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to validate aggregation configs: {reason}")
