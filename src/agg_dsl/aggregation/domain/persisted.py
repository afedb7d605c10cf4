"""PersistedAggConfig — the stored / over-the-wire form of an AggConfig."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PersistedAggConfig(BaseModel):
    """Immutable model of the shape produced by ``AggConfig.to_json``.

    ``schema_name`` is read from and written to the ``"schema"`` key.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)
    type: str | None = None
    schema_name: str | None = Field(default=None, alias="schema")
    params: dict[str, Any] = Field(default_factory=dict)

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    def to_spec(self) -> dict[str, Any]:
        """Raw spec mapping accepted by the AggConfig constructor."""
        return self.model_dump(by_alias=True)
