"""Ports for index-pattern fields and their formatters."""

from typing import Any, Protocol


class FieldFormat(Protocol):
    def convert(self, value: Any) -> str: ...


class IndexField(Protocol):
    """A field of an index pattern, as referenced by an AggConfig's ``field`` param."""

    @property
    def name(self) -> str: ...

    @property
    def display_name(self) -> str | None: ...

    @property
    def filterable(self) -> bool: ...

    @property
    def scripted(self) -> bool: ...

    @property
    def format(self) -> FieldFormat: ...


class FieldFormatService(Protocol):
    """Looks up the default formatter for a field type such as ``"number"``."""

    def default_format(self, field_type: str) -> FieldFormat: ...
