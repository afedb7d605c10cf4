"""DictDefinitionResolver — in-memory DefinitionResolver keyed by definition name."""

from collections.abc import Iterable
from typing import Protocol


class _Named(Protocol):
    @property
    def name(self) -> str: ...


class DictDefinitionResolver[T: _Named]:
    """Resolves definitions registered by name.

    Satisfies the DefinitionResolver protocol structurally. Registering a
    second definition under the same name replaces the first.
    """

    def __init__(self, definitions: Iterable[T] = ()) -> None:
        self._by_name: dict[str, T] = {}
        for definition in definitions:
            self.register(definition)

    def register(self, definition: T) -> T:
        self._by_name[definition.name] = definition
        return definition

    def resolve(self, name: str) -> T | None:
        return self._by_name.get(name)

    def names(self) -> list[str]:
        return list(self._by_name)
