"""DefinitionResolver port — name lookup for type and schema definitions."""

from typing import Protocol


class DefinitionResolver[T](Protocol):
    """Resolves a registered definition by name.

    Returns None for unknown names instead of raising; an unresolved binding
    is a valid (unbound) AggConfig state.
    """

    def resolve(self, name: str) -> T | None: ...
