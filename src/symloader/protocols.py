"""
Capabilities the resolver consumes from its environment.

Any object with the right methods works; nothing here needs to be subclassed.
"""

from typing import Any, Optional, Protocol, runtime_checkable

from symloader.definitions import RawDefinition


@runtime_checkable
class SearchLocation(Protocol):
    """A single place a resolver looks for raw definitions."""

    def find_definition(self, name: str) -> Optional[RawDefinition]:
        """Return the definition of `name` held here, or None."""
        ...

    def describe(self) -> str:
        """Short human-readable label, used in logs and errors."""
        ...


@runtime_checkable
class ArtifactConstructor(Protocol):
    """Turns a raw definition into the artifact handed to callers."""

    def construct(self, raw: RawDefinition) -> Any:
        """Build the artifact. Raises ConstructionError on malformed input."""
        ...


@runtime_checkable
class ParentResolver(Protocol):
    """Upstream resolver. Raises SymbolNotFoundError when the name is unknown."""

    def resolve(self, name: str) -> Any:
        ...
