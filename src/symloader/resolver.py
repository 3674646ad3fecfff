"""
Hierarchical symbol resolver.

Resolves qualified names from its own search locations, delegating to a
parent resolver either on request (exclusions) or when nothing local
defines the name. Locally resolved artifacts are cached for the lifetime
of the resolver.
"""

import threading
from pathlib import Path
from typing import Any, FrozenSet, Iterable, List, Optional, Tuple

from symloader.logging_config import logger
from symloader.config import ResolverConfig, get_resolver_config
from symloader.constructors import ModuleConstructor
from symloader.exceptions import InvalidArgumentError
from symloader.local_source import LocalSource
from symloader.locations import LocationDescriptor, open_location
from symloader.protocols import ArtifactConstructor, ParentResolver, SearchLocation


class Resolver:
    """
    Resolves names locally first, then through its parent.

    Resolution order for a name:
    1. Excluded names go straight to the parent, with no local attempt
    2. The local source (cache, then search locations in order)
    3. The parent, when no local location defines the name

    A Resolver satisfies the ParentResolver protocol itself, so resolvers
    chain to any depth. The parent is borrowed: several resolvers may
    share one, and it must outlive all of them.
    """

    def __init__(
        self,
        search_locations: Iterable[LocationDescriptor],
        parent: ParentResolver,
        constructor: Optional[ArtifactConstructor] = None,
        config: Optional[ResolverConfig] = None,
    ):
        """
        Args:
            search_locations: Non-empty, ordered location descriptors. Paths
                ending in a separator or naming a directory are directories;
                other paths are archives.
            parent: Upstream resolver used for exclusions and local misses
            constructor: Builds artifacts from definitions (default: ModuleConstructor)
            config: Resolver configuration (default: environment driven)

        Raises:
            InvalidArgumentError: No search locations, or no parent
        """
        if parent is None:
            raise InvalidArgumentError("The parent resolver cannot be None.")
        if search_locations is None or isinstance(search_locations, (str, bytes, Path)):
            raise InvalidArgumentError("search_locations must be a sequence of location descriptors.")

        config = config or get_resolver_config()
        locations = [open_location(descriptor, config.suffixes) for descriptor in search_locations]
        if not locations:
            raise InvalidArgumentError("The search location list cannot be empty.")

        self._parent = parent
        self._exclusions: Tuple[str, ...] = ()
        self._excluded: FrozenSet[str] = frozenset()
        self._exclusions_lock = threading.Lock()
        self.local = LocalSource(locations, parent, constructor or ModuleConstructor(), config)

        logger.debug(
            f"Resolver created with {len(locations)} search locations: "
            f"{', '.join(loc.describe() for loc in locations)}"
        )

    @property
    def parent(self) -> ParentResolver:
        return self._parent

    @property
    def search_locations(self) -> Tuple[SearchLocation, ...]:
        return self.local.search_locations

    def resolve(self, name: str) -> Any:
        """
        Resolve a qualified name to its artifact.

        Raises:
            InvalidArgumentError: `name` is not a string
            SymbolNotFoundError: Neither the local locations nor the parent chain define `name`
            ConstructionError: A local definition was found but could not be constructed
        """
        if not isinstance(name, str):
            raise InvalidArgumentError(f"Symbol name must be a string, got {type(name).__name__}")

        logger.debug(f"resolving: {name}")

        if name in self._excluded:
            logger.debug(f"{name} FILTERED >> delegate to parent")
            return self._parent.resolve(name)

        # LocalSource already falls back to the parent on a local miss, so a
        # SymbolNotFoundError here means the whole chain failed.
        return self.local.lookup(name)

    def add_exclusion(self, name: str) -> None:
        """
        Always delegate `name` to the parent, skipping the local search.

        Raises:
            InvalidArgumentError: `name` is None, not a string, or empty
        """
        if name is None:
            raise InvalidArgumentError("Exclusion name cannot be None.")
        if not isinstance(name, str) or not name:
            raise InvalidArgumentError(f"Exclusion name must be a non-empty string, got {name!r}")

        with self._exclusions_lock:
            if name in self._excluded:
                return
            # Copy-on-write so resolve() can read without locking
            self._exclusions = self._exclusions + (name,)
            self._excluded = self._excluded | {name}
        logger.debug(f"{name} will be delegated to parent")

    def list_exclusions(self) -> List[str]:
        """Excluded names in the order they were added."""
        return list(self._exclusions)

    def is_resolved(self, name: str) -> bool:
        """Check whether `name` has been resolved and cached locally."""
        return self.local.is_resolved(name)

    def resolved_names(self) -> List[str]:
        """Names resolved and cached locally, in resolution order."""
        return self.local.resolved_names()

    def __repr__(self) -> str:
        locations = ", ".join(loc.describe() for loc in self.search_locations)
        return f"Resolver([{locations}], parent={self._parent!r})"


def new_resolver(
    search_locations: Iterable[LocationDescriptor],
    parent: ParentResolver,
    constructor: Optional[ArtifactConstructor] = None,
    config: Optional[ResolverConfig] = None,
) -> Resolver:
    """Build a Resolver. See Resolver for arguments and errors."""
    return Resolver(search_locations, parent, constructor=constructor, config=config)
