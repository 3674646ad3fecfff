"""
Local half of the resolver: owns the search locations and the resolved cache.
"""

import threading
from typing import Any, Dict, List, Sequence, Tuple

from symloader.logging_config import logger
from symloader.config import ResolverConfig
from symloader.definitions import RawDefinition
from symloader.exceptions import ConstructionError, SymbolNotFoundError
from symloader.protocols import ArtifactConstructor, ParentResolver, SearchLocation
from symloader.singleflight import ReentrantFlightError, make_flight


_MISSING = object()


class LocalSource:
    """
    Searches an ordered list of locations and caches what it constructs.

    Lookup order for a name:
    1. The resolved cache (hit returns the identical artifact)
    2. Each search location in order; the first definition found wins
    3. The parent resolver, when no location defines the name

    Only one thread searches and constructs a given name at a time; others
    asking for that name wait and receive the same artifact. The parent is
    borrowed and always queried outside any local lock.
    """

    def __init__(
        self,
        search_locations: Sequence[SearchLocation],
        parent: ParentResolver,
        constructor: ArtifactConstructor,
        config: ResolverConfig,
    ):
        """
        Args:
            search_locations: Locations in search priority order
            parent: Upstream resolver (shared, not owned)
            constructor: Turns raw definitions into artifacts
            config: Resolver configuration
        """
        self.search_locations: Tuple[SearchLocation, ...] = tuple(search_locations)
        self.parent = parent
        self.constructor = constructor
        self.wrap_construction_errors = config.wrap_construction_errors

        self._resolved_cache: Dict[str, Any] = {}
        self._cache_lock = threading.Lock()
        self._flight = make_flight(config.lock_strategy)

    def lookup(self, name: str) -> Any:
        """
        Resolve `name` locally, falling back to the parent on a local miss.

        Raises:
            ConstructionError: A location matched but construction failed
            SymbolNotFoundError: Raised by the parent chain only
        """
        try:
            return self.find_local(name)
        except SymbolNotFoundError:
            logger.debug(f"{name} NOT FOUND locally >> delegate to parent")
        return self.parent.resolve(name)

    def find_local(self, name: str) -> Any:
        """
        Resolve `name` from the cache or the search locations only.

        Raises:
            SymbolNotFoundError: No location defines `name`
            ConstructionError: A location matched but construction failed
        """
        cached = self._resolved_cache.get(name, _MISSING)
        if cached is not _MISSING:
            logger.debug(f"{name} already resolved by this resolver")
            return cached

        try:
            return self._flight.do(name, lambda: self._search_and_construct(name))
        except ReentrantFlightError as e:
            raise ConstructionError(
                name, "local", "circular resolution: the definition resolves itself"
            ) from e

    def _search_and_construct(self, name: str) -> Any:
        # A waiter that arrived after the leader finished sees the published entry
        cached = self._resolved_cache.get(name, _MISSING)
        if cached is not _MISSING:
            return cached

        for location in self.search_locations:
            raw = location.find_definition(name)
            if raw is None:
                continue

            logger.debug(f"{name} found on {location.describe()}")
            artifact = self._construct(raw)
            with self._cache_lock:
                return self._resolved_cache.setdefault(name, artifact)

        raise SymbolNotFoundError(name)

    def _construct(self, raw: RawDefinition) -> Any:
        try:
            return self.constructor.construct(raw)
        except ConstructionError as e:
            logger.warning(str(e))
            raise
        except Exception as e:
            # A not-found escaping a constructor must never read as a local miss
            if not self.wrap_construction_errors and not isinstance(e, SymbolNotFoundError):
                raise
            error = ConstructionError(raw.name, raw.location, f"{type(e).__name__}: {e}")
            logger.warning(str(error))
            raise error from e

    def is_resolved(self, name: str) -> bool:
        """Check whether `name` is in the resolved cache."""
        return name in self._resolved_cache

    def resolved_names(self) -> List[str]:
        """Snapshot of cached names, in resolution order."""
        with self._cache_lock:
            return list(self._resolved_cache)

    def in_flight(self) -> int:
        """Number of names currently being searched or constructed."""
        return self._flight.in_flight()
