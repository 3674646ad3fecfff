"""
symloader - Hierarchical Symbol Resolver

Resolves qualified names from private search locations, delegating to a
parent resolver for excluded or locally absent names, and caches what it
constructs so every lookup of a name returns the same artifact.
"""

__version__ = "0.1.0"

from symloader.resolver import Resolver, new_resolver
from symloader.local_source import LocalSource
from symloader.definitions import RawDefinition
from symloader.protocols import ArtifactConstructor, ParentResolver, SearchLocation
from symloader.locations import DirectoryLocation, ZipLocation, MappingLocation, open_location
from symloader.constructors import ModuleConstructor, RawConstructor
from symloader.parents import ImportlibResolver, MappingResolver, NullResolver
from symloader.singleflight import SingleFlight, SerialFlight
from symloader.config import ResolverConfig, get_resolver_config, reset_resolver_config
from symloader.exceptions import (
    SymloaderError,
    InvalidArgumentError,
    SymbolNotFoundError,
    ConstructionError,
    ConfigError,
)

__all__ = [
    "__version__",
    "Resolver",
    "new_resolver",
    "LocalSource",
    "RawDefinition",
    "ArtifactConstructor",
    "ParentResolver",
    "SearchLocation",
    "DirectoryLocation",
    "ZipLocation",
    "MappingLocation",
    "open_location",
    "ModuleConstructor",
    "RawConstructor",
    "ImportlibResolver",
    "MappingResolver",
    "NullResolver",
    "SingleFlight",
    "SerialFlight",
    "ResolverConfig",
    "get_resolver_config",
    "reset_resolver_config",
    "SymloaderError",
    "InvalidArgumentError",
    "SymbolNotFoundError",
    "ConstructionError",
    "ConfigError",
]
