"""
Root resolvers that terminate a parent chain.
"""

import importlib
from typing import Any, Dict, Mapping

from symloader.logging_config import logger
from symloader.exceptions import SymbolNotFoundError


class NullResolver:
    """Resolves nothing. Use when a chain must not reach the host interpreter."""

    def resolve(self, name: str) -> Any:
        raise SymbolNotFoundError(name)

    def __repr__(self) -> str:
        return "NullResolver()"


class MappingResolver:
    """Resolves names from a fixed dictionary of artifacts."""

    def __init__(self, artifacts: Mapping[str, Any]):
        self._artifacts: Dict[str, Any] = dict(artifacts)

    def resolve(self, name: str) -> Any:
        try:
            return self._artifacts[name]
        except KeyError:
            raise SymbolNotFoundError(name) from None

    def __repr__(self) -> str:
        return f"MappingResolver({len(self._artifacts)} artifacts)"


class ImportlibResolver:
    """
    Resolves names through the running interpreter's import system.

    ``a.b`` is tried as a module first. If that fails, the last segment is
    looked up as an attribute of module ``a``, so ``json.dumps`` resolves
    to the function.
    """

    def resolve(self, name: str) -> Any:
        # Relative names need a package anchor, which a root resolver never has
        if not name or name.startswith("."):
            raise SymbolNotFoundError(name)

        try:
            return importlib.import_module(name)
        except ImportError as e:
            module_error = e

        module_name, _, attr = name.rpartition(".")
        if module_name:
            try:
                module = importlib.import_module(module_name)
                return getattr(module, attr)
            except (ImportError, AttributeError):
                pass

        logger.debug(f"importlib could not resolve {name}: {module_error}")
        raise SymbolNotFoundError(name) from None

    def __repr__(self) -> str:
        return "ImportlibResolver()"
