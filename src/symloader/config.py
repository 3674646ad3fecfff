"""
Resolver Configuration.

All values configurable via SYMLOADER_* environment variables.
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Tuple

from symloader.exceptions import ConfigError


LOCK_PER_NAME = "per_name"
LOCK_GLOBAL = "global"
LOCK_STRATEGIES = (LOCK_PER_NAME, LOCK_GLOBAL)

DEFAULT_LOCK_STRATEGY = LOCK_PER_NAME
DEFAULT_SUFFIXES: Tuple[str, ...] = (".py",)
DEFAULT_WRAP_CONSTRUCTION_ERRORS = True


def _env_str(key: str, default: str) -> str:
    """Read a stripped string from environment variable."""
    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    return value.strip()


def _env_bool(key: str, default: bool) -> bool:
    """Read boolean from environment variable."""
    value = os.getenv(key, "").lower()
    if value in ("true", "1", "yes"):
        return True
    if value in ("false", "0", "no"):
        return False
    return default


def _env_suffixes(key: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    """Read a comma-separated suffix list, normalizing each to start with a dot."""
    value = os.getenv(key)
    if not value:
        return default
    suffixes = []
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        suffixes.append(part if part.startswith(".") else f".{part}")
    return tuple(suffixes) or default


@dataclass
class ResolverConfig:
    """
    Resolver configuration.

    Environment Variables:
        SYMLOADER_LOCK_STRATEGY: "per_name" (default) or "global"
        SYMLOADER_SUFFIXES: Definition file suffixes, comma separated (default: .py)
        SYMLOADER_WRAP_CONSTRUCTION_ERRORS: Wrap constructor failures in
            ConstructionError (default: true)
    """

    lock_strategy: str = field(default_factory=lambda: _env_str(
        "SYMLOADER_LOCK_STRATEGY", DEFAULT_LOCK_STRATEGY
    ))
    suffixes: Tuple[str, ...] = field(default_factory=lambda: _env_suffixes(
        "SYMLOADER_SUFFIXES", DEFAULT_SUFFIXES
    ))
    wrap_construction_errors: bool = field(default_factory=lambda: _env_bool(
        "SYMLOADER_WRAP_CONSTRUCTION_ERRORS", DEFAULT_WRAP_CONSTRUCTION_ERRORS
    ))

    def __post_init__(self):
        self.lock_strategy = self.lock_strategy.lower()
        if self.lock_strategy not in LOCK_STRATEGIES:
            raise ConfigError(
                f"Unknown lock strategy '{self.lock_strategy}'. "
                f"Expected one of: {', '.join(LOCK_STRATEGIES)}"
            )
        self.suffixes = tuple(self.suffixes)
        if not self.suffixes:
            raise ConfigError("At least one definition suffix is required")

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration as dictionary (for JSON output)."""
        return {
            "lock_strategy": self.lock_strategy,
            "suffixes": list(self.suffixes),
            "wrap_construction_errors": self.wrap_construction_errors,
        }


# Global instance for convenience
_default_config: Optional[ResolverConfig] = None


def get_resolver_config() -> ResolverConfig:
    """Get the global resolver configuration."""
    global _default_config
    if _default_config is None:
        _default_config = ResolverConfig()
    return _default_config


def reset_resolver_config() -> None:
    """Reset global config (useful after env var changes or for testing)."""
    global _default_config
    _default_config = None
