# Custom exceptions for symloader

class SymloaderError(Exception):
    """Base exception for all application-specific errors."""
    pass

class InvalidArgumentError(SymloaderError, ValueError):
    """Raised when a resolver is built or mutated with bad input."""
    pass

class SymbolNotFoundError(SymloaderError, LookupError):
    """Raised when a name is absent locally and from the whole parent chain."""
    def __init__(self, name: str, message: str = ""):
        self.name = name
        super().__init__(message or f"Symbol '{name}' not found")

    def __reduce__(self):
        return (self.__class__, (self.name, str(self)))

class ConstructionError(SymloaderError):
    """Raised when a definition was found but could not become an artifact."""
    def __init__(self, name: str, location: str, message: str):
        self.name = name
        self.location = location
        self.message = message
        super().__init__(f"Failed to construct '{name}' from {location}: {message}")

    def __reduce__(self):
        return (self.__class__, (self.name, self.location, self.message))

class ConfigError(SymloaderError):
    """Raised for configuration-related problems."""
    pass
