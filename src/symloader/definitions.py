from pydantic import BaseModel, ConfigDict
from typing import Literal


class RawDefinition(BaseModel):
    """
    Represents the raw, not yet constructed definition of a symbol
    as returned by a search location.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    location: str  # describe() of the location that produced it
    origin: str  # File path or archive member
    source: bytes
    kind: Literal["module", "package"] = "module"

    @property
    def is_package(self) -> bool:
        return self.kind == "package"
