"""
Default artifact constructors.

ModuleConstructor compiles Python source into a fresh module object that
lives only in the resolver's cache; sys.modules is never touched.
"""

import types
from typing import Any

from symloader.logging_config import logger
from symloader.definitions import RawDefinition
from symloader.exceptions import ConstructionError


class ModuleConstructor:
    """Builds a module object from a Python source definition."""

    def construct(self, raw: RawDefinition) -> types.ModuleType:
        try:
            text = raw.source.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ConstructionError(raw.name, raw.location, f"source is not valid UTF-8: {e}") from e

        try:
            code = compile(text, raw.origin, "exec")
        except SyntaxError as e:
            raise ConstructionError(raw.name, raw.location, f"syntax error at line {e.lineno}: {e.msg}") from e

        module = types.ModuleType(raw.name)
        module.__file__ = raw.origin
        if raw.is_package:
            module.__path__ = []
            module.__package__ = raw.name
        else:
            module.__package__ = raw.name.rpartition(".")[0]

        try:
            exec(code, module.__dict__)
        except Exception as e:
            raise ConstructionError(
                raw.name, raw.location, f"module body raised {type(e).__name__}: {e}"
            ) from e

        logger.debug(f"Constructed module {raw.name} from {raw.origin}")
        return module


class RawConstructor:
    """Returns the raw definition itself as the artifact."""

    def construct(self, raw: RawDefinition) -> Any:
        return raw
