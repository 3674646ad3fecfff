"""
Default search locations.

A location maps a qualified name such as ``plugins.audio.mixer`` onto a
definition it holds:

- DirectoryLocation: ``<root>/plugins/audio/mixer.py`` or
  ``<root>/plugins/audio/mixer/__init__.py``
- ZipLocation: the same layout inside a zip archive
- MappingLocation: an in-memory dict of name -> source
"""

import re
import threading
import zipfile
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional, Sequence, Set, Tuple, Union

from symloader.logging_config import logger
from symloader.config import DEFAULT_SUFFIXES
from symloader.definitions import RawDefinition
from symloader.exceptions import InvalidArgumentError
from symloader.protocols import SearchLocation


# Names that can be mapped onto a file layout
QUALIFIED_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")

LocationDescriptor = Union[str, Path, SearchLocation]


def is_qualified_name(name: str) -> bool:
    """Check whether `name` is a dotted identifier path."""
    return isinstance(name, str) and bool(QUALIFIED_NAME_PATTERN.match(name))


def _candidate_paths(name: str, suffixes: Sequence[str]) -> Iterable[Tuple[Tuple[str, ...], str]]:
    """
    Yield (path parts, kind) candidates for `name` in lookup order.

    Packages win over modules of the same name, as with the import system.
    """
    parts = name.split(".")
    for suffix in suffixes:
        yield tuple(parts) + (f"__init__{suffix}",), "package"
    for suffix in suffixes:
        yield tuple(parts[:-1]) + (f"{parts[-1]}{suffix}",), "module"


class DirectoryLocation:
    """Search location backed by a directory tree."""

    def __init__(self, root: Union[str, Path], suffixes: Sequence[str] = DEFAULT_SUFFIXES):
        self.root = Path(root)
        self.suffixes = tuple(suffixes)

    def describe(self) -> str:
        return f"dir:{self.root}"

    def find_definition(self, name: str) -> Optional[RawDefinition]:
        if not is_qualified_name(name):
            return None

        for parts, kind in _candidate_paths(name, self.suffixes):
            candidate = self.root.joinpath(*parts)
            if not candidate.is_file():
                continue
            try:
                source = candidate.read_bytes()
            except OSError as e:
                # Treat unreadable files like missing ones, but leave a trace
                logger.warning(f"Cannot read {candidate}: {e}")
                continue
            return RawDefinition(
                name=name,
                location=self.describe(),
                origin=str(candidate),
                source=source,
                kind=kind,
            )
        return None

    def __repr__(self) -> str:
        return f"DirectoryLocation({str(self.root)!r})"


class ZipLocation:
    """
    Search location backed by a zip archive.

    The archive is opened lazily on first lookup and its member list is
    read once. A missing or corrupt archive holds no definitions.
    """

    def __init__(self, archive: Union[str, Path], suffixes: Sequence[str] = DEFAULT_SUFFIXES):
        self.archive = Path(archive)
        self.suffixes = tuple(suffixes)
        self._members: Optional[Set[str]] = None
        self._lock = threading.Lock()

    def describe(self) -> str:
        return f"zip:{self.archive}"

    def _load_members(self) -> Set[str]:
        with self._lock:
            if self._members is None:
                try:
                    with zipfile.ZipFile(self.archive) as zf:
                        self._members = set(zf.namelist())
                    logger.debug(f"Opened {self.describe()} ({len(self._members)} members)")
                except (OSError, zipfile.BadZipFile) as e:
                    logger.warning(f"Cannot open archive {self.archive}: {e}")
                    self._members = set()
            return self._members

    def find_definition(self, name: str) -> Optional[RawDefinition]:
        if not is_qualified_name(name):
            return None

        members = self._load_members()
        if not members:
            return None

        for parts, kind in _candidate_paths(name, self.suffixes):
            member = "/".join(parts)
            if member not in members:
                continue
            try:
                with zipfile.ZipFile(self.archive) as zf:
                    source = zf.read(member)
            except (OSError, KeyError, zipfile.BadZipFile) as e:
                # The archive changed after its member list was read
                logger.warning(f"Cannot read {member} from {self.archive}: {e}")
                return None
            return RawDefinition(
                name=name,
                location=self.describe(),
                origin=f"{self.archive}/{member}",
                source=source,
                kind=kind,
            )
        return None

    def __repr__(self) -> str:
        return f"ZipLocation({str(self.archive)!r})"


class MappingLocation:
    """In-memory search location: name -> source text or bytes."""

    def __init__(self, definitions: Mapping[str, Union[str, bytes]], label: str = "memory"):
        self._definitions: Dict[str, bytes] = {
            name: source.encode("utf-8") if isinstance(source, str) else bytes(source)
            for name, source in definitions.items()
        }
        self.label = label

    def describe(self) -> str:
        return f"mem:{self.label}"

    def find_definition(self, name: str) -> Optional[RawDefinition]:
        source = self._definitions.get(name)
        if source is None:
            return None
        return RawDefinition(
            name=name,
            location=self.describe(),
            origin=f"<{self.label}:{name}>",
            source=source,
        )

    def __repr__(self) -> str:
        return f"MappingLocation({self.label!r}, {len(self._definitions)} definitions)"


def open_location(descriptor: LocationDescriptor, suffixes: Sequence[str] = DEFAULT_SUFFIXES) -> SearchLocation:
    """
    Turn a location descriptor into a search location.

    A descriptor ending in a path separator, or naming an existing
    directory, is a directory. Any other path is treated as an archive.
    Objects that already implement find_definition() are returned as-is.
    """
    if callable(getattr(descriptor, "find_definition", None)):
        return descriptor

    if isinstance(descriptor, str):
        if not descriptor:
            raise InvalidArgumentError("Location descriptor cannot be empty")
        if descriptor.endswith(("/", "\\")):
            return DirectoryLocation(descriptor, suffixes)
        descriptor = Path(descriptor)

    if isinstance(descriptor, Path):
        if descriptor.is_dir():
            return DirectoryLocation(descriptor, suffixes)
        return ZipLocation(descriptor, suffixes)

    raise InvalidArgumentError(
        f"Unsupported location descriptor: {descriptor!r} ({type(descriptor).__name__})"
    )
